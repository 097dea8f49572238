"""
External command execution for pinbump.

git and the lock compiler are the only processes pinbump starts. Commands
are given as strings, split with :mod:`shlex` and executed without a shell.
"""

from __future__ import annotations

import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Union

from pinbump.constants import DEFAULT_COMMAND_TIMEOUT
from pinbump.exceptions import ShellCommandError
from pinbump.utils.logger import get_logger

logger = get_logger("shell")

Command = Union[str, Sequence[str]]


@dataclass
class ShellResult:
    """Captured output of a finished command."""

    stdout: str = ""
    stderr: str = ""
    returncode: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _argv(command: Command) -> List[str]:
    if isinstance(command, str):
        return shlex.split(command)
    return list(command)


def run_shell_command(
    command: Command,
    *,
    cwd: Optional[Union[str, Path]] = None,
    dry_run: bool = False,
    raise_on_error: bool = True,
    env: Optional[Mapping[str, str]] = None,
    timeout: int = DEFAULT_COMMAND_TIMEOUT,
) -> ShellResult:
    """Run ``command`` and capture its output.

    Args:
        command: Command line, or an argument vector.
        cwd: Working directory.
        dry_run: Log the command without running it and return an empty
            result.
        raise_on_error: Raise on a non-zero exit status instead of returning
            the failed result.
        env: Extra environment variables, layered over ``os.environ``.
        timeout: Seconds before the process is killed.

    Returns:
        The captured :class:`ShellResult`.

    Raises:
        ShellCommandError: The executable is missing, the command timed out,
            or it failed while ``raise_on_error`` is set.
    """
    argv = _argv(command)
    if not argv:
        raise ShellCommandError("Empty command")

    display = " ".join(argv)
    if cwd:
        logger.info("RUN `%s` in %s", display, cwd)
    else:
        logger.info("RUN `%s`", display)

    if dry_run:
        return ShellResult()

    run_env = None
    if env:
        run_env = {**os.environ, **env}

    try:
        completed = subprocess.run(
            argv,
            cwd=str(cwd) if cwd else None,
            env=run_env,
            capture_output=True,
            text=True,
            shell=False,
            timeout=timeout,
        )
    except FileNotFoundError as exc:
        raise ShellCommandError(
            f"Command not found: {argv[0]}",
            command=argv,
            cwd=str(cwd) if cwd else None,
        ) from exc
    except subprocess.TimeoutExpired as exc:
        raise ShellCommandError(
            f"Command timed out after {timeout}s",
            command=argv,
            cwd=str(cwd) if cwd else None,
        ) from exc

    result = ShellResult(
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        returncode=completed.returncode,
    )
    if result.stdout:
        logger.debug("stdout:\n%s", result.stdout.rstrip())
    if result.stderr:
        logger.debug("stderr:\n%s", result.stderr.rstrip())

    if not result.ok:
        logger.error(
            "Command failed with exit code %d: %s", result.returncode, display
        )
        if raise_on_error:
            raise ShellCommandError(
                f"Command failed with exit code {result.returncode}",
                command=argv,
                returncode=result.returncode,
                stderr=result.stderr,
                cwd=str(cwd) if cwd else None,
            )

    return result
