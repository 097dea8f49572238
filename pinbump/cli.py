"""
Command-line entry point for pinbump.

The ``pinbump`` group sets up logging, color and configuration once, then
hands a :class:`~pinbump.context.PinbumpContext` to the subcommands in
:mod:`pinbump.commands`.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from pinbump.config import load_config
from pinbump.__version__ import __version__
from pinbump.context import PinbumpContext
from pinbump.exceptions import ConfigError, PinbumpError
from pinbump.utils.logger import get_logger, setup_logging
from pinbump.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")

#: Log level per ``-v`` count; anything above the last entry stays at DEBUG.
_LOG_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--directory",
    "-C",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Run as if started in this checkout.",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="PINBUMP_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v: progress, -vv: debug with timestamps).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="PINBUMP_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="pinbump",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    directory: Optional[Path],
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """pinbump - dependency bump pull requests for pip-compile lockfiles.

    \b
    Commands:
      graph            Show the lockfile dependency graph
      descendants PKG  List what a bump of PKG can move
      diff             Report pins moved by a lockfile diff
      bump             Re-lock packages and commit the bumps
      latest-release   Print the newest release tag of a repository

    \b
    Examples:
      pinbump graph --package alembic
      pinbump bump alembic --include-subpackages
      pinbump -v bump --only-base --limit 5 --open-pr --repo owner/name
      pinbump -C ../superset descendants flask
    """
    _configure_logging(verbose)

    if directory is not None:
        # Config discovery, lockfiles and git all work relative to the cwd
        config = config.resolve() if config is not None else None
        os.chdir(directory)
        logger.debug("Working directory: %s", directory.resolve())

    try:
        loaded = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    pinbump_ctx = PinbumpContext()
    pinbump_ctx.directory = Path.cwd()
    pinbump_ctx.config_path = config or loaded.source_path
    pinbump_ctx.color = color
    pinbump_ctx.verbose = verbose
    pinbump_ctx.config = loaded
    ctx.obj = pinbump_ctx

    _apply_color(color)

    logger.debug("pinbump v%s", __version__)
    logger.debug("Config path: %s", pinbump_ctx.config_path)
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


def _configure_logging(verbose: int) -> None:
    level = _LOG_LEVELS[min(max(verbose, 0), len(_LOG_LEVELS) - 1)]
    setup_logging(level=level, verbose=verbose > 1)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


def _apply_color(color: bool) -> None:
    """Export the color choice as ``NO_COLOR`` and rebuild the console."""
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()


try:
    from pinbump.commands import bump, descendants, diff, graph, latest_release
except ImportError as exc:
    sys.stderr.write(f"FATAL: Failed to import CLI commands: {exc}\n")
    sys.exit(1)

for _command in (graph, descendants, diff, bump, latest_release):
    cli.add_command(_command)


def main() -> int:
    """Run the CLI and translate the outcome into an exit status.

    Returns:
        0 on success, 1 on a pinbump or unexpected error, Click's own code
        (2 for usage errors) for Click exceptions, 130 on Ctrl+C.
    """
    try:
        cli(standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except PinbumpError as exc:
        print_error(str(exc))
        logger.debug("Error details: %s", exc.details or "<none>", exc_info=True)
        return 1
    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        return 130
    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
