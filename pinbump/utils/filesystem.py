"""
Filesystem utilities for pinbump.

Helpers for reading and rewriting lockfiles, resolving configured lockfile
paths against a repository root, and managing the scratch checkouts used
when bumping in a fresh clone. All filesystem errors are normalized to
``FileOperationError``.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Union

from pinbump.utils.logger import get_logger
from pinbump.exceptions import FileOperationError
from pinbump.constants import MAX_FILE_SIZE


logger = get_logger("filesystem")

PathLike = Union[str, Path]


def _validated_file(path: Path) -> Path:
    """Ensure ``path`` is an existing regular file and resolve it."""
    if not path.exists():
        raise FileOperationError(
            f"File not found: {path}",
            file_path=str(path),
            operation="read",
        )
    if not path.is_file():
        raise FileOperationError(
            f"Not a file: {path}",
            file_path=str(path),
            operation="read",
        )
    return path.resolve()


def _atomic_write(target: Path, content: str) -> None:
    """Atomically write text to a file using a temporary file + replace."""
    target.parent.mkdir(parents=True, exist_ok=True)
    temp_path: Optional[Path] = None

    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=str(target.parent),
            delete=False,
            prefix=f".{target.name}.",
            suffix=".tmp",
        ) as tmp:
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())
            temp_path = Path(tmp.name)

        temp_path.replace(target)

    except OSError as exc:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError as cleanup_exc:
                logger.warning(
                    "Failed to clean up temporary file %s: %s",
                    temp_path,
                    cleanup_exc,
                )

        raise FileOperationError(
            f"Atomic write failed: {exc}",
            file_path=str(target),
            operation="write",
            original_error=exc,
        ) from exc


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Read a text file, refusing files larger than ``max_size`` bytes.

    Args:
        file_path: Path to the file.
        max_size: Maximum allowed file size in bytes (None disables limit).
        encoding: Text encoding.

    Returns:
        File contents as a string.

    Raises:
        FileOperationError: Missing, oversized or unreadable file.
    """
    path = _validated_file(Path(file_path))
    size = path.stat().st_size

    if max_size is not None and size > max_size:
        raise FileOperationError(
            f"File too large: {size} bytes (max {max_size})",
            file_path=str(path),
            operation="read",
        )

    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def safe_write_file(file_path: PathLike, content: str) -> None:
    """Replace the contents of ``file_path`` atomically.

    Lockfiles are tracked by git, so no backup copy is kept.
    """
    _atomic_write(Path(file_path), content)
    logger.debug("Wrote %d characters to %s", len(content), file_path)


def resolve_lockfiles(
    lockfiles: Iterable[PathLike],
    *,
    root: PathLike = ".",
) -> List[Path]:
    """Resolve lockfile paths relative to ``root``.

    Absolute paths are kept as they are. Every path must exist.

    Raises:
        FileOperationError: A lockfile does not exist.
    """
    base = Path(root)
    resolved: List[Path] = []
    for lockfile in lockfiles:
        path = Path(lockfile)
        if not path.is_absolute():
            path = base / path
        resolved.append(_validated_file(path))
    return resolved


def make_workdir(prefix: str = "pinbump-") -> Path:
    """Create an empty scratch directory for a fresh checkout."""
    try:
        path = Path(tempfile.mkdtemp(prefix=prefix))
    except OSError as exc:
        raise FileOperationError(
            f"Failed to create working directory: {exc}",
            operation="mkdir",
            original_error=exc,
        ) from exc
    logger.debug("Created working directory %s", path)
    return path


def remove_workdir(path: PathLike) -> None:
    """Delete a scratch directory created by :func:`make_workdir`."""
    shutil.rmtree(path, ignore_errors=True)
    logger.debug("Removed working directory %s", path)
