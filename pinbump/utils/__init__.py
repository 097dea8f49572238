"""
Utility helpers for pinbump.

This package provides reusable utilities used across pinbump, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Filesystem helpers for lockfiles and scratch checkouts
- Async HTTP client utilities
- External command execution
- Version comparison helpers

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from pinbump.utils.filesystem import (
    make_workdir,
    remove_workdir,
    resolve_lockfiles,
    safe_read_file,
    safe_write_file,
)

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from pinbump.utils.logger import (
    get_logger,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from pinbump.utils.console import (
    colorize_update_type,
    print_error,
    print_plain,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# HTTP utilities
# ---------------------------------------------------------------------------

from pinbump.utils.http import HTTPClient

# ---------------------------------------------------------------------------
# Shell utilities
# ---------------------------------------------------------------------------

from pinbump.utils.shell import ShellResult, run_shell_command

# ---------------------------------------------------------------------------
# Version utilities
# ---------------------------------------------------------------------------

from pinbump.utils.version_utils import (
    compare_semver,
    get_update_type,
    is_latest_release,
    latest_release_tag,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "print_error",
    "print_plain",
    "print_table",
    "print_success",
    "print_warning",
    "reconfigure_console",
    "colorize_update_type",
    # Logging
    "get_logger",
    "setup_logging",
    # Filesystem
    "safe_read_file",
    "safe_write_file",
    "resolve_lockfiles",
    "make_workdir",
    "remove_workdir",
    # HTTP
    "HTTPClient",
    # Shell
    "ShellResult",
    "run_shell_command",
    # Version utilities
    "compare_semver",
    "get_update_type",
    "is_latest_release",
    "latest_release_tag",
]
