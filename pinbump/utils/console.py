"""
Terminal output for pinbump commands.

Everything a command shows the user goes through here: status lines,
result tables and the verbatim text other tools consume (package lists,
via trees). Diagnostics belong in :mod:`pinbump.utils.logger` instead.

Color is off when ``NO_COLOR`` or ``CI`` is set, or stdout is not a
terminal. The console is created lazily; call :func:`reconfigure_console`
after changing those variables.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Any, Dict, List, Mapping, Optional, Sequence

from rich.table import Table
from rich.theme import Theme
from rich.console import Console

PINBUMP_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "package": "cyan",
        "version": "green",
        "branch": "magenta",
        "dim": "dim",
    }
)

#: Rich color per update type, see :func:`pinbump.utils.get_update_type`.
UPDATE_TYPE_COLORS: Dict[str, str] = {
    "major": "red",
    "minor": "yellow",
    "patch": "green",
    "new": "cyan",
    "removed": "magenta",
    "downgrade": "red",
    "update": "yellow",
}

_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def _get_console() -> Console:
    global _console

    if _console is None:
        with _console_lock:
            if _console is None:
                use_color = _should_use_color()
                _console = Console(
                    theme=PINBUMP_THEME,
                    no_color=not use_color,
                    highlight=use_color,
                )
    return _console


def reconfigure_console() -> None:
    """Drop the cached console so the next call picks up a new environment."""
    global _console
    with _console_lock:
        _console = None


# ---------------------------------------------------------------------------
# Status lines
# ---------------------------------------------------------------------------


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    _get_console().print(f"{prefix} {message}", style="success")


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    _get_console().print(f"{prefix} {message}", style="error")


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _get_console().print(f"{prefix} {message}", style="warning")


def print_plain(text: str) -> None:
    """Print text verbatim: no markup, no highlighting, no wrapping.

    Used for output other tools consume (package lists, via trees).
    """
    _get_console().print(text, markup=False, highlight=False, soft_wrap=True)


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def print_table(
    data: Sequence[Mapping[str, Any]],
    *,
    headers: Optional[List[str]] = None,
    title: Optional[str] = None,
    caption: Optional[str] = None,
    column_styles: Optional[Mapping[str, Mapping[str, Any]]] = None,
) -> None:
    """Render rows of a command result as a Rich table.

    Cells may hold Rich markup (see :func:`colorize_update_type`). Nothing
    is printed for an empty ``data``.

    Args:
        data: One mapping per row.
        headers: Column order. Defaults to the keys of the first row.
        title: Title shown above the table.
        caption: Caption shown below the table.
        column_styles: ``add_column`` options per header: ``style``,
            ``justify``, ``no_wrap`` and ``overflow``.
    """
    if not data:
        return

    columns = headers if headers is not None else list(data[0])
    styles = column_styles or {}

    table = Table(title=title, caption=caption, header_style="bold")
    for header in columns:
        options = styles.get(header, {})
        table.add_column(
            header,
            style=options.get("style"),
            justify=options.get("justify", "default"),
            no_wrap=options.get("no_wrap", False),
            overflow=options.get("overflow", "fold"),
        )

    for row in data:
        table.add_row(*(str(row.get(header, "")) for header in columns))

    _get_console().print(table)


def colorize_update_type(update_type: str) -> str:
    """Wrap an update type label in Rich markup for its color."""
    color = UPDATE_TYPE_COLORS.get(update_type.lower())
    return f"[{color}]{update_type}[/{color}]" if color else update_type
