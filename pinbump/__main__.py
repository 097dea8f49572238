"""
``python -m pinbump`` support.

Behaves exactly like the ``pinbump`` console script. The CLI is imported
inside :func:`main` so that a broken install (missing click, rich or httpx)
produces a readable diagnostic instead of a traceback.
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Write a short diagnostic to stderr when the CLI cannot be imported."""
    try:
        from pinbump.__version__ import __version__ as version
    except ImportError:
        version = "<unknown>"

    sys.stderr.write(
        "pinbump CLI could not be loaded.\n"
        f"Python version : {sys.version}\n"
        f"pinbump version: {version}\n"
        "\n"
        f"ImportError: {exc}\n"
    )


def main() -> int:
    try:
        from pinbump.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
