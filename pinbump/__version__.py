"""
pinbump version information.

Single source of truth for the package version; ``pyproject.toml`` and the
``--version`` option read it from here.
"""

__version__ = "0.3.0"
