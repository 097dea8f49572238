"""
Per-invocation state shared by pinbump commands.

The ``pinbump`` group fills one :class:`PinbumpContext`; subcommands receive
it through :data:`pass_context`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from pinbump.config import PinbumpConfig


class PinbumpContext:
    """Options and configuration of the running ``pinbump`` command.

    Attributes:
        directory: Checkout the command works in (``-C``, else the cwd).
        config_path: Configuration file that was loaded, if any.
        verbose: Number of ``-v`` flags.
        color: Whether colored output is enabled.
        config: Loaded configuration, defaults when no file was found.
    """

    __slots__ = ("directory", "config_path", "verbose", "color", "config")

    def __init__(self) -> None:
        self.directory: Path = Path.cwd()
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: PinbumpConfig = PinbumpConfig()


#: Click decorator injecting the :class:`PinbumpContext` into a command.
pass_context = click.make_pass_decorator(PinbumpContext, ensure=True)
