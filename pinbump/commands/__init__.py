"""CLI subcommands for pinbump."""

from __future__ import annotations

from pinbump.commands.bump import bump
from pinbump.commands.diff import diff
from pinbump.commands.graph import descendants, graph
from pinbump.commands.release import latest_release

__all__ = [
    "bump",
    "descendants",
    "diff",
    "graph",
    "latest_release",
]
