"""Diff command implementation for pinbump.

Reads a unified diff of lockfiles and reports which pins moved.

Typical usage::

    $ git diff --color=never --unified=0 requirements/ | pinbump diff
    $ pinbump diff changes.patch --format json
"""

from __future__ import annotations

import sys
import json
from typing import IO, Any, Dict, List

import click

from pinbump.core import extract_version_changes
from pinbump.models import VersionChange
from pinbump.utils import (
    colorize_update_type,
    get_logger,
    print_success,
    print_table,
)

logger = get_logger("commands.diff")


@click.command()
@click.argument(
    "diff_file",
    type=click.File("r", encoding="utf-8"),
    default="-",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.option(
    "--changed-only",
    is_flag=True,
    help="Hide packages whose version did not move.",
)
def diff(diff_file: IO[str], format: str, changed_only: bool) -> None:
    """Report version changes found in a lockfile diff.

    DIFF_FILE defaults to standard input.
    """
    changes = extract_version_changes(diff_file.read())
    if changed_only:
        changes = {name: c for name, c in changes.items() if c.has_changed}

    if format == "json":
        print(
            json.dumps(
                {name: change.to_json() for name, change in changes.items()},
                indent=2,
            )
        )
    elif not changes:
        print_success("No version changes found")
    else:
        _display_changes(changes)

    sys.exit(0)


def _display_changes(changes: Dict[str, VersionChange]) -> None:
    data: List[Dict[str, Any]] = [
        {
            "Package": name,
            "Before": change.before or "-",
            "After": change.after or "-",
            "Change": colorize_update_type(change.update_type),
        }
        for name, change in sorted(changes.items())
    ]
    added = sum(1 for change in changes.values() if change.is_new)
    removed = sum(1 for change in changes.values() if change.is_removed)
    print_table(
        data,
        title="Version Changes",
        caption=f"{len(changes)} package(s), {added} new, {removed} removed",
        column_styles={"Package": {"style": "package", "no_wrap": True}},
    )
