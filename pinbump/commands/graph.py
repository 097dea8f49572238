"""Graph inspection commands for pinbump.

Both commands read pinned lockfiles (the configured ones by default) and
merge them into a single dependency graph.

Typical usage::

    # Summary of every pinned package
    $ pinbump graph

    # Why is alembic installed?
    $ pinbump graph --package alembic

    # Everything a flask bump can move
    $ pinbump descendants flask requirements/base.txt
"""

from __future__ import annotations

import sys
import json
from pathlib import Path
from typing import Any, Dict, List, Tuple

import click

from pinbump.exceptions import PinbumpError
from pinbump.context import pass_context, PinbumpContext
from pinbump.models import DependencyGraph, graph_to_json
from pinbump.core import descendants as walk_descendants
from pinbump.core import load_dependency_graph, render_via_tree
from pinbump.utils import (
    get_logger,
    print_error,
    print_plain,
    print_table,
    print_warning,
    resolve_lockfiles,
)

logger = get_logger("commands.graph")

_LOCKFILES_ARGUMENT = click.argument(
    "lockfiles",
    nargs=-1,
    type=click.Path(dir_okay=False, path_type=Path),
)


def _load_graph(ctx: PinbumpContext, lockfiles: Tuple[Path, ...]) -> DependencyGraph:
    """Merge the given lockfiles, or the configured ones when none given."""
    paths = resolve_lockfiles(lockfiles or ctx.config.lockfiles, root=ctx.directory)
    logger.info("Reading %d lockfile(s)", len(paths))
    return load_dependency_graph(paths)


@click.command()
@_LOCKFILES_ARGUMENT
@click.option(
    "--package",
    "-p",
    help="Show why this package is installed instead of the summary.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def graph(
    ctx: PinbumpContext,
    lockfiles: Tuple[Path, ...],
    package: str,
    format: str,
) -> None:
    """Show the dependency graph of pinned lockfiles.

    Without ``--package`` a summary table lists every package with its
    version and what it was installed via. With ``--package`` the via tree
    of that package is printed, one package per line, indented by depth.

    Exits:
        0 on success, 1 if a lockfile cannot be read or the package is not
        in the graph.
    """
    try:
        merged = _load_graph(ctx, lockfiles)

        if package:
            name = package.lower()
            if name not in merged:
                print_warning(f"Package not found in lockfiles: {package}")
                sys.exit(1)
            if format == "json":
                print(json.dumps({name: merged[name].to_json()}, indent=2))
            else:
                print_plain(render_via_tree(merged, name).rstrip("\n"))
            sys.exit(0)

        if format == "json":
            print(json.dumps(graph_to_json(merged), indent=2))
        else:
            _display_graph(merged)
        sys.exit(0)

    except PinbumpError as e:
        print_error(f"{e}")
        sys.exit(1)


@click.command()
@click.argument("package")
@_LOCKFILES_ARGUMENT
@pass_context
def descendants(
    ctx: PinbumpContext,
    package: str,
    lockfiles: Tuple[Path, ...],
) -> None:
    """List PACKAGE and every package it transitively enables.

    This is the set of packages re-locked by ``bump --include-subpackages``.
    """
    try:
        merged = _load_graph(ctx, lockfiles)
        for name in walk_descendants(merged, package.lower()):
            print_plain(name)
        sys.exit(0)

    except PinbumpError as e:
        print_error(f"{e}")
        sys.exit(1)


def _display_graph(merged: DependencyGraph) -> None:
    """Display the graph as a Rich table, one row per package."""
    if not merged:
        print_warning("No packages found in lockfiles")
        return

    data: List[Dict[str, Any]] = []
    for name in sorted(merged):
        node = merged[name]
        data.append(
            {
                "Package": name,
                "Version": node.version or "-",
                "Installed via": (
                    "[dim]direct[/dim]" if node.is_direct else ", ".join(node.enabled_by)
                ),
                "Enables": len(node.enables),
            }
        )

    print_table(
        data,
        title="Dependency Graph",
        caption=f"{len(merged)} package(s)",
        column_styles={
            "Package": {"style": "package", "no_wrap": True},
            "Version": {"style": "version"},
            "Enables": {"justify": "right"},
        },
    )
