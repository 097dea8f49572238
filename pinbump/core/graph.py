"""Dependency graph operations for pinbump.

Graphs are plain ``Dict[str, DependencyNode]`` mappings (see
:mod:`pinbump.models.graph`). Every function here builds new objects and
leaves its inputs untouched.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Set

from pinbump.models.graph import DependencyGraph, DependencyNode
from pinbump.utils.logger import get_logger

logger = get_logger("core.graph")

__all__ = [
    "merge_graphs",
    "descendants",
    "render_via_tree",
]


def _union(first: Sequence[str], second: Sequence[str]) -> List[str]:
    """Order-stable union of two name lists, without duplicates."""
    return list(dict.fromkeys([*first, *second]))


def _first_version(*versions: Optional[str]) -> Optional[str]:
    for version in versions:
        if version:
            return version
    return None


def merge_graphs(a: DependencyGraph, b: DependencyGraph) -> DependencyGraph:
    """Combine two graphs into a new one.

    Edges are unioned without duplicates, ``a``'s entries first. A package
    keeps ``a``'s version when it is non-empty and falls back to ``b``'s.
    When both sides pin different versions, ``a`` wins; no error is raised.

    The result is safe to fold over any number of fragments::

        graph = functools.reduce(merge_graphs, fragments, {})

    Args:
        a: First graph; wins version ties.
        b: Second graph.

    Returns:
        A new graph holding every package of ``a`` and ``b``.
    """
    empty = DependencyNode()
    merged: DependencyGraph = {}

    for name in _union(list(a), list(b)):
        left = a.get(name, empty)
        right = b.get(name, empty)
        merged[name] = DependencyNode(
            version=_first_version(left.version, right.version),
            enables=_union(left.enables, right.enables),
            enabled_by=_union(left.enabled_by, right.enabled_by),
        )

    return merged


def descendants(graph: DependencyGraph, start: str) -> List[str]:
    """Return ``start`` followed by every package it transitively enables.

    Follows ``enables`` edges depth-first, so the result lists what a bump
    of ``start`` can move. Each package appears once, even when reachable
    along several paths or through a cycle. Packages missing from the graph,
    ``start`` included, are treated as enabling nothing.

    Example::

        >>> descendants(graph, "flask")
        ['flask', 'flask-migrate', 'alembic', 'flask-login']
    """
    ordered: List[str] = []
    seen: Set[str] = set()
    stack = [start]

    while stack:
        name = stack.pop()
        if name in seen:
            continue
        seen.add(name)
        ordered.append(name)

        node = graph.get(name)
        if node is not None:
            stack.extend(reversed(node.enables))

    logger.debug("%s enables %d package(s)", start, len(ordered) - 1)
    return ordered


def render_via_tree(graph: DependencyGraph, package: str) -> str:
    """Render why ``package`` is installed as an indented text tree.

    Each line is ``"  " * depth + name``; children of a line are the
    packages it was installed via. Packages missing from the graph are
    leaves, and a package already on the current branch is printed but not
    expanded again.

    Example::

        >>> print(render_via_tree(graph, "alembic"), end="")
        alembic
          flask-migrate
            apache-superset
    """
    lines: List[str] = []

    def _walk(name: str, depth: int, path: Iterable[str]) -> None:
        lines.append("  " * depth + name)
        if name in path:
            return
        node = graph.get(name)
        if node is None:
            return
        branch = {*path, name}
        for via in node.enabled_by:
            _walk(via, depth + 1, branch)

    _walk(package, 0, frozenset())
    return "".join(f"{line}\n" for line in lines)
