"""
Dependency graph data model for pinbump.

A :data:`DependencyGraph` maps a lowercase package name to a
:class:`DependencyNode`. Edges point *downstream*: a node's ``enables``
lists the packages it caused to be installed, and ``enabled_by`` lists the
packages that caused it to be installed (what ``# via`` annotations say).
Every edge is recorded on both ends.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class DependencyNode:
    """One package in a dependency graph.

    Attributes:
        version: Pinned version, or ``None`` when the package only shows up
            in ``# via`` annotations.
        enables: Packages this package pulled in, in first-seen order.
        enabled_by: Packages that pulled this package in, in first-seen
            order.
    """

    version: Optional[str] = None
    enables: List[str] = field(default_factory=list)
    enabled_by: List[str] = field(default_factory=list)

    @property
    def is_direct(self) -> bool:
        """Return True if nothing else pulled this package in."""
        return not self.enabled_by

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "version": self.version,
            "enables": list(self.enables),
            "enabled_by": list(self.enabled_by),
        }


#: Package name (lowercase) to node.
DependencyGraph = Dict[str, DependencyNode]


def graph_to_json(graph: DependencyGraph) -> Dict[str, Dict[str, Any]]:
    """Return a JSON-serializable copy of ``graph``."""
    return {name: node.to_json() for name, node in graph.items()}
