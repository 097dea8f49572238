"""
Unified data model exports for pinbump.

Example:
    >>> from pinbump.models import DependencyNode, VersionChange
"""

from __future__ import annotations

from pinbump.models.bump import BumpResult
from pinbump.models.change import VersionChange
from pinbump.models.graph import DependencyGraph, DependencyNode, graph_to_json

__all__ = [
    "BumpResult",
    "DependencyGraph",
    "DependencyNode",
    "VersionChange",
    "graph_to_json",
]
