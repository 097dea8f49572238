"""
Core functionality exports for pinbump.

This module provides convenient access to the core subsystems of pinbump:

    from pinbump.core import parse_pinned_requirements, descendants

Pure graph and diff functions live beside the workflow that drives git,
the lock compiler and GitHub.
"""

from __future__ import annotations

from pinbump.core.diff import extract_version_changes
from pinbump.core.graph import descendants, merge_graphs, render_via_tree
from pinbump.core.lockfile import (
    fix_editable_lines,
    fix_editable_paths,
    load_dependency_graph,
    package_name_from_constraint,
    parse_pinned_requirements,
)
from pinbump.core.github import GitHubClient, github_token, split_repo
from pinbump.core.bump import (
    LockfileBumper,
    bump_packages,
    compose_commit_message,
    compose_pr_body,
    select_bump_candidates,
)

__all__ = [
    "parse_pinned_requirements",
    "load_dependency_graph",
    "package_name_from_constraint",
    "fix_editable_lines",
    "fix_editable_paths",
    "merge_graphs",
    "descendants",
    "render_via_tree",
    "extract_version_changes",
    "GitHubClient",
    "github_token",
    "split_repo",
    "LockfileBumper",
    "bump_packages",
    "compose_commit_message",
    "compose_pr_body",
    "select_bump_candidates",
]
