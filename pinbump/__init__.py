"""
pinbump - dependency bump automation for pinned Python lockfiles

pinbump reads the ``pip-compile`` / ``pip-compile-multi`` lockfiles of a
project, works out which packages pulled in which, re-locks one package (or
every package) at a time and turns the resulting diff into a commit and a
pull request.

Features include:
    • Dependency graph built from ``# via`` annotations
    • Blast radius of a bump (all packages a package caused to be installed)
    • Before/after version extraction from a re-lock diff
    • Lenient SemVer ordering for release tags
    • Branch, commit and pull request creation per bumped package
"""

from __future__ import annotations

from pinbump.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "pinbump Contributors"
__license__ = "Apache-2.0"
__description__ = "Automated dependency bump pull requests for pinned Python lockfiles."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

from pinbump.core.diff import extract_version_changes
from pinbump.core.graph import descendants, merge_graphs, render_via_tree
from pinbump.core.lockfile import parse_pinned_requirements
from pinbump.utils.version_utils import compare_semver

__all__ = [
    "__version__",
    "compare_semver",
    "descendants",
    "extract_version_changes",
    "merge_graphs",
    "parse_pinned_requirements",
    "render_via_tree",
]
