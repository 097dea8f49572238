"""
Bump result data model for pinbump.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pinbump.models.change import VersionChange


@dataclass
class BumpResult:
    """Outcome of re-locking one requested package.

    Attributes:
        package: Package the bump was requested for.
        bumped_packages: Packages that were re-locked (the requested package
            first, followed by its descendants when subpackages are
            included).
        changes: Version changes extracted from the lockfile diff.
        commit_message: Commit message, also used as pull request title.
        pr_body: Pull request description.
        branch: Branch the bump was committed to.
        pr_url: URL of the pull request, once opened.
        has_changes: Whether any bumped package changed version.
    """

    package: str
    bumped_packages: List[str] = field(default_factory=list)
    changes: Dict[str, VersionChange] = field(default_factory=dict)
    commit_message: Optional[str] = None
    pr_body: Optional[str] = None
    branch: Optional[str] = None
    pr_url: Optional[str] = None
    has_changes: bool = False

    @property
    def change(self) -> VersionChange:
        """Change of the requested package (empty if it did not move)."""
        return self.changes.get(self.package, VersionChange())

    def changed_packages(self) -> Dict[str, VersionChange]:
        """Return the bumped packages whose version actually moved."""
        return {
            name: self.changes[name]
            for name in self.bumped_packages
            if name in self.changes and self.changes[name].has_changed
        }

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "package": self.package,
            "bumped_packages": list(self.bumped_packages),
            "changes": {name: c.to_json() for name, c in self.changes.items()},
            "commit_message": self.commit_message,
            "branch": self.branch,
            "pr_url": self.pr_url,
            "has_changes": self.has_changes,
        }
