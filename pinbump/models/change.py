"""
Version change data model for pinbump.

A :class:`VersionChange` records what a re-lock did to one package, as seen
in the diff of the lockfiles.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from pinbump.utils.version_utils import get_update_type


@dataclass
class VersionChange:
    """Before/after versions of one package.

    Attributes:
        before: Version removed by the diff, ``None`` if the package is new.
        after: Version added by the diff, ``None`` if the package was removed.
    """

    before: Optional[str] = None
    after: Optional[str] = None

    @property
    def has_changed(self) -> bool:
        """Return True unless both sides are equal (including both ``None``)."""
        return self.before != self.after

    @property
    def is_new(self) -> bool:
        return self.before is None and self.after is not None

    @property
    def is_removed(self) -> bool:
        return self.after is None and self.before is not None

    @property
    def update_type(self) -> str:
        """Classification of the change, see :func:`get_update_type`."""
        return get_update_type(self.before, self.after)

    def to_json(self) -> Dict[str, Optional[str]]:
        """Return a JSON-serializable representation."""
        return {"before": self.before, "after": self.after}

    def __str__(self) -> str:
        return f"{self.before} -> {self.after}"
