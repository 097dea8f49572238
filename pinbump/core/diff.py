"""Lockfile diff reader for pinbump.

After a re-lock, ``git diff --color=never --unified=0`` over the lockfiles
shows every pin that moved::

    diff --git a/requirements/base.txt b/requirements/base.txt
    @@ -21 +21 @@ alembic==1.13.0
    -alembic==1.13.0
    +alembic==1.13.1

:func:`extract_version_changes` turns that text into one
:class:`~pinbump.models.VersionChange` per package.
"""

from __future__ import annotations

from typing import Dict

from pinbump.constants import PIN_DELIMITER
from pinbump.models.change import VersionChange
from pinbump.utils.logger import get_logger

logger = get_logger("core.diff")


def extract_version_changes(diff_text: str) -> Dict[str, VersionChange]:
    """Collect before/after versions from a unified diff of lockfiles.

    Only ``-`` (removal) and ``+`` (addition) lines containing ``==`` are
    read; headers, hunk markers and context lines are ignored even when
    they contain a pin. A removal sets ``before`` and an addition sets
    ``after``; a later line for the same package overwrites an earlier one.
    Package names are lowercased, versions are kept as written.

    Args:
        diff_text: Raw diff output.

    Returns:
        Mapping of package name to :class:`VersionChange`. A change with
        ``before == after`` did not move; ``before is None`` means the
        package is new and ``after is None`` that it was removed.

    Example::

        >>> changes = extract_version_changes(
        ...     "-alembic==1.13.0\\n+alembic==1.13.1\\n"
        ... )
        >>> changes["alembic"].before, changes["alembic"].after
        ('1.13.0', '1.13.1')
    """
    changes: Dict[str, VersionChange] = {}

    for line in diff_text.split("\n"):
        if PIN_DELIMITER not in line:
            continue

        removed = line.startswith("-")
        if not removed and not line.startswith("+"):
            continue

        parts = line[1:].split(PIN_DELIMITER)
        name = parts[0].lower()
        version = parts[1]

        change = changes.setdefault(name, VersionChange())
        if removed:
            change.before = version
        else:
            change.after = version

    logger.debug("Diff touched %d package(s)", len(changes))
    return changes
