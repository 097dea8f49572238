"""Pinned lockfile parser for pinbump.

Reads lockfiles produced by ``pip-compile`` / ``pip-compile-multi`` and turns
their ``# via`` annotations into a :data:`~pinbump.models.DependencyGraph`::

    alembic==1.13.1
        # via flask-migrate
    attrs==23.1.0
        # via
        #   cattrs
        #   jsonschema

Here ``flask-migrate`` enables ``alembic``, and both ``cattrs`` and
``jsonschema`` enable ``attrs``.

Parsing never fails: banner comments, editable installs, cross-file
references and anything else that is not understood are skipped.

Typical usage::

    from pinbump.core.lockfile import load_dependency_graph

    graph = load_dependency_graph(["requirements/base.txt",
                                   "requirements/development.txt"])
    graph["alembic"].enabled_by
    ['flask-migrate']
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import reduce
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from pinbump.core.graph import merge_graphs
from pinbump.exceptions import ParseError
from pinbump.models.graph import DependencyGraph, DependencyNode
from pinbump.utils import get_logger, safe_read_file, safe_write_file
from pinbump.constants import (
    CONSTRAINT_NAME_PATTERN,
    EDITABLE_FILE_PREFIX,
    EDITABLE_PREFIX,
    EDITABLE_SELF_LINE,
    VIA_MARKER,
    VIA_REFERENCE_PREFIX,
)

logger = get_logger("core.lockfile")

_PIN_RE = re.compile(r"^(.+)==(.*)")
_CONSTRAINT_NAME_RE = re.compile(CONSTRAINT_NAME_PATTERN)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _preprocess(text: str) -> List[str]:
    """Normalize raw lockfile text into the lines that carry structure.

    Comments starting at column 0 are banners; ``# via`` annotations are
    always indented, so they survive.
    """
    lines = (line for line in text.split("\n") if not line.startswith("#"))
    lines = (line.strip().lower() for line in lines)
    return [
        line
        for line in lines
        if line
        and not line.startswith(VIA_REFERENCE_PREFIX)
        and not line.startswith(EDITABLE_PREFIX)
    ]


def _via_name(line: str) -> str:
    """Extract the package name from a ``# via`` annotation line."""
    return line.replace(VIA_MARKER, "", 1).strip().replace("#", "", 1).strip()


@dataclass
class _Scan:
    """Accumulator threaded through the parse fold.

    Attributes:
        graph: Graph built so far.
        current: Most recently pinned package; ``# via`` lines attach to it.
    """

    graph: DependencyGraph = field(default_factory=dict)
    current: Optional[str] = None


def _consume(scan: _Scan, line: str) -> _Scan:
    pin = _PIN_RE.match(line)
    if pin:
        name = pin.group(1).strip()
        version = pin.group(2).strip()
        scan.current = name
        node = scan.graph.get(name)
        if node is None:
            scan.graph[name] = DependencyNode(version=version)
        elif version:
            node.version = version
        return scan

    via = _via_name(line)
    if not via or scan.current is None:
        return scan

    scan.graph.setdefault(via, DependencyNode()).enables.append(scan.current)
    scan.graph.setdefault(scan.current, DependencyNode()).enabled_by.append(via)
    return scan


def parse_pinned_requirements(text: str) -> DependencyGraph:
    """Parse pinned lockfile text into a dependency graph.

    Every ``name==version`` line pins a package and makes it the current
    package. Every other line is read as a ``# via`` annotation of the
    current package, inline (``# via flask``) or in block form (``# via``
    followed by ``#   flask`` lines). Annotations before the first pin are
    ignored. A package that is pinned twice keeps the last non-empty
    version. Packages only named in annotations get a ``None`` version.

    Names are lowercased. Edge lists follow the order of the text and are
    not deduplicated here; :func:`~pinbump.core.graph.merge_graphs` does
    that.

    Args:
        text: Lockfile contents.

    Returns:
        A new :data:`DependencyGraph`.

    Example::

        >>> graph = parse_pinned_requirements(
        ...     "alembic==1.13.1\\n    # via flask-migrate"
        ... )
        >>> graph["flask-migrate"].enables
        ['alembic']
        >>> graph["alembic"].version
        '1.13.1'
    """
    scan = reduce(_consume, _preprocess(text), _Scan())
    logger.debug(
        "Parsed %d package(s), %d pinned",
        len(scan.graph),
        sum(1 for node in scan.graph.values() if node.version),
    )
    return scan.graph


def load_dependency_graph(
    lockfiles: Iterable[Union[str, Path]],
) -> DependencyGraph:
    """Read, parse and merge several lockfiles into one graph.

    Files are merged in the given order, so when two files pin different
    versions of the same package the first file wins.

    Raises:
        FileOperationError: A lockfile cannot be read.
    """
    graph: DependencyGraph = {}
    for lockfile in lockfiles:
        fragment = parse_pinned_requirements(safe_read_file(lockfile))
        logger.debug("Loaded %d package(s) from %s", len(fragment), lockfile)
        graph = merge_graphs(graph, fragment)
    return graph


# ---------------------------------------------------------------------------
# Manifest constraints
# ---------------------------------------------------------------------------


def package_name_from_constraint(constraint: str) -> str:
    """Return the package name at the start of a dependency constraint.

    The name ends at the first of ``>``, ``=``, ``<``, ``;``, ``[`` or
    whitespace.

    Examples:
        >>> package_name_from_constraint("requests>=2.0,<3")
        'requests'
        >>> package_name_from_constraint("celery[redis]>=5.3.6, <6.0.0")
        'celery'

    Raises:
        ParseError: The constraint does not start with a name.
    """
    match = _CONSTRAINT_NAME_RE.match(constraint)
    if not match:
        raise ParseError(
            "Cannot extract a package name from constraint",
            line_content=constraint,
        )
    return match.group(0)


# ---------------------------------------------------------------------------
# Editable install fix-up
# ---------------------------------------------------------------------------


def fix_editable_lines(text: str) -> Tuple[str, bool]:
    """Point editable self-installs back at the project directory.

    pip-compile-multi writes ``-e file:.`` as an absolute path of the
    machine that ran it. Such lines are replaced by ``-e file:.``.

    Returns:
        The fixed text and whether anything changed.
    """
    changed = False
    fixed: List[str] = []
    for line in text.split("\n"):
        if line.startswith(EDITABLE_FILE_PREFIX) and not line.startswith(
            EDITABLE_SELF_LINE
        ):
            changed = True
            fixed.append(EDITABLE_SELF_LINE)
        else:
            fixed.append(line)
    return "\n".join(fixed), changed


def fix_editable_paths(lockfile: Union[str, Path]) -> bool:
    """Apply :func:`fix_editable_lines` to a lockfile in place.

    The file is only rewritten when a line changed.

    Returns:
        True if the file was rewritten.
    """
    content, changed = fix_editable_lines(safe_read_file(lockfile))
    if changed:
        safe_write_file(lockfile, content)
        logger.info("Fixed editable install path in %s", lockfile)
    return changed
