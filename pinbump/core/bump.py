"""Bump workflow for pinbump.

A bump re-locks one package (optionally with everything it enables), reads
the lockfile diff to see what actually moved, and commits the result on a
dedicated branch. Opening the pull request is a separate, async step so the
GitHub client can be shared across many bumps.

Typical usage::

    bumper = LockfileBumper(config, cwd=Path.cwd())
    try:
        result = bumper.bump("alembic", include_subpackages=True)
        if result.has_changes:
            async with HTTPClient(token=github_token()) as http:
                await bumper.open_pull_request(result, GitHubClient(repo, http))
    finally:
        bumper.cleanup()
"""

from __future__ import annotations

import random
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from pinbump.config import PinbumpConfig
from pinbump.core.diff import extract_version_changes
from pinbump.core.github import GitHubClient, split_repo
from pinbump.core.graph import descendants, render_via_tree
from pinbump.core.lockfile import (
    fix_editable_paths,
    load_dependency_graph,
    package_name_from_constraint,
)
from pinbump.exceptions import ConfigError, FileOperationError, PinbumpError
from pinbump.models import BumpResult, DependencyGraph, VersionChange
from pinbump.utils.filesystem import make_workdir, remove_workdir
from pinbump.utils.logger import get_logger
from pinbump.utils.shell import run_shell_command
from pinbump.constants import GIT_CLONE_ENV, GIT_DIFF_COMMAND, GIT_REMOTE_TEMPLATE

logger = get_logger("core.bump")


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


def compose_commit_message(prefix: str, package: str, change: VersionChange) -> str:
    """Build the commit message (and pull request title) of a bump.

    When the requested package itself did not move, or is new, only its
    subpackages changed and the message says so.

    Example::

        >>> compose_commit_message(
        ...     "chore: bump python", "alembic", VersionChange("1.13.0", "1.13.1")
        ... )
        'chore: bump python alembic 1.13.0 -> 1.13.1'
    """
    if change.before is None or change.before == change.after:
        return f"{prefix} {package} subpackage(s)"
    return f"{prefix} {package} {change.before} -> {change.after}"


def compose_pr_body(package: str, change: VersionChange, tree: str) -> str:
    """Build the pull request description, with the via tree of ``package``."""
    fence = "```"
    return (
        f'Updates the python "{package}" library version from '
        f"{change.before} to {change.after}.\n\n"
        f"Dependency tree:\n{fence}\n{tree}{fence}"
    )


# ---------------------------------------------------------------------------
# Candidates
# ---------------------------------------------------------------------------


def _project_constraints(
    pyproject: Dict[str, Any],
    group: Optional[str],
) -> List[str]:
    project = pyproject.get("project", {})

    if group is None:
        return list(project.get("dependencies", []))

    optional = project.get("optional-dependencies", {})
    if group == "all":
        return [dep for deps in optional.values() for dep in deps]
    if group not in optional:
        raise ConfigError(
            f"Unknown optional-dependency group: {group}",
            option="group",
        )
    return list(optional[group])


def select_bump_candidates(
    graph: DependencyGraph,
    *,
    pyproject: Optional[Dict[str, Any]] = None,
    group: Optional[str] = None,
    shuffle: bool = True,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """Pick the packages to bump when none was named.

    With ``pyproject`` (a parsed ``pyproject.toml``), candidates are the
    names in ``[project].dependencies``, or in the optional-dependency
    ``group`` (``"all"`` meaning every group). Without it, every package of
    ``graph`` is a candidate.

    Names are lowercased to match lockfile keys and deduplicated in first
    seen order, then shuffled unless ``shuffle`` is False.

    Raises:
        ConfigError: ``group`` is not an optional-dependency group.
        ParseError: A constraint does not start with a package name.
    """
    if pyproject is not None:
        names = [
            package_name_from_constraint(constraint).lower()
            for constraint in _project_constraints(pyproject, group)
        ]
    else:
        names = list(graph)

    candidates = list(dict.fromkeys(names))
    if shuffle:
        (rng or random).shuffle(candidates)

    logger.info("Selected %d bump candidate(s)", len(candidates))
    return candidates


# ---------------------------------------------------------------------------
# Workflow
# ---------------------------------------------------------------------------


class LockfileBumper:
    """Re-lock packages in a git checkout and commit what moved.

    Args:
        config: Loaded configuration.
        cwd: Checkout to work in. Ignored when ``clone_repo`` is set.
        dry_run: Never push or open pull requests. Locking and committing
            still happen so the result can be inspected.
        clone_repo: ``owner/name`` to shallow-clone into a scratch
            directory before each bump, instead of resetting ``cwd``.
    """

    def __init__(
        self,
        config: PinbumpConfig,
        *,
        cwd: Optional[Path] = None,
        dry_run: bool = False,
        clone_repo: Optional[str] = None,
    ) -> None:
        if clone_repo is not None:
            split_repo(clone_repo)

        self.config = config
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()
        self.dry_run = dry_run
        self.clone_repo = clone_repo

        self._workdir: Optional[Path] = None
        self._graph: Optional[DependencyGraph] = None

    @property
    def workdir(self) -> Path:
        """Directory commands currently run in."""
        return self._workdir or self.cwd

    # -- workspace --------------------------------------------------------

    def prepare_workspace(self) -> Path:
        """Start from a clean base branch.

        Either clones ``clone_repo`` into a fresh scratch directory (the
        previous one is removed) or checks out the base branch in ``cwd``
        and discards local changes.
        """
        if self.clone_repo is None:
            self._git("checkout", self.config.base_branch)
            self._git("reset", "--hard")
            self._git("clean", "-f")
            return self.cwd

        self.cleanup()
        self._workdir = make_workdir()
        logger.info("Cloning %s into %s", self.clone_repo, self._workdir)
        run_shell_command(
            [
                "git",
                "clone",
                "--depth",
                "1",
                GIT_REMOTE_TEMPLATE.format(repo=self.clone_repo),
                str(self._workdir),
            ],
            env=GIT_CLONE_ENV,
        )
        return self._workdir

    def cleanup(self) -> None:
        """Remove the scratch clone, if any."""
        if self._workdir is not None:
            remove_workdir(self._workdir)
            self._workdir = None

    def _git(self, *args: str) -> str:
        return run_shell_command(["git", *args], cwd=self.workdir).stdout

    def _lockfile_paths(self) -> List[Path]:
        return [self.workdir / lockfile for lockfile in self.config.lockfiles]

    # -- graph --------------------------------------------------------------

    def dependency_graph(self, *, only_base: bool = False) -> DependencyGraph:
        """Load the graph of the current workspace lockfiles.

        The full graph is read once and cached, since every bump starts from
        the same base branch.
        """
        if only_base:
            return load_dependency_graph([self.workdir / self.config.base_lockfile])
        if self._graph is None:
            self._graph = load_dependency_graph(self._lockfile_paths())
        return self._graph

    # -- bump ---------------------------------------------------------------

    def _lock(self, packages: Sequence[str]) -> None:
        for package in packages:
            command = self.config.lock_command.replace("{package}", package)
            try:
                run_shell_command(command, cwd=self.workdir)
            except PinbumpError as exc:
                logger.error("Error bumping %r: %s", package, exc)

    def _fix_lockfiles(self) -> None:
        for lockfile in self._lockfile_paths():
            try:
                fix_editable_paths(lockfile)
            except FileOperationError as exc:
                logger.warning("Cannot fix editable paths in %s: %s", lockfile, exc)

    def bump(self, package: str, *, include_subpackages: bool = False) -> BumpResult:
        """Re-lock ``package`` and commit the result on its own branch.

        Args:
            package: Package to bump.
            include_subpackages: Also re-lock every package ``package``
                transitively enables.

        Returns:
            The :class:`BumpResult`. ``has_changes`` is False, and nothing is
            committed, when no re-locked package changed version.

        Raises:
            ShellCommandError: A git command failed.
            FileOperationError: A lockfile cannot be read.
        """
        package = package.lower()
        self.prepare_workspace()
        graph = self.dependency_graph()

        packages = descendants(graph, package) if include_subpackages else [package]
        logger.info("Packages to bump: %s", ", ".join(packages))

        self._lock(packages)
        self._fix_lockfiles()

        diff = run_shell_command(GIT_DIFF_COMMAND, cwd=self.workdir).stdout
        changes = extract_version_changes(diff)
        logger.debug("Libs before/after: %s", changes)

        result = BumpResult(package=package, bumped_packages=packages, changes=changes)
        for name, change in result.changed_packages().items():
            logger.info("Changes detected for %r: %s", name, change)
        result.has_changes = bool(result.changed_packages())

        if not result.has_changes:
            logger.info("No changes detected for %r", package)
            return result

        result.commit_message = compose_commit_message(
            self.config.commit_prefix, package, result.change
        )
        result.pr_body = compose_pr_body(
            package, result.change, render_via_tree(graph, package)
        )
        result.branch = f"{self.config.branch_prefix}{package}"

        self._git("checkout", "-b", result.branch)
        self._git("add", ".")
        self._git("commit", "-m", result.commit_message)
        return result

    # -- pull request -------------------------------------------------------

    async def open_pull_request(
        self,
        result: BumpResult,
        github: GitHubClient,
    ) -> Optional[str]:
        """Push the bump branch and open a labelled pull request.

        Nothing happens for results without changes, in dry-run mode, or
        when an open pull request already uses the branch.

        Returns:
            URL of the new pull request, or ``None``.
        """
        if not result.has_changes or result.branch is None:
            return None

        if self.dry_run:
            logger.info("Skipping PR creation for %r due to dry-run mode", result.package)
            logger.info("PR title would have been: %s", result.commit_message)
            logger.info("PR body would have been: %s", result.pr_body)
            return None

        self._git("push", "-f", "origin", result.branch)

        existing = await github.find_open_pull_requests(result.branch)
        if existing:
            logger.info(
                "Pull request already open for %s: %s",
                result.branch,
                existing[0].get("html_url"),
            )
            return None

        data = await github.create_pull_request(
            title=result.commit_message or "",
            head=result.branch,
            base=self.config.base_branch,
            body=result.pr_body or "",
        )
        number = data.get("number")
        if number is not None:
            await github.add_labels(number, self.config.pr_labels)

        result.pr_url = data.get("html_url")
        return result.pr_url


async def bump_packages(
    bumper: LockfileBumper,
    packages: Sequence[str],
    *,
    include_subpackages: bool = False,
    github: Optional[GitHubClient] = None,
    limit: Optional[int] = None,
) -> List[BumpResult]:
    """Bump several packages one after another.

    A failure on one package is logged and the loop moves on. ``limit``
    caps the number of successful bumps: pull requests opened when
    ``github`` is given, bumps with changes otherwise.

    Returns:
        Results of the packages that were bumped without error.
    """
    logger.info("Processing %d libraries", len(packages))
    results: List[BumpResult] = []
    done = 0

    for package in packages:
        logger.info("Processing library: %s", package)
        try:
            result = bumper.bump(package, include_subpackages=include_subpackages)
            if github is not None:
                counted = await bumper.open_pull_request(result, github) is not None
            else:
                counted = result.has_changes
        except PinbumpError as exc:
            logger.error("Error bumping %r: %s", package, exc)
            continue

        results.append(result)
        if counted:
            done += 1
        if limit and done >= limit:
            break

    return results
