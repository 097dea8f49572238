"""Bump command implementation for pinbump.

Re-locks one package, or every candidate package, and commits each bump on
its own branch. With ``--open-pr`` the branch is pushed and a labelled pull
request is opened, unless one is already open for it.

Typical usage::

    # Bump one package and everything it pulled in
    $ pinbump bump alembic --include-subpackages

    # Open pull requests for up to five runtime dependencies
    $ GITHUB_TOKEN=... pinbump bump --only-base --limit 5 --open-pr \\
        --repo apache/superset

    # Work in a throw-away clone instead of the current checkout
    $ pinbump bump --group all --clone --repo apache/superset --dry-run
"""

from __future__ import annotations

import sys
import asyncio
from typing import Any, Dict, List, Optional, Sequence

import click

from pinbump.config import read_pyproject
from pinbump.exceptions import PinbumpError
from pinbump.models import BumpResult
from pinbump.context import pass_context, PinbumpContext
from pinbump.core import (
    GitHubClient,
    LockfileBumper,
    bump_packages,
    github_token,
    select_bump_candidates,
)
from pinbump.utils import (
    HTTPClient,
    colorize_update_type,
    get_logger,
    print_error,
    print_success,
    print_table,
    print_warning,
)

logger = get_logger("commands.bump")


@click.command()
@click.argument("package", required=False)
@click.option(
    "--include-subpackages",
    is_flag=True,
    help="Also re-lock every package the bumped package pulled in.",
)
@click.option(
    "--from-pyproject",
    is_flag=True,
    help="Take candidates from [project].dependencies in pyproject.toml.",
)
@click.option(
    "--group",
    "-g",
    help="Take candidates from this optional-dependency group ('all' for every group).",
)
@click.option(
    "--only-base",
    is_flag=True,
    help="Take candidates from the base lockfile only.",
)
@click.option(
    "--limit",
    "-l",
    type=click.IntRange(min=1),
    help="Stop after this many successful bumps.",
)
@click.option(
    "--shuffle/--no-shuffle",
    default=True,
    help="Process candidates in random order.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Re-lock and commit locally, but never push or open pull requests.",
)
@click.option(
    "--open-pr",
    is_flag=True,
    help="Push each bump branch and open a pull request (needs GITHUB_TOKEN).",
)
@click.option(
    "--clone",
    is_flag=True,
    help="Work in a fresh shallow clone of --repo instead of the current checkout.",
)
@click.option(
    "--repo",
    "-r",
    envvar="GITHUB_REPOSITORY",
    help="Repository as owner/name (default: $GITHUB_REPOSITORY).",
)
@pass_context
def bump(
    ctx: PinbumpContext,
    package: Optional[str],
    include_subpackages: bool,
    from_pyproject: bool,
    group: Optional[str],
    only_base: bool,
    limit: Optional[int],
    shuffle: bool,
    dry_run: bool,
    open_pr: bool,
    clone: bool,
    repo: Optional[str],
) -> None:
    """Re-lock PACKAGE, or every candidate, and commit each bump.

    Without PACKAGE, candidates are every package of the configured
    lockfiles (``--only-base``: the base lockfile), or the dependencies
    declared in ``pyproject.toml`` (``--from-pyproject``, ``--group``).

    Note that without ``--clone`` the current checkout is reset to the base
    branch and untracked files are removed before every bump.

    Exits:
        0 when the run completed (with or without changes), 1 on error.
    """
    if (open_pr or clone) and not repo:
        raise click.UsageError("--open-pr and --clone need --repo")

    bumper = LockfileBumper(
        ctx.config,
        cwd=ctx.directory,
        dry_run=dry_run,
        clone_repo=repo if clone else None,
    )

    try:
        results = asyncio.run(
            _bump_async(
                bumper,
                package,
                include_subpackages=include_subpackages,
                from_pyproject=from_pyproject,
                group=group,
                only_base=only_base,
                limit=limit,
                shuffle=shuffle,
                repo=repo if open_pr else None,
                dry_run=dry_run,
            )
        )
    except PinbumpError as e:
        print_error(f"{e}")
        sys.exit(1)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        logger.exception("Error in bump command")
        sys.exit(1)
    finally:
        bumper.cleanup()

    _display_results(results, dry_run)
    sys.exit(0)


# ---------------------------------------------------------------------------
# Async orchestration
# ---------------------------------------------------------------------------


async def _bump_async(
    bumper: LockfileBumper,
    package: Optional[str],
    *,
    include_subpackages: bool,
    from_pyproject: bool,
    group: Optional[str],
    only_base: bool,
    limit: Optional[int],
    shuffle: bool,
    repo: Optional[str],
    dry_run: bool = False,
) -> List[BumpResult]:
    """Pick the packages to bump, then bump them.

    A GitHub client is only created when pull requests are opened, i.e.
    when ``repo`` is given.
    """
    if package:
        packages = [package]
    else:
        packages = _candidates(
            bumper,
            from_pyproject=from_pyproject,
            group=group,
            only_base=only_base,
            shuffle=shuffle,
        )

    if repo is None:
        return await _run_bumps(
            bumper,
            packages,
            single=bool(package),
            include_subpackages=include_subpackages,
            github=None,
            limit=limit,
        )

    # Dry runs never reach the API
    async with HTTPClient(token=github_token(required=not dry_run)) as http:
        return await _run_bumps(
            bumper,
            packages,
            single=bool(package),
            include_subpackages=include_subpackages,
            github=GitHubClient(repo, http),
            limit=limit,
        )


def _candidates(
    bumper: LockfileBumper,
    *,
    from_pyproject: bool,
    group: Optional[str],
    only_base: bool,
    shuffle: bool,
) -> List[str]:
    workdir = bumper.prepare_workspace()
    pyproject = None
    if from_pyproject or group:
        pyproject = read_pyproject(workdir / "pyproject.toml")
        if group:
            logger.info("Processing group: %s", group)

    graph = bumper.dependency_graph(only_base=only_base)
    return select_bump_candidates(
        graph, pyproject=pyproject, group=group, shuffle=shuffle
    )


async def _run_bumps(
    bumper: LockfileBumper,
    packages: Sequence[str],
    *,
    single: bool,
    include_subpackages: bool,
    github: Optional[GitHubClient],
    limit: Optional[int],
) -> List[BumpResult]:
    # A single named package fails loudly; batches log and move on
    if not single:
        return await bump_packages(
            bumper,
            packages,
            include_subpackages=include_subpackages,
            github=github,
            limit=limit,
        )

    result = bumper.bump(packages[0], include_subpackages=include_subpackages)
    if github is not None:
        await bumper.open_pull_request(result, github)
    return [result]


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------


def _display_results(results: List[BumpResult], dry_run: bool) -> None:
    """Display bumps with changes as a Rich table."""
    changed = [result for result in results if result.has_changes]
    if not changed:
        print_success("No changes detected")
        return

    data: List[Dict[str, Any]] = []
    for result in changed:
        change = result.change
        data.append(
            {
                "Package": result.package,
                "Before": change.before or "-",
                "After": change.after or "-",
                "Change": colorize_update_type(change.update_type),
                "Subpackages": len(result.changed_packages()) - int(change.has_changed),
                "Branch": result.branch or "-",
                "Pull request": result.pr_url or "-",
            }
        )

    title = "Bumps (Dry Run)" if dry_run else "Bumps"
    print_table(
        data,
        title=title,
        column_styles={
            "Package": {"style": "package", "no_wrap": True},
            "Subpackages": {"justify": "right"},
            "Branch": {"style": "branch"},
        },
    )

    if dry_run:
        print_warning("\nDry run mode - nothing pushed")
    else:
        print_success(f"\n{len(changed)} package(s) bumped")
