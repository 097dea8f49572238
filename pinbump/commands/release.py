"""Release lookup command for pinbump.

Typical usage::

    $ pinbump latest-release --repo apache/superset
    4.0.1

    # Exit status tells whether 3.1.0 is the newest release
    $ pinbump latest-release --repo apache/superset --check 3.1.0
"""

from __future__ import annotations

import sys
import asyncio
from typing import Optional

import click

from pinbump.exceptions import PinbumpError
from pinbump.core import GitHubClient, github_token
from pinbump.utils import (
    HTTPClient,
    get_logger,
    is_latest_release,
    print_error,
    print_plain,
    print_success,
    print_warning,
)

logger = get_logger("commands.release")


@click.command("latest-release")
@click.option(
    "--repo",
    "-r",
    required=True,
    envvar="GITHUB_REPOSITORY",
    help="Repository as owner/name (default: $GITHUB_REPOSITORY).",
)
@click.option(
    "--check",
    "check_version",
    metavar="VERSION",
    help="Report whether VERSION is the latest release instead.",
)
def latest_release(repo: str, check_version: Optional[str]) -> None:
    """Print the newest MAJOR.MINOR.PATCH release tag of a repository.

    Date-like tags such as ``2020.01.01`` are not releases and are ignored.

    Exits:
        0 on success (with ``--check``: VERSION is the latest), 1 if
        VERSION is older than the latest release or an error occurred.
    """
    try:
        latest = asyncio.run(_latest_release_async(repo))
    except PinbumpError as e:
        print_error(f"{e}")
        sys.exit(1)

    if check_version is None:
        if latest is None:
            print_warning(f"No release tags found in {repo}")
            sys.exit(1)
        print_plain(latest)
        sys.exit(0)

    if is_latest_release(check_version, latest):
        print_success(f"{check_version} is the latest release (latest: {latest})")
        sys.exit(0)

    print_warning(f"{check_version} is not the latest release (latest: {latest})")
    sys.exit(1)


async def _latest_release_async(repo: str) -> Optional[str]:
    async with HTTPClient(token=github_token(required=False)) as http:
        return await GitHubClient(repo, http).get_latest_release_tag()
