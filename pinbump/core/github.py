"""GitHub access for pinbump.

Only the handful of REST calls pinbump needs: listing tags to find the
latest release, and opening labelled pull requests for bumps. All requests
go through the shared :class:`~pinbump.utils.http.HTTPClient`, which owns
retries and rate-limit waits.

Typical usage::

    async with HTTPClient(token=os.environ["GITHUB_TOKEN"]) as http:
        github = GitHubClient("apache/superset", http)
        latest = await github.get_latest_release_tag()
"""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pinbump.constants import GITHUB_API_URL, GITHUB_PAGE_SIZE, GITHUB_TOKEN_ENV
from pinbump.exceptions import GitHubError
from pinbump.utils.http import HTTPClient
from pinbump.utils.logger import get_logger
from pinbump.utils.version_utils import latest_release_tag

logger = get_logger("core.github")


def split_repo(repo: Optional[str]) -> Tuple[str, str]:
    """Split ``owner/name`` into its two parts.

    Raises:
        GitHubError: ``repo`` is missing or not of the form ``owner/name``.
    """
    parts = (repo or "").strip().split("/")
    if len(parts) != 2 or not all(parts):
        raise GitHubError(
            "Repository must be given as 'owner/name'",
            repo=repo,
        )
    return parts[0], parts[1]


def github_token(*, required: bool = True) -> Optional[str]:
    """Return the token from ``GITHUB_TOKEN``.

    Read-only calls on public repositories work anonymously, with a much
    lower rate limit; pass ``required=False`` for those.

    Raises:
        GitHubError: The variable is unset or empty and ``required`` is set.
    """
    token = os.environ.get(GITHUB_TOKEN_ENV, "").strip()
    if token:
        return token
    if required:
        raise GitHubError(f"{GITHUB_TOKEN_ENV} is not set")
    logger.debug("%s not set, using anonymous GitHub access", GITHUB_TOKEN_ENV)
    return None


class GitHubClient:
    """Thin wrapper over the GitHub REST endpoints pinbump uses.

    Args:
        repo: Repository as ``owner/name``.
        http: Shared HTTP client, already carrying the token.
        api_url: API root, overridable for GitHub Enterprise.
    """

    def __init__(
        self,
        repo: str,
        http: HTTPClient,
        *,
        api_url: str = GITHUB_API_URL,
    ) -> None:
        self.owner, self.name = split_repo(repo)
        self.http = http
        self.api_url = api_url.rstrip("/")

    @property
    def repo(self) -> str:
        return f"{self.owner}/{self.name}"

    def _url(self, path: str) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.name}/{path}"

    # ------------------------------------------------------------------
    # Releases
    # ------------------------------------------------------------------

    async def list_tags(self) -> List[str]:
        """Return the names of every tag in the repository."""
        tags = await self.http.get_paginated(
            self._url("tags"),
            params={"per_page": GITHUB_PAGE_SIZE},
        )
        names = [tag["name"] for tag in tags if isinstance(tag, dict) and "name" in tag]
        logger.debug("Found %d tag(s) in %s", len(names), self.repo)
        return names

    async def get_latest_release_tag(self) -> Optional[str]:
        """Return the newest ``X.Y.Z`` tag, ignoring date-like tags."""
        latest = latest_release_tag(await self.list_tags())
        logger.info("Latest release of %s: %s", self.repo, latest)
        return latest

    # ------------------------------------------------------------------
    # Pull requests
    # ------------------------------------------------------------------

    async def find_open_pull_requests(self, branch: str) -> List[Dict[str, Any]]:
        """Return open pull requests whose head is ``owner:branch``."""
        return await self.http.get_paginated(
            self._url("pulls"),
            params={"state": "open", "head": f"{self.owner}:{branch}"},
        )

    async def create_pull_request(
        self,
        *,
        title: str,
        head: str,
        base: str,
        body: str,
    ) -> Dict[str, Any]:
        """Open a pull request and return the API payload."""
        data = await self.http.post_json(
            self._url("pulls"),
            {"title": title, "head": head, "base": base, "body": body},
        )
        logger.info("Pull request created: %s", data.get("html_url"))
        return data

    async def add_labels(self, number: int, labels: Sequence[str]) -> None:
        """Add ``labels`` to issue or pull request ``number``."""
        if not labels:
            return
        await self.http.post(
            self._url(f"issues/{number}/labels"),
            json={"labels": list(labels)},
            retry=True,
        )
        logger.debug("Labelled #%d with %s", number, ", ".join(labels))
