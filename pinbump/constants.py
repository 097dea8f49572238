"""
Centralized constants for pinbump.

This module defines immutable configuration values used across pinbump,
including lockfile conventions, network settings, git commands and logging
formats. All values are intended to be treated as read-only.
"""

from typing import Dict, Final, Sequence

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "pinbump/{version}"

# ---------------------------------------------------------------------------
# GitHub endpoints
# ---------------------------------------------------------------------------

#: Base URL for the GitHub REST API.
GITHUB_API_URL: Final[str] = "https://api.github.com"

#: Environment variable holding the GitHub token.
GITHUB_TOKEN_ENV: Final[str] = "GITHUB_TOKEN"

#: Page size used for paginated GitHub listings.
GITHUB_PAGE_SIZE: Final[int] = 100

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

#: Maximum number of rate-limit (429 / secondary 403) retries.
DEFAULT_MAX_RATE_LIMIT_RETRIES: Final[int] = 10

# ---------------------------------------------------------------------------
# Lockfile conventions
# ---------------------------------------------------------------------------

#: Separator between a package name and its pinned version.
PIN_DELIMITER: Final[str] = "=="

#: Marker of a pip-compile "why is this installed" annotation.
VIA_MARKER: Final[str] = "# via"

#: Cross-file reference annotation emitted by pip-compile-multi.
VIA_REFERENCE_PREFIX: Final[str] = "# via -r "

#: Editable-install directive prefix.
EDITABLE_PREFIX: Final[str] = "-e "

#: Editable install of the project itself, as it should appear in lockfiles.
EDITABLE_SELF_LINE: Final[str] = "-e file:."

#: Prefix of editable installs pointing at a local path.
EDITABLE_FILE_PREFIX: Final[str] = "-e file:"

#: Characters that terminate the package name in a dependency constraint.
CONSTRAINT_NAME_PATTERN: Final[str] = r"^[^>=<;\[\s]+"

# ---------------------------------------------------------------------------
# Release tags
# ---------------------------------------------------------------------------

#: Plain MAJOR.MINOR.PATCH release tag.
RELEASE_TAG_PATTERN: Final[str] = r"^\d+\.\d+\.\d+$"

#: Date-like tags (e.g. 2020.01.01) that are not releases.
DATE_TAG_PATTERN: Final[str] = r"^\d{4}\.\d+\.\d+$"

# ---------------------------------------------------------------------------
# Configuration defaults
# ---------------------------------------------------------------------------

#: Lockfiles scanned for the dependency graph, relative to the repo root.
DEFAULT_LOCKFILES: Final[Sequence[str]] = (
    "requirements/base.txt",
    "requirements/development.txt",
)

#: Lockfile holding the runtime (non-development) pins.
DEFAULT_BASE_LOCKFILE: Final[str] = "requirements/base.txt"

#: Command that re-locks a single package; ``{package}`` is substituted.
DEFAULT_LOCK_COMMAND: Final[str] = "pip-compile-multi --use-cache -P {package}"

#: Branch pull requests are opened against.
DEFAULT_BASE_BRANCH: Final[str] = "master"

#: Prefix of the branch created for each bump.
DEFAULT_BRANCH_PREFIX: Final[str] = "pinbump-bump-"

#: Prefix of bump commit messages and pull request titles.
DEFAULT_COMMIT_PREFIX: Final[str] = "chore: bump python"

#: Labels applied to newly opened pull requests.
DEFAULT_PR_LABELS: Final[Sequence[str]] = ("dependencies",)

# ---------------------------------------------------------------------------
# Shell
# ---------------------------------------------------------------------------

#: Default timeout for external commands, in seconds.
DEFAULT_COMMAND_TIMEOUT: Final[int] = 900

#: Diff command used to observe the effect of a re-lock.
GIT_DIFF_COMMAND: Final[str] = "git diff --color=never --unified=0"

#: SSH remote cloned by ``bump --clone``; ``{repo}`` is ``owner/name``.
GIT_REMOTE_TEMPLATE: Final[str] = "git@github.com:{repo}.git"

#: Extra environment for clones; LFS objects are never needed to re-lock.
GIT_CLONE_ENV: Final[Dict[str, str]] = {"GIT_LFS_SKIP_SMUDGE": "1"}

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading lockfiles.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

#: GitHub credentials masked in log output (classic, OAuth, app and
#: fine-grained tokens, and bearer headers).
LOG_SECRET_PATTERNS: Final[Sequence[str]] = (
    r"gh[pousr]_[A-Za-z0-9]{20,}",
    r"github_pat_[A-Za-z0-9_]{20,}",
    r"Bearer [A-Za-z0-9\-_.]+",
)

#: Replacement for masked credentials.
LOG_SECRET_MASK: Final[str] = "***"
