"""Configuration file loader for pinbump.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``pinbump.toml`` - settings under ``[pinbump]`` table
- ``pyproject.toml`` - settings under ``[tool.pinbump]`` table

Discovery order:

1. Explicit path from ``--config`` or ``PINBUMP_CONFIG``
2. ``pinbump.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.pinbump]`` section

Example (``pyproject.toml``)::

    [tool.pinbump]
    lockfiles = ["requirements/base.txt", "requirements/development.txt"]
    lock_command = "pip-compile-multi --use-cache -P {package}"
    base_branch = "master"
    pr_labels = ["dependencies", "python"]
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple
from dataclasses import dataclass, field

from pinbump.exceptions import ConfigError
from pinbump.utils.logger import get_logger
from pinbump.constants import (
    DEFAULT_BASE_BRANCH,
    DEFAULT_BASE_LOCKFILE,
    DEFAULT_BRANCH_PREFIX,
    DEFAULT_COMMIT_PREFIX,
    DEFAULT_LOCK_COMMAND,
    DEFAULT_LOCKFILES,
    DEFAULT_PR_LABELS,
)

logger = get_logger("config")


@dataclass
class PinbumpConfig:
    """Parsed and validated pinbump configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        lockfiles: Lockfiles (relative to the repository root) that make up
            the dependency graph, merged in this order.
        base_lockfile: Lockfile with the runtime pins, used by
            ``--only-base``.
        lock_command: Command re-locking one package; ``{package}`` is
            replaced by the package name.
        base_branch: Branch pull requests target.
        branch_prefix: Prefix of the branch created per bump.
        commit_prefix: Prefix of commit messages and pull request titles.
        pr_labels: Labels added to newly opened pull requests.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    lockfiles: List[str] = field(default_factory=lambda: list(DEFAULT_LOCKFILES))
    base_lockfile: str = DEFAULT_BASE_LOCKFILE
    lock_command: str = DEFAULT_LOCK_COMMAND
    base_branch: str = DEFAULT_BASE_BRANCH
    branch_prefix: str = DEFAULT_BRANCH_PREFIX
    commit_prefix: str = DEFAULT_COMMIT_PREFIX
    pr_labels: List[str] = field(default_factory=lambda: list(DEFAULT_PR_LABELS))

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging."""
        return {
            "lockfiles": list(self.lockfiles),
            "base_lockfile": self.base_lockfile,
            "lock_command": self.lock_command,
            "base_branch": self.base_branch,
            "branch_prefix": self.branch_prefix,
            "commit_prefix": self.commit_prefix,
            "pr_labels": list(self.pr_labels),
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    pinbump_toml = cwd / "pinbump.toml"
    if pinbump_toml.is_file():
        logger.debug("Found pinbump.toml: %s", pinbump_toml)
        return pinbump_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_pinbump_section(pyproject_toml):
        logger.debug("Found [tool.pinbump] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_pinbump_section(path: Path) -> bool:
    """Check if pyproject.toml contains a [tool.pinbump] section.

    An unreadable pyproject.toml simply does not count as configuration.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return "pinbump" in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> PinbumpConfig:
    """Load and validate pinbump configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`PinbumpConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return PinbumpConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("pinbump", {})
    else:
        section = raw.get("pinbump", {})

    if not section:
        logger.debug("Config file found but no pinbump section, using defaults")
        return PinbumpConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def read_pyproject(path: Path) -> Dict[str, Any]:
    """Read a project's ``pyproject.toml``.

    Raises:
        ConfigError: The file is missing or is not valid TOML.
    """
    if not path.is_file():
        raise ConfigError(f"pyproject.toml not found: {path}", config_path=str(path))
    return _read_toml(path)


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _is_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


#: option name -> (validator, human readable type)
_OPTIONS: Dict[str, Tuple[Callable[[Any], bool], str]] = {
    "lockfiles": (_is_str_list, "a list of strings"),
    "base_lockfile": (_is_str, "a non-empty string"),
    "lock_command": (_is_str, "a non-empty string"),
    "base_branch": (_is_str, "a non-empty string"),
    "branch_prefix": (_is_str, "a non-empty string"),
    "commit_prefix": (_is_str, "a non-empty string"),
    "pr_labels": (_is_str_list, "a list of strings"),
}


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> PinbumpConfig:
    """Parse and validate a ``[pinbump]`` / ``[tool.pinbump]`` table.

    Raises:
        ConfigError: Unknown keys, values of the wrong type, an empty
            ``lockfiles`` list, or a ``lock_command`` without ``{package}``.
    """
    unknown = set(section.keys()) - set(_OPTIONS)
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    config = PinbumpConfig()
    for option, (is_valid, expected) in _OPTIONS.items():
        if option not in section:
            continue
        value = section[option]
        if not is_valid(value):
            raise ConfigError(
                f"{option} must be {expected}, got {type(value).__name__}",
                config_path=config_path,
                option=option,
            )
        setattr(config, option, list(value) if isinstance(value, list) else value)

    if not config.lockfiles:
        raise ConfigError(
            "lockfiles must name at least one lockfile",
            config_path=config_path,
            option="lockfiles",
        )

    if "{package}" not in config.lock_command:
        raise ConfigError(
            "lock_command must contain the {package} placeholder",
            config_path=config_path,
            option="lock_command",
        )

    return config
