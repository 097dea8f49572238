from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from pinbump.config import (
    PinbumpConfig,
    discover_config_file,
    load_config,
    read_pyproject,
    _parse_section,
    _pyproject_has_pinbump_section,
    _read_toml,
)
from pinbump.exceptions import ConfigError


@pytest.mark.unit
class TestPinbumpConfig:
    """Tests for PinbumpConfig dataclass."""

    def test_default_initialization(self) -> None:
        """Test PinbumpConfig initializes with correct defaults."""
        config = PinbumpConfig()

        assert config.lockfiles == [
            "requirements/base.txt",
            "requirements/development.txt",
        ]
        assert config.base_lockfile == "requirements/base.txt"
        assert config.lock_command == "pip-compile-multi --use-cache -P {package}"
        assert config.base_branch == "master"
        assert config.branch_prefix == "pinbump-bump-"
        assert config.commit_prefix == "chore: bump python"
        assert config.pr_labels == ["dependencies"]
        assert config.source_path is None

    def test_list_defaults_are_not_shared(self) -> None:
        """Test each instance gets its own lockfile and label lists."""
        first = PinbumpConfig()
        first.lockfiles.append("requirements/docs.txt")
        first.pr_labels.append("python")

        second = PinbumpConfig()

        assert "requirements/docs.txt" not in second.lockfiles
        assert second.pr_labels == ["dependencies"]

    def test_to_log_dict(self) -> None:
        """Test to_log_dict returns every option but no metadata."""
        config = PinbumpConfig(
            base_branch="main",
            source_path=Path("/test/path.toml"),
        )

        result = config.to_log_dict()

        assert result["base_branch"] == "main"
        assert result["lockfiles"] == config.lockfiles
        assert "source_path" not in result


@pytest.mark.unit
class TestDiscoverConfigFile:
    """Tests for discover_config_file function."""

    def test_explicit_path_priority(self, tmp_path: Path) -> None:
        """Test explicit path is used when provided and exists."""
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[pinbump]\n", encoding="utf-8")
        (tmp_path / "pinbump.toml").write_text("[pinbump]\n", encoding="utf-8")

        with patch("pinbump.config.Path.cwd", return_value=tmp_path):
            result = discover_config_file(config_file)

        assert result == config_file.resolve()

    def test_explicit_path_not_found_raises_error(self, tmp_path: Path) -> None:
        """Test ConfigError raised when explicit path doesn't exist."""
        with pytest.raises(ConfigError, match="not found"):
            discover_config_file(tmp_path / "missing.toml")

    def test_discovers_pinbump_toml(self, tmp_path: Path) -> None:
        """Test pinbump.toml in the working directory is found."""
        config_file = tmp_path / "pinbump.toml"
        config_file.write_text("[pinbump]\n", encoding="utf-8")

        with patch("pinbump.config.Path.cwd", return_value=tmp_path):
            result = discover_config_file()

        assert result == config_file

    def test_discovers_pyproject_toml_with_section(self, tmp_path: Path) -> None:
        """Test pyproject.toml with [tool.pinbump] is found."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            "[tool.pinbump]\nbase_branch = 'main'\n", encoding="utf-8"
        )

        with patch("pinbump.config.Path.cwd", return_value=tmp_path):
            result = discover_config_file()

        assert result == pyproject

    def test_ignores_pyproject_toml_without_section(self, tmp_path: Path) -> None:
        """Test pyproject.toml without [tool.pinbump] is not configuration."""
        (tmp_path / "pyproject.toml").write_text(
            "[project]\nname = 'demo'\n", encoding="utf-8"
        )

        with patch("pinbump.config.Path.cwd", return_value=tmp_path):
            assert discover_config_file() is None

    def test_precedence_order(self, tmp_path: Path) -> None:
        """Test pinbump.toml wins over pyproject.toml."""
        pinbump_toml = tmp_path / "pinbump.toml"
        pinbump_toml.write_text("[pinbump]\n", encoding="utf-8")
        (tmp_path / "pyproject.toml").write_text("[tool.pinbump]\n", encoding="utf-8")

        with patch("pinbump.config.Path.cwd", return_value=tmp_path):
            result = discover_config_file()

        assert result == pinbump_toml


@pytest.mark.unit
class TestPyprojectHasPinbumpSection:
    """Tests for _pyproject_has_pinbump_section helper."""

    def test_returns_true_when_section_exists(self, tmp_path: Path) -> None:
        """Test a [tool.pinbump] table is detected."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.pinbump]\n", encoding="utf-8")

        assert _pyproject_has_pinbump_section(pyproject) is True

    def test_returns_false_when_section_missing(self, tmp_path: Path) -> None:
        """Test other tool tables are ignored."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.black]\nline-length = 88\n", encoding="utf-8")

        assert _pyproject_has_pinbump_section(pyproject) is False

    def test_returns_false_on_invalid_toml(self, tmp_path: Path) -> None:
        """Test an unparsable pyproject.toml does not count as configuration."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.pinbump\n", encoding="utf-8")

        assert _pyproject_has_pinbump_section(pyproject) is False


@pytest.mark.unit
class TestReadToml:
    """Tests for _read_toml and read_pyproject."""

    def test_reads_valid_toml(self, tmp_path: Path) -> None:
        """Test valid TOML is parsed into a dictionary."""
        path = tmp_path / "pinbump.toml"
        path.write_text("[pinbump]\nbase_branch = 'main'\n", encoding="utf-8")

        assert _read_toml(path) == {"pinbump": {"base_branch": "main"}}

    def test_raises_error_on_invalid_toml(self, tmp_path: Path) -> None:
        """Test invalid TOML raises ConfigError naming the file."""
        path = tmp_path / "pinbump.toml"
        path.write_text("[pinbump\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid TOML in pinbump.toml"):
            _read_toml(path)

    def test_raises_error_when_file_not_found(self, tmp_path: Path) -> None:
        """Test a missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="Cannot read configuration file"):
            _read_toml(tmp_path / "missing.toml")

    def test_read_pyproject(self, tmp_path: Path) -> None:
        """Test read_pyproject returns the whole document."""
        path = tmp_path / "pyproject.toml"
        path.write_text(
            "[project]\nname = 'demo'\ndependencies = ['flask>=2.0']\n",
            encoding="utf-8",
        )

        data = read_pyproject(path)

        assert data["project"]["dependencies"] == ["flask>=2.0"]

    def test_read_pyproject_missing_raises_error(self, tmp_path: Path) -> None:
        """Test read_pyproject raises ConfigError when there is no file."""
        with pytest.raises(ConfigError, match="pyproject.toml not found"):
            read_pyproject(tmp_path / "pyproject.toml")


@pytest.mark.unit
class TestParseSection:
    """Tests for _parse_section function."""

    def test_parses_empty_section(self) -> None:
        """Test an empty table yields defaults."""
        assert _parse_section({}, config_path="test.toml") == PinbumpConfig()

    def test_parses_all_options(self) -> None:
        """Test every option is read."""
        config = _parse_section(
            {
                "lockfiles": ["requirements/prod.txt"],
                "base_lockfile": "requirements/prod.txt",
                "lock_command": "pip-compile -P {package} requirements/prod.in",
                "base_branch": "main",
                "branch_prefix": "deps/",
                "commit_prefix": "build(deps): bump",
                "pr_labels": ["deps", "python"],
            },
            config_path="test.toml",
        )

        assert config.lockfiles == ["requirements/prod.txt"]
        assert config.base_lockfile == "requirements/prod.txt"
        assert config.lock_command == "pip-compile -P {package} requirements/prod.in"
        assert config.base_branch == "main"
        assert config.branch_prefix == "deps/"
        assert config.commit_prefix == "build(deps): bump"
        assert config.pr_labels == ["deps", "python"]

    def test_raises_error_on_unknown_keys(self) -> None:
        """Test unknown keys are rejected."""
        with pytest.raises(ConfigError, match="Unknown configuration keys: bogus"):
            _parse_section({"bogus": 1}, config_path="test.toml")

    @pytest.mark.parametrize(
        "option, value",
        [
            ("lockfiles", "requirements/base.txt"),
            ("lockfiles", ["ok.txt", 3]),
            ("base_branch", ""),
            ("pr_labels", "dependencies"),
            ("lock_command", 42),
        ],
    )
    def test_raises_error_on_wrong_type(self, option: str, value: object) -> None:
        """Test values of the wrong type are rejected with the option name."""
        with pytest.raises(ConfigError) as exc_info:
            _parse_section({option: value}, config_path="test.toml")

        assert exc_info.value.details["option"] == option

    def test_raises_error_on_empty_lockfiles(self) -> None:
        """Test at least one lockfile is required."""
        with pytest.raises(ConfigError, match="at least one lockfile"):
            _parse_section({"lockfiles": []}, config_path="test.toml")

    def test_raises_error_on_lock_command_without_placeholder(self) -> None:
        """Test lock_command must contain {package}."""
        with pytest.raises(ConfigError, match="placeholder"):
            _parse_section(
                {"lock_command": "pip-compile-multi"}, config_path="test.toml"
            )


@pytest.mark.unit
class TestLoadConfig:
    """Tests for load_config function."""

    def test_returns_defaults_when_no_config_found(self, tmp_path: Path) -> None:
        """Test defaults are returned without a config file."""
        with patch("pinbump.config.Path.cwd", return_value=tmp_path):
            config = load_config()

        assert config == PinbumpConfig()
        assert config.source_path is None

    def test_loads_pinbump_toml(self, tmp_path: Path) -> None:
        """Test settings are read from [pinbump] in pinbump.toml."""
        config_file = tmp_path / "pinbump.toml"
        config_file.write_text("[pinbump]\nbase_branch = 'main'\n", encoding="utf-8")

        with patch("pinbump.config.Path.cwd", return_value=tmp_path):
            config = load_config()

        assert config.base_branch == "main"
        assert config.source_path == config_file

    def test_loads_pyproject_toml(self, tmp_path: Path) -> None:
        """Test settings are read from [tool.pinbump] in pyproject.toml."""
        (tmp_path / "pyproject.toml").write_text(
            "[tool.pinbump]\npr_labels = ['deps']\n", encoding="utf-8"
        )

        with patch("pinbump.config.Path.cwd", return_value=tmp_path):
            config = load_config()

        assert config.pr_labels == ["deps"]

    def test_loads_explicit_config_path(self, tmp_path: Path) -> None:
        """Test an explicit path is loaded even with an unusual name."""
        config_file = tmp_path / "ci.toml"
        config_file.write_text("[pinbump]\nbranch_prefix = 'ci-'\n", encoding="utf-8")

        config = load_config(config_file)

        assert config.branch_prefix == "ci-"
        assert config.source_path == config_file.resolve()

    def test_handles_empty_pinbump_section(self, tmp_path: Path) -> None:
        """Test an empty [pinbump] table yields defaults with a source path."""
        config_file = tmp_path / "pinbump.toml"
        config_file.write_text("[pinbump]\n", encoding="utf-8")

        with patch("pinbump.config.Path.cwd", return_value=tmp_path):
            config = load_config()

        assert config.base_branch == "master"
        assert config.source_path == config_file

    def test_raises_error_on_invalid_values(self, tmp_path: Path) -> None:
        """Test invalid values in a discovered file raise ConfigError."""
        (tmp_path / "pinbump.toml").write_text(
            "[pinbump]\nlock_command = 'make lock'\n", encoding="utf-8"
        )

        with patch("pinbump.config.Path.cwd", return_value=tmp_path):
            with pytest.raises(ConfigError):
                load_config()
