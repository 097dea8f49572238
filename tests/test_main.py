from __future__ import annotations

import sys
import builtins
from unittest.mock import MagicMock, patch

import pytest

from pinbump.__main__ import _print_startup_error, main


@pytest.mark.unit
class TestMain:
    """Tests for main() entry point function."""

    @pytest.mark.parametrize(
        "exit_code",
        [0, 1, 130],
        ids=["success", "error", "interrupted"],
    )
    def test_main_returns_cli_exit_code(self, exit_code: int) -> None:
        """Test main returns exit code from cli_main when import succeeds."""
        mock_cli_module = MagicMock()
        mock_cli_module.main = MagicMock(return_value=exit_code)

        with patch.dict("sys.modules", {"pinbump.cli": mock_cli_module}):
            result = main()

        assert result == exit_code
        mock_cli_module.main.assert_called_once_with()

    def test_main_import_error_returns_one(self, capsys: pytest.CaptureFixture) -> None:
        """Test main returns 1 and explains itself when the CLI cannot load."""
        # A None entry in sys.modules makes the import raise ImportError
        with patch.dict("sys.modules", {"pinbump.cli": None}):
            result = main()

        assert result == 1
        captured = capsys.readouterr()
        assert "pinbump CLI could not be loaded." in captured.err
        assert "ImportError:" in captured.err


@pytest.mark.unit
class TestPrintStartupError:
    """Tests for _print_startup_error helper function."""

    def test_print_startup_error_with_version(
        self, capsys: pytest.CaptureFixture
    ) -> None:
        """Test _print_startup_error prints version when available."""
        mock_version_module = MagicMock(__version__="1.2.3")

        with patch.dict(sys.modules, {"pinbump.__version__": mock_version_module}):
            _print_startup_error(ImportError("Test error message"))

        captured = capsys.readouterr()
        assert "pinbump version: 1.2.3" in captured.err
        assert "ImportError: Test error message" in captured.err

    def test_print_startup_error_version_import_fails(
        self, capsys: pytest.CaptureFixture
    ) -> None:
        """Test _print_startup_error falls back to <unknown> version."""
        real_import = builtins.__import__

        def mock_import(name, *args, **kwargs):
            if name == "pinbump.__version__":
                raise ImportError("Cannot import version")
            return real_import(name, *args, **kwargs)

        with patch("builtins.__import__", side_effect=mock_import):
            _print_startup_error(ImportError("Test error message"))

        captured = capsys.readouterr()
        assert "pinbump version: <unknown>" in captured.err
        assert "ImportError: Test error message" in captured.err

    def test_print_startup_error_writes_to_stderr(
        self, capsys: pytest.CaptureFixture
    ) -> None:
        """Test _print_startup_error writes output to stderr, not stdout."""
        _print_startup_error(ImportError("Test error"))

        captured = capsys.readouterr()
        assert "ImportError:" in captured.err
        assert captured.out == ""

    def test_print_startup_error_includes_blank_line(
        self, capsys: pytest.CaptureFixture
    ) -> None:
        """Test a blank line separates the header from the error."""
        _print_startup_error(ImportError("Test error"))

        lines = capsys.readouterr().err.split("\n")

        error_index = next(i for i, line in enumerate(lines) if "ImportError:" in line)
        assert lines[error_index - 1] == ""
