"""Unit tests for shell execution utilities."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest
from caskctl.utils.shell import CommandResult, command_exists, run_command


class TestCommandResult:
    """Tests for CommandResult dataclass."""

    def test_success(self) -> None:
        """Only exit code 0 is success."""
        assert CommandResult(stdout="", stderr="", returncode=0).success is True
        assert CommandResult(stdout="", stderr="", returncode=124).success is False

    def test_output_joins_streams(self) -> None:
        """output combines stdout and stderr, skipping empty streams."""
        assert CommandResult(stdout="out", stderr="err", returncode=0).output == "out\nerr"
        assert CommandResult(stdout="", stderr="err", returncode=1).output == "err"
        assert CommandResult(stdout="", stderr="", returncode=0).output == ""


class TestRunCommand:
    """Tests for run_command function."""

    @patch("caskctl.utils.shell.subprocess.run")
    def test_captures_output(self, mock_run: MagicMock) -> None:
        """run_command returns captured output and exit code."""
        mock_run.return_value = MagicMock(stdout="arc\n", stderr="", returncode=0)

        result = run_command(["brew", "list", "--cask", "-1"])

        assert result == CommandResult(stdout="arc\n", stderr="", returncode=0)
        assert mock_run.call_args.kwargs["capture_output"] is True
        assert mock_run.call_args.kwargs["text"] is True
        assert mock_run.call_args.kwargs["check"] is False

    @patch("caskctl.utils.shell.subprocess.run")
    def test_passes_timeout(self, mock_run: MagicMock) -> None:
        """The timeout is forwarded to subprocess.run."""
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["brew", "upgrade"], timeout=600)

        assert mock_run.call_args.kwargs["timeout"] == 600

    @patch("caskctl.utils.shell.subprocess.run")
    def test_timeout_propagates(self, mock_run: MagicMock) -> None:
        """TimeoutExpired is left to the caller."""
        mock_run.side_effect = subprocess.TimeoutExpired("brew", 60)

        with pytest.raises(subprocess.TimeoutExpired):
            run_command(["brew", "update"])

    def test_raises_file_not_found(self) -> None:
        """Missing executables raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            run_command(["nonexistent_command_xyz_12345"])


class TestCommandExists:
    """Tests for command_exists function."""

    @patch("caskctl.utils.shell.shutil.which", return_value="/opt/homebrew/bin/brew")
    def test_found(self, _mock_which: MagicMock) -> None:
        """command_exists returns True when the command is on PATH."""
        assert command_exists("brew") is True

    @patch("caskctl.utils.shell.shutil.which", return_value=None)
    def test_missing(self, _mock_which: MagicMock) -> None:
        """command_exists returns False when the command is not on PATH."""
        assert command_exists("brew") is False
