"""Unit tests for the check command."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from caskctl.cli.main import app
from caskctl.models.package import PackageInfo
from fakes import FakeManager
from typer.testing import CliRunner

runner = CliRunner()

GET_MANAGER = "caskctl.cli.commands.check.get_manager"


@pytest.fixture
def broken_manager() -> FakeManager:
    """Manager with one cask whose app bundle is missing."""
    return FakeManager(
        installed=["skype", "iterm2"],
        infos={
            "skype": PackageInfo(
                token="skype",
                installed_version="8.1",
                app_names=("Skype.app",),
                disk_versions=("8.1",),
            )
        },
    )


class TestCheckCommand:
    """Tests for caskctl check command."""

    def test_healthy(self, tmp_path: Path) -> None:
        """Healthy casks exit 0."""
        manager = FakeManager(installed=["iterm2"])

        with patch(GET_MANAGER, return_value=manager):
            result = runner.invoke(app, ["check", "-i", str(tmp_path / "none")])

        assert result.exit_code == 0
        assert "look healthy" in result.stdout

    def test_issues_exit_1(self, tmp_path: Path, broken_manager: FakeManager) -> None:
        """Issues are listed and the command exits 1."""
        with patch(GET_MANAGER, return_value=broken_manager):
            result = runner.invoke(
                app, ["check", "-i", str(tmp_path / "none"), "--appdir", str(tmp_path)]
            )

        assert result.exit_code == 1
        assert "skype" in result.stdout
        assert "missing_app_source" in result.stdout

    def test_check_is_read_only(self, tmp_path: Path, broken_manager: FakeManager) -> None:
        """check never reinstalls or upgrades."""
        with patch(GET_MANAGER, return_value=broken_manager):
            runner.invoke(app, ["check", "-i", str(tmp_path / "none"), "--appdir", str(tmp_path)])

        assert broken_manager.called("reinstall") == []
        assert broken_manager.called("upgrade") == []

    def test_json_output(self, tmp_path: Path, broken_manager: FakeManager) -> None:
        """--format json prints the issues as a JSON list."""
        with patch(GET_MANAGER, return_value=broken_manager):
            result = runner.invoke(
                app,
                ["check", "-i", str(tmp_path / "none"), "--appdir", str(tmp_path), "-f", "json"],
            )

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert [(i["package"], i["kind"]) for i in data] == [("skype", "missing_app_source")]

    def test_ignored_casks_not_checked(self, tmp_path: Path, broken_manager: FakeManager) -> None:
        """Casks in the ignore file are left out."""
        ignore = tmp_path / ".cask-ignore"
        ignore.write_text("skype  # broken, handled manually\n")

        with patch(GET_MANAGER, return_value=broken_manager):
            result = runner.invoke(app, ["check", "-i", str(ignore), "--appdir", str(tmp_path)])

        assert result.exit_code == 0
        assert broken_manager.called("package_info") == ["iterm2"]

    def test_brew_missing_is_fatal(self, tmp_path: Path) -> None:
        """A missing brew exits 2."""
        with patch(GET_MANAGER, return_value=FakeManager(available=False)):
            result = runner.invoke(app, ["check", "-i", str(tmp_path / "none")])

        assert result.exit_code == 2
