"""Unit tests for the health scanner."""

import logging
from collections.abc import Callable
from pathlib import Path

import pytest
from caskctl.core.health import HealthScanner
from caskctl.managers.base import PackageManagerUnavailableError
from caskctl.models.health import IssueKind
from caskctl.models.package import PackageInfo
from fakes import FakeManager, query_error


def _exists_only(*present: str) -> Callable[[Path], bool]:
    """Build a path_exists callable that knows only the given app names."""
    names = set(present)
    return lambda path: path.name in names


class TestHealthScanner:
    """Tests for HealthScanner class."""

    def test_healthy_package_has_no_issues(self) -> None:
        """Installed app with one matching version is healthy."""
        manager = FakeManager(
            infos={
                "iterm2": PackageInfo(
                    token="iterm2",
                    installed_version="3.5",
                    app_names=("iTerm.app",),
                    disk_versions=("3.5",),
                )
            }
        )
        scanner = HealthScanner(manager, path_exists=_exists_only("iTerm.app"))

        assert scanner.scan(["iterm2"]) == []

    def test_missing_app_source(self) -> None:
        """A declared app missing from the app directory is reported."""
        manager = FakeManager(
            infos={
                "vivaldi": PackageInfo(
                    token="vivaldi",
                    installed_version="6.5",
                    app_names=("Vivaldi.app",),
                    disk_versions=("6.5",),
                )
            }
        )
        scanner = HealthScanner(
            manager, appdir=Path("/Applications"), path_exists=_exists_only()
        )

        issues = scanner.scan(["vivaldi"])

        assert len(issues) == 1
        assert issues[0].package == "vivaldi"
        assert issues[0].kind == IssueKind.MISSING_APP_SOURCE
        assert issues[0].detail == "/Applications/Vivaldi.app"

    def test_checks_configured_appdir(self, tmp_path: Path) -> None:
        """The app path is built from the configured app directory."""
        (tmp_path / "Arc.app").mkdir()
        manager = FakeManager(
            infos={
                "arc": PackageInfo(
                    token="arc", installed_version="1", app_names=("Arc.app",), disk_versions=("1",)
                )
            }
        )

        assert HealthScanner(manager, appdir=tmp_path).scan(["arc"]) == []

    def test_version_conflict(self) -> None:
        """More than one version directory is reported."""
        manager = FakeManager(
            infos={
                "zoom": PackageInfo(
                    token="zoom", installed_version="6.0", disk_versions=("5.17", "6.0")
                )
            }
        )

        issues = HealthScanner(manager, path_exists=_exists_only()).scan(["zoom"])

        assert [i.kind for i in issues] == [IssueKind.VERSION_CONFLICT]
        assert issues[0].detail == "5.17, 6.0"

    def test_stale_metadata(self) -> None:
        """An installed version without a directory on disk is reported."""
        manager = FakeManager(
            infos={"slack": PackageInfo(token="slack", installed_version="4.36", disk_versions=())}
        )

        issues = HealthScanner(manager).scan(["slack"])

        assert [i.kind for i in issues] == [IssueKind.STALE_METADATA]

    def test_reports_all_issue_kinds_for_one_package(self) -> None:
        """A package can carry several issue kinds at once."""
        manager = FakeManager(
            infos={
                "skype": PackageInfo(
                    token="skype",
                    installed_version="9.0",
                    app_names=("Skype.app",),
                    disk_versions=("8.1", "8.2"),
                )
            }
        )

        issues = HealthScanner(manager, path_exists=_exists_only()).scan(["skype"])

        assert [i.kind for i in issues] == [
            IssueKind.MISSING_APP_SOURCE,
            IssueKind.VERSION_CONFLICT,
            IssueKind.STALE_METADATA,
        ]

    def test_preserves_input_order(self) -> None:
        """Issues follow the order of the input package list."""
        infos = {
            name: PackageInfo(token=name, installed_version="2", disk_versions=())
            for name in ("c", "a", "b")
        }
        manager = FakeManager(infos=infos)

        issues = HealthScanner(manager).scan(["c", "a", "b"])

        assert [i.package for i in issues] == ["c", "a", "b"]

    def test_query_failure_skips_package(self, caplog: pytest.LogCaptureFixture) -> None:
        """A failing metadata query is logged and does not stop the scan."""
        manager = FakeManager(
            infos={
                "broken": query_error("brew info broken failed"),
                "slack": PackageInfo(token="slack", installed_version="4", disk_versions=()),
            }
        )

        with caplog.at_level(logging.WARNING, logger="caskctl"):
            issues = HealthScanner(manager).scan(["broken", "slack"])

        assert [i.package for i in issues] == ["slack"]
        assert "Skipping health check for broken" in caplog.text

    def test_unavailable_manager_propagates(self) -> None:
        """Losing the package manager entirely aborts the scan."""
        manager = FakeManager(infos={"arc": PackageManagerUnavailableError("brew not found")})

        with pytest.raises(PackageManagerUnavailableError):
            HealthScanner(manager).scan(["arc"])

    def test_never_mutates(self) -> None:
        """Scanning only issues read-only queries."""
        manager = FakeManager(
            infos={"slack": PackageInfo(token="slack", installed_version="4", disk_versions=())}
        )

        HealthScanner(manager).scan(["slack", "arc"])

        assert {op for op, _ in manager.calls} == {"package_info"}
