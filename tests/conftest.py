"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import json
import logging
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep tests away from the real config directory and env overrides."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.delenv("CASKCTL_IGNORE_FILE", raising=False)
    monkeypatch.delenv("CASKCTL_SKIP_REMEDIATION", raising=False)
    monkeypatch.delenv("CASKCTL_VERBOSE", raising=False)
    # The CLI callback attaches a handler to the caskctl logger; let caplog see records again.
    logging.getLogger("caskctl").propagate = True


@pytest.fixture
def ignore_file(tmp_path: Path) -> Path:
    """Ignore file with a commented and a bare entry."""
    path = tmp_path / ".cask-ignore"
    path.write_text(
        "# Casks that break on upgrade\n"
        "\n"
        "arc  # app source missing\n"
        "opera\n"
    )
    return path


@pytest.fixture
def mock_brew_info_arc() -> str:
    """Sample ``brew info --json=v2 --cask arc`` output."""
    return json.dumps(
        {
            "formulae": [],
            "casks": [
                {
                    "token": "arc",
                    "version": "1.50.0",
                    "installed": "1.49.0",
                    "artifacts": [
                        {"uninstall": [{"quit": "company.thebrowser.Browser"}]},
                        {"app": ["Arc.app"]},
                        {"zap": [{"trash": ["~/Library/Caches/Arc"]}]},
                    ],
                }
            ],
        }
    )


@pytest.fixture
def mock_brew_info_renamed() -> str:
    """Sample ``brew info`` output for a cask whose app is renamed on install."""
    return json.dumps(
        {
            "formulae": [],
            "casks": [
                {
                    "token": "vivaldi",
                    "installed": "6.5",
                    "artifacts": [{"app": ["Vivaldi Snapshot.app", {"target": "Vivaldi.app"}]}],
                }
            ],
        }
    )


@pytest.fixture
def mock_brew_outdated_output() -> str:
    """Sample ``brew outdated --cask --quiet`` output."""
    return "arc\nopera\niterm2\n"
