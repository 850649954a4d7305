"""Unit tests for the selective upgrader."""

import pytest
from caskctl.core.ignore import IgnoreEntry, IgnoreList
from caskctl.core.upgrader import SelectiveUpgrader, partition_candidates
from caskctl.managers.base import PackageManagerUnavailableError
from caskctl.models.summary import ExclusionReason, OutcomeStatus, RunSummary
from fakes import FakeManager, query_error


def _ignore(*names: str) -> IgnoreList:
    return IgnoreList(entries=tuple(IgnoreEntry(name) for name in names))


class TestPartitionCandidates:
    """Tests for partition_candidates function."""

    def test_ignored_and_session_excluded_are_split_off(self) -> None:
        """Ignored and session-excluded packages never become candidates."""
        candidates, excluded = partition_candidates(
            ["arc", "opera", "iterm2", "skype"], _ignore("arc", "opera"), {"skype"}
        )

        assert candidates == ["iterm2"]
        assert excluded == [
            ("arc", ExclusionReason.IGNORE_LIST),
            ("opera", ExclusionReason.IGNORE_LIST),
            ("skype", ExclusionReason.SESSION),
        ]

    def test_ignore_list_takes_precedence(self) -> None:
        """A package in both sets is reported as ignored."""
        _, excluded = partition_candidates(["arc"], _ignore("arc"), {"arc"})

        assert excluded == [("arc", ExclusionReason.IGNORE_LIST)]

    def test_duplicates_are_dropped(self) -> None:
        """Duplicate outdated entries are only considered once."""
        candidates, _ = partition_candidates(["zoom", "zoom", "slack"], _ignore(), set())

        assert candidates == ["zoom", "slack"]

    def test_matching_is_exact(self) -> None:
        """Ignore matching is case-sensitive and not a prefix match."""
        candidates, excluded = partition_candidates(
            ["Arc", "arc-browser", "arc"], _ignore("arc"), set()
        )

        assert candidates == ["Arc", "arc-browser"]
        assert excluded == [("arc", ExclusionReason.IGNORE_LIST)]

    def test_empty_outdated(self) -> None:
        """No outdated packages means nothing to do."""
        assert partition_candidates([], _ignore("arc"), {"skype"}) == ([], [])


class TestSelectiveUpgrader:
    """Tests for SelectiveUpgrader class."""

    def test_each_candidate_upgraded_individually(self) -> None:
        """One upgrade call per candidate, in order."""
        manager = FakeManager()
        summary = RunSummary()

        SelectiveUpgrader(manager).upgrade(["iterm2", "zoom"], _ignore(), summary)

        assert manager.called("upgrade") == ["iterm2", "zoom"]
        assert summary.upgraded == ["iterm2", "zoom"]
        assert not summary.had_errors

    def test_excluded_packages_are_never_upgraded(self) -> None:
        """No upgrade call is made for ignored or session-excluded packages."""
        manager = FakeManager()
        summary = RunSummary()
        summary.exclude_for_session("skype")

        SelectiveUpgrader(manager).upgrade(["arc", "skype", "iterm2"], _ignore("arc"), summary)

        assert manager.called("upgrade") == ["iterm2"]
        assert summary.outcome_for("arc").reason == ExclusionReason.IGNORE_LIST
        assert summary.outcome_for("skype").reason == ExclusionReason.SESSION
        assert summary.excluded == ["arc", "skype"]

    def test_failure_does_not_stop_later_upgrades(self) -> None:
        """A failed upgrade is recorded and the next candidate still runs."""
        manager = FakeManager(upgrade_errors={"zoom": "Download failed"})
        summary = RunSummary()

        SelectiveUpgrader(manager).upgrade(["zoom", "slack"], _ignore(), summary)

        assert manager.called("upgrade") == ["zoom", "slack"]
        assert summary.failed == ["zoom"]
        assert summary.upgraded == ["slack"]
        assert summary.outcome_for("zoom").error == "Download failed"
        assert summary.had_errors

    def test_failure_reason_is_one_line(self) -> None:
        """Multi-line errors are reduced to the brew Error: line."""
        error = "==> Downloading zoom\nError: Download failed\nTraceback line 1\nTraceback line 2"
        manager = FakeManager(upgrade_errors={"zoom": error})
        summary = RunSummary()

        SelectiveUpgrader(manager).upgrade(["zoom"], _ignore(), summary)

        assert summary.outcome_for("zoom").error == "Error: Download failed"

    def test_failures_are_not_retried(self) -> None:
        """A failed upgrade is attempted exactly once."""
        manager = FakeManager(upgrade_errors={"zoom": "boom"})

        SelectiveUpgrader(manager).upgrade(["zoom"], _ignore(), RunSummary())

        assert manager.called("upgrade") == ["zoom"]

    def test_query_error_recorded_as_failure(self) -> None:
        """A PackageQueryError from the manager fails only that package."""

        class RaisingManager(FakeManager):
            def upgrade(self, token, kind=None, greedy=False):  # type: ignore[override]
                if token == "zoom":
                    raise query_error("brew crashed")
                return super().upgrade(token)

        manager = RaisingManager()
        summary = RunSummary()

        SelectiveUpgrader(manager).upgrade(["zoom", "slack"], _ignore(), summary)

        assert summary.failed == ["zoom"]
        assert summary.outcome_for("zoom").error == "brew crashed"
        assert summary.upgraded == ["slack"]

    def test_unavailable_manager_propagates(self) -> None:
        """Losing the package manager mid-run is fatal."""

        class VanishingManager(FakeManager):
            def upgrade(self, token, kind=None, greedy=False):  # type: ignore[override]
                raise PackageManagerUnavailableError("brew not found")

        with pytest.raises(PackageManagerUnavailableError):
            SelectiveUpgrader(VanishingManager()).upgrade(["zoom"], _ignore(), RunSummary())

    def test_every_outdated_package_gets_exactly_one_outcome(self) -> None:
        """Outcomes partition the outdated list."""
        manager = FakeManager(upgrade_errors={"zoom": "boom"})
        summary = RunSummary()
        summary.exclude_for_session("skype")
        outdated = ["arc", "skype", "zoom", "slack"]

        SelectiveUpgrader(manager).upgrade(outdated, _ignore("arc"), summary)

        assert sorted(o.package for o in summary.outcomes) == sorted(outdated)
        statuses = {o.package: o.status for o in summary.outcomes}
        assert statuses == {
            "arc": OutcomeStatus.EXCLUDED,
            "skype": OutcomeStatus.EXCLUDED,
            "zoom": OutcomeStatus.FAILED,
            "slack": OutcomeStatus.UPGRADED,
        }
