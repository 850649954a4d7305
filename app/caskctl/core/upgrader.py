"""Selective upgrade of outdated packages.

Packages on the ignore list or excluded during this run are recorded as
excluded before any upgrade command runs for them. Every remaining
candidate is upgraded with its own brew call so that one failure cannot
abort the others. Failures are reported, never retried.
"""

import logging
from collections.abc import Iterable

from caskctl.core.ignore import IgnoreList
from caskctl.managers.base import PackageManager, PackageQueryError
from caskctl.managers.failures import summarize_output
from caskctl.models.package import PackageKind
from caskctl.models.summary import ExclusionReason, RunSummary

logger = logging.getLogger(__name__)


def partition_candidates(
    outdated: Iterable[str],
    ignore: IgnoreList,
    session_exclusions: set[str],
) -> tuple[list[str], list[tuple[str, ExclusionReason]]]:
    """Split outdated packages into candidates and exclusions.

    The ignore list takes precedence over the session exclusion set when
    a package is in both.

    Args:
        outdated: Outdated package identifiers. Duplicates are dropped.
        ignore: Static ignore list.
        session_exclusions: Packages excluded during this run.

    Returns:
        Tuple of (candidates, [(excluded package, reason)]), both in input order.
    """
    candidates: list[str] = []
    excluded: list[tuple[str, ExclusionReason]] = []
    ignored = ignore.names

    for package in dict.fromkeys(outdated):
        if package in ignored:
            excluded.append((package, ExclusionReason.IGNORE_LIST))
        elif package in session_exclusions:
            excluded.append((package, ExclusionReason.SESSION))
        else:
            candidates.append(package)

    return candidates, excluded


class SelectiveUpgrader:
    """Upgrades outdated packages one by one, skipping excluded ones."""

    def __init__(
        self,
        manager: PackageManager,
        *,
        kind: PackageKind = PackageKind.CASK,
        greedy: bool = True,
    ) -> None:
        self._manager = manager
        self._kind = kind
        self._greedy = greedy

    def upgrade(self, outdated: Iterable[str], ignore: IgnoreList, summary: RunSummary) -> None:
        """Upgrade all candidates and record every outcome in the summary.

        Args:
            outdated: Outdated package identifiers.
            ignore: Static ignore list.
            summary: Run summary; its session exclusions are read, outcomes appended.
        """
        candidates, excluded = partition_candidates(outdated, ignore, summary.session_exclusions)

        for package, reason in excluded:
            logger.info("Skipping %s (%s)", package, reason.value)
            summary.record_excluded(package, reason)

        for package in candidates:
            self._upgrade_one(package, summary)

    def _upgrade_one(self, package: str, summary: RunSummary) -> None:
        logger.info("Upgrading %s", package)
        try:
            result = self._manager.upgrade(package, self._kind, greedy=self._greedy)
        except PackageQueryError as e:
            reason = summarize_output(str(e))
            logger.warning("Upgrade of %s failed: %s", package, reason)
            logger.debug("Full error for %s: %s", package, e)
            summary.record_failed(package, reason)
            return

        if result.success:
            summary.record_upgraded(package)
            logger.info("Upgraded %s", package)
            return

        reason = summarize_output(result.error, default="upgrade failed")
        summary.record_failed(package, reason)
        logger.warning("Upgrade of %s failed: %s", package, reason)
        if result.error and result.error != reason:
            logger.debug("Full error for %s:\n%s", package, result.error)
        if result.output:
            logger.debug("brew output for %s:\n%s", package, result.output)
