"""Upgrade run orchestration.

Runs the stages of an upgrade in order within one process:

1. load the ignore list
2. scan installed packages for health issues
3. remediate problematic packages
4. upgrade the remaining outdated packages one by one

Stages 2 and 3 are skipped when remediation is disabled. Housekeeping
from the package manager (stale lock removal, self-update, cleanup)
wraps the stages and only ever produces warnings.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from caskctl.core.health import DEFAULT_APPDIR, HealthScanner
from caskctl.core.ignore import IgnoreList, load_ignore_list
from caskctl.core.paths import DEFAULT_IGNORE_FILE
from caskctl.core.remediation import Remediator
from caskctl.core.upgrader import SelectiveUpgrader
from caskctl.managers.base import PackageManagerUnavailableError, PackageQueryError
from caskctl.models.package import PackageKind
from caskctl.models.summary import RunSummary

if TYPE_CHECKING:
    from collections.abc import Callable

    from caskctl.managers.base import PackageManager
    from caskctl.models.health import HealthIssue

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunOptions:
    """Options for one upgrade run.

    Attributes:
        ignore_path: Ignore file to load (may not exist).
        skip_remediation: Skip the health scan and remediation stages.
        greedy: Include casks that update themselves.
        update: Refresh package manager metadata before starting.
        cleanup: Clean up old versions after upgrading.
        appdir: Applications directory checked by the health scan.
        kind: Package kind to operate on.
    """

    ignore_path: Path = field(default_factory=lambda: Path(DEFAULT_IGNORE_FILE))
    skip_remediation: bool = False
    greedy: bool = True
    update: bool = True
    cleanup: bool = True
    appdir: Path = DEFAULT_APPDIR
    kind: PackageKind = PackageKind.CASK


def run_upgrade(
    manager: PackageManager,
    options: RunOptions,
    *,
    ignore: IgnoreList | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> RunSummary:
    """Run the full upgrade pipeline.

    Args:
        manager: Package manager to drive.
        options: Run options.
        ignore: Already loaded ignore list. Read from
            ``options.ignore_path`` when not given.
        sleep: Delay function used between remediation attempts (tests).

    Returns:
        Finalized RunSummary.

    Raises:
        PackageManagerUnavailableError: If the package manager CLI is missing.
        PackageQueryError: If outdated packages cannot be listed.
    """
    if not manager.is_available():
        msg = f"{manager.name} is not available on this system"
        raise PackageManagerUnavailableError(msg)

    summary = RunSummary()

    _prepare(manager, options, summary)

    if ignore is None:
        ignore = load_ignore_list(options.ignore_path)
    logger.info("Ignoring %d package(s) from %s", len(ignore), options.ignore_path)

    if options.skip_remediation:
        logger.info("Remediation disabled, skipping health scan")
    else:
        issues = scan_health(manager, options, ignore, summary)
        if issues:
            Remediator(manager, kind=options.kind, sleep=sleep).remediate(issues, summary)

    outdated = manager.list_outdated(options.kind, greedy=options.greedy)
    logger.info("%d outdated %s(s)", len(outdated), options.kind.value)
    SelectiveUpgrader(manager, kind=options.kind, greedy=options.greedy).upgrade(
        outdated, ignore, summary
    )

    if options.cleanup:
        _cleanup(manager, summary)

    summary.finish()
    return summary


def scan_health(
    manager: PackageManager,
    options: RunOptions,
    ignore: IgnoreList,
    summary: RunSummary | None = None,
) -> list[HealthIssue]:
    """List installed packages and scan the non-ignored ones for issues.

    A failure to list installed packages is recorded as a warning and
    yields no issues.
    """
    try:
        installed = manager.list_installed(options.kind)
    except PackageQueryError as e:
        logger.warning("Cannot list installed packages, skipping health scan: %s", e)
        if summary is not None:
            summary.add_warning(f"Health scan skipped: {e}")
        return []

    ignored = ignore.names
    scanner = HealthScanner(manager, kind=options.kind, appdir=options.appdir)
    issues = scanner.scan(p for p in installed if p not in ignored)
    logger.info("Health scan found %d issue(s) in %d package(s)", len(issues), len(installed))
    return issues


def _prepare(manager: PackageManager, options: RunOptions, summary: RunSummary) -> None:
    """Clear a stale lock and refresh package metadata."""
    if manager.clear_stale_lock():
        summary.add_warning("Removed stale Homebrew update lock")

    if not options.update:
        return

    result = manager.self_update()
    if result is not None and not result.success:
        message = result.stderr.strip() or result.stdout.strip() or "unknown error"
        logger.warning("%s update failed: %s", manager.name, message)
        summary.add_warning(f"{manager.name} update failed or timed out")


def _cleanup(manager: PackageManager, summary: RunSummary) -> None:
    """Run post-upgrade cleanup, recording failures as warnings."""
    failures = [result for result in manager.cleanup() if not result.success]
    for result in failures:
        message = result.stderr.strip() or result.stdout.strip() or "unknown error"
        logger.warning("Cleanup step failed: %s", message)
    if failures:
        summary.add_warning("Cleanup incomplete")
