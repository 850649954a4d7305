"""Run summary models.

The RunSummary is the single report of an upgrade run. Stages append to
it as they execute; nothing is ever removed or overwritten.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from caskctl.models.remediation import RemediationAttempt

# Reason recorded when a package exhausts its remediation attempts
EXHAUSTED_RETRIES = "exhausted retries"


class OutcomeStatus(str, Enum):
    """Final status of an outdated package in a run."""

    UPGRADED = "upgraded"
    EXCLUDED = "excluded"
    FAILED = "failed"


class ExclusionReason(str, Enum):
    """Which set caused a package to be excluded before upgrading.

    Attributes:
        IGNORE_LIST: Listed in the user's ignore file.
        SESSION: Added during this run after remediation was exhausted.
    """

    IGNORE_LIST = "ignore-list"
    SESSION = "session"


@dataclass(frozen=True, slots=True)
class UpgradeOutcome:
    """Outcome for one outdated package.

    Attributes:
        package: Package identifier.
        status: Upgraded, excluded or failed.
        reason: Exclusion reason (only for EXCLUDED outcomes).
        error: Failure detail (only for FAILED outcomes).
    """

    package: str
    status: OutcomeStatus
    reason: ExclusionReason | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        """Validate outcome data after initialization."""
        if self.status == OutcomeStatus.EXCLUDED and self.reason is None:
            msg = f"Excluded outcome for {self.package} requires a reason"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "package": self.package,
            "status": self.status.value,
            "reason": self.reason.value if self.reason else None,
            "error": self.error,
        }


@dataclass(slots=True)
class RunSummary:
    """Aggregated, append-only state of one run.

    Attributes:
        outcomes: Upgrade outcomes in the order they were recorded.
        remediations: Remediation attempts per package.
        remediation_failures: Packages that exhausted remediation, with reason.
        session_exclusions: Packages excluded for the rest of this run.
        warnings: Non-fatal housekeeping problems (update, cleanup, listing).
        started_at: When the run started.
        finished_at: When the run was finalized, None while running.
    """

    outcomes: list[UpgradeOutcome] = field(default_factory=lambda: [])
    remediations: dict[str, list[RemediationAttempt]] = field(default_factory=lambda: {})
    remediation_failures: dict[str, str] = field(default_factory=lambda: {})
    session_exclusions: set[str] = field(default_factory=lambda: set())
    warnings: list[str] = field(default_factory=lambda: [])
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = None

    # -- recording ---------------------------------------------------------

    def record_attempt(self, attempt: RemediationAttempt) -> None:
        """Append a remediation attempt to the package's history."""
        self.remediations.setdefault(attempt.package, []).append(attempt)

    def exclude_for_session(self, package: str, reason: str = EXHAUSTED_RETRIES) -> None:
        """Add a package to the session exclusion set and record why."""
        self.session_exclusions.add(package)
        self.remediation_failures[package] = reason

    def record_excluded(self, package: str, reason: ExclusionReason) -> None:
        """Record that a package was filtered out before any upgrade call."""
        self._append(UpgradeOutcome(package=package, status=OutcomeStatus.EXCLUDED, reason=reason))

    def record_upgraded(self, package: str) -> None:
        """Record a successful upgrade.

        Raises:
            ValueError: If the package was excluded for this session.
        """
        if package in self.session_exclusions:
            msg = f"{package} is excluded for this session and cannot be upgraded"
            raise ValueError(msg)
        self._append(UpgradeOutcome(package=package, status=OutcomeStatus.UPGRADED))

    def record_failed(self, package: str, error: str | None = None) -> None:
        """Record a failed upgrade."""
        self._append(UpgradeOutcome(package=package, status=OutcomeStatus.FAILED, error=error))

    def add_warning(self, message: str) -> None:
        """Record a non-fatal problem."""
        self.warnings.append(message)

    def finish(self) -> None:
        """Mark the run as finished."""
        if self.finished_at is None:
            self.finished_at = datetime.now(UTC)

    def _append(self, outcome: UpgradeOutcome) -> None:
        if self.outcome_for(outcome.package) is not None:
            msg = f"Outcome for {outcome.package} already recorded"
            raise ValueError(msg)
        self.outcomes.append(outcome)

    # -- queries -----------------------------------------------------------

    def outcome_for(self, package: str) -> UpgradeOutcome | None:
        """Return the recorded outcome for a package, if any."""
        for outcome in self.outcomes:
            if outcome.package == package:
                return outcome
        return None

    def _packages_with(self, status: OutcomeStatus) -> list[str]:
        return [o.package for o in self.outcomes if o.status == status]

    @property
    def upgraded(self) -> list[str]:
        """Packages upgraded successfully."""
        return self._packages_with(OutcomeStatus.UPGRADED)

    @property
    def excluded(self) -> list[str]:
        """Packages excluded before upgrading."""
        return self._packages_with(OutcomeStatus.EXCLUDED)

    @property
    def failed(self) -> list[str]:
        """Packages whose upgrade failed."""
        return self._packages_with(OutcomeStatus.FAILED)

    @property
    def counts(self) -> dict[str, int]:
        """Number of packages per outcome status."""
        return {status.value: len(self._packages_with(status)) for status in OutcomeStatus}

    @property
    def had_errors(self) -> bool:
        """True iff at least one upgrade failed."""
        return bool(self.failed)

    @property
    def exit_code(self) -> int:
        """Process exit code reflecting the run result."""
        return 1 if self.had_errors else 0

    @property
    def duration_seconds(self) -> float:
        """Elapsed run time in seconds (up to now while still running)."""
        end = self.finished_at or datetime.now(UTC)
        return (end - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "duration_seconds": round(self.duration_seconds, 2),
            "counts": self.counts,
            "had_errors": self.had_errors,
            "outcomes": [o.to_dict() for o in self.outcomes],
            "failed": self.failed,
            "session_exclusions": sorted(self.session_exclusions),
            "remediations": {
                package: [a.outcome.value for a in attempts]
                for package, attempts in self.remediations.items()
            },
            "remediation_failures": dict(self.remediation_failures),
            "warnings": list(self.warnings),
        }
