"""Data models for caskctl.

This module exports the core data structures used throughout the application.
"""

from caskctl.models.action import Action, ActionResult, ActionType
from caskctl.models.health import HealthIssue, IssueKind
from caskctl.models.package import PackageInfo, PackageKind
from caskctl.models.remediation import AttemptOutcome, RemediationAttempt, RemediationState
from caskctl.models.summary import (
    EXHAUSTED_RETRIES,
    ExclusionReason,
    OutcomeStatus,
    RunSummary,
    UpgradeOutcome,
)

__all__ = [
    "EXHAUSTED_RETRIES",
    "Action",
    "ActionResult",
    "ActionType",
    "AttemptOutcome",
    "ExclusionReason",
    "HealthIssue",
    "IssueKind",
    "OutcomeStatus",
    "PackageInfo",
    "PackageKind",
    "RemediationAttempt",
    "RemediationState",
    "RunSummary",
    "UpgradeOutcome",
]
