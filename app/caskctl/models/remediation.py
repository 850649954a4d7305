"""Remediation models.

Records the attempts made to repair an unhealthy package and the states
a package moves through while being remediated.
"""

from dataclasses import dataclass
from enum import Enum


class AttemptOutcome(str, Enum):
    """Outcome of a single repair attempt."""

    SUCCESS = "success"
    FAILURE = "failure"


class RemediationState(str, Enum):
    """Per-package remediation state.

    ``PENDING -> ATTEMPTING -> {RESOLVED, RETRYING, EXCLUDED}``; RETRYING
    always leads back to ATTEMPTING. RESOLVED and EXCLUDED are terminal.
    """

    PENDING = "pending"
    ATTEMPTING = "attempting"
    RETRYING = "retrying"
    RESOLVED = "resolved"
    EXCLUDED = "excluded"

    @property
    def is_terminal(self) -> bool:
        """Check if no further transition is possible."""
        return self in (RemediationState.RESOLVED, RemediationState.EXCLUDED)


@dataclass(frozen=True, slots=True)
class RemediationAttempt:
    """One repair attempt for a package.

    Attributes:
        attempt: 1-based attempt number.
        package: Package identifier.
        outcome: Whether the repair succeeded.
        error: Error reported by the package manager on failure.
    """

    attempt: int
    package: str
    outcome: AttemptOutcome
    error: str | None = None

    def __post_init__(self) -> None:
        """Validate attempt data after initialization."""
        if self.attempt < 1:
            msg = f"Attempt number must be >= 1, got {self.attempt}"
            raise ValueError(msg)

    @property
    def succeeded(self) -> bool:
        """Check if the attempt succeeded."""
        return self.outcome == AttemptOutcome.SUCCESS
