"""Remediation of unhealthy packages.

Each problematic package goes through a small state machine:

    PENDING -> ATTEMPTING -> RESOLVED
                          -> RETRYING -> ATTEMPTING
                          -> EXCLUDED

A package gets at most MAX_ATTEMPTS force-reinstalls with a constant
delay in between. A package that is still broken afterwards is added to
the session exclusion set so the upgrade stage never touches it.
"""

import logging
import time
from collections.abc import Callable, Iterable

from caskctl.managers.base import PackageManager
from caskctl.managers.failures import summarize_output
from caskctl.models.health import HealthIssue
from caskctl.models.package import PackageKind
from caskctl.models.remediation import AttemptOutcome, RemediationAttempt, RemediationState
from caskctl.models.summary import EXHAUSTED_RETRIES, RunSummary

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 2
RETRY_DELAY_SECONDS = 2.0

_TRANSITIONS: dict[RemediationState, frozenset[RemediationState]] = {
    RemediationState.PENDING: frozenset({RemediationState.ATTEMPTING}),
    RemediationState.ATTEMPTING: frozenset(
        {RemediationState.RESOLVED, RemediationState.RETRYING, RemediationState.EXCLUDED}
    ),
    RemediationState.RETRYING: frozenset({RemediationState.ATTEMPTING}),
    RemediationState.RESOLVED: frozenset(),
    RemediationState.EXCLUDED: frozenset(),
}


class InvalidTransitionError(RuntimeError):
    """Raised when the remediation state machine is driven incorrectly."""


def transition(package: str, current: RemediationState, new: RemediationState) -> RemediationState:
    """Move a package from one remediation state to the next.

    Raises:
        InvalidTransitionError: If the transition is not allowed.
    """
    if new not in _TRANSITIONS[current]:
        msg = f"{package}: cannot go from {current.value} to {new.value}"
        raise InvalidTransitionError(msg)
    logger.debug("%s: %s -> %s", package, current.value, new.value)
    return new


class Remediator:
    """Repairs packages reported by the health scanner.

    Strictly sequential: one package at a time, one attempt at a time.
    """

    def __init__(
        self,
        manager: PackageManager,
        *,
        kind: PackageKind = PackageKind.CASK,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._manager = manager
        self._kind = kind
        self._sleep = sleep

    def remediate(
        self,
        issues: Iterable[HealthIssue],
        summary: RunSummary,
    ) -> dict[str, list[RemediationAttempt]]:
        """Remediate every package that has at least one issue.

        A package with several issues is remediated once, in the order
        its first issue appears.

        Args:
            issues: Issues from the health scanner.
            summary: Run summary receiving attempts and session exclusions.

        Returns:
            Attempts made per package.
        """
        packages = list(dict.fromkeys(issue.package for issue in issues))
        return {package: self.remediate_package(package, summary) for package in packages}

    def remediate_package(self, package: str, summary: RunSummary) -> list[RemediationAttempt]:
        """Run the remediation state machine for one package."""
        attempts: list[RemediationAttempt] = []
        state = RemediationState.PENDING

        while not state.is_terminal:
            state = transition(package, state, RemediationState.ATTEMPTING)
            number = len(attempts) + 1
            logger.info("Remediating %s (attempt %d/%d)", package, number, MAX_ATTEMPTS)

            result = self._manager.reinstall(package, self._kind)
            if result.success:
                attempt = RemediationAttempt(number, package, AttemptOutcome.SUCCESS)
            else:
                reason = summarize_output(result.error, default="reinstall failed")
                attempt = RemediationAttempt(number, package, AttemptOutcome.FAILURE, reason)
            attempts.append(attempt)
            summary.record_attempt(attempt)

            if attempt.succeeded:
                state = transition(package, state, RemediationState.RESOLVED)
                logger.info("Remediated %s", package)
            elif number < MAX_ATTEMPTS:
                state = transition(package, state, RemediationState.RETRYING)
                logger.info("Reinstall of %s failed: %s; retrying", package, attempt.error)
                self._sleep(RETRY_DELAY_SECONDS)
            else:
                state = transition(package, state, RemediationState.EXCLUDED)
                summary.exclude_for_session(package, EXHAUSTED_RETRIES)
                logger.warning(
                    "Excluding %s for this run after %d failed attempts: %s",
                    package,
                    number,
                    attempt.error,
                )

        return attempts
