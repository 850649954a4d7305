"""Known failure phrases in Homebrew output.

brew sometimes exits 0 even though an install or upgrade silently failed.
Output matching any phrase in this table is treated as a failure
regardless of the exit status. The phrases follow brew's current wording
and need updating when brew changes its messages.
"""

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FailurePhrase:
    """A phrase that marks brew output as failed.

    Attributes:
        phrase: Text searched for (case-insensitive) in command output.
        hint: Short explanation shown to the user.
    """

    phrase: str
    hint: str


# Checked in order; the first match wins.
KNOWN_FAILURE_PHRASES: tuple[FailurePhrase, ...] = (
    FailurePhrase("It seems the App source", "app bundle missing from Applications"),
    FailurePhrase("It seems there is already an App at", "an app with that name already exists"),
    FailurePhrase("is unreadable", "cask definition could not be loaded"),
    FailurePhrase("Download failed", "download failed"),
    FailurePhrase("SHA256 mismatch", "checksum mismatch"),
    FailurePhrase("Failure while executing", "an installer step failed"),
    FailurePhrase("is not installed", "package is not installed"),
)


def match_failure_phrase(
    output: str,
    extra: Iterable[str] = (),
    phrases: Iterable[FailurePhrase] = KNOWN_FAILURE_PHRASES,
) -> FailurePhrase | None:
    """Find the first known failure phrase contained in command output.

    Args:
        output: Combined stdout and stderr of a brew command.
        extra: Additional user-configured phrases.
        phrases: Base phrase table. Defaults to KNOWN_FAILURE_PHRASES.

    Returns:
        The matching FailurePhrase, or None if the output looks clean.
    """
    if not output:
        return None

    haystack = output.lower()
    candidates = [*phrases, *(FailurePhrase(p, "matched configured failure phrase") for p in extra)]
    for candidate in candidates:
        if candidate.phrase and candidate.phrase.lower() in haystack:
            return candidate
    return None


# Longest reason kept for the run summary
MAX_REASON_LENGTH = 160


def summarize_output(output: str | None, default: str = "brew command failed") -> str:
    """Reduce multi-line command output to a one-line failure reason.

    Prefers the first ``Error:`` line brew printed, otherwise the last
    non-empty line. The full text stays in ``ActionResult.output``.

    Args:
        output: Error text or raw output of a failed command.
        default: Reason used when the output is empty.

    Returns:
        A single line of at most MAX_REASON_LENGTH characters.
    """
    lines = [line.strip() for line in (output or "").splitlines() if line.strip()]
    if not lines:
        return default

    reason = next((line for line in lines if line.startswith("Error:")), lines[-1])
    if len(reason) > MAX_REASON_LENGTH:
        reason = reason[: MAX_REASON_LENGTH - 3].rstrip() + "..."
    return reason
