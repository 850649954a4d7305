"""Mutating package manager calls and their results."""

from dataclasses import dataclass
from enum import Enum

from caskctl.models.package import PackageKind


class ActionType(Enum):
    """Kind of mutating call made for a single package.

    Attributes:
        REINSTALL: Force-uninstall, then install fresh (remediation).
        UPGRADE: Upgrade one outdated package.
    """

    REINSTALL = "reinstall"
    UPGRADE = "upgrade"


@dataclass(frozen=True, slots=True)
class Action:
    """One reinstall or upgrade of one package.

    Attributes:
        action_type: Reinstall or upgrade.
        package: Package identifier the call operates on.
        kind: Cask or formula.
    """

    action_type: ActionType
    package: str
    kind: PackageKind = PackageKind.CASK

    def __post_init__(self) -> None:
        """Reject an empty package identifier."""
        if not self.package:
            msg = "Package name cannot be empty"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class ActionResult:
    """What happened when an Action ran.

    ``success`` already accounts for known failure phrases, so a command
    that exited 0 can still be unsuccessful.

    Attributes:
        action: The action that ran.
        success: Whether the package ended up in the requested state.
        message: Short note on success (e.g. dry-run).
        error: Why the action failed.
        output: Combined stdout and stderr of the command.
    """

    action: Action
    success: bool
    message: str | None = None
    error: str | None = None
    output: str = ""
