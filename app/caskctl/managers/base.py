"""Abstract base class for package managers.

This module defines the PackageManager interface the pipeline talks to,
and the errors a package manager may raise.
"""

from abc import ABC, abstractmethod

from caskctl.models.action import ActionResult
from caskctl.models.package import PackageInfo, PackageKind
from caskctl.utils.shell import CommandResult


class PackageManagerError(Exception):
    """Base exception for package manager errors."""


class PackageManagerUnavailableError(PackageManagerError):
    """Raised when the package manager CLI cannot be executed at all.

    No stage can make progress without it, so this aborts the run.
    """


class PackageQueryError(PackageManagerError):
    """Raised when a read-only query fails or returns unusable output."""


class PackageManager(ABC):
    """Abstract base class for package managers.

    A package manager answers queries about installed and outdated
    packages and executes reinstall/upgrade actions one package at a time.

    Attributes:
        dry_run: If True, only simulate mutating actions without executing them.

    Example:
        >>> manager = HomebrewManager(dry_run=True)
        >>> if manager.is_available():
        ...     for token in manager.list_outdated(PackageKind.CASK):
        ...         print(manager.upgrade(token).success)
    """

    def __init__(self, dry_run: bool = False) -> None:
        """Initialize the package manager.

        Args:
            dry_run: If True, only simulate mutating actions.
        """
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Check if the manager is in dry-run mode."""
        return self._dry_run

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the CLI name of this package manager."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this package manager is available on the system."""

    @abstractmethod
    def list_installed(self, kind: PackageKind = PackageKind.CASK) -> list[str]:
        """List installed package identifiers of the given kind.

        Raises:
            PackageQueryError: If the listing fails.
            PackageManagerUnavailableError: If the CLI cannot be executed.
        """

    @abstractmethod
    def list_outdated(self, kind: PackageKind = PackageKind.CASK, greedy: bool = True) -> list[str]:
        """List outdated package identifiers of the given kind.

        Args:
            kind: Package kind to query.
            greedy: Include packages that update themselves (auto_updates casks).

        Raises:
            PackageQueryError: If the listing fails.
            PackageManagerUnavailableError: If the CLI cannot be executed.
        """

    @abstractmethod
    def package_info(self, token: str, kind: PackageKind = PackageKind.CASK) -> PackageInfo:
        """Return metadata for one installed package.

        Raises:
            PackageQueryError: If metadata cannot be obtained for this package.
            PackageManagerUnavailableError: If the CLI cannot be executed.
        """

    @abstractmethod
    def reinstall(self, token: str, kind: PackageKind = PackageKind.CASK) -> ActionResult:
        """Force-uninstall stale state, then install the package fresh."""

    @abstractmethod
    def upgrade(
        self,
        token: str,
        kind: PackageKind = PackageKind.CASK,
        greedy: bool = False,
    ) -> ActionResult:
        """Upgrade exactly one package.

        Args:
            token: Package identifier.
            kind: Package kind.
            greedy: Also upgrade packages that update themselves.
        """

    def self_update(self) -> CommandResult | None:
        """Refresh the package manager's own metadata.

        Returns:
            CommandResult of the update, or None if nothing was run.
        """
        return None

    def clear_stale_lock(self) -> bool:
        """Remove a leftover update lock file.

        Returns:
            True if a stale lock was removed.
        """
        return False

    def cleanup(self) -> list[CommandResult]:
        """Remove old versions and unused dependencies.

        Returns:
            Results of the cleanup commands that were run.
        """
        return []
