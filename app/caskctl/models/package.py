"""Package models for Homebrew queries.

This module defines the data structures describing installed packages
as reported by the package manager.
"""

from dataclasses import dataclass, field
from enum import Enum


class PackageKind(str, Enum):
    """Kind of Homebrew package.

    Attributes:
        CASK: GUI application package installed into an applications directory.
        FORMULA: Command-line package.
    """

    CASK = "cask"
    FORMULA = "formula"

    @property
    def flag(self) -> str:
        """Return the brew CLI flag selecting this kind (e.g. ``--cask``)."""
        return f"--{self.value}"


@dataclass(frozen=True, slots=True)
class PackageInfo:
    """Metadata for one installed package.

    This is an immutable snapshot of what the package manager and the
    filesystem report about a package at query time.

    Attributes:
        token: Package identifier (e.g., 'arc', 'iterm2').
        kind: Package kind (cask or formula).
        installed_version: Version the package manager considers installed.
        app_names: App bundle names the package declares (e.g., 'Arc.app').
        disk_versions: Version directories present in the package's
            metadata directory (e.g., Caskroom/<token>/<version>).
    """

    token: str
    kind: PackageKind = PackageKind.CASK
    installed_version: str | None = None
    app_names: tuple[str, ...] = field(default=())
    disk_versions: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        """Validate package data after initialization."""
        if not self.token:
            msg = "Package token cannot be empty"
            raise ValueError(msg)

    @property
    def has_version_conflict(self) -> bool:
        """Check if more than one version is present on disk."""
        return len(self.disk_versions) > 1

    @property
    def has_stale_metadata(self) -> bool:
        """Check if the installed version has no matching directory on disk."""
        if self.installed_version is None:
            return False
        return self.installed_version not in self.disk_versions
