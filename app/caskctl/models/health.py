"""Health issue models produced by the health scanner."""

from dataclasses import dataclass
from enum import Enum


class IssueKind(str, Enum):
    """Problem detected for an installed package.

    Attributes:
        MISSING_APP_SOURCE: A declared app bundle is missing from the applications directory.
        VERSION_CONFLICT: More than one version directory exists for the package.
        STALE_METADATA: The recorded installed version has no directory on disk.
    """

    MISSING_APP_SOURCE = "missing_app_source"
    VERSION_CONFLICT = "version_conflict"
    STALE_METADATA = "stale_metadata"


@dataclass(frozen=True, slots=True)
class HealthIssue:
    """A problem found on one installed package.

    Attributes:
        package: Package identifier.
        kind: The kind of problem.
        detail: Human-readable detail (e.g., the missing app path).
    """

    package: str
    kind: IssueKind
    detail: str | None = None

    def __post_init__(self) -> None:
        """Validate issue data after initialization."""
        if not self.package:
            msg = "Package name cannot be empty"
            raise ValueError(msg)
