"""Health scanner for installed packages.

Inspects installed casks for states that make ``brew upgrade`` fail:
app bundles deleted from the applications directory, several versions
left side by side, and metadata pointing at a version that is no longer
on disk. The scan is read-only.
"""

import logging
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

from caskctl.managers.base import PackageManager, PackageQueryError
from caskctl.models.health import HealthIssue, IssueKind
from caskctl.models.package import PackageInfo, PackageKind

logger = logging.getLogger(__name__)

# Where casks install app bundles unless brew is told otherwise
DEFAULT_APPDIR = Path("/Applications")


class HealthScanner:
    """Classifies installed packages as healthy or problematic.

    Example:
        >>> scanner = HealthScanner(HomebrewManager())
        >>> for issue in scanner.scan(["arc", "iterm2"]):
        ...     print(issue.package, issue.kind.value)
    """

    def __init__(
        self,
        manager: PackageManager,
        *,
        kind: PackageKind = PackageKind.CASK,
        appdir: Path = DEFAULT_APPDIR,
        path_exists: Callable[[Path], bool] = Path.exists,
    ) -> None:
        self._manager = manager
        self._kind = kind
        self._appdir = appdir
        self._path_exists = path_exists

    def scan(self, packages: Iterable[str]) -> list[HealthIssue]:
        """Scan packages and return all issues found, in input order."""
        return list(self.scan_iter(packages))

    def scan_iter(self, packages: Iterable[str]) -> Iterator[HealthIssue]:
        """Yield issues for each package in input order.

        A package may yield several issues of different kinds. Packages
        whose metadata cannot be queried are logged and skipped.

        Raises:
            PackageManagerUnavailableError: If the package manager disappears mid-scan.
        """
        for package in packages:
            try:
                info = self._manager.package_info(package, self._kind)
            except PackageQueryError as e:
                logger.warning("Skipping health check for %s: %s", package, e)
                continue

            yield from self.check(info)

    def check(self, info: PackageInfo) -> Iterator[HealthIssue]:
        """Yield the issues of a single package."""
        missing = [name for name in info.app_names if not self._path_exists(self._appdir / name)]
        if missing:
            yield HealthIssue(
                package=info.token,
                kind=IssueKind.MISSING_APP_SOURCE,
                detail=", ".join(str(self._appdir / name) for name in missing),
            )

        if info.has_version_conflict:
            yield HealthIssue(
                package=info.token,
                kind=IssueKind.VERSION_CONFLICT,
                detail=", ".join(info.disk_versions),
            )

        if info.has_stale_metadata:
            yield HealthIssue(
                package=info.token,
                kind=IssueKind.STALE_METADATA,
                detail=f"installed version {info.installed_version} not on disk",
            )
