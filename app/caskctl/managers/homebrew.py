"""Homebrew package manager implementation.

Queries and mutates Homebrew casks and formulae through the brew CLI.
brew has no structured API for most operations, so this module is the
only place that interprets its text output.
"""

import json
import logging
import subprocess
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from caskctl.managers.base import (
    PackageManager,
    PackageManagerUnavailableError,
    PackageQueryError,
)
from caskctl.managers.failures import match_failure_phrase, summarize_output
from caskctl.models.action import Action, ActionResult, ActionType
from caskctl.models.package import PackageInfo, PackageKind
from caskctl.utils.shell import CommandResult, command_exists, run_command

logger = logging.getLogger(__name__)

# Exit code reported for commands killed by a timeout (same as coreutils timeout)
_TIMEOUT_RETURNCODE = 124


class HomebrewManager(PackageManager):
    """Package manager backed by the ``brew`` CLI.

    Every mutating call operates on exactly one package so that errors
    can be attributed per package.

    Args:
        dry_run: If True, mutating commands are logged but not executed.
        extra_failure_phrases: User-configured phrases that mark output as failed.
        executable: brew executable to run.
    """

    # Timeouts in seconds
    _QUERY_TIMEOUT: float = 60.0
    _UPDATE_TIMEOUT: float = 60.0
    _INSTALL_TIMEOUT: float = 600.0
    _CLEANUP_TIMEOUT: float = 60.0

    def __init__(
        self,
        dry_run: bool = False,
        extra_failure_phrases: Iterable[str] = (),
        executable: str = "brew",
    ) -> None:
        super().__init__(dry_run=dry_run)
        self._executable = executable
        self._extra_failure_phrases = tuple(extra_failure_phrases)
        self._prefix_cache: dict[str, Path] = {}

    @property
    def name(self) -> str:
        """Return the brew executable name."""
        return self._executable

    def is_available(self) -> bool:
        """Check if the brew CLI is available."""
        return command_exists(self._executable)

    # -- queries -----------------------------------------------------------

    def list_installed(self, kind: PackageKind = PackageKind.CASK) -> list[str]:
        """List installed packages using ``brew list``."""
        result = self._run(["list", kind.flag, "-1"], timeout=self._QUERY_TIMEOUT)
        if not result.success:
            msg = f"brew list {kind.flag} failed: {self._error_text(result)}"
            raise PackageQueryError(msg)
        return _unique_lines(result.stdout)

    def list_outdated(self, kind: PackageKind = PackageKind.CASK, greedy: bool = True) -> list[str]:
        """List outdated packages using ``brew outdated --quiet``."""
        args = ["outdated", kind.flag, "--quiet"]
        if greedy and kind == PackageKind.CASK:
            args.append("--greedy")

        result = self._run(args, timeout=self._QUERY_TIMEOUT)
        if not result.success:
            msg = f"brew outdated {kind.flag} failed: {self._error_text(result)}"
            raise PackageQueryError(msg)
        return _unique_lines(result.stdout)

    def package_info(self, token: str, kind: PackageKind = PackageKind.CASK) -> PackageInfo:
        """Query package metadata using ``brew info --json=v2``.

        Version directories are read from the Caskroom (casks) or the
        Cellar (formulae).
        """
        result = self._run(["info", "--json=v2", kind.flag, token], timeout=self._QUERY_TIMEOUT)
        if not result.success:
            msg = f"brew info {token} failed: {self._error_text(result)}"
            raise PackageQueryError(msg)

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            msg = f"brew info {token} returned invalid JSON: {e}"
            raise PackageQueryError(msg) from e

        entries = data.get("casks" if kind == PackageKind.CASK else "formulae") or []
        if not entries:
            msg = f"brew info returned no {kind.value} named {token}"
            raise PackageQueryError(msg)

        entry: dict[str, Any] = entries[0]
        if kind == PackageKind.CASK:
            installed_version = entry.get("installed")
            app_names = _parse_app_artifacts(entry.get("artifacts") or [])
        else:
            installed = entry.get("installed") or []
            installed_version = installed[-1].get("version") if installed else None
            app_names = ()

        return PackageInfo(
            token=token,
            kind=kind,
            installed_version=installed_version,
            app_names=app_names,
            disk_versions=self._disk_versions(token, kind),
        )

    # -- actions -----------------------------------------------------------

    def reinstall(self, token: str, kind: PackageKind = PackageKind.CASK) -> ActionResult:
        """Force-uninstall a package, then install it fresh.

        Uninstall failures are tolerated: the package may already be
        half-removed, which is the state being repaired.
        """
        action = Action(action_type=ActionType.REINSTALL, package=token, kind=kind)

        if self.dry_run:
            logger.info("Dry-run: Would reinstall %s %s", kind.value, token)
            return ActionResult(action=action, success=True, message="Dry-run: would reinstall")

        logger.info("Force-uninstalling %s: %s", kind.value, token)
        uninstall = self._run(
            ["uninstall", kind.flag, "--force", token], timeout=self._INSTALL_TIMEOUT
        )
        if not uninstall.success:
            logger.debug(
                "Uninstall of %s failed, continuing: %s", token, self._error_text(uninstall)
            )

        logger.info("Installing %s: %s", kind.value, token)
        install = self._run(["install", kind.flag, "--force", token], timeout=self._INSTALL_TIMEOUT)
        return self._create_result(action, install)

    def upgrade(
        self,
        token: str,
        kind: PackageKind = PackageKind.CASK,
        greedy: bool = False,
    ) -> ActionResult:
        """Upgrade a single package with ``brew upgrade``."""
        action = Action(action_type=ActionType.UPGRADE, package=token, kind=kind)

        if self.dry_run:
            logger.info("Dry-run: Would upgrade %s %s", kind.value, token)
            return ActionResult(action=action, success=True, message="Dry-run: would upgrade")

        args = ["upgrade", kind.flag]
        if greedy and kind == PackageKind.CASK:
            args.append("--greedy")
        args.append(token)

        logger.info("Upgrading %s: %s", kind.value, token)
        result = self._run(args, timeout=self._INSTALL_TIMEOUT)
        return self._create_result(action, result)

    # -- housekeeping ------------------------------------------------------

    def self_update(self) -> CommandResult | None:
        """Run ``brew update``. Skipped in dry-run mode."""
        if self.dry_run:
            logger.info("Dry-run: Would run brew update")
            return None
        return self._run(["update"], timeout=self._UPDATE_TIMEOUT)

    def clear_stale_lock(self) -> bool:
        """Remove ``var/homebrew/locks/update`` left behind by an aborted update."""
        try:
            lock = self._brew_path("--prefix") / "var" / "homebrew" / "locks" / "update"
        except PackageQueryError as e:
            logger.debug("Cannot determine brew prefix: %s", e)
            return False

        if not lock.is_file():
            return False

        if self.dry_run:
            logger.info("Dry-run: Would remove stale lock %s", lock)
            return True

        try:
            lock.unlink()
        except OSError as e:
            logger.warning("Failed to remove stale Homebrew lock %s: %s", lock, e)
            return False
        logger.info("Removed stale Homebrew lock %s", lock)
        return True

    def cleanup(self) -> list[CommandResult]:
        """Run ``brew cleanup -s`` and ``brew autoremove``. Skipped in dry-run mode."""
        if self.dry_run:
            logger.info("Dry-run: Would run brew cleanup and autoremove")
            return []
        return [
            self._run(["cleanup", "-s"], timeout=self._CLEANUP_TIMEOUT),
            self._run(["autoremove"], timeout=self._CLEANUP_TIMEOUT),
        ]

    # -- helpers -----------------------------------------------------------

    def _run(self, args: list[str], *, timeout: float) -> CommandResult:
        """Run a brew subcommand.

        Raises:
            PackageManagerUnavailableError: If the brew executable is missing.
        """
        command = [self._executable, *args]
        logger.debug("Running: %s", " ".join(command))
        try:
            return run_command(command, timeout=timeout)
        except FileNotFoundError as e:
            msg = f"{self._executable} not found: {e}"
            raise PackageManagerUnavailableError(msg) from e
        except subprocess.TimeoutExpired:
            logger.warning("%s timed out after %.0fs", " ".join(command), timeout)
            return CommandResult(
                stdout="",
                stderr=f"timed out after {timeout:.0f}s",
                returncode=_TIMEOUT_RETURNCODE,
            )

    def _brew_path(self, flag: str) -> Path:
        """Return a directory reported by brew (``--prefix``, ``--caskroom``, ``--cellar``)."""
        if flag not in self._prefix_cache:
            result = self._run([flag], timeout=self._QUERY_TIMEOUT)
            path = result.stdout.strip()
            if not result.success or not path:
                msg = f"brew {flag} failed: {self._error_text(result)}"
                raise PackageQueryError(msg)
            self._prefix_cache[flag] = Path(path)
        return self._prefix_cache[flag]

    def _disk_versions(self, token: str, kind: PackageKind) -> tuple[str, ...]:
        """List version directories of an installed package."""
        root = self._brew_path("--caskroom" if kind == PackageKind.CASK else "--cellar")
        package_dir = root / token
        try:
            return tuple(
                sorted(
                    entry.name
                    for entry in package_dir.iterdir()
                    if entry.is_dir() and not entry.name.startswith(".")
                )
            )
        except FileNotFoundError:
            return ()
        except OSError as e:
            msg = f"Cannot read {package_dir}: {e}"
            raise PackageQueryError(msg) from e

    def _create_result(self, action: Action, result: CommandResult) -> ActionResult:
        """Create an ActionResult from a CommandResult.

        Output matching a known failure phrase is a failure even when
        brew exited 0.
        """
        output = result.output
        phrase = match_failure_phrase(output, extra=self._extra_failure_phrases)

        if result.success and phrase is None:
            return ActionResult(
                action=action,
                success=True,
                message="Operation completed",
                output=output,
            )

        if phrase is not None:
            error_msg = f"{phrase.hint} ({phrase.phrase!r} in brew output)"
            if result.success:
                logger.warning(
                    "brew %s %s exited 0 but reported: %s",
                    action.action_type.value,
                    action.package,
                    phrase.phrase,
                )
        else:
            error_msg = self._error_text(result)

        return ActionResult(action=action, success=False, error=error_msg, output=output)

    @staticmethod
    def _error_text(result: CommandResult) -> str:
        return summarize_output(result.output)


def _unique_lines(text: str) -> list[str]:
    """Split output into stripped non-empty lines, dropping duplicates in order."""
    seen: set[str] = set()
    lines: list[str] = []
    for line in text.splitlines():
        token = line.strip()
        if token and token not in seen:
            seen.add(token)
            lines.append(token)
    return lines


def _parse_app_artifacts(artifacts: list[Any]) -> tuple[str, ...]:
    """Extract app bundle names from ``brew info --json=v2`` cask artifacts.

    An ``app`` artifact looks like ``{"app": ["Arc.app"]}`` or, when the
    bundle is renamed on install, ``{"app": ["Foo.app", {"target": "Bar.app"}]}``.
    """
    names: list[str] = []
    for artifact in artifacts:
        if not isinstance(artifact, dict) or "app" not in artifact:
            continue
        values = artifact["app"]
        source = next((v for v in values if isinstance(v, str)), None)
        target = next(
            (v["target"] for v in values if isinstance(v, dict) and v.get("target")),
            None,
        )
        name = target or source
        if name:
            names.append(Path(name).name)
    return tuple(names)
