"""Package manager adapters.

This module exports the PackageManager interface, its errors, and the
Homebrew implementation.
"""

from caskctl.managers.base import (
    PackageManager,
    PackageManagerError,
    PackageManagerUnavailableError,
    PackageQueryError,
)
from caskctl.managers.failures import KNOWN_FAILURE_PHRASES, FailurePhrase, match_failure_phrase
from caskctl.managers.homebrew import HomebrewManager

__all__ = [
    "KNOWN_FAILURE_PHRASES",
    "FailurePhrase",
    "HomebrewManager",
    "PackageManager",
    "PackageManagerError",
    "PackageManagerUnavailableError",
    "PackageQueryError",
    "match_failure_phrase",
]
