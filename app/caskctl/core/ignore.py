"""Ignore list loading.

The ignore file lists package identifiers that are never upgraded
automatically, one per line, with an optional trailing ``#`` comment
giving the reason:

    arc     # app source missing
    opera

Blank lines and comment-only lines are skipped. There is no quoting or
escaping: the identifier is the trimmed text before the first ``#``.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

COMMENT_MARKER = "#"


@dataclass(frozen=True, slots=True)
class IgnoreEntry:
    """One entry of the ignore file.

    Attributes:
        name: Package identifier (exact, case-sensitive).
        reason: Text after the comment marker, if any.
    """

    name: str
    reason: str | None = None

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.name:
            msg = "Ignore entry name cannot be empty"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class IgnoreList:
    """Immutable set of ignored package identifiers.

    Attributes:
        entries: Entries in file order, without duplicates.
        path: File the entries were loaded from, if any.
    """

    entries: tuple[IgnoreEntry, ...] = field(default=())
    path: Path | None = None

    @property
    def names(self) -> frozenset[str]:
        """Return the set of ignored identifiers."""
        return frozenset(entry.name for entry in self.entries)

    def reason_for(self, name: str) -> str | None:
        """Return the reason recorded for an identifier, if any."""
        for entry in self.entries:
            if entry.name == name:
                return entry.reason
        return None

    def __contains__(self, name: object) -> bool:
        return any(entry.name == name for entry in self.entries)

    def __iter__(self) -> Iterator[IgnoreEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


def parse_ignore_line(line: str) -> IgnoreEntry | None:
    """Parse a single ignore file line.

    Args:
        line: Raw line, with or without trailing newline.

    Returns:
        IgnoreEntry, or None for blank, comment-only or malformed lines.
    """
    identifier, marker, comment = line.partition(COMMENT_MARKER)
    identifier = identifier.strip()
    if not identifier:
        return None

    reason = comment.strip() if marker else ""
    return IgnoreEntry(name=identifier, reason=reason or None)


def parse_ignore_lines(lines: Iterable[str]) -> tuple[IgnoreEntry, ...]:
    """Parse ignore file lines into entries.

    The first occurrence of an identifier wins; later duplicates are dropped.

    Args:
        lines: Lines of the ignore file.

    Returns:
        Tuple of entries in file order.
    """
    entries: list[IgnoreEntry] = []
    seen: set[str] = set()

    for lineno, line in enumerate(lines, start=1):
        entry = parse_ignore_line(line)
        if entry is None:
            continue
        if any(ch.isspace() for ch in entry.name):
            logger.warning("Ignore entry on line %d contains whitespace: %r", lineno, entry.name)
        if entry.name in seen:
            logger.debug("Duplicate ignore entry on line %d: %s", lineno, entry.name)
            continue
        seen.add(entry.name)
        entries.append(entry)

    return tuple(entries)


def decode_ignore_lines(data: bytes, path: Path | None = None) -> Iterator[str]:
    """Decode ignore file content one line at a time.

    Undecodable bytes are replaced on their own line and logged, so the
    rest of the file still loads.
    """
    for lineno, raw in enumerate(data.splitlines(), start=1):
        try:
            yield raw.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Line %d of %s is not valid UTF-8", lineno, path or "ignore file")
            yield raw.decode("utf-8", errors="replace")


def load_ignore_list(path: Path) -> IgnoreList:
    """Load the ignore list from a file.

    A missing file is normal and yields an empty list. Unreadable files
    are logged and also yield an empty list. Invalid UTF-8 only affects
    the line it appears on.

    Args:
        path: Path to the ignore file.

    Returns:
        IgnoreList with the parsed entries.
    """
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        logger.debug("No ignore file at %s", path)
        return IgnoreList(path=path)
    except OSError as e:
        logger.warning("Failed to read ignore file %s: %s", path, e)
        return IgnoreList(path=path)

    entries = parse_ignore_lines(decode_ignore_lines(data, path))
    logger.debug("Loaded %d ignore entries from %s", len(entries), path)
    return IgnoreList(entries=entries, path=path)
