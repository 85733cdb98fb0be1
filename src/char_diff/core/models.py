"""Data models for char-diff computation results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from datetime import datetime

TIMEOUT_MS = 5000
MAX_TOTAL_CHARACTERS = 50_000
MAX_SINGLE_SIDE = 100_000
DEBOUNCE_MS = 300

_MAX_FILE_SIZE = 10 * 1024 * 1024
_MAX_LINES = 50_000
_MAX_CHARACTERS = 1_000_000
_WARNING_THRESHOLD = 0.8


class OutputMode(StrEnum):
    """Output format for reporting results."""

    rich = "rich"
    json = "json"


class HighlightType(StrEnum):
    """Kind of character span marked inside a rendered line."""

    added = "added"
    removed = "removed"


class LineType(StrEnum):
    """Type of a line within a hunk."""

    add = "add"
    delete = "delete"
    context = "context"
    modify = "modify"


class SegmentKind(StrEnum):
    """Kind of an edit segment produced by the diff primitive."""

    equal = "equal"
    inserted = "inserted"
    deleted = "deleted"


@dataclass(frozen=True)
class EditSegment:
    """A contiguous run of equal, inserted or deleted characters."""

    text: str
    kind: SegmentKind


@dataclass(frozen=True)
class HighlightRange:
    """A ``[start, end)`` interval over rendered line content."""

    start: int
    end: int
    type: HighlightType


@dataclass(frozen=True)
class DiffLine:
    """A single line within a hunk."""

    type: LineType
    content: str
    old_line_number: int | None = None
    new_line_number: int | None = None
    highlight_ranges: tuple[HighlightRange, ...] | None = None


@dataclass(frozen=True)
class DiffHunk:
    """A contiguous block of compared lines."""

    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    lines: tuple[DiffLine, ...]


@dataclass(frozen=True)
class DiffStats:
    """Character counts of inserted and deleted text."""

    additions: int
    deletions: int
    changes: int

    @classmethod
    def from_segments(cls, segments: Iterable[EditSegment]) -> DiffStats:
        """Sum inserted and deleted segment lengths."""
        additions = 0
        deletions = 0
        for segment in segments:
            if segment.kind == SegmentKind.inserted:
                additions += len(segment.text)
            elif segment.kind == SegmentKind.deleted:
                deletions += len(segment.text)
        return cls(additions=additions, deletions=deletions, changes=additions + deletions)


@dataclass(frozen=True)
class DiffMetadata:
    """Timing and size information about one computation."""

    calculation_time_ms: float
    total_characters: int
    changes_count: int
    timestamp: datetime
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class FileInfo:
    """One side of a comparison."""

    file_name: str
    content: str
    lang: str = "text"


@dataclass(frozen=True)
class DiffData:
    """Top-level result of a successful computation."""

    old_file: FileInfo
    new_file: FileInfo
    hunks: tuple[DiffHunk, ...]
    stats: DiffStats
    metadata: DiffMetadata

    def iter_lines(self) -> Iterator[tuple[int, int, DiffLine]]:
        """Yield ``(hunk_index, line_index, line)`` in document order."""
        for hunk_index, hunk in enumerate(self.hunks):
            for line_index, line in enumerate(hunk.lines):
                yield hunk_index, line_index, line


@dataclass(frozen=True)
class ChangeIndexEntry:
    """Position of a non-context line and its sequential change number."""

    hunk_index: int
    line_index: int
    sequential_index: int


@dataclass(frozen=True)
class DiffLimits:
    """Immutable size limits applied before any comparison work.

    ``max_total_characters`` and ``max_single_side`` bound the character
    diff itself. The remaining fields bound each side independently and
    drive "approaching limit" warnings at ``warning_threshold`` of each limit.
    """

    max_total_characters: int = MAX_TOTAL_CHARACTERS
    max_single_side: int = MAX_SINGLE_SIDE
    max_file_size: int = _MAX_FILE_SIZE
    max_lines: int = _MAX_LINES
    max_characters: int = _MAX_CHARACTERS
    warning_threshold: float = _WARNING_THRESHOLD

    def __post_init__(self) -> None:
        for name in (
            "max_total_characters",
            "max_single_side",
            "max_file_size",
            "max_lines",
            "max_characters",
        ):
            value = getattr(self, name)
            if value <= 0:
                msg = f"{name} must be positive, got {value}"
                raise ValueError(msg)
        if not 0 < self.warning_threshold <= 1:
            msg = f"warning_threshold must be in (0, 1], got {self.warning_threshold}"
            raise ValueError(msg)
