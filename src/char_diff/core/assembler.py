"""Assembly of edit segments into an immutable DiffData structure."""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from char_diff.core.engine import derive_highlight_ranges
from char_diff.core.models import (
    DiffData,
    DiffHunk,
    DiffLine,
    DiffMetadata,
    DiffStats,
    FileInfo,
    LineType,
    SegmentKind,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from char_diff.core.models import EditSegment


def has_changes(segments: Sequence[EditSegment]) -> bool:
    """Return True if any segment is inserted or deleted."""
    return any(s.kind != SegmentKind.equal for s in segments)


def build_lines(
    left: str,
    right: str,
    segments: Sequence[EditSegment],
) -> tuple[DiffLine, ...]:
    """Build the lines of the single comparison block.

    The whole pair forms one pseudo-line: ``modify`` when anything changed,
    ``context`` otherwise. Highlight ranges index into the modify line's
    content, which is ``right`` unless it is empty.
    """
    if not has_changes(segments):
        return (
            DiffLine(
                type=LineType.context,
                content=left,
                old_line_number=0,
                new_line_number=0,
            ),
        )

    content = right or left
    ranges = derive_highlight_ranges(segments, content_length=len(content))
    return (
        DiffLine(
            type=LineType.modify,
            content=content,
            old_line_number=0,
            new_line_number=0,
            highlight_ranges=ranges or None,
        ),
    )


def build_hunk(left: str, right: str, lines: tuple[DiffLine, ...]) -> DiffHunk:
    """Wrap the block lines in a hunk spanning both inputs."""
    return DiffHunk(
        old_start=0,
        old_lines=1 if left else 0,
        new_start=0,
        new_lines=1 if right else 0,
        lines=lines,
    )


def assemble(
    left: str,
    right: str,
    segments: Sequence[EditSegment],
    *,
    started_at: float,
    warnings: tuple[str, ...] = (),
    left_name: str = "left",
    right_name: str = "right",
    lang: str = "text",
) -> DiffData:
    """Package sanitized inputs, highlights and statistics.

    Args:
        left: Sanitized original text.
        right: Sanitized modified text.
        segments: Edit segments from the engine.
        started_at: :func:`time.perf_counter` reading taken before
            sanitization, used for ``calculation_time_ms``.
        warnings: Size warnings to carry in the metadata.
        left_name: Label for the original side.
        right_name: Label for the modified side.
        lang: Language tag for both sides.

    Returns:
        A fully built, immutable DiffData.
    """
    lines = build_lines(left, right, segments)
    hunk = build_hunk(left, right, lines)
    stats = DiffStats.from_segments(segments)

    metadata = DiffMetadata(
        calculation_time_ms=(time.perf_counter() - started_at) * 1000,
        total_characters=len(left) + len(right),
        changes_count=sum(1 for line in lines if line.type != LineType.context),
        timestamp=datetime.now(UTC),
        warnings=warnings,
    )

    return DiffData(
        old_file=FileInfo(file_name=left_name, content=left, lang=lang),
        new_file=FileInfo(file_name=right_name, content=right, lang=lang),
        hunks=(hunk,),
        stats=stats,
        metadata=metadata,
    )
