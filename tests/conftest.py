"""Shared test fixtures for char-diff."""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

import pytest

from char_diff.core.models import (
    DiffData,
    DiffHunk,
    DiffLine,
    DiffMetadata,
    DiffStats,
    EditSegment,
    FileInfo,
    LineType,
    SegmentKind,
)

DiffDataFactory = Callable[[Sequence[Sequence[LineType]]], DiffData]


def _naive_segments(left: str, right: str) -> list[EditSegment]:
    """Delete everything, insert everything: valid but not minimal."""
    segments = []
    if left:
        segments.append(EditSegment(left, SegmentKind.deleted))
    if right:
        segments.append(EditSegment(right, SegmentKind.inserted))
    return segments


class SlowPrimitive:
    """Primitive that sleeps before answering."""

    def __init__(self, delay: float) -> None:
        self.delay = delay
        self.calls = 0

    def diff(self, left: str, right: str, *, timeout: float | None) -> Sequence[EditSegment]:
        self.calls += 1
        time.sleep(self.delay)
        return _naive_segments(left, right)


class FailingPrimitive:
    """Primitive that always raises."""

    def diff(self, left: str, right: str, *, timeout: float | None) -> Sequence[EditSegment]:
        msg = "primitive exploded"
        raise RuntimeError(msg)


class InconsistentPrimitive:
    """Primitive whose segments do not reconstruct the inputs."""

    def diff(self, left: str, right: str, *, timeout: float | None) -> Sequence[EditSegment]:
        return [EditSegment("something else", SegmentKind.equal)]


@pytest.fixture
def slow_primitive() -> SlowPrimitive:
    return SlowPrimitive(delay=0.05)


@pytest.fixture
def failing_primitive() -> FailingPrimitive:
    return FailingPrimitive()


@pytest.fixture
def inconsistent_primitive() -> InconsistentPrimitive:
    return InconsistentPrimitive()


@pytest.fixture
def make_diff_data() -> DiffDataFactory:
    """Build a DiffData whose hunks contain lines of the given types.

    Each inner sequence is one hunk; each entry is the type of one line.
    """

    def _make(hunk_types: Sequence[Sequence[LineType]]) -> DiffData:
        hunks = []
        for types in hunk_types:
            lines = tuple(
                DiffLine(type=t, content=f"line {i}", old_line_number=i, new_line_number=i)
                for i, t in enumerate(types)
            )
            hunks.append(
                DiffHunk(
                    old_start=1,
                    old_lines=len(lines),
                    new_start=1,
                    new_lines=len(lines),
                    lines=lines,
                )
            )
        changes = sum(1 for _, _, line in _iter(hunks) if line.type != LineType.context)
        return DiffData(
            old_file=FileInfo("left", "old"),
            new_file=FileInfo("right", "new"),
            hunks=tuple(hunks),
            stats=DiffStats(additions=0, deletions=0, changes=0),
            metadata=DiffMetadata(
                calculation_time_ms=0.0,
                total_characters=6,
                changes_count=changes,
                timestamp=datetime(2025, 1, 1, tzinfo=UTC),
            ),
        )

    return _make


def _iter(hunks: list[DiffHunk]):
    for h, hunk in enumerate(hunks):
        for i, line in enumerate(hunk.lines):
            yield h, i, line
