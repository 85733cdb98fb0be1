"""Public API for char_diff.core."""

from __future__ import annotations

from char_diff.core.calculator import DiffCalculator, DiffOutcome, compute
from char_diff.core.engine import DiffPrimitive, DmpPrimitive, compute_diff, derive_highlight_ranges
from char_diff.core.errors import (
    ContentTooLargeError,
    DiffCalculationError,
    DiffError,
    DiffTimeoutError,
    ErrorKind,
    InvalidContentError,
)
from char_diff.core.models import (
    ChangeIndexEntry,
    DiffData,
    DiffHunk,
    DiffLimits,
    DiffLine,
    DiffMetadata,
    DiffStats,
    EditSegment,
    FileInfo,
    HighlightRange,
    HighlightType,
    LineType,
    OutputMode,
    SegmentKind,
)
from char_diff.core.navigation import ChangeIndex, ChangeNavigator, build_index
from char_diff.core.sanitize import (
    ContentCheck,
    ContentStats,
    SideStats,
    check_content,
    content_stats,
    sanitize,
    validate_size,
)
from char_diff.core.session import DiffSession, SessionState
from char_diff.core.virtualization import FontSize, should_virtualize

__all__ = [
    "ChangeIndex",
    "ChangeIndexEntry",
    "ChangeNavigator",
    "ContentCheck",
    "ContentStats",
    "ContentTooLargeError",
    "DiffCalculationError",
    "DiffCalculator",
    "DiffData",
    "DiffError",
    "DiffHunk",
    "DiffLimits",
    "DiffLine",
    "DiffMetadata",
    "DiffOutcome",
    "DiffPrimitive",
    "DiffSession",
    "DiffStats",
    "DiffTimeoutError",
    "DmpPrimitive",
    "EditSegment",
    "ErrorKind",
    "FileInfo",
    "FontSize",
    "HighlightRange",
    "HighlightType",
    "InvalidContentError",
    "LineType",
    "OutputMode",
    "SegmentKind",
    "SessionState",
    "SideStats",
    "build_index",
    "check_content",
    "compute",
    "compute_diff",
    "content_stats",
    "derive_highlight_ranges",
    "sanitize",
    "should_virtualize",
    "validate_size",
]
