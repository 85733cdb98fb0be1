"""Input normalization and size validation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from char_diff.core.errors import ContentTooLargeError, InvalidContentError

if TYPE_CHECKING:
    from char_diff.core.models import DiffLimits

logger = logging.getLogger(__name__)

_MIB = 1024 * 1024

LARGE_CONTENT_BYTES = _MIB
SPLIT_CONTENT_BYTES = 5 * _MIB
LARGE_COMPARISON_BYTES = 5 * _MIB
LARGE_COMPARISON_LINES = 5000
VIRTUAL_SCROLL_LINES = 10_000
MEMORY_FACTOR = 2.5
HIGH_MEMORY_BYTES = 50 * _MIB


@dataclass(frozen=True)
class ContentCheck:
    """Outcome of checking one side against the per-side content limits."""

    valid: bool
    warnings: tuple[str, ...] = ()
    violations: tuple[tuple[str, int, int], ...] = ()


@dataclass(frozen=True)
class SideStats:
    """Size of one side and what to do about it."""

    size_bytes: int
    line_count: int
    estimated_memory: float
    is_large: bool
    recommendations: tuple[str, ...] = ()


@dataclass(frozen=True)
class ContentStats:
    """Size report for a text pair."""

    left: SideStats
    right: SideStats
    total_size: int
    is_large_comparison: bool

    @property
    def recommendations(self) -> tuple[str, ...]:
        return self.left.recommendations + self.right.recommendations


def sanitize(raw: str | bytes) -> str:
    """Strip NUL characters and normalize line endings to LF.

    Bytes are decoded as strict UTF-8.

    Raises:
        InvalidContentError: If the input is not text, is not valid UTF-8,
            or contains unpaired surrogates.
    """
    if isinstance(raw, bytes):
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            msg = f"Invalid character encoding at byte {exc.start}; use UTF-8 text"
            raise InvalidContentError(msg) from exc
    elif isinstance(raw, str):
        text = raw
    else:
        msg = f"Expected text, got {type(raw).__name__}"
        raise InvalidContentError(msg)

    try:
        text.encode("utf-8")
    except UnicodeEncodeError as exc:
        msg = f"Invalid character at position {exc.start}; use UTF-8 text"
        raise InvalidContentError(msg) from exc

    return text.replace("\0", "").replace("\r\n", "\n").replace("\r", "\n")


def validate_size(left: str, right: str, limits: DiffLimits) -> None:
    """Enforce the combined and per-side character ceilings.

    Raises:
        ContentTooLargeError: On the first violated ceiling, combined first.
    """
    total = len(left) + len(right)
    if total > limits.max_total_characters:
        msg = (
            f"Combined text is too large to compare: {total} characters "
            f"(limit {limits.max_total_characters})"
        )
        raise ContentTooLargeError(
            msg, scope="combined", limit=limits.max_total_characters, actual=total
        )

    for label, text in (("Left", left), ("Right", right)):
        if len(text) > limits.max_single_side:
            msg = (
                f"Single side text is too large: {label.lower()} side has "
                f"{len(text)} characters (limit {limits.max_single_side})"
            )
            raise ContentTooLargeError(
                msg, scope="single side", limit=limits.max_single_side, actual=len(text)
            )


def check_content(text: str, limits: DiffLimits) -> ContentCheck:
    """Measure one side against byte, line and character limits.

    A measure at or above ``warning_threshold`` of its limit produces a
    warning; a measure above its limit makes the content invalid.
    """
    size_bytes = len(text.encode("utf-8"))
    line_count = len(text.split("\n"))
    char_count = len(text)

    measures = (
        (
            size_bytes,
            limits.max_file_size,
            f"File size is {size_bytes / _MIB:.1f}MB "
            f"(approaching {limits.max_file_size / _MIB:.0f}MB limit)",
            f"file size {size_bytes} bytes exceeds {limits.max_file_size}",
        ),
        (
            line_count,
            limits.max_lines,
            f"Line count is {line_count} (approaching {limits.max_lines} limit)",
            f"line count {line_count} exceeds {limits.max_lines}",
        ),
        (
            char_count,
            limits.max_characters,
            f"Character count is {char_count} (approaching {limits.max_characters} limit)",
            f"character count {char_count} exceeds {limits.max_characters}",
        ),
    )

    warnings: list[str] = []
    violations: list[tuple[str, int, int]] = []
    for actual, limit, warning, violation in measures:
        if actual >= limit * limits.warning_threshold:
            warnings.append(warning)
        if actual > limit:
            violations.append((violation, limit, actual))

    return ContentCheck(
        valid=not violations,
        warnings=tuple(warnings),
        violations=tuple(violations),
    )


def check_pair(left: str, right: str, limits: DiffLimits) -> tuple[str, ...]:
    """Run :func:`check_content` on both sides.

    Returns:
        Warnings for both sides, prefixed with the side label.

    Raises:
        ContentTooLargeError: If either side violates a per-side limit.
    """
    warnings: list[str] = []
    for label, text in (("left", left), ("right", right)):
        check = check_content(text, limits)
        if not check.valid:
            _, limit, actual = check.violations[0]
            msg = f"Content is too large ({label} side): " + "; ".join(
                v[0] for v in check.violations
            )
            raise ContentTooLargeError(msg, scope="content", limit=limit, actual=actual)
        for warning in check.warnings:
            logger.warning("%s side: %s", label, warning)
            warnings.append(f"{label}: {warning}")
    return tuple(warnings)


def side_stats(text: str) -> SideStats:
    """Measure one side and suggest how to handle it if it is large.

    Memory use is estimated as 2.5 times the UTF-8 size.
    """
    size_bytes = len(text.encode("utf-8"))
    line_count = len(text.split("\n"))
    estimated_memory = size_bytes * MEMORY_FACTOR

    recommendations: list[str] = []
    if size_bytes > SPLIT_CONTENT_BYTES:
        recommendations.append("Consider splitting large content into smaller chunks")
    if line_count > VIRTUAL_SCROLL_LINES:
        recommendations.append("Enable virtual scrolling for better performance")
    if estimated_memory > HIGH_MEMORY_BYTES:
        recommendations.append("Content may cause high memory usage")

    return SideStats(
        size_bytes=size_bytes,
        line_count=line_count,
        estimated_memory=estimated_memory,
        is_large=size_bytes > LARGE_CONTENT_BYTES,
        recommendations=tuple(recommendations),
    )


def content_stats(left: str, right: str) -> ContentStats:
    """Report per-side sizes and whether the pair counts as a large comparison."""
    left_stats = side_stats(left)
    right_stats = side_stats(right)
    total_size = left_stats.size_bytes + right_stats.size_bytes
    return ContentStats(
        left=left_stats,
        right=right_stats,
        total_size=total_size,
        is_large_comparison=(
            left_stats.line_count > LARGE_COMPARISON_LINES
            or right_stats.line_count > LARGE_COMPARISON_LINES
            or total_size > LARGE_COMPARISON_BYTES
        ),
    )
