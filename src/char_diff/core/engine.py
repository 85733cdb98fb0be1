"""Character diff engine using diff-match-patch."""

from __future__ import annotations

import logging
import multiprocessing
import time
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from diff_match_patch import diff_match_patch

from char_diff.core.errors import DiffCalculationError, DiffError, DiffTimeoutError
from char_diff.core.models import (
    TIMEOUT_MS,
    EditSegment,
    HighlightRange,
    HighlightType,
    SegmentKind,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from multiprocessing.connection import Connection

logger = logging.getLogger(__name__)

_DMP_KINDS: dict[int, SegmentKind] = {
    diff_match_patch.DIFF_EQUAL: SegmentKind.equal,
    diff_match_patch.DIFF_INSERT: SegmentKind.inserted,
    diff_match_patch.DIFF_DELETE: SegmentKind.deleted,
}


@runtime_checkable
class DiffPrimitive(Protocol):
    """Protocol for minimal-edit-distance character diff implementations.

    Implementations return ordered segments whose equal and deleted text
    reconstructs ``left`` and whose equal and inserted text reconstructs
    ``right``. ``timeout`` is a budget in seconds the implementation may
    check at its own yield points; ``None`` means unbounded.
    """

    def diff(self, left: str, right: str, *, timeout: float | None) -> Sequence[EditSegment]:
        """Compute the edit script from left to right."""
        ...


class DmpPrimitive:
    """Default primitive backed by :func:`diff_match_patch.diff_main`.

    No semantic cleanup is applied, so segments stay character accurate.
    The timeout is handed to the library as ``Diff_Timeout``; the library
    checks it between bisection steps and returns a coarser (but still
    valid) script once it expires.
    """

    def diff(self, left: str, right: str, *, timeout: float | None) -> Sequence[EditSegment]:
        """Compute the edit script from left to right."""
        dmp = diff_match_patch()
        dmp.Diff_Timeout = timeout or 0
        return [
            EditSegment(text=text, kind=_DMP_KINDS[op])
            for op, text in dmp.diff_main(left, right, checklines=False)
            if text
        ]


def compute_diff(
    left: str,
    right: str,
    timeout_ms: float = TIMEOUT_MS,
    *,
    primitive: DiffPrimitive | None = None,
    isolate: bool = False,
) -> tuple[EditSegment, ...]:
    """Run the diff primitive under a time budget.

    By default the primitive runs inline and the budget is cooperative: the
    elapsed time is checked once the primitive returns, so a primitive that
    never yields is only reported as timed out after it finishes. With
    ``isolate=True`` the primitive runs in a child process that is
    terminated when the budget expires.

    Args:
        left: Sanitized original text.
        right: Sanitized modified text.
        timeout_ms: Time budget in milliseconds.
        primitive: Diff implementation. Defaults to :class:`DmpPrimitive`.
        isolate: Run the primitive in a separately killable process.

    Returns:
        Ordered edit segments covering both inputs.

    Raises:
        ValueError: If ``timeout_ms`` is not positive.
        DiffTimeoutError: If the budget is exhausted.
        DiffCalculationError: If the primitive fails or returns an
            inconsistent edit script.
    """
    if timeout_ms <= 0:
        msg = f"timeout_ms must be positive, got {timeout_ms}"
        raise ValueError(msg)

    primitive = primitive or DmpPrimitive()
    if isolate:
        segments = _run_isolated(primitive, left, right, timeout_ms)
    else:
        segments = _run_cooperative(primitive, left, right, timeout_ms)

    _verify_segments(segments, left, right)
    return segments


def _run_cooperative(
    primitive: DiffPrimitive,
    left: str,
    right: str,
    timeout_ms: float,
) -> tuple[EditSegment, ...]:
    """Call the primitive inline and compare elapsed time to the budget."""
    started = time.perf_counter()
    try:
        segments = tuple(primitive.diff(left, right, timeout=timeout_ms / 1000))
    except DiffError:
        raise
    except Exception as exc:
        msg = f"Diff calculation failed: {exc}"
        raise DiffCalculationError(msg, exc) from exc
    elapsed_ms = (time.perf_counter() - started) * 1000

    if elapsed_ms >= timeout_ms:
        logger.warning("Diff exceeded budget: %.0f ms >= %g ms", elapsed_ms, timeout_ms)
        raise DiffTimeoutError(timeout_ms, elapsed_ms)

    logger.debug("Diff produced %d segments in %.1f ms", len(segments), elapsed_ms)
    return segments


def _isolated_worker(
    conn: Connection,
    primitive: DiffPrimitive,
    left: str,
    right: str,
) -> None:
    """Child process body: compute and send ``(status, payload)``."""
    try:
        segments = tuple(primitive.diff(left, right, timeout=None))
    except Exception as exc:  # reported to the parent as a calculation failure
        conn.send(("error", f"{type(exc).__name__}: {exc}"))
    else:
        conn.send(("ok", segments))
    finally:
        conn.close()


def _run_isolated(
    primitive: DiffPrimitive,
    left: str,
    right: str,
    timeout_ms: float,
) -> tuple[EditSegment, ...]:
    """Run the primitive in a child process and kill it on timeout.

    Exceptions raised in the child cross the pipe as text, so the
    resulting DiffCalculationError has no ``cause``. Errors from starting
    the process (for example an unpicklable primitive) propagate as is.
    """
    ctx = multiprocessing.get_context()
    parent_conn, child_conn = ctx.Pipe(duplex=False)
    process = ctx.Process(
        target=_isolated_worker,
        args=(child_conn, primitive, left, right),
        daemon=True,
    )

    started = time.perf_counter()
    process_started = False
    try:
        process.start()
        process_started = True
        child_conn.close()
        if not parent_conn.poll(timeout_ms / 1000):
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.warning("Terminating diff worker %s after %.0f ms", process.pid, elapsed_ms)
            raise DiffTimeoutError(timeout_ms, elapsed_ms)
        try:
            status, payload = parent_conn.recv()
        except EOFError as exc:
            msg = f"Diff worker exited without a result (exit code {process.exitcode})"
            raise DiffCalculationError(msg, exc) from exc
    finally:
        parent_conn.close()
        child_conn.close()
        if process_started:
            if process.is_alive():
                process.terminate()
            process.join()

    if status != "ok":
        msg = f"Diff calculation failed: {payload}"
        raise DiffCalculationError(msg)
    return payload


def _verify_segments(segments: tuple[EditSegment, ...], left: str, right: str) -> None:
    """Check that the segments reconstruct both inputs."""
    old_parts: list[str] = []
    new_parts: list[str] = []
    for segment in segments:
        if not isinstance(segment, EditSegment):
            msg = f"Diff primitive returned {type(segment).__name__}, expected EditSegment"
            raise DiffCalculationError(msg)
        if segment.kind != SegmentKind.inserted:
            old_parts.append(segment.text)
        if segment.kind != SegmentKind.deleted:
            new_parts.append(segment.text)

    if "".join(old_parts) != left or "".join(new_parts) != right:
        msg = "Diff primitive returned segments that do not reconstruct the inputs"
        raise DiffCalculationError(msg)


def derive_highlight_ranges(
    segments: Iterable[EditSegment],
    content_length: int | None = None,
) -> tuple[HighlightRange, ...]:
    """Convert edit segments into highlight ranges over rendered content.

    The cursor walks the rendered text (equal plus inserted text). Inserted
    text is marked ``added`` and advances the cursor. Deleted text is marked
    ``removed`` at the cursor without advancing it, anchoring the deletion
    between the surrounding kept text.

    Args:
        segments: Ordered edit segments.
        content_length: Length of the rendered line. When given, ranges are
            clamped to it.

    Returns:
        Non-empty ranges sorted by start.
    """
    ranges: list[HighlightRange] = []
    pos = 0

    for segment in segments:
        length = len(segment.text)
        if segment.kind == SegmentKind.inserted:
            ranges.append(HighlightRange(pos, pos + length, HighlightType.added))
            pos += length
        elif segment.kind == SegmentKind.deleted:
            ranges.append(HighlightRange(pos, pos + length, HighlightType.removed))
        else:
            pos += length

    ranges.sort(key=lambda r: r.start)

    if content_length is not None:
        ranges = [
            HighlightRange(min(r.start, content_length), min(r.end, content_length), r.type)
            for r in ranges
        ]

    return tuple(r for r in ranges if r.start < r.end)
