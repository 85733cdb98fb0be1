"""Computation orchestrator that chains the diff pipeline."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from char_diff.core.assembler import assemble
from char_diff.core.engine import compute_diff
from char_diff.core.errors import DiffCalculationError, DiffError
from char_diff.core.models import TIMEOUT_MS, DiffData, DiffLimits
from char_diff.core.sanitize import check_pair, sanitize, validate_size

if TYPE_CHECKING:
    from char_diff.core.engine import DiffPrimitive

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiffOutcome:
    """Explicit result of one computation: either data or an error."""

    data: DiffData | None = None
    error: DiffError | None = None

    @property
    def ok(self) -> bool:
        """True when the computation produced data."""
        return self.error is None and self.data is not None


class DiffCalculator:
    """Orchestrates the computation pipeline.

    Chains: sanitize -> validate_size -> check_pair -> compute_diff -> assemble.
    Known failures propagate as :class:`DiffError` subclasses; anything else
    is wrapped in :class:`DiffCalculationError`.
    """

    def __init__(
        self,
        limits: DiffLimits | None = None,
        *,
        timeout_ms: float = TIMEOUT_MS,
        primitive: DiffPrimitive | None = None,
        isolate: bool = False,
        left_name: str = "left",
        right_name: str = "right",
        lang: str = "text",
    ) -> None:
        """Initialize the calculator.

        Args:
            limits: Size limits. Defaults to DiffLimits() if None.
            timeout_ms: Time budget for the diff primitive.
            primitive: Diff implementation. Defaults to diff-match-patch.
            isolate: Run the primitive in a killable child process.
            left_name: File label for the original side.
            right_name: File label for the modified side.
            lang: Language tag recorded for both sides.
        """
        self._limits = limits or DiffLimits()
        self._timeout_ms = timeout_ms
        self._primitive = primitive
        self._isolate = isolate
        self._left_name = left_name
        self._right_name = right_name
        self._lang = lang

    @property
    def limits(self) -> DiffLimits:
        return self._limits

    def compute(self, left: str | bytes, right: str | bytes) -> DiffData:
        """Run the pipeline on a raw text pair.

        Returns:
            A new DiffData for the pair.

        Raises:
            InvalidContentError: If either side is not valid text.
            ContentTooLargeError: If a size limit is exceeded.
            DiffTimeoutError: If the time budget is exhausted.
            DiffCalculationError: For any other failure.
        """
        started_at = time.perf_counter()
        try:
            sanitized_left = sanitize(left)
            sanitized_right = sanitize(right)
            validate_size(sanitized_left, sanitized_right, self._limits)
            warnings = check_pair(sanitized_left, sanitized_right, self._limits)

            segments = compute_diff(
                sanitized_left,
                sanitized_right,
                self._timeout_ms,
                primitive=self._primitive,
                isolate=self._isolate,
            )

            data = assemble(
                sanitized_left,
                sanitized_right,
                segments,
                started_at=started_at,
                warnings=warnings,
                left_name=self._left_name,
                right_name=self._right_name,
                lang=self._lang,
            )
        except DiffError as exc:
            logger.info("Diff computation failed (%s): %s", exc.kind, exc)
            raise
        except Exception as exc:
            msg = f"Unexpected error during diff calculation: {exc}"
            logger.exception(msg)
            raise DiffCalculationError(msg, exc) from exc

        logger.debug(
            "Computed diff: %d characters, %d changes in %.1f ms",
            data.metadata.total_characters,
            data.stats.changes,
            data.metadata.calculation_time_ms,
        )
        return data

    def try_compute(self, left: str | bytes, right: str | bytes) -> DiffOutcome:
        """Run :meth:`compute` and return the result as a DiffOutcome."""
        try:
            return DiffOutcome(data=self.compute(left, right))
        except DiffError as exc:
            return DiffOutcome(error=exc)


def compute(
    left: str | bytes,
    right: str | bytes,
    limits: DiffLimits | None = None,
    **kwargs: Any,
) -> DiffData:
    """Compute a DiffData for a text pair with a one-off calculator.

    Keyword arguments are passed to :class:`DiffCalculator`.
    """
    return DiffCalculator(limits, **kwargs).compute(left, right)
