"""Error taxonomy for diff computation failures.

Every error is recoverable: callers are expected to offer a retry, and for
content-size and invalid-content errors also a "reduce or clear content"
action. A failed computation never touches a previously produced result.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Category of a diff computation failure."""

    timeout = "processing-timeout"
    content_too_large = "content-size"
    invalid_content = "invalid-content"
    calculation_failure = "diff-computation"


class DiffError(Exception):
    """Base class for all diff computation failures."""

    kind: ErrorKind = ErrorKind.calculation_failure
    recoverable: bool = True

    @property
    def offers_reduce_content(self) -> bool:
        """Whether reducing or clearing the input can resolve the failure."""
        return self.kind in (ErrorKind.content_too_large, ErrorKind.invalid_content)


class DiffTimeoutError(DiffError):
    """Raised when the computation exceeds its time budget."""

    kind = ErrorKind.timeout

    def __init__(self, timeout_ms: float, elapsed_ms: float | None = None) -> None:
        self.timeout_ms = timeout_ms
        self.elapsed_ms = elapsed_ms
        msg = f"Diff calculation exceeded the {timeout_ms:g} ms time limit"
        if elapsed_ms is not None:
            msg += f" (took {elapsed_ms:.0f} ms)"
        super().__init__(msg + "; the text may be too large to compare")


class ContentTooLargeError(DiffError):
    """Raised when input exceeds a configured size limit.

    ``scope`` is ``"combined"``, ``"single side"`` or ``"content"``.
    """

    kind = ErrorKind.content_too_large

    def __init__(self, message: str, *, scope: str, limit: int, actual: int) -> None:
        super().__init__(message)
        self.scope = scope
        self.limit = limit
        self.actual = actual


class InvalidContentError(DiffError):
    """Raised when input cannot be processed as valid text."""

    kind = ErrorKind.invalid_content


class DiffCalculationError(DiffError):
    """Raised for any other internal failure, keeping the original cause."""

    kind = ErrorKind.calculation_failure

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause
