"""Renderer protocol for diff reports."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from char_diff.core.errors import DiffError
    from char_diff.core.models import DiffData, DiffStats


@runtime_checkable
class Renderer(Protocol):
    """Protocol for reporting diff results.

    Implementations write a full report with :meth:`render`, a summary
    with :meth:`render_stats`, or a failure with :meth:`render_error` to
    their destination (console, stream, etc.).
    """

    def render(self, data: DiffData) -> None:
        """Report the full diff data."""
        ...

    def render_stats(self, stats: DiffStats) -> None:
        """Report summary statistics only."""
        ...

    def render_error(self, error: DiffError) -> None:
        """Report a failed computation."""
        ...
