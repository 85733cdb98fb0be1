"""JSON export renderer."""

from __future__ import annotations

import dataclasses
import json
import sys
from datetime import datetime
from typing import TYPE_CHECKING

from char_diff.core.errors import ContentTooLargeError, DiffCalculationError, DiffTimeoutError
from char_diff.core.navigation import build_index
from char_diff.core.sanitize import content_stats

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import TextIO

    from char_diff.core.errors import DiffError
    from char_diff.core.models import DiffData, DiffStats


class _DiffEncoder(json.JSONEncoder):
    """Encodes metadata timestamps as ISO-8601 strings."""

    def default(self, o: object) -> object:
        if isinstance(o, datetime):
            return o.isoformat()
        return super().default(o)


def error_payload(error: DiffError) -> dict[str, object]:
    """Describe a DiffError as plain JSON-ready values.

    Besides the kind and message, size errors carry their scope and
    numbers, timeouts their budget, and calculation failures the type of
    the underlying cause when one was kept.
    """
    payload: dict[str, object] = {
        "kind": error.kind,
        "message": str(error),
        "recoverable": error.recoverable,
        "offers_reduce_content": error.offers_reduce_content,
    }
    if isinstance(error, ContentTooLargeError):
        payload.update(scope=error.scope, limit=error.limit, actual=error.actual)
    elif isinstance(error, DiffTimeoutError):
        payload.update(timeout_ms=error.timeout_ms, elapsed_ms=error.elapsed_ms)
    elif isinstance(error, DiffCalculationError) and error.cause is not None:
        payload["cause"] = type(error.cause).__name__
    return payload


class JsonRenderer:
    """Renders diff data as JSON to a text stream.

    Output modes:
    - render(): DiffData plus the numbered change list and a content report
    - render_stats(): Summary DiffStats only
    - render_error() / render_errors(): one error or an error history

    Output goes to stdout by default. Pass a custom TextIO for
    testing or embedding.
    """

    def __init__(self, output: TextIO | None = None, *, indent: int = 2) -> None:
        """Initialize with an optional output stream.

        Args:
            output: Text stream for JSON output. Defaults to sys.stdout.
            indent: JSON indentation level. Defaults to 2.
        """
        self._output = output or sys.stdout
        self._indent = indent

    def render(self, data: DiffData) -> None:
        """Serialize the diff data, its change list and a content report."""
        payload = dataclasses.asdict(data)
        payload["changes"] = [
            {
                "index": entry.sequential_index,
                "hunk_index": entry.hunk_index,
                "line_index": entry.line_index,
            }
            for entry in build_index(data).entries
        ]
        stats = content_stats(data.old_file.content, data.new_file.content)
        payload["content"] = {
            "left_lines": stats.left.line_count,
            "right_lines": stats.right.line_count,
            "total_size": stats.total_size,
            "is_large_comparison": stats.is_large_comparison,
            "recommendations": list(stats.recommendations),
        }
        self._dump(payload)

    def render_stats(self, stats: DiffStats) -> None:
        """Serialize summary statistics as JSON."""
        self._dump(dataclasses.asdict(stats))

    def render_error(self, error: DiffError) -> None:
        """Serialize a failed computation as ``{"error": {...}}``."""
        self._dump({"error": error_payload(error)})

    def render_errors(self, errors: Iterable[DiffError]) -> None:
        """Serialize an error history, oldest first, as ``{"errors": [...]}``."""
        self._dump({"errors": [error_payload(e) for e in errors]})

    def _dump(self, payload: dict[str, object]) -> None:
        json.dump(payload, self._output, cls=_DiffEncoder, indent=self._indent)
        self._output.write("\n")
