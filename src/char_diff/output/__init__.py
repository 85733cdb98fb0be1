"""Public API for char_diff.output."""

from __future__ import annotations

from char_diff.output.base import Renderer
from char_diff.output.json_output import JsonRenderer
from char_diff.output.rich_output import RichRenderer

__all__ = [
    "JsonRenderer",
    "Renderer",
    "RichRenderer",
]
