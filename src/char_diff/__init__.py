"""char-diff: time-bounded character-level text comparison."""

from __future__ import annotations

import logging

from char_diff.core import (
    ChangeNavigator,
    DiffCalculator,
    DiffData,
    DiffError,
    DiffLimits,
    DiffSession,
    build_index,
    compute,
    should_virtualize,
)

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ChangeNavigator",
    "DiffCalculator",
    "DiffData",
    "DiffError",
    "DiffLimits",
    "DiffSession",
    "__version__",
    "build_index",
    "compute",
    "should_virtualize",
]
