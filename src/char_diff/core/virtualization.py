"""Policy for choosing windowed over full rendering of long line lists."""

from __future__ import annotations

import math
from enum import StrEnum

ITEM_THRESHOLD = 100
LINE_THRESHOLD = 1000
VISIBLE_FRACTION = 0.2
LINE_HEIGHT_FACTOR = 1.5


class FontSize(StrEnum):
    """Editor font size preset."""

    small = "small"
    medium = "medium"
    large = "large"


_BASE_FONT_PX: dict[FontSize, int] = {
    FontSize.small: 16,
    FontSize.medium: 18,
    FontSize.large: 20,
}


def should_virtualize(
    line_count: int,
    item_height: float,
    container_height: float,
    threshold: int = ITEM_THRESHOLD,
) -> bool:
    """Decide whether a list of lines needs windowed rendering.

    True when ``line_count`` exceeds ``threshold`` or when the container
    shows less than 20% of the lines.

    Raises:
        ValueError: If ``item_height`` is not positive.
    """
    if item_height <= 0:
        msg = f"item_height must be positive, got {item_height}"
        raise ValueError(msg)
    if line_count > threshold:
        return True
    if line_count <= 0:
        return False
    return (container_height / item_height) / line_count < VISIBLE_FRACTION


def calculate_item_height(font_size: FontSize | str) -> float:
    """Row height in pixels for a font size preset."""
    return _BASE_FONT_PX[FontSize(font_size)] * LINE_HEIGHT_FACTOR


def calculate_container_height(max_height: float, item_height: float) -> float:
    """Largest height not above ``max_height`` that fits whole rows."""
    if item_height <= 0:
        msg = f"item_height must be positive, got {item_height}"
        raise ValueError(msg)
    return math.floor(max_height / item_height) * item_height
