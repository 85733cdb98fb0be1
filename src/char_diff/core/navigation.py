"""Change index and "jump to change" navigation over DiffData."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from char_diff.core.models import ChangeIndexEntry, LineType

if TYPE_CHECKING:
    from char_diff.core.models import DiffData


@dataclass(frozen=True)
class ChangeIndex:
    """Dense, zero-based numbering of every non-context line."""

    entries: tuple[ChangeIndexEntry, ...] = ()
    _by_position: dict[tuple[int, int], int] = field(
        default_factory=dict, repr=False, compare=False
    )

    @property
    def total_changes(self) -> int:
        return len(self.entries)

    def index_of(self, hunk_index: int, line_index: int) -> int | None:
        """Return the change number of a line, or None for context lines."""
        return self._by_position.get((hunk_index, line_index))

    def position_of(self, sequential_index: int) -> tuple[int, int]:
        """Return ``(hunk_index, line_index)`` for a change number.

        Raises:
            IndexError: If the change number is out of range.
        """
        if not 0 <= sequential_index < len(self.entries):
            msg = f"Change {sequential_index} out of range (total {len(self.entries)})"
            raise IndexError(msg)
        entry = self.entries[sequential_index]
        return entry.hunk_index, entry.line_index


def build_index(diff_data: DiffData | None) -> ChangeIndex:
    """Number the non-context lines of a DiffData in document order."""
    if diff_data is None:
        return ChangeIndex()

    entries: list[ChangeIndexEntry] = []
    for hunk_index, line_index, line in diff_data.iter_lines():
        if line.type != LineType.context:
            entries.append(ChangeIndexEntry(hunk_index, line_index, len(entries)))

    return ChangeIndex(
        entries=tuple(entries),
        _by_position={(e.hunk_index, e.line_index): e.sequential_index for e in entries},
    )


class ChangeNavigator:
    """Tracks the selected change and moves it first/previous/next/last.

    Moves that are disabled at the current position are no-ops. With no
    changes the selection is None and every move is disabled.
    """

    def __init__(self, index: ChangeIndex | None = None) -> None:
        self._index = ChangeIndex()
        self._current: int | None = None
        if index is not None:
            self.update(index)

    @property
    def index(self) -> ChangeIndex:
        return self._index

    @property
    def current(self) -> int | None:
        return self._current

    @property
    def total_changes(self) -> int:
        return self._index.total_changes

    @property
    def can_go_previous(self) -> bool:
        return self._current is not None and self._current > 0

    @property
    def can_go_next(self) -> bool:
        return self._current is not None and self._current < self.total_changes - 1

    @property
    def current_position(self) -> tuple[int, int] | None:
        """``(hunk_index, line_index)`` of the selection, if any."""
        if self._current is None:
            return None
        return self._index.position_of(self._current)

    def update(self, index: ChangeIndex) -> int | None:
        """Switch to a rebuilt index, keeping the selection when still valid."""
        self._index = index
        total = index.total_changes
        if total == 0:
            self._current = None
        elif self._current is None or self._current >= total:
            self._current = 0
        return self._current

    def first(self) -> int | None:
        if self.can_go_previous:
            self._current = 0
        return self._current

    def previous(self) -> int | None:
        if self.can_go_previous and self._current is not None:
            self._current -= 1
        return self._current

    def next(self) -> int | None:
        if self.can_go_next and self._current is not None:
            self._current += 1
        return self._current

    def last(self) -> int | None:
        if self.can_go_next:
            self._current = self.total_changes - 1
        return self._current
