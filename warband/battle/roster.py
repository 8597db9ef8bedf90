"""Bounded, ordered list of grid positions for one team."""
from __future__ import annotations
from typing import Iterator, List, Optional
from .models import Position

MAX_UNITS = 5

class PositionList:
    """Append / order-preserving remove / in-place replace, capped at ``capacity``.

    Every mutation of a team's placement goes through here, so the
    battlefield's per-team index cannot drift from its own bookkeeping.
    """

    def __init__(self, capacity: int = MAX_UNITS):
        self.capacity = capacity
        self._items: List[Position] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Position]:
        return iter(list(self._items))

    def __getitem__(self, i: int) -> Position:
        return self._items[i]

    def __contains__(self, pos: object) -> bool:
        return pos in self._items

    def __repr__(self) -> str:
        return f"PositionList({self._items!r})"

    def is_full(self) -> bool:
        return len(self._items) >= self.capacity

    def append(self, pos: Position) -> bool:
        if self.is_full() or pos in self._items:
            return False
        self._items.append(Position(*pos))
        return True

    def index(self, pos: Position) -> Optional[int]:
        for i, p in enumerate(self._items):
            if p == pos:
                return i
        return None

    def remove(self, pos: Position) -> bool:
        i = self.index(pos)
        if i is None:
            return False
        # shift down, no reordering
        del self._items[i]
        return True

    def replace(self, old: Position, new: Position) -> bool:
        i = self.index(old)
        if i is None:
            return False
        self._items[i] = Position(*new)
        return True

    def as_list(self) -> List[Position]:
        return list(self._items)
