# MIT License (see LICENSE)
"""
Bounded history buffers for trails and plotted series.

A TrailBuffer keeps the most recent ``capacity`` entries in insertion
order; appending to a full buffer evicts the oldest entry.
"""
from __future__ import annotations
from collections import deque
from typing import Generic, Iterator, TypeVar

import numpy as np

T = TypeVar("T")


class TrailBuffer(Generic[T]):
    """
    Append-only ring buffer.

    Example:
        trail = TrailBuffer(capacity=3)
        for x in range(5):
            trail.append(x)
        list(trail)  # [2, 3, 4]
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = int(capacity)
        self._items: deque[T] = deque(maxlen=self.capacity)

    def append(self, item: T) -> None:
        self._items.append(item)

    def clear(self) -> None:
        self._items.clear()

    def latest(self) -> T:
        """Most recently appended entry. Raises IndexError when empty."""
        return self._items[-1]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    @property
    def full(self) -> bool:
        return len(self._items) == self.capacity

    def to_list(self) -> list[T]:
        return list(self._items)


def append_position(trail: TrailBuffer[np.ndarray], position: np.ndarray) -> None:
    """Append a copy of a position vector so later mutation cannot alias it."""
    trail.append(np.array(position, dtype=np.float64, copy=True))
