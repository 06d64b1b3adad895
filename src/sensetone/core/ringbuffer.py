from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class RingBuffer(Generic[T]):
    """
    Fixed-size history of recent values (e.g. displayed sensor states).
    The oldest entry is dropped once ``capacity`` values are held.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._data: list[Optional[T]] = [None] * capacity
        self._start = 0
        self._size = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, item: T) -> None:
        end = (self._start + self._size) % self._capacity
        self._data[end] = item
        if self._size < self._capacity:
            self._size += 1
        else:
            self._start = (self._start + 1) % self._capacity

    def latest(self) -> Optional[T]:
        """Most recently appended value, or ``None`` when empty."""
        if self._size == 0:
            return None
        return self[-1]

    def __len__(self) -> int:  # pragma: no cover - trivial
        return self._size

    def __getitem__(self, index: int) -> T:
        """Index over the logical contents, oldest first; negative indices allowed."""
        if index < 0:
            index += self._size
        if not 0 <= index < self._size:
            raise IndexError("RingBuffer index out of range")
        item = self._data[(self._start + index) % self._capacity]
        assert item is not None
        return item

    def __iter__(self) -> Iterator[T]:
        for i in range(self._size):
            yield self[i]
