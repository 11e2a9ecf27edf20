"""Fixed-capacity, insertion-ordered sample buffers.

Overflow evicts from the front (oldest inserted first), regardless of the
samples' own timestamps.
"""

from __future__ import annotations

from typing import Callable, Generic, Iterable, Iterator, TypeVar, overload

T = TypeVar("T")


class BoundedBuffer(Generic[T]):
    """A list capped at *maxlen* elements."""

    def __init__(self, maxlen: int, items: Iterable[T] = ()) -> None:
        if maxlen <= 0:
            raise ValueError("maxlen must be positive")
        self.maxlen = maxlen
        self._items: list[T] = []
        for item in items:
            self.append(item)

    def append(self, item: T) -> None:
        self._items.append(item)
        self.trim()

    def trim(self) -> None:
        """Drop leading elements until the length is within the cap."""
        excess = len(self._items) - self.maxlen
        if excess > 0:
            del self._items[:excess]

    def remove_all(self, predicate: Callable[[T], bool]) -> int:
        """Remove every element matching *predicate*; return how many went."""
        before = len(self._items)
        self._items = [item for item in self._items if not predicate(item)]
        return before - len(self._items)

    def clear(self) -> None:
        self._items.clear()

    def ids(self) -> set:
        return {item.id for item in self._items}  # type: ignore[attr-defined]

    def last(self, predicate: Callable[[T], bool]) -> T | None:
        """Most recently inserted element matching *predicate*."""
        for item in reversed(self._items):
            if predicate(item):
                return item
        return None

    def copy(self) -> BoundedBuffer[T]:
        return BoundedBuffer(self.maxlen, self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> list[T]: ...

    def __getitem__(self, index):
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BoundedBuffer):
            return self._items == other._items
        if isinstance(other, list):
            return self._items == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"BoundedBuffer(len={len(self._items)}, maxlen={self.maxlen})"
