from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class HeapElement(Generic[T]):
    item: T
    priority: float


class MinHeap(Generic[T]):
    """Array-backed binary min-heap.

    Positions are 1-indexed (parent ``i // 2``, children ``2i`` and ``2i + 1``)
    over a 0-indexed list. Items carry no handle back into the heap, so callers
    that need to re-prioritise an item by identity must track state themselves.
    """

    def __init__(self) -> None:
        self._heap: list[HeapElement[T]] = []

    @staticmethod
    def _parent(i: int) -> int:
        return i >> 1

    @staticmethod
    def _left(i: int) -> int:
        return i << 1

    @staticmethod
    def _right(i: int) -> int:
        return (i << 1) | 1

    def _element(self, i: int) -> HeapElement[T]:
        return self._heap[i - 1]

    def _priority(self, i: int) -> float:
        return self._heap[i - 1].priority

    def _exchange(self, i: int, j: int) -> None:
        self._heap[i - 1], self._heap[j - 1] = self._heap[j - 1], self._heap[i - 1]

    def __len__(self) -> int:
        return len(self._heap)

    def is_empty(self) -> bool:
        return not self._heap

    def peek(self) -> HeapElement[T] | None:
        return self._heap[0] if self._heap else None

    def min_heapify(self, i: int) -> None:
        size = len(self._heap)
        left = self._left(i)
        right = self._right(i)

        smallest = left if left <= size and self._priority(left) < self._priority(i) else i
        if right <= size and self._priority(right) < self._priority(smallest):
            smallest = right

        if smallest != i:
            self._exchange(i, smallest)
            self.min_heapify(smallest)

    def extract_min(self) -> HeapElement[T] | None:
        """Remove and return the lowest-priority element, or None when empty."""
        if not self._heap:
            return None

        minimum = self._heap[0]
        last = self._heap.pop()
        if self._heap:
            self._heap[0] = last
            self.min_heapify(1)
        return minimum

    def decrease_key(self, i: int, priority: float) -> None:
        """Lower the priority at position ``i`` (1-indexed). Raising is ignored."""
        if priority > self._priority(i):
            return

        self._element(i).priority = priority
        while i > 1 and self._priority(self._parent(i)) > self._priority(i):
            self._exchange(i, self._parent(i))
            i = self._parent(i)

    def insert(self, item: T, priority: float) -> None:
        self._heap.append(HeapElement(item=item, priority=priority))
        self.decrease_key(len(self._heap), priority)

    def priorities(self) -> list[float]:
        return [element.priority for element in self._heap]


class PriorityQueue(Generic[T]):
    def __init__(self) -> None:
        self._heap: MinHeap[T] = MinHeap()

    def __len__(self) -> int:
        return len(self._heap)

    def is_empty(self) -> bool:
        return self._heap.is_empty()

    def push(self, item: T, priority: float) -> None:
        self._heap.insert(item, priority)

    def pop_with_priority(self) -> tuple[T, float] | None:
        element = self._heap.extract_min()
        if element is None:
            return None
        return element.item, element.priority

    def pop(self) -> T | None:
        element = self._heap.extract_min()
        return None if element is None else element.item
