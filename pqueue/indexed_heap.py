from __future__ import annotations

import logging
from typing import Generic, Iterable, Iterator

from pqueue.config import HeapConfig
from pqueue.errors import EmptyCollection, HeapInvariantError, InvalidHandle
from pqueue.item import DETACHED, Item, P, V

logger = logging.getLogger(__name__)


class IndexedPriorityHeap(Generic[V, P]):
    """Binary max-heap of Items that keeps each Item's `index` in step with its slot.

    The Item itself is the handle for remove/update: it is valid while
    `heap[item.index] is item`. Popped and removed Items get `index == DETACHED`.
    Order among equal priorities is unspecified.
    """

    def __init__(
        self,
        items: Iterable[Item[V, P]] = (),
        *,
        config: HeapConfig | None = None,
    ) -> None:
        self.config = config or HeapConfig()
        heap: list[Item[V, P]] = list(items)
        if len({id(item) for item in heap}) != len(heap):
            raise InvalidHandle("Duplicate item in heap")

        self.heap = heap
        for idx, item in enumerate(heap):
            item.index = idx
        for idx in reversed(range(len(self.heap) // 2)):
            self._siftup(idx)

        logger.debug(
            "Built %s-heap with %d item(s)",
            "max" if self.config.max_heap else "min",
            len(self.heap),
        )
        self._after_mutation()

    # ---------- comparison helper ----------

    def _higher_priority(self, a: P, b: P) -> bool:
        """Return True if priority a should be above b in heap"""
        return b < a if self.config.max_heap else a < b

    # ---------- internal helpers ----------

    def _owns(self, item: Item[V, P]) -> bool:
        idx = item.index
        return 0 <= idx < len(self.heap) and self.heap[idx] is item

    def _check_handle(self, item: Item[V, P]) -> None:
        if not self._owns(item):
            raise InvalidHandle(f"Item not in heap: {item!r}")

    def _swap(self, i: int, j: int) -> None:
        heap = self.heap
        heap[i], heap[j] = heap[j], heap[i]
        heap[i].index = i
        heap[j].index = j

    # heapq naming: _siftdown moves an entry toward the root, _siftup toward the leaves.

    def _siftdown(self, idx: int) -> None:
        heap = self.heap
        while idx > 0:
            parent = (idx - 1) // 2
            if self._higher_priority(heap[idx].priority, heap[parent].priority):
                self._swap(idx, parent)
                idx = parent
            else:
                break

    def _siftup(self, idx: int) -> bool:
        """Push heap[idx] toward the leaves. Returns True if it moved."""
        heap = self.heap
        n = len(heap)
        start = idx
        while True:
            left = 2 * idx + 1
            right = left + 1
            best = idx

            if left < n and self._higher_priority(heap[left].priority, heap[best].priority):
                best = left
            # strict comparison: on a tie between children the left one wins
            if right < n and self._higher_priority(heap[right].priority, heap[best].priority):
                best = right

            if best == idx:
                break

            self._swap(idx, best)
            idx = best
        return idx != start

    def _fix(self, idx: int) -> None:
        if not self._siftup(idx):
            self._siftdown(idx)

    def _after_mutation(self) -> None:
        if self.config.check_invariants:
            self.verify()

    # ---------- public API ----------

    def push(self, item: Item[V, P]) -> None:
        if self._owns(item):
            raise InvalidHandle(f"Item already in heap: {item!r}")

        idx = len(self.heap)
        item.index = idx
        self.heap.append(item)
        self._siftdown(idx)
        self._after_mutation()

    def pop(self) -> Item[V, P]:
        if not self.heap:
            raise EmptyCollection("pop from empty heap")

        top = self.heap[0]
        last = self.heap.pop()
        if self.heap:
            self.heap[0] = last
            last.index = 0
            self._siftup(0)

        top.index = DETACHED
        self._after_mutation()
        return top

    def peek(self) -> Item[V, P]:
        if not self.heap:
            raise EmptyCollection("peek at empty heap")
        return self.heap[0]

    def remove(self, item: Item[V, P]) -> Item[V, P]:
        self._check_handle(item)

        idx = item.index
        last = len(self.heap) - 1
        if idx != last:
            self._swap(idx, last)
        self.heap.pop()
        if idx < len(self.heap):
            self._fix(idx)

        item.index = DETACHED
        self._after_mutation()
        return item

    def update(self, item: Item[V, P], value: V, priority: P) -> None:
        """Set value and priority of an item in the heap and move it to its new place.

        Same effect as remove(item), assigning the fields and push(item), done in
        one pass from the item's current slot.
        """
        self._check_handle(item)
        item.value = value
        item.priority = priority
        self._fix(item.index)
        self._after_mutation()

    def change_priority(self, item: Item[V, P], priority: P) -> None:
        self.update(item, item.value, priority)

    def update_top(self, value: V, priority: P) -> Item[V, P]:
        """Replace value and priority of the top item and reposition it."""
        if not self.heap:
            raise EmptyCollection("update_top on empty heap")

        top = self.heap[0]
        top.value = value
        top.priority = priority
        self._siftup(0)
        self._after_mutation()
        return top

    def fix(self, item: Item[V, P]) -> None:
        """Restore order after item.priority was changed in place by the caller."""
        self._check_handle(item)
        self._fix(item.index)
        self._after_mutation()

    def verify(self) -> None:
        heap = self.heap
        for idx, item in enumerate(heap):
            if item.index != idx:
                raise HeapInvariantError(
                    f"Item at position {idx} records index {item.index}"
                )
            if idx == 0:
                continue
            parent = heap[(idx - 1) // 2]
            if self._higher_priority(item.priority, parent.priority):
                raise HeapInvariantError(
                    f"Item at position {idx} outranks its parent "
                    f"({item.priority!r} vs {parent.priority!r})"
                )

    def __contains__(self, item: object) -> bool:
        return isinstance(item, Item) and self._owns(item)

    def __iter__(self) -> Iterator[Item[V, P]]:
        return iter(tuple(self.heap))

    def __len__(self) -> int:
        return len(self.heap)

    def __repr__(self) -> str:
        kind = "max" if self.config.max_heap else "min"
        return f"{type(self).__name__}({kind}, size={len(self.heap)})"
