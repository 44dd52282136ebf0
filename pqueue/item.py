from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

V = TypeVar("V")
P = TypeVar("P")

DETACHED = -1


@dataclass(eq=False)
class Item(Generic[V, P]):
    """Heap entry. `index` belongs to the heap and must not be written by callers."""

    value: V
    priority: P
    index: int = DETACHED

    @property
    def attached(self) -> bool:
        return self.index != DETACHED
