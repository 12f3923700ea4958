from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, List, Optional

from .arith import format_int


class ValueQueue:
    """FIFO of integers shared by every instruction of a running program.

    `dequeue` reports an empty queue by returning ``None`` instead of
    raising, so callers guard with an explicit check.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[int] = ()):
        self._items: Deque[int] = deque(items)

    def enqueue(self, value: int) -> None:
        self._items.append(value)

    def dequeue(self) -> Optional[int]:
        if not self._items:
            return None
        return self._items.popleft()

    def is_empty(self) -> bool:
        return not self._items

    def snapshot(self) -> List[int]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"ValueQueue([{', '.join(map(format_int, self._items))}])"


__all__ = ["ValueQueue"]
