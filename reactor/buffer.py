"""Ordered, unbounded buffers of discrete material batches."""
from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterable, Iterator, Tuple

from config import RESOURCE_EPS
from reactor.entities import Material


@dataclass(frozen=True)
class PopResult:
    """Outcome of a buffer pop: the removed batches, or why nothing was removed."""

    materials: Tuple[Material, ...] = ()
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error


class ResourceBuffer:
    """FIFO collection of batches; insertion order is arrival order."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._batches: Deque[Material] = deque()

    def __len__(self) -> int:
        return len(self._batches)

    def __iter__(self) -> Iterator[Material]:
        return iter(self._batches)

    @property
    def capacity(self) -> float:
        return math.inf

    @property
    def count(self) -> int:
        return len(self._batches)

    @property
    def quantity(self) -> float:
        return sum(mat.quantity for mat in self._batches)

    @property
    def empty(self) -> bool:
        return not self._batches

    def push(self, mat: Material) -> None:
        self._batches.append(mat)

    def push_all(self, mats: Iterable[Material]) -> None:
        for mat in mats:
            self.push(mat)

    def pop(self) -> PopResult:
        return self.pop_n(1)

    def pop_n(self, n: int) -> PopResult:
        if n < 0 or n > len(self._batches):
            return PopResult(error=f"cannot pop {n} batch(es) from {self._label()} holding {len(self._batches)}")
        return PopResult(materials=tuple(self._batches.popleft() for _ in range(n)))

    def pop_qty(self, qty: float) -> PopResult:
        """Remove ``qty`` from the front, splitting the last batch if needed."""
        available = self.quantity
        if qty < 0 or qty > available + RESOURCE_EPS:
            return PopResult(error=f"cannot pop {qty} from {self._label()} holding {available}")

        popped = []
        remaining = qty
        while self._batches and remaining > RESOURCE_EPS:
            head = self._batches[0]
            if head.quantity <= remaining + RESOURCE_EPS:
                popped.append(self._batches.popleft())
                remaining -= head.quantity
            else:
                popped.append(head.extract_qty(remaining))
                remaining = 0.0
        return PopResult(materials=tuple(popped))

    def _label(self) -> str:
        return f"buffer '{self.name}'" if self.name else "buffer"
