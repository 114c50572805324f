from __future__ import annotations

from typing import List

from reactor.entities import Material


class Spillover:
    """Partial-batch accumulator between market deliveries and reserves.

    Deliveries of any size are absorbed here; :meth:`drain` then splits off
    whole batches of exactly ``batch_size`` and leaves the fractional
    remainder behind.
    """

    def __init__(self, batch_size: float) -> None:
        self.batch_size = batch_size
        self.material = Material.create_blank(0.0)

    @property
    def quantity(self) -> float:
        return self.material.quantity

    def reset(self) -> None:
        self.material = Material.create_blank(0.0)

    def absorb(self, mat: Material) -> None:
        self.material.absorb(mat)

    def drain(self) -> List[Material]:
        batches: List[Material] = []
        while self.material.quantity >= self.batch_size:
            batches.append(self.material.extract_qty(self.batch_size))
        return batches
