"""Core dataclasses for the batch reactor simulation."""
from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping

from config import RESOURCE_EPS

_next_obj_id = itertools.count(1)


class Phase(Enum):
    INITIAL = "initial"
    PROCESS = "process"
    WAITING = "waiting"


def phase_name(phase: Phase) -> str:
    """Human readable name of a phase, for the event log."""
    if phase is Phase.INITIAL:
        return "initialization"
    if phase is Phase.PROCESS:
        return "processing batch(es)"
    return "waiting for fuel"


@dataclass
class Material:
    """A quantity of material with a normalized nuclide composition.

    ``tracked`` is False for offers and request targets: those are proposals
    exchanged with the market and never owned by a buffer.
    """

    quantity: float
    composition: Dict[str, float] = field(default_factory=dict)
    tracked: bool = True
    obj_id: int = field(default_factory=lambda: next(_next_obj_id))

    @classmethod
    def create(cls, quantity: float, composition: Mapping[str, float]) -> "Material":
        return cls(quantity=float(quantity), composition=dict(composition))

    @classmethod
    def create_untracked(cls, quantity: float, composition: Mapping[str, float]) -> "Material":
        return cls(quantity=float(quantity), composition=dict(composition), tracked=False)

    @classmethod
    def create_blank(cls, quantity: float = 0.0) -> "Material":
        return cls(quantity=float(quantity))

    def absorb(self, other: "Material") -> None:
        """Merge ``other`` into this material; ``other`` is left empty."""
        total = self.quantity + other.quantity
        if total > 0:
            mixed: Dict[str, float] = {}
            for source in (self, other):
                for nuclide, fraction in source.composition.items():
                    mixed[nuclide] = mixed.get(nuclide, 0.0) + fraction * source.quantity / total
            self.composition = mixed
        self.quantity = total
        other.quantity = 0.0

    def extract_qty(self, quantity: float) -> "Material":
        if quantity > self.quantity + RESOURCE_EPS:
            raise ValueError(f"cannot extract {quantity} from material {self.obj_id} holding {self.quantity}")
        quantity = min(quantity, self.quantity)
        self.quantity -= quantity
        return Material(quantity=quantity, composition=dict(self.composition), tracked=self.tracked)

    def transmute(self, composition: Mapping[str, float]) -> None:
        self.composition = dict(composition)


@dataclass
class Request:
    """A request for ``target.quantity`` of ``commodity``."""

    target: Material
    requester: str
    commodity: str


@dataclass
class RequestPortfolio:
    requests: List[Request] = field(default_factory=list)
    constraints: List[float] = field(default_factory=list)


@dataclass
class Bid:
    request: Request
    offer: Material
    bidder: str


@dataclass
class BidPortfolio:
    bids: List[Bid] = field(default_factory=list)
    constraints: List[float] = field(default_factory=list)


@dataclass
class Trade:
    """An awarded match of ``amt`` between a request and a bid.

    ``bid`` is None when the market fills the request from its own supply.
    """

    request: Request
    bid: Bid | None
    amt: float
