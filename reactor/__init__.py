"""Batch reactor simulation package.

Public API:
    from reactor import BatchReactor, Context, Material, Phase, Timeline
"""
from reactor.batch_reactor import BatchReactor, FacilityError
from reactor.buffer import PopResult, ResourceBuffer
from reactor.context import Context
from reactor.entities import (
    Bid,
    BidPortfolio,
    Material,
    Phase,
    Request,
    RequestPortfolio,
    Trade,
    phase_name,
)
from reactor.spillover import Spillover
from reactor.timeline import Timeline

__all__ = [
    "BatchReactor",
    "Bid",
    "BidPortfolio",
    "Context",
    "FacilityError",
    "Material",
    "Phase",
    "PopResult",
    "Request",
    "RequestPortfolio",
    "ResourceBuffer",
    "Spillover",
    "Timeline",
    "Trade",
    "phase_name",
]
