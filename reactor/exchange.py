"""Request and bid policies for trading with the market.

These are plain functions over buffer levels so the facility's trading
behavior can be checked without a market or a deployed facility.
"""
from __future__ import annotations

from typing import List, Mapping, Sequence

from reactor.entities import Bid, BidPortfolio, Material, Phase, Request, RequestPortfolio


def order_size(
    phase: Phase,
    *,
    n_batches: int,
    batch_size: float,
    n_reserves: int,
    order_lookahead: int,
    core_qty: float,
    reserves_qty: float,
    spillover_qty: float,
) -> float:
    """Quantity of fuel still missing for the current phase.

    While initializing the facility orders a full core; with no look-ahead
    the standing reserve is ordered along with it.  Afterwards only the
    standing reserve is topped up.  The result may be zero or negative.
    """
    if phase is Phase.INITIAL:
        size = n_batches * batch_size - core_qty - reserves_qty - spillover_qty
        if order_lookahead == 0:
            size += batch_size * n_reserves
        return size
    return n_reserves * batch_size - reserves_qty - spillover_qty


def build_request(
    size: float,
    composition: Mapping[str, float],
    commodity: str,
    requester: str,
) -> RequestPortfolio | None:
    if size <= 0:
        return None
    target = Material.create_untracked(size, composition)
    return RequestPortfolio(
        requests=[Request(target=target, requester=requester, commodity=commodity)],
        constraints=[size],
    )


def build_bids(
    requests: Sequence[Request],
    storage_qty: float,
    composition: Mapping[str, float],
    bidder: str,
) -> BidPortfolio | None:
    """Offer stored product against each request, capped by what is stored."""
    if storage_qty <= 0 or not requests:
        return None
    bids: List[Bid] = []
    for request in requests:
        qty = min(request.target.quantity, storage_qty)
        bids.append(Bid(request=request, offer=Material.create_untracked(qty, composition), bidder=bidder))
    return BidPortfolio(bids=bids, constraints=[storage_qty])


def merge_deliveries(materials: Sequence[Material]) -> Material | None:
    if not materials:
        return None
    merged = materials[0]
    for mat in materials[1:]:
        merged.absorb(mat)
    return merged
