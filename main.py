from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Sequence

from config import DEMO_DEMAND, DEMO_REACTOR, DEMO_STEPS, REACTORS_FILE, RECIPES_FILE
from reactor import (
    BatchReactor,
    BidPortfolio,
    Context,
    FacilityError,
    Material,
    Request,
    RequestPortfolio,
    Timeline,
    Trade,
    phase_name,
)
from reactor_catalog import load_reactor_catalog
from recipe_catalog import load_recipe_catalog

MARKET_NAME = "market"


class DemoMarket:
    """Unlimited fuel supplier and fixed-rate product buyer.

    Every fuel request is filled in full from the market's own supply.  Each
    step the market asks for ``demand`` of ``product`` and takes whatever the
    bids offer, within each bid portfolio's capacity constraint.
    """

    def __init__(self, product: str, demand: float) -> None:
        self.product = product
        self.demand_qty = demand
        self.supplied = 0.0
        self.received = 0.0

    def demand(self, time: int) -> List[RequestPortfolio]:
        if self.demand_qty <= 0:
            return []
        target = Material.create_untracked(self.demand_qty, {})
        request = Request(target=target, requester=MARKET_NAME, commodity=self.product)
        return [RequestPortfolio(requests=[request], constraints=[self.demand_qty])]

    def clear(self, request_ports: Sequence[RequestPortfolio], bid_ports: Sequence[BidPortfolio]) -> List[Trade]:
        trades: List[Trade] = []
        for port in request_ports:
            for request in port.requests:
                if request.requester != MARKET_NAME:
                    trades.append(Trade(request=request, bid=None, amt=request.target.quantity))

        outstanding: Dict[int, float] = {}
        for port in request_ports:
            for request in port.requests:
                if request.requester == MARKET_NAME:
                    outstanding[id(request)] = request.target.quantity

        for port in bid_ports:
            capacity = min(port.constraints) if port.constraints else float("inf")
            for bid in port.bids:
                key = id(bid.request)
                if key not in outstanding:
                    continue
                amt = min(bid.offer.quantity, capacity, outstanding[key])
                if amt <= 0:
                    continue
                trades.append(Trade(request=bid.request, bid=bid, amt=amt))
                capacity -= amt
                outstanding[key] -= amt
        return trades

    def supply(self, trade: Trade) -> Material:
        self.supplied += trade.amt
        return Material.create(trade.amt, trade.request.target.composition)

    def receive(self, trade: Trade, material: Material) -> None:
        self.received += material.quantity


def run_headless(
    reactor_key: str,
    steps: int,
    demand: float,
    *,
    reactors_file: Path = REACTORS_FILE,
    recipes_file: Path = RECIPES_FILE,
    verbose: bool = False,
) -> BatchReactor:
    reactors = load_reactor_catalog(reactors_file)
    if reactor_key not in reactors:
        raise RuntimeError(f"unknown reactor '{reactor_key}' (available: {', '.join(reactors)})")
    definition = reactors[reactor_key]

    context = Context(load_recipe_catalog(recipes_file))
    for recipe in (definition.in_recipe, definition.out_recipe):
        if recipe not in context.recipes:
            raise RuntimeError(f"reactor '{reactor_key}' uses unknown recipe '{recipe}'")

    facility = BatchReactor(f"{reactor_key}_1", definition, context)
    facility.deploy()
    market = DemoMarket(definition.out_commodity, demand)
    Timeline(context, [facility], market).run(steps)

    print(
        f"headless_done t={context.time} phase={facility.phase.value} "
        f"core={facility.n_core}/{facility.n_batches} reserves={facility.reserves.count} "
        f"spillover={facility.spillover.quantity:g} storage={facility.storage.quantity:g} "
        f"market[supplied={market.supplied:g},received={market.received:g}]"
    )
    if verbose:
        print(facility)
        print(f"  phase: {phase_name(facility.phase)}")
        for event in facility.event_log:
            print(f"  {event}")
    return facility


def main() -> None:
    parser = argparse.ArgumentParser(description="Batch reactor fuel cycle prototype")
    parser.add_argument("--reactor", default=DEMO_REACTOR, help="reactor key from the reactor catalog")
    parser.add_argument("--steps", type=int, default=DEMO_STEPS, help="simulation steps to run")
    parser.add_argument("--demand", type=float, default=DEMO_DEMAND, help="product requested per step")
    parser.add_argument("--reactors-file", type=Path, default=REACTORS_FILE, help="reactor catalog JSON")
    parser.add_argument("--recipes-file", type=Path, default=RECIPES_FILE, help="recipe catalog JSON")
    parser.add_argument("--verbose", action="store_true", help="print facility status and event log")
    args = parser.parse_args()

    try:
        run_headless(
            args.reactor,
            args.steps,
            args.demand,
            reactors_file=args.reactors_file,
            recipes_file=args.recipes_file,
            verbose=args.verbose,
        )
    except FacilityError as exc:
        print(f"Simulation error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    except RuntimeError as exc:
        print(f"Startup error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
