"""Step scheduler that drives facilities through tick, trade and tock.

Within one step every facility ticks before any request is collected, all
requests and bids are collected before the market clears, settlement
finishes before any facility tocks.  The clearing itself is delegated to a
market object:

* ``market.demand(time)``: requests the market places on its own behalf
* ``market.clear(request_ports, bid_ports)``: awarded trades
* ``market.supply(trade)``: material for a trade the market fills itself
  (``trade.bid is None``)
* ``market.receive(trade, material)``: delivery for one of the market's
  own requests
"""
from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Protocol, Sequence, Tuple

from reactor.batch_reactor import BatchReactor
from reactor.context import Context
from reactor.entities import BidPortfolio, Material, Request, RequestPortfolio, Trade


class Market(Protocol):
    def demand(self, time: int) -> List[RequestPortfolio]: ...

    def clear(self, request_ports: Sequence[RequestPortfolio], bid_ports: Sequence[BidPortfolio]) -> List[Trade]: ...

    def supply(self, trade: Trade) -> Material: ...

    def receive(self, trade: Trade, material: Material) -> None: ...


class Timeline:
    def __init__(self, context: Context, facilities: Sequence[BatchReactor], market: Market) -> None:
        self.context = context
        self.facilities = list(facilities)
        self.market = market

    def run(self, steps: int) -> None:
        for _ in range(steps):
            self.step()

    def step(self) -> None:
        time = self.context.time
        by_name = {facility.name: facility for facility in self.facilities}

        for facility in self.facilities:
            facility.tick(time)

        request_ports: List[RequestPortfolio] = []
        for facility in self.facilities:
            request_ports.extend(facility.get_matl_requests())
        request_ports.extend(self.market.demand(time))

        commod_requests: Dict[str, List[Request]] = defaultdict(list)
        for port in request_ports:
            for request in port.requests:
                commod_requests[request.commodity].append(request)

        bid_ports: List[BidPortfolio] = []
        for facility in self.facilities:
            bid_ports.extend(facility.get_matl_bids(commod_requests))

        trades = self.market.clear(request_ports, bid_ports)

        outgoing: Dict[str, List[Trade]] = defaultdict(list)
        for trade in trades:
            if trade.bid is not None and trade.bid.bidder in by_name:
                outgoing[trade.bid.bidder].append(trade)

        deliveries: List[Tuple[Trade, Material]] = []
        for trade in trades:
            if trade.bid is None:
                deliveries.append((trade, self.market.supply(trade)))
        for name, bidder_trades in outgoing.items():
            deliveries.extend(by_name[name].get_matl_trades(bidder_trades))

        incoming: Dict[str, List[Tuple[Trade, Material]]] = defaultdict(list)
        for trade, material in deliveries:
            requester = trade.request.requester
            if requester in by_name:
                incoming[requester].append((trade, material))
            else:
                self.market.receive(trade, material)
        for name, responses in incoming.items():
            by_name[name].accept_matl_trades(responses)

        for facility in self.facilities:
            facility.tock(time)

        self.context.time = time + 1
