"""BatchReactor: a batch-refueled facility trading fuel and product each step.

The host scheduler drives every step in a fixed order: :meth:`tick` for all
agents, then requests and bids, then market clearing, then settlement
(:meth:`get_matl_trades` / :meth:`accept_matl_trades`), then :meth:`tock`.
"""
from __future__ import annotations

from typing import Dict, List, Mapping, Sequence, Tuple

from config import EVENT_LOG_LIMIT, UNSET_TIME
from reactor.buffer import ResourceBuffer
from reactor.context import Context
from reactor.entities import BidPortfolio, Material, Phase, Request, RequestPortfolio, Trade, phase_name
from reactor.exchange import build_bids, build_request, merge_deliveries, order_size
from reactor.spillover import Spillover
from reactor_catalog import CommodityProduction, InitCond, ReactorDefinition


class FacilityError(RuntimeError):
    """Unrecoverable accounting failure inside a facility."""


class BatchReactor:
    """Facility that irradiates a core of whole batches and trades the results.

    Fuel flows market → spillover → reserves → core → storage → market.
    Everything except the core → storage move (which transmutes to the output
    recipe) preserves both quantity and composition.
    """

    def __init__(self, name: str, definition: ReactorDefinition, context: Context) -> None:
        self.name = name
        self.definition = definition
        self.context = context
        self.reserves = ResourceBuffer("reserves")
        self.core = ResourceBuffer("core")
        self.storage = ResourceBuffer("storage")
        self.spillover = Spillover(definition.batch_size)
        self.phase: Phase = Phase.INITIAL
        self.start_time: int = UNSET_TIME
        self.event_log: List[str] = []

    def __str__(self) -> str:
        return (
            f"{self.name} ({self.definition.display_name}) has facility parameters {{"
            f"Process Time = {self.process_time}, "
            f"Refuel Time = {self.refuel_time}, "
            f"Core Loading = {self.n_batches * self.batch_size:g}, "
            f"Batches Per Core = {self.n_batches}, "
            f"converts commodity '{self.in_commodity}' into commodity '{self.out_commodity}'}}"
        )

    # ------------------------------------------------------------------
    # Configuration accessors
    # ------------------------------------------------------------------

    @property
    def in_commodity(self) -> str:
        return self.definition.in_commodity

    @property
    def in_recipe(self) -> str:
        return self.definition.in_recipe

    @property
    def out_commodity(self) -> str:
        return self.definition.out_commodity

    @property
    def out_recipe(self) -> str:
        return self.definition.out_recipe

    @property
    def process_time(self) -> int:
        return self.definition.process_time

    @property
    def refuel_time(self) -> int:
        return self.definition.refuel_time

    @property
    def order_lookahead(self) -> int:
        return self.definition.order_lookahead

    @property
    def n_batches(self) -> int:
        return self.definition.n_batches

    @property
    def n_load(self) -> int:
        return self.definition.n_reload

    @property
    def n_reserves(self) -> int:
        return self.definition.n_reserves

    @property
    def batch_size(self) -> float:
        return self.definition.batch_size

    @property
    def ics(self) -> InitCond:
        return self.definition.initial_condition

    @property
    def produced_commodities(self) -> Dict[str, CommodityProduction]:
        production = self.definition.production
        return {production.commodity: production} if production is not None else {}

    # ------------------------------------------------------------------
    # Derived timing
    # ------------------------------------------------------------------

    @property
    def end_time(self) -> int:
        return self.start_time + self.process_time

    @property
    def order_time(self) -> int:
        return self.end_time - self.order_lookahead

    @property
    def n_core(self) -> int:
        return self.core.count

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def clone(self, name: str) -> "BatchReactor":
        """An undeployed facility with this facility's configuration."""
        return BatchReactor(name, self.definition, self.context)

    def deploy(self) -> None:
        self.phase = Phase.INITIAL
        self.start_time = UNSET_TIME
        self.spillover.reset()

        fresh = self.context.get_recipe(self.in_recipe)
        spent = self.context.get_recipe(self.out_recipe)
        for _ in range(self.ics.n_reserves):
            self.reserves.push(Material.create(self.batch_size, fresh))
        for _ in range(self.ics.n_core):
            self.core.push(Material.create(self.batch_size, fresh))
        for _ in range(self.ics.n_storage):
            self.storage.push(Material.create(self.batch_size, spent))

        self._log_event(f"{self.name} entering the simulation")

    def tick(self, time: int) -> None:
        if self.phase is Phase.PROCESS:
            if time == self.end_time:
                for _ in range(self.n_load):
                    self._move_batch_out()
                self._set_phase(Phase.WAITING, time)
        elif self.phase is Phase.WAITING:
            if self.n_core == self.n_batches and self.end_time + self.refuel_time <= time:
                self._set_phase(Phase.PROCESS, time)
        elif self.phase is Phase.INITIAL:
            # a core primed at deployment starts immediately
            if self.n_core == self.n_batches:
                self._set_phase(Phase.PROCESS, time)

    def tock(self, time: int) -> None:
        if self.phase in (Phase.INITIAL, Phase.WAITING):
            self.refuel()

    # ------------------------------------------------------------------
    # Market interface
    # ------------------------------------------------------------------

    def get_matl_requests(self) -> List[RequestPortfolio]:
        size = order_size(
            self.phase,
            n_batches=self.n_batches,
            batch_size=self.batch_size,
            n_reserves=self.n_reserves,
            order_lookahead=self.order_lookahead,
            core_qty=self.core.quantity,
            reserves_qty=self.reserves.quantity,
            spillover_qty=self.spillover.quantity,
        )
        if self.phase is not Phase.INITIAL and self.order_time > self.context.time:
            return []
        port = build_request(size, self.context.get_recipe(self.in_recipe), self.in_commodity, self.name)
        if port is None:
            return []
        self._log_event(f"Ordered {size:g} of {self.in_commodity}")
        return [port]

    def get_matl_bids(self, commod_requests: Mapping[str, Sequence[Request]]) -> List[BidPortfolio]:
        requests = commod_requests.get(self.out_commodity, [])
        port = build_bids(requests, self.storage.quantity, self.context.get_recipe(self.out_recipe), self.name)
        return [port] if port is not None else []

    def accept_matl_trades(self, responses: Sequence[Tuple[Trade, Material]]) -> None:
        delivered = merge_deliveries([mat for _, mat in responses])
        if delivered is None:
            return
        self._add_batches(delivered)

    def get_matl_trades(self, trades: Sequence[Trade]) -> List[Tuple[Trade, Material]]:
        responses: List[Tuple[Trade, Material]] = []
        for trade in trades:
            result = self.storage.pop_qty(trade.amt)
            if not result.ok:
                raise FacilityError(f"{self.name} experienced an error: {result.error}")
            response = merge_deliveries(list(result.materials))
            if response is None:
                response = Material.create(0.0, self.context.get_recipe(self.out_recipe))
            responses.append((trade, response))
            self._log_event(f"Shipped {trade.amt:g} of {self.out_commodity}")
        return responses

    # ------------------------------------------------------------------
    # Batch movement
    # ------------------------------------------------------------------

    def refuel(self) -> None:
        while self.n_core < self.n_batches and self.reserves.count > 0:
            self._move_batch_in()

    def _move_batch_in(self) -> None:
        result = self.reserves.pop()
        if not result.ok:
            raise FacilityError(f"{self.name} experienced an error: {result.error}")
        self.core.push_all(result.materials)
        self._log_event("Loaded a batch into the core")

    def _move_batch_out(self) -> None:
        result = self.core.pop()
        if not result.ok:
            raise FacilityError(f"{self.name} experienced an error: {result.error}")
        spent = self.context.get_recipe(self.out_recipe)
        for mat in result.materials:
            mat.transmute(spent)
            self.storage.push(mat)
        self._log_event("Removed a batch from the core")

    def _add_batches(self, mat: Material) -> None:
        received = mat.quantity
        self.spillover.absorb(mat)
        batches = self.spillover.drain()
        self.reserves.push_all(batches)
        self._log_event(f"Received {received:g} of {self.in_commodity}, {len(batches)} batch(es) to reserves")

    def _set_phase(self, phase: Phase, time: int) -> None:
        self._log_event(f"Phase {phase_name(self.phase)} -> {phase_name(phase)}")
        if phase is Phase.PROCESS:
            self.start_time = time
        self.phase = phase

    def _log_event(self, message: str) -> None:
        self.event_log.append(message)
        self.event_log = self.event_log[-EVENT_LOG_LIMIT:]
