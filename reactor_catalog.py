"""Data-driven batch reactor definitions.

Each entry in ``data/reactors.json`` describes one facility prototype::

    "lwr": {
        "display_name": "Light Water Reactor",
        "fuel_input": {"commodity": "uox", "recipe": "uox_fresh"},
        "fuel_output": {"commodity": "spent_uox", "recipe": "uox_spent"},
        "process_time": 18,
        "n_batches": 3,
        "batch_size": 30.0,
        "refuel_time": 1,
        "order_lookahead": 2,
        "n_reload": 1,
        "n_reserves": 1,
        "initial_condition": {"n_reserves": 0, "n_core": 3, "n_storage": 0},
        "commodity_production": {"commodity": "power", "capacity": 1000, "cost": 1.0}
    }

Only the in/out commodities and recipes, ``process_time``, ``n_batches`` and
``batch_size`` are required.  ``n_reserves`` (the standing reserve target) is
read from its own key and never defaults from ``n_reload``.
"""
from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from config import (
    DEFAULT_N_RELOAD,
    DEFAULT_N_RESERVES,
    DEFAULT_ORDER_LOOKAHEAD,
    DEFAULT_REFUEL_TIME,
    REACTORS_FILE,
)

REACTOR_ID_RE = re.compile(r"^[a-z][a-z0-9_]*$")


@dataclass(frozen=True)
class InitCond:
    """Whole batches pre-populated into each buffer at deployment."""

    n_reserves: int = 0
    n_core: int = 0
    n_storage: int = 0


@dataclass(frozen=True)
class CommodityProduction:
    commodity: str
    capacity: float
    cost: float


@dataclass(frozen=True)
class ReactorDefinition:
    key: str
    display_name: str
    in_commodity: str
    in_recipe: str
    out_commodity: str
    out_recipe: str
    process_time: int
    n_batches: int
    batch_size: float
    refuel_time: int = DEFAULT_REFUEL_TIME
    order_lookahead: int = DEFAULT_ORDER_LOOKAHEAD
    n_reload: int = DEFAULT_N_RELOAD
    n_reserves: int = DEFAULT_N_RESERVES
    initial_condition: InitCond = InitCond()
    production: CommodityProduction | None = None


DEFAULT_REACTORS: Dict[str, ReactorDefinition] = {
    "lwr": ReactorDefinition(
        key="lwr",
        display_name="Light Water Reactor",
        in_commodity="uox",
        in_recipe="uox_fresh",
        out_commodity="spent_uox",
        out_recipe="uox_spent",
        process_time=6,
        n_batches=3,
        batch_size=10.0,
        refuel_time=1,
        order_lookahead=1,
        n_reload=1,
        n_reserves=1,
        initial_condition=InitCond(n_reserves=0, n_core=3, n_storage=0),
        production=CommodityProduction("power", 1000.0, 1.0),
    ),
}


def _coerce_int(value: Any, *, minimum: int | None = None) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        result = value
    elif isinstance(value, float) and value.is_integer():
        result = int(value)
    else:
        return None

    if minimum is not None and result < minimum:
        return None
    return result


def _is_positive_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float)) and math.isfinite(value) and value > 0


def _is_non_negative_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float)) and math.isfinite(value) and value >= 0


def _is_valid_id(value: Any) -> bool:
    return isinstance(value, str) and bool(REACTOR_ID_RE.fullmatch(value))


def _parse_fuel_stream(value: Any) -> tuple[str, str] | None:
    if not isinstance(value, dict):
        return None
    commodity = value.get("commodity")
    recipe = value.get("recipe")
    if not _is_valid_id(commodity) or not _is_valid_id(recipe):
        return None
    return commodity, recipe


def _parse_initial_condition(value: Any) -> InitCond | None:
    if value is None:
        return InitCond()
    if not isinstance(value, dict):
        return None
    n_reserves = _coerce_int(value.get("n_reserves", 0), minimum=0)
    n_core = _coerce_int(value.get("n_core", 0), minimum=0)
    n_storage = _coerce_int(value.get("n_storage", 0), minimum=0)
    if n_reserves is None or n_core is None or n_storage is None:
        return None
    return InitCond(n_reserves=n_reserves, n_core=n_core, n_storage=n_storage)


def _parse_production(value: Any) -> CommodityProduction | None:
    if not isinstance(value, dict):
        return None
    commodity = value.get("commodity")
    capacity = value.get("capacity")
    cost = value.get("cost", 0.0)
    if not _is_valid_id(commodity):
        return None
    if not _is_non_negative_number(capacity) or not _is_non_negative_number(cost):
        return None
    return CommodityProduction(commodity=commodity, capacity=float(capacity), cost=float(cost))


def _parse_reactor_entry(key: str, entry: Dict[str, Any]) -> ReactorDefinition | None:
    if not _is_valid_id(key):
        return None

    display_name = entry.get("display_name", key)
    if not isinstance(display_name, str) or not display_name.strip():
        return None

    fuel_input = _parse_fuel_stream(entry.get("fuel_input"))
    fuel_output = _parse_fuel_stream(entry.get("fuel_output"))
    if fuel_input is None or fuel_output is None:
        return None

    process_time = _coerce_int(entry.get("process_time"), minimum=0)
    n_batches = _coerce_int(entry.get("n_batches"), minimum=0)
    batch_size = entry.get("batch_size")
    if process_time is None or n_batches is None:
        return None
    if not _is_positive_number(batch_size):
        return None

    refuel_time = _coerce_int(entry.get("refuel_time", DEFAULT_REFUEL_TIME), minimum=0)
    order_lookahead = _coerce_int(entry.get("order_lookahead", DEFAULT_ORDER_LOOKAHEAD), minimum=0)
    n_reload = _coerce_int(entry.get("n_reload", DEFAULT_N_RELOAD), minimum=0)
    n_reserves = _coerce_int(entry.get("n_reserves", DEFAULT_N_RESERVES), minimum=0)
    if refuel_time is None or order_lookahead is None:
        return None
    if n_reload is None or n_reserves is None:
        return None

    initial_condition = _parse_initial_condition(entry.get("initial_condition"))
    if initial_condition is None:
        return None

    production = None
    if "commodity_production" in entry:
        production = _parse_production(entry["commodity_production"])
        if production is None:
            return None

    return ReactorDefinition(
        key=key,
        display_name=display_name.strip(),
        in_commodity=fuel_input[0],
        in_recipe=fuel_input[1],
        out_commodity=fuel_output[0],
        out_recipe=fuel_output[1],
        process_time=process_time,
        n_batches=n_batches,
        batch_size=float(batch_size),
        refuel_time=refuel_time,
        order_lookahead=order_lookahead,
        n_reload=n_reload,
        n_reserves=n_reserves,
        initial_condition=initial_condition,
        production=production,
    )


def load_reactor_catalog(path: Path = REACTORS_FILE) -> Dict[str, ReactorDefinition]:
    if not path.exists():
        return dict(DEFAULT_REACTORS)

    try:
        raw = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return dict(DEFAULT_REACTORS)

    if not isinstance(raw, dict):
        return dict(DEFAULT_REACTORS)

    reactors: Dict[str, ReactorDefinition] = {}
    for key, entry in raw.items():
        if not isinstance(key, str) or not isinstance(entry, dict):
            continue
        reactor = _parse_reactor_entry(key, entry)
        if reactor is None:
            continue
        reactors[key] = reactor

    return reactors or dict(DEFAULT_REACTORS)
