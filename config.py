"""Centralised configuration constants for the batch reactor simulation."""
from __future__ import annotations

from pathlib import Path

# ---------------------------------------------------------------------------
# File paths
# ---------------------------------------------------------------------------
RECIPES_FILE: Path = Path("data/recipes.json")
REACTORS_FILE: Path = Path("data/reactors.json")

# ---------------------------------------------------------------------------
# Facility parameter defaults (used when the optional config keys are absent)
# ---------------------------------------------------------------------------
DEFAULT_REFUEL_TIME: int = 0        # steps between unloading and restarting
DEFAULT_ORDER_LOOKAHEAD: int = 0    # steps before end of process to place orders
DEFAULT_N_RELOAD: int = 1           # batches unloaded at the end of each cycle
DEFAULT_N_RESERVES: int = 1         # standing reserve target, in batches

# ---------------------------------------------------------------------------
# Resource accounting
# ---------------------------------------------------------------------------
RESOURCE_EPS: float = 1e-6          # quantity tolerance for pops and splits
UNSET_TIME: int = -1                # start time before the first process phase

# ---------------------------------------------------------------------------
# Recipes
# ---------------------------------------------------------------------------
COMPOSITION_BASES: tuple[str, ...] = ("mass", "atom")

# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------
EVENT_LOG_LIMIT: int = 12

# ---------------------------------------------------------------------------
# Headless demo defaults
# ---------------------------------------------------------------------------
DEMO_REACTOR: str = "lwr"
DEMO_STEPS: int = 24
DEMO_DEMAND: float = 10.0           # product requested from the reactor per step
