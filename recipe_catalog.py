from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Tuple

from config import COMPOSITION_BASES, RECIPES_FILE

RECIPE_ID_RE = re.compile(r"^[a-z][a-z0-9_]*$")
NUCLIDE_RE = re.compile(r"^[A-Z][a-z]?-?\d{1,3}m?$|^\d{4,7}$")


@dataclass(frozen=True)
class RecipeDefinition:
    key: str
    display_name: str
    basis: str
    composition: Tuple[Tuple[str, float], ...]

    def to_runtime_dict(self) -> Dict[str, str | Dict[str, float]]:
        return {
            "display_name": self.display_name,
            "basis": self.basis,
            "composition": dict(self.composition),
        }


DEFAULT_RECIPE_DEFINITIONS: Dict[str, RecipeDefinition] = {
    "uox_fresh": RecipeDefinition(
        key="uox_fresh",
        display_name="Fresh UOX",
        basis="mass",
        composition=(("U235", 0.04), ("U238", 0.96)),
    ),
    "uox_spent": RecipeDefinition(
        key="uox_spent",
        display_name="Spent UOX",
        basis="mass",
        composition=(
            ("U235", 0.008),
            ("U236", 0.005),
            ("U238", 0.932),
            ("Pu239", 0.006),
            ("Pu240", 0.003),
            ("Cs137", 0.046),
        ),
    ),
}


def _is_positive_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float)) and math.isfinite(value) and value > 0


def _is_valid_recipe_id(value: str) -> bool:
    return bool(RECIPE_ID_RE.fullmatch(value))


def _parse_composition(value: Any) -> Tuple[Tuple[str, float], ...] | None:
    if not isinstance(value, dict) or not value:
        return None
    for nuclide, fraction in value.items():
        if not isinstance(nuclide, str) or not NUCLIDE_RE.fullmatch(nuclide):
            return None
        if not _is_positive_number(fraction):
            return None
    total = float(sum(value.values()))
    return tuple((nuclide, float(fraction) / total) for nuclide, fraction in sorted(value.items()))


def _parse_recipe_entry(key: str, entry: Dict[str, Any]) -> RecipeDefinition | None:
    if not _is_valid_recipe_id(key):
        return None

    display_name = entry.get("display_name", key)
    basis = entry.get("basis", "mass")

    if not isinstance(display_name, str) or not display_name.strip():
        return None
    if not isinstance(basis, str):
        return None
    basis = basis.strip().lower()
    if basis not in COMPOSITION_BASES:
        return None

    composition = _parse_composition(entry.get("composition"))
    if composition is None:
        return None

    return RecipeDefinition(
        key=key,
        display_name=display_name.strip(),
        basis=basis,
        composition=composition,
    )


def _runtime_catalog(recipes: Iterable[RecipeDefinition]) -> Dict[str, Dict[str, str | Dict[str, float]]]:
    return {recipe.key: recipe.to_runtime_dict() for recipe in sorted(recipes, key=lambda recipe: recipe.key)}


def load_recipe_catalog(path: Path = RECIPES_FILE) -> Dict[str, Dict[str, str | Dict[str, float]]]:
    defaults = _runtime_catalog(DEFAULT_RECIPE_DEFINITIONS.values())
    if not path.exists():
        return defaults

    try:
        raw = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return defaults

    if not isinstance(raw, dict):
        return defaults

    recipes: Dict[str, RecipeDefinition] = {}
    for key, entry in raw.items():
        if not isinstance(key, str) or not isinstance(entry, dict):
            continue
        recipe = _parse_recipe_entry(key, entry)
        if recipe is None:
            continue
        recipes[key] = recipe

    if not recipes:
        return defaults

    return _runtime_catalog(recipes.values())
