from __future__ import annotations

from typing import Dict, Mapping


class Context:
    """Simulation clock and recipe lookup shared by every agent in a run."""

    def __init__(self, recipes: Mapping[str, Mapping], time: int = 0) -> None:
        self.recipes = recipes
        self.time = time

    def get_recipe(self, key: str) -> Dict[str, float]:
        return dict(self.recipes[key]["composition"])
