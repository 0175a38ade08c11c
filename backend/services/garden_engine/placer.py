"""
Greedy grid placement.

Each instance goes to the free square with the best companion score;
ties go to the earliest square in row-major order.  Nothing is ever moved
once placed, so the result is not guaranteed to be the best possible
packing (that problem is NP-hard); it is deterministic and fast.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from services.catalogue import PlantType
from .compatibility import PlantLookup, placement_scores, relationship, Relationship
from .grid import Coord, GardenGrid

logger = logging.getLogger(__name__)


@dataclass
class Placement:
    plant_id: str
    row: int
    col: int
    score: int


class GridPlacer:
    """Places plant instances on one request's grid and keeps the running score."""

    def __init__(self, grid: GardenGrid, lookup: PlantLookup, initial_score: int = 0):
        self.grid = grid
        self.lookup = lookup
        self.score = initial_score
        self.placements: List[Placement] = []

    def best_position(self, plant: PlantType) -> Optional[Tuple[Coord, int]]:
        """Return ((row, col), score) of the best free square, or None."""
        fits = self.grid.free_mask(plant.span)
        if not fits.any():
            return None
        scores = placement_scores(self.grid, plant, self.lookup)
        masked = np.where(fits, scores, np.iinfo(np.int64).min)
        # argmax returns the first maximum of the flattened (row-major) array
        row, col = np.unravel_index(int(np.argmax(masked)), masked.shape)
        return (int(row), int(col)), int(scores[row, col])

    def place(self, plant: PlantType, preferred: bool = False) -> Optional[Placement]:
        """Place one instance of *plant*; returns None when no square fits."""
        found = self.best_position(plant)
        if found is None:
            logger.debug(f"No free {plant.span}x{plant.span} square left for '{plant.id}'")
            return None
        (row, col), score = found
        reason = self._reason(plant, row, col, score, preferred)
        self.grid.place(row, col, plant.id, plant.name, plant.span, reason)
        self.score += score
        placement = Placement(plant_id=plant.id, row=row, col=col, score=score)
        self.placements.append(placement)
        logger.debug(f"Placed '{plant.id}' at ({row}, {col}) score={score:+d}")
        return placement

    def _reason(self, plant: PlantType, row: int, col: int, score: int, preferred: bool) -> str:
        neighbours = self._neighbours(plant, row, col)
        if not neighbours:
            tags = ["preferred"] if preferred else [plant.category.value]
            if plant.beginner_friendly:
                tags.append("beginner-friendly")
            return f"First placed ({', '.join(tags)})"

        good = [n.name for n in neighbours if relationship(plant, n) == Relationship.GOOD]
        bad = [n.name for n in neighbours if relationship(plant, n) == Relationship.BAD]
        if good:
            detail = f"good companion with {', '.join(good)}"
        elif bad:
            detail = f"constrained placement near {', '.join(bad)}"
        else:
            detail = f"neutral with {', '.join(n.name for n in neighbours)}"
        return f"Placed for companion score {score:+d}: {detail}"

    def _neighbours(self, plant: PlantType, row: int, col: int) -> List[PlantType]:
        """Distinct neighbouring plant types, in perimeter scan order."""
        seen = set()
        out = []
        for r, c in self.grid.perimeter(row, col, plant.span):
            anchor = self.grid.plant_at(r, c)
            if anchor is None or anchor.plant_id in seen:
                continue
            other = self.lookup(anchor.plant_id)
            if other is not None:
                seen.add(anchor.plant_id)
                out.append(other)
        return out
