"""
Companion-planting compatibility.

Relationships are looked up from both sides so that a catalogue which
declares a pairing on only one of the two plants still scores it.
"""

import enum
from typing import Callable, Optional

import numpy as np

from services.catalogue import PlantType
from .grid import GardenGrid, window_sums

GOOD_COMPANION_SCORE = 2
BAD_COMPANION_SCORE = -3


class Relationship(str, enum.Enum):
    GOOD = "good"
    BAD = "bad"
    NEUTRAL = "neutral"


_CONTRIBUTION = {
    Relationship.GOOD: GOOD_COMPANION_SCORE,
    Relationship.BAD: BAD_COMPANION_SCORE,
    Relationship.NEUTRAL: 0,
}


def relationship(a: PlantType, b: PlantType) -> Relationship:
    """Companion relationship between two plant types (symmetric)."""
    if b.id in a.good_companions or a.id in b.good_companions:
        return Relationship.GOOD
    if b.id in a.bad_companions or a.id in b.bad_companions:
        return Relationship.BAD
    return Relationship.NEUTRAL


def contribution(a: PlantType, b: PlantType) -> int:
    return _CONTRIBUTION[relationship(a, b)]


def is_compatible(a: PlantType, b: PlantType) -> bool:
    """True unless the two plants are bad companions."""
    return relationship(a, b) != Relationship.BAD


PlantLookup = Callable[[str], Optional[PlantType]]


def placement_score(
    grid: GardenGrid,
    plant: PlantType,
    row: int,
    col: int,
    lookup: PlantLookup,
) -> int:
    """
    Score of putting *plant* with its top-left at (row, col).

    Every occupied cell bordering the footprint contributes once, using the
    relationship between *plant* and the plant owning that cell.
    """
    score = 0
    for r, c in grid.perimeter(row, col, plant.span):
        neighbour = grid.plant_at(r, c)
        if neighbour is None:
            continue
        other = lookup(neighbour.plant_id)
        if other is not None:
            score += contribution(plant, other)
    return score


def placement_scores(grid: GardenGrid, plant: PlantType, lookup: PlantLookup) -> np.ndarray:
    """
    :func:`placement_score` for every top-left position at once.

    Returns a (rows-span+1, cols-span+1) array; entries are only meaningful
    where ``grid.free_mask(plant.span)`` is True.  The occupied cells are
    weighted by their contribution to *plant* and padded with a zero border;
    a (span+2) window minus its four corners is then the perimeter sum,
    since the footprint itself is empty wherever the plant can go.
    """
    span = plant.span
    if span > grid.rows or span > grid.cols:
        return np.zeros((0, 0), dtype=np.int64)

    def weight(plant_id: str) -> int:
        other = lookup(plant_id)
        return contribution(plant, other) if other is not None else 0

    w = np.pad(grid.occupant_weights(weight), 1)
    n = span + 1
    return (
        window_sums(w, span + 2)
        - w[:-n, :-n] - w[:-n, n:] - w[n:, :-n] - w[n:, n:]
    )


def grid_score(grid: GardenGrid, lookup: PlantLookup) -> int:
    """
    Companion score of a whole grid.

    Sums the contribution of every pair of 4-adjacent occupied cells that
    belong to different footprints, each pair counted once.
    """
    score = 0
    for r in range(grid.rows):
        for c in range(grid.cols):
            here = grid.anchor_of(r, c)
            if here is None:
                continue
            for nr, nc in ((r, c + 1), (r + 1, c)):
                if not grid.in_bounds(nr, nc):
                    continue
                there = grid.anchor_of(nr, nc)
                if there is None or there == here:
                    continue
                a = lookup(grid.cells[here[0]][here[1]].plant_id)
                b = lookup(grid.cells[there[0]][there[1]].plant_id)
                if a is not None and b is not None:
                    score += contribution(a, b)
    return score
