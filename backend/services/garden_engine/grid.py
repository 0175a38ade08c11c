"""
Garden grid: a rows x cols arena of cells addressed by (row, col).

Every cell is exactly one of:
  - EmptyCell:        plantable and free
  - BlockedCell:      path / obstacle, never planted
  - AnchorCell:       top-left cell of a placed footprint (owns the plant data)
  - ContinuationCell: any other cell of a footprint, pointing back to its anchor

A numpy mask mirrors which cells are still empty so that free s x s
squares can be found with an integral image instead of nested loops.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np


class InvalidLayoutError(ValueError):
    """Raised when a layout matrix is empty or not rectangular."""


Coord = Tuple[int, int]

# Layout markers (as received from the request): None or False = empty,
# True = blocked, any string = pre-placed plant id
BLOCKED_MARKER = True

LayoutCell = Union[None, bool, str]


@dataclass(frozen=True)
class EmptyCell:
    state = "empty"


@dataclass(frozen=True)
class BlockedCell:
    state = "blocked"


@dataclass(frozen=True)
class AnchorCell:
    plant_id: str
    name: str
    span: int
    reason: str
    state = "anchor"


@dataclass(frozen=True)
class ContinuationCell:
    anchor: Coord
    state = "continuation"


Cell = Union[EmptyCell, BlockedCell, AnchorCell, ContinuationCell]

EMPTY = EmptyCell()
BLOCKED = BlockedCell()


def window_sums(values: np.ndarray, size: int) -> np.ndarray:
    """Sum of every size x size window of *values*, indexed by its top-left corner."""
    ii = np.zeros((values.shape[0] + 1, values.shape[1] + 1), dtype=np.int64)
    ii[1:, 1:] = values.cumsum(axis=0).cumsum(axis=1)
    return ii[size:, size:] - ii[:-size, size:] - ii[size:, :-size] + ii[:-size, :-size]


def validate_layout(layout: Sequence[Sequence[LayoutCell]]) -> Tuple[int, int]:
    """Check that *layout* is a non-empty rectangle and return (rows, cols)."""
    if not layout:
        raise InvalidLayoutError("Layout must contain at least one row.")
    cols = len(layout[0])
    if cols == 0:
        raise InvalidLayoutError("Layout rows must not be empty.")
    for r, row in enumerate(layout):
        if len(row) != cols:
            raise InvalidLayoutError(
                f"Layout must be rectangular: row {r} has {len(row)} cells, expected {cols}."
            )
    return len(layout), cols


class GardenGrid:
    """Mutable grid owned by a single planning request."""

    def __init__(self, rows: int, cols: int):
        self.rows = rows
        self.cols = cols
        self.cells: List[List[Cell]] = [[EMPTY] * cols for _ in range(rows)]
        self._free = np.ones((rows, cols), dtype=bool)
        # index into _occupant_ids of the plant covering each cell, -1 if none
        self._occupant = np.full((rows, cols), -1, dtype=np.int32)
        self._occupant_ids: List[str] = []
        self._occupant_index: Dict[str, int] = {}

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def is_empty(self, row: int, col: int) -> bool:
        return bool(self._free[row, col])

    def is_occupied(self, row: int, col: int) -> bool:
        return isinstance(self.cells[row][col], (AnchorCell, ContinuationCell))

    def empty_count(self) -> int:
        return int(self._free.sum())

    def anchor_of(self, row: int, col: int) -> Optional[Coord]:
        """Coordinates of the anchor owning (row, col), or None if unoccupied."""
        cell = self.cells[row][col]
        if isinstance(cell, AnchorCell):
            return (row, col)
        if isinstance(cell, ContinuationCell):
            return cell.anchor
        return None

    def plant_at(self, row: int, col: int) -> Optional[AnchorCell]:
        """The anchor cell of the plant covering (row, col), if any."""
        anchor = self.anchor_of(row, col)
        if anchor is None:
            return None
        return self.cells[anchor[0]][anchor[1]]

    def free_mask(self, span: int) -> np.ndarray:
        """Boolean (rows-span+1, cols-span+1) array: True where an all-empty
        span x span square has its top-left corner."""
        if span > self.rows or span > self.cols:
            return np.zeros((0, 0), dtype=bool)
        return window_sums(self._free.astype(np.int64), span) == span * span

    def free_squares(self, span: int) -> List[Coord]:
        """Top-left corners of every all-empty span x span square, row-major."""
        # argwhere walks the array in C order, i.e. row-major
        return [(int(r), int(c)) for r, c in np.argwhere(self.free_mask(span))]

    def occupant_weights(self, weight_of: Callable[[str], int]) -> np.ndarray:
        """Per-cell ``weight_of(plant_id)`` of the covering plant, 0 where unoccupied."""
        weights = np.array([weight_of(pid) for pid in self._occupant_ids] + [0], dtype=np.int64)
        # -1 picks the trailing 0
        return weights[self._occupant]

    def footprint(self, row: int, col: int, span: int) -> Iterator[Coord]:
        for r in range(row, row + span):
            for c in range(col, col + span):
                yield (r, c)

    def perimeter(self, row: int, col: int, span: int) -> Iterator[Coord]:
        """In-bounds cells 4-adjacent to the span x span square at (row, col)."""
        for c in range(col, col + span):
            if row - 1 >= 0:
                yield (row - 1, c)
            if row + span < self.rows:
                yield (row + span, c)
        for r in range(row, row + span):
            if col - 1 >= 0:
                yield (r, col - 1)
            if col + span < self.cols:
                yield (r, col + span)

    def anchors(self) -> Iterator[Tuple[Coord, AnchorCell]]:
        for r, row in enumerate(self.cells):
            for c, cell in enumerate(row):
                if isinstance(cell, AnchorCell):
                    yield (r, c), cell

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def block(self, row: int, col: int) -> None:
        self.cells[row][col] = BLOCKED
        self._free[row, col] = False

    def place(self, row: int, col: int, plant_id: str, name: str, span: int, reason: str) -> None:
        """Commit a footprint. The square must be free (checked by the caller)."""
        for r, c in self.footprint(row, col, span):
            self.cells[r][c] = ContinuationCell(anchor=(row, col))
        self.cells[row][col] = AnchorCell(plant_id=plant_id, name=name, span=span, reason=reason)
        self._free[row:row + span, col:col + span] = False
        idx = self._occupant_index.get(plant_id)
        if idx is None:
            idx = self._occupant_index[plant_id] = len(self._occupant_ids)
            self._occupant_ids.append(plant_id)
        self._occupant[row:row + span, col:col + span] = idx

    def __repr__(self) -> str:
        return f"GardenGrid({self.rows}x{self.cols}, empty={self.empty_count()})"
