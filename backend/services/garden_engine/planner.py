"""
Garden planner: orchestrates one planning request.

States run strictly in order, with no backtracking:

    VALIDATING -> PRE_FILLING -> CHECKING_FULLY_OCCUPIED -> SELECTING
               -> ALLOCATING -> PLACING -> REPORTING

Anomalies (unknown ids, conflicting pre-placements, leftover space, ...)
become warning strings; the only exception raised is InvalidLayoutError
for a layout that is not a non-empty rectangle.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from services.catalogue import Catalogue
from .allocator import AllocationPlan, allocate
from .compatibility import grid_score
from .grid import (
    BLOCKED_MARKER,
    BlockedCell,
    GardenGrid,
    LayoutCell,
    validate_layout,
)
from .placer import GridPlacer
from .selector import Candidate, PlanFilters, Preference, select_candidates

logger = logging.getLogger(__name__)

PRE_PLACED_REASON = "Present in the existing layout."
FULLY_OCCUPIED_WARNING = "The grid is already fully occupied by the existing layout."


class PlannerState(str, enum.Enum):
    VALIDATING = "validating"
    PRE_FILLING = "pre_filling"
    CHECKING_FULLY_OCCUPIED = "checking_fully_occupied"
    SELECTING = "selecting"
    ALLOCATING = "allocating"
    PLACING = "placing"
    REPORTING = "reporting"
    DONE = "done"


@dataclass
class PlanResult:
    grid: GardenGrid
    score: int
    warnings: List[str] = field(default_factory=list)
    allocation: AllocationPlan = field(default_factory=AllocationPlan)

    @property
    def rows(self) -> int:
        return self.grid.rows

    @property
    def cols(self) -> int:
        return self.grid.cols


class GardenPlanner:
    """Runs the planning state machine for a single request.

    The catalogue is shared and only read; the grid, the allocation plan
    and the warning list belong to this instance.
    """

    def __init__(
        self,
        catalogue: Catalogue,
        filters: PlanFilters,
        preferences: Sequence[Preference],
        layout: Sequence[Sequence[LayoutCell]],
    ):
        self.catalogue = catalogue
        self.filters = filters
        self.preferences = list(preferences)
        self.layout = layout
        self.state = PlannerState.VALIDATING
        self.grid: Optional[GardenGrid] = None
        self.warnings: List[str] = []
        self.score = 0
        self.candidates: List[Candidate] = []
        self.allocation = AllocationPlan()

    def run(self) -> PlanResult:
        self._validate()
        self._pre_fill()
        if self._check_fully_occupied():
            return self._report(skip_empty_count=True)
        self._select()
        self._allocate()
        self._place()
        return self._report()

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    def _enter(self, state: PlannerState) -> None:
        logger.debug(f"planner: {self.state.value} -> {state.value}")
        self.state = state

    def _warn(self, message: str) -> None:
        logger.info(message)
        self.warnings.append(message)

    def _validate(self) -> None:
        rows, cols = validate_layout(self.layout)
        self.grid = GardenGrid(rows, cols)

    def _pre_fill(self) -> None:
        self._enter(PlannerState.PRE_FILLING)
        grid = self.grid

        # Blocked markers first so that they win over any pre-placement.
        for r, row in enumerate(self.layout):
            for c, marker in enumerate(row):
                if marker is BLOCKED_MARKER:
                    grid.block(r, c)

        for r, row in enumerate(self.layout):
            for c, marker in enumerate(row):
                if marker is None or isinstance(marker, bool):
                    continue
                self._pre_place(r, c, str(marker))

    def _pre_place(self, row: int, col: int, plant_id: str) -> None:
        grid = self.grid
        current = grid.plant_at(row, col)
        if current is not None and current.plant_id == plant_id:
            # cell already covered by this plant's footprint
            return

        plant = self.catalogue.get(plant_id)
        if plant is None:
            self._warn(f"Plant '{plant_id}' at ({row}, {col}) not found in the catalogue, skipped.")
            return

        span = plant.span
        if row + span > grid.rows or col + span > grid.cols:
            self._warn(
                f"Plant '{plant_id}' at ({row}, {col}) needs a {span}x{span} footprint "
                f"that does not fit inside the grid, skipped."
            )
            return
        footprint = list(grid.footprint(row, col, span))
        if any(isinstance(grid.cells[r][c], BlockedCell) for r, c in footprint):
            self._warn(
                f"Plant '{plant_id}' at ({row}, {col}) overlaps a blocked cell, skipped."
            )
            return
        if any(grid.is_occupied(r, c) for r, c in footprint):
            self._warn(
                f"Plant '{plant_id}' at ({row}, {col}) overlaps another plant, skipped."
            )
            return
        grid.place(row, col, plant.id, plant.name, span, PRE_PLACED_REASON)

    def _check_fully_occupied(self) -> bool:
        self._enter(PlannerState.CHECKING_FULLY_OCCUPIED)
        self.score = grid_score(self.grid, self.catalogue.get)
        if self.grid.empty_count() == 0:
            self._warn(FULLY_OCCUPIED_WARNING)
            return True
        return False

    def _select(self) -> None:
        self._enter(PlannerState.SELECTING)
        self.candidates, warnings = select_candidates(self.catalogue, self.filters, self.preferences)
        self.warnings.extend(warnings)

    def _allocate(self) -> None:
        self._enter(PlannerState.ALLOCATING)
        self.allocation = allocate(self.candidates, self.grid.empty_count())

    def _place(self) -> None:
        self._enter(PlannerState.PLACING)
        placer = GridPlacer(self.grid, self.catalogue.get, initial_score=self.score)
        for item in self.allocation.instances():
            placer.place(item.plant, preferred=item.preferred)
        self.score = placer.score

    def _report(self, skip_empty_count: bool = False) -> PlanResult:
        self._enter(PlannerState.REPORTING)
        if not skip_empty_count:
            empty = self.grid.empty_count()
            if empty > 0:
                self._warn(
                    f"{empty} empty cell(s): not enough compatible plants to fill the entire grid."
                )
        logger.info(
            f"Plan {self.grid.rows}x{self.grid.cols}: {len(self.candidates)} candidates, "
            f"{self.allocation.instance_count} instances allocated, score={self.score}, "
            f"warnings={len(self.warnings)}"
        )
        self._enter(PlannerState.DONE)
        return PlanResult(
            grid=self.grid,
            score=self.score,
            warnings=list(self.warnings),
            allocation=self.allocation,
        )


def plan(
    catalogue: Catalogue,
    filters: PlanFilters,
    preferences: Sequence[Preference],
    layout: Sequence[Sequence[LayoutCell]],
) -> PlanResult:
    """Plan a garden: the single entry point of the engine."""
    return GardenPlanner(catalogue, filters, preferences, layout).run()

