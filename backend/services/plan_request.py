"""
Conversion between the HTTP plan schemas and the planning engine.

The engine only sees plain filters, preferences and a layout matrix; it
knows nothing about JSON field names or envelopes.
"""

from typing import List, Tuple

from schemas import PlanRequest, PlanResponse, cells_for
from services.garden_engine import (
    AnchorCell,
    BlockedCell,
    ContinuationCell,
    PlanFilters,
    PlanResult,
    Preference,
)
from services.garden_engine.grid import LayoutCell


def build_filters(req: PlanRequest) -> PlanFilters:
    return PlanFilters(
        season=req.season,
        sun=req.sun,
        soil=req.soil,
        region=req.region,
        skill=req.level,
    )


def build_preferences(req: PlanRequest) -> List[Preference]:
    prefs = []
    for entry in req.preferences:
        if isinstance(entry, str):
            prefs.append(Preference(plant_id=entry))
        else:
            prefs.append(Preference(plant_id=entry.id, quantity=entry.quantity))
    return prefs


def build_layout(req: PlanRequest) -> List[List[LayoutCell]]:
    """Layout matrix from the request, with extra blocked cells applied."""
    if req.layout is not None:
        layout = [list(row) for row in req.layout]
    else:
        rows, cols = cells_for(req.length_m), cells_for(req.width_m)
        layout = [[None] * cols for _ in range(rows)]
    for pos in req.blocked_cells:
        layout[pos.row][pos.col] = True
    return layout


def to_engine_inputs(req: PlanRequest) -> Tuple[PlanFilters, List[Preference], List[List[LayoutCell]]]:
    return build_filters(req), build_preferences(req), build_layout(req)


def result_to_response(result: PlanResult) -> PlanResponse:
    grid = []
    for row in result.grid.cells:
        out_row = []
        for cell in row:
            if isinstance(cell, AnchorCell):
                out_row.append({
                    "state": cell.state,
                    "id": cell.plant_id,
                    "name": cell.name,
                    "reason": cell.reason,
                    "span": cell.span,
                })
            elif isinstance(cell, ContinuationCell):
                out_row.append({
                    "state": cell.state,
                    "anchor": {"row": cell.anchor[0], "col": cell.anchor[1]},
                })
            elif isinstance(cell, BlockedCell):
                out_row.append({"state": cell.state, "blocked": True})
            else:
                out_row.append({"state": cell.state})
        grid.append(out_row)

    return PlanResponse(
        rows=result.rows,
        cols=result.cols,
        grid=grid,
        score=result.score,
        warnings=result.warnings,
        allocations=result.allocation.to_list(),
    )
