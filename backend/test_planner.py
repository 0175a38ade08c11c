"""End-to-end planning through the engine entry point."""
import time

from services.catalogue import Season
from services.garden_engine import (
    AnchorCell,
    BlockedCell,
    ContinuationCell,
    EmptyCell,
    GardenPlanner,
    PlanFilters,
    PlannerState,
    Preference,
    grid_score,
    plan,
)
from services.garden_engine.planner import FULLY_OCCUPIED_WARNING, PRE_PLACED_REASON

SUMMER = PlanFilters(season=Season.SUMMER)


def _empty(rows, cols):
    return [[None] * cols for _ in range(rows)]


def _anchor_ids(grid):
    return [cell.plant_id for _, cell in grid.anchors()]


def test_single_preferred_plant_lands_top_left(make_plant, make_catalogue):
    cat = make_catalogue(make_plant("x", span=2))
    result = plan(cat, SUMMER, [Preference("x", 1)], _empty(4, 4))
    anchor = result.grid.cells[0][0]
    assert isinstance(anchor, AnchorCell) and anchor.plant_id == "x"
    assert _anchor_ids(result.grid) == ["x"]
    assert result.warnings == [
        "12 empty cell(s): not enough compatible plants to fill the entire grid."
    ]


def test_good_companion_placed_next_to_existing_plant(make_plant, make_catalogue):
    cat = make_catalogue(
        make_plant("a", seasons=("spring",), good=("b",)),
        make_plant("b"),
    )
    result = plan(cat, SUMMER, [Preference("b", 1)], [["a", None, None]])
    assert result.grid.cells[0][0].reason == PRE_PLACED_REASON
    assert result.grid.cells[0][1].plant_id == "b"
    assert isinstance(result.grid.cells[0][2], EmptyCell)
    assert result.score == 2


def test_fully_blocked_grid(make_plant, make_catalogue):
    cat = make_catalogue(make_plant("a"))
    result = plan(cat, SUMMER, [], [[True, True], [True, True]])
    assert all(isinstance(c, BlockedCell) for row in result.grid.cells for c in row)
    assert result.score == 0
    assert result.warnings == [FULLY_OCCUPIED_WARNING]
    assert result.allocation.allocations == []


def test_fully_occupied_keeps_existing_score(make_plant, make_catalogue):
    cat = make_catalogue(make_plant("a", good=("b",)), make_plant("b"))
    result = plan(cat, SUMMER, [], [["a", "b"]])
    assert result.score == 2
    assert result.warnings == [FULLY_OCCUPIED_WARNING]


def test_unknown_pre_placed_id(make_plant, make_catalogue):
    cat = make_catalogue(make_plant("a"))
    result = plan(cat, SUMMER, [], [["unicorn", None], [None, None]])
    assert "Plant 'unicorn' at (0, 0) not found in the catalogue, skipped." in result.warnings
    assert _anchor_ids(result.grid) == ["a"] * 4
    assert result.grid.empty_count() == 0


def test_pre_placed_overlapping_blocked_cell(make_plant, make_catalogue):
    cat = make_catalogue(make_plant("big", span=2))
    layout = [["big", None, None], [None, True, None], [None, None, None]]
    result = plan(cat, PlanFilters(season=Season.WINTER), [], layout)
    assert result.warnings[0] == "Plant 'big' at (0, 0) overlaps a blocked cell, skipped."
    assert isinstance(result.grid.cells[0][0], EmptyCell)


def test_pre_placed_overlapping_another_plant(make_plant, make_catalogue):
    cat = make_catalogue(make_plant("big", span=2), make_plant("a"))
    layout = [["big", "a"], [None, None]]
    result = plan(cat, SUMMER, [], layout)
    assert result.warnings[0] == "Plant 'a' at (0, 1) overlaps another plant, skipped."
    assert isinstance(result.grid.cells[0][1], ContinuationCell)


def test_pre_placed_footprint_repeated_is_silent(make_plant, make_catalogue):
    cat = make_catalogue(make_plant("big", span=2))
    result = plan(cat, SUMMER, [], [["big", "big"], ["big", "big"]])
    assert _anchor_ids(result.grid) == ["big"]
    assert result.warnings == [FULLY_OCCUPIED_WARNING]


def test_pre_placed_footprint_out_of_bounds(make_plant, make_catalogue):
    cat = make_catalogue(make_plant("big", span=2))
    result = plan(cat, PlanFilters(season=Season.WINTER), [], [[None, "big"]])
    assert "does not fit inside the grid" in result.warnings[0]
    assert result.grid.empty_count() == 2


def test_unplaceable_instance_is_skipped_silently(make_plant, make_catalogue):
    cat = make_catalogue(make_plant("big", span=2))
    layout = [[None, None, None], [None, True, None]]
    result = plan(cat, SUMMER, [Preference("big", 1)], layout)
    assert result.allocation.count_for("big") == 1
    assert _anchor_ids(result.grid) == []
    assert result.score == 0
    assert result.warnings == [
        "5 empty cell(s): not enough compatible plants to fill the entire grid."
    ]


def test_state_machine_finishes(make_plant, make_catalogue):
    planner = GardenPlanner(make_catalogue(make_plant("a")), SUMMER, [], _empty(1, 1))
    assert planner.state == PlannerState.VALIDATING
    planner.run()
    assert planner.state == PlannerState.DONE


# ---------- Properties on the shipped catalogue ----------

def _request():
    layout = _empty(10, 7)
    layout[0][0] = "tomato"
    layout[4][3] = True
    layout[4][4] = True
    layout[9][6] = "unicorn"
    prefs = [Preference("zucchini", 3), Preference("basil"), Preference("fennel")]
    return PlanFilters(season=Season.SUMMER), prefs, layout


def test_partition_invariant(catalogue):
    filters, prefs, layout = _request()
    result = plan(catalogue, filters, prefs, layout)
    grid = result.grid
    anchored = sum(cell.span ** 2 for _, cell in grid.anchors())
    blocked = sum(isinstance(c, BlockedCell) for row in grid.cells for c in row)
    empty = sum(isinstance(c, EmptyCell) for row in grid.cells for c in row)
    continuation = sum(isinstance(c, ContinuationCell) for row in grid.cells for c in row)
    assert anchored + blocked + empty == grid.rows * grid.cols
    assert anchored == len(list(grid.anchors())) + continuation
    assert empty == grid.empty_count()


def test_score_matches_final_grid(catalogue):
    filters, prefs, layout = _request()
    result = plan(catalogue, filters, prefs, layout)
    assert result.score == grid_score(result.grid, catalogue.get)


def test_quantity_honoured(catalogue):
    filters, prefs, layout = _request()
    result = plan(catalogue, filters, prefs, layout)
    assert result.allocation.count_for("zucchini") == 3
    assert _anchor_ids(result.grid).count("zucchini") == 3


def test_plan_is_deterministic(catalogue):
    filters, prefs, layout = _request()
    first = plan(catalogue, filters, prefs, layout)
    second = plan(catalogue, filters, prefs, layout)
    assert first.grid.cells == second.grid.cells
    assert first.score == second.score
    assert first.warnings == second.warnings
    assert first.allocation.to_list() == second.allocation.to_list()


def test_warnings_on_shipped_catalogue(catalogue):
    filters, prefs, layout = _request()
    result = plan(catalogue, filters, prefs, layout)
    assert "Plant 'unicorn' at (9, 6) not found in the catalogue, skipped." in result.warnings
    assert result.grid.cells[0][0].plant_id == "tomato"


def test_largest_allowed_grid_plans_quickly(catalogue):
    # 2500 cells is the default request limit (15 m x 15 m)
    started = time.perf_counter()
    result = plan(catalogue, PlanFilters(season=Season.SUMMER), [], _empty(50, 50))
    elapsed = time.perf_counter() - started
    assert result.grid.empty_count() < 50 * 50
    assert result.score == grid_score(result.grid, catalogue.get)
    assert elapsed < 10
