"""Greedy placement."""
from services.garden_engine import GardenGrid, GridPlacer


def _lookup(*plants):
    by_id = {p.id: p for p in plants}
    return by_id.get


def test_first_placement_goes_top_left(make_plant):
    big = make_plant("big", span=2)
    grid = GardenGrid(4, 4)
    placer = GridPlacer(grid, _lookup(big))
    placement = placer.place(big, preferred=True)
    assert (placement.row, placement.col, placement.score) == (0, 0, 0)
    assert grid.cells[0][0].reason == "First placed (preferred, beginner-friendly)"


def test_prefers_good_neighbour(make_plant):
    a = make_plant("a", good=("b",))
    b = make_plant("b")
    grid = GardenGrid(1, 3)
    grid.place(0, 0, "a", "A", 1, "")
    placer = GridPlacer(grid, _lookup(a, b))
    placement = placer.place(b)
    assert (placement.row, placement.col) == (0, 1)
    assert placer.score == 2
    assert grid.cells[0][1].reason == "Placed for companion score +2: good companion with A"


def test_avoids_bad_neighbour(make_plant):
    a = make_plant("a", bad=("b",))
    b = make_plant("b", skill="expert", category="herb")
    grid = GardenGrid(1, 3)
    grid.place(0, 0, "a", "A", 1, "")
    placer = GridPlacer(grid, _lookup(a, b))
    placement = placer.place(b)
    assert (placement.row, placement.col) == (0, 2)
    assert placer.score == 0
    assert grid.cells[0][2].reason == "First placed (herb)"


def test_forced_bad_placement_is_scored(make_plant):
    a = make_plant("a", bad=("b",))
    b = make_plant("b")
    grid = GardenGrid(1, 2)
    grid.place(0, 0, "a", "A", 1, "")
    placer = GridPlacer(grid, _lookup(a, b), initial_score=5)
    placer.place(b)
    assert placer.score == 2
    assert grid.cells[0][1].reason == "Placed for companion score -3: constrained placement near A"


def test_no_room_returns_none(make_plant):
    big = make_plant("big", span=2)
    grid = GardenGrid(2, 3)
    grid.block(1, 1)
    placer = GridPlacer(grid, _lookup(big))
    assert placer.place(big) is None
    assert grid.empty_count() == 5
    assert placer.placements == []
