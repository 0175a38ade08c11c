"""
Garden planning engine.

Selects candidate plants for a request, allocates instance counts to the
free space, and places each instance greedily on the grid where it earns
the best companion-planting score.
"""

from .allocator import Allocation, AllocationPlan, allocate
from .compatibility import (
    BAD_COMPANION_SCORE,
    GOOD_COMPANION_SCORE,
    Relationship,
    grid_score,
    is_compatible,
    placement_score,
    placement_scores,
    relationship,
)
from .grid import (
    AnchorCell,
    BlockedCell,
    ContinuationCell,
    EmptyCell,
    GardenGrid,
    InvalidLayoutError,
    validate_layout,
)
from .placer import GridPlacer, Placement
from .planner import GardenPlanner, PlannerState, PlanResult, plan
from .selector import Candidate, PlanFilters, Preference, select_candidates

__all__ = [
    "Allocation",
    "AllocationPlan",
    "allocate",
    "BAD_COMPANION_SCORE",
    "GOOD_COMPANION_SCORE",
    "Relationship",
    "grid_score",
    "is_compatible",
    "placement_score",
    "placement_scores",
    "relationship",
    "AnchorCell",
    "BlockedCell",
    "ContinuationCell",
    "EmptyCell",
    "GardenGrid",
    "InvalidLayoutError",
    "validate_layout",
    "GridPlacer",
    "Placement",
    "GardenPlanner",
    "PlannerState",
    "PlanResult",
    "plan",
    "Candidate",
    "PlanFilters",
    "Preference",
    "select_candidates",
]
