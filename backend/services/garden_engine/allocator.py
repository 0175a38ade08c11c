"""
Quota allocation: how many instances of each candidate to plant.

Two deterministic passes over the ordered candidates:

Pass 1  Explicit quantities, in order.  Each gets as many whole instances
        as requested, capped by what still fits.
Pass 2  Candidates without a quantity share the rest.  Each receives
        floor(remaining / (k * span^2)) instances, then the leftover cells
        go one extra instance at a time to the best-ranked candidates.
        Distribution stops at the first candidate whose footprint does
        not fit the leftover; lower-ranked candidates are not tried.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Sequence

from services.catalogue import PlantType
from .selector import Candidate

logger = logging.getLogger(__name__)


@dataclass
class Allocation:
    plant: PlantType
    count: int
    preferred: bool = False


@dataclass
class AllocationPlan:
    """Ordered (plant, count) pairs for one request."""
    allocations: List[Allocation] = field(default_factory=list)

    @property
    def total_area(self) -> int:
        return sum(a.count * a.plant.area for a in self.allocations)

    @property
    def instance_count(self) -> int:
        return sum(a.count for a in self.allocations)

    def instances(self) -> Iterator[Allocation]:
        """Flat work list: one item per instance, candidate by candidate."""
        for a in self.allocations:
            for _ in range(a.count):
                yield a

    def count_for(self, plant_id: str) -> int:
        return sum(a.count for a in self.allocations if a.plant.id == plant_id)

    def to_list(self) -> List[dict]:
        return [{"id": a.plant.id, "count": a.count} for a in self.allocations if a.count > 0]


def allocate(candidates: Sequence[Candidate], free_cells: int) -> AllocationPlan:
    """Split *free_cells* between *candidates* (see module docstring)."""
    if free_cells <= 0 or not candidates:
        return AllocationPlan()

    counts = [0] * len(candidates)
    remaining = free_cells

    # Pass 1: explicit quantities
    for i, cand in enumerate(candidates):
        if cand.quantity is None:
            continue
        area = cand.plant.area
        n = min(cand.quantity, remaining // area)
        counts[i] = n
        remaining -= n * area
        if n < cand.quantity:
            logger.debug(f"Quota for '{cand.plant.id}' reduced from {cand.quantity} to {n} (space)")

    # Pass 2: even split of what is left
    sharing = [i for i, cand in enumerate(candidates) if cand.quantity is None]
    k = len(sharing)
    if k and remaining > 0:
        pool = remaining
        for i in sharing:
            area = candidates[i].plant.area
            n = pool // (k * area)
            counts[i] += n
            remaining -= n * area

        for i in sharing:
            area = candidates[i].plant.area
            if area > remaining:
                break
            counts[i] += 1
            remaining -= area

    plan = AllocationPlan([
        Allocation(plant=c.plant, count=n, preferred=c.preferred)
        for c, n in zip(candidates, counts)
    ])
    logger.debug(f"Allocated {plan.instance_count} instances over {plan.total_area}/{free_cells} cells")
    return plan
