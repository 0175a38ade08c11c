"""
Candidate selection: filter the catalogue for a request and order it.

Ordering is strict and total:
  1. preferred plants, in the order the user listed them
  2. every other match, most popular first (ties broken by id)
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from services.catalogue import (
    Catalogue,
    PlantType,
    Region,
    Season,
    SkillLevel,
    SoilType,
    SunExposure,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanFilters:
    """Growing conditions of a request. ``None`` matches everything."""
    season: Season
    sun: Optional[SunExposure] = None
    soil: Optional[SoilType] = None
    region: Optional[Region] = None
    skill: Optional[SkillLevel] = None


@dataclass(frozen=True)
class Preference:
    plant_id: str
    quantity: Optional[int] = None


@dataclass(frozen=True)
class Candidate:
    """A selected plant type with its explicit quantity, if any."""
    plant: PlantType
    quantity: Optional[int] = None
    preferred: bool = False


def matches(plant: PlantType, filters: PlanFilters) -> bool:
    if filters.season not in plant.seasons:
        return False
    if filters.sun is not None and filters.sun not in plant.sun:
        return False
    if filters.soil is not None and filters.soil not in plant.soils:
        return False
    if filters.region is not None and filters.region not in plant.regions:
        return False
    if filters.skill is not None and plant.skill.rank > filters.skill.rank:
        return False
    return True


def select_candidates(
    catalogue: Catalogue,
    filters: PlanFilters,
    preferences: Iterable[Preference] = (),
) -> Tuple[List[Candidate], List[str]]:
    """Return the ordered candidate list and the warnings it produced."""
    warnings: List[str] = []
    eligible = {p.id: p for p in catalogue if matches(p, filters)}

    ordered: List[Candidate] = []
    seen = set()
    for pref in preferences:
        if pref.plant_id in seen:
            continue
        seen.add(pref.plant_id)
        plant = eligible.get(pref.plant_id)
        if plant is None:
            if pref.plant_id in catalogue:
                msg = (f"Plant '{pref.plant_id}' does not match the requested growing "
                       f"conditions, skipped.")
            else:
                msg = f"Plant '{pref.plant_id}' not found in the catalogue, skipped."
            logger.info(msg)
            warnings.append(msg)
            continue
        ordered.append(Candidate(plant=plant, quantity=pref.quantity, preferred=True))

    rest = sorted(
        (p for pid, p in eligible.items() if pid not in seen),
        key=lambda p: (p.popularity, p.id),
    )
    ordered.extend(Candidate(plant=p) for p in rest)
    return ordered, warnings
