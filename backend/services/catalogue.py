"""
Plant catalogue: the read-only collection of plant types.

Loaded once from plant_catalogue.json at startup and shared by every
request.  Records are validated with pydantic; the resulting PlantType
values are frozen and never mutated afterwards.
"""

import enum
import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class CatalogueError(ValueError):
    """Raised when the catalogue file cannot be loaded."""


# ---------- Enumerations ----------

class Season(str, enum.Enum):
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"


class SunExposure(str, enum.Enum):
    FULL_SUN = "full_sun"
    PARTIAL_SHADE = "partial_shade"
    SHADE = "shade"


class SoilType(str, enum.Enum):
    CLAY = "clay"
    SANDY = "sandy"
    LOAMY = "loamy"
    CHALKY = "chalky"
    HUMUS = "humus"


class Region(str, enum.Enum):
    TEMPERATE = "temperate"
    MEDITERRANEAN = "mediterranean"
    OCEANIC = "oceanic"
    CONTINENTAL = "continental"
    MOUNTAIN = "mountain"


class SkillLevel(str, enum.Enum):
    BEGINNER = "beginner"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        return _SKILL_RANK[self]


_SKILL_RANK = {SkillLevel.BEGINNER: 0, SkillLevel.EXPERT: 1}


class Category(str, enum.Enum):
    FRUIT = "fruit"
    VEGETABLE = "vegetable"
    HERB = "herb"
    ROOT = "root"
    BULB = "bulb"
    LEAFY = "leafy"
    POD = "pod"


class Lifecycle(str, enum.Enum):
    ANNUAL = "annual"
    BIENNIAL = "biennial"
    PERENNIAL = "perennial"


# ---------- On-disk record ----------

class PlantRecord(BaseModel):
    """One entry of plant_catalogue.json."""
    id: str = Field(..., min_length=1)
    name: str
    latin_name: str = ""
    span: int = Field(default=1, ge=1, le=8)
    seasons: List[Season]
    sun: List[SunExposure]
    soils: List[SoilType]
    regions: List[Region]
    skill: SkillLevel = SkillLevel.BEGINNER
    category: Category
    lifecycle: Lifecycle = Lifecycle.ANNUAL
    spacing_cm: int = Field(default=30, ge=1)
    good_companions: List[str] = []
    bad_companions: List[str] = []
    popularity: int = Field(default=1000, ge=0)


# ---------- Domain value ----------

@dataclass(frozen=True)
class PlantType:
    """A plant type as seen by the planning engine.

    ``span`` is the side of the square footprint in grid cells;
    ``popularity`` is a rank (lower = more common) used only to order
    candidates that were not explicitly preferred.
    """

    id: str
    name: str
    span: int
    seasons: FrozenSet[Season]
    sun: FrozenSet[SunExposure]
    soils: FrozenSet[SoilType]
    regions: FrozenSet[Region]
    skill: SkillLevel
    good_companions: FrozenSet[str]
    bad_companions: FrozenSet[str]
    popularity: int
    latin_name: str = ""
    category: Category = Category.VEGETABLE
    lifecycle: Lifecycle = Lifecycle.ANNUAL
    spacing_cm: int = 30

    @property
    def area(self) -> int:
        """Number of cells covered by one instance."""
        return self.span * self.span

    @property
    def beginner_friendly(self) -> bool:
        return self.skill == SkillLevel.BEGINNER

    @classmethod
    def from_record(cls, rec: PlantRecord) -> "PlantType":
        return cls(
            id=rec.id,
            name=rec.name,
            span=rec.span,
            seasons=frozenset(rec.seasons),
            sun=frozenset(rec.sun),
            soils=frozenset(rec.soils),
            regions=frozenset(rec.regions),
            skill=rec.skill,
            good_companions=frozenset(rec.good_companions),
            bad_companions=frozenset(rec.bad_companions),
            popularity=rec.popularity,
            latin_name=rec.latin_name,
            category=rec.category,
            lifecycle=rec.lifecycle,
            spacing_cm=rec.spacing_cm,
        )

    def to_dict(self) -> dict:
        """Serialize for the API (sets become sorted lists)."""
        return {
            "id": self.id,
            "name": self.name,
            "latin_name": self.latin_name,
            "span": self.span,
            "seasons": sorted(s.value for s in self.seasons),
            "sun": sorted(s.value for s in self.sun),
            "soils": sorted(s.value for s in self.soils),
            "regions": sorted(r.value for r in self.regions),
            "skill": self.skill.value,
            "beginner_friendly": self.beginner_friendly,
            "category": self.category.value,
            "lifecycle": self.lifecycle.value,
            "spacing_cm": self.spacing_cm,
            "good_companions": sorted(self.good_companions),
            "bad_companions": sorted(self.bad_companions),
            "popularity": self.popularity,
        }


class Catalogue:
    """Immutable id-indexed collection of PlantType values.

    Iteration follows the order of the source file.
    """

    def __init__(self, plants: List[PlantType]):
        by_id: Dict[str, PlantType] = {}
        for p in plants:
            if p.id in by_id:
                raise CatalogueError(f"Duplicate plant id '{p.id}' in catalogue")
            by_id[p.id] = p
        self._plants: Tuple[PlantType, ...] = tuple(plants)
        self._by_id = MappingProxyType(by_id)

        for p in self._plants:
            dangling = sorted((p.good_companions | p.bad_companions) - by_id.keys())
            if dangling:
                logger.warning(f"Plant '{p.id}' references unknown companions: {', '.join(dangling)}")

    def __len__(self) -> int:
        return len(self._plants)

    def __iter__(self) -> Iterator[PlantType]:
        return iter(self._plants)

    def __contains__(self, plant_id: object) -> bool:
        return plant_id in self._by_id

    def get(self, plant_id: str) -> Optional[PlantType]:
        return self._by_id.get(plant_id)

    def companions_of(self, plant_id: str) -> Tuple[List[PlantType], List[PlantType]]:
        """Resolve the declared good and bad companions of a plant.

        Unknown companion ids are skipped.  Raises KeyError for an
        unknown *plant_id*.
        """
        plant = self._by_id[plant_id]
        good = [self._by_id[c] for c in sorted(plant.good_companions) if c in self._by_id]
        bad = [self._by_id[c] for c in sorted(plant.bad_companions) if c in self._by_id]
        return good, bad

    def page(self, page: int, per_page: int) -> Tuple[List[PlantType], int]:
        """Return one page of plants (1-based) and the total page count."""
        total_pages = max(1, math.ceil(len(self._plants) / per_page))
        start = (page - 1) * per_page
        return list(self._plants[start:start + per_page]), total_pages


def load_catalogue(path: Union[str, Path]) -> Catalogue:
    """Read and validate plant_catalogue.json."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogueError(f"Could not read catalogue {path}: {e}") from e

    entries = raw.get("plants") if isinstance(raw, dict) else raw
    if not isinstance(entries, list):
        raise CatalogueError(f"Catalogue {path} must contain a list of plants")

    try:
        records = [PlantRecord.model_validate(e) for e in entries]
    except ValidationError as e:
        raise CatalogueError(f"Invalid plant record in {path}: {e}") from e

    catalogue = Catalogue([PlantType.from_record(r) for r in records])
    logger.info(f"Loaded {len(catalogue)} plant types from {path}")
    return catalogue
