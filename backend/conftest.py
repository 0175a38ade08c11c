"""Shared pytest fixtures."""
import sys, os
sys.path.insert(0, os.path.dirname(__file__) or '.')

import pytest

from config import CATALOGUE_PATH
from services.catalogue import (
    Catalogue,
    Category,
    Region,
    Season,
    SkillLevel,
    SoilType,
    SunExposure,
    PlantType,
    load_catalogue,
)


def _make_plant(
    plant_id,
    span=1,
    seasons=("summer",),
    good=(),
    bad=(),
    popularity=1,
    skill="beginner",
    sun=("full_sun", "partial_shade", "shade"),
    soils=tuple(s.value for s in SoilType),
    regions=tuple(r.value for r in Region),
    category="vegetable",
):
    return PlantType(
        id=plant_id,
        name=plant_id.title(),
        span=span,
        seasons=frozenset(Season(s) for s in seasons),
        sun=frozenset(SunExposure(s) for s in sun),
        soils=frozenset(SoilType(s) for s in soils),
        regions=frozenset(Region(r) for r in regions),
        skill=SkillLevel(skill),
        good_companions=frozenset(good),
        bad_companions=frozenset(bad),
        popularity=popularity,
        category=Category(category),
    )


@pytest.fixture
def make_plant():
    """Factory for in-memory plant types."""
    return _make_plant


@pytest.fixture
def make_catalogue():
    def _build(*plants):
        return Catalogue(list(plants))
    return _build


@pytest.fixture(scope="session")
def catalogue():
    """The shipped plant catalogue."""
    return load_catalogue(CATALOGUE_PATH)
