"""Pydantic schemas for API request/response validation."""

import math
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, StrictBool, StrictStr, model_validator

from config import CELL_SIZE_CM, MAX_GRID_CELLS
from services.catalogue import Category, Lifecycle, Region, Season, SkillLevel, SoilType, SunExposure
from services.garden_engine import validate_layout


# ---------- Shared ----------
class Link(BaseModel):
    href: str
    method: str = "GET"


class Pagination(BaseModel):
    page: int
    per_page: int
    total: int
    total_pages: int


class ErrorResponse(BaseModel):
    error: str


class Coordinate(BaseModel):
    row: int = Field(..., ge=0)
    col: int = Field(..., ge=0)


# ---------- Plants ----------
class PlantOut(BaseModel):
    id: str
    name: str
    latin_name: str
    span: int
    seasons: List[Season]
    sun: List[SunExposure]
    soils: List[SoilType]
    regions: List[Region]
    skill: SkillLevel
    beginner_friendly: bool
    category: Category
    lifecycle: Lifecycle
    spacing_cm: int
    good_companions: List[str]
    bad_companions: List[str]
    popularity: int


class PlantEnvelope(BaseModel):
    payload: PlantOut
    links: Dict[str, Link]


class PlantListResponse(BaseModel):
    items: List[PlantEnvelope]
    links: Dict[str, Link]
    pagination: Pagination


class CompanionInfo(BaseModel):
    id: str
    name: str


class CompanionsResponse(BaseModel):
    id: str
    name: str
    good: List[CompanionInfo] = []
    bad: List[CompanionInfo] = []


class CompanionsEnvelope(BaseModel):
    payload: CompanionsResponse
    links: Dict[str, Link]


# ---------- Plan request ----------
LayoutCellIn = Optional[Union[StrictBool, StrictStr]]


class PreferenceEntry(BaseModel):
    id: str = Field(..., min_length=1)
    quantity: Optional[int] = Field(default=None, ge=0, description="Desired number of plants")


class PlanRequest(BaseModel):
    """
    Garden planning request.

    The grid comes either from ``layout`` (each cell null/false = free,
    true = blocked, string = plant id already in the ground) or, when no
    layout is given, from ``width_m`` x ``length_m`` cut into
    CELL_SIZE_CM square cells.
    """
    season: Season
    sun: Optional[SunExposure] = None
    soil: Optional[SoilType] = None
    region: Optional[Region] = None
    level: Optional[SkillLevel] = None
    preferences: List[Union[StrictStr, PreferenceEntry]] = []

    layout: Optional[List[List[LayoutCellIn]]] = None
    width_m: Optional[float] = Field(default=None, gt=0, description="Garden width in metres")
    length_m: Optional[float] = Field(default=None, gt=0, description="Garden length in metres")
    blocked_cells: List[Coordinate] = []

    @model_validator(mode="after")
    def _check_grid(self) -> "PlanRequest":
        if self.layout is None:
            if self.width_m is None or self.length_m is None:
                raise ValueError("Either 'layout' or both 'width_m' and 'length_m' are required.")
            rows, cols = cells_for(self.length_m), cells_for(self.width_m)
        else:
            rows, cols = validate_layout(self.layout)

        if rows * cols > MAX_GRID_CELLS:
            raise ValueError(f"Garden grid of {rows}x{cols} cells exceeds the limit of {MAX_GRID_CELLS} cells.")
        for pos in self.blocked_cells:
            if pos.row >= rows or pos.col >= cols:
                raise ValueError(f"Blocked cell ({pos.row}, {pos.col}) is outside the {rows}x{cols} grid.")
        return self


def cells_for(metres: float) -> int:
    """Number of grid cells needed to cover *metres*."""
    return max(1, math.ceil(round(metres * 100 / CELL_SIZE_CM, 6)))


# ---------- Plan response ----------
class PlannedCell(BaseModel):
    state: str
    blocked: bool = False
    id: Optional[str] = None
    name: Optional[str] = None
    reason: Optional[str] = None
    span: Optional[int] = None
    anchor: Optional[Coordinate] = None


class AllocationOut(BaseModel):
    id: str
    count: int


class PlanResponse(BaseModel):
    rows: int
    cols: int
    grid: List[List[PlannedCell]]
    score: int
    warnings: List[str] = []
    allocations: List[AllocationOut] = []


class PlanEnvelope(BaseModel):
    payload: PlanResponse
    links: Dict[str, Link]
