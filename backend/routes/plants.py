"""
Plant catalogue routes.

Endpoints:
  GET /api/plants                  - paginated catalogue listing
  GET /api/plants/{id}             - one plant
  GET /api/plants/{id}/companions  - resolved good / bad companions
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query

from dependencies import get_catalogue, link, plant_links
from schemas import (
    CompanionInfo,
    CompanionsEnvelope,
    CompanionsResponse,
    ErrorResponse,
    Pagination,
    PlantEnvelope,
    PlantListResponse,
)
from services.catalogue import Catalogue

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/plants",
    tags=["plants"],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


@router.get("", response_model=PlantListResponse)
def list_plants(
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=50, ge=1, le=200),
    catalogue: Catalogue = Depends(get_catalogue),
):
    """List the plant catalogue, one page at a time."""
    plants, total_pages = catalogue.page(page, per_page)
    items = [PlantEnvelope(payload=p.to_dict(), links=plant_links(p.id)) for p in plants]

    links = {"self": link(f"/api/plants?page={page}&per_page={per_page}")}
    if page < total_pages:
        links["next"] = link(f"/api/plants?page={page + 1}&per_page={per_page}")
    if page > 1:
        links["prev"] = link(f"/api/plants?page={min(page - 1, total_pages)}&per_page={per_page}")

    return PlantListResponse(
        items=items,
        links=links,
        pagination=Pagination(
            page=page,
            per_page=per_page,
            total=len(catalogue),
            total_pages=total_pages,
        ),
    )


@router.get("/{plant_id}", response_model=PlantEnvelope)
def get_plant(plant_id: str, catalogue: Catalogue = Depends(get_catalogue)):
    """Retrieve a single plant by id."""
    plant = catalogue.get(plant_id)
    if plant is None:
        raise HTTPException(status_code=404, detail=f"Plant '{plant_id}' not found.")
    links = plant_links(plant_id)
    links["collection"] = link("/api/plants")
    return PlantEnvelope(payload=plant.to_dict(), links=links)


@router.get("/{plant_id}/companions", response_model=CompanionsEnvelope)
def get_companions(plant_id: str, catalogue: Catalogue = Depends(get_catalogue)):
    """Good and bad companions declared for a plant."""
    plant = catalogue.get(plant_id)
    if plant is None:
        raise HTTPException(status_code=404, detail=f"Plant '{plant_id}' not found.")
    good, bad = catalogue.companions_of(plant_id)
    return CompanionsEnvelope(
        payload=CompanionsResponse(
            id=plant.id,
            name=plant.name,
            good=[CompanionInfo(id=p.id, name=p.name) for p in good],
            bad=[CompanionInfo(id=p.id, name=p.name) for p in bad],
        ),
        links={
            "self": link(f"/api/plants/{plant_id}/companions"),
            "plant": link(f"/api/plants/{plant_id}"),
        },
    )
