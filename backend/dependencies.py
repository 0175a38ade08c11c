"""Shared FastAPI dependencies and response helpers."""

from fastapi import Request

from schemas import Link
from services.catalogue import Catalogue


def get_catalogue(request: Request) -> Catalogue:
    """The process-wide catalogue loaded at startup (read-only)."""
    return request.app.state.catalogue


def link(href: str, method: str = "GET") -> Link:
    return Link(href=href, method=method)


def plant_links(plant_id: str) -> dict:
    return {
        "self": link(f"/api/plants/{plant_id}"),
        "companions": link(f"/api/plants/{plant_id}/companions"),
    }
