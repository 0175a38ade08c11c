"""
Garden planning route.

Endpoints:
  POST /api/plan - Generate a companion-planting layout for a garden grid
"""

import logging
from fastapi import APIRouter, Depends, HTTPException

from dependencies import get_catalogue, link
from schemas import ErrorResponse, PlanEnvelope, PlanRequest
from services.catalogue import Catalogue
from services.garden_engine import InvalidLayoutError, plan
from services.plan_request import result_to_response, to_engine_inputs

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api",
    tags=["plan"],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


@router.post("/plan", response_model=PlanEnvelope, response_model_exclude_none=True)
def post_plan(req: PlanRequest, catalogue: Catalogue = Depends(get_catalogue)):
    """
    Generate a garden plan.

    Filters the catalogue by season / sun / soil / region / level, allocates
    the free cells between the candidates (explicit preference quantities
    first) and places every plant where it scores best against its
    neighbours. Anomalies are reported in ``warnings``; they never fail
    the request.
    """
    filters, preferences, layout = to_engine_inputs(req)
    logger.info(
        f"Plan request: season={req.season.value}, {len(layout)}x{len(layout[0])} grid, "
        f"preferences={[p.plant_id for p in preferences]}"
    )
    try:
        result = plan(catalogue, filters, preferences, layout)
    except InvalidLayoutError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Plan generation failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Plan generation failed.")

    return PlanEnvelope(
        payload=result_to_response(result),
        links={
            "self": link("/api/plan", "POST"),
            "plants": link("/api/plants"),
        },
    )
