"""
Companion Garden Planner – FastAPI Backend

Main entry point. Sets up logging, CORS, error bodies and routes, and loads
the plant catalogue once at startup.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import API_VERSION, CATALOGUE_PATH, CORS_ORIGINS, LOG_LEVEL
from services.catalogue import load_catalogue

# Import route modules
from routes.plants import router as plants_router
from routes.plan import router as plan_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(catalogue_path: Optional[Path] = None) -> FastAPI:
    """FastAPI app factory."""
    path = Path(catalogue_path) if catalogue_path else CATALOGUE_PATH

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load the catalogue on startup; it is read-only afterwards."""
        app.state.catalogue = load_catalogue(path)
        logger.info("Garden planner API ready")
        logger.info("   GET  /api/plants")
        logger.info("   GET  /api/plants/{id}")
        logger.info("   GET  /api/plants/{id}/companions")
        logger.info("   POST /api/plan")
        yield

    app = FastAPI(
        title="Companion Garden Planner",
        description=(
            "Browse a plant catalogue and generate companion-planting grid layouts "
            "based on season, soil, sun, region, skill level and planting preferences."
        ),
        version=API_VERSION,
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        parts = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
            parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
        message = "Invalid request: " + "; ".join(parts)
        logger.info(message)
        return JSONResponse(status_code=400, content={"error": message})

    # Include routers
    app.include_router(plants_router)
    app.include_router(plan_router)

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok", "version": API_VERSION}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    from config import HOST, PORT
    uvicorn.run("main:app", host=HOST, port=PORT, reload=True)
