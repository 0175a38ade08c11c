"""Application configuration via environment variables."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent

API_VERSION = "1.0.0"

# Plant catalogue (loaded once at startup)
CATALOGUE_PATH = Path(os.getenv("CATALOGUE_PATH", str(BASE_DIR / "plant_catalogue.json")))

# Grid geometry
CELL_SIZE_CM = int(os.getenv("CELL_SIZE_CM", "30"))
MAX_GRID_CELLS = int(os.getenv("MAX_GRID_CELLS", "2500"))

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# CORS
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
