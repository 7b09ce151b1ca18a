"""FastAPI application entrypoint. No business logic; only wiring, logging, and error handlers."""

import logging

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI

from recipe_api.api.v1 import router as v1_router
from recipe_api.core.config import settings
from recipe_api.core.errors import register_exception_handlers

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)

app = FastAPI(
    title="Recipe API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

register_exception_handlers(app)
app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, object]:
    """Root route; minimal payload for discovery."""
    return {
        "success": True,
        "message": "Recipe API",
        "auth_strategy": settings.AUTH_STRATEGY,
        "endpoints": {
            "recipes": f"{settings.API_V1_PREFIX}/recipes",
            "cuisines": f"{settings.API_V1_PREFIX}/cuisines",
            "users": f"{settings.API_V1_PREFIX}/users",
        },
    }
