"""Main FastAPI application module.

This module initializes the FastAPI application and registers all route handlers.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tavern.core.logging_config import setup_logging
from tavern.config import (
    CORS_ALLOWED_ORIGINS,
    API_HOST,
    API_PORT,
)
from tavern.api.routes import auth, campaigns, characters, join, sessions
from tavern.api.routes import badges, downtime, gm_tools, users

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

# Initialize FastAPI application
app = FastAPI(
    title="Tavern API",
    description="Campaign management backend for tabletop RPG groups.",
    version="1.0.0",
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register route handlers
app.include_router(auth.router)
app.include_router(campaigns.router)
app.include_router(downtime.router)
app.include_router(gm_tools.router)
app.include_router(characters.router)
app.include_router(sessions.router)
app.include_router(join.router)
app.include_router(users.router)
app.include_router(badges.router)


@app.get("/", summary="API root", tags=["Info"])
def root() -> dict:
    """Return API information and documentation links."""
    return {
        "name": "Tavern API",
        "version": "1.0.0",
        "description": "Campaign management backend for tabletop RPG groups.",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": "/api/health",
    }


@app.get("/api/health", summary="Health check", tags=["Health"])
def health() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok".
    """
    return {"status": "ok"}


def main() -> None:
    import uvicorn

    logger.info("Starting Tavern API on http://%s:%s (docs at /docs)", API_HOST, API_PORT)
    uvicorn.run("tavern.app:app", host=API_HOST, port=API_PORT)


# --- Startup code for direct execution ---
if __name__ == "__main__":
    main()
