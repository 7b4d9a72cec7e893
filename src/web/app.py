"""
FastAPI app for the Family Intake service.

Routes:
- GET  /                       : welcome message
- GET  /health                 : liveness check
- /api/intake/*                : intake wizard sessions (see web.intake_api)
"""

from typing import Any, Dict
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import get_settings
from web.api_errors import register_exception_handlers
from web.intake_api import router as intake_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Build the application with middleware, error handlers and routers."""
    settings = get_settings()

    app = FastAPI(title=settings.name, version=settings.version, debug=settings.debug)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info(f"CORS enabled for origins: {settings.cors_origins}")

    register_exception_handlers(app)
    app.include_router(intake_router)

    @app.get("/")
    async def index() -> Dict[str, Any]:
        return {
            "message": [
                f"Welcome to the {settings.name} API",
                "Start an intake session with POST /api/intake/start.",
            ]
        }

    @app.get("/health")
    async def health() -> Dict[str, str]:
        return {"status": "ok", "version": settings.version}

    return app


app = create_app()
