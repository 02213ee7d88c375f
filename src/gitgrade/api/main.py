"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gitgrade import __version__
from gitgrade.analyzers.pipeline import AnalysisPipeline
from gitgrade.api.routes import router
from gitgrade.config import Settings, load_settings

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the API app.

    The shared httpx client and analysis pipeline are built in the
    lifespan handler and stored on app.state.
    """
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with httpx.AsyncClient(timeout=30.0) as client:
            app.state.pipeline = AnalysisPipeline.from_settings(settings, client=client)
            logger.info("GitGrade API ready")
            if not settings.github_token:
                logger.warning("GITHUB_TOKEN not set, GitHub rate limits will be low")
            if not settings.gemini_api_key:
                logger.warning("GEMINI_API_KEY not set, insights will use templates")
            yield
        logger.info("GitGrade API stopped")

    app = FastAPI(title="GitGrade", version=__version__, lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "Invalid request body"},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Server error: {exc}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error"},
        )

    app.include_router(router)

    return app
