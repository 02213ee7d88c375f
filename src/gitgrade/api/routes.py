"""API routes."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse

from gitgrade.analyzers.pipeline import AnalysisPipeline
from gitgrade.errors import AnalysisError, InvalidUrlError
from gitgrade.models.schemas import AnalyzeRequest
from gitgrade.urls import parse_repo_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def get_pipeline(request: Request) -> AnalysisPipeline:
    return request.app.state.pipeline


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "message": "GitGrade API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.post("/analyze")
async def analyze(
    payload: AnalyzeRequest | None = Body(default=None),
    pipeline: AnalysisPipeline = Depends(get_pipeline),
):
    repo_url = payload.repo_url if payload else None
    if not repo_url:
        return _error(400, "Repository URL is required")

    if "github.com" not in repo_url:
        return _error(400, "Invalid GitHub URL")
    try:
        parse_repo_url(repo_url)
    except InvalidUrlError:
        return _error(400, "Invalid GitHub URL")

    try:
        result = await pipeline.analyze_repository(repo_url)
    except AnalysisError as e:
        logger.error(f"Analysis error: {e}")
        return _error(500, str(e))

    return {"success": True, "data": result.model_dump(mode="json")}
