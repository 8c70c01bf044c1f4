"""
Read-only query endpoints: project listing, skills, search, stats and health.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from meapi import __version__
from meapi.logging import get_logger

from ..config import get_settings
from ..database import get_db
from ..dependencies import get_query_service
from ..dependencies.rate_limit import enforce_search_rate_limit
from ..schemas import (
    HealthResponse,
    ProjectListResponse,
    SearchResponse,
    SearchType,
    SkillListResponse,
    StatsResponse,
    TopSkillsResponse,
)
from ..services import QueryService

logger = get_logger("queries")

router = APIRouter(tags=["queries"])

STARTED_AT = time.monotonic()


@router.get("/health", response_model=HealthResponse, tags=["health"])
def health_check():
    """Liveness check. Touches no state."""
    settings = get_settings()
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
        "environment": settings.env,
        "version": __version__,
    }


@router.get("/health/ready", tags=["health"])
def readiness_check(db: Session = Depends(get_db)):
    """
    Readiness check.

    Returns 200 when the database answers, 503 otherwise.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("readiness_check_failed", error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "checks": {"database": False}},
        )
    return {"status": "ready", "checks": {"database": True}}


@router.get("/projects", response_model=ProjectListResponse)
def list_projects(
    skill: str | None = Query(default=None, min_length=1, max_length=50),
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    service: QueryService = Depends(get_query_service),
):
    """Projects newest-first, optionally only those whose owner has a matching skill."""
    return service.list_projects(skill, limit=limit, offset=offset)


@router.get("/skills/top", response_model=TopSkillsResponse)
def top_skills(
    limit: int = Query(default=10, ge=1, le=100),
    service: QueryService = Depends(get_query_service),
):
    """Most common skill names (at most 50), ties broken alphabetically."""
    return service.top_skills(limit)


@router.get(
    "/search",
    response_model=SearchResponse,
    dependencies=[Depends(enforce_search_rate_limit)],
)
def search(
    q: str | None = Query(default=None, max_length=100),
    type: SearchType = Query(default=SearchType.all),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    service: QueryService = Depends(get_query_service),
):
    """Case-insensitive substring search. 400 SEARCH_QUERY_REQUIRED when q is blank."""
    return service.search(q, type, limit=limit, offset=offset)


@router.get("/skills", response_model=SkillListResponse)
def list_skills(
    profile_id: int | None = Query(default=None),
    service: QueryService = Depends(get_query_service),
):
    """Every skill alphabetically, optionally for one profile."""
    return service.list_skills(profile_id)


@router.get("/stats", response_model=StatsResponse)
def stats(service: QueryService = Depends(get_query_service)):
    """Row counts and the five most common skills."""
    return service.stats()
