"""
Liveness and dependency checks.

Routes:
    GET /health           process is up
    GET /health/db        database answers a trivial query
    GET /health/pipeline  background stage runs in flight and scheduled sync state
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from spacerag.api.deps.container import ServiceContainer
from spacerag.api.deps.dependencies import get_container
from spacerag.boundary.db import get_async_db
from spacerag.observability.log_utils import error_fields

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    status: str
    message: str


class PipelineHealthResponse(BaseModel):
    status: str
    pending_runs: int
    scheduled_sync: bool
    vector_store: str


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(db: AsyncSession = Depends(get_async_db)):
    """Report 503 when the database cannot run SELECT 1."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"{__name__}:health_check_db - Database unreachable", extra=error_fields(e))
        unhealthy = HealthResponse(status="unhealthy", message="Database unreachable")
        return JSONResponse(status_code=503, content=unhealthy.model_dump())
    return HealthResponse(status="healthy", message="Database connection OK")


@router.get("/pipeline", response_model=PipelineHealthResponse)
async def health_check_pipeline(container: ServiceContainer = Depends(get_container)) -> PipelineHealthResponse:
    return PipelineHealthResponse(
        status="healthy",
        pending_runs=container.runner.pending,
        scheduled_sync=container.scheduler.enabled,
        vector_store=type(container.retriever.index).__name__,
    )
