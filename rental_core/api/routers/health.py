"""
Health check endpoints for monitoring and orchestration (K8s, Docker, etc.)

- /health, /health/live: liveness (always 200)
- /health/db: base de datos alcanzable
- /health/ready: listo para tráfico; reporta el modo de almacenamiento
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from rental_core.api.deps import get_db_session
from rental_core.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "rental-core"


async def _database_reachable(session: AsyncSession) -> bool:
    try:
        result = await session.execute(text("SELECT 1"))
        result.scalar()
    except Exception as e:
        logger.error("Database health check failed", exc_info=e)
        return False
    return True


@router.get("/health")
async def health_check():
    """Liveness probe: 200 mientras el proceso responda."""
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/live")
async def health_check_live():
    """Alias de /health para orquestadores que esperan /health/live."""
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/db")
async def health_check_db(session: AsyncSession = Depends(get_db_session)):
    """
    Database connectivity health check.

    Returns 503 Service Unavailable if database is down.
    """
    if await _database_reachable(session):
        return {"status": "healthy", "component": "database"}
    return JSONResponse(
        status_code=503,
        content={
            "status": "unhealthy",
            "component": "database",
            "error": "Database connection failed",
        },
    )


@router.get("/health/ready")
async def health_check_ready(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """
    Readiness probe.

    En modo in-memory la base no participa de las operaciones y no se
    consulta; en modo SQL una base caída deja el servicio en 503.
    """
    storage = "in_memory" if settings.use_in_memory else "sql"
    health_status = {"status": "ready", "storage": storage, "checks": {}}

    if storage == "sql":
        if not await _database_reachable(session):
            health_status["status"] = "not_ready"
            health_status["checks"]["database"] = "unhealthy"
            return JSONResponse(status_code=503, content=health_status)
        health_status["checks"]["database"] = "healthy"

    return health_status
