import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from rental_core.api.deps import engine
from rental_core.api.routers.health import router as health_router
from rental_core.api.routers.payments import router as payments_router
from rental_core.api.routers.reservations import router as reservations_router
from rental_core.api.routers.vehicles import router as vehicles_router
from rental_core.config import get_settings
from rental_core.domain.errors import (
    ConflictError,
    DomainError,
    InvalidStateError,
    NotFoundError,
    NotRefundableError,
    OptimisticLockError,
)
from rental_core.infrastructure.db.engine import create_schema

settings = get_settings()

# Configure structured logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# El resto de los errores de dominio (rango, validación, monto) son 422
DOMAIN_ERROR_STATUS = (
    (NotFoundError, 404),
    (ConflictError, 409),
    (OptimisticLockError, 409),
    (InvalidStateError, 409),
    (NotRefundableError, 409),
)


def status_for(exc: DomainError) -> int:
    for error_type, status_code in DOMAIN_ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 422


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize DB tables (for dev/demo purposes)
    await create_schema(engine)
    yield
    # Cleanup
    await engine.dispose()

app = FastAPI(
    title="Rental Core API",
    version="0.1.0",
    lifespan=lifespan
)


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    status_code = status_for(exc)
    logger.info(
        "Domain error",
        extra={
            "code": exc.code,
            "status_code": status_code,
            "path": request.url.path,
            "method": request.method,
        }
    )
    content = {"detail": exc.message, "code": exc.code}
    if isinstance(exc, ConflictError) and exc.conflicting_ids:
        content["conflicting_reservation_ids"] = exc.conflicting_ids
    return JSONResponse(status_code=status_code, content=content)


# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler to prevent stack trace exposure to clients.
    All unhandled exceptions are logged internally and return a generic error message.
    """
    error_id = str(uuid.uuid4())

    logger.error(
        "Unhandled exception occurred",
        exc_info=exc,
        extra={
            "error_id": error_id,
            "path": request.url.path,
            "method": request.method,
            "client_host": request.client.host if request.client else None,
        }
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "message": "An unexpected error occurred. Please contact support with the error_id if the issue persists."
        }
    )


app.include_router(health_router, tags=["Health"])
app.include_router(vehicles_router, prefix="/api/v1", tags=["Vehicles"])
app.include_router(reservations_router, prefix="/api/v1", tags=["Reservations"])
app.include_router(payments_router, prefix="/api/v1", tags=["Payments"])
