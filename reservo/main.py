"""
Reservo - multi-tenant reservation backend
"""

from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
import structlog

from reservo.config import settings
from reservo.database import init_db
from reservo.booking.errors import AlreadyClosed, ReservationError, StateConflict
from reservo.health import ReadinessState, require_database
from reservo.schemas.reservation import ReservationResponse
from reservo.api import auth, tenants, reservations, customers, owner_links, cron

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Reservo API", version=VERSION, civil_timezone=settings.civil_timezone)

    readiness: ReadinessState = app.state.readiness
    if settings.auto_create_tables:
        try:
            await init_db()
        except Exception as e:
            # Serve anyway; gated routes answer 503 until the database is reachable
            logger.error("Database initialization failed", error=str(e))
    await readiness.refresh()

    yield
    logger.info("Shutting down Reservo API")


# Create FastAPI application
app = FastAPI(
    title="Reservo",
    description="Reservation lifecycle backend for restaurants",
    version=VERSION,
    lifespan=lifespan,
)
app.state.readiness = ReadinessState()

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ReservationError)
async def reservation_error_handler(request: Request, exc: ReservationError):
    content = exc.to_dict()
    if isinstance(exc, (AlreadyClosed, StateConflict)) and exc.reservation is not None:
        content["current_status"] = getattr(exc.current_status, "value", exc.current_status)
        content["reservation"] = ReservationResponse.model_validate(exc.reservation).model_dump(mode="json")
    return JSONResponse(status_code=exc.status_code, content=content)


def _is_connectivity_error(exc: Exception) -> bool:
    if isinstance(exc, (OperationalError, InterfaceError, ConnectionError)):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


@app.exception_handler(DBAPIError)
@app.exception_handler(ConnectionError)
async def database_error_handler(request: Request, exc: Exception):
    if not _is_connectivity_error(exc):
        # Integrity and data errors mean a bad statement, not a lost database
        logger.error("Database statement failed", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    logger.error("Database error during request", path=request.url.path, error=str(exc))
    request.app.state.readiness.mark_unavailable(exc)
    return JSONResponse(status_code=503, content={"detail": "Service unavailable"})


# Health check endpoints
@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "api", "version": VERSION}


@app.get("/health/ready")
async def ready(request: Request):
    """Readiness check with dependency verification"""
    readiness: ReadinessState = request.app.state.readiness
    database_ok = await readiness.refresh()

    body = {
        "status": "ready" if database_ok else "not_ready",
        "checks": {"database": "ok" if database_ok else f"failed: {readiness.last_error}"},
    }
    return JSONResponse(status_code=200 if database_ok else 503, content=body)


# Include API routers
database_gate = [Depends(require_database)]

app.include_router(auth.router, prefix="/auth", tags=["Authentication"], dependencies=database_gate)
app.include_router(tenants.router, prefix="/tenants", tags=["Tenants"], dependencies=database_gate)
app.include_router(
    reservations.router,
    prefix="/tenants/{tenant_id}/reservations",
    tags=["Reservations"],
    dependencies=database_gate,
)
app.include_router(
    customers.router,
    prefix="/tenants/{tenant_id}/customers",
    tags=["Customers"],
    dependencies=database_gate,
)
app.include_router(owner_links.router, prefix="/o", tags=["Owner Links"], dependencies=database_gate)
# Callers without the admin key are rejected before the database gate runs
app.include_router(
    cron.router,
    prefix="/cron",
    tags=["Cron"],
    dependencies=[Depends(auth.require_admin_key), *database_gate],
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "reservo.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
