"""Database readiness tracking for request gating and /health/ready"""

from typing import Awaitable, Callable, Optional

from fastapi import HTTPException, Request, status
from sqlalchemy import text
import structlog

from reservo.database import SessionLocal

logger = structlog.get_logger()


async def ping_database() -> None:
    async with SessionLocal() as db:
        await db.execute(text("SELECT 1"))


class ReadinessState:
    """
    Tracks whether the database answered the last probe. A failed probe or a
    failed request marks the state unavailable; the next gated request
    probes again.
    """

    def __init__(self, checker: Optional[Callable[[], Awaitable[None]]] = None):
        self.checker = checker or ping_database
        self.database_ready = False
        self.last_error: Optional[str] = None

    async def refresh(self) -> bool:
        try:
            await self.checker()
        except Exception as e:
            self.mark_unavailable(e)
            return False

        if not self.database_ready:
            logger.info("Database ready")
        self.database_ready = True
        self.last_error = None
        return True

    def mark_unavailable(self, error: Exception) -> None:
        if self.database_ready:
            logger.warning("Database unavailable", error=str(error))
        self.database_ready = False
        self.last_error = str(error)


async def require_database(request: Request) -> None:
    """Dependency for DB-backed routers: 503 until the database answers"""
    readiness: ReadinessState = request.app.state.readiness
    if readiness.database_ready:
        return
    if not await readiness.refresh():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service unavailable",
        )
