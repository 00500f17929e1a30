"""Trusted-caller endpoints for scheduled maintenance"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from reservo.booking.clock import Clock
from reservo.booking.sweeper import AutoCloseSweeper, SweepSummary
from reservo.database import get_db
from reservo.notifications.base import NotificationDispatcher
from reservo.api.auth import require_admin_key
from reservo.api.deps import get_clock, get_dispatcher

# main.py also mounts require_admin_key ahead of the database gate; FastAPI runs it once per request
router = APIRouter(dependencies=[Depends(require_admin_key)])


@router.post("/auto-close", response_model=SweepSummary)
async def auto_close(
    buffer_minutes: Optional[int] = Query(None, ge=0, le=24 * 60),
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    clock: Clock = Depends(get_clock),
):
    """Complete or no-show open reservations whose slot is past the buffer"""
    sweeper = AutoCloseSweeper(db, dispatcher, clock)
    return await sweeper.sweep(buffer_minutes=buffer_minutes)
