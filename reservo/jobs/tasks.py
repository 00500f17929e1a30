"""Background job tasks"""

import asyncio
from typing import Optional

import structlog

from reservo.jobs.celery_app import celery_app

logger = structlog.get_logger()


def run_async(coro):
    """Run a coroutine on a fresh event loop, releasing pooled connections afterwards"""
    async def _run():
        from reservo.database import engine

        try:
            return await coro
        finally:
            # Pooled connections are bound to the loop that opened them
            await engine.dispose()

    return asyncio.run(_run())


@celery_app.task(name="auto_close_reservations")
def auto_close_reservations(buffer_minutes: Optional[int] = None):
    """Close open reservations whose service slot is long past"""
    logger.info("Running auto-close sweep")

    async def _sweep():
        from reservo.database import SessionLocal
        from reservo.booking.sweeper import AutoCloseSweeper
        from reservo.notifications.dispatchers import CeleryDispatcher

        async with SessionLocal() as db:
            sweeper = AutoCloseSweeper(db, CeleryDispatcher())
            summary = await sweeper.sweep(buffer_minutes=buffer_minutes)
            return summary.model_dump(mode="json")

    return run_async(_sweep())


@celery_app.task(name="deliver_notification")
def deliver_notification(payload: dict):
    """POST a serialized notification event to the workflow webhook"""
    from reservo.notifications.events import NotificationEvent
    from reservo.notifications.webhook import WebhookNotifier

    event = NotificationEvent.model_validate(payload)
    logger.info("Delivering notification", event_type=event.type.value, restaurant_id=event.restaurant_id)

    return asyncio.run(WebhookNotifier().send(event))
