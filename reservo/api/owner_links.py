"""Header-less owner click links delivered in notifications"""

import html

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from reservo.booking.clock import Clock
from reservo.booking.errors import AlreadyClosed, ReservationNotFound, StateConflict, TokenError
from reservo.booking.lifecycle import OwnerAction, ReservationLifecycle
from reservo.booking.tokens import OwnerTokenService
from reservo.database import get_db
from reservo.models.owner_token import TokenAction
from reservo.notifications.base import NotificationDispatcher
from reservo.api.deps import get_clock, get_dispatcher

router = APIRouter()
logger = structlog.get_logger()


def html_page(title: str, message: str, status_code: int = 200) -> HTMLResponse:
    body = (
        "<!doctype html>\n"
        '<html><head><meta charset="utf-8">'
        '<meta name="viewport" content="width=device-width,initial-scale=1">\n'
        f"<title>{html.escape(title)}</title>\n</head>\n"
        '<body style="font-family:system-ui;padding:24px;max-width:520px;margin:auto">\n'
        f"<h2>{html.escape(title)}</h2>\n<p>{html.escape(message)}</p>\n"
        "</body></html>"
    )
    return HTMLResponse(content=body, status_code=status_code)


async def _handle_link(
    token: str,
    action: TokenAction,
    db: AsyncSession,
    dispatcher: NotificationDispatcher,
    clock: Clock,
) -> HTMLResponse:
    try:
        consumed = await OwnerTokenService(db, clock).consume_token(token, action)
    except TokenError as e:
        logger.info("Owner link rejected", action=action.value, error_code=e.error_code)
        return html_page("Error", e.message, e.status_code)

    lifecycle = ReservationLifecycle(db, dispatcher, clock)
    try:
        await lifecycle.apply(
            consumed.tenant_id,
            consumed.reservation_id,
            OwnerAction(action.value),
            actor="click_link",
        )
    except (AlreadyClosed, StateConflict) as e:
        status_value = getattr(e.current_status, "value", e.current_status)
        return html_page("Already decided", f"This reservation is no longer Pending ({status_value}).", 409)
    except ReservationNotFound:
        return html_page("Error", "Reservation not found", 404)

    if action == TokenAction.CONFIRM:
        return html_page("Confirmed", "The reservation was confirmed.")
    return html_page("Declined", "The reservation was declined.")


@router.get("/confirm/{token}", response_class=HTMLResponse)
async def confirm_link(
    token: str,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    clock: Clock = Depends(get_clock),
):
    """Confirm a Pending reservation from a notification link"""
    return await _handle_link(token, TokenAction.CONFIRM, db, dispatcher, clock)


@router.get("/decline/{token}", response_class=HTMLResponse)
async def decline_link(
    token: str,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    clock: Clock = Depends(get_clock),
):
    """Decline a Pending reservation from a notification link"""
    return await _handle_link(token, TokenAction.DECLINE, db, dispatcher, clock)
