"""Single-use owner action tokens for header-less confirm/decline links"""

from datetime import datetime, timedelta
from typing import Optional
import secrets

from pydantic import BaseModel
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from reservo.booking.clock import Clock
from reservo.booking.errors import (
    TokenActionMismatch,
    TokenAlreadyUsed,
    TokenExpired,
    TokenNotFound,
    TokensAlreadyIssued,
)
from reservo.config import settings
from reservo.models.owner_token import OwnerActionToken, TokenAction
from reservo.models.reservation import Reservation, ReservationStatus

logger = structlog.get_logger()

TOKEN_BYTES = 18


class IssuedTokens(BaseModel):
    confirm_token: str
    decline_token: str
    expires_at: datetime

    @property
    def confirm_url(self) -> str:
        return action_url(self.confirm_token, TokenAction.CONFIRM)

    @property
    def decline_url(self) -> str:
        return action_url(self.decline_token, TokenAction.DECLINE)


def action_url(token: str, action: TokenAction) -> str:
    base = settings.public_base_url.rstrip("/")
    return f"{base}/o/{TokenAction(action).value}/{token}"


class OwnerTokenService:
    def __init__(self, db: AsyncSession, clock: Optional[Clock] = None):
        self.db = db
        self.clock = clock or Clock()

    async def issue_tokens(self, reservation: Reservation) -> IssuedTokens:
        """
        Add one confirm and one decline token for a Pending reservation.
        The caller owns the commit so tokens land with the reservation insert.
        """
        if reservation.status != ReservationStatus.PENDING:
            raise ValueError("Owner action tokens are only issued for Pending reservations")

        now = self.clock.utcnow()
        existing = await self.db.execute(
            select(OwnerActionToken.id).where(
                OwnerActionToken.reservation_id == reservation.id,
                OwnerActionToken.used_at.is_(None),
                OwnerActionToken.expires_at > now,
            )
        )
        if existing.first() is not None:
            raise TokensAlreadyIssued(reservation.id)

        expires_at = now + timedelta(minutes=settings.owner_token_ttl_minutes)
        tokens = {}
        for action in (TokenAction.CONFIRM, TokenAction.DECLINE):
            tokens[action] = secrets.token_hex(TOKEN_BYTES)
            self.db.add(
                OwnerActionToken(
                    tenant_id=reservation.tenant_id,
                    reservation_id=reservation.id,
                    token=tokens[action],
                    action=action,
                    expires_at=expires_at,
                )
            )
        await self.db.flush()

        return IssuedTokens(
            confirm_token=tokens[TokenAction.CONFIRM],
            decline_token=tokens[TokenAction.DECLINE],
            expires_at=expires_at,
        )

    async def consume_token(self, token: str, expected_action: TokenAction) -> OwnerActionToken:
        """
        Validate and burn a token. Checks run in a fixed order: existence, action,
        prior use, expiry. The final conditional UPDATE lets exactly one of several
        concurrent presenters through.
        """
        token = (token or "").strip()
        expected_action = TokenAction(expected_action)

        result = await self.db.execute(
            select(OwnerActionToken)
            .where(OwnerActionToken.token == token)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()

        if row is None:
            raise TokenNotFound()
        if row.action != expected_action:
            raise TokenActionMismatch()
        if row.used_at is not None:
            raise TokenAlreadyUsed()

        now = self.clock.utcnow()
        if row.expires_at <= now:
            raise TokenExpired()

        consumed = await self.db.execute(
            update(OwnerActionToken)
            .where(
                OwnerActionToken.token == token,
                OwnerActionToken.used_at.is_(None),
                OwnerActionToken.expires_at > now,
            )
            .values(used_at=now)
            .execution_options(synchronize_session=False)
        )
        if consumed.rowcount == 0:
            await self.db.rollback()
            raise TokenAlreadyUsed()

        await self.db.commit()
        await self.db.refresh(row)

        logger.info(
            "Owner token consumed",
            action=expected_action.value,
            reservation_id=row.reservation_id,
            tenant_id=row.tenant_id,
        )
        return row
