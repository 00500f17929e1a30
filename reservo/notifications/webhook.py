"""Workflow webhook delivery"""

from typing import Optional

import httpx
import structlog

from reservo.config import settings
from reservo.notifications.events import NotificationEvent

logger = structlog.get_logger()


class WebhookNotifier:
    """
    POSTs events to the configured workflow webhook.
    Delivery is at-most-once: failures are logged and never retried or raised.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = (url if url is not None else settings.notification_webhook_url).strip()
        self.timeout = timeout if timeout is not None else settings.notification_timeout_seconds
        self._transport = transport

    async def send(self, event: NotificationEvent) -> bool:
        """Deliver one event; returns True on a 2xx response"""
        if not self.url:
            logger.debug("Notification webhook not configured, skipping", event_type=event.type.value)
            return False

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json=event.model_dump(mode="json"))
        except httpx.TimeoutException:
            logger.error(
                "Notification webhook timed out",
                event_type=event.type.value,
                timeout=self.timeout,
            )
            return False
        except httpx.HTTPError as e:
            logger.error(
                "Notification webhook failed",
                event_type=event.type.value,
                error=str(e),
            )
            return False

        if not response.is_success:
            logger.error(
                "Notification webhook returned non-OK status",
                event_type=event.type.value,
                status_code=response.status_code,
                body=response.text[:200],
            )
            return False

        logger.info(
            "Notification delivered",
            event_type=event.type.value,
            restaurant_id=event.restaurant_id,
        )
        return True
