"""Outbound reservation notifications"""

from reservo.notifications.base import NotificationDispatcher
from reservo.notifications.events import EventType, NotificationEvent, reservation_event

__all__ = [
    "NotificationDispatcher",
    "EventType",
    "NotificationEvent",
    "reservation_event",
]
