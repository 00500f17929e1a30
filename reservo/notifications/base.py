"""Notification dispatcher interface"""

from abc import ABC, abstractmethod

from reservo.notifications.events import NotificationEvent


class NotificationDispatcher(ABC):
    """Fire-and-forget sink for reservation events"""

    @abstractmethod
    def emit(self, event: NotificationEvent) -> None:
        """Hand the event off for delivery without waiting for it"""
        pass
