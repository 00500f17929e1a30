"""Dispatcher implementations for request and worker contexts"""

from typing import Optional

from fastapi import BackgroundTasks

from reservo.notifications.base import NotificationDispatcher
from reservo.notifications.events import NotificationEvent
from reservo.notifications.webhook import WebhookNotifier


class BackgroundTaskDispatcher(NotificationDispatcher):
    """Delivers after the HTTP response has been sent"""

    def __init__(self, background_tasks: BackgroundTasks, notifier: Optional[WebhookNotifier] = None):
        self.background_tasks = background_tasks
        self.notifier = notifier or WebhookNotifier()

    def emit(self, event: NotificationEvent) -> None:
        self.background_tasks.add_task(self.notifier.send, event)


class CeleryDispatcher(NotificationDispatcher):
    """Queues delivery on the worker, used by scheduled jobs"""

    def emit(self, event: NotificationEvent) -> None:
        from reservo.jobs.tasks import deliver_notification

        deliver_notification.delay(event.model_dump(mode="json"))
