"""Shared request dependencies"""

from fastapi import BackgroundTasks

from reservo.booking.clock import Clock
from reservo.notifications.base import NotificationDispatcher
from reservo.notifications.dispatchers import BackgroundTaskDispatcher


def get_clock() -> Clock:
    return Clock()


def get_dispatcher(background_tasks: BackgroundTasks) -> NotificationDispatcher:
    """Notifications go out after the response is sent"""
    return BackgroundTaskDispatcher(background_tasks)
