"""Notification sink that hands messages to the Celery worker."""

from __future__ import annotations

from rental_engine.api.celery_tasks import send_notification_task
from rental_engine.modules.notifications.messages import NotificationMessage


class CeleryNotificationSink:
    def send(self, message: NotificationMessage) -> None:
        send_notification_task.delay(message.to_dict())
