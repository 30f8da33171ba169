"""Celery tasks for optional Redis-backed notification delivery."""

from __future__ import annotations

import smtplib
from typing import Dict

from rental_engine.adapters.notify.sinks import LoggingNotificationSink, SmtpNotificationSink
from rental_engine.api.celery_app import celery_app
from rental_engine.core.config import load_settings
from rental_engine.modules.notifications.messages import NotificationMessage


@celery_app.task(
    name="rental_engine.send_notification",
    autoretry_for=(smtplib.SMTPException, OSError),
    max_retries=3,
    default_retry_delay=30,
)
def send_notification_task(payload: Dict[str, object]) -> None:
    settings = load_settings()
    message = NotificationMessage(**payload)
    if settings.smtp_host:
        sink = SmtpNotificationSink(settings.smtp_host, settings.smtp_port, settings.smtp_sender)
    else:
        sink = LoggingNotificationSink()
    sink.send(message)
