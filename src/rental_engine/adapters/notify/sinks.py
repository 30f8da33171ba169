"""Notification sinks: fire-and-forget delivery of customer messages."""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import List, Protocol

from rental_engine.modules.notifications.messages import NotificationMessage

LOG = logging.getLogger(__name__)


class NotificationSink(Protocol):
    def send(self, message: NotificationMessage) -> None:
        ...


class LoggingNotificationSink:
    """Records messages instead of delivering them."""

    def __init__(self) -> None:
        self.sent: List[NotificationMessage] = []

    def send(self, message: NotificationMessage) -> None:
        self.sent.append(message)
        LOG.info("Notification %s to %s: %s", message.event, message.to, message.subject)


class SmtpNotificationSink:
    def __init__(self, host: str, port: int, sender: str, *, timeout: float = 10.0) -> None:
        self.host = host
        self.port = port
        self.sender = sender
        self.timeout = timeout

    def build_email(self, message: NotificationMessage) -> EmailMessage:
        email = EmailMessage()
        email["From"] = self.sender
        email["To"] = message.to
        email["Subject"] = message.subject
        email.set_content(message.text)
        email.add_alternative(message.html, subtype="html")
        return email

    def send(self, message: NotificationMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as client:
            client.send_message(self.build_email(message))
        LOG.info("Email sent to %s", message.to)
