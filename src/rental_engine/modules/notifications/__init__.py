"""Notifications module."""

from rental_engine.modules.notifications.messages import NotificationMessage, build_message, event_for_status

__all__ = ["NotificationMessage", "build_message", "event_for_status"]
