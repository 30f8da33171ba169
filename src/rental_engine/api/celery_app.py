"""Celery application that delivers reservation notifications off the request path."""

from __future__ import annotations

import os

from celery import Celery

from rental_engine.core.config import load_settings

NOTIFICATION_QUEUE = "notifications"


def make_celery() -> Celery:
    # Broker defaults to the reservation Redis unless CELERY_BROKER_URL points elsewhere.
    broker = os.getenv("CELERY_BROKER_URL") or load_settings().redis_url
    app = Celery("rental_engine", broker=broker)
    app.conf.update(
        task_ignore_result=True,
        task_acks_late=True,
        task_default_queue=NOTIFICATION_QUEUE,
        task_routes={"rental_engine.send_notification": {"queue": NOTIFICATION_QUEUE}},
        broker_connection_retry_on_startup=True,
    )
    app.autodiscover_tasks(["rental_engine.api"], related_name="celery_tasks")
    return app


celery_app = make_celery()
