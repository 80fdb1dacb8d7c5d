"""Celery application for out-of-band order mail.

Used only when ``NOTIFICATION_MODE=queue``: the API enqueues
``send_order_email`` on the ``order-mail`` queue and a worker started with
``celery -A checkout.celery_app worker -Q order-mail`` delivers it.
"""
from __future__ import annotations

from celery import Celery

from checkout.config import APP_NAME, REDIS_URL

MAIL_QUEUE = "order-mail"

celery_app = Celery(APP_NAME, broker=REDIS_URL, backend=REDIS_URL, include=["checkout.worker"])

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    task_routes={"send_order_email": {"queue": MAIL_QUEUE}},
    task_default_queue=MAIL_QUEUE,
    # a mail lost with a crashed worker is redelivered, one at a time
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    result_expires=24 * 3600,
    enable_utc=True,
)
