"""Celery tasks for the checkout service.

Order mails can be delivered out of band: the API enqueues
``send_order_email`` and the worker hands it to the configured direct
mailer, retrying with backoff on failure.
"""
from __future__ import annotations

import asyncio

from celery import shared_task
from tenacity import retry, wait_exponential, stop_after_attempt

from checkout.celery_app import celery_app  # noqa: F401 binds shared tasks to this app
from checkout.services.email_service import build_mailer
from checkout.utils.logger import logger


@shared_task(name="send_order_email")
@retry(wait=wait_exponential(multiplier=1, min=2, max=30), stop=stop_after_attempt(3), reraise=True)
def send_order_email(recipient: str, subject: str, html: str) -> dict:
    """Deliver one order notification.

    Runs in the Celery worker and bridges to the async mailer via asyncio.
    """
    logger.info("Delivering queued order email", extra={"recipient": recipient})
    asyncio.run(build_mailer().send_mail(recipient, subject, html))
    return {"status": "sent", "recipient": recipient}
