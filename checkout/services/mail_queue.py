"""Mailer that defers delivery to the Celery worker."""
from __future__ import annotations

from checkout.errors import NotificationError
from checkout.utils.logger import logger
from checkout.worker import send_order_email


class QueuedMailer:
    """Enqueues ``send_order_email``; delivery failures are the worker's concern."""

    async def send_mail(self, recipient: str, subject: str, html: str) -> None:
        try:
            res = send_order_email.delay(recipient, subject, html)
        except Exception as exc:  # noqa: BLE001 broker errors vary by transport
            raise NotificationError({"error": type(exc).__name__, "message": str(exc)}) from exc
        logger.info("Order email queued", extra={"recipient": recipient, "task_id": res.id})
