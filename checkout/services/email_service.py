"""Order notification mailers.

Two transports are available: the store mail relay (plain HTTP, the default)
and the Brevo transactional API via sib-api-v3-sdk. ``build_mailer`` picks
one from ``EMAIL_BACKEND``.
"""
from __future__ import annotations

import asyncio
from html import escape
from typing import Any, Dict

import httpx
import sib_api_v3_sdk
from sib_api_v3_sdk.rest import ApiException
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from checkout import config
from checkout.errors import NotificationError
from checkout.utils.logger import logger

ADDED_TO_CART_SUBJECT = "Added to Cart"


def added_to_cart_html(email: str, name: str, description: str, amount: Any) -> str:
    """HTML body of the mail sent when an order is created."""
    return (
        f"<p>Hi {escape(str(email))},</p>"
        f"<p>Your order {escape(str(name))} is waiting for you.</p>"
        f"<p>Name: {escape(str(name))}</p>"
        f"<p>Description: {escape(str(description))}</p>"
        f"<p>Amount: ${escape(str(amount))}</p>"
    )


class RelayEmailService:
    """Posts mails to the store relay's ``/store/send-email`` endpoint."""

    def __init__(
        self,
        base_url: str = config.MAIL_RELAY_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10,
    ) -> None:
        self._base = base_url.rstrip("/")
        self._transport = transport
        self._timeout = timeout

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        stop=stop_after_attempt(3),
        reraise=True,
    )
    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self._base, timeout=self._timeout, transport=self._transport
        ) as client:
            resp = await client.post("/store/send-email", json=payload)
            resp.raise_for_status()
            return resp

    async def send_mail(self, recipient: str, subject: str, html: str) -> None:
        # the relay spells the recipient key "recepient"
        payload = {"recepient": recipient, "subject": subject, "html": html}
        try:
            await self._post(payload)
        except httpx.HTTPStatusError as exc:
            raise NotificationError(
                {
                    "error": "HTTPStatusError",
                    "status_code": exc.response.status_code,
                    "message": exc.response.text,
                }
            ) from exc
        except httpx.HTTPError as exc:
            raise NotificationError({"error": type(exc).__name__, "message": str(exc)}) from exc
        logger.info("Order email sent", extra={"recipient": recipient, "subject": subject})


class BrevoEmailService:
    """Sends mails through the Brevo transactional email API."""

    def __init__(
        self,
        api_key: str | None = config.BREVO_API_KEY,
        sender: str = config.MAIL_SENDER,
    ) -> None:
        self._sender = sender
        cfg = sib_api_v3_sdk.Configuration()
        if api_key:
            cfg.api_key["api-key"] = api_key
        self._client = sib_api_v3_sdk.ApiClient(cfg)
        self._email_api = sib_api_v3_sdk.TransactionalEmailsApi(self._client)

    async def send_mail(self, recipient: str, subject: str, html: str) -> None:
        message = sib_api_v3_sdk.SendSmtpEmail(
            to=[{"email": recipient}],
            sender={"email": self._sender},
            subject=subject,
            html_content=html,
        )
        try:
            await asyncio.to_thread(self._email_api.send_transac_email, message)
        except ApiException as exc:
            raise NotificationError(
                {
                    "error": "ApiException",
                    "status_code": exc.status,
                    "message": exc.reason,
                    "body": exc.body,
                }
            ) from exc
        logger.info("Order email sent", extra={"recipient": recipient, "subject": subject})


def build_mailer(backend: str = config.EMAIL_BACKEND):
    """Direct (in-process) mailer for the configured backend."""
    if backend == "brevo":
        return BrevoEmailService()
    if backend == "relay":
        return RelayEmailService()
    raise RuntimeError(f"Unknown EMAIL_BACKEND: {backend}")
