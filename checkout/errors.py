"""Exception types raised by the order lifecycle and its collaborators."""
from __future__ import annotations

from typing import Any, Dict

from checkout.validator import Verdict


class CheckoutError(Exception):
    """Base class for every error the service reports to callers."""


class ValidationFailed(CheckoutError):
    """Required input was missing or malformed; nothing was mutated."""

    def __init__(self, verdict: Verdict) -> None:
        super().__init__("validation failed")
        self.verdict = verdict


class OrderNotFound(CheckoutError):
    def __init__(self, order_id: str) -> None:
        super().__init__(f"order {order_id} not found")
        self.order_id = order_id


class CollaboratorError(CheckoutError):
    """A store or mail collaborator rejected the call.

    ``payload`` is the collaborator's own error description and is returned
    to the caller verbatim.
    """

    def __init__(self, payload: Dict[str, Any]) -> None:
        super().__init__(payload.get("message", "collaborator failure"))
        self.payload = payload


class StoreError(CollaboratorError):
    pass


class NotificationError(CollaboratorError):
    pass


def describe(exc: BaseException) -> Dict[str, Any]:
    """Raw payload for an exception that carries no structured body."""
    if isinstance(exc, CollaboratorError):
        return exc.payload
    return {"error": type(exc).__name__, "message": str(exc)}
