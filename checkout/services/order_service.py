"""Order lifecycle: create, list, read, update, archive and bulk purchase.

Every operation validates its input first and raises ``ValidationFailed``
before touching any collaborator. Store failures abort the operation as
``StoreError`` except inside ``purchase``, where each order's update is
settled independently and reported in its own slot.

Concurrent writes to the same order (for example a purchase racing an
update) are last-write-wins; the store offers no transactions.
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pydantic

from checkout.errors import CollaboratorError, OrderNotFound, StoreError, ValidationFailed, describe
from checkout.models.order import Order, PurchaseSlot, UpdateAck
from checkout.services.email_service import ADDED_TO_CART_SUBJECT, added_to_cart_html
from checkout.services.gateways import Mailer, OrderStore
from checkout.utils.logger import logger
from checkout import validator

PURCHASED = {"paid": True, "active": False}
ARCHIVED = {"active": False}

NOTIFICATION_SENT = "sent"
NOTIFICATION_FAILED = "failed"


def _text(source: Optional[Mapping[str, Any]], field: str) -> List[validator.Rule]:
    return [validator.required(source, field), validator.string(source, field)]


def _to_order(row: Dict[str, Any]) -> Order:
    """Build an ``Order`` from a store row; rows that do not fit are store faults."""
    try:
        return Order(**row)
    except pydantic.ValidationError as exc:
        raise StoreError(
            {"error": "MalformedOrder", "order_id": row.get("id"), "message": str(exc)}
        ) from exc


class OrderService:
    def __init__(self, store: OrderStore, mailer: Mailer) -> None:
        self._store = store
        self._mailer = mailer

    @staticmethod
    def _gate(rules: List[validator.Rule]) -> None:
        verdict = validator.check(rules)
        if not verdict.passed:
            raise ValidationFailed(verdict)

    async def _call(self, coro):
        """Await a store call, normalizing unexpected failures to ``StoreError``."""
        try:
            return await coro
        except CollaboratorError:
            raise
        except Exception as exc:  # noqa: BLE001 surfaced to the caller as a raw payload
            raise StoreError(describe(exc)) from exc

    async def list_orders(self, params: Mapping[str, Any]) -> List[Order]:
        self._gate(_text(params, "email"))
        rows = await self._call(self._store.select(params["email"]))
        return [_to_order(row) for row in rows]

    async def create_order(self, payload: Mapping[str, Any]) -> Tuple[Order, str]:
        """Insert an unpaid, active order and mail the customer.

        Returns the stored order and the notification outcome
        (``"sent"`` or ``"failed"``); a failed mail never fails the creation.
        """
        self._gate(
            _text(payload, "email")
            + _text(payload, "name")
            + _text(payload, "description")
            + [validator.required(payload, "amount"), validator.numeric(payload, "amount")]
        )
        row = await self._call(
            self._store.insert(
                {
                    "email": payload["email"],
                    "name": payload["name"],
                    "description": payload["description"],
                    "amount": float(payload["amount"]),
                    "paid": False,
                    "active": True,
                }
            )
        )
        order = _to_order(row)
        return order, await self._notify_created(order)

    async def _notify_created(self, order: Order) -> str:
        html = added_to_cart_html(order.email, order.name, order.description, order.amount)
        try:
            await self._mailer.send_mail(order.email, ADDED_TO_CART_SUBJECT, html)
        except Exception as exc:  # noqa: BLE001 reported as a status, never fails the creation
            logger.error(
                "Failed to send order email",
                extra={"order_id": order.id, "error": describe(exc)},
            )
            return NOTIFICATION_FAILED
        return NOTIFICATION_SENT

    async def read_order(self, order_id: Optional[str]) -> Order:
        self._gate([validator.required({"order_uid": order_id}, "order_uid")])
        row = await self._call(self._store.get(order_id))
        if row is None:
            raise OrderNotFound(order_id)
        return _to_order(row)

    async def update_order(self, order_id: Optional[str], payload: Mapping[str, Any]) -> UpdateAck:
        self._gate(
            [validator.required({"order_uid": order_id}, "order_uid")]
            + _text(payload, "name")
            + _text(payload, "description")
        )
        fields = {"name": payload["name"], "description": payload["description"]}
        return await self._call(self._store.update(order_id, fields))

    async def archive_order(self, order_id: Optional[str]) -> UpdateAck:
        self._gate([validator.required({"order_uid": order_id}, "order_uid")])
        return await self._call(self._store.update(order_id, dict(ARCHIVED)))

    async def purchase(self, payload: Mapping[str, Any]) -> List[PurchaseSlot]:
        """Mark every order of ``email`` paid and inactive.

        Updates run concurrently and are all awaited before returning. Slots
        come back in the order the store listed the orders; a failed update
        is reported in its slot instead of aborting the batch. Only the row
        ids are needed, so a malformed row fails its own slot at worst.
        """
        self._gate(_text(payload, "email"))
        rows = await self._call(self._store.select(payload["email"]))
        ids = [str(row.get("id")) for row in rows]
        slots = await asyncio.gather(*(self._purchase_one(order_id) for order_id in ids))
        failed = sum(1 for s in slots if not s.ok)
        if failed:
            logger.warning(
                "Purchase partially failed",
                extra={"email": payload["email"], "failed": failed, "total": len(slots)},
            )
        return list(slots)

    async def _purchase_one(self, order_id: str) -> PurchaseSlot:
        try:
            ack = await self._call(self._store.update(order_id, dict(PURCHASED)))
        except CollaboratorError as exc:
            return PurchaseSlot(order_id=order_id, ok=False, error=exc.payload)
        return PurchaseSlot(order_id=order_id, ok=True, ack=ack)
