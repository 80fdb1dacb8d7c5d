"""Pydantic models for orders and the acknowledgements returned by writes."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError


class Order(BaseModel):
    id: str
    email: str
    name: str
    description: str
    amount: float
    paid: bool = False
    active: bool = True
    created_at: datetime | None = None


class UpdateAck(BaseModel):
    """Result of a store update: how many rows matched and the row after it."""

    order_id: str
    matched: int
    order: Optional[Order] = None

    @classmethod
    def from_rows(cls, order_id: str, rows: List[Dict[str, Any]]) -> "UpdateAck":
        # the write already happened; a row that no longer fits Order is
        # acknowledged without its body
        order = None
        if rows:
            try:
                order = Order(**rows[0])
            except ValidationError:
                order = None
        return cls(order_id=order_id, matched=len(rows), order=order)


class PurchaseSlot(BaseModel):
    order_id: str
    ok: bool
    ack: Optional[UpdateAck] = None
    error: Optional[Dict[str, Any]] = None
