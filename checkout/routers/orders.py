"""Orders router: cart items for a customer and the bulk purchase checkout.

Inputs are taken loosely (optional query params, free-form JSON bodies) so
that missing fields reach the order service's validator and come back as a
422 verdict rather than FastAPI's own error shape.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response

from checkout.dependencies import get_order_service
from checkout.models.order import Order, PurchaseSlot, UpdateAck
from checkout.services.order_service import OrderService

NOTIFICATION_HEADER = "X-Notification-Status"

router = APIRouter()


@router.get("", response_model=List[Order])
async def list_orders(
    email: Optional[str] = Query(None, description="Customer email"),
    service: OrderService = Depends(get_order_service),
) -> List[Order]:
    """Return every order belonging to ``email``."""
    return await service.list_orders({"email": email})


@router.post("", response_model=Order)
async def create_order(
    response: Response,
    payload: Optional[Dict[str, Any]] = Body(None),
    service: OrderService = Depends(get_order_service),
) -> Order:
    """Add an item to the customer's cart and mail them a confirmation.

    The mail outcome is reported in the ``X-Notification-Status`` header.
    """
    order, notification = await service.create_order(payload or {})
    response.headers[NOTIFICATION_HEADER] = notification
    return order


@router.post("/purchase", response_model=List[PurchaseSlot])
async def purchase(
    payload: Optional[Dict[str, Any]] = Body(None),
    service: OrderService = Depends(get_order_service),
) -> List[PurchaseSlot]:
    """Pay for and close every order of a customer."""
    return await service.purchase(payload or {})


@router.get("/{order_uid}", response_model=Order)
async def read_order(order_uid: str, service: OrderService = Depends(get_order_service)) -> Order:
    return await service.read_order(order_uid)


@router.put("/{order_uid}", response_model=UpdateAck)
async def update_order(
    order_uid: str,
    payload: Optional[Dict[str, Any]] = Body(None),
    service: OrderService = Depends(get_order_service),
) -> UpdateAck:
    return await service.update_order(order_uid, payload or {})


@router.delete("/{order_uid}", response_model=UpdateAck)
async def archive_order(order_uid: str, service: OrderService = Depends(get_order_service)) -> UpdateAck:
    """Soft delete: the order is deactivated, never removed."""
    return await service.archive_order(order_uid)
