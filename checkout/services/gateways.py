"""Interfaces the order service consumes.

Implementations live beside this module; tests substitute in-memory fakes.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from checkout.models.order import UpdateAck


class OrderStore(Protocol):
    async def select(self, email: str) -> List[Dict[str, Any]]:
        ...

    async def get(self, order_id: str) -> Optional[Dict[str, Any]]:
        ...

    async def insert(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        ...

    async def update(self, order_id: str, fields: Dict[str, Any]) -> UpdateAck:
        ...


class Mailer(Protocol):
    async def send_mail(self, recipient: str, subject: str, html: str) -> None:
        ...
