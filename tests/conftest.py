import uuid
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from checkout.dependencies import get_order_service
from checkout.errors import NotificationError, StoreError
from checkout.main import app
from checkout.models.order import UpdateAck
from checkout.services.order_service import OrderService


class InMemoryOrderStore:
    """Order store backed by a dict; ids listed in ``failing`` reject updates."""

    def __init__(self) -> None:
        self.rows: Dict[str, Dict[str, Any]] = {}
        self.failing: set = set()
        self.fail_select = False
        self.updates: List[tuple] = []

    async def select(self, email: str) -> List[Dict[str, Any]]:
        if self.fail_select:
            raise StoreError({"error": "APIError", "message": "connection refused"})
        return [dict(r) for r in self.rows.values() if r["email"] == email]

    async def get(self, order_id: str) -> Optional[Dict[str, Any]]:
        row = self.rows.get(order_id)
        return dict(row) if row else None

    async def insert(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        row = {"id": uuid.uuid4().hex, **fields}
        self.rows[row["id"]] = row
        return dict(row)

    async def update(self, order_id: str, fields: Dict[str, Any]) -> UpdateAck:
        self.updates.append((order_id, dict(fields)))
        if order_id in self.failing:
            raise StoreError({"error": "APIError", "message": f"update of {order_id} rejected"})
        row = self.rows.get(order_id)
        if row is None:
            return UpdateAck.from_rows(order_id, [])
        row.update(fields)
        return UpdateAck.from_rows(order_id, [dict(row)])


class RecordingMailer:
    def __init__(self) -> None:
        self.sent: List[Dict[str, str]] = []
        self.fail = False

    async def send_mail(self, recipient: str, subject: str, html: str) -> None:
        if self.fail:
            raise NotificationError({"error": "HTTPStatusError", "status_code": 502})
        self.sent.append({"recipient": recipient, "subject": subject, "html": html})


@pytest.fixture()
def store():
    return InMemoryOrderStore()


@pytest.fixture()
def mailer():
    return RecordingMailer()


@pytest.fixture()
def service(store, mailer):
    return OrderService(store=store, mailer=mailer)


@pytest.fixture()
def client(service):
    app.dependency_overrides[get_order_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()
