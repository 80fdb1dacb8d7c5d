"""Supabase-backed order store.

Wraps the synchronous supabase client. Each query runs in a worker thread so
that concurrent callers (the bulk purchase fan-out in particular) do not
serialize on the event loop. PostgREST and transport failures surface as
``StoreError`` carrying the raw error body.
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import create_client, Client

from checkout import config
from checkout.errors import StoreError
from checkout.models.order import UpdateAck
from checkout.utils.logger import logger


class SupabaseOrderStore:
    """CRUD over the orders table, keyed by ``id`` and selected by ``email``."""

    def __init__(
        self,
        client: Client | None = None,
        table: str = config.ORDERS_TABLE,
    ) -> None:
        if client is None:
            url = config.SUPABASE_URL
            key = config.SUPABASE_SERVICE_ROLE_KEY
            if not url or not key:
                raise RuntimeError("Supabase env vars are not configured")
            client = create_client(url, key)
        self._client = client
        self._table = table

    async def _execute(self, query: Any) -> List[Dict[str, Any]]:
        try:
            resp = await asyncio.to_thread(query.execute)
        except APIError as exc:
            raise StoreError(exc.json()) from exc
        except httpx.HTTPError as exc:
            raise StoreError({"error": type(exc).__name__, "message": str(exc)}) from exc
        return [_normalize(row) for row in (resp.data or [])]

    async def select(self, email: str) -> List[Dict[str, Any]]:
        rows = await self._execute(
            self._client.table(self._table).select("*").eq("email", email)
        )
        logger.debug("Fetched orders", extra={"email": email, "count": len(rows)})
        return rows

    async def get(self, order_id: str) -> Optional[Dict[str, Any]]:
        rows = await self._execute(
            self._client.table(self._table).select("*").eq("id", order_id).limit(1)
        )
        return rows[0] if rows else None

    async def insert(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        rows = await self._execute(self._client.table(self._table).insert(fields))
        if not rows:
            raise StoreError({"error": "EmptyInsert", "message": "insert returned no rows"})
        logger.info("Inserted order", extra={"order_id": rows[0].get("id")})
        return rows[0]

    async def update(self, order_id: str, fields: Dict[str, Any]) -> UpdateAck:
        rows = await self._execute(
            self._client.table(self._table).update(fields).eq("id", order_id)
        )
        logger.info(
            "Updated order",
            extra={"order_id": order_id, "fields": sorted(fields), "matched": len(rows)},
        )
        return UpdateAck.from_rows(order_id, rows)


def _normalize(row: Dict[str, Any]) -> Dict[str, Any]:
    # ids may be bigint or uuid columns; callers always see strings
    if row.get("id") is not None:
        row = {**row, "id": str(row["id"])}
    return row
