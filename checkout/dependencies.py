"""FastAPI dependency wiring for the order service.

The service is built once per process from configuration. Tests replace
``get_order_service`` through ``app.dependency_overrides``.
"""
from __future__ import annotations

from functools import lru_cache

from checkout import config
from checkout.services.email_service import build_mailer
from checkout.services.order_service import OrderService
from checkout.services.supabase_client import SupabaseOrderStore


def _mailer():
    if config.NOTIFICATION_MODE == "queue":
        from checkout.services.mail_queue import QueuedMailer

        return QueuedMailer()
    return build_mailer()


@lru_cache(maxsize=1)
def get_order_service() -> OrderService:
    return OrderService(store=SupabaseOrderStore(), mailer=_mailer())
