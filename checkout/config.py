"""Runtime configuration for the checkout service.

Values come from the environment so the API process and the Celery worker
share one source of truth. Nothing here is validated eagerly; collaborators
complain when they are built without what they need.
"""
from __future__ import annotations

import os

APP_NAME = os.getenv("APP_NAME", "checkout-orders")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ALLOW_ORIGINS = os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
ORDERS_TABLE = os.getenv("ORDERS_TABLE", "orders")

# "relay" posts to the store mail relay, "brevo" uses the Brevo API
EMAIL_BACKEND = os.getenv("EMAIL_BACKEND", "relay").lower()
MAIL_RELAY_URL = os.getenv("MAIL_RELAY_URL", "http://localhost:8013")
MAIL_SENDER = os.getenv("MAIL_SENDER", "orders@checkout.local")
BREVO_API_KEY = os.getenv("BREVO_API_KEY")

# "inline" sends during the request, "queue" hands off to the Celery worker
NOTIFICATION_MODE = os.getenv("NOTIFICATION_MODE", "inline").lower()

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
