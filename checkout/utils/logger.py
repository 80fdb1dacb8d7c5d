"""Logging for the checkout API and its Celery worker.

Services log with ``extra={...}`` context (order ids, recipients, counts).
``ContextFormatter`` appends that context to the line as JSON so it is not
lost, and ``log_event`` writes a bare JSON payload for request and error
events.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from checkout.config import LOG_LEVEL

# attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}
        if context:
            line = f"{line} {json.dumps(context, default=str, sort_keys=True)}"
        return line


def configure(level: str = LOG_LEVEL) -> logging.Logger:
    """Attach one stderr handler to the ``checkout`` logger; safe to call twice."""
    log = logging.getLogger("checkout")
    if not log.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            ContextFormatter("%(asctime)s %(levelname)-7s [%(name)s] %(message)s")
        )
        log.addHandler(handler)
        log.propagate = False
    log.setLevel(level)
    return log


logger = configure()


def log_event(payload: Any, level: int = logging.INFO) -> None:
    """Log ``payload`` serialized as a single JSON line."""
    logger.log(level, json.dumps(payload, default=str))
