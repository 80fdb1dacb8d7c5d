"""FastAPI entrypoint for the checkout orders service.

Exposes a health check and the orders router. Domain errors raised by the
order service are translated to JSON responses here, and every request is
logged as one line once its status is known.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from checkout.config import APP_NAME, CORS_ALLOW_ORIGINS, EMAIL_BACKEND, NOTIFICATION_MODE, ORDERS_TABLE
from checkout.errors import CollaboratorError, OrderNotFound, ValidationFailed
from checkout.routers.orders import router as orders_router
from checkout.utils.logger import log_event

app = FastAPI(title="Checkout Orders", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    response = await call_next(request)
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    log_event({"msg": f"{request.method} {path} {response.status_code}"})
    return response


@app.exception_handler(ValidationFailed)
async def validation_failed(request: Request, exc: ValidationFailed) -> JSONResponse:
    body = exc.verdict.model_dump(by_alias=True)
    log_event(body, level=logging.ERROR)
    return JSONResponse(status_code=422, content=body)


@app.exception_handler(OrderNotFound)
async def order_not_found(request: Request, exc: OrderNotFound) -> JSONResponse:
    body = {"detail": "Order not found", "order_id": exc.order_id}
    log_event(body, level=logging.ERROR)
    return JSONResponse(status_code=404, content=body)


@app.exception_handler(CollaboratorError)
async def collaborator_error(request: Request, exc: CollaboratorError) -> JSONResponse:
    log_event(exc.payload, level=logging.ERROR)
    return JSONResponse(status_code=500, content=exc.payload)


@app.get("/health")
async def health() -> dict:
    """Liveness plus the collaborators this process is wired to."""
    return {
        "status": "ok",
        "app": APP_NAME,
        "orders_table": ORDERS_TABLE,
        "email_backend": EMAIL_BACKEND,
        "notification_mode": NOTIFICATION_MODE,
    }


app.include_router(orders_router, prefix="/orders", tags=["orders"])
