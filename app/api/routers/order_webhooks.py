# app/api/routers/order_webhooks.py
from __future__ import annotations

from fastapi import APIRouter

from app.api.routers import order_webhooks_routes
from app.api.routers.order_webhooks_schemas import OrderWebhookOut, ShipmentFailureOut

router = APIRouter(tags=["webhooks"])


def _register_all_routes() -> None:
    order_webhooks_routes.register(router)


_register_all_routes()

__all__ = [
    "router",
    "OrderWebhookOut",
    "ShipmentFailureOut",
]
