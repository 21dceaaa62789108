# app/api/routers/order_webhooks_schemas.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class ShipmentFailureOut(BaseModel):
    shipment_id: str
    kind: str
    message: str


class OrderWebhookOut(BaseModel):
    """
    /webhooks/orders/create 的统一响应（业务结果一律 HTTP 200）。

    status:
      ignored / invalid_payload / not_pickup / not_synced / no_shipments
      / ok / partial_failure / error
    """

    processed: bool
    status: str
    message: str = ""
    matched: bool = False
    lookup_key: Optional[str] = None
    shipments_total: int = 0
    shipments_reassigned: int = 0
    skipped_already_correct: int = 0
    shipments_failed: int = 0
    failures: List[ShipmentFailureOut] = []
    error: Optional[str] = None
