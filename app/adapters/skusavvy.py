# app/adapters/skusavvy.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from app.adapters.base import (
    DirectoryRejected,
    DirectoryTransportError,
    FulfillmentDirectory,
    OrderNotFound,
)
from app.services.pickup_reassign_types import DownstreamOrder, Shipment

logger = logging.getLogger("pickup.skusavvy")

# 所有值都走 GraphQL variables，query 文本里不拼任何配置值
GET_ORDER_QUERY = """
query GetOrder($orderId: String!) {
  order(orderId: $orderId) {
    id
    shipments {
      id
      warehouseId
    }
  }
}
"""

REASSIGN_MUTATION = """
mutation ReassignShipmentLocation($orderId: UUID!, $shipmentId: Int!, $warehouseId: UUID!) {
  shipmentReassignLocation(
    orderId: $orderId,
    shipmentId: $shipmentId,
    warehouseId: $warehouseId
  ) {
    shipments { id }
  }
}
"""


def _error_list(body: Dict[str, Any]) -> List[Any]:
    errors = body.get("errors") or []
    if not isinstance(errors, list):
        raise DirectoryRejected(f"SkuSavvy errors 字段结构异常: {type(errors).__name__}")
    return errors


def _looks_not_found(errors: List[Any]) -> bool:
    for e in errors:
        if not isinstance(e, dict):
            continue
        ext = e.get("extensions")
        msg = str(e.get("message") or "").lower()
        code = str(ext.get("code") or "").upper() if isinstance(ext, dict) else ""
        if "not found" in msg or code == "NOT_FOUND":
            return True
    return False


def _error_text(errors: List[Any]) -> str:
    parts = [str(e.get("message") or e) if isinstance(e, dict) else str(e) for e in errors]
    return "; ".join(parts) or "unknown error"


def _data(body: Dict[str, Any]) -> Dict[str, Any]:
    data = body.get("data") or {}
    if not isinstance(data, dict):
        raise DirectoryRejected(f"SkuSavvy data 字段结构异常: {type(data).__name__}")
    return data


def _shipment_id_var(shipment_id: str) -> Any:
    # 下游 shipmentId 是 Int!；转不成整数的 id 原样透传，由下游拒绝
    s = str(shipment_id).strip()
    try:
        return int(s)
    except ValueError:
        return s


class SkuSavvyDirectory(FulfillmentDirectory):
    """
    SkuSavvy GraphQL 客户端（无状态）：

    - 每次调用单独开一个 httpx.AsyncClient，并带显式超时；
    - Authorization: Bearer <api_token>；
    - transport 仅测试注入（httpx.MockTransport）。
    """

    def __init__(
        self,
        endpoint: str,
        api_token: str,
        *,
        timeout_s: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not (endpoint or "").strip():
            raise ValueError("SKUSAVVY_GRAPHQL_ENDPOINT 未配置")
        self.endpoint = endpoint
        self.api_token = api_token
        self.timeout_s = timeout_s
        self._transport = transport

    # ---------- 查询 ----------

    async def find_order_with_shipments(self, lookup_key: str) -> DownstreamOrder:
        body = await self._execute(GET_ORDER_QUERY, {"orderId": lookup_key})

        errors = _error_list(body)
        order = _data(body).get("order")

        if not order:
            if errors and not _looks_not_found(errors):
                raise DirectoryRejected(f"order 查询失败: {_error_text(errors)}")
            raise OrderNotFound(f"下游不存在订单 {lookup_key!r}")
        if not isinstance(order, dict):
            raise DirectoryRejected(f"order 字段结构异常: {type(order).__name__}")

        if errors:
            # 部分字段报错但 order 本身拿到了：照常用，记一笔
            logger.warning("GetOrder partial errors key=%s: %s", lookup_key, _error_text(errors))

        raw_shipments = order.get("shipments") or []
        if not isinstance(raw_shipments, list):
            raise DirectoryRejected(f"shipments 字段结构异常: {type(raw_shipments).__name__}")

        shipments = tuple(
            Shipment(
                id=str(s.get("id")),
                current_warehouse_id=(
                    str(s["warehouseId"]) if s.get("warehouseId") is not None else None
                ),
            )
            for s in raw_shipments
            if isinstance(s, dict) and s.get("id") is not None
        )
        return DownstreamOrder(id=str(order.get("id")), shipments=shipments)

    # ---------- 改仓 ----------

    async def reassign_shipment(
        self,
        downstream_order_id: str,
        shipment_id: str,
        target_warehouse_id: str,
    ) -> List[str]:
        body = await self._execute(
            REASSIGN_MUTATION,
            {
                "orderId": downstream_order_id,
                "shipmentId": _shipment_id_var(shipment_id),
                "warehouseId": target_warehouse_id,
            },
        )

        errors = _error_list(body)
        if errors:
            raise DirectoryRejected(f"shipment {shipment_id} 改仓被拒: {_error_text(errors)}")

        payload = _data(body).get("shipmentReassignLocation")
        if not payload:
            raise DirectoryRejected(f"shipment {shipment_id} 改仓无返回数据")
        if not isinstance(payload, dict):
            raise DirectoryRejected(
                f"shipment {shipment_id} 改仓返回结构异常: {type(payload).__name__}"
            )

        returned = payload.get("shipments") or []
        if not isinstance(returned, list):
            returned = []
        return [str(s.get("id")) for s in returned if isinstance(s, dict)]

    # ---------- 内部辅助 ----------

    async def _execute(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s, transport=self._transport
            ) as client:
                resp = await client.post(
                    self.endpoint,
                    json={"query": query, "variables": variables},
                    headers=headers,
                )
        except httpx.TimeoutException as exc:
            raise DirectoryTransportError(f"SkuSavvy 超时({self.timeout_s}s): {exc}") from exc
        except httpx.HTTPError as exc:
            raise DirectoryTransportError(f"SkuSavvy 请求失败: {exc}") from exc

        if resp.status_code >= 500:
            raise DirectoryTransportError(f"SkuSavvy HTTP {resp.status_code}")
        if resp.status_code >= 400:
            raise DirectoryRejected(f"SkuSavvy HTTP {resp.status_code}: {resp.text[:200]}")

        try:
            body = resp.json()
        except ValueError as exc:
            raise DirectoryTransportError("SkuSavvy 返回非 JSON") from exc

        if not isinstance(body, dict):
            raise DirectoryTransportError(f"SkuSavvy 返回结构异常: {type(body).__name__}")
        return body
