# app/adapters/base.py
from __future__ import annotations

from typing import List, Protocol

from app.services.pickup_reassign_types import DownstreamOrder


class DirectoryError(Exception):
    """下游履约系统调用失败的基类。kind 用于结果里的失败归类。"""

    kind = "error"


class OrderNotFound(DirectoryError):
    """下游还没有这张单（多半是尚未同步），属于正常结果。"""

    kind = "not_found"


class DirectoryTransportError(DirectoryError):
    """网络错误 / 超时 / 5xx / 响应不是合法 JSON。"""

    kind = "transport"


class DirectoryRejected(DirectoryError):
    """下游明确拒绝：4xx 或 GraphQL errors。"""

    kind = "rejected"


class FulfillmentDirectory(Protocol):
    """
    下游履约目录接口（最小骨架）
    - 按外部订单号查订单及其 shipments
    - 把单个 shipment 改到指定仓
    """

    async def find_order_with_shipments(self, lookup_key: str) -> DownstreamOrder:
        """
        查不到时抛 OrderNotFound；其它失败抛 DirectoryTransportError / DirectoryRejected。
        """
        ...

    async def reassign_shipment(
        self,
        downstream_order_id: str,
        shipment_id: str,
        target_warehouse_id: str,
    ) -> List[str]:
        """
        返回: 下游回传的 shipment id 列表
        """
        ...
