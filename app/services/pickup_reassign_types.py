# app/services/pickup_reassign_types.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ShippingLine:
    code: str = ""
    title: str = ""
    source: str = ""


@dataclass(frozen=True)
class Order:
    """
    上游（Shopify）订单里与改仓相关的最小子集。

    display_number 形如 "#1234"，前缀在 derive_lookup_key 里去掉。
    """

    external_id: str
    display_number: str
    tags: Tuple[str, ...] = ()
    shipping_lines: Tuple[ShippingLine, ...] = ()

    @property
    def has_identity(self) -> bool:
        return bool(self.external_id and self.display_number)


@dataclass(frozen=True)
class Shipment:
    id: str
    current_warehouse_id: Optional[str] = None


@dataclass(frozen=True)
class DownstreamOrder:
    id: str
    shipments: Tuple[Shipment, ...] = ()


@dataclass(frozen=True)
class PickupRules:
    """
    自提判定规则表：tag 关键字 + shipping line 关键字 + 自提点名称。
    """

    tag_keyword: str = "pickup"
    shipping_keywords: Tuple[str, ...] = ("pickup", "pick up", "local")
    location_name: str = ""


@dataclass(frozen=True)
class ReassignConfig:
    target_warehouse_id: str
    source_warehouse_id: str = ""
    grace_period_s: float = 10.0
    order_number_prefix: str = "#"
    strip_order_number_prefix: bool = True

    def __post_init__(self) -> None:
        if not (self.target_warehouse_id or "").strip():
            raise ValueError("PICKUP_WAREHOUSE_ID 未配置")


# 处理结果状态
STATUS_INVALID_PAYLOAD = "invalid_payload"
STATUS_NOT_PICKUP = "not_pickup"
STATUS_NOT_SYNCED = "not_synced"
STATUS_NO_SHIPMENTS = "no_shipments"
STATUS_OK = "ok"
STATUS_PARTIAL_FAILURE = "partial_failure"


@dataclass
class ShipmentFailure:
    shipment_id: str
    kind: str  # not_found / transport / rejected / error
    message: str


@dataclass
class ReassignmentResult:
    status: str
    matched: bool = False
    lookup_key: Optional[str] = None
    shipments_total: int = 0
    shipments_reassigned: int = 0
    skipped_already_correct: int = 0
    failures: List[ShipmentFailure] = field(default_factory=list)
    message: str = ""

    @property
    def processed(self) -> bool:
        # 格式不合法的 payload 视为“未处理”，其余（含非自提）都算正常走完
        return self.status != STATUS_INVALID_PAYLOAD

    @property
    def shipments_failed(self) -> int:
        return len(self.failures)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processed": self.processed,
            "status": self.status,
            "message": self.message,
            "matched": self.matched,
            "lookup_key": self.lookup_key,
            "shipments_total": self.shipments_total,
            "shipments_reassigned": self.shipments_reassigned,
            "skipped_already_correct": self.skipped_already_correct,
            "shipments_failed": self.shipments_failed,
            "failures": [
                {"shipment_id": f.shipment_id, "kind": f.kind, "message": f.message}
                for f in self.failures
            ],
        }


def _str(v: Any) -> str:
    if v is None:
        return ""
    return str(v).strip()


def _parse_tags(raw: Any) -> Tuple[str, ...]:
    # Shopify 的 tags 是逗号分隔字符串；也兼容 list
    if raw is None:
        return ()
    if isinstance(raw, str):
        parts = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        parts = [_str(x) for x in raw]
    else:
        raise ValueError(f"tags 类型不支持: {type(raw).__name__}")
    return tuple(p.strip() for p in parts if p and p.strip())


def _parse_shipping_lines(raw: Any) -> Tuple[ShippingLine, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, (list, tuple)):
        raise ValueError(f"shipping_lines 必须是数组: {type(raw).__name__}")
    out: List[ShippingLine] = []
    for line in raw:
        if not isinstance(line, dict):
            continue
        out.append(
            ShippingLine(
                code=_str(line.get("code")),
                title=_str(line.get("title")),
                source=_str(line.get("source")),
            )
        )
    return tuple(out)


def order_from_payload(payload: Dict[str, Any]) -> Order:
    """
    webhook body → Order。

    缺字段不报错（交给 Order.has_identity 判定），只有类型明显不对才 ValueError。
    """
    if not isinstance(payload, dict):
        raise ValueError("order payload 必须是 JSON object")

    display = _str(payload.get("name")) or _str(payload.get("order_number"))
    return Order(
        external_id=_str(payload.get("id")),
        display_number=display,
        tags=_parse_tags(payload.get("tags")),
        shipping_lines=_parse_shipping_lines(payload.get("shipping_lines")),
    )
