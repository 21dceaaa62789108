# app/services/pickup_classifier.py
"""
自提订单判定（纯函数，无 I/O）。

规则（命中即返回，全部为忽略大小写的子串匹配）：
  1) 任一 tag 含 rules.tag_keyword（默认 "pickup"）
  2) 任一 shipping line 的 code / title 含 rules.shipping_keywords 之一，
     或含配置的自提点名称 rules.location_name
  3) 其余 → 非自提

已知局限：子串匹配而非整词匹配，例如 title "Locally Sourced Box" 会因为
"local" 被判成自提。这是启发式规则本身的取舍，不在这里“修”。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from app.services.pickup_reassign_types import Order, PickupRules


@dataclass(frozen=True)
class Classification:
    is_pickup: bool
    reason: Optional[str] = None


def _needles(rules: PickupRules) -> List[str]:
    out = [k.lower() for k in rules.shipping_keywords if k]
    # 空名称会匹配任何字符串，必须跳过
    loc = (rules.location_name or "").strip().lower()
    if loc:
        out.append(loc)
    return out


def classify(order: Order, rules: PickupRules) -> Classification:
    tag_kw = (rules.tag_keyword or "").lower()
    if tag_kw:
        for tag in order.tags or ():
            if tag_kw in (tag or "").lower():
                return Classification(True, f"tag:{tag}")

    needles = _needles(rules)
    for line in order.shipping_lines or ():
        code = (line.code or "").lower()
        title = (line.title or "").lower()
        for n in needles:
            if n in code:
                return Classification(True, f"shipping_code:{n}")
            if n in title:
                return Classification(True, f"shipping_title:{n}")

    return Classification(False)
