# app/core/webhook_signature.py
from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Optional


def compute_shopify_hmac(raw_body: bytes, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("utf-8")


def verify_shopify_hmac(raw_body: bytes, hmac_header: Optional[str], secret: str) -> bool:
    """
    X-Shopify-Hmac-Sha256 = base64(HMAC-SHA256(secret, raw_body))

    必须用原始 body 字节计算；比较用 compare_digest。
    """
    if not secret or not hmac_header:
        return False
    expected = compute_shopify_hmac(raw_body, secret)
    return hmac.compare_digest(expected, hmac_header.strip())
