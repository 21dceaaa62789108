#!/usr/bin/env python3
"""
在 Shopify 上注册 / 列出 orders/create webhook。

用法：
  python -m scripts.register_webhook            # 默认 register
  python -m scripts.register_webhook list

配置（环境变量或 .env）：SHOPIFY_SHOP / SHOPIFY_ACCESS_TOKEN / WEBHOOK_URL
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List, Optional

import httpx

from app.core.config import AppSettings, get_settings

DEFAULT_WEBHOOK_URL = "https://your-app-name.onrender.com/webhooks/orders/create"


def _webhooks_url(settings: AppSettings) -> str:
    return f"https://{settings.SHOPIFY_SHOP}/admin/api/{settings.SHOPIFY_API_VERSION}/webhooks.json"


def _check_creds(settings: AppSettings) -> bool:
    if settings.SHOPIFY_SHOP and settings.SHOPIFY_ACCESS_TOKEN:
        return True
    print("缺少必需配置：", file=sys.stderr)
    print(f"  SHOPIFY_SHOP: {'✓' if settings.SHOPIFY_SHOP else '✗'}", file=sys.stderr)
    print(f"  SHOPIFY_ACCESS_TOKEN: {'✓' if settings.SHOPIFY_ACCESS_TOKEN else '✗'}", file=sys.stderr)
    return False


async def register_webhook(
    settings: AppSettings,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    address = settings.WEBHOOK_URL or DEFAULT_WEBHOOK_URL
    print(f"Shop: {settings.SHOPIFY_SHOP}")
    print(f"Webhook URL: {address}")
    if not _check_creds(settings):
        return 1

    body = {
        "webhook": {
            "topic": settings.WEBHOOK_TOPIC,
            "address": address,
            "format": "json",
        }
    }
    async with httpx.AsyncClient(timeout=15, transport=transport) as client:
        resp = await client.post(
            _webhooks_url(settings),
            json=body,
            headers={"X-Shopify-Access-Token": settings.SHOPIFY_ACCESS_TOKEN},
        )

    data = _json_or_text(resp)
    if resp.is_success:
        print("Webhook 注册成功：")
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return 0

    print(f"Webhook 注册失败：HTTP {resp.status_code}", file=sys.stderr)
    print(json.dumps(data, ensure_ascii=False, indent=2), file=sys.stderr)
    return 1


async def list_webhooks(
    settings: AppSettings,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    print(f"Shop: {settings.SHOPIFY_SHOP}")
    if not _check_creds(settings):
        return 1

    async with httpx.AsyncClient(timeout=15, transport=transport) as client:
        resp = await client.get(
            _webhooks_url(settings),
            headers={"X-Shopify-Access-Token": settings.SHOPIFY_ACCESS_TOKEN},
        )

    data = _json_or_text(resp)
    if not resp.is_success:
        print(f"获取 webhook 列表失败：HTTP {resp.status_code}", file=sys.stderr)
        print(json.dumps(data, ensure_ascii=False, indent=2), file=sys.stderr)
        return 1

    hooks: List[Dict[str, Any]] = []
    if isinstance(data, dict):
        hooks = data.get("webhooks") or []
    if not hooks:
        print("没有已注册的 webhook。")
        return 0

    print(f"共 {len(hooks)} 个 webhook：")
    for i, h in enumerate(hooks, start=1):
        print(f"{i}. Topic: {h.get('topic')}")
        print(f"   Address: {h.get('address')}")
        print(f"   ID: {h.get('id')}")
        print(f"   Created: {h.get('created_at')}")
    return 0


def _json_or_text(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Register or list the Shopify orders/create webhook")
    p.add_argument("command", nargs="?", default="register", choices=["register", "list"])
    args = p.parse_args(argv)

    settings = get_settings()
    if args.command == "list":
        return asyncio.run(list_webhooks(settings))
    return asyncio.run(register_webhook(settings))


if __name__ == "__main__":
    sys.exit(main())
