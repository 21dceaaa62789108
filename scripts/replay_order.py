#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import sys
from pathlib import Path
from typing import List, Optional

from app.api.deps import build_directory, build_pickup_rules, build_reassign_config
from app.core.config import get_settings
from app.core.logging import setup_logging
from app.services.pickup_reassign_service import PickupReassignService
from app.services.pickup_reassign_types import order_from_payload


async def _run(path: Path, grace: Optional[float]) -> int:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    payload = json.loads(path.read_text(encoding="utf-8"))
    order = order_from_payload(payload)

    config = build_reassign_config(settings)
    if grace is not None:
        # 人工补跑时下游通常早已同步完成，可以不等
        config = dataclasses.replace(config, grace_period_s=grace)

    svc = PickupReassignService(build_directory(settings), config, build_pickup_rules(settings))

    result = await svc.process(order)
    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    return 0 if result.processed and not result.failures else 1


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(
        description="Re-run pickup warehouse reassignment for a saved orders/create payload"
    )
    p.add_argument("payload", type=Path, help="Shopify order JSON 文件")
    p.add_argument("--grace", type=float, default=None, help="覆盖同步宽限期（秒），默认用配置")
    args = p.parse_args(argv)
    return asyncio.run(_run(args.payload, args.grace))


if __name__ == "__main__":
    sys.exit(main())
