# app/api/routers/metrics.py
from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

router = APIRouter(tags=["metrics"])


@router.get("/metrics")
def metrics() -> Response:
    """单进程导出默认 REGISTRY（webhook 结果 / shipment 改仓 / 下游耗时 / HTTP）。"""
    return Response(generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
