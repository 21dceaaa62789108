# app/api/deps.py
from __future__ import annotations

from fastapi import Depends

from app.adapters.skusavvy import SkuSavvyDirectory
from app.core.config import AppSettings, get_settings
from app.services.pickup_reassign_service import PickupReassignService
from app.services.pickup_reassign_types import PickupRules, ReassignConfig


# ---------------------------
# settings → 业务对象（业务代码本身不读环境变量）
# ---------------------------


def build_pickup_rules(settings: AppSettings) -> PickupRules:
    return PickupRules(
        tag_keyword=settings.PICKUP_TAG_KEYWORD,
        shipping_keywords=tuple(settings.shipping_keywords()),
        location_name=settings.PICKUP_LOCATION_NAME,
    )


def build_reassign_config(settings: AppSettings) -> ReassignConfig:
    return ReassignConfig(
        target_warehouse_id=settings.PICKUP_WAREHOUSE_ID,
        source_warehouse_id=settings.DEFAULT_WAREHOUSE_ID,
        grace_period_s=settings.SYNC_GRACE_PERIOD_S,
        order_number_prefix=settings.ORDER_NUMBER_PREFIX,
        strip_order_number_prefix=settings.STRIP_ORDER_NUMBER_PREFIX,
    )


def build_directory(settings: AppSettings) -> SkuSavvyDirectory:
    return SkuSavvyDirectory(
        settings.SKUSAVVY_GRAPHQL_ENDPOINT,
        settings.SKUSAVVY_API_TOKEN,
        timeout_s=settings.SKUSAVVY_TIMEOUT_S,
    )


def build_reassign_service(settings: AppSettings) -> PickupReassignService:
    return PickupReassignService(
        build_directory(settings),
        build_reassign_config(settings),
        build_pickup_rules(settings),
    )


# ---------------------------
# FastAPI 依赖（测试里用 dependency_overrides 替换）
# ---------------------------


async def get_reassign_service(
    settings: AppSettings = Depends(get_settings),
) -> PickupReassignService:
    """
    PickupReassignService 只持有配置，按请求构造即可。
    """
    return build_reassign_service(settings)


__all__ = (
    "build_pickup_rules",
    "build_reassign_config",
    "build_directory",
    "build_reassign_service",
    "get_reassign_service",
)
