# app/core/config.py
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    全局应用配置（环境变量 / .env）

    注意：业务代码不直接读这里，统一由 app/api/deps.py 组装成
    PickupRules / ReassignConfig / SkuSavvyDirectory 再注入。
    """

    # 运行环境
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # 下游履约系统（SkuSavvy GraphQL）
    SKUSAVVY_GRAPHQL_ENDPOINT: str = Field(default="")
    SKUSAVVY_API_TOKEN: str = Field(default="")
    SKUSAVVY_TIMEOUT_S: float = Field(default=10.0, gt=0)

    # 仓库：目标自提仓 / 默认发货仓（后者仅用于日志）
    PICKUP_WAREHOUSE_ID: str = Field(default="")
    DEFAULT_WAREHOUSE_ID: str = Field(default="")

    # 上游下单后下游异步同步，查询前固定等待一次
    SYNC_GRACE_PERIOD_S: float = Field(default=10.0, ge=0)

    # 订单号 → 下游查询 key
    ORDER_NUMBER_PREFIX: str = Field(default="#")
    STRIP_ORDER_NUMBER_PREFIX: bool = Field(default=True)

    # 自提判定规则表
    PICKUP_TAG_KEYWORD: str = Field(default="pickup")
    PICKUP_SHIPPING_KEYWORDS: str = Field(
        default="pickup,pick up,local",
        description="逗号分隔，匹配 shipping line 的 code / title（子串、忽略大小写）",
    )
    PICKUP_LOCATION_NAME: str = Field(default="")

    # 上游 webhook
    SHOPIFY_WEBHOOK_SECRET: str = Field(default="")
    WEBHOOK_TOPIC: str = Field(default="orders/create")

    # 仅 scripts/register_webhook.py 使用
    SHOPIFY_SHOP: str = Field(default="")
    SHOPIFY_ACCESS_TOKEN: str = Field(default="")
    SHOPIFY_API_VERSION: str = Field(default="2024-10")
    WEBHOOK_URL: str = Field(default="")

    # 允许从 .env 文件读取配置
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_dev(self) -> bool:
        return self.ENV.lower() == "dev"

    def shipping_keywords(self) -> List[str]:
        return [k.strip() for k in self.PICKUP_SHIPPING_KEYWORDS.split(",") if k.strip()]


@lru_cache
def get_settings() -> AppSettings:
    """全局单例设置入口。"""
    return AppSettings()
