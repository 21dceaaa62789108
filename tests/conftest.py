# tests/conftest.py
from __future__ import annotations

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.api.deps import build_pickup_rules, build_reassign_config, get_reassign_service
from app.core.config import AppSettings, get_settings
from app.main import app
from app.services.pickup_reassign_service import PickupReassignService
from tests.helpers.pickup import DEFAULT_WH, PICKUP_WH, WEBHOOK_SECRET, FakeDirectory


@pytest.fixture
def settings() -> AppSettings:
    """
    显式构造，不读 .env；宽限期为 0，测试不真等。
    """
    return AppSettings(
        ENV="test",
        SKUSAVVY_GRAPHQL_ENDPOINT="https://skusavvy.test/graphql",
        SKUSAVVY_API_TOKEN="test-token",
        SKUSAVVY_TIMEOUT_S=5.0,
        PICKUP_WAREHOUSE_ID=PICKUP_WH,
        DEFAULT_WAREHOUSE_ID=DEFAULT_WH,
        SYNC_GRACE_PERIOD_S=0,
        ORDER_NUMBER_PREFIX="#",
        STRIP_ORDER_NUMBER_PREFIX=True,
        PICKUP_TAG_KEYWORD="pickup",
        PICKUP_SHIPPING_KEYWORDS="pickup,pick up,local",
        PICKUP_LOCATION_NAME="Americana",
        SHOPIFY_WEBHOOK_SECRET=WEBHOOK_SECRET,
        WEBHOOK_TOPIC="orders/create",
        _env_file=None,
    )


@pytest.fixture
def directory() -> FakeDirectory:
    return FakeDirectory()


@pytest.fixture
def service(settings: AppSettings, directory: FakeDirectory) -> PickupReassignService:
    return PickupReassignService(
        directory,
        build_reassign_config(settings),
        build_pickup_rules(settings),
    )


@pytest_asyncio.fixture
async def async_client(
    settings: AppSettings, service: PickupReassignService
) -> AsyncGenerator[AsyncClient, None]:
    """
    基于 FastAPI app 的 AsyncClient；settings / service 走 dependency_overrides。

    注意：httpx 新版本已经不支持 AsyncClient(app=...)，需要显式 ASGITransport。
    """
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_reassign_service] = lambda: service
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
