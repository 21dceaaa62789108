# app/services/pickup_reassign_service.py
from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

from app.adapters.base import DirectoryError, FulfillmentDirectory, OrderNotFound
from app.obs.metrics import directory_call_duration, shipment_reassign_total
from app.services.pickup_classifier import classify
from app.services.pickup_reassign_types import (
    STATUS_INVALID_PAYLOAD,
    STATUS_NO_SHIPMENTS,
    STATUS_NOT_PICKUP,
    STATUS_NOT_SYNCED,
    STATUS_OK,
    STATUS_PARTIAL_FAILURE,
    Order,
    PickupRules,
    ReassignConfig,
    ReassignmentResult,
    ShipmentFailure,
)

logger = logging.getLogger("pickup.reassign")

SleepFn = Callable[[float], Awaitable[None]]


def derive_lookup_key(display_number: str, prefix: str = "#", strip: bool = True) -> str:
    """
    订单展示号 → 下游查询 key。

    例：derive_lookup_key("#1234") == "1234"；strip=False 时原样（仅去空白）。
    """
    key = (display_number or "").strip()
    if strip and prefix and key.startswith(prefix):
        key = key[len(prefix) :].strip()
    return key


class PickupReassignService:
    """
    自提订单改仓编排：

      校验 → 判定自提 → 推导 lookup key → 等待同步宽限期
      → 查下游订单 → 逐 shipment 改仓（单个失败不影响其它）→ 汇总结果

    无跨请求状态；查单阶段的传输/拒绝错误直接向上抛，由 webhook 层兜底。
    """

    def __init__(
        self,
        directory: FulfillmentDirectory,
        config: ReassignConfig,
        rules: PickupRules,
        *,
        sleep: SleepFn = asyncio.sleep,
    ):
        self.directory = directory
        self.config = config
        self.rules = rules
        self._sleep = sleep

    async def process(self, order: Order) -> ReassignmentResult:
        if not order.has_identity:
            logger.info(
                "skip order: missing id/name (id=%r name=%r)",
                order.external_id,
                order.display_number,
            )
            return ReassignmentResult(
                status=STATUS_INVALID_PAYLOAD,
                message="order payload missing id or name",
            )

        verdict = classify(order, self.rules)
        if not verdict.is_pickup:
            logger.info("order %s: not a pickup order", order.display_number)
            return ReassignmentResult(status=STATUS_NOT_PICKUP, message="not a pickup order")

        key = derive_lookup_key(
            order.display_number,
            self.config.order_number_prefix,
            self.config.strip_order_number_prefix,
        )
        logger.info(
            "order %s: pickup (%s), lookup_key=%s", order.display_number, verdict.reason, key
        )

        await self.wait_for_downstream_sync()

        started = time.perf_counter()
        try:
            downstream = await self.directory.find_order_with_shipments(key)
        except OrderNotFound:
            logger.warning("order %s: not found downstream yet (may sync later)", key)
            return ReassignmentResult(
                status=STATUS_NOT_SYNCED,
                matched=True,
                lookup_key=key,
                message="order not found downstream yet; may sync later",
            )
        finally:
            directory_call_duration.labels("find_order").observe(time.perf_counter() - started)

        result = ReassignmentResult(
            status=STATUS_OK,
            matched=True,
            lookup_key=key,
            shipments_total=len(downstream.shipments),
        )
        if not downstream.shipments:
            logger.warning("order %s: downstream order %s has no shipments yet", key, downstream.id)
            result.status = STATUS_NO_SHIPMENTS
            result.message = "no shipments downstream yet; may sync later"
            return result

        target = self.config.target_warehouse_id
        for shipment in downstream.shipments:
            if shipment.current_warehouse_id == target:
                result.skipped_already_correct += 1
                shipment_reassign_total.labels("skipped").inc()
                logger.info("shipment %s already at pickup warehouse", shipment.id)
                continue

            started = time.perf_counter()
            try:
                await self.directory.reassign_shipment(downstream.id, shipment.id, target)
            except DirectoryError as exc:
                result.failures.append(ShipmentFailure(shipment.id, exc.kind, str(exc)))
                shipment_reassign_total.labels("failed").inc()
                logger.warning("shipment %s reassign failed [%s]: %s", shipment.id, exc.kind, exc)
                continue
            except Exception as exc:
                # 单个 shipment 出任何错都只记失败，其余 shipment 照常处理
                result.failures.append(ShipmentFailure(shipment.id, DirectoryError.kind, str(exc)))
                shipment_reassign_total.labels("failed").inc()
                logger.exception("shipment %s reassign failed unexpectedly", shipment.id)
                continue
            finally:
                directory_call_duration.labels("reassign_shipment").observe(
                    time.perf_counter() - started
                )

            result.shipments_reassigned += 1
            shipment_reassign_total.labels("reassigned").inc()
            logger.info(
                "shipment %s reassigned %s -> %s",
                shipment.id,
                shipment.current_warehouse_id or self.config.source_warehouse_id or "?",
                target,
            )

        if result.failures:
            result.status = STATUS_PARTIAL_FAILURE
            result.message = (
                f"reassigned {result.shipments_reassigned} of "
                f"{result.shipments_total - result.skipped_already_correct}; "
                f"{result.shipments_failed} failed"
            )
        else:
            result.message = f"reassigned {result.shipments_reassigned} shipment(s)"
        return result

    async def wait_for_downstream_sync(self) -> None:
        """上游事件先到、下游异步同步后到：查询前固定等一次（不是重试）。"""
        grace = self.config.grace_period_s
        if grace > 0:
            logger.debug("waiting %.1fs for downstream sync", grace)
            await self._sleep(grace)
