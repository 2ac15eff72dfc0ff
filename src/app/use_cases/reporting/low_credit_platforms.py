"""LowCreditPlatforms Use Case

Active platforms at or below a credit threshold, with a trailing usage rate,
a depletion estimate and a recommended top-up.
"""

import math
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional
from libs.result import Result
from src.app.repositories.report_repository import ReportRepository, SaleQuery
from src.app.services.report_cache import ReportCache
from .aggregation import GROUP_KEYS, SalesAggregate, aggregate_sales, safe_ratio
from .base import CachedReport
from .dtos import (
    GroupBy,
    LowCreditPlatformDTO,
    LowCreditPlatformsReportDTO,
    LowCreditSummaryDTO,
    UrgencyLevel,
)

DEFAULT_THRESHOLD = Decimal("100")
DEFAULT_USAGE_WINDOW_DAYS = 30

CRITICAL_RATIO = Decimal("0.2")
HIGH_RATIO = Decimal("0.5")


def urgency_level(balance: Decimal, threshold: Decimal) -> UrgencyLevel:
    if balance <= threshold * CRITICAL_RATIO:
        return UrgencyLevel.CRITICAL
    if balance <= threshold * HIGH_RATIO:
        return UrgencyLevel.HIGH
    return UrgencyLevel.MEDIUM


def recommended_top_up(balance: Decimal, threshold: Decimal) -> Decimal:
    return max(threshold * 2 - balance, Decimal("0"))


def estimated_days_until_depletion(
    balance: Decimal, usage: Decimal, window_days: int
) -> Optional[int]:
    """balance / (usage / window_days), floored; None without usage"""
    if usage <= 0:
        return None
    daily_usage = usage / window_days
    return max(math.floor(balance / daily_usage), 0)


class LowCreditPlatforms(CachedReport):
    """
    Use Case: Low credit platforms report

    Usage is the platform cost (buying price x quantity) of the platform's sales
    in the trailing window. Line items are ordered by balance ascending, then by
    recent usage descending.
    """

    report_name = "lowCreditPlatforms"

    def __init__(
        self,
        report_repo: ReportRepository,
        cache: ReportCache,
        usage_window_days: int = DEFAULT_USAGE_WINDOW_DAYS,
    ):
        super().__init__(cache)
        self.report_repo = report_repo
        self.usage_window_days = usage_window_days

    async def execute(self, threshold: Decimal = DEFAULT_THRESHOLD) -> Result[LowCreditPlatformsReportDTO]:
        threshold = Decimal(threshold)
        # 100, 100.0 and 1E+2 share one cache entry
        params = {
            "threshold": format(threshold.normalize(), "f"),
            "usage_window_days": self.usage_window_days,
        }
        return await self._cached(params, lambda: self._build(threshold))

    async def _build(self, threshold: Decimal) -> LowCreditPlatformsReportDTO:
        now = datetime.utcnow()
        platforms = await self.report_repo.list_platforms(active_only=True, max_balance=threshold)
        platform_ids = [platform.id for platform in platforms]

        recent_usage: Dict[Optional[str], SalesAggregate] = {}
        stock_by_platform: Dict[str, List[int]] = {}
        if platform_ids:
            sales = await self.report_repo.list_sales(
                SaleQuery(
                    platform_ids=platform_ids,
                    start_date=now - timedelta(days=self.usage_window_days),
                )
            )
            recent_usage = {
                group_id: aggregate
                for (group_id, _), aggregate in aggregate_sales(sales, GROUP_KEYS[GroupBy.PLATFORM]).items()
            }
            for product in await self.report_repo.list_active_products(platform_ids):
                stock_by_platform.setdefault(product.platform_id, []).append(product.current_stock)

        items = []
        for platform in platforms:
            usage = recent_usage.get(platform.id, SalesAggregate())
            stock = stock_by_platform.get(platform.id, [])
            balance = platform.credit_balance
            items.append(
                LowCreditPlatformDTO(
                    platform_id=platform.id,
                    platform_name=platform.name,
                    credit_balance=balance,
                    low_balance_threshold=platform.low_balance_threshold,
                    is_active=platform.is_active,
                    created_at=platform.created_at,
                    updated_at=platform.updated_at,
                    recent_sales_count=usage.total_sales,
                    recent_credit_usage=usage.total_cost,
                    average_sale_cost=safe_ratio(usage.total_cost, usage.total_sales),
                    last_sale_date=usage.last_sale_date,
                    associated_products_count=len(stock),
                    total_product_stock=sum(stock),
                    estimated_days_until_depletion=estimated_days_until_depletion(
                        balance, usage.total_cost, self.usage_window_days
                    ),
                    urgency_level=urgency_level(balance, threshold),
                    recommended_top_up=recommended_top_up(balance, threshold),
                )
            )
        items.sort(key=lambda item: (item.credit_balance, -item.recent_credit_usage))

        return LowCreditPlatformsReportDTO(
            summary=self._summarize(items, threshold),
            platforms=items,
            threshold=threshold,
            generated_at=now,
        )

    @staticmethod
    def _summarize(items: List[LowCreditPlatformDTO], threshold: Decimal) -> LowCreditSummaryDTO:
        return LowCreditSummaryDTO(
            total_low_credit_platforms=len(items),
            critical_platforms=sum(1 for p in items if p.urgency_level == UrgencyLevel.CRITICAL),
            high_urgency_platforms=sum(1 for p in items if p.urgency_level == UrgencyLevel.HIGH),
            medium_urgency_platforms=sum(1 for p in items if p.urgency_level == UrgencyLevel.MEDIUM),
            total_recommended_top_up=sum((p.recommended_top_up for p in items), Decimal("0")),
            average_balance=safe_ratio(sum((p.credit_balance for p in items), Decimal("0")), len(items)),
            platforms_with_recent_activity=sum(1 for p in items if p.recent_sales_count > 0),
            threshold=threshold,
        )
