"""PlatformProfitability Use Case

Revenue, platform cost and profit per platform over its sales.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from libs.result import Result
from src.app.repositories.report_repository import ReportRepository, SaleQuery
from src.app.services.report_cache import ReportCache
from .aggregation import GROUP_KEYS, SalesAggregate, aggregate_sales, safe_ratio
from .base import CachedReport, date_range_params
from .dtos import (
    DateRangeDTO,
    GroupBy,
    PlatformProfitabilityDTO,
    PlatformProfitabilityReportDTO,
    PlatformProfitabilitySummaryDTO,
)


class PlatformProfitability(CachedReport):
    """
    Use Case: Platform profitability report

    Every platform (or the single requested one) is listed, including platforms
    without sales in the range, ordered by revenue descending. The most and
    least profitable platforms are the first and last line items.
    """

    report_name = "platformProfitability"

    def __init__(self, report_repo: ReportRepository, cache: ReportCache):
        super().__init__(cache)
        self.report_repo = report_repo

    async def execute(
        self,
        platform_id: Optional[str] = None,
        date_range: Optional[DateRangeDTO] = None,
    ) -> Result[PlatformProfitabilityReportDTO]:
        params = {"platform_id": platform_id, "date_range": date_range_params(date_range)}
        return await self._cached(params, lambda: self._build(platform_id, date_range))

    async def _build(
        self, platform_id: Optional[str], date_range: Optional[DateRangeDTO]
    ) -> PlatformProfitabilityReportDTO:
        platforms = await self.report_repo.list_platforms(platform_id=platform_id)
        sales = await self.report_repo.list_sales(
            SaleQuery(
                platform_id=platform_id,
                start_date=date_range.start_date if date_range else None,
                end_date=date_range.end_date if date_range else None,
                with_platform_only=True,
            )
        )

        by_platform = {
            group_id: aggregate
            for (group_id, _), aggregate in aggregate_sales(sales, GROUP_KEYS[GroupBy.PLATFORM]).items()
        }

        items = [
            self._to_item_dto(platform, by_platform.get(platform.id, SalesAggregate()))
            for platform in platforms
        ]
        items.sort(key=lambda item: item.total_revenue, reverse=True)

        return PlatformProfitabilityReportDTO(
            summary=self._summarize(items),
            platforms=items,
            platform_id=platform_id,
            date_range=date_range,
            generated_at=datetime.utcnow(),
        )

    @staticmethod
    def _to_item_dto(platform, aggregate: SalesAggregate) -> PlatformProfitabilityDTO:
        return PlatformProfitabilityDTO(
            platform_id=platform.id,
            platform_name=platform.name,
            current_balance=platform.credit_balance,
            total_sales=aggregate.total_sales,
            total_quantity_sold=aggregate.total_quantity,
            total_revenue=aggregate.total_revenue,
            total_platform_cost=aggregate.total_cost,
            total_profit=aggregate.total_profit,
            average_profit_per_sale=aggregate.average_profit_per_sale,
            average_buying_price=aggregate.average_buying_price,
            average_selling_price=aggregate.average_selling_price,
            profit_margin_percentage=aggregate.profit_margin_percentage,
            recurring_sales=aggregate.recurring_sales,
            one_time_sales=aggregate.one_time_sales,
            first_sale_date=aggregate.first_sale_date,
            last_sale_date=aggregate.last_sale_date,
            roi=aggregate.roi,
        )

    @staticmethod
    def _summarize(items: List[PlatformProfitabilityDTO]) -> PlatformProfitabilitySummaryDTO:
        return PlatformProfitabilitySummaryDTO(
            total_platforms=len(items),
            total_revenue=sum((i.total_revenue for i in items), Decimal("0")),
            total_profit=sum((i.total_profit for i in items), Decimal("0")),
            total_platform_cost=sum((i.total_platform_cost for i in items), Decimal("0")),
            average_profit_margin=safe_ratio(
                sum((i.profit_margin_percentage for i in items), Decimal("0")), len(items)
            ),
            total_current_balance=sum((i.current_balance for i in items), Decimal("0")),
            most_profitable_platform=items[0] if items else None,
            least_profitable_platform=items[-1] if items else None,
        )
