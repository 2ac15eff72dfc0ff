"""SalesProfitReport Use Case

Aggregates sales along one interchangeable dimension (platform, product,
category, month or a single total group).
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from libs.result import Result
from src.app.repositories.report_repository import ReportRepository, SaleQuery
from src.app.services.report_cache import ReportCache
from .aggregation import GROUP_KEYS, SalesAggregate, aggregate_sales, safe_ratio
from .base import CachedReport
from .dtos import (
    GroupBy,
    SalesProfitGroupDTO,
    SalesProfitReportDTO,
    SalesProfitSummaryDTO,
    SalesReportFiltersDTO,
)

TOTAL_GROUP_KEY = ("all", "All Sales")


class SalesProfitReport(CachedReport):
    """
    Use Case: Sales profit report

    Groups are ordered by revenue descending; the best and worst performing
    groups are the first and last. Grouping by total always yields exactly
    one group, even without sales.
    """

    report_name = "salesProfitReport"

    def __init__(self, report_repo: ReportRepository, cache: ReportCache):
        super().__init__(cache)
        self.report_repo = report_repo

    async def execute(
        self, filters: Optional[SalesReportFiltersDTO] = None
    ) -> Result[SalesProfitReportDTO]:
        filters = filters or SalesReportFiltersDTO()
        return await self._cached(filters.model_dump(mode="json"), lambda: self._build(filters))

    async def _build(self, filters: SalesReportFiltersDTO) -> SalesProfitReportDTO:
        date_range = filters.date_range
        sales = await self.report_repo.list_sales(
            SaleQuery(
                platform_id=filters.platform_id,
                product_id=filters.product_id,
                category=filters.category,
                payment_type=filters.payment_type,
                start_date=date_range.start_date if date_range else None,
                end_date=date_range.end_date if date_range else None,
            )
        )

        groups = aggregate_sales(sales, GROUP_KEYS[filters.group_by])
        if filters.group_by == GroupBy.TOTAL and not groups:
            groups[TOTAL_GROUP_KEY] = SalesAggregate()

        items = [
            self._to_group_dto(group_id, group_name, filters.group_by, aggregate)
            for (group_id, group_name), aggregate in groups.items()
        ]
        items.sort(key=lambda item: item.total_revenue, reverse=True)

        return SalesProfitReportDTO(
            summary=self._summarize(items),
            groups=items,
            filters=filters,
            generated_at=datetime.utcnow(),
        )

    @staticmethod
    def _to_group_dto(
        group_id: Optional[str],
        group_name: Optional[str],
        group_type: GroupBy,
        aggregate: SalesAggregate,
    ) -> SalesProfitGroupDTO:
        return SalesProfitGroupDTO(
            group_id=group_id,
            group_name=group_name,
            group_type=group_type,
            total_sales=aggregate.total_sales,
            total_quantity=aggregate.total_quantity,
            total_revenue=aggregate.total_revenue,
            total_cost=aggregate.total_cost,
            total_profit=aggregate.total_profit,
            average_profit_per_sale=aggregate.average_profit_per_sale,
            average_selling_price=aggregate.average_selling_price,
            average_buying_price=aggregate.average_buying_price,
            profit_margin_percentage=aggregate.profit_margin_percentage,
            recurring_sales=aggregate.recurring_sales,
            one_time_sales=aggregate.one_time_sales,
            paid_sales=aggregate.paid_sales,
            pending_sales=aggregate.pending_sales,
            first_sale_date=aggregate.first_sale_date,
            last_sale_date=aggregate.last_sale_date,
            roi=aggregate.roi,
        )

    @staticmethod
    def _summarize(items: List[SalesProfitGroupDTO]) -> SalesProfitSummaryDTO:
        return SalesProfitSummaryDTO(
            total_groups=len(items),
            total_revenue=sum((g.total_revenue for g in items), Decimal("0")),
            total_profit=sum((g.total_profit for g in items), Decimal("0")),
            total_cost=sum((g.total_cost for g in items), Decimal("0")),
            total_sales=sum(g.total_sales for g in items),
            average_profit_margin=safe_ratio(
                sum((g.profit_margin_percentage for g in items), Decimal("0")), len(items)
            ),
            best_performing_group=items[0] if items else None,
            worst_performing_group=items[-1] if items else None,
        )
