"""CreditUtilization Use Case

How much of the credit added to each platform has been consumed.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from libs.result import Result
from src.app.repositories.report_repository import ReportRepository
from src.app.services.report_cache import ReportCache
from .aggregation import MovementAggregate, aggregate_movements, safe_ratio
from .base import CachedReport, date_range_params
from .dtos import (
    CreditUtilizationDTO,
    CreditUtilizationReportDTO,
    CreditUtilizationSummaryDTO,
    DateRangeDTO,
)


class CreditUtilization(CachedReport):
    """
    Use Case: Credit utilization report

    credits used = credit_deducted + sale_deduction amounts.
    Adjustments are counted separately and excluded from added/used.
    Line items are ordered by credits used descending.
    """

    report_name = "creditUtilization"

    def __init__(self, report_repo: ReportRepository, cache: ReportCache):
        super().__init__(cache)
        self.report_repo = report_repo

    async def execute(
        self,
        platform_id: Optional[str] = None,
        date_range: Optional[DateRangeDTO] = None,
    ) -> Result[CreditUtilizationReportDTO]:
        params = {"platform_id": platform_id, "date_range": date_range_params(date_range)}
        return await self._cached(params, lambda: self._build(platform_id, date_range))

    async def _build(
        self, platform_id: Optional[str], date_range: Optional[DateRangeDTO]
    ) -> CreditUtilizationReportDTO:
        platforms = await self.report_repo.list_platforms(platform_id=platform_id)
        movements = await self.report_repo.list_movements(
            platform_id=platform_id,
            start_date=date_range.start_date if date_range else None,
            end_date=date_range.end_date if date_range else None,
        )
        by_platform = aggregate_movements(movements)

        items = []
        for platform in platforms:
            aggregate = by_platform.get(platform.id, MovementAggregate())
            items.append(
                CreditUtilizationDTO(
                    platform_id=platform.id,
                    platform_name=platform.name,
                    current_balance=platform.credit_balance,
                    total_credits_added=aggregate.total_credits_added,
                    total_credits_used=aggregate.total_credits_used,
                    net_credit_flow=aggregate.net_credit_flow,
                    credit_add_transactions=aggregate.credit_add_transactions,
                    credit_use_transactions=aggregate.credit_use_transactions,
                    sales_transactions=aggregate.sales_transactions,
                    adjustment_transactions=aggregate.adjustment_transactions,
                    net_adjustments=aggregate.net_adjustments,
                    average_credit_addition=aggregate.average_credit_addition,
                    average_credit_usage=aggregate.average_credit_usage,
                    utilization_rate=aggregate.utilization_rate,
                    balance_to_usage_ratio=aggregate.balance_to_usage_ratio(platform.credit_balance),
                    first_transaction_date=aggregate.first_transaction_date,
                    last_transaction_date=aggregate.last_transaction_date,
                )
            )
        items.sort(key=lambda item: item.total_credits_used, reverse=True)

        return CreditUtilizationReportDTO(
            summary=self._summarize(items),
            platforms=items,
            platform_id=platform_id,
            date_range=date_range,
            generated_at=datetime.utcnow(),
        )

    @staticmethod
    def _summarize(items: List[CreditUtilizationDTO]) -> CreditUtilizationSummaryDTO:
        return CreditUtilizationSummaryDTO(
            total_platforms=len(items),
            total_credits_added=sum((i.total_credits_added for i in items), Decimal("0")),
            total_credits_used=sum((i.total_credits_used for i in items), Decimal("0")),
            total_current_balance=sum((i.current_balance for i in items), Decimal("0")),
            average_utilization_rate=safe_ratio(
                sum((i.utilization_rate for i in items), Decimal("0")), len(items)
            ),
            total_transactions=sum(
                i.credit_add_transactions + i.credit_use_transactions for i in items
            ),
            highest_utilization_platform=max(items, key=lambda i: i.utilization_rate, default=None),
            lowest_utilization_platform=min(items, key=lambda i: i.utilization_rate, default=None),
        )
