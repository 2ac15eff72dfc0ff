"""FinancialDashboard Use Case

Runs the four financial reports concurrently and returns them combined.
"""

import asyncio
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return
from src.app.services.report_cache import ReportCache
from .base import date_range_params
from .credit_utilization import CreditUtilization
from .dtos import DateRangeDTO, FinancialDashboardDTO, GroupBy, SalesReportFiltersDTO
from .low_credit_platforms import DEFAULT_THRESHOLD, LowCreditPlatforms
from .platform_profitability import PlatformProfitability
from .sales_profit_report import SalesProfitReport

logger = logging.getLogger(__name__)


class FinancialDashboard:
    """
    Use Case: Financial dashboard

    All-or-nothing: if any sub-report fails, the dashboard fails with that
    sub-report's error rather than returning partial data.
    """

    report_name = "financialDashboard"

    def __init__(
        self,
        platform_profitability: PlatformProfitability,
        credit_utilization: CreditUtilization,
        sales_profit_report: SalesProfitReport,
        low_credit_platforms: LowCreditPlatforms,
        cache: ReportCache,
        low_credit_threshold: Decimal = DEFAULT_THRESHOLD,
    ):
        self.platform_profitability = platform_profitability
        self.credit_utilization = credit_utilization
        self.sales_profit_report = sales_profit_report
        self.low_credit_platforms = low_credit_platforms
        self.cache = cache
        self.low_credit_threshold = Decimal(low_credit_threshold)

    async def execute(self, date_range: Optional[DateRangeDTO] = None) -> Result[FinancialDashboardDTO]:
        key = self.cache.make_key(self.report_name, {"date_range": date_range_params(date_range)})
        cached = self.cache.get(key)
        if cached is not None:
            return Return.ok(cached)

        results = await asyncio.gather(
            self.platform_profitability.execute(None, date_range),
            self.credit_utilization.execute(None, date_range),
            self.sales_profit_report.execute(
                SalesReportFiltersDTO(date_range=date_range, group_by=GroupBy.MONTH)
            ),
            self.low_credit_platforms.execute(self.low_credit_threshold),
        )

        for result in results:
            if result.is_err():
                logger.error(f"Financial dashboard failed: {result.error.code} - {result.error.message}")
                return result

        profitability, utilization, sales_report, low_credit = (result.value for result in results)
        dashboard = FinancialDashboardDTO(
            platform_profitability=profitability,
            credit_utilization=utilization,
            sales_profit_report=sales_report,
            low_credit_platforms=low_credit,
            date_range=date_range,
            generated_at=datetime.utcnow(),
        )

        self.cache.set(key, dashboard)
        return Return.ok(dashboard)
