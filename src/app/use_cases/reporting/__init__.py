from .platform_profitability import PlatformProfitability
from .credit_utilization import CreditUtilization
from .sales_profit_report import SalesProfitReport
from .low_credit_platforms import LowCreditPlatforms
from .financial_dashboard import FinancialDashboard
from .dtos import (
    GroupBy,
    UrgencyLevel,
    DateRangeDTO,
    SalesReportFiltersDTO,
    PlatformProfitabilityReportDTO,
    CreditUtilizationReportDTO,
    SalesProfitReportDTO,
    LowCreditPlatformsReportDTO,
    FinancialDashboardDTO,
)

__all__ = [
    "PlatformProfitability",
    "CreditUtilization",
    "SalesProfitReport",
    "LowCreditPlatforms",
    "FinancialDashboard",
    "GroupBy",
    "UrgencyLevel",
    "DateRangeDTO",
    "SalesReportFiltersDTO",
    "PlatformProfitabilityReportDTO",
    "CreditUtilizationReportDTO",
    "SalesProfitReportDTO",
    "LowCreditPlatformsReportDTO",
    "FinancialDashboardDTO",
]
