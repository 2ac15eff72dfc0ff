"""Data Transfer Objects for Financial Reporting Use Cases

Every report is plain data: a summary block, a list of line items, the echoed
input filters and a generation timestamp. Currency values are unrounded Decimals.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class GroupBy(str, Enum):
    """Dimensions the sales profit report can aggregate along"""
    PLATFORM = "platform"
    PRODUCT = "product"
    CATEGORY = "category"
    MONTH = "month"
    TOTAL = "total"


class UrgencyLevel(str, Enum):
    CRITICAL = "critical"   # balance <= 20% of threshold
    HIGH = "high"           # balance <= 50% of threshold
    MEDIUM = "medium"


class DateRangeDTO(BaseModel):
    """Inclusive date range; either bound may be omitted"""

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


# Platform profitability

class PlatformProfitabilityDTO(BaseModel):
    platform_id: str
    platform_name: str
    current_balance: Decimal
    total_sales: int
    total_quantity_sold: int
    total_revenue: Decimal
    total_platform_cost: Decimal
    total_profit: Decimal
    average_profit_per_sale: Decimal
    average_buying_price: Decimal
    average_selling_price: Decimal
    profit_margin_percentage: Decimal
    recurring_sales: int
    one_time_sales: int
    first_sale_date: Optional[datetime] = None
    last_sale_date: Optional[datetime] = None
    roi: Decimal


class PlatformProfitabilitySummaryDTO(BaseModel):
    total_platforms: int
    total_revenue: Decimal
    total_profit: Decimal
    total_platform_cost: Decimal
    average_profit_margin: Decimal
    total_current_balance: Decimal
    most_profitable_platform: Optional[PlatformProfitabilityDTO] = None
    least_profitable_platform: Optional[PlatformProfitabilityDTO] = None


class PlatformProfitabilityReportDTO(BaseModel):
    summary: PlatformProfitabilitySummaryDTO
    platforms: List[PlatformProfitabilityDTO]
    platform_id: Optional[str] = None
    date_range: Optional[DateRangeDTO] = None
    generated_at: datetime


# Credit utilization

class CreditUtilizationDTO(BaseModel):
    platform_id: str
    platform_name: str
    current_balance: Decimal
    total_credits_added: Decimal
    total_credits_used: Decimal
    net_credit_flow: Decimal
    credit_add_transactions: int
    credit_use_transactions: int
    sales_transactions: int
    adjustment_transactions: int
    net_adjustments: Decimal
    average_credit_addition: Decimal
    average_credit_usage: Decimal
    utilization_rate: Decimal
    balance_to_usage_ratio: Decimal
    first_transaction_date: Optional[datetime] = None
    last_transaction_date: Optional[datetime] = None


class CreditUtilizationSummaryDTO(BaseModel):
    total_platforms: int
    total_credits_added: Decimal
    total_credits_used: Decimal
    total_current_balance: Decimal
    average_utilization_rate: Decimal
    total_transactions: int
    highest_utilization_platform: Optional[CreditUtilizationDTO] = None
    lowest_utilization_platform: Optional[CreditUtilizationDTO] = None


class CreditUtilizationReportDTO(BaseModel):
    summary: CreditUtilizationSummaryDTO
    platforms: List[CreditUtilizationDTO]
    platform_id: Optional[str] = None
    date_range: Optional[DateRangeDTO] = None
    generated_at: datetime


# Sales profit

class SalesReportFiltersDTO(BaseModel):
    platform_id: Optional[str] = None
    product_id: Optional[str] = None
    category: Optional[str] = None
    payment_type: Optional[str] = None
    date_range: Optional[DateRangeDTO] = None
    group_by: GroupBy = Field(default=GroupBy.TOTAL)


class SalesProfitGroupDTO(BaseModel):
    group_id: Optional[str] = None
    group_name: Optional[str] = None
    group_type: GroupBy
    total_sales: int
    total_quantity: int
    total_revenue: Decimal
    total_cost: Decimal
    total_profit: Decimal
    average_profit_per_sale: Decimal
    average_selling_price: Decimal
    average_buying_price: Decimal
    profit_margin_percentage: Decimal
    recurring_sales: int
    one_time_sales: int
    paid_sales: int
    pending_sales: int
    first_sale_date: Optional[datetime] = None
    last_sale_date: Optional[datetime] = None
    roi: Decimal


class SalesProfitSummaryDTO(BaseModel):
    total_groups: int
    total_revenue: Decimal
    total_profit: Decimal
    total_cost: Decimal
    total_sales: int
    average_profit_margin: Decimal
    best_performing_group: Optional[SalesProfitGroupDTO] = None
    worst_performing_group: Optional[SalesProfitGroupDTO] = None


class SalesProfitReportDTO(BaseModel):
    summary: SalesProfitSummaryDTO
    groups: List[SalesProfitGroupDTO]
    filters: SalesReportFiltersDTO
    generated_at: datetime


# Low credit platforms

class LowCreditPlatformDTO(BaseModel):
    platform_id: str
    platform_name: str
    credit_balance: Decimal
    low_balance_threshold: Decimal
    is_active: bool
    created_at: datetime
    updated_at: datetime
    recent_sales_count: int
    recent_credit_usage: Decimal
    average_sale_cost: Decimal
    last_sale_date: Optional[datetime] = None
    associated_products_count: int
    total_product_stock: int
    estimated_days_until_depletion: Optional[int] = Field(
        default=None,
        description="None when the platform had no usage in the trailing window"
    )
    urgency_level: UrgencyLevel
    recommended_top_up: Decimal


class LowCreditSummaryDTO(BaseModel):
    total_low_credit_platforms: int
    critical_platforms: int
    high_urgency_platforms: int
    medium_urgency_platforms: int
    total_recommended_top_up: Decimal
    average_balance: Decimal
    platforms_with_recent_activity: int
    threshold: Decimal


class LowCreditPlatformsReportDTO(BaseModel):
    summary: LowCreditSummaryDTO
    platforms: List[LowCreditPlatformDTO]
    threshold: Decimal
    generated_at: datetime


# Dashboard

class FinancialDashboardDTO(BaseModel):
    platform_profitability: PlatformProfitabilityReportDTO
    credit_utilization: CreditUtilizationReportDTO
    sales_profit_report: SalesProfitReportDTO
    low_credit_platforms: LowCreditPlatformsReportDTO
    date_range: Optional[DateRangeDTO] = None
    generated_at: datetime
