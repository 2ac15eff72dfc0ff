"""Financial Report API Routes

Read-only reports over platforms, sales and credit movements. Reports are
served from the process-wide cache for up to its TTL; pass no_cache=true to
force a fresh computation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from config import ApplicationConfig
from src.app.repositories.report_repository import ReportRepository
from src.app.services.report_cache import ReportCache
from src.app.use_cases.reporting import (
    CreditUtilization,
    FinancialDashboard,
    LowCreditPlatforms,
    PlatformProfitability,
    SalesProfitReport,
    GroupBy,
    DateRangeDTO,
    SalesReportFiltersDTO,
    CreditUtilizationReportDTO,
    FinancialDashboardDTO,
    LowCreditPlatformsReportDTO,
    PlatformProfitabilityReportDTO,
    SalesProfitReportDTO,
)
from src.depends import get_report_cache, get_report_repository
from src.api.error import ClientError

router = APIRouter(prefix="/reports", tags=["Reports"])


def _date_range(start_date: Optional[datetime], end_date: Optional[datetime]) -> Optional[DateRangeDTO]:
    if start_date is None and end_date is None:
        return None
    return DateRangeDTO(start_date=start_date, end_date=end_date)


def _low_credit_platforms(report_repo: ReportRepository, cache: ReportCache) -> LowCreditPlatforms:
    return LowCreditPlatforms(
        report_repo, cache, usage_window_days=ApplicationConfig.LOW_CREDIT_USAGE_WINDOW_DAYS
    )


@router.get(
    "/platform-profitability",
    response_model=PlatformProfitabilityReportDTO,
    status_code=status.HTTP_200_OK,
)
async def platform_profitability(
    platform_id: Optional[str] = Query(default=None),
    start_date: Optional[datetime] = Query(default=None),
    end_date: Optional[datetime] = Query(default=None),
    no_cache: bool = Query(default=False),
    report_repo: ReportRepository = Depends(get_report_repository),
    cache: ReportCache = Depends(get_report_cache),
):
    """Revenue, platform cost and profit per platform."""
    use_case = PlatformProfitability(report_repo, cache)
    if no_cache:
        cache.clear(use_case.report_name)

    result = await use_case.execute(platform_id, _date_range(start_date, end_date))

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get(
    "/credit-utilization",
    response_model=CreditUtilizationReportDTO,
    status_code=status.HTTP_200_OK,
)
async def credit_utilization(
    platform_id: Optional[str] = Query(default=None),
    start_date: Optional[datetime] = Query(default=None),
    end_date: Optional[datetime] = Query(default=None),
    no_cache: bool = Query(default=False),
    report_repo: ReportRepository = Depends(get_report_repository),
    cache: ReportCache = Depends(get_report_cache),
):
    """Credits added versus used per platform."""
    use_case = CreditUtilization(report_repo, cache)
    if no_cache:
        cache.clear(use_case.report_name)

    result = await use_case.execute(platform_id, _date_range(start_date, end_date))

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get(
    "/sales-profit",
    response_model=SalesProfitReportDTO,
    status_code=status.HTTP_200_OK,
)
async def sales_profit(
    group_by: GroupBy = Query(default=GroupBy.TOTAL),
    platform_id: Optional[str] = Query(default=None),
    product_id: Optional[str] = Query(default=None),
    category: Optional[str] = Query(default=None),
    payment_type: Optional[str] = Query(default=None),
    start_date: Optional[datetime] = Query(default=None),
    end_date: Optional[datetime] = Query(default=None),
    no_cache: bool = Query(default=False),
    report_repo: ReportRepository = Depends(get_report_repository),
    cache: ReportCache = Depends(get_report_cache),
):
    """
    Sales profit grouped by platform, product, category, month or total.
    """
    use_case = SalesProfitReport(report_repo, cache)
    if no_cache:
        cache.clear(use_case.report_name)

    filters = SalesReportFiltersDTO(
        platform_id=platform_id,
        product_id=product_id,
        category=category,
        payment_type=payment_type,
        date_range=_date_range(start_date, end_date),
        group_by=group_by,
    )
    result = await use_case.execute(filters)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get(
    "/low-credit-platforms",
    response_model=LowCreditPlatformsReportDTO,
    status_code=status.HTTP_200_OK,
)
async def low_credit_platforms(
    threshold: Decimal = Query(default=Decimal(str(ApplicationConfig.LOW_CREDIT_REPORT_THRESHOLD)), ge=0),
    no_cache: bool = Query(default=False),
    report_repo: ReportRepository = Depends(get_report_repository),
    cache: ReportCache = Depends(get_report_cache),
):
    """Active platforms at or below the threshold, with urgency and top-up advice."""
    use_case = _low_credit_platforms(report_repo, cache)
    if no_cache:
        cache.clear(use_case.report_name)

    result = await use_case.execute(threshold)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get(
    "/dashboard",
    response_model=FinancialDashboardDTO,
    status_code=status.HTTP_200_OK,
)
async def financial_dashboard(
    start_date: Optional[datetime] = Query(default=None),
    end_date: Optional[datetime] = Query(default=None),
    no_cache: bool = Query(default=False),
    report_repo: ReportRepository = Depends(get_report_repository),
    cache: ReportCache = Depends(get_report_cache),
):
    """All four reports computed concurrently; fails if any of them fails."""
    if no_cache:
        cache.clear()

    use_case = FinancialDashboard(
        PlatformProfitability(report_repo, cache),
        CreditUtilization(report_repo, cache),
        SalesProfitReport(report_repo, cache),
        _low_credit_platforms(report_repo, cache),
        cache,
        low_credit_threshold=Decimal(str(ApplicationConfig.LOW_CREDIT_REPORT_THRESHOLD)),
    )
    result = await use_case.execute(_date_range(start_date, end_date))

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.delete("/cache", status_code=status.HTTP_200_OK)
async def clear_report_cache(
    pattern: Optional[str] = Query(default=None),
    cache: ReportCache = Depends(get_report_cache),
):
    """Evict cached reports whose key contains `pattern`, or all of them."""
    evicted = cache.clear(pattern)
    return {"evicted": evicted, "pattern": pattern}
