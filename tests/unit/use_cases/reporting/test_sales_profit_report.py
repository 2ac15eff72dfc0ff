"""Unit tests for SalesProfitReport"""

import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock

from src.app.use_cases.reporting import (
    DateRangeDTO,
    GroupBy,
    SalesProfitReport,
    SalesReportFiltersDTO,
)


@pytest.mark.asyncio
class TestSalesProfitReport:

    async def test_default_groups_by_total(self, mock_report_repo, cache, make_sale):
        mock_report_repo.list_sales = AsyncMock(
            return_value=[make_sale(platform_id="p1"), make_sale(platform_id="p2", unit_price="25.00")]
        )

        result = await SalesProfitReport(mock_report_repo, cache).execute()

        report = result.value
        assert len(report.groups) == 1
        group = report.groups[0]
        assert group.group_id == "all"
        assert group.group_type == GroupBy.TOTAL
        assert group.total_sales == 2
        assert group.total_revenue == Decimal("40.00")
        assert report.summary.total_sales == 2

    async def test_total_group_without_sales(self, mock_report_repo, cache):
        """Grouping by total always yields one group, with zero ratios when empty"""
        result = await SalesProfitReport(mock_report_repo, cache).execute(
            SalesReportFiltersDTO(group_by=GroupBy.TOTAL)
        )

        groups = result.value.groups
        assert len(groups) == 1
        assert groups[0].total_sales == 0
        assert groups[0].profit_margin_percentage == Decimal("0")
        assert groups[0].roi == Decimal("0")

    async def test_other_groupings_without_sales_are_empty(self, mock_report_repo, cache):
        result = await SalesProfitReport(mock_report_repo, cache).execute(
            SalesReportFiltersDTO(group_by=GroupBy.PRODUCT)
        )

        assert result.value.groups == []
        assert result.value.summary.best_performing_group is None

    async def test_group_by_platform_sorted_by_revenue(self, mock_report_repo, cache, make_sale):
        mock_report_repo.list_sales = AsyncMock(
            return_value=[
                make_sale(platform_id="p1", platform_name="Netflix", unit_price="10.00", buying_price="5.00"),
                make_sale(platform_id="p2", platform_name="Spotify", unit_price="30.00", buying_price="20.00"),
                make_sale(platform_id="p2", platform_name="Spotify", unit_price="30.00", buying_price="20.00",
                          payment_status="pending"),
            ]
        )

        result = await SalesProfitReport(mock_report_repo, cache).execute(
            SalesReportFiltersDTO(group_by=GroupBy.PLATFORM)
        )

        report = result.value
        assert [g.group_id for g in report.groups] == ["p2", "p1"]
        assert report.groups[0].group_name == "Spotify"
        assert report.groups[0].pending_sales == 1
        assert report.groups[0].paid_sales == 1
        assert report.summary.best_performing_group.group_id == "p2"
        assert report.summary.worst_performing_group.group_id == "p1"
        assert report.summary.total_revenue == Decimal("70.00")

    async def test_filters_forwarded(self, mock_report_repo, cache):
        filters = SalesReportFiltersDTO(
            platform_id="p1",
            product_id="prod_1",
            category="streaming",
            payment_type="recurring",
            date_range=DateRangeDTO(start_date=datetime(2024, 1, 1), end_date=datetime(2024, 1, 31)),
            group_by=GroupBy.MONTH,
        )

        result = await SalesProfitReport(mock_report_repo, cache).execute(filters)

        query = mock_report_repo.list_sales.call_args[0][0]
        assert query.platform_id == "p1"
        assert query.product_id == "prod_1"
        assert query.category == "streaming"
        assert query.payment_type == "recurring"
        assert query.start_date == datetime(2024, 1, 1)
        assert query.end_date == datetime(2024, 1, 31)
        assert result.value.filters == filters

    async def test_cache_keyed_by_filters(self, mock_report_repo, cache):
        use_case = SalesProfitReport(mock_report_repo, cache)

        await use_case.execute(SalesReportFiltersDTO(group_by=GroupBy.MONTH))
        await use_case.execute(SalesReportFiltersDTO(group_by=GroupBy.MONTH))
        await use_case.execute(SalesReportFiltersDTO(group_by=GroupBy.CATEGORY))

        assert mock_report_repo.list_sales.call_count == 2
