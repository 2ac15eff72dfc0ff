"""Unit tests for CreditUtilization report"""

import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock

from src.app.use_cases.reporting import CreditUtilization
from src.domain.credit_movement import CreditMovement, MovementType
from src.domain.platform import Platform


def movement(platform_id, movement_type, amount, previous, new):
    return CreditMovement(
        platform_id=platform_id,
        movement_type=movement_type,
        amount=Decimal(amount),
        previous_balance=Decimal(previous),
        new_balance=Decimal(new),
        created_at=datetime(2024, 3, 1),
    )


@pytest.mark.asyncio
class TestCreditUtilization:

    async def test_utilization_per_platform(self, mock_report_repo, cache):
        """
        Given: p1 added 500 and used 300; p2 added 100 and used 90; p3 idle
        Then: Sorted by credits used desc, idle platform has zero rates
        """
        # Arrange
        mock_report_repo.list_platforms = AsyncMock(
            return_value=[
                Platform(id="p1", name="Netflix", credit_balance=Decimal("200.00")),
                Platform(id="p2", name="Spotify", credit_balance=Decimal("10.00")),
                Platform(id="p3", name="Idle", credit_balance=Decimal("0.00")),
            ]
        )
        mock_report_repo.list_movements = AsyncMock(
            return_value=[
                movement("p2", MovementType.CREDIT_ADDED, "100", "0", "100"),
                movement("p2", MovementType.SALE_DEDUCTION, "90", "100", "10"),
                movement("p1", MovementType.CREDIT_ADDED, "500", "0", "500"),
                movement("p1", MovementType.SALE_DEDUCTION, "300", "500", "200"),
            ]
        )

        # Act
        result = await CreditUtilization(mock_report_repo, cache).execute()

        # Assert
        assert result.is_ok()
        report = result.value
        assert [p.platform_id for p in report.platforms] == ["p1", "p2", "p3"]

        netflix = report.platforms[0]
        assert netflix.total_credits_added == Decimal("500")
        assert netflix.total_credits_used == Decimal("300")
        assert netflix.net_credit_flow == Decimal("200")
        assert netflix.utilization_rate == Decimal("60")
        assert netflix.sales_transactions == 1

        idle = report.platforms[2]
        assert idle.utilization_rate == Decimal("0")
        assert idle.balance_to_usage_ratio == Decimal("0")

        summary = report.summary
        assert summary.total_credits_added == Decimal("600")
        assert summary.total_credits_used == Decimal("390")
        assert summary.total_transactions == 4
        assert summary.highest_utilization_platform.platform_id == "p2"
        assert summary.lowest_utilization_platform.platform_id == "p3"

    async def test_cached(self, mock_report_repo, cache):
        use_case = CreditUtilization(mock_report_repo, cache)

        await use_case.execute("p1")
        await use_case.execute("p1")

        assert mock_report_repo.list_movements.call_count == 1
