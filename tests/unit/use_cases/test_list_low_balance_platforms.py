"""Unit tests for ListLowBalancePlatforms use case"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy.exc import OperationalError

from src.app.use_cases.credits import ListLowBalancePlatforms
from src.domain.platform import Platform


@pytest.mark.asyncio
async def test_lists_platforms_with_deficit():
    """
    Given: Repository returns low platforms lowest first
    Then: Order is kept and each carries deficit = threshold - balance
    """
    # Arrange
    repo = MagicMock()
    repo.list_low_balance = AsyncMock(
        return_value=[
            Platform(id="p2", name="HBO", credit_balance=Decimal("-10.00"), contact_email="ops@hbo.test"),
            Platform(id="p1", name="Hulu", credit_balance=Decimal("100.00")),
        ]
    )

    # Act
    result = await ListLowBalancePlatforms(repo).execute()

    # Assert
    assert result.is_ok()
    response = result.value
    assert response.total == 2
    assert [p.platform_id for p in response.platforms] == ["p2", "p1"]
    assert response.platforms[0].deficit == Decimal("110.00")
    assert response.platforms[0].contact_email == "ops@hbo.test"
    assert response.platforms[1].deficit == Decimal("0.00")


@pytest.mark.asyncio
async def test_transient_store_failure():
    repo = MagicMock()
    repo.list_low_balance = AsyncMock(
        side_effect=OperationalError("SELECT", {}, Exception("server closed the connection"))
    )

    result = await ListLowBalancePlatforms(repo).execute()

    assert result.is_err()
    assert result.error.code == "TRANSIENT_STORE_FAILURE"


@pytest.mark.asyncio
async def test_unexpected_store_failure():
    repo = MagicMock()
    repo.list_low_balance = AsyncMock(side_effect=RuntimeError("boom"))

    result = await ListLowBalancePlatforms(repo).execute()

    assert result.error.code == "LIST_LOW_BALANCE_FAILED"
