import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.repositories.report_repository import SaleFact
from src.app.services.report_cache import ReportCache


@pytest.fixture
def mock_report_repo():
    """Mock report repository with empty results"""
    repo = MagicMock()
    repo.list_platforms = AsyncMock(return_value=[])
    repo.list_sales = AsyncMock(return_value=[])
    repo.list_movements = AsyncMock(return_value=[])
    repo.list_active_products = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def cache():
    return ReportCache(ttl_seconds=300)


@pytest.fixture
def make_sale():
    """Factory for SaleFact rows"""
    counter = {"n": 0}

    def _make_sale(
        platform_id="p1",
        platform_name="Netflix",
        product_id="prod_1",
        product_name="Netflix Premium",
        category="streaming",
        quantity=1,
        unit_price="15.00",
        buying_price="10.00",
        payment_type="one-time",
        payment_status="paid",
        sale_date=datetime(2024, 3, 15),
    ):
        counter["n"] += 1
        unit_price = Decimal(unit_price)
        buying_price = Decimal(buying_price)
        total_price = unit_price * quantity
        return SaleFact(
            id=f"sale_{counter['n']}",
            platform_id=platform_id,
            platform_name=platform_name,
            product_id=product_id,
            product_name=product_name,
            category=category,
            quantity=quantity,
            unit_price=unit_price,
            total_price=total_price,
            platform_buying_price=buying_price,
            profit=total_price - buying_price * quantity,
            payment_type=payment_type,
            payment_status=payment_status,
            sale_date=sale_date,
        )

    return _make_sale
