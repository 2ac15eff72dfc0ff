"""SQLAlchemy implementation of ReportRepository

Each query opens its own short-lived session from the factory, so the
sub-reports of the dashboard can run concurrently.
"""

from datetime import datetime
from decimal import Decimal
from typing import Callable, List, Optional, Sequence
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.report_repository import ReportRepository, SaleFact, SaleQuery
from src.domain.credit_movement import CreditMovement
from src.domain.digital_product import DigitalProduct
from src.domain.platform import Platform
from src.domain.stock_sale import StockSale


class SqlAlchemyReportRepository(ReportRepository):

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self.session_factory = session_factory

    async def list_platforms(
        self,
        platform_id: Optional[str] = None,
        active_only: bool = False,
        max_balance: Optional[Decimal] = None,
    ) -> List[Platform]:
        stmt = select(Platform)
        if platform_id is not None:
            stmt = stmt.where(Platform.id == platform_id)
        if active_only:
            stmt = stmt.where(Platform.is_active == True)  # noqa: E712
        if max_balance is not None:
            stmt = stmt.where(Platform.credit_balance <= max_balance)
        stmt = stmt.order_by(Platform.name)

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def list_sales(self, query: SaleQuery) -> List[SaleFact]:
        stmt = (
            select(StockSale, Platform.name, DigitalProduct.category)
            .outerjoin(Platform, StockSale.platform_id == Platform.id)
            .outerjoin(DigitalProduct, StockSale.product_id == DigitalProduct.id)
        )
        if query.with_platform_only:
            stmt = stmt.where(StockSale.platform_id.is_not(None))
        if query.platform_id is not None:
            stmt = stmt.where(StockSale.platform_id == query.platform_id)
        if query.platform_ids is not None:
            stmt = stmt.where(StockSale.platform_id.in_(list(query.platform_ids)))
        if query.product_id is not None:
            stmt = stmt.where(StockSale.product_id == query.product_id)
        if query.category is not None:
            stmt = stmt.where(DigitalProduct.category == query.category)
        if query.payment_type is not None:
            stmt = stmt.where(StockSale.payment_type == query.payment_type)
        if query.start_date is not None:
            stmt = stmt.where(StockSale.sale_date >= query.start_date)
        if query.end_date is not None:
            stmt = stmt.where(StockSale.sale_date <= query.end_date)
        stmt = stmt.order_by(StockSale.sale_date)

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [
                self._to_fact(sale, platform_name, category)
                for sale, platform_name, category in result.all()
            ]

    async def list_movements(
        self,
        platform_id: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[CreditMovement]:
        stmt = select(CreditMovement)
        if platform_id is not None:
            stmt = stmt.where(CreditMovement.platform_id == platform_id)
        if start_date is not None:
            stmt = stmt.where(CreditMovement.created_at >= start_date)
        if end_date is not None:
            stmt = stmt.where(CreditMovement.created_at <= end_date)
        stmt = stmt.order_by(CreditMovement.created_at)

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def list_active_products(self, platform_ids: Sequence[str]) -> List[DigitalProduct]:
        if not platform_ids:
            return []
        stmt = select(DigitalProduct).where(
            DigitalProduct.platform_id.in_(list(platform_ids)),
            DigitalProduct.is_active == True,  # noqa: E712
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    @staticmethod
    def _to_fact(sale: StockSale, platform_name: Optional[str], category: Optional[str]) -> SaleFact:
        return SaleFact(
            id=sale.id,
            platform_id=sale.platform_id,
            platform_name=platform_name,
            product_id=sale.product_id,
            product_name=sale.product_name,
            category=category,
            quantity=sale.quantity,
            unit_price=Decimal(sale.unit_price),
            total_price=Decimal(sale.total_price),
            platform_buying_price=Decimal(sale.platform_buying_price),
            profit=Decimal(sale.profit),
            payment_type=sale.payment_type,
            payment_status=sale.payment_status,
            sale_date=sale.sale_date,
        )
