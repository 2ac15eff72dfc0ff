"""SQLAlchemy implementation of PlatformRepository

Provides persistence for Platform entities with pessimistic locking support
to serialize concurrent balance mutations on the same platform.
"""

from typing import List, Optional
from decimal import Decimal
from datetime import datetime
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.platform_repository import PlatformRepository
from src.domain.platform import Platform


class SqlAlchemyPlatformRepository(PlatformRepository):
    """
    SQLAlchemy implementation of PlatformRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE (row lock held until commit/rollback)
    - Locks are per row, so different platforms never block each other
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, platform_id: str, for_update: bool = False) -> Optional[Platform]:
        """
        Retrieve platform by ID with optional row-level locking

        Args:
            platform_id: Platform identifier
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Platform if found, None otherwise
        """
        stmt = select(Platform).where(Platform.id == platform_id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_all(self) -> List[Platform]:
        stmt = select(Platform).order_by(Platform.name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_low_balance(self) -> List[Platform]:
        stmt = (
            select(Platform)
            .where(
                Platform.is_active == True,  # noqa: E712
                Platform.credit_balance <= Platform.low_balance_threshold,
            )
            .order_by(Platform.credit_balance.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, platform: Platform) -> Platform:
        self.session.add(platform)
        await self.session.flush()
        await self.session.refresh(platform)
        return platform

    async def update_balance(self, platform_id: str, new_balance: Decimal) -> None:
        """
        Update platform balance and updated_at timestamp

        Note:
            Should be called within a transaction with the platform already locked
        """
        platform = await self.get_by_id(platform_id)
        if platform:
            platform.credit_balance = new_balance
            platform.updated_at = datetime.utcnow()
            self.session.add(platform)
            await self.session.flush()
