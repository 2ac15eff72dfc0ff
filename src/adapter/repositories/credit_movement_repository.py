"""SQLAlchemy implementation of CreditMovementRepository

Append-only persistence for CreditMovement entities.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from sqlalchemy import case, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.credit_movement_repository import CreditMovementRepository
from src.domain.credit_movement import CreditMovement, MovementType, DEBIT_MOVEMENT_TYPES

CENT = Decimal("0.01")


class SqlAlchemyCreditMovementRepository(CreditMovementRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, movement: CreditMovement) -> CreditMovement:
        self.session.add(movement)
        await self.session.flush()
        await self.session.refresh(movement)
        return movement

    async def get_by_id(self, movement_id: str) -> Optional[CreditMovement]:
        stmt = select(CreditMovement).where(CreditMovement.id == movement_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_platform(
        self,
        platform_id: str,
        movement_type: Optional[MovementType] = None,
        reference_id: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Tuple[List[CreditMovement], int]:
        conditions = [CreditMovement.platform_id == platform_id]
        if movement_type is not None:
            conditions.append(CreditMovement.movement_type == movement_type)
        if reference_id is not None:
            conditions.append(CreditMovement.reference == reference_id)
        if start_date is not None:
            conditions.append(CreditMovement.created_at >= start_date)
        if end_date is not None:
            conditions.append(CreditMovement.created_at <= end_date)

        count_stmt = select(func.count()).select_from(CreditMovement).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(CreditMovement)
            .where(*conditions)
            .order_by(CreditMovement.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_signed_sums_by_platform(self) -> Dict[str, Decimal]:
        """
        One GROUP BY over the movement log, using the same sign rule as
        CreditMovement.signed_amount
        """
        signed_amount = case(
            (CreditMovement.movement_type == MovementType.CREDIT_ADDED, CreditMovement.amount),
            (CreditMovement.movement_type.in_(DEBIT_MOVEMENT_TYPES), -CreditMovement.amount),
            (CreditMovement.new_balance < CreditMovement.previous_balance, -CreditMovement.amount),
            else_=CreditMovement.amount,
        )
        stmt = select(CreditMovement.platform_id, func.sum(signed_amount)).group_by(
            CreditMovement.platform_id
        )
        result = await self.session.execute(stmt)
        # SQLite returns SUM as float; money columns hold cents
        return {
            platform_id: Decimal(str(total)).quantize(CENT)
            for platform_id, total in result.all()
        }
