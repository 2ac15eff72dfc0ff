"""Credit Movement Domain Entity

Immutable append-only audit record of a single platform balance change.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Enum as SAEnum, ForeignKey, Numeric, String, Text
from src.domain.base import BaseModel, generate_uuid


class MovementType(str, Enum):
    """Credit movement kinds"""
    CREDIT_ADDED = "credit_added"          # Top-up
    CREDIT_DEDUCTED = "credit_deducted"    # Manual deduction
    SALE_DEDUCTION = "sale_deduction"      # Consumed by a sale
    ADJUSTMENT = "adjustment"              # Correction, either direction


DEBIT_MOVEMENT_TYPES = (MovementType.CREDIT_DEDUCTED, MovementType.SALE_DEDUCTION)


class CreditMovement(BaseModel, table=True):
    """
    Credit Movement - Immutable audit trail of platform balance changes

    Domain Rules:
    - Movements are append-only (never updated or deleted)
    - amount is always stored positive; the kind implies the sign
    - previous_balance/new_balance are snapshotted under the platform row lock
    - An adjustment takes the sign of new_balance - previous_balance
    """

    __tablename__ = "platform_credit_movements"
    __table_args__ = (
        CheckConstraint('amount > 0', name='movement_amount_positive'),
        Index('ix_platform_credit_movements_created_at', 'created_at'),
        Index('ix_platform_credit_movements_type', 'type'),
        Index('ix_platform_credit_movements_reference', 'reference'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique movement identifier"
    )

    platform_id: str = Field(
        sa_column=Column(String(255), ForeignKey("platforms.id"), nullable=False, index=True),
        description="Owning platform"
    )

    movement_type: MovementType = Field(
        sa_column=Column(
            "type",
            SAEnum(
                MovementType,
                name="credit_movement_type",
                native_enum=False,
                values_callable=lambda kinds: [k.value for k in kinds],
            ),
            nullable=False,
        ),
        description="Movement kind"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(14, 2), nullable=False),
        description="Movement amount (always positive)"
    )

    previous_balance: Decimal = Field(
        sa_column=Column(Numeric(14, 2), nullable=False),
        description="Platform balance before the movement"
    )

    new_balance: Decimal = Field(
        sa_column=Column(Numeric(14, 2), nullable=False),
        description="Platform balance after the movement"
    )

    reference_type: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Type of reference (e.g., 'sale', 'manual', 'adjustment')"
    )

    reference: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="ID of referenced entity (e.g., sale id)"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    created_by: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Movement timestamp (immutable)"
    )

    @property
    def signed_amount(self) -> Decimal:
        if self.movement_type == MovementType.CREDIT_ADDED:
            return self.amount
        if self.movement_type in DEBIT_MOVEMENT_TYPES:
            return -self.amount
        if self.new_balance < self.previous_balance:
            return -self.amount
        return self.amount
