"""Platform Domain Entity

An upstream supplier account funded with pre-paid credits. Every sale made
against a platform consumes part of its credit balance.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, JSON, Numeric, String
from src.domain.base import BaseModel, generate_uuid


class BalanceStatus(str, Enum):
    """Balance classification against the low-balance threshold"""
    EMPTY = "empty"      # balance <= 0
    LOW = "low"          # 0 < balance <= threshold
    NORMAL = "normal"    # balance > threshold


class Platform(BaseModel, table=True):
    """
    Platform - Credit-funded supplier account

    Domain Rules:
    - Name is unique
    - credit_balance is only written by the credit ledger use cases
    - credit_balance equals the replayed sum of the platform's movements
    - Platforms are deactivated (is_active=False), never hard-deleted while
      movements reference them
    """

    __tablename__ = "platforms"
    __table_args__ = (
        CheckConstraint('low_balance_threshold >= 0', name='low_balance_threshold_non_negative'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique platform identifier"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False, unique=True),
        description="Platform display name (unique)"
    )

    description: Optional[str] = Field(default=None)

    contact_name: Optional[str] = Field(default=None, max_length=255)

    contact_email: Optional[str] = Field(default=None, max_length=255)

    contact_phone: Optional[str] = Field(default=None, max_length=255)

    credit_balance: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
        description="Current credit balance"
    )

    low_balance_threshold: Decimal = Field(
        default=Decimal("100"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=100),
        description="Balance at or below which the platform needs a top-up"
    )

    is_active: bool = Field(default=True, index=True)

    extra_metadata: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column("metadata", JSON, nullable=False, default=dict),
        description="Free-form platform metadata"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_low_balance(self) -> bool:
        return self.credit_balance <= self.low_balance_threshold

    @property
    def balance_status(self) -> BalanceStatus:
        if self.credit_balance <= 0:
            return BalanceStatus.EMPTY
        if self.credit_balance <= self.low_balance_threshold:
            return BalanceStatus.LOW
        return BalanceStatus.NORMAL

    @property
    def deficit(self) -> Decimal:
        return self.low_balance_threshold - self.credit_balance
