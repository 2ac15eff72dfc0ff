"""Stock Sale Domain Entity

Only the columns the credit ledger and financial reports read are mapped.
Sales are created and edited by the sales CRUD layer.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey, Numeric, String
from src.domain.base import BaseModel, generate_uuid


class PaymentType(str, Enum):
    ONE_TIME = "one-time"
    RECURRING = "recurring"


class PaymentStatus(str, Enum):
    PAID = "paid"
    PENDING = "pending"
    PARTIAL = "partial"


class StockSale(BaseModel, table=True):
    __tablename__ = "stock_sales"

    id: str = Field(default_factory=generate_uuid, primary_key=True)

    product_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), ForeignKey("digital_products.id"), nullable=True, index=True),
    )

    product_name: str = Field(sa_column=Column(String(255), nullable=False))

    quantity: int = Field(default=1)

    unit_price: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
    )

    total_price: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
    )

    profit: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
    )

    platform_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), ForeignKey("platforms.id"), nullable=True, index=True),
    )

    platform_buying_price: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=0),
    )

    payment_type: str = Field(default=PaymentType.ONE_TIME.value, max_length=50)

    payment_status: str = Field(default=PaymentStatus.PENDING.value, max_length=50)

    sale_date: datetime = Field(default_factory=datetime.utcnow, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
