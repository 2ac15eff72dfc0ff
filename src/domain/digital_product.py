"""Digital Product Domain Entity (read-only for reporting)"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey, String
from src.domain.base import BaseModel, generate_uuid


class DigitalProduct(BaseModel, table=True):
    __tablename__ = "digital_products"

    id: str = Field(default_factory=generate_uuid, primary_key=True)

    name: str = Field(max_length=255)

    category: str = Field(max_length=100, index=True)

    current_stock: int = Field(default=0)

    platform_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), ForeignKey("platforms.id"), nullable=True, index=True),
    )

    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
