"""Request schemas for the Credit API

Pydantic models for validating incoming HTTP requests.
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class AddCreditsRequestSchema(BaseModel):
    """
    Request schema for adding credits

    Used for POST /platforms/{platform_id}/credits/add endpoint.
    """

    amount: Decimal = Field(
        ...,
        gt=0,
        decimal_places=2,
        description="Credit amount to add (must be > 0, at most two decimal places)"
    )

    description: str = Field(
        default="",
        description="Free-text note stored on the movement"
    )

    reference_type: str = Field(
        default="manual",
        min_length=1,
        description="Type of reference (e.g., 'manual', 'purchase_order')"
    )

    reference_id: Optional[str] = Field(
        default=None,
        description="ID of referenced entity"
    )

    created_by: str = Field(
        default="system",
        min_length=1,
        description="Actor performing the operation"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "amount": "500.00",
                "description": "Monthly top-up",
                "reference_type": "manual",
                "reference_id": "po_2024_118",
                "created_by": "admin@example.com"
            }
        }


class DeductCreditsRequestSchema(AddCreditsRequestSchema):
    """
    Request schema for deducting credits

    Used for POST /platforms/{platform_id}/credits/deduct endpoint.
    reference_type 'sale' records a sale deduction.
    """

    allow_negative: bool = Field(
        default=False,
        description="Allow the balance to go below zero"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "amount": "30.50",
                "description": "Sale of Netflix Premium x1",
                "reference_type": "sale",
                "reference_id": "sale_8812",
                "created_by": "system",
                "allow_negative": False
            }
        }


class AdjustBalanceRequestSchema(BaseModel):
    """
    Request schema for balance adjustments

    Used for POST /platforms/{platform_id}/credits/adjust endpoint.
    """

    delta: Decimal = Field(
        ...,
        decimal_places=2,
        description="Signed balance change (must be non-zero, at most two decimal places)"
    )

    reason: str = Field(
        ...,
        min_length=1,
        description="Why the balance is corrected"
    )

    created_by: str = Field(
        default="system",
        min_length=1,
        description="Actor performing the adjustment"
    )

    @field_validator('delta')
    @classmethod
    def validate_delta(cls, v):
        """Reject zero adjustments"""
        if v == 0:
            raise ValueError("Adjustment amount cannot be zero")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "delta": "-25.00",
                "reason": "Supplier refund reversal",
                "created_by": "admin@example.com"
            }
        }
