"""Data Transfer Objects for Credit Ledger Use Cases

Pydantic models for command inputs and response outputs.
Command amounts are validated by the use cases themselves so that a
non-positive amount is reported as INVALID_ARGUMENT rather than raised.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from src.domain.credit_movement import MovementType
from src.domain.platform import BalanceStatus


class AddCreditsCommandDTO(BaseModel):
    """
    Command DTO for adding credits to a platform

    Used as input to AddCredits use case.
    """

    platform_id: str = Field(
        ...,
        description="Platform identifier"
    )

    amount: Decimal = Field(
        ...,
        description="Credit amount to add (must be > 0)"
    )

    description: str = Field(
        default="",
        description="Free-text description stored on the movement"
    )

    reference_type: str = Field(
        default="manual",
        description="Type of reference (e.g., 'manual', 'deposit', 'refund', 'adjustment')"
    )

    reference_id: Optional[str] = Field(
        default=None,
        description="ID of referenced entity"
    )

    created_by: str = Field(
        default="system",
        description="Identity of the caller performing the operation"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "platform_id": "plt_netflix",
                "amount": "500.00",
                "description": "Monthly top-up",
                "reference_type": "deposit",
                "reference_id": "wire_2024_01",
                "created_by": "admin",
            }
        }


class DeductCreditsCommandDTO(AddCreditsCommandDTO):
    """
    Command DTO for deducting credits from a platform

    Used as input to DeductCredits use case. A reference_type of 'sale'
    records the movement as a sale deduction.
    """

    allow_negative: bool = Field(
        default=False,
        description="Allow the balance to drop below zero"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "platform_id": "plt_netflix",
                "amount": "12.50",
                "description": "Premium 1 month",
                "reference_type": "sale",
                "reference_id": "sale_789",
                "created_by": "cashier_1",
                "allow_negative": False,
            }
        }


class AdjustBalanceCommandDTO(BaseModel):
    """
    Command DTO for a balance correction

    A positive delta adds credits, a negative delta deducts them and is always
    allowed to take the balance negative.
    """

    platform_id: str = Field(..., description="Platform identifier")

    delta: Decimal = Field(..., description="Signed adjustment amount (non-zero)")

    reason: str = Field(default="", description="Why the balance is being corrected")

    created_by: str = Field(default="system", description="Identity of the caller")


class CreditOperationResponseDTO(BaseModel):
    """
    Response DTO for balance mutations

    Returned by AddCredits, DeductCredits and AdjustBalance.
    """

    platform_id: str = Field(..., description="Platform identifier")

    platform_name: str = Field(..., description="Platform name")

    movement_id: str = Field(..., description="ID of the recorded credit movement")

    movement_type: str = Field(..., description="Movement kind")

    amount: Decimal = Field(..., description="Amount moved (positive)")

    previous_balance: Decimal = Field(..., description="Balance before the operation")

    new_balance: Decimal = Field(..., description="Balance after the operation")

    reference_type: Optional[str] = Field(default=None)

    reference_id: Optional[str] = Field(default=None)

    is_low_balance: Optional[bool] = Field(
        default=None,
        description="Post-operation low-balance flag (set by deductions)"
    )

    timestamp: datetime = Field(..., description="Movement timestamp")

    class Config:
        json_schema_extra = {
            "example": {
                "platform_id": "plt_netflix",
                "platform_name": "Netflix",
                "movement_id": "5f0c6b0e-7d0e-4f38-9a83-1f9a0f3c2d11",
                "movement_type": "sale_deduction",
                "amount": "300.00",
                "previous_balance": "500.00",
                "new_balance": "200.00",
                "reference_type": "sale",
                "reference_id": "sale_789",
                "is_low_balance": True,
                "timestamp": "2024-01-01T00:00:00Z",
            }
        }


class BalanceResponseDTO(BaseModel):
    """
    Response DTO for get balance operation

    Returned by GetBalance use case.
    """

    platform_id: str
    platform_name: str
    current_balance: Decimal
    low_balance_threshold: Decimal
    is_low_balance: bool
    is_active: bool
    balance_status: BalanceStatus
    last_updated: datetime


class MovementFiltersDTO(BaseModel):
    """Filters for the credit movement history"""

    movement_type: Optional[MovementType] = None
    reference_id: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    limit: int = Field(default=100, ge=1, le=1000)
    offset: int = Field(default=0, ge=0)


class CreditMovementDTO(BaseModel):
    id: str
    platform_id: str
    movement_type: str
    amount: Decimal
    previous_balance: Decimal
    new_balance: Decimal
    reference_type: Optional[str] = None
    reference_id: Optional[str] = None
    description: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime


class ListCreditMovementsResponseDTO(BaseModel):
    """Paginated credit movement history, newest first"""

    platform_id: str
    movements: List[CreditMovementDTO]
    total: int
    limit: int
    offset: int


class LowBalancePlatformDTO(BaseModel):
    platform_id: str
    platform_name: str
    current_balance: Decimal
    low_balance_threshold: Decimal
    contact_email: Optional[str] = None
    deficit: Decimal


class LowBalancePlatformsResponseDTO(BaseModel):
    platforms: List[LowBalancePlatformDTO]
    total: int


class LedgerDiscrepancyDTO(BaseModel):
    """A platform whose balance does not match its replayed movement log"""

    platform_id: str
    platform_name: str
    recorded_balance: Decimal
    replayed_balance: Decimal
    discrepancy: Decimal


class ReconciliationResultDTO(BaseModel):
    total_platforms_checked: int
    discrepancies_found: int
    discrepancies: List[LedgerDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int
