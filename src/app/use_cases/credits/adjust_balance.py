"""AdjustBalance Use Case

Corrects a platform balance in either direction. Adjustments always succeed
against an active platform, even when they take the balance negative.
"""

from libs.result import Result, Return, Error
from src.app.errors import INVALID_ARGUMENT
from .add_credits import AddCredits
from .deduct_credits import DeductCredits
from .balance_mutation import ADJUSTMENT_REFERENCE, is_whole_cents
from .dtos import (
    AddCreditsCommandDTO,
    AdjustBalanceCommandDTO,
    CreditOperationResponseDTO,
    DeductCreditsCommandDTO,
)


class AdjustBalance:
    """
    Use Case: Adjust a platform balance

    Routes positive deltas to AddCredits and negative deltas to DeductCredits
    with allow_negative=True. Both record an 'adjustment' movement.
    """

    def __init__(self, add_credits: AddCredits, deduct_credits: DeductCredits):
        self.add_credits = add_credits
        self.deduct_credits = deduct_credits

    async def execute(self, command: AdjustBalanceCommandDTO) -> Result[CreditOperationResponseDTO]:
        if command.delta == 0:
            return Return.err(
                Error(
                    code=INVALID_ARGUMENT,
                    message="Adjustment amount cannot be zero",
                )
            )

        if not is_whole_cents(command.delta):
            return Return.err(
                Error(
                    code=INVALID_ARGUMENT,
                    message="Adjustment amount must not have more than two decimal places",
                    reason=f"delta={command.delta}",
                )
            )

        if command.delta > 0:
            return await self.add_credits.execute(
                AddCreditsCommandDTO(
                    platform_id=command.platform_id,
                    amount=command.delta,
                    description=command.reason,
                    reference_type=ADJUSTMENT_REFERENCE,
                    created_by=command.created_by,
                )
            )

        return await self.deduct_credits.execute(
            DeductCreditsCommandDTO(
                platform_id=command.platform_id,
                amount=abs(command.delta),
                description=command.reason,
                reference_type=ADJUSTMENT_REFERENCE,
                created_by=command.created_by,
                allow_negative=True,
            )
        )
