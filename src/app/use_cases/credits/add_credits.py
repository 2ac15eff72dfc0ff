"""AddCredits Use Case

Tops up a platform's credit balance and records a credit_added movement.
"""

from libs.result import Result
from .balance_mutation import BalanceMutation, ADJUSTMENT_REFERENCE
from .dtos import AddCreditsCommandDTO, CreditOperationResponseDTO
from src.domain.credit_movement import MovementType


class AddCredits(BalanceMutation):
    """
    Use Case: Add credits to a platform

    Business Rules:
    1. amount > 0, platform_id non-empty (INVALID_ARGUMENT)
    2. Platform must exist (PLATFORM_NOT_FOUND) and be active (PLATFORM_INACTIVE)
    3. Pessimistic locking: SELECT FOR UPDATE serializes same-platform mutations
    4. Atomic: balance write and movement insert commit together or not at all
    """

    failure_code = "ADD_CREDITS_FAILED"
    failure_message = "Failed to add credits"

    async def execute(self, command: AddCreditsCommandDTO) -> Result[CreditOperationResponseDTO]:
        movement_type = (
            MovementType.ADJUSTMENT
            if command.reference_type == ADJUSTMENT_REFERENCE
            else MovementType.CREDIT_ADDED
        )
        return await self._mutate(command, movement_type, command.amount)
