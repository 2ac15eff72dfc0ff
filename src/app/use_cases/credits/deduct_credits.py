"""DeductCredits Use Case

Consumes platform credits, either for a sale or a manual deduction.
"""

import logging
from libs.result import Result, Return
from .balance_mutation import BalanceMutation, ADJUSTMENT_REFERENCE, SALE_REFERENCE
from .dtos import DeductCreditsCommandDTO, CreditOperationResponseDTO
from src.domain.credit_movement import MovementType

logger = logging.getLogger(__name__)


class DeductCredits(BalanceMutation):
    """
    Use Case: Deduct credits from a platform

    Business Rules:
    1. Same preconditions and locking as AddCredits
    2. new balance < 0 fails with INSUFFICIENT_CREDIT unless allow_negative
       (nothing is written, the transaction is rolled back)
    3. reference_type 'sale' records a sale_deduction movement
    4. The response carries is_low_balance, re-read after commit
    """

    failure_code = "DEDUCT_CREDITS_FAILED"
    failure_message = "Failed to deduct credits"

    async def execute(self, command: DeductCreditsCommandDTO) -> Result[CreditOperationResponseDTO]:
        result = await self._mutate(
            command,
            self._movement_type(command.reference_type),
            -command.amount,
            allow_negative=command.allow_negative,
        )
        if result.is_err():
            return result

        response = result.value
        try:
            platform = await self.platform_repo.get_by_id(response.platform_id)
        except Exception as e:
            # The deduction is already committed; only the flag is unavailable
            logger.error(f"Low-balance re-read failed for platform {response.platform_id}: {e}")
            return result

        if platform is not None:
            response = response.model_copy(update={"is_low_balance": platform.is_low_balance})
        return Return.ok(response)

    @staticmethod
    def _movement_type(reference_type: str) -> MovementType:
        if reference_type == SALE_REFERENCE:
            return MovementType.SALE_DEDUCTION
        if reference_type == ADJUSTMENT_REFERENCE:
            return MovementType.ADJUSTMENT
        return MovementType.CREDIT_DEDUCTED
