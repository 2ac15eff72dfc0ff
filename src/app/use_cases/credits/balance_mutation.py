"""Shared read-modify-write protocol for platform balance mutations.

Every mutation runs as one unit of work:
lock platform row -> validate -> compute -> write balance -> append movement -> commit.
Any failure rolls the whole unit back, which also releases the row lock.
"""

import logging
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return, Error
from src.app.errors import (
    INVALID_ARGUMENT,
    PLATFORM_NOT_FOUND,
    PLATFORM_INACTIVE,
    INSUFFICIENT_CREDIT,
    error_from_exception,
)
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.platform_repository import PlatformRepository
from src.app.repositories.credit_movement_repository import CreditMovementRepository
from src.domain.credit_movement import CreditMovement, MovementType
from src.domain.platform import Platform
from .dtos import AddCreditsCommandDTO, CreditOperationResponseDTO

logger = logging.getLogger(__name__)

ADJUSTMENT_REFERENCE = "adjustment"
SALE_REFERENCE = "sale"
CENT = Decimal("0.01")


def is_whole_cents(amount: Decimal) -> bool:
    """Money columns are Numeric(14, 2); anything finer would be rounded on write"""
    return amount.is_finite() and amount == amount.quantize(CENT)


class BalanceMutation:
    """Base class for use cases that move a platform's credit balance"""

    failure_code = "CREDIT_OPERATION_FAILED"
    failure_message = "Failed to update platform credits"

    def __init__(
        self,
        uow: UnitOfWork,
        platform_repo: PlatformRepository,
        movement_repo: CreditMovementRepository,
    ):
        self.uow = uow
        self.platform_repo = platform_repo
        self.movement_repo = movement_repo

    @staticmethod
    def _validate(command: AddCreditsCommandDTO) -> Optional[Error]:
        if not command.platform_id:
            return Error(code=INVALID_ARGUMENT, message="Platform ID is required")
        if command.amount is None or not command.amount.is_finite() or command.amount <= 0:
            return Error(
                code=INVALID_ARGUMENT,
                message="Amount must be positive",
                reason=f"amount={command.amount}",
            )
        if not is_whole_cents(command.amount):
            return Error(
                code=INVALID_ARGUMENT,
                message="Amount must not have more than two decimal places",
                reason=f"amount={command.amount}",
            )
        return None

    async def _reject(self, error: Error) -> Result:
        await self.uow.rollback()
        logger.warning(f"Credit operation rejected: {error.code} - {error.message}")
        return Return.err(error)

    async def _mutate(
        self,
        command: AddCreditsCommandDTO,
        movement_type: MovementType,
        delta: Decimal,
        allow_negative: bool = True,
    ) -> Result[CreditOperationResponseDTO]:
        """
        Apply a signed delta to the platform balance and record the movement

        Args:
            command: Add/deduct command (amount is the absolute value of delta)
            movement_type: Kind recorded on the movement
            delta: Signed balance change
            allow_negative: Reject the operation if the new balance would be < 0
        """
        invalid = self._validate(command)
        if invalid:
            return Return.err(invalid)

        try:
            # Step 1: Lock the platform row (SELECT FOR UPDATE)
            platform = await self.platform_repo.get_by_id(command.platform_id, for_update=True)

            if not platform:
                return await self._reject(
                    Error(
                        code=PLATFORM_NOT_FOUND,
                        message=f"Platform not found: {command.platform_id}",
                    )
                )

            if not platform.is_active:
                return await self._reject(
                    Error(
                        code=PLATFORM_INACTIVE,
                        message=f"Platform is not active: {platform.name}",
                    )
                )

            # Step 2: Compute new balance
            previous_balance = platform.credit_balance
            new_balance = previous_balance + delta

            if new_balance < 0 and not allow_negative:
                return await self._reject(
                    Error(
                        code=INSUFFICIENT_CREDIT,
                        message=(
                            f"Insufficient credit balance. Available: {previous_balance}, "
                            f"Required: {command.amount}"
                        ),
                        reason=f"balance={previous_balance}, required={command.amount}",
                    )
                )

            # Step 3: Write balance and append movement under the same lock
            await self.platform_repo.update_balance(platform.id, new_balance)

            movement = await self.movement_repo.create(
                CreditMovement(
                    platform_id=platform.id,
                    movement_type=movement_type,
                    amount=command.amount,
                    previous_balance=previous_balance,
                    new_balance=new_balance,
                    reference_type=command.reference_type,
                    reference=command.reference_id,
                    description=f"{command.reference_type}: {command.description}",
                    created_by=command.created_by,
                )
            )

            # Step 4: Commit (releases the row lock)
            await self.uow.commit()

            logger.info(
                f"Platform {platform.id} {movement_type.value} {command.amount}: "
                f"{previous_balance} -> {new_balance} (movement {movement.id})"
            )

            return Return.ok(self._to_response_dto(platform, movement))

        except Exception as e:
            await self.uow.rollback()
            error = error_from_exception(e, self.failure_code, self.failure_message)
            logger.error(f"{self.failure_message} for platform {command.platform_id}: {e}")
            return Return.err(error)

    @staticmethod
    def _to_response_dto(platform: Platform, movement: CreditMovement) -> CreditOperationResponseDTO:
        movement_type = movement.movement_type
        return CreditOperationResponseDTO(
            platform_id=platform.id,
            platform_name=platform.name,
            movement_id=movement.id,
            movement_type=movement_type.value if hasattr(movement_type, "value") else movement_type,
            amount=movement.amount,
            previous_balance=movement.previous_balance,
            new_balance=movement.new_balance,
            reference_type=movement.reference_type,
            reference_id=movement.reference,
            timestamp=movement.created_at,
        )
