"""
List Credit Movements Use Case

Retrieves a platform's credit movement history with filters and pagination.
"""
import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.errors import INVALID_ARGUMENT, error_from_exception
from src.app.repositories.credit_movement_repository import CreditMovementRepository
from .dtos import CreditMovementDTO, ListCreditMovementsResponseDTO, MovementFiltersDTO

logger = logging.getLogger(__name__)


class ListCreditMovements:
    """
    Use case: View platform credit movements

    Movements are ordered by created_at DESC (most recent first).
    """

    def __init__(self, movement_repo: CreditMovementRepository):
        self.movement_repo = movement_repo

    async def execute(
        self, platform_id: str, filters: Optional[MovementFiltersDTO] = None
    ) -> Result[ListCreditMovementsResponseDTO]:
        if not platform_id:
            return Return.err(Error(code=INVALID_ARGUMENT, message="Platform ID is required"))

        filters = filters or MovementFiltersDTO()

        try:
            movements, total = await self.movement_repo.list_by_platform(
                platform_id=platform_id,
                movement_type=filters.movement_type,
                reference_id=filters.reference_id,
                start_date=filters.start_date,
                end_date=filters.end_date,
                limit=filters.limit,
                offset=filters.offset,
            )
        except Exception as e:
            logger.error(f"Movement history lookup failed for platform {platform_id}: {e}")
            return Return.err(
                error_from_exception(e, "LIST_MOVEMENTS_FAILED", "Failed to list credit movements")
            )

        movement_dtos = [
            CreditMovementDTO(
                id=movement.id,
                platform_id=movement.platform_id,
                movement_type=movement.movement_type.value if hasattr(movement.movement_type, "value") else movement.movement_type,
                amount=movement.amount,
                previous_balance=movement.previous_balance,
                new_balance=movement.new_balance,
                reference_type=movement.reference_type,
                reference_id=movement.reference,
                description=movement.description,
                created_by=movement.created_by,
                created_at=movement.created_at,
            )
            for movement in movements
        ]

        return Return.ok(
            ListCreditMovementsResponseDTO(
                platform_id=platform_id,
                movements=movement_dtos,
                total=total,
                limit=filters.limit,
                offset=filters.offset,
            )
        )
