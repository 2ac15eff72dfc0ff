"""Get Balance Use Case

Retrieves a platform's current credit balance and low-balance classification.
"""

import logging
from libs.result import Result, Return, Error
from src.app.errors import INVALID_ARGUMENT, PLATFORM_NOT_FOUND, error_from_exception
from src.app.repositories.platform_repository import PlatformRepository
from .dtos import BalanceResponseDTO

logger = logging.getLogger(__name__)


class GetBalance:
    """
    Get Balance Use Case

    Read-only; never takes the row lock.
    balance <= 0 is 'empty', balance <= threshold is 'low', otherwise 'normal'.
    """

    def __init__(self, platform_repo: PlatformRepository):
        self.platform_repo = platform_repo

    async def execute(self, platform_id: str) -> Result[BalanceResponseDTO]:
        """
        Execute get balance operation

        Errors:
            INVALID_ARGUMENT: Empty platform id
            PLATFORM_NOT_FOUND: No such platform
            TRANSIENT_STORE_FAILURE: Store unavailable, retry with backoff
        """
        if not platform_id:
            return Return.err(Error(code=INVALID_ARGUMENT, message="Platform ID is required"))

        try:
            platform = await self.platform_repo.get_by_id(platform_id)
        except Exception as e:
            logger.error(f"Balance lookup failed for platform {platform_id}: {e}")
            return Return.err(error_from_exception(e, "GET_BALANCE_FAILED", "Failed to retrieve balance"))

        if not platform:
            return Return.err(
                Error(
                    code=PLATFORM_NOT_FOUND,
                    message=f"Platform not found: {platform_id}",
                )
            )

        return Return.ok(
            BalanceResponseDTO(
                platform_id=platform.id,
                platform_name=platform.name,
                current_balance=platform.credit_balance,
                low_balance_threshold=platform.low_balance_threshold,
                is_low_balance=platform.is_low_balance,
                is_active=platform.is_active,
                balance_status=platform.balance_status,
                last_updated=platform.updated_at,
            )
        )
