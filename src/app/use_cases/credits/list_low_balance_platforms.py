"""List Low Balance Platforms Use Case"""

import logging
from libs.result import Result, Return
from src.app.errors import error_from_exception
from src.app.repositories.platform_repository import PlatformRepository
from .dtos import LowBalancePlatformDTO, LowBalancePlatformsResponseDTO

logger = logging.getLogger(__name__)


class ListLowBalancePlatforms:
    """
    Active platforms whose balance is at or below their own threshold,
    lowest balance first, each annotated with deficit = threshold - balance.
    """

    def __init__(self, platform_repo: PlatformRepository):
        self.platform_repo = platform_repo

    async def execute(self) -> Result[LowBalancePlatformsResponseDTO]:
        try:
            platforms = await self.platform_repo.list_low_balance()
        except Exception as e:
            logger.error(f"Low-balance platform lookup failed: {e}")
            return Return.err(
                error_from_exception(e, "LIST_LOW_BALANCE_FAILED", "Failed to list low-balance platforms")
            )

        items = [
            LowBalancePlatformDTO(
                platform_id=platform.id,
                platform_name=platform.name,
                current_balance=platform.credit_balance,
                low_balance_threshold=platform.low_balance_threshold,
                contact_email=platform.contact_email,
                deficit=platform.deficit,
            )
            for platform in platforms
        ]

        return Return.ok(LowBalancePlatformsResponseDTO(platforms=items, total=len(items)))
