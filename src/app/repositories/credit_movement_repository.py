"""Credit Movement Repository Interface

Movements are immutable and append-only, so the contract has no update or delete.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from src.domain.credit_movement import CreditMovement, MovementType


class CreditMovementRepository(ABC):

    @abstractmethod
    async def create(self, movement: CreditMovement) -> CreditMovement:
        """
        Append a new credit movement

        Args:
            movement: CreditMovement entity to persist

        Returns:
            Created CreditMovement
        """
        pass

    @abstractmethod
    async def get_by_id(self, movement_id: str) -> Optional[CreditMovement]:
        pass

    @abstractmethod
    async def list_by_platform(
        self,
        platform_id: str,
        movement_type: Optional[MovementType] = None,
        reference_id: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Tuple[List[CreditMovement], int]:
        """
        List movements of a platform, newest first

        Returns:
            Tuple of (movements page, total matching count)
        """
        pass

    @abstractmethod
    async def get_signed_sums_by_platform(self) -> Dict[str, Decimal]:
        """
        Replay every platform's movement log in one pass

        Returns:
            platform_id -> sum of signed movement amounts; platforms without
            movements are absent
        """
        pass
