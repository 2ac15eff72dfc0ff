"""Platform Repository Interface

Defines the contract for platform persistence operations used by the credit ledger.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from decimal import Decimal
from src.domain.platform import Platform


class PlatformRepository(ABC):
    """
    Repository interface for Platform persistence

    Balance mutations read the platform with for_update=True (SELECT FOR UPDATE)
    so concurrent mutations against the same platform serialize on its row lock.
    """

    @abstractmethod
    async def get_by_id(self, platform_id: str, for_update: bool = False) -> Optional[Platform]:
        """
        Retrieve platform by ID

        Args:
            platform_id: Platform identifier
            for_update: If True, lock the row with SELECT FOR UPDATE (pessimistic lock)

        Returns:
            Platform if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[Platform]:
        """Retrieve every platform, active or not"""
        pass

    @abstractmethod
    async def list_low_balance(self) -> List[Platform]:
        """
        Retrieve active platforms whose balance is at or below their threshold

        Returns:
            Platforms ordered by credit_balance ascending
        """
        pass

    @abstractmethod
    async def create(self, platform: Platform) -> Platform:
        pass

    @abstractmethod
    async def update_balance(self, platform_id: str, new_balance: Decimal) -> None:
        """
        Update platform balance

        Args:
            platform_id: Platform ID
            new_balance: New balance value

        Note:
            Must be called within a transaction with the platform row already locked
        """
        pass
