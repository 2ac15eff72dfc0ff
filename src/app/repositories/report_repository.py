"""Report Repository Interface

Read-only queries backing the financial reports. Implementations must be safe
to call concurrently from sibling report computations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence
from src.domain.credit_movement import CreditMovement
from src.domain.digital_product import DigitalProduct
from src.domain.platform import Platform


@dataclass(frozen=True)
class SaleFact:
    """A sale joined with the platform name and product category"""

    id: str
    platform_id: Optional[str]
    platform_name: Optional[str]
    product_id: Optional[str]
    product_name: str
    category: Optional[str]
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    platform_buying_price: Decimal
    profit: Decimal
    payment_type: str
    payment_status: str
    sale_date: datetime

    @property
    def platform_cost(self) -> Decimal:
        return self.platform_buying_price * self.quantity


@dataclass(frozen=True)
class SaleQuery:
    platform_id: Optional[str] = None
    platform_ids: Optional[Sequence[str]] = None
    product_id: Optional[str] = None
    category: Optional[str] = None
    payment_type: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    with_platform_only: bool = False


class ReportRepository(ABC):

    @abstractmethod
    async def list_platforms(
        self,
        platform_id: Optional[str] = None,
        active_only: bool = False,
        max_balance: Optional[Decimal] = None,
    ) -> List[Platform]:
        """
        List platforms for reporting

        Args:
            platform_id: Restrict to a single platform
            active_only: Skip deactivated platforms
            max_balance: Only platforms with credit_balance <= max_balance
        """
        pass

    @abstractmethod
    async def list_sales(self, query: SaleQuery) -> List[SaleFact]:
        pass

    @abstractmethod
    async def list_movements(
        self,
        platform_id: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[CreditMovement]:
        pass

    @abstractmethod
    async def list_active_products(self, platform_ids: Sequence[str]) -> List[DigitalProduct]:
        pass
