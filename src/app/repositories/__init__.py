from .platform_repository import PlatformRepository
from .credit_movement_repository import CreditMovementRepository
from .report_repository import ReportRepository, SaleFact, SaleQuery

__all__ = [
    "PlatformRepository",
    "CreditMovementRepository",
    "ReportRepository",
    "SaleFact",
    "SaleQuery",
]
