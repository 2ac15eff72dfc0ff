from .platform_repository import SqlAlchemyPlatformRepository
from .credit_movement_repository import SqlAlchemyCreditMovementRepository
from .report_repository import SqlAlchemyReportRepository

__all__ = [
    "SqlAlchemyPlatformRepository",
    "SqlAlchemyCreditMovementRepository",
    "SqlAlchemyReportRepository",
]
