from .unit_of_work import UnitOfWork
from .report_cache import ReportCache

__all__ = [
    "UnitOfWork",
    "ReportCache",
]
