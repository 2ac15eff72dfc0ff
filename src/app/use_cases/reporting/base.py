"""Cache protocol shared by every financial report use case."""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar
from libs.result import Result, Return
from src.app.errors import error_from_exception
from src.app.services.report_cache import ReportCache
from .dtos import DateRangeDTO

logger = logging.getLogger(__name__)

T = TypeVar("T")

REPORT_GENERATION_FAILED = "REPORT_GENERATION_FAILED"


def date_range_params(date_range: Optional[DateRangeDTO]) -> Optional[Dict[str, Any]]:
    return date_range.model_dump(mode="json") if date_range else None


class CachedReport:
    """
    Base class for report use cases

    A live cache entry (younger than the TTL) is returned verbatim; otherwise
    the report is computed, stored and returned. Failed computations are
    never cached.
    """

    report_name = "report"

    def __init__(self, cache: ReportCache):
        self.cache = cache

    async def _cached(
        self,
        params: Dict[str, Any],
        build: Callable[[], Awaitable[T]],
    ) -> Result[T]:
        key = self.cache.make_key(self.report_name, params)

        cached = self.cache.get(key)
        if cached is not None:
            return Return.ok(cached)

        try:
            report = await build()
        except Exception as e:
            logger.error(f"Failed to generate {self.report_name} report: {e}")
            return Return.err(
                error_from_exception(
                    e, REPORT_GENERATION_FAILED, f"Failed to generate {self.report_name} report"
                )
            )

        self.cache.set(key, report)
        logger.info(f"Generated {self.report_name} report")
        return Return.ok(report)
