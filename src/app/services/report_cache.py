"""Report Cache

Process-local, time-boxed cache shared by every financial report use case.
Staleness up to the TTL is accepted; the credit ledger never reads it.
"""

import json
import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300


class ReportCache:
    """
    TTL cache keyed by (report name, normalized parameters)

    Usage:
        cache = ReportCache(ttl_seconds=300)
        key = cache.make_key("platformProfitability", {"platform_id": None})
        report = cache.get(key)
        if report is None:
            report = await build()
            cache.set(key, report)
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}

    @staticmethod
    def make_key(method: str, params: Optional[Dict[str, Any]] = None) -> str:
        """
        Build a cache key from the report name and its parameters

        Parameters are serialized with sorted keys so that equal parameter sets
        always produce the same key regardless of insertion order.
        """
        normalized = json.dumps(params or {}, sort_keys=True, default=str)
        return f"{method}_{normalized}"

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        stored_at, value = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            # Expired
            self._entries.pop(key, None)
            return None

        logger.debug(f"Report cache hit: {key}")
        return value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = (self._clock(), value)

    def clear(self, pattern: Optional[str] = None) -> int:
        """
        Evict cached reports

        Args:
            pattern: Remove only keys containing this substring; all keys when None

        Returns:
            Number of evicted entries
        """
        if pattern:
            keys = [key for key in self._entries if pattern in key]
        else:
            keys = list(self._entries)

        for key in keys:
            del self._entries[key]

        logger.info(f"Report cache cleared (pattern={pattern!r}, evicted={len(keys)})")
        return len(keys)

    def __len__(self) -> int:
        return len(self._entries)
