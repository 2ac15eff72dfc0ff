"""Error codes returned by the credit ledger and reporting use cases.

Business-rule codes are caller-fixable and never retried. Only
TRANSIENT_STORE_FAILURE is a candidate for caller-side retry with backoff.
"""

import asyncio
from sqlalchemy.exc import DBAPIError, OperationalError, TimeoutError as PoolTimeoutError
from libs.result import Error

INVALID_ARGUMENT = "INVALID_ARGUMENT"
PLATFORM_NOT_FOUND = "PLATFORM_NOT_FOUND"
PLATFORM_INACTIVE = "PLATFORM_INACTIVE"
INSUFFICIENT_CREDIT = "INSUFFICIENT_CREDIT"
TRANSIENT_STORE_FAILURE = "TRANSIENT_STORE_FAILURE"

TRANSIENT_ERROR_CODES = frozenset({TRANSIENT_STORE_FAILURE})


def is_transient_store_error(exc: BaseException) -> bool:
    """Lock timeouts, dropped connections and pool exhaustion"""
    if isinstance(exc, (asyncio.TimeoutError, TimeoutError, ConnectionError, PoolTimeoutError)):
        return True
    if isinstance(exc, OperationalError):
        return True
    if isinstance(exc, DBAPIError):
        return bool(exc.connection_invalidated)
    return False


def error_from_exception(exc: BaseException, code: str, message: str) -> Error:
    """
    Convert an unexpected exception into an Error

    Transient store failures get TRANSIENT_STORE_FAILURE so the request layer can
    tell them apart from business-rule violations; anything else keeps `code`.
    """
    if is_transient_store_error(exc):
        return Error(
            code=TRANSIENT_STORE_FAILURE,
            message=f"{message}: store temporarily unavailable",
            reason=str(exc),
        )
    return Error(code=code, message=message, reason=str(exc))


def is_retryable(error: Error) -> bool:
    return error.code in TRANSIENT_ERROR_CODES
