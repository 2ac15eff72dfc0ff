"""HTTP error mapping for use case errors"""

from fastapi import status
from libs.result import Error
from src.app.errors import (
    INVALID_ARGUMENT,
    PLATFORM_NOT_FOUND,
    PLATFORM_INACTIVE,
    INSUFFICIENT_CREDIT,
    TRANSIENT_STORE_FAILURE,
)

ERROR_STATUS_CODES = {
    INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    PLATFORM_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    PLATFORM_INACTIVE: status.HTTP_409_CONFLICT,
    INSUFFICIENT_CREDIT: status.HTTP_402_PAYMENT_REQUIRED,
    TRANSIENT_STORE_FAILURE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class ClientError(Exception):
    """Raised by routes to return a use case error as {"error": {...}}"""

    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code

    @classmethod
    def from_error(cls, error: Error) -> "ClientError":
        return cls(
            error,
            status_code=ERROR_STATUS_CODES.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        )
