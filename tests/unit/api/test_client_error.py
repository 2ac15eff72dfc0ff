"""Tests for mapping use case errors to HTTP status codes"""

import pytest
from libs.result import Error
from src.api.error import ClientError
from src.app.errors import (
    INSUFFICIENT_CREDIT,
    INVALID_ARGUMENT,
    PLATFORM_INACTIVE,
    PLATFORM_NOT_FOUND,
    TRANSIENT_STORE_FAILURE,
)


@pytest.mark.parametrize(
    "code, expected_status",
    [
        (INVALID_ARGUMENT, 400),
        (PLATFORM_NOT_FOUND, 404),
        (PLATFORM_INACTIVE, 409),
        (INSUFFICIENT_CREDIT, 402),
        (TRANSIENT_STORE_FAILURE, 503),
        ("REPORT_FAILED", 500),
    ],
)
def test_status_code_per_error_code(code, expected_status):
    error = Error(code=code, message="boom")

    client_error = ClientError.from_error(error)

    assert client_error.status_code == expected_status
    assert client_error.error is error
    assert str(client_error) == "boom"
