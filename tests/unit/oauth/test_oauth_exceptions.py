"""
Unit tests for OAuth exceptions.
"""

import pytest

from tokenforge.oauth.constants import ERROR_DESCRIPTIONS, ErrorCode
from tokenforge.oauth.exceptions import (
    ConfigurationError,
    InvalidClientError,
    InvalidGrantError,
    InvalidRequestError,
    InvalidScopeError,
    OAuthError,
    UnauthorizedClientError,
    UnsupportedGrantTypeError,
)


@pytest.mark.parametrize("exc_class, code", [
    (InvalidRequestError, "invalid_request"),
    (InvalidClientError, "invalid_client"),
    (InvalidGrantError, "invalid_grant"),
    (UnauthorizedClientError, "unauthorized_client"),
    (UnsupportedGrantTypeError, "unsupported_grant_type"),
    (InvalidScopeError, "invalid_scope"),
])
def test_error_codes(exc_class, code):
    error = exc_class()

    assert isinstance(error, OAuthError)
    assert error.error == code
    assert error.error_description == ERROR_DESCRIPTIONS[code]


def test_every_code_has_a_description():
    assert set(ERROR_DESCRIPTIONS) == {code.value for code in ErrorCode}
    assert all(ERROR_DESCRIPTIONS.values())


def test_custom_description():
    error = InvalidClientError("Unknown client c9")

    assert error.error_description == "Unknown client c9"
    assert str(error) == "Unknown client c9"


def test_custom_error_code():
    error = OAuthError("slow_down")

    assert error.error == "slow_down"
    assert error.error_description is None
    assert str(error) == "slow_down"


def test_enum_error_code():
    assert OAuthError(ErrorCode.INVALID_SCOPE).error == "invalid_scope"


def test_configuration_error_is_not_a_protocol_error():
    assert not issubclass(ConfigurationError, OAuthError)
