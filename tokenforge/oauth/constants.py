"""
OAuth 2.0 protocol constants for TokenForge.

Grant types, client authentication methods and the RFC 6749 section 5.2
error codes understood by the token endpoint.

Author: TokenForge Team
Date: 2026-10-17
"""

from enum import Enum
from typing import Dict


class GrantType(str, Enum):
    """Grant types accepted at the token endpoint."""
    CLIENT_CREDENTIALS = "client_credentials"
    PASSWORD = "password"
    REFRESH_TOKEN = "refresh_token"


class ClientAuthMethod(str, Enum):
    """How the token endpoint authenticates the calling client."""
    ANONYMOUS = "anonymous"
    HTTP_BASIC = "http_basic"
    SHARED_SECRET = "shared_secret"


class ErrorCode(str, Enum):
    """Token endpoint error codes (RFC 6749 section 5.2)."""
    INVALID_REQUEST = "invalid_request"
    INVALID_CLIENT = "invalid_client"
    INVALID_GRANT = "invalid_grant"
    UNAUTHORIZED_CLIENT = "unauthorized_client"
    UNSUPPORTED_GRANT_TYPE = "unsupported_grant_type"
    INVALID_SCOPE = "invalid_scope"


ERROR_DESCRIPTIONS: Dict[str, str] = {
    ErrorCode.INVALID_REQUEST.value: (
        "The request is missing a required parameter, includes an unsupported "
        "parameter value, or is otherwise malformed."
    ),
    ErrorCode.INVALID_CLIENT.value: "Client authentication failed.",
    ErrorCode.INVALID_GRANT.value: (
        "The provided authorization grant is invalid, expired, revoked, or was "
        "issued to another client."
    ),
    ErrorCode.UNAUTHORIZED_CLIENT.value: (
        "The authenticated client is not authorized to use this authorization "
        "grant type."
    ),
    ErrorCode.UNSUPPORTED_GRANT_TYPE.value: (
        "The authorization grant type is not supported by the authorization server."
    ),
    ErrorCode.INVALID_SCOPE.value: (
        "The requested scope is invalid, unknown, or malformed."
    ),
}

TOKEN_TYPE_MAC = "mac"
TOKEN_TYPE_BEARER = "bearer"

CONTENT_TYPE_JSON = "application/json"

HTTP_200 = 200
HTTP_400 = 400


def get_error_description(error: str) -> str:
    """Return the fixed human-readable description for an error code."""
    return ERROR_DESCRIPTIONS.get(str(error), "")
