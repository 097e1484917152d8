"""
OAuth 2.0 exceptions for TokenForge.

Author: TokenForge Team
Date: 2026-10-17
"""

from typing import Optional

from tokenforge.oauth.constants import ErrorCode, get_error_description


class OAuthError(Exception):
    """Base exception for errors rendered to the client as a 400 response."""

    def __init__(self, error: str, error_description: Optional[str] = None):
        self.error = error.value if isinstance(error, ErrorCode) else error
        self.error_description = error_description or get_error_description(self.error) or None
        super().__init__(self.error_description or self.error)


class InvalidRequestError(OAuthError):
    """Raised when a required parameter is missing or malformed."""

    def __init__(self, description: Optional[str] = None):
        super().__init__(ErrorCode.INVALID_REQUEST, description)


class InvalidClientError(OAuthError):
    """Raised when client authentication fails."""

    def __init__(self, description: Optional[str] = None):
        super().__init__(ErrorCode.INVALID_CLIENT, description)


class InvalidGrantError(OAuthError):
    """Raised when resource owner credentials or a refresh token are rejected."""

    def __init__(self, description: Optional[str] = None):
        super().__init__(ErrorCode.INVALID_GRANT, description)


class UnauthorizedClientError(OAuthError):
    """Raised when the client may not use the requested grant."""

    def __init__(self, description: Optional[str] = None):
        super().__init__(ErrorCode.UNAUTHORIZED_CLIENT, description)


class UnsupportedGrantTypeError(OAuthError):
    """Raised when the grant type is not supported."""

    def __init__(self, description: Optional[str] = None):
        super().__init__(ErrorCode.UNSUPPORTED_GRANT_TYPE, description)


class InvalidScopeError(OAuthError):
    """Raised when requested scope is invalid."""

    def __init__(self, description: Optional[str] = None):
        super().__init__(ErrorCode.INVALID_SCOPE, description)


class ConfigurationError(Exception):
    """Raised when the token endpoint is misconfigured.

    Never rendered to clients: it signals a server-side programming error and
    is raised while the endpoint is being built.
    """
