"""
OAuth 2.0 token endpoint for TokenForge.

Provides the grant dispatch state machine, its collaborator interfaces and
reference in-memory collaborators.

Author: TokenForge Team
Date: 2026-10-17
"""

from tokenforge.oauth.constants import (
    GrantType,
    ClientAuthMethod,
    ErrorCode,
    ERROR_DESCRIPTIONS,
    TOKEN_TYPE_MAC,
    TOKEN_TYPE_BEARER,
)
from tokenforge.oauth.models import (
    TokenRequest,
    IssuedToken,
    ErrorResponse,
    EndpointConfig,
    EndpointResponse,
)
from tokenforge.oauth.collaborators import (
    ClientAuthenticator,
    ResourceOwnerValidator,
    TokenGenerator,
    TokenRefresher,
)
from tokenforge.oauth.endpoint import TokenEndpoint
from tokenforge.oauth.registry import ClientRegistry, ResourceOwnerRegistry
from tokenforge.oauth.token_issuer import TokenIssuer, JWKSResponse
from tokenforge.oauth.exceptions import (
    OAuthError,
    InvalidRequestError,
    InvalidClientError,
    InvalidGrantError,
    UnauthorizedClientError,
    UnsupportedGrantTypeError,
    InvalidScopeError,
    ConfigurationError,
)

__all__ = [
    # Constants
    "GrantType",
    "ClientAuthMethod",
    "ErrorCode",
    "ERROR_DESCRIPTIONS",
    "TOKEN_TYPE_MAC",
    "TOKEN_TYPE_BEARER",
    # Models
    "TokenRequest",
    "IssuedToken",
    "ErrorResponse",
    "EndpointConfig",
    "EndpointResponse",
    # Collaborators
    "ClientAuthenticator",
    "ResourceOwnerValidator",
    "TokenGenerator",
    "TokenRefresher",
    # Endpoint
    "TokenEndpoint",
    # Reference collaborators
    "ClientRegistry",
    "ResourceOwnerRegistry",
    "TokenIssuer",
    "JWKSResponse",
    # Exceptions
    "OAuthError",
    "InvalidRequestError",
    "InvalidClientError",
    "InvalidGrantError",
    "UnauthorizedClientError",
    "UnsupportedGrantTypeError",
    "InvalidScopeError",
    "ConfigurationError",
]
