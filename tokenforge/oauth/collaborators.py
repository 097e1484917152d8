"""
Collaborator interfaces required by the token endpoint.

The endpoint owns request validation and response rendering; credential
checks and token production are supplied by the embedding application
through these four capability objects.

Author: TokenForge Team
Date: 2026-10-17
"""

from abc import ABC, abstractmethod
from typing import Optional

from tokenforge.oauth.models import IssuedToken


class ClientAuthenticator(ABC):
    """Verifies the identity of the client calling the token endpoint."""

    @abstractmethod
    def authenticate_client_credentials(
        self, client_id: str, client_secret: str, scope: Optional[str] = None
    ) -> bool:
        """
        Authenticate a client by id and shared secret.

        Args:
            client_id: Client identifier
            client_secret: Client secret
            scope: Requested scope (opaque)

        Returns:
            True if the client is authenticated. A falsy result is rendered
            as invalid_client.

        Raises:
            OAuthError: To reject the request with a specific error code
        """
        pass


class ResourceOwnerValidator(ABC):
    """Checks resource owner credentials for the password grant."""

    @abstractmethod
    def validate_resource_owner_credentials(self, username: str, password: str) -> bool:
        """
        Validate a username and password.

        Returns:
            True if the credentials are valid. A falsy result is rendered as
            invalid_grant.

        Raises:
            OAuthError: To reject the request with a specific (or custom) code
        """
        pass


class TokenGenerator(ABC):
    """Generates and stores access tokens."""

    @abstractmethod
    def generate_access_token(
        self,
        client_id: Optional[str],
        for_user: Optional[str] = None,
        scope: Optional[str] = None,
    ) -> IssuedToken:
        """
        Generate an access token.

        Args:
            client_id: Client the token is issued to (None for anonymous clients)
            for_user: Resource owner the token acts for, if any
            scope: Requested scope (opaque)

        Returns:
            The issued token. None is rendered as unauthorized_client.
        """
        pass


class TokenRefresher(ABC):
    """Exchanges refresh tokens for new access tokens."""

    @abstractmethod
    def refresh_access_token(
        self,
        client_id: Optional[str],
        refresh_token: str,
        scope: Optional[str] = None,
    ) -> IssuedToken:
        """
        Refresh an access token.

        Returns:
            The new token. None is rendered as invalid_grant.
        """
        pass
