"""
In-memory credential registries.

Static client and resource owner credentials, typically loaded from the
TokenForge configuration file.

Author: TokenForge Team
Date: 2026-10-17
"""

import hmac
import logging
from typing import Dict, Mapping, Optional

from tokenforge.oauth.collaborators import ClientAuthenticator, ResourceOwnerValidator
from tokenforge.oauth.exceptions import InvalidGrantError

logger = logging.getLogger(__name__)


def _secrets_match(expected: Optional[str], provided: str) -> bool:
    if expected is None:
        # Still compare so unknown ids cost the same as wrong secrets
        hmac.compare_digest(provided.encode("utf-8"), provided.encode("utf-8"))
        return False
    return hmac.compare_digest(expected.encode("utf-8"), provided.encode("utf-8"))


class ClientRegistry(ClientAuthenticator):
    """Authenticates clients against a fixed id to secret mapping."""

    def __init__(self, clients: Optional[Mapping[str, str]] = None):
        self._clients: Dict[str, str] = dict(clients or {})
        logger.info(f"ClientRegistry initialized with {len(self._clients)} clients")

    def __contains__(self, client_id: str) -> bool:
        return client_id in self._clients

    def __len__(self) -> int:
        return len(self._clients)

    def authenticate_client_credentials(
        self, client_id: str, client_secret: str, scope: Optional[str] = None
    ) -> bool:
        if _secrets_match(self._clients.get(client_id), client_secret):
            logger.debug(f"Client {client_id} authenticated")
            return True
        logger.info(f"Client authentication failed for client_id={client_id}")
        return False


class ResourceOwnerRegistry(ResourceOwnerValidator):
    """Validates resource owners against a fixed username to password mapping."""

    def __init__(self, users: Optional[Mapping[str, str]] = None):
        self._users: Dict[str, str] = dict(users or {})
        logger.info(f"ResourceOwnerRegistry initialized with {len(self._users)} users")

    def __contains__(self, username: str) -> bool:
        return username in self._users

    def __len__(self) -> int:
        return len(self._users)

    def validate_resource_owner_credentials(self, username: str, password: str) -> bool:
        """
        Validate resource owner credentials.

        Raises:
            InvalidGrantError: If the username is unknown or the password is wrong
        """
        if not _secrets_match(self._users.get(username), password):
            logger.info(f"Resource owner credentials rejected for username={username}")
            raise InvalidGrantError(f"Invalid credentials for resource owner {username}")
        return True
