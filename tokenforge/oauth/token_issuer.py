"""
JWT Token Issuer for TokenForge.

Reference token generator and refresher: signs access tokens as RS256 JWTs
and keeps single-use refresh tokens in process memory.

Author: TokenForge Team
Date: 2026-10-17
"""

import logging
import secrets
import threading
from base64 import urlsafe_b64encode
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from hashlib import sha256

import jwt

from tokenforge.oauth.collaborators import TokenGenerator, TokenRefresher
from tokenforge.oauth.constants import TOKEN_TYPE_MAC
from tokenforge.oauth.exceptions import InvalidGrantError, InvalidScopeError
from tokenforge.oauth.models import IssuedToken

logger = logging.getLogger(__name__)


@dataclass
class JWK:
    """JSON Web Key."""

    kty: str  # Key type (RSA)
    use: str  # Public key use (sig)
    kid: str  # Key ID
    n: str  # Modulus
    e: str  # Exponent
    alg: str = "RS256"


@dataclass
class JWKSResponse:
    """JSON Web Key Set response."""

    keys: List[JWK]


@dataclass(frozen=True)
class RefreshGrant:
    """What a refresh token was issued for."""

    client_id: Optional[str]
    for_user: Optional[str]
    scope: Optional[str]
    issued_at: datetime


class TokenIssuer(TokenGenerator, TokenRefresher):
    """
    Issues JWT access tokens and rotates refresh tokens.

    Supports:
    - JWT token generation with RSA signature
    - Refresh tokens for resource owner grants, bound to the issuing client
    - Refresh token rotation (each refresh token is single-use)
    - Refresh token expiry, with expired tokens purged as new ones are stored
    - JWKS for public key distribution
    """

    DEFAULT_TOKEN_LIFETIME = 3600  # 1 hour
    DEFAULT_REFRESH_TOKEN_LIFETIME = 1209600  # 14 days
    DEFAULT_ISSUER = "http://localhost:8000"

    def __init__(
        self,
        token_type: str = TOKEN_TYPE_MAC,
        issuer: str = DEFAULT_ISSUER,
        token_lifetime: int = DEFAULT_TOKEN_LIFETIME,
        private_key: Optional[bytes] = None,
        public_key: Optional[bytes] = None,
        key_id: Optional[str] = None,
        issue_refresh_tokens: bool = True,
        refresh_token_lifetime: int = DEFAULT_REFRESH_TOKEN_LIFETIME,
    ):
        """
        Initialize token issuer.

        Args:
            token_type: token_type reported in token responses
            issuer: Token issuer URL
            token_lifetime: Token lifetime in seconds
            private_key: RSA private key (PEM format), generates if None
            public_key: RSA public key (PEM format), generates if None
            key_id: Key ID for JWKS, generates if None
            issue_refresh_tokens: Hand out refresh tokens for user-bound grants
            refresh_token_lifetime: Refresh token lifetime in seconds
        """
        self.token_type = token_type
        self.issuer = issuer
        self.token_lifetime = token_lifetime
        self.issue_refresh_tokens = issue_refresh_tokens
        self.refresh_token_lifetime = refresh_token_lifetime

        # Generate or load RSA keys
        if private_key is None or public_key is None:
            self._private_key, self._public_key = self._generate_rsa_keypair()
        else:
            self._private_key = serialization.load_pem_private_key(private_key, password=None)
            self._public_key = serialization.load_pem_public_key(public_key)

        self.key_id = key_id or self._generate_key_id()

        self._refresh_grants: Dict[str, RefreshGrant] = {}
        self._lock = threading.Lock()

        logger.info(f"TokenIssuer initialized with issuer: {issuer}, key_id: {self.key_id}")

    def generate_access_token(
        self,
        client_id: Optional[str],
        for_user: Optional[str] = None,
        scope: Optional[str] = None,
    ) -> IssuedToken:
        """
        Issue a signed access token.

        A refresh token is only included for tokens issued on behalf of a
        resource owner.
        """
        access_token = self._encode_access_token(client_id, for_user, scope)

        refresh_token = None
        if for_user is not None and self.issue_refresh_tokens:
            refresh_token = self._store_refresh_grant(client_id, for_user, scope)

        logger.info(f"Issued token for client_id={client_id}, sub={for_user or client_id}, scope={scope}")

        return IssuedToken(
            access_token=access_token,
            token_type=self.token_type,
            expires_in=self.token_lifetime,
            refresh_token=refresh_token,
            scope=scope,
        )

    def refresh_access_token(
        self,
        client_id: Optional[str],
        refresh_token: str,
        scope: Optional[str] = None,
    ) -> IssuedToken:
        """
        Exchange a refresh token for a new access token and refresh token.

        Raises:
            InvalidGrantError: If the refresh token is unknown, already used,
                expired or was issued to another client
            InvalidScopeError: If a scope other than the original is requested
        """
        with self._lock:
            grant = self._refresh_grants.get(refresh_token)
            if grant is None:
                raise InvalidGrantError("Unknown or already used refresh token")
            if self._is_expired(grant, datetime.now(timezone.utc)):
                del self._refresh_grants[refresh_token]
                raise InvalidGrantError("Refresh token has expired")
            if grant.client_id != client_id:
                raise InvalidGrantError("Refresh token was issued to another client")
            if scope and scope != grant.scope:
                raise InvalidScopeError(
                    f"Requested scope {scope!r} differs from the original grant"
                )
            del self._refresh_grants[refresh_token]

        logger.info(f"Refresh token redeemed by client_id={client_id}")
        return self.generate_access_token(grant.client_id, grant.for_user, grant.scope)

    def revoke_refresh_token(self, refresh_token: str) -> bool:
        """Forget a refresh token; returns whether it was known."""
        with self._lock:
            return self._refresh_grants.pop(refresh_token, None) is not None

    def decode_access_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode an access token issued by this issuer.

        Raises:
            jwt.InvalidTokenError: If the signature, issuer or expiry is invalid
        """
        return jwt.decode(
            token,
            self._get_public_key_pem(),
            algorithms=["RS256"],
            issuer=self.issuer,
        )

    def get_jwks(self) -> JWKSResponse:
        """
        Get JSON Web Key Set for token verification.

        Returns:
            JWKS response with public key
        """
        public_numbers = self._public_key.public_numbers()

        jwk = JWK(
            kty="RSA",
            use="sig",
            kid=self.key_id,
            n=self._int_to_base64url(public_numbers.n),
            e=self._int_to_base64url(public_numbers.e),
            alg="RS256",
        )

        return JWKSResponse(keys=[jwk])

    def _encode_access_token(
        self,
        client_id: Optional[str],
        for_user: Optional[str],
        scope: Optional[str],
    ) -> str:
        now = datetime.now(timezone.utc)
        exp = now + timedelta(seconds=self.token_lifetime)

        claims = {
            "iss": self.issuer,
            "sub": for_user or client_id or "anonymous",
            "client_id": client_id,
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
            "jti": secrets.token_hex(16),
        }
        if scope is not None:
            claims["scope"] = scope

        return jwt.encode(
            claims,
            self._get_private_key_pem(),
            algorithm="RS256",
            headers={"kid": self.key_id},
        )

    def _store_refresh_grant(
        self,
        client_id: Optional[str],
        for_user: Optional[str],
        scope: Optional[str],
    ) -> str:
        refresh_token = secrets.token_urlsafe(32)
        now = datetime.now(timezone.utc)
        grant = RefreshGrant(
            client_id=client_id,
            for_user=for_user,
            scope=scope,
            issued_at=now,
        )
        with self._lock:
            self._purge_expired_grants(now)
            self._refresh_grants[refresh_token] = grant
        return refresh_token

    def _purge_expired_grants(self, now: datetime) -> None:
        # Caller holds self._lock
        expired = [
            token for token, grant in self._refresh_grants.items()
            if self._is_expired(grant, now)
        ]
        for token in expired:
            del self._refresh_grants[token]
        if expired:
            logger.debug(f"Purged {len(expired)} expired refresh tokens")

    def _is_expired(self, grant: RefreshGrant, now: datetime) -> bool:
        return now >= grant.issued_at + timedelta(seconds=self.refresh_token_lifetime)

    def _generate_rsa_keypair(self) -> tuple:
        """
        Generate RSA key pair.

        Returns:
            Tuple of (private_key, public_key)
        """
        logger.info("Generating RSA key pair for JWT signing")

        private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        return private_key, private_key.public_key()

    def _generate_key_id(self) -> str:
        # Public key thumbprint
        thumbprint = sha256(self._get_public_key_pem()).hexdigest()
        return thumbprint[:16]

    def _get_private_key_pem(self) -> bytes:
        """Get private key in PEM format."""
        return self._private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption()
        )

    def _get_public_key_pem(self) -> bytes:
        """Get public key in PEM format."""
        return self._public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo
        )

    @staticmethod
    def _int_to_base64url(value: int) -> str:
        """
        Convert integer to base64url string.

        Args:
            value: Integer value

        Returns:
            Base64url encoded string
        """
        value_bytes = value.to_bytes((value.bit_length() + 7) // 8, byteorder='big')
        return urlsafe_b64encode(value_bytes).decode('utf-8').rstrip('=')
