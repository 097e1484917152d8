"""
Value objects exchanged by the token endpoint.

Author: TokenForge Team
Date: 2026-10-17
"""

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tokenforge.oauth.constants import (
    CONTENT_TYPE_JSON,
    TOKEN_TYPE_MAC,
    ClientAuthMethod,
)


@dataclass(frozen=True)
class TokenRequest:
    """OAuth 2.0 token request, parsed from the form body."""

    grant_type: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = field(default=None, repr=False)
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    refresh_token: Optional[str] = field(default=None, repr=False)
    scope: Optional[str] = None
    authorization: Optional[str] = field(default=None, repr=False)

    FORM_FIELDS = (
        "grant_type",
        "client_id",
        "client_secret",
        "username",
        "password",
        "refresh_token",
        "scope",
    )

    @classmethod
    def from_form(
        cls,
        form: Mapping[str, Any],
        authorization: Optional[str] = None,
    ) -> "TokenRequest":
        """
        Build a request from form fields.

        Unknown fields are ignored. Values are kept as given, so an empty
        string stays distinguishable from an absent field.

        Args:
            form: Parsed form fields
            authorization: Raw Authorization header value, if any

        Returns:
            TokenRequest instance
        """
        values = {}
        for name in cls.FORM_FIELDS:
            value = form.get(name)
            values[name] = None if value is None else str(value)
        return cls(authorization=authorization, **values)


@dataclass(frozen=True)
class IssuedToken:
    """Access token produced by a token generator or refresher."""

    access_token: str
    token_type: str
    expires_in: int
    refresh_token: Optional[str] = None
    scope: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Token response members, omitting absent optional ones."""
        data: Dict[str, Any] = {
            "access_token": self.access_token,
            "token_type": self.token_type,
            "expires_in": self.expires_in,
        }
        if self.refresh_token is not None:
            data["refresh_token"] = self.refresh_token
        if self.scope is not None:
            data["scope"] = self.scope
        return data

    def to_json(self) -> str:
        """Serialize to the canonical JSON token response body."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IssuedToken":
        """Create IssuedToken from a token response dictionary."""
        return cls(
            access_token=data["access_token"],
            token_type=data["token_type"],
            expires_in=int(data["expires_in"]),
            refresh_token=data.get("refresh_token"),
            scope=data.get("scope"),
        )

    @classmethod
    def from_json(cls, body: str) -> "IssuedToken":
        return cls.from_dict(json.loads(body))


@dataclass(frozen=True)
class ErrorResponse:
    """OAuth 2.0 error response body."""

    error: str
    error_description: Optional[str] = None
    error_uri: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "error": self.error,
            "error_description": self.error_description,
        }
        if self.error_uri:
            data["error_uri"] = self.error_uri
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass(frozen=True)
class EndpointResponse:
    """Transport-neutral HTTP response produced by the token endpoint."""

    status_code: int
    body: str
    headers: Mapping[str, str] = field(
        default_factory=lambda: {"Content-Type": CONTENT_TYPE_JSON}
    )

    @property
    def is_error(self) -> bool:
        return self.status_code >= 400

    @property
    def media_type(self) -> str:
        return self.headers.get("Content-Type", CONTENT_TYPE_JSON)

    def json(self) -> Dict[str, Any]:
        """Decode the JSON body."""
        return json.loads(self.body)


class EndpointConfig(BaseModel):
    """
    Token endpoint configuration.

    Frozen once built, error_uris included; shared read-only across
    concurrent requests.
    """

    token_type: str = Field(default=TOKEN_TYPE_MAC, min_length=1)
    client_auth_method: ClientAuthMethod = ClientAuthMethod.SHARED_SECRET
    error_uris: Mapping[str, str] = Field(
        default_factory=dict,
        validate_default=True,
        description="Documentation URI per error code, e.g. {'invalid_client': 'https://...'}"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("error_uris")
    @classmethod
    def freeze_error_uris(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(v))

    def error_uri_for(self, error: str) -> Optional[str]:
        return self.error_uris.get(error)
