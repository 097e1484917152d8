"""
Unit tests for token endpoint value objects.
"""

import json

import pytest
from pydantic import ValidationError

from tokenforge.oauth.constants import ClientAuthMethod
from tokenforge.oauth.models import (
    EndpointConfig,
    EndpointResponse,
    ErrorResponse,
    IssuedToken,
    TokenRequest,
)


class TestTokenRequest:
    """Tests for TokenRequest."""

    def test_from_form(self):
        request = TokenRequest.from_form(
            {
                "grant_type": "password",
                "client_id": "c1",
                "client_secret": "s1",
                "username": "u",
                "password": "p",
                "scope": "read write",
                "unrelated": "ignored",
            },
            authorization="Basic abc",
        )

        assert request.grant_type == "password"
        assert request.client_id == "c1"
        assert request.client_secret == "s1"
        assert request.username == "u"
        assert request.password == "p"
        assert request.refresh_token is None
        assert request.scope == "read write"
        assert request.authorization == "Basic abc"

    def test_empty_values_preserved(self):
        request = TokenRequest.from_form({"grant_type": "", "client_secret": ""})

        assert request.grant_type == ""
        assert request.client_secret == ""
        assert request.client_id is None

    def test_immutable(self):
        request = TokenRequest(grant_type="password")

        with pytest.raises(AttributeError):
            request.grant_type = "client_credentials"

    def test_repr_hides_secrets(self):
        request = TokenRequest(
            grant_type="password",
            client_id="c1",
            client_secret="top-secret",
            password="hunter2",
            refresh_token="rt-secret",
        )

        text = repr(request)
        assert "c1" in text
        assert "top-secret" not in text
        assert "hunter2" not in text
        assert "rt-secret" not in text


class TestIssuedToken:
    """Tests for IssuedToken serialization."""

    def test_to_dict_omits_absent_members(self):
        token = IssuedToken(access_token="at", token_type="mac", expires_in=3600)

        assert token.to_dict() == {"access_token": "at", "token_type": "mac", "expires_in": 3600}

    def test_to_dict_with_optional_members(self):
        token = IssuedToken(
            access_token="at",
            token_type="bearer",
            expires_in=60,
            refresh_token="rt",
            scope="read",
        )

        assert json.loads(token.to_json()) == {
            "access_token": "at",
            "token_type": "bearer",
            "expires_in": 60,
            "refresh_token": "rt",
            "scope": "read",
        }

    def test_json_round_trip(self):
        token = IssuedToken(access_token="at", token_type="mac", expires_in=3600, scope="a b")

        parsed = IssuedToken.from_json(token.to_json())

        assert parsed.access_token == token.access_token
        assert parsed.token_type == token.token_type
        assert parsed.scope == token.scope
        assert parsed == token


class TestErrorResponse:
    """Tests for ErrorResponse."""

    def test_without_uri(self):
        error = ErrorResponse(error="invalid_request", error_description="Bad request")

        assert json.loads(error.to_json()) == {
            "error": "invalid_request",
            "error_description": "Bad request",
        }

    def test_with_uri(self):
        error = ErrorResponse(
            error="invalid_client",
            error_description="Client authentication failed.",
            error_uri="https://docs.example.com/invalid_client",
        )

        assert error.to_dict()["error_uri"] == "https://docs.example.com/invalid_client"


class TestEndpointResponse:
    """Tests for EndpointResponse."""

    def test_defaults(self):
        response = EndpointResponse(status_code=200, body='{"a": 1}')

        assert response.media_type == "application/json"
        assert not response.is_error
        assert response.json() == {"a": 1}

    def test_is_error(self):
        assert EndpointResponse(status_code=400, body="{}").is_error


class TestEndpointConfig:
    """Tests for EndpointConfig."""

    def test_defaults(self):
        config = EndpointConfig()

        assert config.token_type == "mac"
        assert config.client_auth_method == ClientAuthMethod.SHARED_SECRET
        assert config.error_uris == {}

    def test_auth_method_from_string(self):
        config = EndpointConfig(client_auth_method="anonymous")

        assert config.client_auth_method is ClientAuthMethod.ANONYMOUS

    def test_unknown_auth_method_rejected(self):
        with pytest.raises(ValidationError):
            EndpointConfig(client_auth_method="client_secret_jwt")

    def test_empty_token_type_rejected(self):
        with pytest.raises(ValidationError):
            EndpointConfig(token_type="")

    def test_frozen(self):
        config = EndpointConfig()

        with pytest.raises(ValidationError):
            config.token_type = "bearer"

    def test_error_uri_for(self):
        config = EndpointConfig(error_uris={"invalid_grant": "https://docs.example.com/grant"})

        assert config.error_uri_for("invalid_grant") == "https://docs.example.com/grant"
        assert config.error_uri_for("invalid_client") is None

    def test_error_uris_read_only(self):
        uris = {"invalid_grant": "https://docs.example.com/grant"}
        config = EndpointConfig(error_uris=uris)

        with pytest.raises(TypeError):
            config.error_uris["invalid_client"] = "https://docs.example.com/client"

        uris["invalid_client"] = "https://docs.example.com/client"
        assert config.error_uri_for("invalid_client") is None

    def test_default_error_uris_read_only(self):
        with pytest.raises(TypeError):
            EndpointConfig().error_uris["invalid_grant"] = "https://docs.example.com/grant"
