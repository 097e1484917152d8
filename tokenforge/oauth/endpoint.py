"""
OAuth 2.0 token endpoint.

Dispatches token requests by grant type, authenticates the client with the
configured method, validates flow parameters and renders exactly one
response per request.

Author: TokenForge Team
Date: 2026-10-17
"""

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional, Union

from tokenforge.oauth.collaborators import (
    ClientAuthenticator,
    ResourceOwnerValidator,
    TokenGenerator,
    TokenRefresher,
)
from tokenforge.oauth.constants import (
    CONTENT_TYPE_JSON,
    HTTP_200,
    HTTP_400,
    ClientAuthMethod,
    GrantType,
    get_error_description,
)
from tokenforge.oauth.exceptions import (
    ConfigurationError,
    InvalidClientError,
    InvalidGrantError,
    InvalidRequestError,
    OAuthError,
    UnauthorizedClientError,
)
from tokenforge.oauth.models import (
    EndpointConfig,
    EndpointResponse,
    ErrorResponse,
    IssuedToken,
    TokenRequest,
)

logger = logging.getLogger(__name__)


class TokenEndpoint:
    """
    OAuth 2.0 compliant token endpoint.

    Supports:
    - Client credentials grant
    - Resource owner password credentials grant
    - Refresh token grant

    Stages run in a fixed order and the first failure short-circuits to an
    error response: grant type validation, client authentication, flow
    parameter validation, collaborator invocation, response rendering.
    """

    def __init__(
        self,
        config: Optional[EndpointConfig] = None,
        *,
        client_authenticator: ClientAuthenticator,
        resource_owner_validator: ResourceOwnerValidator,
        token_generator: TokenGenerator,
        token_refresher: TokenRefresher,
    ):
        """
        Initialize token endpoint.

        Args:
            config: Endpoint configuration, defaults to EndpointConfig()
            client_authenticator: Checks client id and secret
            resource_owner_validator: Checks username and password
            token_generator: Produces new access tokens
            token_refresher: Exchanges refresh tokens

        Raises:
            ConfigurationError: If a collaborator is missing or the client
                authentication method is unknown
        """
        self.config = config or EndpointConfig()

        try:
            self.client_auth_method = ClientAuthMethod(self.config.client_auth_method)
        except ValueError:
            raise ConfigurationError(
                f"Unknown client authentication method: {self.config.client_auth_method!r}"
            ) from None

        self._client_authenticator = self._require(
            client_authenticator, "client_authenticator", "authenticate_client_credentials"
        )
        self._resource_owner_validator = self._require(
            resource_owner_validator, "resource_owner_validator", "validate_resource_owner_credentials"
        )
        self._token_generator = self._require(
            token_generator, "token_generator", "generate_access_token"
        )
        self._token_refresher = self._require(
            token_refresher, "token_refresher", "refresh_access_token"
        )

        self._flows = {
            GrantType.CLIENT_CREDENTIALS.value: self._handle_client_credentials,
            GrantType.PASSWORD.value: self._handle_password,
            GrantType.REFRESH_TOKEN.value: self._handle_refresh_token,
        }

        logger.info(
            f"TokenEndpoint initialized with token_type={self.config.token_type}, "
            f"client_auth_method={self.client_auth_method.value}"
        )

    @property
    def token_type(self) -> str:
        return self.config.token_type

    def handle_token_request(
        self,
        request: Union[TokenRequest, Mapping[str, Any]],
        authorization: Optional[str] = None,
    ) -> EndpointResponse:
        """
        Handle a request for a token.

        Args:
            request: Parsed form fields, or a TokenRequest
            authorization: Raw Authorization header value, if any

        Returns:
            Rendered token (200) or error (400) response

        Raises:
            Exception: Anything a collaborator raises that is not an OAuthError
        """
        if not isinstance(request, TokenRequest):
            request = TokenRequest.from_form(request, authorization)
        elif authorization is not None:
            request = replace(request, authorization=authorization)

        try:
            token = self._dispatch(request)
        except OAuthError as e:
            logger.warning(
                f"Token request rejected: error={e.error}, "
                f"grant_type={request.grant_type}, client_id={request.client_id}, "
                f"reason={e}"
            )
            return self.render_error(e)

        logger.info(
            f"Issued {token.token_type} token: grant_type={request.grant_type}, "
            f"client_id={request.client_id}, scope={token.scope}"
        )
        return self.render_token(token)

    def _dispatch(self, request: TokenRequest) -> IssuedToken:
        """Route the request to its grant flow."""
        if not request.grant_type:
            raise InvalidRequestError("Missing grant_type parameter")

        flow = self._flows.get(request.grant_type)
        if flow is None:
            raise InvalidRequestError(f"Unrecognized grant_type: {request.grant_type}")

        logger.debug(f"Dispatching grant_type {request.grant_type} request")
        return flow(request)

    def _handle_client_credentials(self, request: TokenRequest) -> IssuedToken:
        """Client obtains a token on behalf of itself."""
        self._authenticate_client(request)

        token = self._token_generator.generate_access_token(
            request.client_id, None, self._requested_scope(request)
        )
        if not token:
            raise UnauthorizedClientError("Token generator declined the request")
        return token

    def _handle_password(self, request: TokenRequest) -> IssuedToken:
        self._authenticate_client(request)

        if not request.username or not request.password:
            raise InvalidRequestError("Missing username or password parameter")

        if not self._resource_owner_validator.validate_resource_owner_credentials(
            request.username, request.password
        ):
            raise InvalidGrantError("Resource owner credentials rejected")

        token = self._token_generator.generate_access_token(
            request.client_id, request.username, self._requested_scope(request)
        )
        if not token:
            raise UnauthorizedClientError("Token generator declined the request")
        return token

    def _handle_refresh_token(self, request: TokenRequest) -> IssuedToken:
        self._authenticate_client(request)

        if not request.refresh_token:
            raise InvalidRequestError("Missing refresh_token parameter")

        token = self._token_refresher.refresh_access_token(
            request.client_id, request.refresh_token, self._requested_scope(request)
        )
        if not token:
            raise InvalidGrantError("Refresh token rejected")
        return token

    def _authenticate_client(self, request: TokenRequest) -> None:
        """
        Authenticate the client with the configured method.

        Raises:
            InvalidClientError: If authentication fails
            OAuthError: If the client authenticator rejects the request
        """
        method = self.client_auth_method

        if method is ClientAuthMethod.ANONYMOUS:
            return

        if method is ClientAuthMethod.HTTP_BASIC:
            # TODO: decide whether to parse request.authorization as RFC 7617 credentials
            raise InvalidClientError("HTTP Basic client authentication is not supported")

        if method is ClientAuthMethod.SHARED_SECRET:
            if not request.client_id or not request.client_secret:
                raise InvalidClientError("Missing client_id or client_secret parameter")

            if not self._client_authenticator.authenticate_client_credentials(
                request.client_id, request.client_secret, self._requested_scope(request)
            ):
                raise InvalidClientError(f"Client authentication failed for {request.client_id}")
            return

        raise ConfigurationError(f"Unknown client authentication method: {method!r}")

    def render_token(self, token: IssuedToken) -> EndpointResponse:
        """Render a successful token response; never cacheable."""
        return EndpointResponse(
            status_code=HTTP_200,
            body=token.to_json(),
            headers={
                "Content-Type": CONTENT_TYPE_JSON,
                "Cache-Control": "no-store",
                "Pragma": "no-cache",
            },
        )

    def render_error(self, error: OAuthError) -> EndpointResponse:
        """
        Render an error response as specified in RFC 6749 section 5.2.

        Known codes always carry their fixed description; custom codes keep
        the description they were raised with, or repeat the code when raised
        without one.
        """
        body = ErrorResponse(
            error=error.error,
            error_description=(
                get_error_description(error.error) or error.error_description or error.error
            ),
            error_uri=self.config.error_uri_for(error.error),
        )
        return EndpointResponse(
            status_code=HTTP_400,
            body=body.to_json(),
            headers={"Content-Type": CONTENT_TYPE_JSON},
        )

    @staticmethod
    def _requested_scope(request: TokenRequest) -> Optional[str]:
        # An empty scope parameter means no scope was requested
        return request.scope or None

    @staticmethod
    def _require(collaborator: Any, name: str, method: str) -> Any:
        if collaborator is None or not callable(getattr(collaborator, method, None)):
            raise ConfigurationError(f"{name} must provide {method}()")
        return collaborator
