"""
FastAPI transport for the TokenForge token endpoint.

Parses the form body and Authorization header, runs the token endpoint and
writes its response out unchanged.

Author: TokenForge Team
Date: 2026-10-17
"""

import logging
import uuid
from dataclasses import asdict
from pathlib import Path
from typing import Optional, Tuple

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.formparsers import MultiPartException

from tokenforge import __version__
from tokenforge.core.config_manager import TokenForgeConfig
from tokenforge.core.logging_config import clear_correlation_id, log_with_context, set_correlation_id
from tokenforge.oauth.endpoint import TokenEndpoint
from tokenforge.oauth.exceptions import InvalidRequestError
from tokenforge.oauth.models import EndpointResponse, TokenRequest
from tokenforge.oauth.registry import ClientRegistry, ResourceOwnerRegistry
from tokenforge.oauth.token_issuer import TokenIssuer

logger = logging.getLogger(__name__)

TOKEN_PATH = "/oauth/token"
KEYS_PATH = "/oauth/keys"


def build_endpoint(config: TokenForgeConfig) -> Tuple[TokenEndpoint, TokenIssuer]:
    """
    Build a token endpoint wired to the in-memory reference collaborators.

    Args:
        config: TokenForge configuration

    Returns:
        Tuple of (endpoint, token issuer)
    """
    endpoint_config = config.endpoint.to_endpoint_config()

    private_key = public_key = None
    if config.issuer.private_key_file and config.issuer.public_key_file:
        private_key = Path(config.issuer.private_key_file).read_bytes()
        public_key = Path(config.issuer.public_key_file).read_bytes()

    issuer = TokenIssuer(
        token_type=endpoint_config.token_type,
        issuer=config.issuer.issuer,
        token_lifetime=config.issuer.token_lifetime,
        private_key=private_key,
        public_key=public_key,
        issue_refresh_tokens=config.issuer.issue_refresh_tokens,
        refresh_token_lifetime=config.issuer.refresh_token_lifetime,
    )

    endpoint = TokenEndpoint(
        endpoint_config,
        client_authenticator=ClientRegistry(config.clients),
        resource_owner_validator=ResourceOwnerRegistry(config.users),
        token_generator=issuer,
        token_refresher=issuer,
    )
    return endpoint, issuer


def to_http_response(response: EndpointResponse) -> Response:
    """Copy an endpoint response into a Starlette response."""
    headers = {
        name: value
        for name, value in response.headers.items()
        if name.lower() != "content-type"
    }
    return Response(
        content=response.body,
        status_code=response.status_code,
        headers=headers,
        media_type=response.media_type,
    )


def create_app(
    config: Optional[TokenForgeConfig] = None,
    endpoint: Optional[TokenEndpoint] = None,
) -> FastAPI:
    """
    Create the TokenForge FastAPI application.

    Args:
        config: Configuration, defaults to TokenForgeConfig()
        endpoint: Prebuilt endpoint; when given, the reference collaborators
                  from config are not created and the key set is not served

    Returns:
        FastAPI application
    """
    config = config or TokenForgeConfig()

    issuer: Optional[TokenIssuer] = None
    if endpoint is None:
        endpoint, issuer = build_endpoint(config)

    app = FastAPI(
        title="TokenForge",
        description="OAuth 2.0 token endpoint",
        version=__version__,
    )
    app.state.endpoint = endpoint
    app.state.token_issuer = issuer

    @app.post(TOKEN_PATH)
    async def token(request: Request) -> Response:
        """OAuth 2.0 token endpoint (RFC 6749 section 3.2)."""
        set_correlation_id(request.headers.get("x-correlation-id") or str(uuid.uuid4()))
        try:
            try:
                form = await request.form()
            except MultiPartException as e:
                logger.warning(f"Unparseable token request body: {e}")
                return to_http_response(
                    endpoint.render_error(InvalidRequestError("Malformed request body"))
                )

            duplicated = [
                name for name in TokenRequest.FORM_FIELDS
                if len(form.getlist(name)) > 1
            ]
            if duplicated:
                # Parameters MUST NOT be included more than once
                return to_http_response(
                    endpoint.render_error(
                        InvalidRequestError(f"Repeated parameters: {', '.join(duplicated)}")
                    )
                )

            token_request = TokenRequest.from_form(
                form, authorization=request.headers.get("authorization")
            )
            response = await run_in_threadpool(endpoint.handle_token_request, token_request)

            log_with_context(
                logger,
                logging.INFO,
                "Token request handled",
                grant_type=token_request.grant_type,
                client_id=token_request.client_id,
                status_code=response.status_code,
            )
            return to_http_response(response)
        finally:
            clear_correlation_id()

    @app.get(KEYS_PATH)
    async def keys() -> JSONResponse:
        """JSON Web Key Set for verifying issued access tokens."""
        if issuer is None:
            return JSONResponse(status_code=404, content={"error": "not_found"})
        return JSONResponse(content=asdict(issuer.get_jwks()))

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "version": __version__}

    return app
