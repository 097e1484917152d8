"""
TokenForge Command-Line Interface

Provides commands to run the token endpoint, inspect its configuration and
request tokens from a running server.

Author: TokenForge Team
Date: 2026-10-17
"""

import sys
import json
import logging
from pathlib import Path
from typing import Optional

import click
import uvicorn
from pydantic import ValidationError

from tokenforge import __version__
from tokenforge.api import TOKEN_PATH, create_app
from tokenforge.core.config_manager import ConfigManager, redact_config
from tokenforge.core.logging_config import setup_logging
from tokenforge.oauth.constants import GrantType


def _load_config(config: Optional[Path], overrides: Optional[dict] = None):
    try:
        return ConfigManager().load(
            config_file=str(config) if config else None,
            cli_overrides=overrides,
        )
    except (ValidationError, ValueError) as e:
        raise click.ClickException(f"Invalid configuration: {e}")


@click.group()
@click.version_option(version=__version__, prog_name="tokenforge")
@click.pass_context
def cli(ctx):
    """
    TokenForge - OAuth 2.0 token endpoint

    Issues access tokens for the client credentials, password and refresh
    token grants.
    """
    ctx.ensure_object(dict)


@cli.command()
@click.option("--host", help="Host to bind to (overrides config)")
@click.option("--port", type=int, help="Port to bind to (overrides config)")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Logging level (overrides config)",
)
def serve(host: Optional[str], port: Optional[int], config: Optional[Path], log_level: Optional[str]):
    """
    Serve the token endpoint over HTTP.

    Examples:
        tokenforge serve
        tokenforge serve --port 8080
        tokenforge serve --config tokenforge.yaml --log-level DEBUG
    """
    overrides: dict = {}
    if host:
        overrides.setdefault("server", {})["host"] = host
    if port:
        overrides.setdefault("server", {})["port"] = port
    if log_level:
        overrides.setdefault("logging", {})["level"] = log_level.upper()

    settings = _load_config(config, overrides)

    setup_logging(
        level=settings.logging.level,
        format_type=settings.logging.format,
        log_file=settings.logging.file,
        rotation_size=settings.logging.rotation_size,
        rotation_count=settings.logging.rotation_count,
        module_levels=settings.logging.module_levels,
    )
    logger = logging.getLogger("tokenforge.cli")

    click.echo(f"Starting TokenForge v{__version__}")
    click.echo(f"Token endpoint: http://{settings.server.host}:{settings.server.port}{TOKEN_PATH}")
    click.echo(f"Client authentication: {settings.endpoint.client_auth_method}")
    click.echo()

    try:
        app = create_app(settings)
        uvicorn.run(
            app,
            host=settings.server.host,
            port=settings.server.port,
            log_level=settings.logging.level.lower(),
            access_log=True,
        )
    except KeyboardInterrupt:
        click.echo("\nShutting down TokenForge...")
    except Exception as e:
        logger.exception("TokenForge server failed")
        click.echo(f"[ERROR] Error starting TokenForge: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file",
)
def config(config: Optional[Path]):
    """
    Show the effective configuration.

    Client secrets and passwords are redacted.
    """
    settings = _load_config(config)
    click.echo(json.dumps(redact_config(settings), indent=2))


@cli.command()
@click.option(
    "--grant-type",
    type=click.Choice([grant.value for grant in GrantType]),
    default=GrantType.CLIENT_CREDENTIALS.value,
    show_default=True,
)
@click.option("--client-id", help="Client identifier")
@click.option("--client-secret", help="Client secret")
@click.option("--username", help="Resource owner username (password grant)")
@click.option("--password", help="Resource owner password (password grant)")
@click.option("--refresh-token", help="Refresh token (refresh_token grant)")
@click.option("--scope", help="Requested scope")
@click.option(
    "--url",
    default=f"http://127.0.0.1:8000{TOKEN_PATH}",
    help="Token endpoint URL",
    show_default=True,
)
def token(
    grant_type: str,
    client_id: Optional[str],
    client_secret: Optional[str],
    username: Optional[str],
    password: Optional[str],
    refresh_token: Optional[str],
    scope: Optional[str],
    url: str,
):
    """
    Request a token from a running token endpoint.

    Examples:
        tokenforge token --client-id c1 --client-secret s1
        tokenforge token --grant-type password --client-id c1 --client-secret s1 --username u --password p
    """
    import httpx

    form = {
        "grant_type": grant_type,
        "client_id": client_id,
        "client_secret": client_secret,
        "username": username,
        "password": password,
        "refresh_token": refresh_token,
        "scope": scope,
    }
    form = {name: value for name, value in form.items() if value is not None}

    try:
        response = httpx.post(url, data=form, timeout=10.0)
    except httpx.HTTPError as e:
        click.echo(f"[ERROR] Token request failed: {e}", err=True)
        sys.exit(1)

    try:
        body = response.json()
    except ValueError:
        click.echo(f"[ERROR] Non-JSON response (HTTP {response.status_code}):", err=True)
        click.echo(response.text, err=True)
        sys.exit(1)

    click.echo(json.dumps(body, indent=2))
    if response.status_code != 200:
        sys.exit(1)


@cli.command()
def version():
    """Show TokenForge version."""
    click.echo(f"TokenForge version {__version__}")


def main():
    """Main entry point for CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
