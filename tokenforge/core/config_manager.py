"""
Configuration management for TokenForge.

Handles loading, validation, and access to configuration settings.
"""

import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from enum import Enum

import yaml
from pydantic import BaseModel, Field, ValidationError, ConfigDict

from tokenforge.oauth.constants import TOKEN_TYPE_MAC, ClientAuthMethod
from tokenforge.oauth.models import EndpointConfig

logger = logging.getLogger(__name__)

REDACTED = "***REDACTED***"


class LogLevel(str, Enum):
    """Valid log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: LogLevel = LogLevel.INFO
    format: str = "json"
    file: Optional[str] = None
    rotation_size: str = "10MB"
    rotation_count: int = 5
    module_levels: Optional[Dict[str, str]] = Field(
        default=None,
        description="Per-module log levels, e.g., {'tokenforge.oauth.endpoint': 'DEBUG'}"
    )

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class ServerConfig(BaseModel):
    """HTTP server configuration."""
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)


class EndpointSettings(BaseModel):
    """Token endpoint behaviour."""
    token_type: str = Field(default=TOKEN_TYPE_MAC, min_length=1)
    client_auth_method: ClientAuthMethod = ClientAuthMethod.SHARED_SECRET
    error_uris: Dict[str, str] = Field(
        default_factory=dict,
        description="Documentation URI per error code"
    )

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    def to_endpoint_config(self) -> EndpointConfig:
        return EndpointConfig(
            token_type=self.token_type,
            client_auth_method=self.client_auth_method,
            error_uris=dict(self.error_uris),
        )


class IssuerConfig(BaseModel):
    """Reference JWT token issuer configuration."""
    issuer: str = "http://localhost:8000"
    token_lifetime: int = Field(default=3600, gt=0, description="Access token lifetime in seconds")
    issue_refresh_tokens: bool = True
    refresh_token_lifetime: int = Field(
        default=1209600, gt=0, description="Refresh token lifetime in seconds"
    )
    private_key_file: Optional[str] = None
    public_key_file: Optional[str] = None


class TokenForgeConfig(BaseModel):
    """Main TokenForge configuration schema."""

    server: ServerConfig = Field(default_factory=ServerConfig)

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    endpoint: EndpointSettings = Field(default_factory=EndpointSettings)

    issuer: IssuerConfig = Field(default_factory=IssuerConfig)

    clients: Dict[str, str] = Field(
        default_factory=dict,
        description="Registered clients: client_id -> client_secret"
    )

    users: Dict[str, str] = Field(
        default_factory=dict,
        description="Resource owners: username -> password"
    )


class ConfigManager:
    """
    Manages TokenForge configuration loading and validation.

    Configuration precedence (highest to lowest):
    1. CLI arguments
    2. Environment variables (TOKENFORGE_*)
    3. Configuration file (YAML/JSON)
    4. Defaults
    """

    def __init__(self):
        self._config: Optional[TokenForgeConfig] = None
        self._config_file: Optional[Path] = None

    def load(
        self,
        config_file: Optional[str] = None,
        cli_overrides: Optional[Dict[str, Any]] = None
    ) -> TokenForgeConfig:
        """
        Load and validate configuration from multiple sources.

        Args:
            config_file: Path to configuration file (YAML or JSON)
            cli_overrides: Dictionary of CLI argument overrides

        Returns:
            Validated TokenForgeConfig instance

        Raises:
            ValidationError: If configuration is invalid
            FileNotFoundError: If specified config file doesn't exist
        """
        logger.info("Loading TokenForge configuration")

        config_dict: Dict[str, Any] = {}

        if config_file:
            config_dict = self._load_from_file(config_file)
            self._config_file = Path(config_file)
            logger.info(f"Loaded configuration from file: {config_file}")

        env_config = self._load_from_env()
        config_dict = self._merge_configs(config_dict, env_config)
        if env_config:
            logger.info(f"Applied {len(env_config)} environment variable overrides")

        if cli_overrides:
            config_dict = self._merge_configs(config_dict, cli_overrides)
            logger.info(f"Applied {len(cli_overrides)} CLI argument overrides")

        try:
            self._config = TokenForgeConfig(**config_dict)
        except ValidationError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

        logger.info("Configuration validated successfully")
        self._log_configuration()
        return self._config

    def _load_from_file(self, file_path: str) -> Dict[str, Any]:
        """Load configuration from YAML or JSON file."""
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        with open(path, 'r') as f:
            if path.suffix in ['.yaml', '.yml']:
                return yaml.safe_load(f) or {}
            elif path.suffix == '.json':
                return json.load(f)
            else:
                raise ValueError(f"Unsupported config file format: {path.suffix}")

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        if host := os.getenv("TOKENFORGE_HOST"):
            config.setdefault("server", {})["host"] = host
        if port := os.getenv("TOKENFORGE_PORT"):
            config.setdefault("server", {})["port"] = int(port)

        if log_level := os.getenv("TOKENFORGE_LOG_LEVEL"):
            config.setdefault("logging", {})["level"] = log_level.upper()
        if log_file := os.getenv("TOKENFORGE_LOG_FILE"):
            config.setdefault("logging", {})["file"] = log_file

        if token_type := os.getenv("TOKENFORGE_TOKEN_TYPE"):
            config.setdefault("endpoint", {})["token_type"] = token_type
        if auth_method := os.getenv("TOKENFORGE_CLIENT_AUTH_METHOD"):
            config.setdefault("endpoint", {})["client_auth_method"] = auth_method.lower()

        if issuer := os.getenv("TOKENFORGE_ISSUER"):
            config.setdefault("issuer", {})["issuer"] = issuer
        if lifetime := os.getenv("TOKENFORGE_TOKEN_LIFETIME"):
            config.setdefault("issuer", {})["token_lifetime"] = int(lifetime)
        if refresh_lifetime := os.getenv("TOKENFORGE_REFRESH_TOKEN_LIFETIME"):
            config.setdefault("issuer", {})["refresh_token_lifetime"] = int(refresh_lifetime)

        return config

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two configuration dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _log_configuration(self) -> None:
        if not self._config:
            return
        logger.info(f"Active configuration: {json.dumps(redact_config(self._config), indent=2)}")

    def get_config(self) -> TokenForgeConfig:
        """
        Get the loaded configuration.

        Raises:
            RuntimeError: If configuration hasn't been loaded
        """
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call load() first.")
        return self._config

    def reload(self) -> TokenForgeConfig:
        """Reload configuration from the same sources."""
        config_file = str(self._config_file) if self._config_file else None
        return self.load(config_file=config_file)


def redact_config(config: TokenForgeConfig) -> Dict[str, Any]:
    """Dump a configuration with client secrets and passwords replaced."""
    config_dict = config.model_dump(mode="json")
    config_dict["clients"] = {client_id: REDACTED for client_id in config_dict["clients"]}
    config_dict["users"] = {username: REDACTED for username in config_dict["users"]}
    return config_dict
