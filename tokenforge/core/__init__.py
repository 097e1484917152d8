"""Core module initialization."""

from .config_manager import ConfigManager, TokenForgeConfig, redact_config
from .logging_config import setup_logging, get_logger

__all__ = [
    "ConfigManager",
    "TokenForgeConfig",
    "redact_config",
    "setup_logging",
    "get_logger",
]
