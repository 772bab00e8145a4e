"""Configuration module."""

from relaybot.config.loader import ConfigError, configure_logging, load_config
from relaybot.config.schema import Config, TelegramConfig

__all__ = ["Config", "ConfigError", "TelegramConfig", "configure_logging", "load_config"]
