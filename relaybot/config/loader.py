"""Load configuration from environment variables."""

from __future__ import annotations

import os
import sys
from typing import Mapping

from loguru import logger
from pydantic import ValidationError

from relaybot.config.schema import Config, TelegramConfig


class ConfigError(ValueError):
    """Raised when the environment does not describe a usable configuration."""


def _require(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name, "")
    if not value:
        raise ConfigError(f"{name} environment variable not set")
    return value


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Build a Config from the process environment (or *environ*).

    The logging level is applied as soon as the config is built.
    """
    env = os.environ if environ is None else environ

    telegram: dict[str, object] = {"token": _require(env, "BOT_API_TOKEN")}
    if env.get("TG_PROXY"):
        telegram["proxy"] = env["TG_PROXY"]
    if env.get("TG_MAX_MESSAGE_SIZE"):
        telegram["max_message_size"] = env["TG_MAX_MESSAGE_SIZE"]

    try:
        config = Config(
            telegram=TelegramConfig(**telegram),
            debug=env.get("TG_BOT_DEBUG", "").lower() == "true",
        )
    except ValidationError as e:
        raise ConfigError(f"invalid configuration: {e}") from e

    configure_logging(config.debug)
    return config


def configure_logging(debug: bool = False) -> None:
    """Send loguru output to stderr at DEBUG or INFO level."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if debug else "INFO")
