"""Configuration schema."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TelegramConfig(BaseModel):
    """Telegram delivery settings."""

    token: str = ""
    proxy: str | None = None
    max_message_size: int = Field(default=3500, gt=0)
    send_timeout: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=3, ge=1)
    retry_base_delay: float = Field(default=1.0, ge=0)


class Config(BaseModel):
    """Root configuration."""

    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    debug: bool = False
