"""Telegram delivery of formatted model replies using python-telegram-bot."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from loguru import logger
from telegram import Bot
from telegram.error import BadRequest, NetworkError, RetryAfter
from telegram.ext import Application

from relaybot.config.schema import TelegramConfig
from relaybot.markup.format import markup_to_fragments
from relaybot.markup.render import to_message_entities

# Transport failures raised outside python-telegram-bot's own error types
TRANSIENT_MESSAGES = ("timed out", "connection reset", "connection refused")


def _is_recoverable_error(err: Exception) -> bool:
    """Check if a send failed for a transient reason and is worth retrying.

    ``TimedOut`` and server-side failures arrive as ``NetworkError``, flood
    control as ``RetryAfter``. ``BadRequest`` is a ``NetworkError`` subclass
    but means Telegram rejected the message itself.
    """
    if isinstance(err, BadRequest):
        return False
    if isinstance(err, (NetworkError, RetryAfter)):
        return True
    err_str = str(err).lower()
    return any(pattern in err_str for pattern in TRANSIENT_MESSAGES)


async def _send_with_retry(
    bot,
    chat_id: int,
    text: str,
    max_retries: int = 3,
    base_delay: float = 1.0,
    **kwargs,
) -> None:
    """Send one message, backing off exponentially on transient failures."""
    attempt = 0
    while True:
        try:
            await bot.send_message(chat_id=chat_id, text=text, **kwargs)
            return
        except Exception as e:
            attempt += 1
            if attempt >= max_retries or not _is_recoverable_error(e):
                raise
            delay = base_delay * 2 ** (attempt - 1)
            logger.warning(f"Telegram send failed (attempt {attempt}/{max_retries}), retrying in {delay}s: {e}")
            await asyncio.sleep(delay)


@dataclass
class FragmentFailure:
    index: int
    error: str


class DeliveryError(Exception):
    """Raised when one or more fragments of a message were not delivered."""

    def __init__(self, failures: list[FragmentFailure], total: int):
        self.failures = failures
        self.total = total
        details = "; ".join(f"#{f.index}: {f.error}" for f in failures)
        super().__init__(f"{len(failures)} of {total} fragment(s) not delivered: {details}")


@dataclass
class DeliveryReport:
    """Per-fragment outcome of sending one message."""

    total: int = 0
    sent: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    failed: list[FragmentFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def raise_for_failures(self) -> None:
        if self.failed:
            raise DeliveryError(self.failed, self.total)


class TelegramSender:
    """
    Sends model output to a Telegram chat.

    The text is converted once into fragments with native message entities,
    then each fragment is sent in order. A failing fragment does not stop the
    ones after it; the outcome of every fragment ends up in the report.
    """

    def __init__(self, bot: Bot, config: TelegramConfig):
        self.bot = bot
        self.config = config

    @classmethod
    def from_config(cls, config: TelegramConfig) -> TelegramSender:
        """Build a sender with its own bot client."""
        builder = Application.builder().token(config.token)
        if config.proxy:
            builder = builder.proxy(config.proxy)
        return cls(builder.build().bot, config)

    async def __aenter__(self) -> TelegramSender:
        await self.bot.initialize()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.bot.shutdown()

    async def send(self, chat_id: int, content: str) -> DeliveryReport:
        """Send *content* to *chat_id* as one or more messages."""
        fragments = markup_to_fragments(content, self.config.max_message_size)
        report = DeliveryReport(total=len(fragments))

        for index, fragment in enumerate(fragments):
            if not fragment.text.strip():
                logger.debug(f"Skipping empty fragment #{index} for chat {chat_id}")
                report.skipped.append(index)
                continue

            entities = to_message_entities(fragment.annotations)
            try:
                await self._send_fragment(chat_id, fragment.text, entities)
            except Exception as e:
                logger.error(f"Failed to send fragment #{index} to chat {chat_id}: {e}")
                report.failed.append(FragmentFailure(index=index, error=str(e)))
                continue
            report.sent.append(index)

        if report.failed:
            logger.warning(
                f"Partial delivery to chat {chat_id}: "
                f"{len(report.sent)}/{report.total} fragment(s) sent"
            )
        return report

    async def _send_fragment(self, chat_id: int, text: str, entities: list) -> None:
        options = dict(
            max_retries=self.config.max_retries,
            base_delay=self.config.retry_base_delay,
            read_timeout=self.config.send_timeout,
            write_timeout=self.config.send_timeout,
        )
        if not entities:
            await _send_with_retry(self.bot, chat_id=chat_id, text=text, **options)
            return

        try:
            await _send_with_retry(self.bot, chat_id=chat_id, text=text, entities=entities, **options)
        except Exception as e:
            if _is_recoverable_error(e):
                raise
            logger.warning(f"Formatted send failed, falling back to plain text: {e}")
            await _send_with_retry(self.bot, chat_id=chat_id, text=text, **options)
