"""Unified entry point for markup → Telegram message fragments."""

from __future__ import annotations

from loguru import logger

from relaybot.markup.ir import Fragment, chunk_ir, parse_markup

# Below Telegram's 4096 cap to leave headroom.
DEFAULT_MAX_MESSAGE_SIZE = 3500


def markup_to_fragments(text: str, limit: int = DEFAULT_MAX_MESSAGE_SIZE) -> list[Fragment]:
    """Convert model markup into ordered fragments with local annotations.

    The markup is parsed once over the whole text, so spans that cross a
    fragment boundary are split between the fragments they touch. *limit* is
    a soft bound (see ``split_by_newline``).
    """
    ir = parse_markup(text)
    fragments = chunk_ir(ir, limit)
    logger.debug(
        f"Markup split into {len(fragments)} fragment(s), "
        f"{len(ir.annotations)} annotation(s)"
    )
    return fragments
