"""IR annotations to Telegram message entities."""

from __future__ import annotations

from loguru import logger
from telegram import MessageEntity
from telegram.constants import MessageEntityType

from relaybot.markup.ir import Annotation, Kind

_ENTITY_TYPES: dict[Kind, MessageEntityType] = {
    Kind.PRE: MessageEntityType.PRE,
    Kind.BOLD: MessageEntityType.BOLD,
    Kind.ITALIC: MessageEntityType.ITALIC,
    Kind.STRIKETHROUGH: MessageEntityType.STRIKETHROUGH,
    Kind.CODE: MessageEntityType.CODE,
}


def entity_type(kind: Kind) -> MessageEntityType:
    """Map an annotation kind to its Telegram entity type."""
    return _ENTITY_TYPES[kind]


def to_message_entities(annotations: list[Annotation]) -> list[MessageEntity]:
    """Build Telegram entities from fragment-local annotations.

    Offsets and lengths are in UTF-16 code units. Empty spans are dropped.
    """
    entities: list[MessageEntity] = []
    for ann in annotations:
        if ann.utf16_length == 0:
            logger.debug(f"Skipping empty {ann.kind.value} span at {ann.utf16_offset}")
            continue
        entities.append(MessageEntity(
            type=entity_type(ann.kind),
            offset=ann.utf16_offset,
            length=ann.utf16_length,
        ))
    return entities
