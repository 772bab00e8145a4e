"""Markup tokenization and message chunking."""

from relaybot.markup.chunk import split_by_newline
from relaybot.markup.format import DEFAULT_MAX_MESSAGE_SIZE, markup_to_fragments
from relaybot.markup.ir import (
    DELIMITERS,
    Annotation,
    Delimiter,
    Fragment,
    Kind,
    MarkupIR,
    chunk_ir,
    match_delimiter,
    parse_markup,
    remap_annotations,
)

__all__ = [
    "DEFAULT_MAX_MESSAGE_SIZE",
    "DELIMITERS",
    "Annotation",
    "Delimiter",
    "Fragment",
    "Kind",
    "MarkupIR",
    "chunk_ir",
    "match_delimiter",
    "markup_to_fragments",
    "parse_markup",
    "remap_annotations",
    "split_by_newline",
]
