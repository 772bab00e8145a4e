"""Inline markup to IR (Intermediate Representation) parser.

Converts model-produced inline markup into a plain-text string plus
annotation metadata, enabling safe text-level splitting before the spans are
handed to Telegram as message entities.

Offsets are kept in two units: UTF-8 byte offsets over the plain text (used
for clipping and re-basing) and UTF-16 code units (what Telegram expects).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Kind(str, Enum):
    """Formatting category of an annotation."""

    PRE = "pre"
    BOLD = "bold"
    ITALIC = "italic"
    STRIKETHROUGH = "strikethrough"
    CODE = "code"


@dataclass(frozen=True)
class Delimiter:
    marker: str
    kind: Kind

    @property
    def raw(self) -> bytes:
        return self.marker.encode("utf-8")


# Order matters: the fence must be tried before the single backtick.
DELIMITERS: tuple[Delimiter, ...] = (
    Delimiter("```", Kind.PRE),
    Delimiter("**", Kind.BOLD),
    Delimiter("__", Kind.ITALIC),
    Delimiter("~~", Kind.STRIKETHROUGH),
    Delimiter("`", Kind.CODE),
)


@dataclass
class OpenTag:
    delimiter: Delimiter
    offset: int  # plain-text byte length when pushed


@dataclass(frozen=True)
class Annotation:
    kind: Kind
    start: int
    end: int
    length: int
    utf16_offset: int
    utf16_length: int


@dataclass
class MarkupIR:
    text: str = ""
    annotations: list[Annotation] = field(default_factory=list)


@dataclass
class Fragment:
    text: str
    offset: int = 0  # byte offset of the fragment in the full plain text
    annotations: list[Annotation] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def to_utf8(text: str) -> bytes:
    """Encode *text* as UTF-8, letting lone surrogates through as-is."""
    return text.encode("utf-8", "surrogatepass")


def replace_lone_surrogates(text: str) -> str:
    """Replace unpaired surrogates (e.g. a truncated emoji) with U+FFFD."""
    return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")


def utf16_len(text: str) -> int:
    """Number of UTF-16 code units needed to encode *text*."""
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


def _utf16_range(data: bytes | bytearray, start: int, end: int) -> tuple[int, int]:
    """Return (offset, length) in UTF-16 units for the byte range [start, end)."""
    offset = utf16_len(bytes(data[:start]).decode("utf-8", "surrogatepass"))
    total = utf16_len(bytes(data[:end]).decode("utf-8", "surrogatepass"))
    return offset, total - offset


def _make_annotation(kind: Kind, start: int, end: int, data: bytes | bytearray) -> Annotation:
    utf16_offset, utf16_length = _utf16_range(data, start, end)
    return Annotation(
        kind=kind,
        start=start,
        end=end,
        length=end - start,
        utf16_offset=utf16_offset,
        utf16_length=utf16_length,
    )


def _is_continuation(byte: int) -> bool:
    return byte & 0xC0 == 0x80


def _reinsert(buf: bytearray, tag: OpenTag) -> None:
    """Put an unclosed tag's marker back into the buffer at its recorded offset.

    The offset is not corrected for markers reinserted before it in the same
    pass. If it ends up inside a multi-byte sequence it is moved to the next
    code-point boundary so the buffer stays valid UTF-8.
    """
    pos = tag.offset
    while pos < len(buf) and _is_continuation(buf[pos]):
        pos += 1
    buf[pos:pos] = tag.delimiter.raw


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def match_delimiter(data: bytes | str, pos: int = 0) -> Delimiter | None:
    """Return the first delimiter that starts at *pos*, or None."""
    is_text = isinstance(data, str)
    for delim in DELIMITERS:
        if data.startswith(delim.marker if is_text else delim.raw, pos):
            return delim
    return None


def parse_markup(text: str) -> MarkupIR:
    """Parse inline markup into plain text and annotations.

    Never fails. Unbalanced markup is recovered as follows: when a closing
    delimiter matches an entry deeper in the stack, every entry above it is
    treated as literal text and its marker is reinserted where it was opened.
    Entries still open at the end of input are dropped together with their
    markers. Unpaired surrogates in *text* become U+FFFD.
    """
    data = to_utf8(replace_lone_surrogates(text))
    buf = bytearray()
    stack: list[OpenTag] = []
    annotations: list[Annotation] = []

    i = 0
    while i < len(data):
        delim = match_delimiter(data, i)
        if delim is None:
            buf.append(data[i])
            i += 1
            continue

        i += len(delim.raw)

        depth = None
        for j in range(len(stack) - 1, -1, -1):
            if stack[j].delimiter.kind is delim.kind:
                depth = j
                break

        if depth is None:
            stack.append(OpenTag(delim, len(buf)))
            continue

        opener = stack[depth]
        for unclosed in stack[depth + 1:]:
            _reinsert(buf, unclosed)
        del stack[depth:]

        annotations.append(_make_annotation(delim.kind, opener.offset, len(buf), buf))

    return MarkupIR(text=buf.decode("utf-8"), annotations=annotations)


# ---------------------------------------------------------------------------
# Annotation remapping
# ---------------------------------------------------------------------------

def remap_annotations(
    fragment: str,
    offset: int,
    annotations: list[Annotation],
) -> list[Annotation]:
    """Clip annotations to a fragment and rebase them to fragment-local offsets.

    *offset* is the fragment's byte offset in the full plain text. Spans that
    cross the fragment edge are truncated, so each fragment renders its own
    part of the span. A non-empty span that only touches the fragment edge is
    dropped; an empty span sitting on the edge is kept.
    """
    data = to_utf8(fragment)
    frag_start = offset
    frag_end = offset + len(data)

    result: list[Annotation] = []
    for ann in annotations:
        if ann.start > frag_end or ann.end < frag_start:
            continue
        start = max(ann.start, frag_start) - frag_start
        end = min(ann.end, frag_end) - frag_start
        # A non-empty span that only touches the edge has no overlap
        if start == end and ann.length > 0:
            continue
        result.append(_make_annotation(ann.kind, start, end, data))
    return result


def chunk_ir(ir: MarkupIR, limit: int) -> list[Fragment]:
    """Split an IR into fragments of roughly *limit* UTF-8 bytes each."""
    from relaybot.markup.chunk import split_by_newline

    result: list[Fragment] = []
    offset = 0
    for chunk in split_by_newline(ir.text, limit):
        result.append(Fragment(
            text=chunk,
            offset=offset,
            annotations=remap_annotations(chunk, offset, ir.annotations),
        ))
        offset += len(to_utf8(chunk))
    return result
