"""Plain text splitting on line boundaries."""

from __future__ import annotations


def split_by_newline(text: str, max_size: int) -> list[str]:
    """Split text into consecutive chunks of about *max_size* UTF-8 bytes.

    Each chunk ends right after the last newline that fits in the window.
    When the window has no newline the chunk runs on to the next newline past
    it, or to the end of the text, so *max_size* is a target and not a hard
    cap: a single long line is never cut. Cuts only fall after a newline or at
    the end, so no character is ever split. A chunk cut inside the window is
    never longer than *max_size* UTF-16 code units either.

    The chunks always concatenate back to *text*. Empty text gives ``[""]``.
    """
    if max_size < 1:
        raise ValueError(f"max_size must be positive, got {max_size}")

    data = text.encode("utf-8", "surrogatepass")
    if len(data) <= max_size:
        return [text]

    chunks: list[str] = []
    start = 0
    while start < len(data):
        end = start + max_size
        if end >= len(data):
            end = len(data)
        else:
            last_nl = data.rfind(b"\n", start, end)
            if last_nl != -1:
                end = last_nl + 1
            else:
                next_nl = data.find(b"\n", end)
                end = len(data) if next_nl == -1 else next_nl + 1

        chunks.append(data[start:end].decode("utf-8", "surrogatepass"))
        start = end

    return chunks
