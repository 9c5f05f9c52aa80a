"""
Quote emitters.

Each emitter renders data[:length] into a BoundedBuffer in one quoting style
and returns the buffer's new position. None of them re-check that the style
is safe for the input; the strategy selector has already decided that.
"""

from __future__ import annotations

from typing import Literal

from wordesc.core.buffer import BoundedBuffer
from wordesc.core.classify import FLAVOR_SHELL, TextClassifier

QuoteRun = Literal["open", "closed"]

SINGLE_QUOTE = ord("'")
BACKSLASH = ord("\\")

# https://www.gnu.org/software/bash/manual/html_node/ANSI_002dC-Quoting.html
DOLLAR_ESCAPES = {
    0x07: "\\a",
    0x08: "\\b",
    0x1B: "\\e",
    0x0C: "\\f",
    0x0A: "\\n",
    0x0D: "\\r",
    0x09: "\\t",
    0x0B: "\\v",
    SINGLE_QUOTE: "\\'",
    BACKSLASH: "\\\\",
}


def dollar_escape(byte: int) -> str:
    """Escape one byte for $'...', e.g. "\\n" or "\\x7F"."""
    esc = DOLLAR_ESCAPES.get(byte)
    if esc is not None:
        return esc
    return f"\\x{byte:02X}"


def emit_bare(buf: BoundedBuffer, data: bytes, length: int) -> int:
    return buf.write(data[:length])


def emit_double_quoted(buf: BoundedBuffer, data: bytes, length: int) -> int:
    """"Quote" a string for the shell."""
    buf.write('"')
    buf.write(data[:length])
    return buf.write('"')


def emit_single_quoted(buf: BoundedBuffer, data: bytes, length: int) -> int:
    """'Quote' a string for the shell.

    Single quotes admit no escapes, so each literal ' closes the current
    run and is written as \\' outside the quotes: it's -> 'it'\\''s'
    """
    run: QuoteRun = "closed"
    i = 0
    while i < length:
        chunk_end = data.find(b"'", i, length)
        if chunk_end < 0:
            chunk_end = length
        if chunk_end > i:
            if run == "closed":
                buf.write("'")
                run = "open"
            buf.write(data[i:chunk_end])
            i = chunk_end

        while i < length and data[i] == SINGLE_QUOTE:
            if run == "open":
                buf.write("'")
                run = "closed"
            buf.write("\\'")
            i += 1

    if run == "open":
        buf.write("'")
    return buf.position


def emit_dollar_quoted(
    buf: BoundedBuffer, data: bytes, length: int, classifier: TextClassifier
) -> int:
    """$'Quote' a string for the shell.

    Printable characters are copied as-is unless their encoding contains a
    ' or \\ byte. Everything else is escaped byte by byte.
    """
    buf.write("$'")

    state = classifier.new_state()
    i = 0
    while i < length:
        decoded = classifier.decode_one(data, i, length, state)
        raw = data[i : decoded.end]
        safe = (
            decoded.ok
            and SINGLE_QUOTE not in raw
            and BACKSLASH not in raw
            and classifier.is_printable(decoded.text, FLAVOR_SHELL)
        )
        if safe:
            buf.write(raw)
        else:
            for byte in raw:
                buf.write(dollar_escape(byte))
        i = decoded.end

    return buf.write("'")
