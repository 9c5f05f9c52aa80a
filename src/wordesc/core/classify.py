"""
Character classification for quoting decisions.

A TextClassifier decodes one character at a time from a byte string and says
whether it is printable. It stands in for the process locale: callers pass one
explicitly, so tests can pin an encoding without touching global state.
"""

from __future__ import annotations

import codecs
import locale
import unicodedata
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Flavor = Literal["general", "shell"]

FLAVOR_GENERAL: Flavor = "general"
FLAVOR_SHELL: Flavor = "shell"
FLAVORS = frozenset({FLAVOR_GENERAL, FLAVOR_SHELL})

# Line/paragraph separators and every "C" category (control, format,
# surrogate, private use, unassigned)
UNPRINTABLE_CATEGORIES = frozenset({"Cc", "Cf", "Cs", "Co", "Cn", "Zl", "Zp"})

ASCII_WHITESPACE = frozenset(" \t\n\v\f\r")


def check_flavor(flavor: str) -> Flavor:
    """Validate an escape flavor name."""
    if flavor not in FLAVORS:
        raise ValueError(f"flavor must be 'general' or 'shell', got {flavor!r}")
    return flavor


def _is_shifting(name: str) -> bool:
    """Encodings where an ASCII byte can mean something else mid-string."""
    return name in ("utf-7", "hz") or name.startswith("iso2022")


def _maps_ascii(name: str) -> bool:
    ascii_bytes = bytes(range(0x80))
    try:
        return ascii_bytes.decode(name) == ascii_bytes.decode("ascii")
    except (UnicodeDecodeError, LookupError):
        # LookupError: a bytes-to-bytes codec such as base64
        return False


@dataclass(frozen=True)
class Decoded:
    """One decoded character, or a decode error covering data[start:end]."""

    text: str | None
    end: int

    @property
    def ok(self) -> bool:
        return self.text is not None


class DecodeState:
    """Multibyte decode state, local to a single scan."""

    def __init__(self, encoding: str):
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="strict")

    def feed(self, byte: bytes) -> str:
        return self._decoder.decode(byte)

    def reset(self) -> None:
        self._decoder.reset()


class TextClassifier:
    """Decodes and classifies characters under one text encoding."""

    def __init__(self, encoding: str):
        try:
            info = codecs.lookup(encoding)
        except LookupError:
            raise ValueError(f"unknown encoding '{encoding}'") from None
        # Quoting syntax is ASCII, so the encoding has to spell it the same way
        if not _maps_ascii(info.name):
            raise ValueError(f"encoding '{encoding}' is not ASCII-compatible")
        self.encoding = info.name
        self.ascii_fast_path = not _is_shifting(info.name)

    def __repr__(self) -> str:
        return f"TextClassifier({self.encoding!r})"

    def new_state(self) -> DecodeState:
        return DecodeState(self.encoding)

    def decode_one(
        self, data: bytes, offset: int, length: int, state: DecodeState
    ) -> Decoded:
        """Decode the character starting at data[offset].

        An invalid sequence consumes exactly one byte and resets the state.
        A sequence cut short by `length` consumes everything up to `length`.
        Either way the result is a decode error, and the scan moves forward.
        """
        if self.ascii_fast_path and data[offset] < 0x80:
            return Decoded(chr(data[offset]), offset + 1)

        for end in range(offset + 1, length + 1):
            try:
                text = state.feed(data[end - 1 : end])
            except UnicodeDecodeError:
                state.reset()
                return Decoded(None, offset + 1)
            if text:
                return Decoded(text, end)

        # Incomplete sequence at the end of the input
        state.reset()
        return Decoded(None, length)

    def is_printable(self, text: str, flavor: Flavor) -> bool:
        """Check if decoded text is printable.

        Shell flavor leaves out ASCII whitespace other than the space itself:
        $'\\n' reads better than a literal newline inside quotes.
        """
        for ch in text:
            if unicodedata.category(ch) not in UNPRINTABLE_CATEGORIES:
                continue
            if flavor == FLAVOR_GENERAL and ch in ASCII_WHITESPACE:
                continue
            return False
        return True


def is_ascii_printable(byte: int, flavor: Flavor) -> bool:
    """Single-byte printability check, identical to is_printable() for ASCII."""
    if 0x20 <= byte < 0x7F:
        return True
    return flavor == FLAVOR_GENERAL and chr(byte) in ASCII_WHITESPACE


@lru_cache(maxsize=None)
def get_classifier(encoding: str) -> TextClassifier:
    """Return a shared classifier for an encoding."""
    return TextClassifier(encoding)


def classifier_for_locale() -> TextClassifier:
    """Build a classifier from the active locale's preferred encoding."""
    return get_classifier(locale.getpreferredencoding(False))


C_CLASSIFIER = get_classifier("ascii")
UTF8_CLASSIFIER = get_classifier("utf-8")


def _char_width(ch: str) -> int:
    category = unicodedata.category(ch)
    if category in ("Mn", "Me", "Cf"):
        return 0
    if unicodedata.east_asian_width(ch) in ("W", "F"):
        return 2
    return 1


def display_width(data: bytes, classifier: TextClassifier | None = None) -> int:
    """Likely width of a byte string in a terminal.

    Undecodable bytes are counted as a single-width '?'.
    """
    if classifier is None:
        classifier = classifier_for_locale()
    state = classifier.new_state()
    length = len(data)
    width = 0
    i = 0
    while i < length:
        decoded = classifier.decode_one(data, i, length, state)
        if decoded.ok:
            width += sum(_char_width(ch) for ch in decoded.text)
        else:
            width += 1
        i = decoded.end
    return width
