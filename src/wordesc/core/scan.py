"""
Single-pass prefix scanners used to pick a quoting style.

Each scanner returns the length of the longest qualifying prefix of
data[:length], which is `length` itself when the whole string qualifies.
"""

from __future__ import annotations

from wordesc.core.classify import Flavor, TextClassifier, is_ascii_printable

# https://pubs.opengroup.org/onlinepubs/9699919799/utilities/V3_chap02.html#tag_18_02
BARE_UNSAFE = frozenset(b"|&;<>()$`\\\"' *?[#~=%!")

# https://pubs.opengroup.org/onlinepubs/9699919799/utilities/V3_chap02.html#tag_18_02_03
DOUBLE_QUOTE_UNSAFE = frozenset(b'`$\\"!')


def printable_prefix_length(
    data: bytes, length: int, flavor: Flavor, classifier: TextClassifier
) -> int:
    """Length of the longest prefix made only of printable characters."""
    state = classifier.new_state()
    i = 0
    while i < length:
        byte = data[i]
        if classifier.ascii_fast_path and byte < 0x80:
            if not is_ascii_printable(byte, flavor):
                return i
            i += 1
            continue

        decoded = classifier.decode_one(data, i, length, state)
        if not decoded.ok or not classifier.is_printable(decoded.text, flavor):
            return i
        i = decoded.end
    return length


def _span_without(data: bytes, length: int, reject: frozenset[int]) -> int:
    for i in range(length):
        if data[i] in reject:
            return i
    return length


def bare_word_prefix_length(data: bytes, length: int) -> int:
    """How much of this string is safe as a bare word?"""
    return _span_without(data, length, BARE_UNSAFE)


def quotable_prefix_length(data: bytes, length: int) -> int:
    """How much of this string is safe to double-quote?"""
    return _span_without(data, length, DOUBLE_QUOTE_UNSAFE)
