"""
Shell-safe quoting of arbitrary byte strings.

Picks the least obtrusive style that still reads back as the same bytes:

    bare      hello
    double    "a b"  "it's"
    single    '$HOME'  'it'\\''s $5'
    dollar    $'\\a'  $'caf\\xFF'

Any unprintable or undecodable character forces $'...', the only style
that can spell arbitrary bytes visibly.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from wordesc.core.buffer import BoundedBuffer
from wordesc.core.classify import (
    FLAVOR_SHELL,
    Flavor,
    TextClassifier,
    check_flavor,
    classifier_for_locale,
)
from wordesc.core.emit import (
    emit_bare,
    emit_dollar_quoted,
    emit_double_quoted,
    emit_single_quoted,
)
from wordesc.core.scan import (
    bare_word_prefix_length,
    printable_prefix_length,
    quotable_prefix_length,
)

Strategy = Literal["bare", "double", "single", "dollar"]

EMPTY_WORD = '""'

Data = bytes | bytearray | memoryview | str


@dataclass(frozen=True)
class Analysis:
    """Scan results for one input and the quoting style they select."""

    length: int
    printable: int  # longest printable prefix
    bare: int  # longest bare-word-safe prefix
    quotable: int  # longest double-quote-safe prefix
    strategy: Strategy


def _to_bytes(data: Data, classifier: TextClassifier) -> bytes:
    """Encode text input with the classifier's encoding.

    Characters the encoding can't represent fall back to UTF-8, so they come
    out as \\xHH escapes rather than an error.
    """
    if not isinstance(data, str):
        return bytes(data)
    attempts = (
        (classifier.encoding, "surrogateescape"),
        ("utf-8", "surrogateescape"),
    )
    for encoding, errors in attempts:
        try:
            return data.encode(encoding, errors)
        except UnicodeEncodeError:
            pass
    # Lone surrogates outside the surrogateescape range
    return data.encode("utf-8", "surrogatepass")


def _select(
    length: int, printable: int, bare: int, quotable: int, flavor: Flavor
) -> Strategy:
    if printable < length:
        return "dollar"
    if flavor != FLAVOR_SHELL or bare == length:
        return "bare"
    if quotable == length:
        return "double"
    return "single"


def _analyze(
    data: bytes, max_length: int | None, flavor: Flavor, classifier: TextClassifier
) -> Analysis:
    if max_length is not None and max_length < 0:
        raise ValueError(f"max_length must not be negative, got {max_length}")
    length = len(data) if max_length is None else min(len(data), max_length)

    printable = printable_prefix_length(data, length, flavor, classifier)
    bare = bare_word_prefix_length(data, length)
    quotable = quotable_prefix_length(data, length)
    return Analysis(
        length=length,
        printable=printable,
        bare=bare,
        quotable=quotable,
        strategy=_select(length, printable, bare, quotable, flavor),
    )


def analyze(
    data: Data,
    max_length: int | None = None,
    flavor: Flavor = FLAVOR_SHELL,
    classifier: TextClassifier | None = None,
) -> Analysis:
    """Scan a string and report which quoting style it needs."""
    flavor = check_flavor(flavor)
    if classifier is None:
        classifier = classifier_for_locale()
    return _analyze(_to_bytes(data, classifier), max_length, flavor, classifier)


def quote_to(
    buf: BoundedBuffer,
    data: Data,
    max_length: int | None = None,
    flavor: Flavor = FLAVOR_SHELL,
    classifier: TextClassifier | None = None,
) -> Analysis:
    """Append the quoted form of data to buf. Returns the analysis used."""
    flavor = check_flavor(flavor)
    if classifier is None:
        classifier = classifier_for_locale()
    data = _to_bytes(data, classifier)
    analysis = _analyze(data, max_length, flavor, classifier)
    length = analysis.length

    before = buf.requested
    if analysis.strategy == "dollar":
        emit_dollar_quoted(buf, data, length, classifier)
    elif analysis.strategy == "bare":
        emit_bare(buf, data, length)
    elif analysis.strategy == "double":
        emit_double_quoted(buf, data, length)
    else:
        emit_single_quoted(buf, data, length)

    # An empty argument must still be visible
    if buf.requested == before:
        buf.write(EMPTY_WORD)

    return analysis


def quote_into_n(
    buffer: bytearray | memoryview,
    capacity: int,
    data: Data,
    max_length: int | None,
    flavor: Flavor = FLAVOR_SHELL,
    classifier: TextClassifier | None = None,
) -> int:
    """Quote at most max_length bytes of data into buffer[:capacity].

    The buffer is always left NUL-terminated. Returns the number of bytes the
    full result needs, not counting the terminator; a return value of
    `capacity` or more means the output was truncated.
    """
    buf = BoundedBuffer(capacity, buffer)
    quote_to(buf, data, max_length, flavor, classifier)
    return buf.requested


def quote_into(
    buffer: bytearray | memoryview,
    capacity: int,
    data: Data,
    flavor: Flavor = FLAVOR_SHELL,
    classifier: TextClassifier | None = None,
) -> int:
    """Quote all of data into buffer[:capacity]. See quote_into_n()."""
    return quote_into_n(buffer, capacity, data, None, flavor, classifier)


def quote(
    data: Data,
    max_length: int | None = None,
    flavor: Flavor = FLAVOR_SHELL,
    classifier: TextClassifier | None = None,
) -> str:
    """Quote a string for safe use in a POSIX shell.

    Returns "" (two characters) for empty strings and the string itself when
    it is a safe bare word. Undecodable bytes come back as \\xHH escapes, so
    the result is always valid text.
    """
    if classifier is None:
        classifier = classifier_for_locale()
    data = _to_bytes(data, classifier)
    # Worst case: every byte becomes \xHH, plus $'...' and the terminator
    buf = BoundedBuffer(4 * len(data) + 4)
    quote_to(buf, data, max_length, flavor, classifier)
    return buf.getvalue().decode(classifier.encoding, "surrogateescape")


def join(
    args: Iterable[Data],
    flavor: Flavor = FLAVOR_SHELL,
    classifier: TextClassifier | None = None,
) -> str:
    """Join words into a shell command line with proper quoting."""
    return " ".join(quote(a, flavor=flavor, classifier=classifier) for a in args)
