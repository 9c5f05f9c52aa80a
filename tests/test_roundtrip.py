"""Round-trip quoted output through a real shell.

bash is used because plain POSIX sh shells do not all support $'...'.
"""

from __future__ import annotations

import os
import shutil
import subprocess

import pytest

from wordesc.core.classify import C_CLASSIFIER, UTF8_CLASSIFIER
from wordesc.core.quote import join, quote

BASH = shutil.which("bash")

pytestmark = pytest.mark.skipif(BASH is None, reason="bash not installed")

# NUL cannot survive a trip through a C string, so it is left out
SAMPLES = [
    b"hello",
    b"a b",
    b"it's",
    b"it's $HOME",
    b"'''",
    b"a'b'c",
    b"\x07",
    b"\xff",
    b"\xffAB",
    b"a\nb",
    b"tab\there",
    b"back\\slash",
    b'quote"d',
    b"!bang",
    b"`id`",
    b"~user",
    b"*?[",
    b"#comment",
    b"caf\xc3\xa9",
    b"\xc3",
    b"\xe2\x80\x8b",
    b"",
    bytes(range(1, 256)),
]


def bash_print(script: bytes) -> bytes:
    result = subprocess.run(
        [BASH, "-c", script],
        capture_output=True,
        check=True,
        env={"LC_ALL": "C", "PATH": os.environ.get("PATH", "")},
        timeout=10,
    )
    return result.stdout


def read_back(word: bytes) -> bytes:
    return bash_print(b"printf '%s' " + word)


@pytest.mark.parametrize("classifier", [UTF8_CLASSIFIER, C_CLASSIFIER], ids=["utf-8", "C"])
@pytest.mark.parametrize("data", SAMPLES)
def test_round_trip(data, classifier):
    word = quote(data, classifier=classifier).encode(classifier.encoding, "surrogateescape")
    assert read_back(word) == data


def test_join_round_trip():
    words = [b"printf", b"%s|", b"a b", b"it's $5", b"\x01"]
    line = join(words, classifier=UTF8_CLASSIFIER).encode("utf-8", "surrogateescape")
    assert bash_print(line) == b"a b|it's $5|\x01|"
