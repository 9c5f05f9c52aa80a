"""Tests for prefix scanners."""

from wordesc.core.scan import (
    bare_word_prefix_length,
    printable_prefix_length,
    quotable_prefix_length,
)


def printable(data, classifier, flavor="shell", length=None):
    if length is None:
        length = len(data)
    return printable_prefix_length(data, length, flavor, classifier)


class TestPrintablePrefix:
    def test_all_printable(self, utf8):
        assert printable(b"hello world", utf8) == 11

    def test_control_byte(self, utf8):
        assert printable(b"ab\x07cd", utf8) == 2

    def test_tab_in_shell_flavor(self, utf8):
        assert printable(b"a\tb", utf8) == 1

    def test_tab_in_general_flavor(self, utf8):
        assert printable(b"a\tb", utf8, flavor="general") == 3

    def test_invalid_byte(self, utf8):
        assert printable(b"ab\xffcd", utf8) == 2

    def test_multibyte(self, utf8):
        data = "héllo wörld".encode()
        assert printable(data, utf8) == len(data)

    def test_stops_before_unprintable_multibyte(self, utf8):
        data = "é\u200bx".encode()
        assert printable(data, utf8) == 2

    def test_incomplete_tail(self, utf8):
        assert printable(b"ab\xc3", utf8) == 2

    def test_respects_length(self, utf8):
        assert printable(b"ab\x07", utf8, length=2) == 2

    def test_c_locale(self, c_locale):
        assert printable("é".encode(), c_locale) == 0

    def test_empty(self, utf8):
        assert printable(b"", utf8) == 0


class TestBareWordPrefix:
    def test_plain_word(self):
        assert bare_word_prefix_length(b"hello", 5) == 5

    def test_path_characters_are_safe(self):
        data = b"/usr/lib/x86_64-linux-gnu/libc.so.6"
        assert bare_word_prefix_length(data, len(data)) == len(data)

    def test_space(self):
        assert bare_word_prefix_length(b"a b", 3) == 1

    def test_each_unsafe_byte(self):
        for byte in b"|&;<>()$`\\\"' *?[#~=%!":
            data = b"ab" + bytes([byte])
            assert bare_word_prefix_length(data, 3) == 2, chr(byte)

    def test_leading_tilde(self):
        assert bare_word_prefix_length(b"~user", 5) == 0

    def test_non_ascii_is_safe(self):
        data = "naïve".encode()
        assert bare_word_prefix_length(data, len(data)) == len(data)

    def test_respects_length(self):
        assert bare_word_prefix_length(b"ab cd", 2) == 2


class TestQuotablePrefix:
    def test_spaces_and_globs(self):
        assert quotable_prefix_length(b"a b*c?", 6) == 6

    def test_single_quote_is_fine(self):
        assert quotable_prefix_length(b"it's", 4) == 4

    def test_dollar(self):
        assert quotable_prefix_length(b"a$b", 3) == 1

    def test_double_quote(self):
        assert quotable_prefix_length(b'say "hi"', 8) == 4

    def test_history_bang(self):
        assert quotable_prefix_length(b"wow!", 4) == 3

    def test_backslash_and_backtick(self):
        assert quotable_prefix_length(b"a\\b", 3) == 1
        assert quotable_prefix_length(b"`id`", 4) == 0

    def test_respects_length(self):
        assert quotable_prefix_length(b"ab$", 2) == 2
