"""Tests for relaybot.markup.chunk: line-aware splitting."""

import pytest

from relaybot.markup.chunk import split_by_newline


class TestSplitByNewline:
    def test_short_text_single_chunk(self):
        assert split_by_newline("hello", 10) == ["hello"]

    def test_exact_size_single_chunk(self):
        assert split_by_newline("abc", 3) == ["abc"]

    def test_empty_text(self):
        assert split_by_newline("", 5) == [""]

    def test_cuts_after_last_newline_in_window(self):
        assert split_by_newline("ab\ncd\nefgh", 6) == ["ab\ncd\n", "efgh"]

    def test_each_line_its_own_chunk(self):
        assert split_by_newline("aaa\nbbb\nccc", 5) == ["aaa\n", "bbb\n", "ccc"]

    def test_long_line_runs_to_next_newline(self):
        assert split_by_newline("abcdefgh\nij", 4) == ["abcdefgh\n", "ij"]

    def test_long_line_without_newline_is_not_cut(self):
        assert split_by_newline("abcdefgh", 3) == ["abcdefgh"]

    def test_trailing_newline(self):
        assert split_by_newline("abcdef\n", 3) == ["abcdef\n"]

    def test_counts_utf8_bytes(self):
        # 5 characters but 7 bytes
        assert split_by_newline("éé\nab", 5) == ["éé\n", "ab"]

    def test_long_multibyte_line_kept_whole(self):
        assert split_by_newline("€€€€\nx", 5) == ["€€€€\n", "x"]

    def test_astral_lines_stay_within_utf16_bound(self):
        text = ("😀" * 3 + "\n") * 4
        chunks = split_by_newline(text, 20)
        assert chunks == ["😀😀😀\n"] * 4
        assert all(len(c.encode("utf-16-le")) // 2 <= 20 for c in chunks)

    def test_lone_surrogate_does_not_break_splitting(self):
        text = "ab\n\ud83dcd\nef"
        chunks = split_by_newline(text, 4)
        assert "".join(chunks) == text
        assert chunks[0] == "ab\n"

    def test_non_positive_size_rejected(self):
        with pytest.raises(ValueError):
            split_by_newline("abc", 0)

    @pytest.mark.parametrize("size", [1, 2, 5, 13, 40])
    def test_concatenation_identity(self, size):
        text = "first line\n\nthird line is longer than most\nx\n" * 3 + "tail"
        chunks = split_by_newline(text, size)
        assert "".join(chunks) == text
        assert all(chunks)

    @pytest.mark.parametrize("size", [4, 8, 12])
    def test_boundary_after_last_newline_in_window(self, size):
        text = "one\ntwo\nthree\nfour\nfive\nsix\n" * 2
        start = 0
        for chunk in split_by_newline(text, size):
            window = text[start:start + size]
            if len(text) - start > size and "\n" in window:
                assert chunk == window[:window.rfind("\n") + 1]
            start += len(chunk)
