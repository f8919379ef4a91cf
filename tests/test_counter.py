"""
Tests for word and character counting.
"""

from textmetrics.counter import count


class TestCount:
    def test_empty_text_has_no_result(self):
        assert count("") is None

    def test_whitespace_only_has_no_result(self):
        assert count("   ") is None
        assert count("\n\t \r\n") is None

    def test_multiple_spaces_do_not_create_tokens(self):
        result = count("a b  c")

        assert result.word_count == 3

    def test_leading_and_trailing_whitespace_ignored_for_words(self):
        text = "  hello world \n"
        result = count(text)

        assert result.word_count == 2
        assert result.char_count_including_spaces == len(text)
        assert result.char_count_excluding_spaces == 10

    def test_line_breaks_and_tabs_split_words(self):
        result = count("one\ttwo\nthree\r\nfour")

        assert result.word_count == 4
        assert result.char_count_excluding_spaces == len("onetwothreefour")

    def test_unicode_whitespace_is_excluded(self):
        text = "a\u00a0b\u2003c"
        result = count(text)

        assert result.word_count == 3
        assert result.char_count_excluding_spaces == 3
        assert result.char_count_including_spaces == 5

    def test_excluding_never_exceeds_including(self):
        for text in ["x", "a b", "  lots   of   space  ", "no-spaces-here", "tab\tand\nnewline"]:
            result = count(text)
            assert result.char_count_excluding_spaces <= result.char_count_including_spaces
            assert result.char_count_including_spaces == len(text)

    def test_count_is_repeatable(self):
        text = "The same text, counted twice."

        assert count(text) == count(text)
