"""
Tests for word-frequency analysis.
"""

import pytest

from textmetrics.frequency import STOP_WORDS, analyze, tokenize


class TestTokenize:
    def test_lowercases_and_strips_punctuation(self):
        assert tokenize("Hello, World! It's fine.") == ["hello", "world", "its", "fine"]

    def test_drops_single_characters(self):
        assert tokenize("a b c dd 7 42") == ["dd", "42"]

    def test_keeps_accented_words(self):
        assert tokenize("Café déjà vu") == ["café", "déjà", "vu"]


class TestAnalyze:
    def test_stop_words_filtered(self):
        analysis = analyze("the the cat cat cat", filter_stop_words=True)

        assert analysis.top_words[0].word == "cat"
        assert analysis.top_words[0].count == 3
        assert analysis.total_unique_words == 1
        assert analysis.stop_words_filtered is True

    def test_stop_words_kept(self):
        analysis = analyze("the the cat cat cat", filter_stop_words=False)

        assert [entry.word for entry in analysis.top_words] == ["cat", "the"]
        assert analysis.top_words[1].count == 2
        assert analysis.total_unique_words == 2
        assert analysis.most_repeated_word.word == "cat"

    def test_percentage_uses_filtered_total(self):
        analysis = analyze("the cat dog cat", filter_stop_words=True)

        cat = analysis.top_words[0]
        assert cat.word == "cat"
        assert cat.percentage == pytest.approx(200 / 3)

    def test_percentages_sum_to_one_hundred(self):
        analysis = analyze("alpha beta beta gamma gamma gamma", filter_stop_words=False)

        assert sum(entry.percentage for entry in analysis.top_words) == pytest.approx(100.0)

    def test_ties_keep_first_occurrence_order(self):
        analysis = analyze("beta alpha beta alpha gamma", filter_stop_words=False)

        assert [entry.word for entry in analysis.top_words] == ["beta", "alpha", "gamma"]

    def test_top_words_limited_to_fifteen(self):
        words = " ".join(f"word{index:02d}" for index in range(20))
        analysis = analyze(words, filter_stop_words=False)

        assert len(analysis.top_words) == 15
        assert analysis.total_unique_words == 20

    def test_punctuation_variants_merge(self):
        analysis = analyze("Hello, hello! HELLO.", filter_stop_words=True)

        assert analysis.top_words[0].word == "hello"
        assert analysis.top_words[0].count == 3
        assert analysis.top_words[0].percentage == pytest.approx(100.0)

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    @pytest.mark.parametrize("flag", [True, False])
    def test_empty_input(self, text, flag):
        analysis = analyze(text, filter_stop_words=flag)

        assert analysis.top_words == []
        assert analysis.total_unique_words == 0
        assert analysis.most_repeated_word is None
        assert analysis.stop_words_filtered is flag

    def test_only_stop_words(self):
        analysis = analyze("the and of with", filter_stop_words=True)

        assert analysis.top_words == []
        assert analysis.most_repeated_word is None
        assert analysis.total_unique_words == 0

    def test_analysis_is_repeatable(self):
        text = "Repeat repeat the analysis, the analysis repeats."

        assert analyze(text) == analyze(text)

    def test_stop_word_list_covers_function_words(self):
        for word in ["the", "and", "is", "they", "with", "not"]:
            assert word in STOP_WORDS

    def test_to_dict_uses_camel_case(self):
        payload = analyze("cat cat dog", filter_stop_words=False).to_dict()

        assert payload["totalUniqueWords"] == 2
        assert payload["mostRepeatedWord"]["word"] == "cat"
        assert payload["stopWordsFiltered"] is False
        assert payload["topWords"][1] == {"word": "dog", "count": 1, "percentage": pytest.approx(100 / 3)}
