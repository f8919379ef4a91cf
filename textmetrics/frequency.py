"""Word-frequency analysis with optional stop-word filtering."""

from __future__ import annotations

import re
from collections import Counter
from typing import List

from .models import FrequencyAnalysis, WordFrequencyEntry

PUNCTUATION_PATTERN = re.compile(r"[^\w\s]")
TOP_WORDS_LIMIT = 15
MIN_TOKEN_LENGTH = 2

STOP_WORDS = frozenset(
    {
        "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
        "is", "are", "was", "were", "be", "been", "have", "has", "had", "do", "does",
        "did", "will", "would", "could", "should", "may", "might", "must", "can", "a",
        "an", "this", "that", "these", "those", "i", "you", "he", "she", "it", "we",
        "they", "me", "him", "her", "us", "them", "my", "your", "his", "its", "our",
        "their", "myself", "yourself", "himself", "herself", "itself", "ourselves",
        "yourselves", "themselves", "what", "which", "who", "when", "where", "why",
        "how", "all", "any", "both", "each", "few", "more", "most", "other", "some",
        "such", "no", "nor", "not", "only", "own", "same", "so", "than", "too", "very",
    }
)


def tokenize(text: str) -> List[str]:
    """Lowercase, drop punctuation and return tokens longer than one character."""
    cleaned = PUNCTUATION_PATTERN.sub("", text.lower())
    return [token for token in cleaned.split() if len(token) >= MIN_TOKEN_LENGTH]


def analyze(
    text: str,
    filter_stop_words: bool = True,
    limit: int = TOP_WORDS_LIMIT,
) -> FrequencyAnalysis:
    """Compute the word-frequency distribution of ``text``."""
    if not text or not text.strip():
        return FrequencyAnalysis(
            top_words=[],
            total_unique_words=0,
            most_repeated_word=None,
            stop_words_filtered=filter_stop_words,
        )

    tokens = tokenize(text)
    if filter_stop_words:
        tokens = [token for token in tokens if token not in STOP_WORDS]

    frequency = Counter(tokens)
    total = len(tokens)
    # sorted() is stable and Counter keeps first-occurrence order, so ties
    # stay in the order the words first appeared.
    ranked = sorted(frequency.items(), key=lambda item: item[1], reverse=True)
    entries = [
        WordFrequencyEntry(word=word, count=occurrences, percentage=occurrences / total * 100)
        for word, occurrences in ranked
    ]
    return FrequencyAnalysis(
        top_words=entries[:limit],
        total_unique_words=len(frequency),
        most_repeated_word=entries[0] if entries else None,
        stop_words_filtered=filter_stop_words,
    )
