"""Data models shared by the extractors, the counter and the analyzer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class CountResult:
    """Word and character totals for a block of text."""

    word_count: int
    char_count_excluding_spaces: int
    char_count_including_spaces: int


@dataclass(frozen=True)
class WordFrequencyEntry:
    word: str
    count: int
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {"word": self.word, "count": self.count, "percentage": self.percentage}


@dataclass(frozen=True)
class FrequencyAnalysis:
    """Top words of a text, most frequent first."""

    top_words: List[WordFrequencyEntry]
    total_unique_words: int
    most_repeated_word: Optional[WordFrequencyEntry]
    stop_words_filtered: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "topWords": [entry.to_dict() for entry in self.top_words],
            "totalUniqueWords": self.total_unique_words,
            "mostRepeatedWord": (
                self.most_repeated_word.to_dict() if self.most_repeated_word else None
            ),
            "stopWordsFiltered": self.stop_words_filtered,
        }


@dataclass(frozen=True)
class CountResults:
    """Results object handed back to presentation layers."""

    counts: CountResult
    repeated_words_analysis: Optional[FrequencyAnalysis] = None

    @property
    def word_count(self) -> int:
        return self.counts.word_count

    @property
    def char_count_excluding_spaces(self) -> int:
        return self.counts.char_count_excluding_spaces

    @property
    def char_count_including_spaces(self) -> int:
        return self.counts.char_count_including_spaces

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "wordCount": self.word_count,
            "charCountExcludingSpaces": self.char_count_excluding_spaces,
            "charCountIncludingSpaces": self.char_count_including_spaces,
        }
        if self.repeated_words_analysis is not None:
            payload["repeatedWordsAnalysis"] = self.repeated_words_analysis.to_dict()
        return payload


class ErrorKind(str, Enum):
    """Reason a single transport attempt did not produce usable HTML."""

    NETWORK = "network"
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    INVALID_RESPONSE = "invalid_response"
    EMPTY_CONTENT = "empty_content"


@dataclass
class FetchAttemptOutcome:
    """Result of one transport attempt inside the fetch orchestrator."""

    transport_id: str
    success: bool
    content: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    detail: Optional[str] = None
    status_code: Optional[int] = None
