"""Text segmentation and complexity scoring for paced reading."""

from .analysis import TextAnalysis, analyze_text, analyze_words
from .complexity import compute_complexity, score_word
from .dialogue import compute_dialogue_flags
from .sentences import (
    CLOSING_MARKS,
    detect_sentence_starts,
    is_sentence_ending,
    strip_closing_marks,
)
from .tokenizer import normalize_words, tokenize

__all__ = [
    "TextAnalysis",
    "analyze_text",
    "analyze_words",
    "compute_complexity",
    "score_word",
    "compute_dialogue_flags",
    "CLOSING_MARKS",
    "detect_sentence_starts",
    "is_sentence_ending",
    "strip_closing_marks",
    "normalize_words",
    "tokenize",
]
