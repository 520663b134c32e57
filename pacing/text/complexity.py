"""
Per-word complexity scoring for adaptive pacing.

Each factor adds a fixed weight; the sum is capped at 1.0.  Length
brackets are exclusive, so only the highest matching one applies.
"""

from typing import List, Sequence

# (min length exclusive, weight), checked longest first
LENGTH_WEIGHTS = (
    (12, 0.40),
    (8, 0.25),
    (6, 0.10),
)

SENTENCE_START_WEIGHT = 0.20
DIALOGUE_WEIGHT = 0.10
PUNCTUATION_WEIGHT = 0.15
CAPITALIZED_WEIGHT = 0.10

MAX_SCORE = 1.0

# Clause punctuation that slows reading wherever it appears nearby
HEAVY_PUNCTUATION = (";", ":", "—", "–")


def length_weight(word: str) -> float:
    length = len(word)
    for threshold, weight in LENGTH_WEIGHTS:
        if length > threshold:
            return weight
    return 0.0


def has_complex_punctuation(words: Sequence[str], index: int) -> bool:
    """
    Check the word at *index* and its immediate neighbours.

    Semicolons, colons and dashes count anywhere in the window.  A comma
    only counts on a neighbour, not on the word itself.
    """
    lo = max(0, index - 1)
    hi = min(len(words) - 1, index + 1)
    for i in range(lo, hi + 1):
        word = words[i]
        if any(mark in word for mark in HEAVY_PUNCTUATION):
            return True
        if i != index and "," in word:
            return True
    return False


def score_word(
    words: Sequence[str],
    index: int,
    sentence_mask: Sequence[bool],
    dialogue_flags: Sequence[bool],
) -> float:
    """Score the word at *index* in [0, 1]."""
    word = words[index]
    score = length_weight(word)

    is_start = sentence_mask[index]
    if is_start:
        score += SENTENCE_START_WEIGHT

    if dialogue_flags[index]:
        score += DIALOGUE_WEIGHT

    if has_complex_punctuation(words, index):
        score += PUNCTUATION_WEIGHT

    # Capitalized mid-sentence usually means a proper noun
    if index > 0 and not is_start and word[:1].isupper():
        score += CAPITALIZED_WEIGHT

    return min(score, MAX_SCORE)


def compute_complexity(
    words: Sequence[str],
    sentence_mask: Sequence[bool],
    dialogue_flags: Sequence[bool],
) -> List[float]:
    return [
        score_word(words, i, sentence_mask, dialogue_flags)
        for i in range(len(words))
    ]
