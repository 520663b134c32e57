"""
Dialogue span tracking.

Only double quotes count here (straight ``"`` and curly ``“`` / ``”``).
Single quotes are too often apostrophes to mark speech.
"""

from typing import List, Sequence

DIALOGUE_QUOTES = frozenset("\"“”")


def count_quotes(word: str) -> int:
    return sum(1 for ch in word if ch in DIALOGUE_QUOTES)


def compute_dialogue_flags(words: Sequence[str]) -> List[bool]:
    """
    Flag each word that sits inside an open quotation.

    Keeps a running quote count across the sequence; a word is flagged
    when the count up to and including it is odd.
    """
    flags: List[bool] = []
    running = 0
    for word in words:
        running += count_quotes(word)
        flags.append(running % 2 == 1)
    return flags
