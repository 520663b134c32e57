"""
Word tokenization for RSVP playback.

Splits raw text on whitespace and newlines.  Punctuation and case are
left attached to the words so later stages can read them.
"""

from typing import Iterable, List


def tokenize(text: str) -> List[str]:
    """
    Split *text* into a flat word sequence.

    Runs of spaces, tabs and newlines all count as one separator, and
    empty tokens are dropped.
    """
    if not text:
        return []
    return text.split()


def normalize_words(words: Iterable[str]) -> List[str]:
    """
    Copy a pre-tokenized word list, dropping empty entries.

    Used when a caller already segmented the text (one entry per word).
    Page or section boundaries from the source are not kept.
    """
    return [w for w in words if w]
