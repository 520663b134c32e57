"""
Sentence segmentation over a word sequence.

A single left-to-right pass marks the first word of every sentence.
A word ends a sentence when, after stripping closing quotes and
brackets from its right end, it ends in ``.``, ``?`` or ``!``.
"""

from typing import List, Sequence

# Closing marks stripped before checking terminal punctuation:
# " ' “ ” ‘ ’ » « ) ] }
CLOSING_MARKS = "\"'“”‘’»«)]}"

SENTENCE_TERMINATORS = (".", "?", "!")


def strip_closing_marks(word: str) -> str:
    """Remove trailing quote and bracket characters from *word*."""
    return word.rstrip(CLOSING_MARKS)


def is_sentence_ending(word: str) -> bool:
    return strip_closing_marks(word).endswith(SENTENCE_TERMINATORS)


def detect_sentence_starts(words: Sequence[str]) -> List[int]:
    """
    Return the sorted word offsets that begin a sentence.

    Index 0 always starts a sentence when *words* is non-empty.  The
    last word never marks a new start, since nothing follows it.
    """
    if not words:
        return []

    starts = [0]
    for i in range(len(words) - 1):
        if is_sentence_ending(words[i]):
            starts.append(i + 1)
    return starts


def sentence_start_mask(starts: Sequence[int], word_count: int) -> List[bool]:
    """Expand sentence offsets into one boolean per word."""
    mask = [False] * word_count
    for index in starts:
        mask[index] = True
    return mask
