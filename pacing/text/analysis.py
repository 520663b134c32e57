"""
Derived text structures for one loaded word sequence.

Everything is computed in full on construction and never updated in
place; loading new text means building a new :class:`TextAnalysis`.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Tuple

from .complexity import compute_complexity
from .dialogue import compute_dialogue_flags
from .sentences import detect_sentence_starts, sentence_start_mask
from .tokenizer import normalize_words, tokenize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextAnalysis:
    """
    A word sequence together with its sentence, dialogue and complexity
    annotations.

    Attributes:
        words:           The words, in reading order.
        sentence_starts: Strictly increasing offsets of sentence starts.
        sentence_mask:   ``True`` at each sentence-start offset.
        dialogue_flags:  ``True`` for words inside an open quotation.
        complexity:      Per-word scores in [0, 1].
    """

    words: Tuple[str, ...] = ()
    sentence_starts: Tuple[int, ...] = ()
    sentence_mask: Tuple[bool, ...] = ()
    dialogue_flags: Tuple[bool, ...] = ()
    complexity: Tuple[float, ...] = ()

    def __len__(self) -> int:
        return len(self.words)

    @property
    def is_empty(self) -> bool:
        return not self.words


def analyze_words(words: Iterable[str]) -> TextAnalysis:
    """Build the full analysis for an already tokenized word list."""
    seq = tuple(normalize_words(words))
    starts = detect_sentence_starts(seq)
    mask = sentence_start_mask(starts, len(seq))
    dialogue = compute_dialogue_flags(seq)
    scores = compute_complexity(seq, mask, dialogue)

    logger.debug(
        "Analysed %d words: %d sentences, %d in dialogue",
        len(seq),
        len(starts),
        sum(dialogue),
    )

    return TextAnalysis(
        words=seq,
        sentence_starts=tuple(starts),
        sentence_mask=tuple(mask),
        dialogue_flags=tuple(dialogue),
        complexity=tuple(scores),
    )


def analyze_text(text: str) -> TextAnalysis:
    """Tokenize raw *text* and analyse it."""
    return analyze_words(tokenize(text))
