"""
Reading-pace engine for word-at-a-time (RSVP) reading.

Sentence and dialogue segmentation, per-word complexity scoring, and a
playback engine that reveals words on a variable, adaptive cadence.
"""

from .playback import (
    Chapter,
    PacingConfig,
    PlaybackState,
    ProgressReport,
    ReadingEngine,
    ReadingMode,
)
from .text import TextAnalysis, analyze_text, analyze_words

__all__ = [
    "Chapter",
    "PacingConfig",
    "PlaybackState",
    "ProgressReport",
    "ReadingEngine",
    "ReadingMode",
    "TextAnalysis",
    "analyze_text",
    "analyze_words",
]
