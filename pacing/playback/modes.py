"""
Reading mode presets: ReadingMode → ModeSettings mappings.

Applying a mode overwrites the pacing fields of a config in one step.
The values below are tuneable defaults.
"""

from dataclasses import dataclass
from enum import Enum


class ReadingMode(Enum):
    """Named pacing presets, slowest last."""

    SKIM = "skim"
    NORMAL = "normal"
    STUDY = "study"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def description(self) -> str:
        return MODE_DESCRIPTIONS[self]

    @property
    def settings(self) -> "ModeSettings":
        return MODE_SETTINGS[self]


@dataclass(frozen=True)
class ModeSettings:
    """
    Pacing parameters for one reading mode.

    ``punctuation_pause_multiplier`` is descriptive only; the interval
    calculator uses fixed sentence and clause pauses for every mode.
    """

    base_wpm: int
    show_context: bool
    adaptive_pacing_enabled: bool
    adaptive_pacing_intensity: float
    pause_on_punctuation: bool
    punctuation_pause_multiplier: float


# -----------------------------------------------------------------
# Default preset table
# -----------------------------------------------------------------

MODE_SETTINGS: dict[ReadingMode, ModeSettings] = {
    ReadingMode.SKIM: ModeSettings(
        base_wpm=600,
        show_context=False,
        adaptive_pacing_enabled=False,
        adaptive_pacing_intensity=0.0,
        pause_on_punctuation=True,
        punctuation_pause_multiplier=1.2,
    ),
    ReadingMode.NORMAL: ModeSettings(
        base_wpm=350,
        show_context=True,
        adaptive_pacing_enabled=True,
        adaptive_pacing_intensity=1.0,
        pause_on_punctuation=True,
        punctuation_pause_multiplier=1.5,
    ),
    ReadingMode.STUDY: ModeSettings(
        base_wpm=250,
        show_context=True,
        adaptive_pacing_enabled=True,
        adaptive_pacing_intensity=1.5,  # stronger slowdown on hard words
        pause_on_punctuation=True,
        punctuation_pause_multiplier=2.0,
    ),
}

MODE_DESCRIPTIONS: dict[ReadingMode, str] = {
    ReadingMode.SKIM: "Fast pace, minimal context",
    ReadingMode.NORMAL: "Balanced speed and comprehension",
    ReadingMode.STUDY: "Slower, with full context",
}


def parse_mode(name: str) -> ReadingMode:
    """
    Look up a mode by name, case-insensitively.

    Raises:
        ValueError: If *name* is not a known mode.
    """
    try:
        return ReadingMode(name.strip().lower())
    except ValueError:
        known = ", ".join(m.value for m in ReadingMode)
        raise ValueError(f"Unknown reading mode '{name}'. Choose from: {known}")
