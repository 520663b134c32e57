"""
Pacing configuration with enforced bounds.
"""

import math
from dataclasses import dataclass

from .modes import ReadingMode

MIN_WPM = 200
MAX_WPM = 1000
DEFAULT_WPM = 300


def clamp_wpm(value: float) -> int:
    """Clamp *value* into [MIN_WPM, MAX_WPM]; NaN falls back to DEFAULT_WPM."""
    if math.isnan(value):
        return DEFAULT_WPM
    return int(min(max(value, MIN_WPM), MAX_WPM))


@dataclass
class PacingConfig:
    """
    All tuneable parameters for word pacing.

    Attributes:
        words_per_minute:          Target speed, clamped to [200, 1000] on every write.
        pause_on_punctuation:      Hold sentence and clause endings longer.
        show_context:              Hint for the display layer; unused by the engine.
        adaptive_pacing_enabled:   Slow down on complex words.
        adaptive_pacing_intensity: Scale of the complexity slowdown (>= 0).
        mode:                      The last preset applied.
    """

    words_per_minute: int = DEFAULT_WPM
    pause_on_punctuation: bool = True
    show_context: bool = True
    adaptive_pacing_enabled: bool = True
    adaptive_pacing_intensity: float = 1.0
    mode: ReadingMode = ReadingMode.NORMAL

    def __setattr__(self, name, value):
        if name == "words_per_minute":
            value = clamp_wpm(value)
        elif name == "adaptive_pacing_intensity":
            value = max(0.0, float(value))
        super().__setattr__(name, value)

    @property
    def base_interval(self) -> float:
        """Seconds per word at the target speed, before any slowdown."""
        return 60.0 / self.words_per_minute

    def apply_mode(self, mode: ReadingMode) -> None:
        """Overwrite the preset fields from *mode*."""
        settings = mode.settings
        self.mode = mode
        self.words_per_minute = settings.base_wpm
        self.show_context = settings.show_context
        self.adaptive_pacing_enabled = settings.adaptive_pacing_enabled
        self.adaptive_pacing_intensity = settings.adaptive_pacing_intensity
        self.pause_on_punctuation = settings.pause_on_punctuation

    @classmethod
    def from_mode(cls, mode: ReadingMode) -> "PacingConfig":
        config = cls()
        config.apply_mode(mode)
        return config
