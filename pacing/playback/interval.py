"""
Dwell-time calculation for the word on screen.

Factors are applied multiplicatively in a fixed order (ramp-up,
adaptive pacing, punctuation), then the result is capped at four times
the base interval.  Every factor is >= 1.0, so the base interval is
also the floor.
"""

from dataclasses import dataclass

from pacing.text.sentences import SENTENCE_TERMINATORS, strip_closing_marks

from .config import PacingConfig

RAMP_UP_LENGTH = 5

# Words remaining in the ramp → slowdown for the word on screen
RAMP_UP_MULTIPLIERS: dict[int, float] = {
    5: 2.00,
    4: 1.60,
    3: 1.35,
    2: 1.15,
    1: 1.05,
}

SENTENCE_PAUSE_MULTIPLIER = 2.0
CLAUSE_PAUSE_MULTIPLIER = 1.5

MAX_INTERVAL_FACTOR = 4.0


@dataclass(frozen=True)
class IntervalBreakdown:
    """
    Result of one dwell calculation.

    ``seconds`` is what the scheduler waits; the factors record how it
    was reached.  ``ramp_remaining`` is the ramp counter to carry into
    the next word.
    """

    base: float
    ramp_factor: float
    adaptive_factor: float
    punctuation_factor: float
    seconds: float
    ramp_remaining: int

    @property
    def capped(self) -> bool:
        raw = self.base * self.ramp_factor * self.adaptive_factor * self.punctuation_factor
        return raw > self.seconds


def ramp_up_multiplier(remaining: int) -> float:
    return RAMP_UP_MULTIPLIERS.get(remaining, 1.0)


def punctuation_multiplier(word: str) -> float:
    """Pause factor for the punctuation a word ends with."""
    trimmed = strip_closing_marks(word)
    if trimmed.endswith(SENTENCE_TERMINATORS):
        return SENTENCE_PAUSE_MULTIPLIER
    if trimmed.endswith((",", ";", ":")):
        return CLAUSE_PAUSE_MULTIPLIER
    return 1.0


def compute_interval(
    word: str,
    complexity: float,
    config: PacingConfig,
    ramp_remaining: int = 0,
) -> IntervalBreakdown:
    """
    Compute how long *word* stays on screen.

    Args:
        word:           The word currently displayed.
        complexity:     Its complexity score in [0, 1].
        config:         Pacing configuration.
        ramp_remaining: Words left in the ramp-up (0 when inactive).

    Returns:
        :class:`IntervalBreakdown` with the dwell in seconds and the
        decremented ramp counter.
    """
    base = config.base_interval

    ramp = 1.0
    if ramp_remaining > 0:
        ramp = ramp_up_multiplier(ramp_remaining)
        ramp_remaining -= 1

    adaptive = 1.0
    if config.adaptive_pacing_enabled:
        adaptive = 1.0 + complexity * config.adaptive_pacing_intensity

    punctuation = 1.0
    if config.pause_on_punctuation:
        punctuation = punctuation_multiplier(word)

    interval = base * ramp * adaptive * punctuation
    return IntervalBreakdown(
        base=base,
        ramp_factor=ramp,
        adaptive_factor=adaptive,
        punctuation_factor=punctuation,
        seconds=min(interval, base * MAX_INTERVAL_FACTOR),
        ramp_remaining=ramp_remaining,
    )
