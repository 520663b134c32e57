"""
Offline playback simulation.

Runs the engine on a virtual clock and records when each word appears
and how long it stays, without waiting in real time.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .config import PacingConfig
from .engine import ReadingEngine
from .interval import IntervalBreakdown
from .models import ProgressReport
from .timer import VirtualScheduler


@dataclass(frozen=True)
class TimelineEntry:
    """One word reveal: when it appeared and how long it was shown."""

    offset: float
    index: int
    word: str
    dwell: IntervalBreakdown


@dataclass
class Timeline:
    """Recorded reveals plus the session report that closed the run."""

    entries: List[TimelineEntry] = field(default_factory=list)
    report: Optional[ProgressReport] = None

    @property
    def total_seconds(self) -> float:
        if not self.entries:
            return 0.0
        last = self.entries[-1]
        return last.offset + last.dwell.seconds

    @property
    def effective_wpm(self) -> float:
        if self.total_seconds <= 0:
            return 0.0
        return len(self.entries) / self.total_seconds * 60.0

    def summary(self) -> str:
        return (
            f"{'=' * 60}\n"
            f"  Words:         {len(self.entries)}\n"
            f"  Reading time:  {self.total_seconds:.1f}s "
            f"({self.total_seconds / 60:.1f} min)\n"
            f"  Effective WPM: {self.effective_wpm:.0f}\n"
            f"{'=' * 60}"
        )


def simulate_timeline(
    words: Iterable[str],
    config: Optional[PacingConfig] = None,
    start_index: int = 0,
    limit: Optional[int] = None,
) -> Timeline:
    """
    Play *words* to the end (or for *limit* words) on a virtual clock.

    Args:
        words:       Tokenized text.
        config:      Pacing configuration; defaults apply when ``None``.
        start_index: Word to start from (clamped like a seek).
        limit:       Stop after this many reveals.

    Returns:
        :class:`Timeline` with one entry per word shown.
    """
    clock = VirtualScheduler()
    timeline = Timeline()
    engine = ReadingEngine(clock, config)
    engine.load_words(words)
    engine.seek(start_index)

    t0 = clock.now()

    def record() -> None:
        timeline.entries.append(
            TimelineEntry(
                offset=clock.now() - t0,
                index=engine.current_index,
                word=engine.current_word,
                dwell=engine.last_interval,
            )
        )

    engine.play()
    while engine.is_playing:
        if limit is not None and len(timeline.entries) >= limit:
            engine.pause()
            break
        record()
        clock.run_until_idle(max_callbacks=1)

    timeline.report = engine.last_report
    return timeline


def preview_timeline(timeline: Timeline, max_word_width: int = 24) -> str:
    """
    Format a timeline as a human-readable table.

    Example output::

          0.000s  [    0]  It                        0.400s  ramp=2.00x
          0.400s  [    1]  was                       0.320s  ramp=1.60x
          ...
    """
    lines: List[str] = []
    for e in timeline.entries:
        d = e.dwell
        tags = []
        if d.ramp_factor != 1.0:
            tags.append(f"ramp={d.ramp_factor:.2f}x")
        if d.adaptive_factor != 1.0:
            tags.append(f"adaptive={d.adaptive_factor:.2f}x")
        if d.punctuation_factor != 1.0:
            tags.append(f"punct={d.punctuation_factor:.1f}x")
        if d.capped:
            tags.append("capped")

        word = e.word[:max_word_width]
        lines.append(
            f"{e.offset:9.3f}s  [{e.index:5d}]  {word:<{max_word_width}}  "
            f"{d.seconds:.3f}s  {' '.join(tags)}".rstrip()
        )
    return "\n".join(lines)
