"""
Playback engine: turns a word sequence into timed word reveals.

The engine owns the loaded text, the reading position and the play
flag.  While playing it keeps exactly one single-shot callback queued
on its scheduler, timed to the dwell of the word on screen.  Every
command that moves the position or stops playback cancels that
callback before touching state.

Usage::

    from pacing import ReadingEngine, ReadingMode
    from pacing.playback.timer import VirtualScheduler

    clock = VirtualScheduler()
    engine = ReadingEngine(clock)
    engine.load("It was a bright cold day in April.")
    engine.apply_mode(ReadingMode.STUDY)
    engine.play()
    clock.run_until_idle()
    print(engine.last_report)
"""

import logging
import math
from bisect import bisect_right
from functools import partial
from typing import Callable, Iterable, List, Optional, Tuple

from pacing.text.analysis import TextAnalysis, analyze_text, analyze_words

from .config import PacingConfig
from .interval import RAMP_UP_LENGTH, IntervalBreakdown, compute_interval
from .models import Chapter, PlaybackState, ProgressReport, flatten_chapters
from .modes import ReadingMode
from .timer import AsyncioScheduler, Scheduler, TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_SKIP = 10
CONTEXT_RADIUS = 5

ProgressCallback = Callable[[int, float, int], None]
Listener = Callable[["ReadingEngine"], None]


class ReadingEngine:
    """
    Word-by-word reading engine with adaptive pacing.

    Commands never raise: out-of-range seeks are clamped and commands
    that make no sense for the current content are ignored.

    Args:
        scheduler:   Source of delayed callbacks and the current time.
                     Defaults to the running asyncio loop.
        config:      Pacing configuration (a default one is created).
        on_progress: Called as ``(word_index, session_seconds, words_read)``
                     each time a reading session closes.
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        config: Optional[PacingConfig] = None,
        on_progress: Optional[ProgressCallback] = None,
    ):
        self.scheduler = scheduler or AsyncioScheduler()
        self.config = config or PacingConfig()
        self.on_progress = on_progress

        self._analysis = TextAnalysis()
        self._index = 0
        self._current_word = ""
        self._playing = False
        self._ramp_remaining = 0

        self._session_start: Optional[float] = None
        self._words_in_session = 0

        self._pending: Optional[TimerHandle] = None
        self._generation = 0

        self._listeners: List[Listener] = []
        self.last_report: Optional[ProgressReport] = None
        self.last_interval: Optional[IntervalBreakdown] = None

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """
        Call *listener* with the engine after every state change.

        Returns:
            A callable that unregisters the listener.
        """
        self._listeners.append(listener)
        return partial(self.remove_listener, listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, text: str) -> None:
        """Load raw text, splitting it on whitespace."""
        self._install(analyze_text(text))

    def load_words(self, words: Iterable[str]) -> None:
        """Load an already tokenized word list."""
        self._install(analyze_words(words))

    def _install(self, analysis: TextAnalysis) -> None:
        self._stop()
        self._analysis = analysis
        self._index = 0
        self._current_word = analysis.words[0] if analysis.words else ""
        self._ramp_remaining = 0
        self.last_interval = None
        logger.info(
            "Loaded %d words in %d sentences",
            len(analysis),
            len(analysis.sentence_starts),
        )
        self._notify()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def words_per_minute(self) -> int:
        return self.config.words_per_minute

    @words_per_minute.setter
    def words_per_minute(self, value: int) -> None:
        # The word on screen keeps its dwell; the new speed applies from
        # the next scheduled word.
        self.config.words_per_minute = value
        self._notify()

    @property
    def mode(self) -> ReadingMode:
        return self.config.mode

    def apply_mode(self, mode: ReadingMode) -> None:
        """Apply a reading-mode preset without changing play state."""
        self.config.apply_mode(mode)
        logger.debug("Applied %s mode (%d wpm)", mode.display_name, self.words_per_minute)
        self._notify()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def analysis(self) -> TextAnalysis:
        return self._analysis

    @property
    def words(self) -> Tuple[str, ...]:
        return self._analysis.words

    @property
    def current_word(self) -> str:
        return self._current_word

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def total_words(self) -> int:
        return len(self._analysis)

    @property
    def has_content(self) -> bool:
        return not self._analysis.is_empty

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def is_at_start(self) -> bool:
        return self._index == 0

    @property
    def is_at_end(self) -> bool:
        return self._index >= self.total_words

    @property
    def progress(self) -> float:
        if not self.total_words:
            return 0.0
        return self._index / self.total_words

    @property
    def state(self) -> PlaybackState:
        if not self.has_content:
            return PlaybackState.IDLE
        if self._playing:
            return PlaybackState.PLAYING
        if self.is_at_end:
            return PlaybackState.ENDED
        return PlaybackState.PAUSED

    @property
    def ramp_up_remaining(self) -> int:
        return self._ramp_remaining

    @property
    def session_open(self) -> bool:
        return self._session_start is not None

    # ------------------------------------------------------------------
    # Sentence context
    # ------------------------------------------------------------------

    @property
    def sentence_starts(self) -> Tuple[int, ...]:
        return self._analysis.sentence_starts

    @property
    def total_sentences(self) -> int:
        return len(self._analysis.sentence_starts)

    @property
    def current_sentence_index(self) -> int:
        """Index of the last sentence starting at or before the cursor."""
        starts = self._analysis.sentence_starts
        if not starts:
            return 0
        return max(0, bisect_right(starts, self._index) - 1)

    @property
    def current_sentence_start(self) -> int:
        starts = self._analysis.sentence_starts
        if not starts:
            return 0
        return starts[self.current_sentence_index]

    @property
    def current_sentence_end(self) -> int:
        """Exclusive end offset of the current sentence."""
        starts = self._analysis.sentence_starts
        nxt = self.current_sentence_index + 1
        if nxt < len(starts):
            return starts[nxt]
        return self.total_words

    @property
    def current_sentence_words(self) -> Tuple[str, ...]:
        if not self.has_content:
            return ()
        return self.words[self.current_sentence_start : self.current_sentence_end]

    @property
    def current_word_index_in_sentence(self) -> int:
        return self._index - self.current_sentence_start

    def context_window(self, radius: int = CONTEXT_RADIUS) -> str:
        """Words around the cursor, e.g. for a bookmark snippet."""
        lo = max(0, self._index - radius)
        hi = min(self.total_words, self._index + radius)
        return " ".join(self.words[lo:hi])

    def position_label(self) -> str:
        percent = int(self.progress * 100)
        return f"{self._index + 1} / {self.total_words} ({percent}%)"

    # ------------------------------------------------------------------
    # Play / pause
    # ------------------------------------------------------------------

    def play(self) -> None:
        """Start a new session from the current word, with ramp-up."""
        if not self.has_content or self.is_at_end or self._playing:
            return

        self._cancel_pending()
        self._playing = True
        self._session_start = self.scheduler.now()
        self._words_in_session = 0
        self._ramp_remaining = RAMP_UP_LENGTH
        logger.debug("Play from word %d at %d wpm", self._index, self.words_per_minute)
        self._schedule_current()
        self._notify()

    def pause(self) -> None:
        """Stop advancing and close the open session, if any."""
        self._stop()
        self._notify()

    def toggle(self) -> None:
        if self._playing:
            self.pause()
        else:
            self.play()

    def _stop(self) -> None:
        self._cancel_pending()
        self._playing = False
        self._close_session()

    def _close_session(self) -> None:
        if self._session_start is None:
            return

        report = ProgressReport(
            word_index=self._index,
            session_seconds=self.scheduler.now() - self._session_start,
            words_read=self._words_in_session,
        )
        self._session_start = None
        self._words_in_session = 0
        self.last_report = report

        logger.info(
            "Session closed at word %d: %d words in %.1fs",
            report.word_index,
            report.words_read,
            report.session_seconds,
        )
        if self.on_progress is not None:
            self.on_progress(report.word_index, report.session_seconds, report.words_read)

    # ------------------------------------------------------------------
    # Timed advance
    # ------------------------------------------------------------------

    def _cancel_pending(self) -> None:
        # Bumping the generation also disarms a callback the host failed
        # to cancel.
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _schedule_current(self) -> None:
        self._cancel_pending()
        breakdown = compute_interval(
            self._current_word,
            self._analysis.complexity[self._index],
            self.config,
            self._ramp_remaining,
        )
        self._ramp_remaining = breakdown.ramp_remaining
        self.last_interval = breakdown
        self._pending = self.scheduler.call_later(
            breakdown.seconds,
            partial(self._advance, self._generation),
        )

    def _advance(self, generation: int) -> None:
        if generation != self._generation or not self._playing:
            return

        self._pending = None
        self._words_in_session += 1
        self._index += 1

        if self._index < self.total_words:
            self._current_word = self.words[self._index]
            self._schedule_current()
            self._notify()
        else:
            self._current_word = ""
            logger.debug("Reached end of text after %d words", self._words_in_session)
            self.pause()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def seek(self, index: int) -> None:
        """Jump to *index*, clamped to the loaded words."""
        if not self.has_content:
            return

        if self._playing:
            self._cancel_pending()

        self._index = min(max(index, 0), self.total_words - 1)
        self._current_word = self.words[self._index]

        if self._playing:
            self._schedule_current()
        self._notify()

    def seek_to_progress(self, fraction: float) -> None:
        """Jump to a fraction of the text, 0.0 to 1.0."""
        if not self.has_content or math.isnan(fraction):
            return
        fraction = min(max(fraction, 0.0), 1.0)
        self.seek(math.floor(fraction * self.total_words))

    def skip_forward(self, count: int = DEFAULT_SKIP) -> None:
        self.seek(self._index + count)

    def skip_backward(self, count: int = DEFAULT_SKIP) -> None:
        self.seek(self._index - count)

    def next_sentence(self) -> None:
        """Jump to the next sentence, or the last word if there is none."""
        starts = self._analysis.sentence_starts
        if not starts:
            return

        nxt = self.current_sentence_index + 1
        if nxt < len(starts):
            self.seek(starts[nxt])
        else:
            self.seek(self.total_words - 1)

    def previous_sentence(self) -> None:
        """
        Go back to the start of the current sentence, or to the previous
        sentence if already at the start.
        """
        starts = self._analysis.sentence_starts
        if not starts or self._index == 0:
            return

        current = self.current_sentence_index
        start = starts[current]
        if self._index == start and current > 0:
            self.seek(starts[current - 1])
        else:
            self.seek(start)

    def replay_current_sentence(self) -> None:
        """Restart the current sentence with ramp-up and keep playing."""
        self.seek(self.current_sentence_start)
        self._ramp_remaining = RAMP_UP_LENGTH
        if not self._playing:
            self.play()

    def replay_previous_sentence(self) -> None:
        """Step back a sentence with ramp-up and keep playing."""
        self.previous_sentence()
        self._ramp_remaining = RAMP_UP_LENGTH
        if not self._playing:
            self.play()

    def restart(self) -> None:
        self.seek(0)

    # ------------------------------------------------------------------
    # Chapters
    # ------------------------------------------------------------------

    def seek_to_chapter(self, chapter: Chapter) -> None:
        self.seek(chapter.start_word_index)

    def current_chapter(self, chapters: List[Chapter]) -> Optional[Chapter]:
        """The last chapter (in reading order) starting at or before the cursor."""
        found = None
        for chapter in flatten_chapters(chapters):
            if chapter.start_word_index <= self._index:
                found = chapter
        return found

    def __repr__(self) -> str:
        return (
            f"ReadingEngine({self.state.name}, word={self._index}/{self.total_words}, "
            f"wpm={self.words_per_minute}, mode={self.mode.value})"
        )
