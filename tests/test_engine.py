"""
Tests for the playback engine state machine, run on a virtual clock.
"""

import asyncio

import pytest

from pacing.playback.config import PacingConfig
from pacing.playback.engine import ReadingEngine
from pacing.playback.models import Chapter, PlaybackState
from pacing.playback.modes import ReadingMode
from pacing.playback.timer import AsyncioScheduler, VirtualScheduler

FIVE = "one two three four five"


class _IgnoredCancel:
    def cancel(self):
        pass


class NonCancellingScheduler(VirtualScheduler):
    """A host whose handles do not actually cancel anything."""

    def call_later(self, delay, callback):
        super().call_later(delay, callback)
        return _IgnoredCancel()


class TestLoad:
    def test_initial_state(self, engine):
        assert engine.state is PlaybackState.IDLE
        assert engine.current_word == ""
        assert engine.progress == 0.0
        assert not engine.has_content

    def test_load_text(self, engine):
        engine.load(FIVE)
        assert engine.state is PlaybackState.PAUSED
        assert engine.total_words == 5
        assert engine.current_word == "one"
        assert engine.current_index == 0
        assert engine.is_at_start

    def test_load_words(self, engine, sentences):
        engine.load_words(sentences)
        assert engine.words == tuple(sentences)
        assert engine.sentence_starts == (0, 2, 4)
        assert engine.total_sentences == 3

    def test_load_empty(self, engine):
        engine.load("")
        assert engine.state is PlaybackState.IDLE
        engine.play()
        engine.seek(3)
        engine.next_sentence()
        engine.previous_sentence()
        assert engine.current_index == 0
        assert not engine.is_playing

    def test_reload_while_playing_closes_session(self, engine, clock, reports):
        engine.load(FIVE)
        engine.play()
        clock.advance(0.5)
        engine.load("new text here")
        assert reports == [(1, pytest.approx(0.5), 1)]
        assert engine.state is PlaybackState.PAUSED
        assert engine.current_word == "new"
        assert engine.ramp_up_remaining == 0
        assert clock.pending == 0


class TestPlayback:
    def test_first_word_dwell(self, engine, clock):
        engine.load(FIVE)
        engine.play()
        # 0.2s base x 2.0 ramp x 1.2 adaptive (sentence start)
        assert engine.last_interval.seconds == pytest.approx(0.48)
        clock.advance(0.47)
        assert engine.current_index == 0
        clock.advance(0.02)
        assert engine.current_index == 1
        assert engine.current_word == "two"

    def test_plays_to_end(self, engine, clock, reports):
        engine.load(FIVE)
        engine.play()
        clock.run_until_idle()
        assert engine.state is PlaybackState.ENDED
        assert engine.current_word == ""
        assert engine.is_at_end
        assert engine.progress == 1.0
        assert not engine.is_playing
        assert len(reports) == 1
        index, seconds, words_read = reports[0]
        assert (index, words_read) == (5, 5)
        assert seconds == pytest.approx(clock.now())
        assert clock.pending == 0

    def test_one_pending_tick_while_playing(self, engine, clock):
        engine.load(FIVE)
        engine.play()
        for _ in range(3):
            assert clock.pending == 1
            clock.run_until_idle(max_callbacks=1)

    def test_pause_without_session_emits_nothing(self, engine, reports):
        engine.load(FIVE)
        engine.pause()
        assert reports == []
        assert engine.last_report is None

    def test_pause_cancels_and_reports(self, engine, clock, reports):
        engine.load(FIVE)
        engine.play()
        clock.advance(0.5)
        engine.pause()
        assert reports == [(1, pytest.approx(0.5), 1)]
        assert clock.pending == 0
        clock.advance(10)
        assert engine.current_index == 1
        engine.pause()
        assert len(reports) == 1

    def test_play_at_end_is_noop(self, engine, clock, reports):
        engine.load(FIVE)
        engine.play()
        clock.run_until_idle()
        engine.play()
        assert engine.state is PlaybackState.ENDED
        assert clock.pending == 0
        assert len(reports) == 1

    def test_play_while_playing_keeps_session(self, engine, clock):
        engine.load(FIVE)
        engine.play()
        clock.advance(0.5)
        engine.play()
        assert clock.pending == 1
        assert engine.current_index == 1
        engine.pause()
        assert engine.last_report.words_read == 1

    def test_toggle(self, engine, reports):
        engine.load(FIVE)
        engine.toggle()
        assert engine.state is PlaybackState.PLAYING
        engine.toggle()
        assert engine.state is PlaybackState.PAUSED
        assert len(reports) == 1

    def test_play_starts_ramp(self, engine):
        engine.load(FIVE)
        engine.play()
        assert engine.last_interval.ramp_factor == 2.0
        assert engine.ramp_up_remaining == 4

    def test_stale_tick_ignored_after_pause(self, config):
        clock = NonCancellingScheduler()
        engine = ReadingEngine(clock, config)
        engine.load(FIVE)
        engine.play()
        engine.pause()
        clock.run_until_idle()
        assert engine.current_index == 0

    def test_stale_tick_ignored_after_seek(self, config):
        clock = NonCancellingScheduler()
        engine = ReadingEngine(clock, config)
        engine.load(FIVE)
        engine.play()
        engine.seek(3)
        clock.run_until_idle(max_callbacks=1)
        # Only the tick scheduled by the seek may advance
        assert engine.current_index == 4


class TestSeek:
    def test_seek_clamps(self, engine):
        engine.load(FIVE)
        engine.seek(-5)
        assert engine.current_index == 0
        engine.seek(99)
        assert engine.current_index == 4
        assert engine.current_word == "five"
        assert not engine.is_at_end

    def test_skip_forward_clamps(self, engine):
        engine.load(FIVE)
        engine.skip_forward()
        assert engine.current_index == 4

    def test_skip_backward(self, engine):
        engine.load(FIVE)
        engine.seek(4)
        engine.skip_backward(2)
        assert engine.current_index == 2
        engine.skip_backward()
        assert engine.current_index == 0

    def test_seek_while_playing_reschedules(self, engine, clock, reports):
        engine.load(FIVE)
        engine.play()
        engine.seek(3)
        assert engine.is_playing
        assert engine.current_word == "four"
        assert clock.pending == 1
        # Ramp keeps counting down across a plain seek
        assert engine.last_interval.ramp_factor == 1.6
        assert reports == []

    @pytest.mark.parametrize(
        "fraction, expected",
        [(0.0, 0), (0.5, 5), (0.99, 9), (1.0, 9), (-1.0, 0), (2.0, 9)],
    )
    def test_seek_to_progress(self, engine, fraction, expected):
        engine.load(" ".join(f"w{i}" for i in range(10)))
        engine.seek_to_progress(fraction)
        assert engine.current_index == expected

    def test_seek_to_progress_nan(self, engine):
        engine.load(FIVE)
        engine.seek(2)
        engine.seek_to_progress(float("nan"))
        assert engine.current_index == 2

    def test_restart(self, engine):
        engine.load(FIVE)
        engine.seek(3)
        engine.restart()
        assert engine.current_index == 0


class TestSentenceNavigation:
    def test_sentence_context(self, engine, sentences):
        engine.load_words(sentences)
        engine.seek(3)
        assert engine.current_sentence_index == 1
        assert engine.current_sentence_start == 2
        assert engine.current_sentence_end == 4
        assert engine.current_sentence_words == ("C", "d.")
        assert engine.current_word_index_in_sentence == 1

    def test_last_sentence_ends_at_text_end(self, engine, sentences):
        engine.load_words(sentences)
        engine.seek(5)
        assert engine.current_sentence_end == 6
        assert engine.current_sentence_words == ("E", "f.")

    def test_next_sentence(self, engine, sentences):
        engine.load_words(sentences)
        engine.next_sentence()
        assert engine.current_index == 2
        engine.next_sentence()
        assert engine.current_index == 4
        engine.next_sentence()
        assert engine.current_index == 5
        engine.next_sentence()
        assert engine.current_index == 5

    def test_previous_sentence_homes_first(self, engine, sentences):
        engine.load_words(sentences)
        engine.seek(5)
        engine.previous_sentence()
        assert engine.current_index == 4
        engine.previous_sentence()
        assert engine.current_index == 2
        engine.seek(3)
        engine.previous_sentence()
        assert engine.current_index == 2

    def test_previous_sentence_at_start(self, engine, sentences):
        engine.load_words(sentences)
        engine.previous_sentence()
        assert engine.current_index == 0

    def test_replay_current_sentence_from_pause(self, engine, sentences):
        engine.load_words(sentences)
        engine.seek(3)
        engine.replay_current_sentence()
        assert engine.current_index == 2
        assert engine.is_playing
        assert engine.last_interval.ramp_factor == 2.0
        assert engine.ramp_up_remaining == 4

    def test_replay_current_sentence_while_playing(self, engine, clock, sentences, reports):
        engine.load_words(sentences)
        engine.play()
        clock.run_until_idle(max_callbacks=3)
        assert engine.current_index == 3
        assert engine.ramp_up_remaining == 1
        engine.replay_current_sentence()
        assert engine.current_index == 2
        assert engine.is_playing
        # The rescheduled word keeps the old ramp; the next five ramp up
        assert engine.last_interval.ramp_factor == 1.05
        assert engine.ramp_up_remaining == 5
        assert reports == []
        clock.run_until_idle(max_callbacks=1)
        assert engine.current_index == 3
        assert engine.last_interval.ramp_factor == 2.0

    def test_replay_previous_sentence_while_playing(self, engine, clock, sentences):
        engine.load_words(sentences)
        engine.play()
        clock.run_until_idle(max_callbacks=4)
        assert engine.current_index == 4
        assert engine.ramp_up_remaining == 0
        engine.replay_previous_sentence()
        assert engine.current_index == 2
        assert engine.is_playing
        assert engine.last_interval.ramp_factor == 1.0
        assert engine.ramp_up_remaining == 5

    def test_replay_previous_sentence(self, engine, sentences):
        engine.load_words(sentences)
        engine.seek(2)
        engine.replay_previous_sentence()
        assert engine.current_index == 0
        assert engine.is_playing
        assert engine.last_interval.ramp_factor == 2.0

    def test_replay_after_end(self, engine, clock, sentences):
        engine.load_words(sentences)
        engine.play()
        clock.run_until_idle()
        assert engine.state is PlaybackState.ENDED
        assert engine.current_sentence_index == 2
        engine.replay_current_sentence()
        assert engine.current_index == 4
        assert engine.is_playing


class TestConfigurationChanges:
    def test_apply_mode_keeps_play_state(self, engine):
        engine.load(FIVE)
        engine.play()
        engine.apply_mode(ReadingMode.STUDY)
        assert engine.is_playing
        assert engine.words_per_minute == 250
        assert engine.config.adaptive_pacing_intensity == 1.5
        assert engine.config.pause_on_punctuation is True
        assert engine.mode is ReadingMode.STUDY

    def test_wpm_setter_clamps(self, engine):
        engine.words_per_minute = 50
        assert engine.words_per_minute == 200
        engine.words_per_minute = 5000
        assert engine.words_per_minute == 1000

    def test_wpm_change_applies_to_next_word(self, engine, clock):
        engine.load(FIVE)
        engine.play()
        first = engine.last_interval.seconds
        engine.words_per_minute = 600
        assert engine.last_interval.seconds == first
        clock.run_until_idle(max_callbacks=1)
        assert engine.last_interval.base == pytest.approx(0.1)


class TestListeners:
    def test_notified_on_changes(self, engine, clock):
        seen = []
        unsubscribe = engine.add_listener(lambda e: seen.append(e.current_index))
        engine.load(FIVE)
        engine.play()
        clock.run_until_idle(max_callbacks=2)
        assert seen == [0, 0, 1, 2]
        unsubscribe()
        engine.pause()
        assert seen == [0, 0, 1, 2]

    def test_notified_once_at_end(self, engine, clock):
        engine.load("a b")
        states = []
        engine.add_listener(lambda e: states.append(e.state))
        engine.play()
        clock.run_until_idle()
        assert states == [PlaybackState.PLAYING, PlaybackState.PLAYING, PlaybackState.ENDED]

    def test_remove_unknown_listener(self, engine):
        engine.remove_listener(print)


class TestExtras:
    def test_position_label(self, engine):
        engine.load(FIVE)
        engine.seek(2)
        assert engine.position_label() == "3 / 5 (40%)"

    def test_context_window(self, engine):
        engine.load(FIVE)
        engine.seek(2)
        assert engine.context_window(1) == "two three"
        assert engine.context_window() == FIVE

    def test_chapters(self, engine):
        engine.load(FIVE)
        chapters = [
            Chapter("One", 0, [Chapter("One.a", 2)]),
            Chapter("Two", 4),
        ]
        assert engine.current_chapter(chapters).title == "One"
        engine.seek(3)
        assert engine.current_chapter(chapters).title == "One.a"
        engine.seek_to_chapter(chapters[1])
        assert engine.current_index == 4
        assert engine.current_chapter(chapters).title == "Two"
        assert engine.current_chapter([]) is None

    def test_repr(self, engine):
        engine.load(FIVE)
        assert "PAUSED" in repr(engine)


def test_plays_on_asyncio_loop():
    async def run():
        done = asyncio.Event()
        engine = ReadingEngine(
            AsyncioScheduler(),
            PacingConfig(words_per_minute=1000),
            on_progress=lambda *_: done.set(),
        )
        engine.load("quick brown fox")
        engine.play()
        await asyncio.wait_for(done.wait(), timeout=5)
        return engine

    engine = asyncio.run(run())
    assert engine.state is PlaybackState.ENDED
    assert engine.last_report.words_read == 3
