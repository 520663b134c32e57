"""Playback engine, pacing configuration and reading-mode presets."""

from .config import MAX_WPM, MIN_WPM, PacingConfig, clamp_wpm
from .engine import ReadingEngine
from .interval import (
    RAMP_UP_LENGTH,
    RAMP_UP_MULTIPLIERS,
    IntervalBreakdown,
    compute_interval,
    punctuation_multiplier,
)
from .models import (
    Chapter,
    PlaybackState,
    ProgressReport,
    chapters_from_json,
    chapters_to_json,
    flatten_chapters,
)
from .modes import MODE_SETTINGS, ModeSettings, ReadingMode, parse_mode
from .timeline import Timeline, TimelineEntry, preview_timeline, simulate_timeline
from .timer import AsyncioScheduler, Scheduler, VirtualScheduler

__all__ = [
    "MAX_WPM",
    "MIN_WPM",
    "PacingConfig",
    "clamp_wpm",
    "ReadingEngine",
    "RAMP_UP_LENGTH",
    "RAMP_UP_MULTIPLIERS",
    "IntervalBreakdown",
    "compute_interval",
    "punctuation_multiplier",
    "Chapter",
    "PlaybackState",
    "ProgressReport",
    "chapters_from_json",
    "chapters_to_json",
    "flatten_chapters",
    "MODE_SETTINGS",
    "ModeSettings",
    "ReadingMode",
    "parse_mode",
    "Timeline",
    "TimelineEntry",
    "preview_timeline",
    "simulate_timeline",
    "AsyncioScheduler",
    "Scheduler",
    "VirtualScheduler",
]
