import pytest

from pacing.playback.config import PacingConfig
from pacing.playback.engine import ReadingEngine
from pacing.playback.timer import VirtualScheduler


@pytest.fixture
def clock():
    return VirtualScheduler()


@pytest.fixture
def config():
    return PacingConfig(words_per_minute=300)


@pytest.fixture
def reports():
    return []


@pytest.fixture
def engine(clock, config, reports):
    return ReadingEngine(
        clock,
        config,
        on_progress=lambda *args: reports.append(args),
    )


@pytest.fixture
def sentences():
    """Three two-word sentences: starts at 0, 2 and 4."""
    return ["A", "b.", "C", "d.", "E", "f."]
