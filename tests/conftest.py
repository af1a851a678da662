import pytest

from core.budget_input import TimeBudgetInput
from core.scheduler import Scheduler
from core.turn_clock import TurnClock


class CueRecorder:
    """Collects cues emitted by a TurnClock, in order."""

    def __init__(self):
        self.cues = []

    def __call__(self, cue):
        self.cues.append(cue)

    def clear(self):
        self.cues.clear()


class FakeAudio:
    """Stands in for core.audio.Audio; records played sound names."""

    def __init__(self):
        self.played = []

    def play(self, name):
        self.played.append(name)


@pytest.fixture()
def scheduler():
    return Scheduler()


@pytest.fixture()
def cues():
    return CueRecorder()


@pytest.fixture()
def clock(scheduler, cues):
    turn_clock = TurnClock(scheduler)
    turn_clock.subscribe_cues(cues)
    return turn_clock


@pytest.fixture()
def running(clock, cues):
    """A clock that has just started a 120/120 game."""
    clock.start_game(120, 120)
    cues.clear()
    return clock


@pytest.fixture()
def entry():
    return TimeBudgetInput()


@pytest.fixture()
def fake_audio():
    return FakeAudio()


@pytest.fixture()
def advance(scheduler):
    """Advance the scheduler by whole seconds."""
    def _advance(seconds=1):
        scheduler.update(float(seconds))
    return _advance
