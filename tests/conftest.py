import os

# headless Qt for CI
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from pranayama.core.engine import SessionEngine, TICKS_PER_SECOND
from pranayama.core.pattern import BreathPattern, TerminationMode, resolve_pattern


class FakeClock:
    def __init__(self, start: float = 1_000.0):
        self.now = float(start)

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += float(seconds)


class Recorder:
    """Collects calls made by the engine's side-effect hooks."""

    def __init__(self):
        self.sessions = []
        self.haptics = 0
        self.phases = []

    def record_session(self, minutes: int):
        self.sessions.append(minutes)

    def trigger_haptic(self):
        self.haptics += 1

    def on_phase_change(self, phase):
        self.phases.append(phase)


def run_seconds(engine: SessionEngine, seconds: int, clock: FakeClock | None = None):
    for _ in range(seconds):
        if clock is not None:
            clock.advance(1)
        for _ in range(TICKS_PER_SECOND):
            engine.tick()
    return engine.state


def make_resolver(*patterns: BreathPattern):
    by_id = {p.id: p for p in patterns}

    def _resolve(pattern_id):
        return by_id.get(pattern_id) or resolve_pattern(pattern_id)
    return _resolve


def pattern(pid, inhale, hold_in, exhale, hold_out, termination=TerminationMode.BY_CYCLES, cycles=2, minutes=1):
    return BreathPattern(
        id=pid,
        name=pid,
        description="",
        inhale_s=inhale,
        hold_after_inhale_s=hold_in,
        exhale_s=exhale,
        hold_after_exhale_s=hold_out,
        termination=termination,
        default_cycles=cycles,
        default_minutes=minutes,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def hooks():
    return Recorder()


@pytest.fixture
def engine(clock, hooks):
    return SessionEngine(
        record_session=hooks.record_session,
        trigger_haptic=hooks.trigger_haptic,
        on_phase_change=hooks.on_phase_change,
        clock=clock,
    )
