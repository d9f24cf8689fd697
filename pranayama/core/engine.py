# pranayama/core/engine.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import Callable, List, Optional

from pranayama.core.pattern import (
    DEFAULT_PATTERN,
    BreathPattern,
    BreathPhase,
    TerminationMode,
    resolve_pattern,
)

logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 100
TICKS_PER_SECOND = 10


def _clamp01(x: float) -> float:
    return max(0.0, min(1.0, float(x)))


def breath_fullness(phase: BreathPhase, phase_progress: float) -> float:
    # 0 = empty lungs, 1 = full lungs
    if phase is BreathPhase.INHALE:
        return _clamp01(phase_progress)
    if phase is BreathPhase.HOLD_AFTER_INHALE:
        return 1.0
    if phase is BreathPhase.EXHALE:
        return _clamp01(1.0 - phase_progress)
    return 0.0


@dataclass(frozen=True)
class SessionState:
    pattern: BreathPattern = DEFAULT_PATTERN

    is_playing: bool = False
    is_complete: bool = False

    current_phase: BreathPhase = BreathPhase.INHALE
    phase_seconds_remaining: int = 4
    phase_total_seconds: int = 4

    current_cycle: int = 1
    total_cycles: int = 10
    elapsed_seconds: int = 0
    total_session_seconds: int = 300

    # 0..1, for smooth animation
    phase_progress: float = 0.0
    breath_progress: float = 0.0

    @property
    def is_running(self) -> bool:
        return self.is_playing and not self.is_complete

    @property
    def session_progress(self) -> float:
        if self.total_session_seconds <= 0:
            return 0.0
        return _clamp01(self.elapsed_seconds / self.total_session_seconds)

    @property
    def remaining_seconds(self) -> int:
        return max(0, self.total_session_seconds - self.elapsed_seconds)


def _first_phase(pattern: BreathPattern) -> BreathPhase:
    phase = BreathPhase.INHALE
    while pattern.should_skip(phase):
        phase = phase.next()
    return phase


def initial_state(pattern: BreathPattern) -> SessionState:
    if pattern.termination is TerminationMode.BY_DURATION:
        total_seconds = pattern.default_minutes * 60
        # approximate, display only
        total_cycles = total_seconds // pattern.cycle_duration
    else:
        total_seconds = pattern.default_cycles * pattern.cycle_duration
        total_cycles = pattern.default_cycles

    phase = _first_phase(pattern)
    duration = pattern.duration_of(phase)

    return SessionState(
        pattern=pattern,
        is_playing=False,
        is_complete=False,
        current_phase=phase,
        phase_seconds_remaining=duration,
        phase_total_seconds=duration,
        current_cycle=1,
        total_cycles=total_cycles,
        elapsed_seconds=0,
        total_session_seconds=total_seconds,
        phase_progress=0.0,
        breath_progress=breath_fullness(phase, 0.0),
    )


def _noop(*_args) -> None:
    return None


class SessionEngine:
    """
    Breathing session state machine.

    Phases:
      INHALE -> HOLD_AFTER_INHALE -> EXHALE -> HOLD_AFTER_EXHALE -> (INHALE ...)
    Zero-duration phases are bridged over inside a single transition.

    Timing:
      - tick() advances one 100 ms slice; the caller owns the scheduler
      - every 10 ticks is one whole second: the phase countdown drops by one
      - when the countdown hits 0 the next phase begins (or the session ends)

    Collaborators are injected so a test can pass fakes:
      record_session(minutes), trigger_haptic(), on_phase_change(phase),
      clock() -> seconds (wall clock), resolver(pattern_id) -> BreathPattern
    """

    def __init__(
        self,
        record_session: Optional[Callable[[int], None]] = None,
        trigger_haptic: Optional[Callable[[], None]] = None,
        on_phase_change: Optional[Callable[[BreathPhase], None]] = None,
        clock: Callable[[], float] = time.time,
        resolver: Callable[[str], BreathPattern] = resolve_pattern,
    ):
        self._record_session = record_session or _noop
        self._trigger_haptic = trigger_haptic or _noop
        self._on_phase_change = on_phase_change or _noop
        self._clock = clock
        self._resolver = resolver

        self._listeners: List[Callable[[SessionState], None]] = []
        self._state = initial_state(DEFAULT_PATTERN)
        self._tick_count = 0
        self._start_ts: Optional[float] = None

    # -----------------------
    # Observation
    # -----------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def has_started(self) -> bool:
        return self._start_ts is not None

    def add_listener(self, fn: Callable[[SessionState], None]) -> None:
        if fn not in self._listeners:
            self._listeners.append(fn)

    def remove_listener(self, fn: Callable[[SessionState], None]) -> None:
        try:
            self._listeners.remove(fn)
        except ValueError:
            pass

    def _publish(self, state: SessionState) -> None:
        self._state = state
        for fn in list(self._listeners):
            self._safe_call("listener", fn, state)

    def _safe_call(self, name: str, fn, *args) -> None:
        # hooks run after the new state is stored; a failing sink must not abort the session
        try:
            fn(*args)
        except Exception:
            logger.exception("Session %s hook failed", name)

    # -----------------------
    # Commands
    # -----------------------

    def init_session(self, pattern_id: str) -> None:
        pattern = self._resolver(pattern_id)
        self._tick_count = 0
        # a new session never inherits an abandoned attempt's start time
        self._start_ts = None
        self._publish(initial_state(pattern))

    def play(self) -> None:
        if self._state.is_complete:
            return
        if self._start_ts is None:
            self._start_ts = float(self._clock())
        self._publish(replace(self._state, is_playing=True))

    def pause(self) -> None:
        self._publish(replace(self._state, is_playing=False))

    def toggle_play_pause(self) -> None:
        if self._state.is_playing:
            self.pause()
        else:
            self.play()

    def end_session(self) -> None:
        self._publish(replace(self._state, is_playing=False, is_complete=True))
        self._record_stats()

    def reset_session(self) -> None:
        # unfinished attempts are not recorded
        self.init_session(self._state.pattern.id)

    # -----------------------
    # Loop
    # -----------------------

    def tick(self) -> SessionState:
        current = self._state
        if not current.is_running:
            return current

        self._tick_count += 1
        whole_second = self._tick_count >= TICKS_PER_SECOND

        if not whole_second:
            fraction = self._tick_count / TICKS_PER_SECOND
            phase_elapsed = current.phase_total_seconds - current.phase_seconds_remaining + fraction
            phase_progress = _clamp01(phase_elapsed / current.phase_total_seconds)
            self._publish(replace(
                current,
                phase_progress=phase_progress,
                breath_progress=breath_fullness(current.current_phase, phase_progress),
            ))
            return self._state

        self._tick_count = 0
        remaining = current.phase_seconds_remaining - 1
        elapsed = current.elapsed_seconds + 1

        phase_progress = _clamp01(
            (current.phase_total_seconds - remaining) / current.phase_total_seconds
        )
        breath = breath_fullness(current.current_phase, phase_progress)

        # timed sessions stop on the second, even mid-phase
        if (
            current.pattern.termination is TerminationMode.BY_DURATION
            and elapsed >= current.total_session_seconds
        ):
            self._complete(replace(
                current,
                phase_seconds_remaining=max(0, remaining),
                elapsed_seconds=elapsed,
                phase_progress=phase_progress,
                breath_progress=breath,
            ))
            return self._state

        if remaining <= 0:
            self._transition(elapsed, breath)
        else:
            self._publish(replace(
                current,
                phase_seconds_remaining=remaining,
                elapsed_seconds=elapsed,
                phase_progress=0.0,  # new second starts fresh
                breath_progress=breath,
            ))
        return self._state

    def _transition(self, elapsed: int, breath: float) -> None:
        current = self._state
        pattern = current.pattern

        phase = current.current_phase.next()
        cycle = current.current_cycle

        if phase is BreathPhase.INHALE:
            cycle += 1

        while pattern.should_skip(phase):
            if phase is BreathPhase.HOLD_AFTER_EXHALE:
                # skipping the final hold still crosses into a new cycle
                cycle += 1
            phase = phase.next()

        if pattern.termination is TerminationMode.BY_CYCLES:
            complete = cycle > current.total_cycles
        else:
            complete = elapsed >= current.total_session_seconds

        if complete:
            self._complete(replace(
                current,
                current_cycle=cycle,
                phase_seconds_remaining=0,
                elapsed_seconds=elapsed,
                phase_progress=1.0,
                breath_progress=breath,
            ))
            return

        duration = pattern.duration_of(phase)
        self._publish(replace(
            current,
            current_phase=phase,
            phase_seconds_remaining=duration,
            phase_total_seconds=duration,
            current_cycle=cycle,
            elapsed_seconds=elapsed,
            phase_progress=0.0,
            breath_progress=breath_fullness(phase, 0.0),
        ))

        self._safe_call("haptic", self._trigger_haptic)
        self._safe_call("phase change", self._on_phase_change, phase)

    def _complete(self, state: SessionState) -> None:
        self._tick_count = 0
        self._publish(replace(state, is_playing=False, is_complete=True))
        self._safe_call("haptic", self._trigger_haptic)
        self._record_stats()

    # -----------------------
    # Stats
    # -----------------------

    def _record_stats(self) -> None:
        if self._start_ts is None:
            return

        duration_s = float(self._clock()) - self._start_ts
        # at least 1 minute if they practiced at all
        minutes = max(1, int(duration_s // 60))

        self._safe_call("record session", self._record_session, minutes)
        self._start_ts = None
