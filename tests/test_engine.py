import pytest

from pranayama.core.engine import (
    SessionEngine,
    TICKS_PER_SECOND,
    breath_fullness,
    initial_state,
)
from pranayama.core.pattern import (
    BOX_BREATHING,
    BREATHING_478,
    BreathPhase,
    TerminationMode,
)

from conftest import FakeClock, Recorder, make_resolver, pattern, run_seconds


def _engine_for(p, clock=None, hooks=None, **kw):
    hooks = hooks or Recorder()
    engine = SessionEngine(
        record_session=hooks.record_session,
        trigger_haptic=hooks.trigger_haptic,
        on_phase_change=hooks.on_phase_change,
        clock=clock or FakeClock(),
        resolver=make_resolver(p),
        **kw,
    )
    engine.init_session(p.id)
    return engine, hooks


# -----------------------
# initSession
# -----------------------

def test_init_timed_session_totals(engine):
    engine.init_session("box_breathing")
    s = engine.state

    assert s.pattern is BOX_BREATHING
    assert s.total_session_seconds == 300
    assert s.total_cycles == 300 // 16
    assert s.current_phase is BreathPhase.INHALE
    assert s.phase_seconds_remaining == 4
    assert s.phase_total_seconds == 4
    assert s.current_cycle == 1
    assert s.elapsed_seconds == 0
    assert s.phase_progress == 0.0
    assert s.breath_progress == 0.0
    assert not s.is_playing
    assert not s.is_complete


def test_init_cycle_session_totals(engine):
    engine.init_session("4_7_8")
    s = engine.state

    assert s.pattern is BREATHING_478
    assert s.total_cycles == 4
    assert s.total_session_seconds == 4 * 19


def test_init_unknown_pattern_falls_back_to_default(engine):
    engine.init_session("does-not-exist")
    assert engine.state.pattern is BOX_BREATHING


def test_init_skips_zero_length_inhale():
    p = pattern("no_inhale", 0, 4, 0, 4)
    engine, _ = _engine_for(p)
    s = engine.state

    assert s.current_phase is BreathPhase.HOLD_AFTER_INHALE
    assert s.phase_seconds_remaining == 4
    assert s.current_cycle == 1
    assert s.breath_progress == 1.0


# -----------------------
# Scenarios
# -----------------------

def test_box_after_four_seconds_is_holding(engine, hooks):
    engine.init_session("box_breathing")
    engine.play()

    s = run_seconds(engine, 4)

    assert s.current_phase is BreathPhase.HOLD_AFTER_INHALE
    assert s.phase_seconds_remaining == 4
    assert s.elapsed_seconds == 4
    assert hooks.haptics == 1
    assert hooks.phases == [BreathPhase.HOLD_AFTER_INHALE]


def test_478_after_one_cycle_starts_cycle_two(engine):
    engine.init_session("4_7_8")
    engine.play()

    s = run_seconds(engine, 19)

    assert s.current_cycle == 2
    assert s.current_phase is BreathPhase.INHALE
    assert s.phase_seconds_remaining == 4
    assert not s.is_complete


def test_end_before_play_completes_without_stats(engine, hooks):
    engine.init_session("box_breathing")
    engine.end_session()

    assert engine.state.is_complete
    assert not engine.state.is_playing
    assert hooks.sessions == []


def test_reset_after_progress_restarts_without_stats(engine, hooks, clock):
    engine.init_session("4_7_8")
    engine.play()
    run_seconds(engine, 13, clock)

    engine.reset_session()
    s = engine.state

    assert s.elapsed_seconds == 0
    assert s.current_phase is BreathPhase.INHALE
    assert s.current_cycle == 1
    assert not s.is_complete
    assert not s.is_playing
    assert s.pattern is BREATHING_478
    assert hooks.sessions == []

    # the aborted attempt's start time is gone too
    engine.end_session()
    assert hooks.sessions == []


# -----------------------
# Completion
# -----------------------

def test_cycle_session_completes_after_last_cycle(engine, hooks, clock):
    engine.init_session("4_7_8")
    engine.play()

    s = run_seconds(engine, 4 * 19, clock)

    assert s.is_complete
    assert not s.is_playing
    assert s.current_cycle == s.total_cycles + 1
    assert s.elapsed_seconds == s.total_session_seconds
    # three transitions per cycle, the last one is the final pulse
    assert hooks.haptics == 12
    assert len(hooks.phases) == 11
    assert hooks.sessions == [1]


def test_timed_session_completes_on_exact_second(engine, hooks, clock):
    engine.init_session("box_breathing")
    engine.play()

    s = run_seconds(engine, 299, clock)
    assert not s.is_complete

    s = run_seconds(engine, 1, clock)
    assert s.is_complete
    assert s.elapsed_seconds == 300
    assert hooks.sessions == [5]


def test_timed_session_can_end_mid_phase():
    # 19 s cycles never land on 60 s
    p = pattern("timed_478", 4, 7, 8, 0, termination=TerminationMode.BY_DURATION, minutes=1)
    engine, hooks = _engine_for(p)
    engine.play()

    s = run_seconds(engine, 60)

    assert s.is_complete
    assert s.elapsed_seconds == 60
    assert s.current_phase is BreathPhase.INHALE
    assert s.phase_seconds_remaining == 1


def test_no_state_change_after_completion(engine):
    engine.init_session("4_7_8")
    engine.play()
    done = run_seconds(engine, 76)
    assert done.is_complete

    run_seconds(engine, 5)
    engine.play()
    assert engine.state == done


# -----------------------
# Skipping zero-length phases
# -----------------------

def test_skipped_phase_never_becomes_current():
    p = pattern("holds_only", 0, 4, 0, 4, cycles=2)
    engine, _ = _engine_for(p)
    seen = []
    engine.add_listener(seen.append)
    engine.play()

    s = run_seconds(engine, 16)

    for st in seen:
        if not st.is_complete:
            assert not p.should_skip(st.current_phase)
            assert st.phase_total_seconds > 0
    assert s.is_complete
    assert s.current_cycle == 3
    assert s.elapsed_seconds == 16


def test_inhale_only_counts_one_cycle_per_breath():
    p = pattern("inhale_only", 4, 0, 0, 0, cycles=3)
    engine, hooks = _engine_for(p)
    engine.play()

    s = run_seconds(engine, 4)
    assert s.current_phase is BreathPhase.INHALE
    assert s.current_cycle == 2

    s = run_seconds(engine, 8)
    assert s.is_complete
    assert s.current_cycle == 4


def test_skipping_final_hold_counts_new_cycle_once():
    p = pattern("no_holds", 4, 0, 4, 0, cycles=5)
    engine, hooks = _engine_for(p)
    engine.play()

    s = run_seconds(engine, 4)
    assert s.current_phase is BreathPhase.EXHALE
    assert s.current_cycle == 1

    s = run_seconds(engine, 4)
    assert s.current_phase is BreathPhase.INHALE
    assert s.current_cycle == 2
    assert hooks.phases == [BreathPhase.EXHALE, BreathPhase.INHALE]


# -----------------------
# Progress values
# -----------------------

@pytest.mark.parametrize("phase,progress,expected", [
    (BreathPhase.INHALE, 0.25, 0.25),
    (BreathPhase.HOLD_AFTER_INHALE, 0.4, 1.0),
    (BreathPhase.EXHALE, 0.25, 0.75),
    (BreathPhase.HOLD_AFTER_EXHALE, 0.9, 0.0),
])
def test_breath_fullness_mapping(phase, progress, expected):
    assert breath_fullness(phase, progress) == pytest.approx(expected)


def test_breath_fullness_through_a_cycle(engine):
    engine.init_session("box_breathing")
    engine.play()

    runs = []
    for _ in range(2 * 16 * TICKS_PER_SECOND):
        s = engine.tick()
        if runs and runs[-1][0] is s.current_phase:
            runs[-1][1].append(s.breath_progress)
        else:
            runs.append((s.current_phase, [s.breath_progress]))

    for phase, values in runs:
        if phase is BreathPhase.HOLD_AFTER_INHALE:
            assert all(v == 1.0 for v in values)
        elif phase is BreathPhase.HOLD_AFTER_EXHALE:
            assert all(v == 0.0 for v in values)
        elif phase is BreathPhase.INHALE:
            assert all(b > a for a, b in zip(values, values[1:]))
        else:
            assert all(b < a for a, b in zip(values, values[1:]))


def test_phase_progress_within_a_second(engine):
    engine.init_session("box_breathing")
    engine.play()

    for _ in range(5):
        s = engine.tick()
    assert s.phase_progress == pytest.approx(0.5 / 4)

    for _ in range(5):
        s = engine.tick()
    # a whole second resets phase progress
    assert s.phase_progress == 0.0
    assert s.phase_seconds_remaining == 3
    assert s.elapsed_seconds == 1

    s = engine.tick()
    assert s.phase_progress == pytest.approx(1.1 / 4)
    assert 0.0 <= s.breath_progress <= 1.0


def test_session_progress_helpers(engine):
    engine.init_session("box_breathing")
    engine.play()
    s = run_seconds(engine, 30)

    assert s.session_progress == pytest.approx(0.1)
    assert s.remaining_seconds == 270


# -----------------------
# Commands
# -----------------------

def test_tick_does_nothing_until_play(engine):
    engine.init_session("box_breathing")
    before = engine.state
    run_seconds(engine, 3)
    assert engine.state == before


def test_pause_twice_equals_pause_once(engine):
    engine.init_session("box_breathing")
    engine.play()
    run_seconds(engine, 2)

    engine.pause()
    once = engine.state
    engine.pause()

    assert engine.state == once
    assert not once.is_playing


def test_pause_and_resume_continue_mid_second(engine):
    engine.init_session("box_breathing")
    engine.play()
    for _ in range(25):
        engine.tick()

    engine.pause()
    for _ in range(20):
        engine.tick()
    assert engine.state.elapsed_seconds == 2

    engine.play()
    for _ in range(5):
        engine.tick()
    assert engine.state.elapsed_seconds == 3
    assert engine.state.phase_seconds_remaining == 1


def test_toggle_play_pause(engine):
    engine.init_session("box_breathing")
    engine.toggle_play_pause()
    assert engine.state.is_playing
    engine.toggle_play_pause()
    assert not engine.state.is_playing


def test_play_on_complete_session_is_noop(engine):
    engine.init_session("box_breathing")
    engine.end_session()
    engine.play()
    assert not engine.state.is_playing
    assert engine.state.is_complete


# -----------------------
# Statistics
# -----------------------

def test_end_session_records_whole_minutes(engine, hooks, clock):
    engine.init_session("box_breathing")
    engine.play()
    clock.advance(125)
    engine.end_session()

    assert hooks.sessions == [2]


def test_short_practice_counts_as_one_minute(engine, hooks, clock):
    engine.init_session("box_breathing")
    engine.play()
    clock.advance(5)
    engine.end_session()

    assert hooks.sessions == [1]


def test_end_twice_records_once(engine, hooks):
    engine.init_session("box_breathing")
    engine.play()
    engine.end_session()
    engine.end_session()

    assert hooks.sessions == [1]


def test_duration_counts_from_first_play(engine, hooks, clock):
    engine.init_session("box_breathing")
    engine.play()
    clock.advance(90)
    engine.pause()
    clock.advance(60)
    engine.play()
    clock.advance(30)
    engine.end_session()

    assert hooks.sessions == [3]


def test_new_session_after_abandoned_one_starts_fresh(engine, hooks, clock):
    engine.init_session("box_breathing")
    engine.play()
    run_seconds(engine, 3, clock)
    engine.pause()
    clock.advance(600)

    engine.init_session("4_7_8")
    assert not engine.has_started
    assert hooks.sessions == []

    engine.play()
    s = run_seconds(engine, 76, clock)

    assert s.is_complete
    assert hooks.sessions == [1]


def test_reset_after_play_does_not_keep_start_time(engine, hooks, clock):
    engine.init_session("box_breathing")
    engine.play()
    clock.advance(300)
    engine.reset_session()
    assert not engine.has_started

    engine.play()
    clock.advance(30)
    engine.end_session()
    assert hooks.sessions == [1]


# -----------------------
# Hooks and listeners
# -----------------------

def test_failing_hooks_do_not_corrupt_state():
    def boom(*_):
        raise RuntimeError("device gone")

    engine = SessionEngine(record_session=boom, trigger_haptic=boom, on_phase_change=boom, clock=FakeClock())
    engine.add_listener(boom)
    engine.init_session("box_breathing")
    engine.play()

    s = run_seconds(engine, 8)
    assert s.current_phase is BreathPhase.EXHALE
    assert s.phase_seconds_remaining == 4
    assert s.elapsed_seconds == 8

    engine.end_session()
    assert engine.state.is_complete
    assert not engine.has_started


def test_listener_sees_every_tick_and_command(engine):
    seen = []
    engine.add_listener(seen.append)

    engine.init_session("box_breathing")
    engine.play()
    run_seconds(engine, 1)
    engine.pause()

    assert len(seen) == 1 + 1 + TICKS_PER_SECOND + 1
    assert seen[-1] is engine.state

    engine.remove_listener(seen.append)
    engine.play()
    assert len(seen) == 13


def test_initial_state_is_pure():
    a = initial_state(BREATHING_478)
    b = initial_state(BREATHING_478)
    assert a == b
    assert a is not b
