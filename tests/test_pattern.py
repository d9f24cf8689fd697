import logging

import pytest

from pranayama.core.pattern import (
    ALL_PATTERNS,
    BOX_BREATHING,
    BREATHING_478,
    DEFAULT_PATTERN,
    BreathPattern,
    BreathPhase,
    PatternConfigError,
    TerminationMode,
    find_pattern,
    resolve_pattern,
)


@pytest.mark.parametrize("phase", list(BreathPhase))
def test_next_is_cyclic_with_period_four(phase):
    assert phase.next().next().next().next() is phase
    assert phase.next() is not phase


def test_phase_order_and_labels():
    assert BreathPhase.INHALE.next() is BreathPhase.HOLD_AFTER_INHALE
    assert BreathPhase.HOLD_AFTER_INHALE.next() is BreathPhase.EXHALE
    assert BreathPhase.EXHALE.next() is BreathPhase.HOLD_AFTER_EXHALE
    assert BreathPhase.HOLD_AFTER_EXHALE.next() is BreathPhase.INHALE

    assert [p.label for p in BreathPhase] == ["Inhale", "Hold", "Exhale", "Hold"]


def test_durations_and_skip():
    p = BREATHING_478
    assert p.duration_of(BreathPhase.INHALE) == 4
    assert p.duration_of(BreathPhase.HOLD_AFTER_INHALE) == 7
    assert p.duration_of(BreathPhase.EXHALE) == 8
    assert p.duration_of(BreathPhase.HOLD_AFTER_EXHALE) == 0
    assert p.cycle_duration == 19

    assert p.should_skip(BreathPhase.HOLD_AFTER_EXHALE)
    assert not p.should_skip(BreathPhase.EXHALE)


def test_timing_and_summary_strings():
    assert BOX_BREATHING.timing_string() == "4-4-4-4"
    assert BOX_BREATHING.summary_string() == "4-4-4-4, 5 min"
    assert BREATHING_478.timing_string() == "4-7-8"
    assert BREATHING_478.summary_string() == "4-7-8, 4 cycles"


def test_all_zero_pattern_is_rejected():
    with pytest.raises(PatternConfigError):
        BreathPattern(
            id="empty", name="Empty", description="",
            inhale_s=0, hold_after_inhale_s=0, exhale_s=0, hold_after_exhale_s=0,
        )


def test_negative_duration_is_rejected():
    with pytest.raises(PatternConfigError):
        BreathPattern(
            id="neg", name="Neg", description="",
            inhale_s=4, hold_after_inhale_s=-1, exhale_s=4, hold_after_exhale_s=0,
        )


def test_non_positive_target_is_rejected():
    with pytest.raises(PatternConfigError):
        BreathPattern(
            id="c0", name="c0", description="",
            inhale_s=4, hold_after_inhale_s=0, exhale_s=4, hold_after_exhale_s=0,
            termination=TerminationMode.BY_CYCLES, default_cycles=0,
        )


def test_pattern_config_error_is_a_value_error():
    assert issubclass(PatternConfigError, ValueError)


def test_patterns_are_immutable():
    with pytest.raises(AttributeError):
        BOX_BREATHING.inhale_s = 10


def test_catalog_ids_are_unique():
    ids = [p.id for p in ALL_PATTERNS]
    assert len(ids) == len(set(ids))
    assert DEFAULT_PATTERN is BOX_BREATHING


def test_find_pattern_is_strict():
    assert find_pattern("4_7_8") is BREATHING_478
    assert find_pattern("nope") is None


def test_resolve_pattern_falls_back_to_default(caplog):
    with caplog.at_level(logging.WARNING, logger="pranayama.core.pattern"):
        p = resolve_pattern("box_breathin")
    assert p is DEFAULT_PATTERN
    assert "box_breathin" in caplog.text


def test_resolve_pattern_known_id():
    assert resolve_pattern("4_7_8") is BREATHING_478
