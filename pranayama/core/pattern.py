# pranayama/core/pattern.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class PatternConfigError(ValueError):
    pass


class BreathPhase(Enum):
    INHALE = "inhale"
    HOLD_AFTER_INHALE = "hold_after_inhale"
    EXHALE = "exhale"
    HOLD_AFTER_EXHALE = "hold_after_exhale"

    @property
    def label(self) -> str:
        return _LABELS[self]

    def next(self) -> "BreathPhase":
        return _NEXT[self]


_LABELS = {
    BreathPhase.INHALE: "Inhale",
    BreathPhase.HOLD_AFTER_INHALE: "Hold",
    BreathPhase.EXHALE: "Exhale",
    BreathPhase.HOLD_AFTER_EXHALE: "Hold",
}

_NEXT = {
    BreathPhase.INHALE: BreathPhase.HOLD_AFTER_INHALE,
    BreathPhase.HOLD_AFTER_INHALE: BreathPhase.EXHALE,
    BreathPhase.EXHALE: BreathPhase.HOLD_AFTER_EXHALE,
    BreathPhase.HOLD_AFTER_EXHALE: BreathPhase.INHALE,
}


class TerminationMode(Enum):
    BY_CYCLES = "cycles"
    BY_DURATION = "duration"


@dataclass(frozen=True)
class BreathPattern:
    """
    Immutable timing template for one breathing technique.

    A phase duration of 0 means the phase is skipped. At least one phase must
    be non-zero, otherwise the session totals cannot be computed.
    """
    id: str
    name: str
    description: str
    inhale_s: int
    hold_after_inhale_s: int
    exhale_s: int
    hold_after_exhale_s: int
    termination: TerminationMode = TerminationMode.BY_DURATION
    default_cycles: int = 10
    default_minutes: int = 5
    is_custom: bool = False

    def __post_init__(self):
        for phase in BreathPhase:
            if self.duration_of(phase) < 0:
                raise PatternConfigError(
                    f"pattern {self.id!r}: {phase.value} duration must be >= 0"
                )
        if self.cycle_duration <= 0:
            raise PatternConfigError(f"pattern {self.id!r}: all phase durations are zero")
        if self.termination is TerminationMode.BY_CYCLES and self.default_cycles <= 0:
            raise PatternConfigError(f"pattern {self.id!r}: default_cycles must be > 0")
        if self.termination is TerminationMode.BY_DURATION and self.default_minutes <= 0:
            raise PatternConfigError(f"pattern {self.id!r}: default_minutes must be > 0")

    @property
    def cycle_duration(self) -> int:
        return self.inhale_s + self.hold_after_inhale_s + self.exhale_s + self.hold_after_exhale_s

    def duration_of(self, phase: BreathPhase) -> int:
        if phase is BreathPhase.INHALE:
            return self.inhale_s
        if phase is BreathPhase.HOLD_AFTER_INHALE:
            return self.hold_after_inhale_s
        if phase is BreathPhase.EXHALE:
            return self.exhale_s
        return self.hold_after_exhale_s

    def should_skip(self, phase: BreathPhase) -> bool:
        return self.duration_of(phase) == 0

    def timing_string(self) -> str:
        # "4-4-4-4", or "4-7-8" when the final hold is skipped
        parts = [self.inhale_s]
        if self.hold_after_inhale_s > 0:
            parts.append(self.hold_after_inhale_s)
        parts.append(self.exhale_s)
        if self.hold_after_exhale_s > 0:
            parts.append(self.hold_after_exhale_s)
        return "-".join(str(p) for p in parts)

    def summary_string(self) -> str:
        if self.termination is TerminationMode.BY_DURATION:
            target = f"{self.default_minutes} min"
        else:
            target = f"{self.default_cycles} cycles"
        return f"{self.timing_string()}, {target}"


# -----------------------
# Catalog
# -----------------------

BOX_BREATHING = BreathPattern(
    id="box_breathing",
    name="Box Breathing",
    description="Calming focus • Used by Navy SEALs",
    inhale_s=4,
    hold_after_inhale_s=4,
    exhale_s=4,
    hold_after_exhale_s=4,
    termination=TerminationMode.BY_DURATION,
    default_minutes=5,
)

BREATHING_478 = BreathPattern(
    id="4_7_8",
    name="4-7-8 Breathing",
    description="Sleep support • Deep relaxation",
    inhale_s=4,
    hold_after_inhale_s=7,
    exhale_s=8,
    hold_after_exhale_s=0,
    termination=TerminationMode.BY_CYCLES,
    default_cycles=4,  # traditionally done in sets of 4
)

NADI_SHODHANA = BreathPattern(
    id="nadi_shodhana",
    name="Alternate Nostril",
    description="Balance & clarity • Simplified version",
    inhale_s=4,
    hold_after_inhale_s=4,
    exhale_s=4,
    hold_after_exhale_s=4,
    termination=TerminationMode.BY_DURATION,
    default_minutes=5,
)

CUSTOM = BreathPattern(
    id="custom",
    name="Custom",
    description="Create your own pattern",
    inhale_s=4,
    hold_after_inhale_s=4,
    exhale_s=4,
    hold_after_exhale_s=4,
    termination=TerminationMode.BY_DURATION,
    default_minutes=5,
    is_custom=True,
)

ALL_PATTERNS = (BOX_BREATHING, BREATHING_478, NADI_SHODHANA, CUSTOM)

DEFAULT_PATTERN = BOX_BREATHING


def find_pattern(pattern_id: str) -> Optional[BreathPattern]:
    for p in ALL_PATTERNS:
        if p.id == pattern_id:
            return p
    return None


def resolve_pattern(pattern_id: str) -> BreathPattern:
    """Like find_pattern, but an unknown id falls back to DEFAULT_PATTERN."""
    p = find_pattern(pattern_id)
    if p is None:
        logger.warning("Unknown pattern id %r, falling back to %r", pattern_id, DEFAULT_PATTERN.id)
        return DEFAULT_PATTERN
    return p
