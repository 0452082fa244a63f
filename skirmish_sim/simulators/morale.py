"""Post-melee morale tests.

The morale roll is a plain threshold check: unlike attack and save rolls a
natural 1 or 6 has no special meaning here.
"""
from __future__ import annotations

from enum import Enum

from ..dice import DieSource, roll_die
from ..units import SpecialRule, UnitState

FEARLESS_THRESHOLD = 4


class MoraleOutcome(Enum):
    PASS = "pass"
    SHAKEN = "shaken"
    RETREAT = "retreat"


def morale_roll_passes(target: int, rng: DieSource) -> bool:
    return roll_die(rng) >= target


def resolve_morale(unit: UnitState, rng: DieSource) -> MoraleOutcome:
    """Test ``unit`` after it lost a melee round.

    Fearless units get a second roll against 4+.  A failed unit at or above
    half of its starting models is Shaken, below half it retreats.
    """
    passed = morale_roll_passes(unit.quality, rng)
    if not passed and unit.has_rule(SpecialRule.FEARLESS):
        passed = morale_roll_passes(FEARLESS_THRESHOLD, rng)

    if passed:
        return MoraleOutcome.PASS
    if unit.num_models < unit.original_num_models / 2:
        return MoraleOutcome.RETREAT
    return MoraleOutcome.SHAKEN


def apply_morale(unit: UnitState, outcome: MoraleOutcome) -> None:
    if outcome is MoraleOutcome.SHAKEN:
        unit.shaken = True
    elif outcome is MoraleOutcome.RETREAT:
        unit.num_models = 0


__all__ = [
    "FEARLESS_THRESHOLD",
    "MoraleOutcome",
    "apply_morale",
    "morale_roll_passes",
    "resolve_morale",
]
