"""Rule-based tactical AI.

:func:`decide_action` is deterministic: it only reads the battlefield and uses
closed-form expectations, never the die source.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .dice import success_chance
from .simulators.combat import effective_quality
from .units import UnitState


class Action(Enum):
    IDLE = "idle"
    FIGHT = "fight"
    ADVANCE = "advance"
    CHARGE = "charge"
    HOLD = "hold"
    RUSH = "rush"


@dataclass(frozen=True)
class MeleeEstimate:
    expected_wounds_on_opponent: float
    expected_wounds_on_unit: float


def _expected_melee_wounds(striker: UnitState, target: UnitState) -> float:
    weapon = striker.melee_weapon()
    expected_hits = striker.num_models * weapon.attacks * success_chance(effective_quality(striker))
    wound_chance = 1 - success_chance(target.defense + weapon.ap)
    return expected_hits * wound_chance


def estimate_melee_effectiveness(unit: UnitState, opponent: UnitState) -> MeleeEstimate:
    """Expected wounds each side would deal if melee were joined now."""

    return MeleeEstimate(
        expected_wounds_on_opponent=_expected_melee_wounds(unit, opponent),
        expected_wounds_on_unit=_expected_melee_wounds(opponent, unit),
    )


def decide_action(unit: UnitState, opponent: UnitState, distance: float) -> Action:
    if unit.shaken:
        return Action.IDLE

    if distance == 0:
        estimate = estimate_melee_effectiveness(unit, opponent)
        if estimate.expected_wounds_on_unit > estimate.expected_wounds_on_opponent:
            # losing trade: fall back out of combat
            return Action.ADVANCE
        return Action.FIGHT

    ranged = unit.ranged_weapons()
    if distance <= unit.charge_range:
        return Action.CHARGE
    if any(distance <= w.range for w in ranged):
        return Action.HOLD
    if any(distance <= w.range + unit.advance_range for w in ranged):
        return Action.ADVANCE
    return Action.RUSH


__all__ = ["Action", "MeleeEstimate", "decide_action", "estimate_melee_effectiveness"]
