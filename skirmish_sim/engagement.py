"""Two-unit engagement loop.

:class:`EngagementResolver` clones both units into mutable combat state and
plays up to :data:`MAX_TURNS` turns.  Each turn the units act in a fixed order;
the tactical AI picks an action and the resolver dispatches it to movement,
ranged fire or a melee round followed by a morale test.  A charge ends the
turn for both sides.  Every state change is written to a narrative log that is
returned with the final tally.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union
import logging

from .dice import DieSource, make_rng
from .simulators.combat import kills_from_wounds, melee_exchange, ranged_exchange
from .simulators.morale import MoraleOutcome, apply_morale, resolve_morale
from .tactics import Action, decide_action
from .units import MAX_TURNS, UnitProfile, UnitState, WeaponProfile

logger = logging.getLogger(__name__)

UnitInput = Union[UnitProfile, UnitState]


@dataclass
class EngagementConfig:
    unit_a: UnitInput
    unit_b: UnitInput
    starting_distance: float = 24
    attacker_first: bool = True
    seed: Optional[int] = None


@dataclass
class EngagementResult:
    turns_elapsed: int
    final_distance: float
    surviving_a: int
    surviving_b: int
    log: List[str] = field(default_factory=list)

    @property
    def winner(self) -> Optional[str]:
        """``"a"`` or ``"b"`` when only one side is left standing."""

        if self.surviving_a > 0 and self.surviving_b == 0:
            return "a"
        if self.surviving_b > 0 and self.surviving_a == 0:
            return "b"
        return None


def clone_for_combat(unit: UnitInput) -> UnitState:
    """Independent combat copy with fresh per-engagement bookkeeping."""

    if isinstance(unit, UnitProfile):
        return UnitState.from_profile(unit)
    state = unit.copy()
    state.original_num_models = state.num_models
    state.shaken = False
    state.fought_in_melee_this_turn = False
    return state


def _fmt_distance(value: float) -> str:
    return f'{value:g}"'


class EngagementResolver:
    def __init__(self, config: EngagementConfig, rng: Optional[DieSource] = None):
        if config.starting_distance < 0:
            raise ValueError(f"starting distance must be >= 0, got {config.starting_distance}")
        self.cfg = config
        self.rng: DieSource = rng if rng is not None else make_rng(config.seed)
        self.unit_a = clone_for_combat(config.unit_a)
        self.unit_b = clone_for_combat(config.unit_b)
        self.distance: float = config.starting_distance
        self.turns_elapsed = 0
        self.log: List[str] = []

    # ----- Public API -----

    def resolve(self) -> EngagementResult:
        first, second = self._turn_order()
        for turn in range(1, MAX_TURNS + 1):
            if not self._both_alive():
                break
            self.turns_elapsed = turn
            self.log.append(f"--- Turn {turn} ---")
            self.unit_a.fought_in_melee_this_turn = False
            self.unit_b.fought_in_melee_this_turn = False

            charged = self._act(first, second)
            if not charged and self._both_alive():
                self._act(second, first)

        logger.debug(
            "engagement finished after %d turns: %s=%d %s=%d at %s",
            self.turns_elapsed,
            self.unit_a.name,
            self.unit_a.num_models,
            self.unit_b.name,
            self.unit_b.num_models,
            _fmt_distance(self.distance),
        )
        return EngagementResult(
            turns_elapsed=self.turns_elapsed,
            final_distance=self.distance,
            surviving_a=self.unit_a.num_models,
            surviving_b=self.unit_b.num_models,
            log=list(self.log),
        )

    # ----- Actions -----

    def _act(self, unit: UnitState, opponent: UnitState) -> bool:
        """Carry out one unit's action; returns True when it charged."""

        action = decide_action(unit, opponent, self.distance)
        logger.debug(
            "turn %d: %s -> %s at %s",
            self.turns_elapsed,
            unit.name,
            action.value,
            _fmt_distance(self.distance),
        )

        if action is Action.IDLE:
            self.log.append(f"{unit.name} is Shaken and idles to recover.")
            unit.shaken = False
        elif action is Action.CHARGE:
            self.distance = 0
            self.log.append(f"{unit.name} charges into {opponent.name}.")
            self._melee_round(unit, opponent)
            return True
        elif action is Action.FIGHT:
            self.log.append(f"{unit.name} fights {opponent.name} in melee.")
            self._melee_round(unit, opponent)
        elif action in (Action.HOLD, Action.ADVANCE):
            self._move_and_shoot(unit, opponent, action)
        elif action is Action.RUSH:
            self.distance = max(0, self.distance - unit.charge_range)
            self.log.append(f"{unit.name} rushes {_fmt_distance(unit.charge_range)} forward.")
        return False

    def _move_and_shoot(self, unit: UnitState, opponent: UnitState, action: Action) -> None:
        text = "holds and shoots"
        if action is Action.ADVANCE:
            if self.distance == 0:
                self.distance += unit.advance_range
                text = f"retreats {_fmt_distance(unit.advance_range)} and shoots"
            else:
                self.distance = max(0, self.distance - unit.advance_range)
                text = f"advances {_fmt_distance(unit.advance_range)} and shoots"
        self.log.append(f"{unit.name} {text}.")

        weapon = self._pick_ranged_weapon(unit)
        if weapon is None:
            return
        result = ranged_exchange(weapon, unit, unit.num_models, opponent, self.distance, self.rng)
        kills = min(opponent.num_models, kills_from_wounds(result.total_wounds, opponent.toughness))
        opponent.remove_models(kills)
        self.log.append(f"> {unit.name} fires {weapon.name}: {kills} models killed.")

    def _pick_ranged_weapon(self, unit: UnitState) -> Optional[WeaponProfile]:
        best: Optional[WeaponProfile] = None
        for weapon in unit.ranged_weapons():
            if weapon.range < self.distance:
                continue
            if best is None or weapon.range > best.range:
                best = weapon
        return best

    # ----- Melee -----

    def _melee_round(self, unit: UnitState, opponent: UnitState) -> None:
        result = melee_exchange(unit, opponent, self.rng)
        unit.fought_in_melee_this_turn = True
        opponent.fought_in_melee_this_turn = True

        kills_on_opponent = opponent.remove_models(
            kills_from_wounds(result.wounds_to_defender, opponent.toughness)
        )
        kills_on_unit = unit.remove_models(
            kills_from_wounds(result.wounds_to_attacker, unit.toughness)
        )
        self.log.append(
            f"> Melee result: {unit.name} inflicts {kills_on_opponent} kills. "
            f"{opponent.name} inflicts {kills_on_unit} kills."
        )

        loser_side = result.loser
        if loser_side is None:
            self.log.append("> Melee is a draw. No morale test needed.")
            return
        loser = opponent if loser_side == "defender" else unit
        if not loser.alive():
            return
        self.log.append(f"> {loser.name} lost the combat and must test morale.")
        outcome = resolve_morale(loser, self.rng)
        apply_morale(loser, outcome)
        if outcome is MoraleOutcome.PASS:
            self.log.append(f">> {loser.name} passed morale.")
        elif outcome is MoraleOutcome.SHAKEN:
            self.log.append(f">> {loser.name} is Shaken!")
        else:
            self.log.append(f">> {loser.name} failed morale and retreats! The unit is destroyed.")

    # ----- Utility -----

    def _turn_order(self) -> Tuple[UnitState, UnitState]:
        if self.cfg.attacker_first:
            return self.unit_a, self.unit_b
        return self.unit_b, self.unit_a

    def _both_alive(self) -> bool:
        return self.unit_a.alive() and self.unit_b.alive()


def simulate_engagement(
    unit_a: UnitInput,
    unit_b: UnitInput,
    starting_distance: float = 24,
    attacker_first: bool = True,
    seed: Optional[int] = None,
    rng: Optional[DieSource] = None,
) -> EngagementResult:
    config = EngagementConfig(
        unit_a=unit_a,
        unit_b=unit_b,
        starting_distance=starting_distance,
        attacker_first=attacker_first,
        seed=seed,
    )
    return EngagementResolver(config, rng=rng).resolve()


__all__ = [
    "MAX_TURNS",
    "EngagementConfig",
    "EngagementResolver",
    "EngagementResult",
    "clone_for_combat",
    "simulate_engagement",
]
