"""Unit and weapon records.

``UnitProfile`` and ``WeaponProfile`` are the immutable records produced by the
stat-block parser.  ``UnitState`` is the mutable per-engagement copy the
orchestrator works on, so the parsed records can be reused across runs.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple


class SpecialRule(Enum):
    """Unit-level special rules that change how the engine behaves."""

    FAST = "Fast"
    SLOW = "Slow"
    FEARLESS = "Fearless"

    @classmethod
    def from_name(cls, name: str) -> Optional["SpecialRule"]:
        key = name.strip().lower()
        for rule in cls:
            if rule.value.lower() == key:
                return rule
        return None


# (advance, charge) movement allowances in inches
DEFAULT_MOVEMENT: Tuple[int, int] = (6, 12)
FAST_MOVEMENT: Tuple[int, int] = (8, 16)
SLOW_MOVEMENT: Tuple[int, int] = (4, 8)

# turns in one engagement
MAX_TURNS = 4


def movement_for(rules: FrozenSet[SpecialRule]) -> Tuple[int, int]:
    if SpecialRule.FAST in rules:
        return FAST_MOVEMENT
    if SpecialRule.SLOW in rules:
        return SLOW_MOVEMENT
    return DEFAULT_MOVEMENT


@dataclass(frozen=True)
class WeaponProfile:
    """One weapon line of a unit.

    ``range`` of 0 marks a melee weapon.  Modifiers default to "absent":
    ``furious``/``predator`` are off and ``deadly`` is ``None``.
    """

    name: str
    count: int = 1
    range: int = 0
    attacks: int = 1
    ap: int = 0
    furious: bool = False
    predator: bool = False
    deadly: Optional[int] = None

    @property
    def is_melee(self) -> bool:
        return self.range == 0

    @property
    def is_ranged(self) -> bool:
        return self.range > 0

    @property
    def wound_multiplier(self) -> int:
        return self.deadly if self.deadly else 1


BASELINE_MELEE_WEAPON = WeaponProfile(name="Close Combat", count=0, range=0, attacks=1, ap=0)


def first_melee_weapon(weapons) -> WeaponProfile:
    for weapon in weapons:
        if weapon.is_melee:
            return weapon
    return BASELINE_MELEE_WEAPON


@dataclass(frozen=True)
class UnitProfile:
    """A parsed unit as it appears in the army list."""

    name: str
    num_models: int
    quality: int
    defense: int
    toughness: int = 1
    points: int = 0
    special_rules: FrozenSet[SpecialRule] = frozenset()
    other_rules: Tuple[str, ...] = ()
    weapons: Tuple[WeaponProfile, ...] = ()

    def has_rule(self, rule: SpecialRule) -> bool:
        return rule in self.special_rules

    def melee_weapon(self) -> WeaponProfile:
        return first_melee_weapon(self.weapons)

    def ranged_weapons(self) -> List[WeaponProfile]:
        return [w for w in self.weapons if w.is_ranged]

    @property
    def advance_range(self) -> int:
        return movement_for(self.special_rules)[0]

    @property
    def charge_range(self) -> int:
        return movement_for(self.special_rules)[1]


@dataclass
class UnitState:
    """Mutable combat state for one side of an engagement."""

    name: str
    num_models: int
    original_num_models: int
    quality: int
    defense: int
    toughness: int = 1
    special_rules: FrozenSet[SpecialRule] = frozenset()
    weapons: List[WeaponProfile] = field(default_factory=list)
    advance_range: int = DEFAULT_MOVEMENT[0]
    charge_range: int = DEFAULT_MOVEMENT[1]
    shaken: bool = False
    fought_in_melee_this_turn: bool = False

    @classmethod
    def from_profile(cls, profile: UnitProfile) -> "UnitState":
        advance, charge = movement_for(profile.special_rules)
        return cls(
            name=profile.name,
            num_models=profile.num_models,
            original_num_models=profile.num_models,
            quality=profile.quality,
            defense=profile.defense,
            toughness=profile.toughness or 1,
            special_rules=frozenset(profile.special_rules),
            weapons=list(profile.weapons),
            advance_range=advance,
            charge_range=charge,
        )

    def alive(self) -> bool:
        return self.num_models > 0

    def has_rule(self, rule: SpecialRule) -> bool:
        return rule in self.special_rules

    def melee_weapon(self) -> WeaponProfile:
        return first_melee_weapon(self.weapons)

    def ranged_weapons(self) -> List[WeaponProfile]:
        return [w for w in self.weapons if w.is_ranged]

    def remove_models(self, count: int) -> int:
        """Remove up to ``count`` models and return how many were removed."""

        removed = max(0, min(count, self.num_models))
        self.num_models -= removed
        return removed

    def copy(self) -> "UnitState":
        return UnitState(
            name=self.name,
            num_models=self.num_models,
            original_num_models=self.original_num_models,
            quality=self.quality,
            defense=self.defense,
            toughness=self.toughness,
            special_rules=frozenset(self.special_rules),
            weapons=list(self.weapons),
            advance_range=self.advance_range,
            charge_range=self.charge_range,
            shaken=self.shaken,
            fought_in_melee_this_turn=self.fought_in_melee_this_turn,
        )


__all__ = [
    "BASELINE_MELEE_WEAPON",
    "DEFAULT_MOVEMENT",
    "FAST_MOVEMENT",
    "MAX_TURNS",
    "SLOW_MOVEMENT",
    "SpecialRule",
    "UnitProfile",
    "UnitState",
    "WeaponProfile",
    "first_melee_weapon",
    "movement_for",
]
