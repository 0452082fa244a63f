"""Combat resolution for ranged fire and melee.

Hits are rolled against the attacker's quality, saves against the defender's
defense plus the weapon's AP.  Furious and Predator add hits from natural
sixes, Deadly multiplies the wounds that get through.  Every roll goes through
the die source passed in by the caller so a seeded generator reproduces a
whole exchange.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..dice import DieSource, roll_batch
from ..units import UnitState, WeaponProfile

# Quality used by a unit that already fought in melee this turn: only a
# natural six hits.
FATIGUED_QUALITY = 7


# =============================
# Result records
# =============================


@dataclass(frozen=True)
class HitResult:
    hits: int
    ap: int
    sixes: int = 0


@dataclass(frozen=True)
class RangedResult:
    in_range: bool
    total_wounds: int = 0
    hits: int = 0
    saves: int = 0


@dataclass(frozen=True)
class MeleeResult:
    wounds_to_defender: int
    wounds_to_attacker: int
    attacker_weapon: WeaponProfile
    defender_weapon: WeaponProfile

    @property
    def loser(self) -> Optional[str]:
        """``"attacker"``/``"defender"`` for the side that took more wounds."""

        if self.wounds_to_defender > self.wounds_to_attacker:
            return "defender"
        if self.wounds_to_attacker > self.wounds_to_defender:
            return "attacker"
        return None


# =============================
# Dice steps
# =============================


def resolve_hits(
    weapon: WeaponProfile, attacker_quality: int, num_models: int, rng: DieSource
) -> HitResult:
    dice = num_models * weapon.attacks
    batch = roll_batch(dice, attacker_quality, rng)
    hits = batch.successes
    if weapon.furious:
        hits += batch.sixes
    if weapon.predator and batch.sixes > 0:
        # bonus dice do not chain into further Predator rolls
        bonus = roll_batch(batch.sixes, attacker_quality, rng)
        hits += bonus.successes
    return HitResult(hits=hits, ap=weapon.ap, sixes=batch.sixes)


def resolve_saves(hit_count: int, defense: int, ap: int, rng: DieSource) -> int:
    return roll_batch(hit_count, defense + ap, rng).successes


def apply_deadly(wounds: int, weapon: WeaponProfile) -> int:
    return wounds * weapon.wound_multiplier


def effective_quality(unit: UnitState) -> int:
    return FATIGUED_QUALITY if unit.fought_in_melee_this_turn else unit.quality


# =============================
# Exchanges
# =============================


def ranged_exchange(
    weapon: WeaponProfile,
    attacker: UnitState,
    num_models: int,
    defender: UnitState,
    distance: float,
    rng: DieSource,
) -> RangedResult:
    """Fire ``weapon`` from ``num_models`` models of ``attacker`` at ``defender``.

    Nothing is rolled when the target sits beyond the weapon's range.
    """
    if distance > weapon.range:
        return RangedResult(in_range=False)

    hit = resolve_hits(weapon, attacker.quality, num_models, rng)
    saves = resolve_saves(hit.hits, defender.defense, hit.ap, rng)
    wounds = apply_deadly(hit.hits - saves, weapon)
    return RangedResult(in_range=True, total_wounds=wounds, hits=hit.hits, saves=saves)


def melee_exchange(attacker: UnitState, defender: UnitState, rng: DieSource) -> MeleeResult:
    """Resolve one simultaneous round of close combat between two units."""

    attacker_weapon = attacker.melee_weapon()
    defender_weapon = defender.melee_weapon()

    attacker_hits = resolve_hits(
        attacker_weapon, effective_quality(attacker), attacker.num_models, rng
    )
    defender_hits = resolve_hits(
        defender_weapon, effective_quality(defender), defender.num_models, rng
    )

    attacker_saves = resolve_saves(defender_hits.hits, attacker.defense, defender_hits.ap, rng)
    defender_saves = resolve_saves(attacker_hits.hits, defender.defense, attacker_hits.ap, rng)

    return MeleeResult(
        wounds_to_defender=apply_deadly(attacker_hits.hits - defender_saves, attacker_weapon),
        wounds_to_attacker=apply_deadly(defender_hits.hits - attacker_saves, defender_weapon),
        attacker_weapon=attacker_weapon,
        defender_weapon=defender_weapon,
    )


def kills_from_wounds(wounds: int, toughness: int) -> int:
    return max(0, wounds) // max(1, toughness)


__all__ = [
    "FATIGUED_QUALITY",
    "HitResult",
    "MeleeResult",
    "RangedResult",
    "apply_deadly",
    "effective_quality",
    "kills_from_wounds",
    "melee_exchange",
    "ranged_exchange",
    "resolve_hits",
    "resolve_saves",
]
