"""Static probability tables for a single unit.

Everything here is closed-form and uses only :func:`success_chance`; nothing
touches the engagement state or a die source.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .dice import success_chance
from .units import MAX_TURNS, UnitProfile

REFERENCE_DEFENSE = 4


@dataclass(frozen=True)
class WeaponAnalysis:
    weapon: str
    attacks_per_model: int
    ap: int
    hit_chance: float
    fail_save_chance: float

    @property
    def total_wound_chance(self) -> float:
        return self.hit_chance * self.fail_save_chance


@dataclass
class UnitAnalysis:
    unit_name: str
    weapons: List[WeaponAnalysis] = field(default_factory=list)
    save_chance_vs_ap1: float = 0.0
    max_rush_distance: int = 0

    def to_rows(self) -> List[Dict[str, Any]]:
        rows = []
        for w in self.weapons:
            rows.append(
                {
                    "Weapon": w.weapon,
                    "Attacks per Model": w.attacks_per_model,
                    "AP": w.ap,
                    "Hit Chance (%)": f"{w.hit_chance * 100:.2f}",
                    f"Fail Save vs D{REFERENCE_DEFENSE}+ (%)": f"{w.fail_save_chance * 100:.2f}",
                    "Total Wound Chance (%)": f"{w.total_wound_chance * 100:.2f}",
                }
            )
        return rows


def generate_unit_analysis(unit: UnitProfile) -> UnitAnalysis:
    hit_chance = success_chance(unit.quality)
    weapons = [
        WeaponAnalysis(
            weapon=w.name,
            attacks_per_model=w.attacks,
            ap=w.ap,
            hit_chance=hit_chance,
            fail_save_chance=1 - success_chance(REFERENCE_DEFENSE + w.ap),
        )
        for w in unit.weapons
    ]
    return UnitAnalysis(
        unit_name=unit.name,
        weapons=weapons,
        save_chance_vs_ap1=success_chance(unit.defense + 1),
        max_rush_distance=unit.charge_range * MAX_TURNS,
    )


__all__ = ["REFERENCE_DEFENSE", "UnitAnalysis", "WeaponAnalysis", "generate_unit_analysis"]
