"""Parse army-list stat blocks into :class:`UnitProfile` records.

Each unit is two consecutive non-blank lines::

    Grunts [5] Q4+ D5+ | 100 | Fast, Tough(3)
    5x Rifle (24", A1), 5x CombatBlade (A1, AP(1), Deadly(2))

Blocks that do not match the expected shape are skipped, never raised.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Tuple
import logging
import re

from .units import SpecialRule, UnitProfile, WeaponProfile

logger = logging.getLogger(__name__)

_NAME_COUNT_RE = re.compile(r"^(.+?)\s*\[(\d+)\]")
_STATS_RE = re.compile(r"Q(\d)\+.*D(\d)\+")
_POINTS_RE = re.compile(r"^(\d+)")
_TOUGH_RE = re.compile(r"^Tough\((\d+)\)$", re.IGNORECASE)
_WEAPON_SPLIT_RE = re.compile(r",(?=\s*\d+x\s)")
_WEAPON_RE = re.compile(r"^(\d+)x\s+([^(]+)\s*\((.+)\)$")
_RANGE_RE = re.compile(r'^(\d+)"?$')
_ATTACKS_RE = re.compile(r"^A(\d+)$", re.IGNORECASE)
_AP_RE = re.compile(r"^AP\((\d+)\)$", re.IGNORECASE)
_DEADLY_RE = re.compile(r"^Deadly\((\d+)\)$", re.IGNORECASE)


def parse_weapon(text: str) -> Optional[WeaponProfile]:
    match = _WEAPON_RE.match(text.strip())
    if not match:
        return None
    count = int(match.group(1))
    name = match.group(2).strip()
    rng = 0
    attacks = 0
    ap = 0
    furious = False
    predator = False
    deadly: Optional[int] = None
    for item in (p.strip() for p in match.group(3).split(",")):
        if _RANGE_RE.match(item):
            rng = int(_RANGE_RE.match(item).group(1))
        elif _ATTACKS_RE.match(item):
            attacks = int(_ATTACKS_RE.match(item).group(1))
        elif _AP_RE.match(item):
            ap = int(_AP_RE.match(item).group(1))
        elif _DEADLY_RE.match(item):
            deadly = int(_DEADLY_RE.match(item).group(1))
        elif item.lower() == "furious":
            furious = True
        elif item.lower() == "predator":
            predator = True
    return WeaponProfile(
        name=name,
        count=count,
        range=rng,
        attacks=attacks,
        ap=ap,
        furious=furious,
        predator=predator,
        deadly=deadly,
    )


def parse_weapon_line(line: str) -> Tuple[WeaponProfile, ...]:
    cleaned = line.replace("\r", "").strip()
    weapons = []
    for chunk in _WEAPON_SPLIT_RE.split(cleaned):
        weapon = parse_weapon(chunk)
        if weapon is None:
            if chunk.strip():
                logger.debug("skipping unparseable weapon %r", chunk.strip())
            continue
        weapons.append(weapon)
    return tuple(weapons)


def _parse_rules(parts: Iterable[str]) -> Tuple[frozenset, Tuple[str, ...], int]:
    rules = set()
    others: List[str] = []
    toughness = 1
    for raw in ",".join(parts).split(","):
        name = raw.strip()
        if not name:
            continue
        tough = _TOUGH_RE.match(name)
        if tough:
            toughness = max(1, int(tough.group(1)))
            continue
        rule = SpecialRule.from_name(name)
        if rule is not None:
            rules.add(rule)
        else:
            others.append(name)
    return frozenset(rules), tuple(others), toughness


def parse_stat_line(stat_line: str, weapon_line: str) -> Optional[UnitProfile]:
    name_and_count, points_text, *rules_text = [s.strip() for s in stat_line.split("|")] + [""]
    if not name_and_count or not points_text:
        return None
    name_match = _NAME_COUNT_RE.match(name_and_count)
    stats_match = _STATS_RE.search(name_and_count)
    if not name_match or not stats_match:
        return None
    points_match = _POINTS_RE.match(points_text)
    if not points_match:
        return None
    points = int(points_match.group(1))
    special_rules, other_rules, toughness = _parse_rules(rules_text)
    return UnitProfile(
        name=name_match.group(1).strip(),
        num_models=int(name_match.group(2)),
        quality=int(stats_match.group(1)),
        defense=int(stats_match.group(2)),
        toughness=toughness,
        points=points,
        special_rules=special_rules,
        other_rules=other_rules,
        weapons=parse_weapon_line(weapon_line),
    )


def parse_unit_block(text: str) -> List[UnitProfile]:
    """Parse every well-formed unit in ``text``, in order of appearance."""

    lines = [line.strip() for line in text.strip().splitlines()]
    lines = [line for line in lines if line]
    units: List[UnitProfile] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("++") or not ("Q" in line and "D" in line):
            i += 1
            continue
        weapon_line = lines[i + 1] if i + 1 < len(lines) else ""
        unit = parse_stat_line(line, weapon_line)
        if unit is None:
            logger.debug("skipping malformed stat block %r", line)
            i += 1
            continue
        units.append(unit)
        i += 2
    return units


def load_units(path: str | Path) -> List[UnitProfile]:
    text = Path(path).read_text(encoding="utf-8")
    return parse_unit_block(text)


__all__ = ["load_units", "parse_stat_line", "parse_unit_block", "parse_weapon", "parse_weapon_line"]
