from __future__ import annotations
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Sequence
from datetime import datetime, timezone
import json

from ..analysis import UnitAnalysis
from ..batch import EngagementOdds
from ..engagement import EngagementResult
from ..units import MAX_TURNS, SpecialRule, UnitProfile


def _fmt_distance(value: float) -> str:
    return f'{value:g}"'


def _table(rows: Sequence[Dict[str, Any]]) -> List[str]:
    if not rows:
        return ["  (no weapons)"]
    headers = list(rows[0].keys())
    widths = {h: max(len(h), *(len(str(r.get(h, ""))) for r in rows)) for h in headers}
    sep = "+".join("-" * (widths[h] + 2) for h in headers)
    out = [" | ".join(h.ljust(widths[h]) for h in headers), sep]
    for r in rows:
        out.append(" | ".join(str(r.get(h, "")).ljust(widths[h]) for h in headers))
    return out


def _rule_names(unit: UnitProfile) -> List[str]:
    names = [r.value for r in SpecialRule if r in unit.special_rules]
    if unit.toughness > 1:
        names.append(f"Tough({unit.toughness})")
    names.extend(unit.other_rules)
    return names


def format_analysis(unit: UnitProfile, analysis: UnitAnalysis) -> str:
    lines = [f"--- Analysis for: {unit.name} [{unit.num_models}] ---"]
    rules = _rule_names(unit)
    if rules:
        lines.append(f"Rules: {', '.join(rules)}")
    lines.extend(_table(analysis.to_rows()))
    lines.append("Defensive Profile:")
    lines.append(f"  > Chance to Save vs AP(1): {analysis.save_chance_vs_ap1 * 100:.2f}%")
    lines.append("Mobility Profile:")
    lines.append(f"  > Max movement in {MAX_TURNS} turns (Rushing): {_fmt_distance(analysis.max_rush_distance)}")
    return "\n".join(lines)


def format_odds(unit_a: UnitProfile, unit_b: UnitProfile, odds: EngagementOdds) -> str:
    lines = [
        f"Odds over {odds.n_sims} engagements:",
        f"  > {unit_a.name} wins: {odds.win_prob_a * 100:.1f}%",
        f"  > {unit_b.name} wins: {odds.win_prob_b * 100:.1f}%",
        f"  > Both standing / both destroyed: {odds.draw_prob * 100:.1f}%",
        f"  > Mean surviving {unit_a.name}: {odds.mean_surviving_a:.2f}",
        f"  > Mean surviving {unit_b.name}: {odds.mean_surviving_b:.2f}",
        f"  > Mean turns: {odds.mean_turns:.2f}",
        f"  > Mean final distance: {_fmt_distance(round(odds.mean_final_distance, 2))}",
    ]
    return "\n".join(lines)


@dataclass
class EngagementReport:
    timestamp: str
    unit_a: str
    unit_b: str
    starting_models_a: int
    starting_models_b: int
    starting_distance: float
    attacker_first: bool
    seed: int | None
    turns_elapsed: int
    final_distance: float
    surviving_a: int
    surviving_b: int
    log: List[str] = field(default_factory=list)

    @classmethod
    def from_result(
        cls,
        unit_a: UnitProfile,
        unit_b: UnitProfile,
        result: EngagementResult,
        starting_distance: float,
        attacker_first: bool,
        seed: int | None,
    ) -> "EngagementReport":
        timestamp = datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")
        return cls(
            timestamp=timestamp,
            unit_a=unit_a.name,
            unit_b=unit_b.name,
            starting_models_a=unit_a.num_models,
            starting_models_b=unit_b.num_models,
            starting_distance=starting_distance,
            attacker_first=attacker_first,
            seed=seed,
            turns_elapsed=result.turns_elapsed,
            final_distance=result.final_distance,
            surviving_a=result.surviving_a,
            surviving_b=result.surviving_b,
            log=list(result.log),
        )

    def to_text(self) -> str:
        lines = ["Final Tally:"]
        lines.append(f"  > Turns Elapsed: {self.turns_elapsed}")
        lines.append(f"  > Final Distance: {_fmt_distance(self.final_distance)}")
        lines.append(f"  > Surviving {self.unit_a}: {self.surviving_a}")
        lines.append(f"  > Surviving {self.unit_b}: {self.surviving_b}")
        lines.append("")
        lines.append("Combat Log:")
        lines.extend(self.log)
        return "\n".join(lines)

    def to_json(self) -> str:
        d = asdict(self)
        return json.dumps(d, indent=2, sort_keys=False)

    def to_markdown(self) -> str:
        lines = []
        lines.append(f"# Engagement Report: {self.unit_a} vs {self.unit_b}")
        lines.append(f"- **Timestamp:** {self.timestamp}")
        first = self.unit_a if self.attacker_first else self.unit_b
        lines.append(
            f"- **Start:** {_fmt_distance(self.starting_distance)}  |  **Acts first:** {first}  |  **Seed:** {self.seed}"
        )
        lines.append("\n## Final Tally")
        lines.append(f"- turns elapsed: {self.turns_elapsed}")
        lines.append(f"- final distance: {_fmt_distance(self.final_distance)}")
        lines.append(f"- {self.unit_a}: {self.surviving_a}/{self.starting_models_a} models")
        lines.append(f"- {self.unit_b}: {self.surviving_b}/{self.starting_models_b} models")
        lines.append("\n## Combat Log")
        for entry in self.log:
            if entry.startswith("---"):
                lines.append(f"\n### {entry.strip('- ')}")
            else:
                lines.append(f"- {entry}")
        return "\n".join(lines)

    def save(self, path: str) -> None:
        text = self.to_markdown() if path.endswith(".md") else self.to_json()
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)

__all__ = ["EngagementReport", "format_analysis", "format_odds"]
