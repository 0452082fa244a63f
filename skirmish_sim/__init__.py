"""Skirmish sim: parse unit stat blocks, analyse them, and simulate two-unit engagements."""

from importlib import import_module
from typing import Any

__version__ = "0.1.0"
__all__ = [
    "Action",
    "EngagementConfig",
    "EngagementOdds",
    "EngagementResolver",
    "EngagementResult",
    "MoraleOutcome",
    "SpecialRule",
    "UnitAnalysis",
    "UnitProfile",
    "UnitState",
    "WeaponProfile",
    "decide_action",
    "generate_unit_analysis",
    "load_units",
    "parse_unit_block",
    "roll_batch",
    "score_engagement",
    "simulate_engagement",
    "success_chance",
    "__version__",
]

_EXPORTS = {
    "Action": ("tactics", "Action"),
    "decide_action": ("tactics", "decide_action"),
    "EngagementConfig": ("engagement", "EngagementConfig"),
    "EngagementResolver": ("engagement", "EngagementResolver"),
    "EngagementResult": ("engagement", "EngagementResult"),
    "simulate_engagement": ("engagement", "simulate_engagement"),
    "EngagementOdds": ("batch", "EngagementOdds"),
    "score_engagement": ("batch", "score_engagement"),
    "MoraleOutcome": ("simulators.morale", "MoraleOutcome"),
    "SpecialRule": ("units", "SpecialRule"),
    "UnitProfile": ("units", "UnitProfile"),
    "UnitState": ("units", "UnitState"),
    "WeaponProfile": ("units", "WeaponProfile"),
    "UnitAnalysis": ("analysis", "UnitAnalysis"),
    "generate_unit_analysis": ("analysis", "generate_unit_analysis"),
    "load_units": ("parser", "load_units"),
    "parse_unit_block": ("parser", "parse_unit_block"),
    "roll_batch": ("dice", "roll_batch"),
    "success_chance": ("dice", "success_chance"),
}


def __getattr__(name: str) -> Any:
    if name in _EXPORTS:
        module_name, attr_name = _EXPORTS[name]
        module = import_module(f".{module_name}", __name__)
        attr = getattr(module, attr_name)
        globals()[name] = attr
        return attr
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def __dir__() -> list[str]:
    return sorted(set(list(globals().keys()) + list(__all__)))
