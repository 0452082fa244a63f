from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional
import os, json

import yaml

DEFAULT_ENV_PREFIX = "SKIRMISH_SIM__"

DEFAULTS: Dict[str, Any] = {
    "engagement": {
        "starting_distance": 24,
        "attacker_first": True,
        "seed": None,
    },
    "bench": {
        "n_sims": 1000,
        "seed": 12345,
    },
}

def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out

def _load_one(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    if path.endswith(".json"):
        d = json.loads(text)
    else:
        # YAML is a superset of JSON, so anything else goes through safe_load
        d = yaml.safe_load(text)
    if d is None:
        return {}
    if not isinstance(d, dict):
        raise ValueError(f"config file {path} must contain a mapping, got {type(d).__name__}")
    return d

def load_configs(paths: Iterable[str] | None) -> Dict[str, Any]:
    cfg: Dict[str, Any] = {}
    for p in (paths or []):
        cfg = _deep_merge(cfg, _load_one(p))
    return cfg

def env_overrides(prefix: str = DEFAULT_ENV_PREFIX) -> Dict[str, Any]:
    # Nested via double underscores: SKIRMISH_SIM__BENCH__N_SIMS=500
    out: Dict[str, Any] = {}
    for k, v in os.environ.items():
        if not k.startswith(prefix):
            continue
        parts = k[len(prefix):].split("__")
        cur = out
        for i, part in enumerate(parts):
            key = part.lower()
            if i == len(parts) - 1:
                cur[key] = _coerce(v)
            else:
                cur = cur.setdefault(key, {})
    return out

def _coerce(s: str) -> Any:
    t = s.strip().lower()
    if t in ("true", "false"):
        return t == "true"
    if t in ("none", "null", ""):
        return None
    try:
        if "." in t:
            return float(t)
        return int(t)
    except ValueError:
        return s

def apply_cli_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    return _deep_merge(base, overrides or {})


@dataclass
class EngagementSettings:
    """Resolved knobs for one CLI run."""

    starting_distance: float = 24
    attacker_first: bool = True
    seed: Optional[int] = None
    n_sims: int = 1000
    bench_seed: int = 12345

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "EngagementSettings":
        merged = _deep_merge(DEFAULTS, cfg or {})
        eng = merged.get("engagement") or {}
        bench = merged.get("bench") or {}
        distance = float(eng.get("starting_distance", 24))
        if distance < 0:
            raise ValueError(f"engagement.starting_distance must be >= 0, got {distance}")
        seed = eng.get("seed")
        return cls(
            starting_distance=int(distance) if distance.is_integer() else distance,
            attacker_first=bool(eng.get("attacker_first", True)),
            seed=None if seed is None else int(seed),
            n_sims=int(bench.get("n_sims", 1000)),
            bench_seed=int(bench.get("seed", 12345)),
        )


def resolve_settings(
    paths: Iterable[str] | None = None,
    prefix: str = DEFAULT_ENV_PREFIX,
    cli: Dict[str, Any] | None = None,
) -> EngagementSettings:
    cfg = load_configs(paths)
    cfg = _deep_merge(cfg, env_overrides(prefix))
    cfg = apply_cli_overrides(cfg, cli or {})
    return EngagementSettings.from_config(cfg)

__all__ = [
    "DEFAULTS",
    "DEFAULT_ENV_PREFIX",
    "EngagementSettings",
    "load_configs",
    "env_overrides",
    "apply_cli_overrides",
    "resolve_settings",
    "_deep_merge",
]
