"""Monte Carlo odds for a match-up.

Runs many independent engagements from the same two units and summarises the
outcomes.  A master generator seeded once hands every run its own seed, so a
batch is reproducible from ``seed`` alone.
"""
from __future__ import annotations

from dataclasses import dataclass
import random

import numpy as np

from .engagement import UnitInput, simulate_engagement


@dataclass
class EngagementOdds:
    n_sims: int
    win_prob_a: float
    win_prob_b: float
    draw_prob: float
    mean_surviving_a: float
    mean_surviving_b: float
    mean_turns: float
    mean_final_distance: float


def score_engagement(
    unit_a: UnitInput,
    unit_b: UnitInput,
    n_sims: int = 1000,
    seed: int = 12345,
    starting_distance: float = 24,
    attacker_first: bool = True,
) -> EngagementOdds:
    if n_sims < 1:
        raise ValueError(f"n_sims must be at least 1, got {n_sims}")
    master = random.Random(seed)

    surviving = np.zeros((n_sims, 2), dtype=np.int64)
    turns = np.zeros(n_sims, dtype=np.int64)
    distances = np.zeros(n_sims, dtype=np.float64)
    for i in range(n_sims):
        result = simulate_engagement(
            unit_a,
            unit_b,
            starting_distance=starting_distance,
            attacker_first=attacker_first,
            seed=master.randint(1, 10_000_000),
        )
        surviving[i] = (result.surviving_a, result.surviving_b)
        turns[i] = result.turns_elapsed
        distances[i] = result.final_distance

    a_alive = surviving[:, 0] > 0
    b_alive = surviving[:, 1] > 0
    wins_a = np.count_nonzero(a_alive & ~b_alive)
    wins_b = np.count_nonzero(b_alive & ~a_alive)
    return EngagementOdds(
        n_sims=n_sims,
        win_prob_a=float(wins_a / n_sims),
        win_prob_b=float(wins_b / n_sims),
        draw_prob=float((n_sims - wins_a - wins_b) / n_sims),
        mean_surviving_a=float(surviving[:, 0].mean()),
        mean_surviving_b=float(surviving[:, 1].mean()),
        mean_turns=float(turns.mean()),
        mean_final_distance=float(distances.mean()),
    )


__all__ = ["EngagementOdds", "score_engagement"]
