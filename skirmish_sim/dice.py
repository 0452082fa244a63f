"""Six-sided dice primitives shared by every resolver.

Attack and save rolls follow the "natural 1 always fails, natural 6 always
succeeds" rule.  :func:`success_chance` is the closed-form probability used by
analysis and the AI, :func:`roll_batch` is the sampled counterpart used during
an engagement.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol
import random


class DieSource(Protocol):
    """Anything that can produce uniform integers, e.g. ``random.Random``."""

    def randint(self, a: int, b: int) -> int:
        ...


@dataclass(frozen=True)
class RollBatch:
    successes: int
    sixes: int


def success_chance(target: int) -> float:
    """Probability that one die meets or beats ``target``."""

    if target > 6:
        return 1 / 6
    if target < 2:
        target = 2
    return (6 - target + 1) / 6


def roll_die(rng: DieSource) -> int:
    return rng.randint(1, 6)


def roll_batch(count: int, target: int, rng: DieSource) -> RollBatch:
    """Roll ``count`` dice against ``target`` and tally successes and sixes."""

    if count < 0:
        raise ValueError(f"cannot roll a negative number of dice ({count})")
    successes = 0
    sixes = 0
    for _ in range(count):
        die = roll_die(rng)
        if die == 1:
            continue
        if die == 6:
            successes += 1
            sixes += 1
            continue
        if die >= target:
            successes += 1
    return RollBatch(successes=successes, sixes=sixes)


def make_rng(seed: Optional[int] = None) -> random.Random:
    return random.Random(seed)


__all__ = [
    "DieSource",
    "RollBatch",
    "make_rng",
    "roll_batch",
    "roll_die",
    "success_chance",
]
