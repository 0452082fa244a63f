import random

import pytest

from skirmish_sim.units import UnitProfile, WeaponProfile


class ScriptedDice:
    """Die source that replays a fixed sequence of rolls."""

    def __init__(self, rolls):
        self.rolls = list(rolls)
        self.calls = 0

    def randint(self, a, b):
        if not self.rolls:
            raise AssertionError(f"scripted dice exhausted after {self.calls} rolls")
        self.calls += 1
        value = self.rolls.pop(0)
        assert a <= value <= b
        return value

    @property
    def remaining(self):
        return len(self.rolls)


@pytest.fixture
def scripted_dice():
    return ScriptedDice


@pytest.fixture
def rng():
    return random.Random(1234)


RIFLE = WeaponProfile(name="Rifle", count=5, range=24, attacks=1, ap=0)
BLADE = WeaponProfile(name="CombatBlade", count=5, range=0, attacks=1, ap=0)


def _make_unit(
    name="Grunts",
    num_models=5,
    quality=4,
    defense=5,
    toughness=1,
    rules=(),
    weapons=(RIFLE,),
):
    return UnitProfile(
        name=name,
        num_models=num_models,
        quality=quality,
        defense=defense,
        toughness=toughness,
        special_rules=frozenset(rules),
        weapons=tuple(weapons),
    )


@pytest.fixture
def make_unit():
    return _make_unit


@pytest.fixture
def grunts():
    return _make_unit(name="Grunts A")


@pytest.fixture
def grunts_b():
    return _make_unit(name="Grunts B")
