"""
Unit tests for hit, save and wound resolution.

Scripted dice pin every roll so the exact modifier arithmetic can be checked.
"""
import pytest

from skirmish_sim.simulators.combat import (
    FATIGUED_QUALITY,
    apply_deadly,
    kills_from_wounds,
    melee_exchange,
    ranged_exchange,
    resolve_hits,
    resolve_saves,
)
from skirmish_sim.units import BASELINE_MELEE_WEAPON, UnitState, WeaponProfile


def state(make_unit, **kwargs):
    return UnitState.from_profile(make_unit(**kwargs))


class TestResolveHits:
    def test_dice_count_is_models_times_attacks(self, scripted_dice):
        weapon = WeaponProfile(name="Claws", attacks=2)
        dice = scripted_dice([4, 4, 3, 2, 5, 1])
        result = resolve_hits(weapon, 4, 3, dice)
        assert result.hits == 3
        assert dice.remaining == 0

    def test_furious_adds_a_hit_per_six(self, scripted_dice):
        weapon = WeaponProfile(name="Axe", attacks=1, furious=True)
        result = resolve_hits(weapon, 4, 4, scripted_dice([6, 6, 4, 1]))
        # two sixes count twice, the four once
        assert result.hits == 5
        assert result.sixes == 2

    def test_predator_rolls_bonus_dice_once(self, scripted_dice):
        weapon = WeaponProfile(name="Fangs", attacks=1, predator=True)
        # base: 6, 6, 2 -> 2 hits, 2 sixes; bonus: 6, 4 -> 2 more hits
        dice = scripted_dice([6, 6, 2, 6, 4])
        result = resolve_hits(weapon, 4, 3, dice)
        assert result.hits == 4
        assert dice.remaining == 0

    def test_predator_without_sixes_rolls_nothing_extra(self, scripted_dice):
        weapon = WeaponProfile(name="Fangs", attacks=1, predator=True)
        dice = scripted_dice([5, 4])
        assert resolve_hits(weapon, 4, 2, dice).hits == 2
        assert dice.remaining == 0

    def test_hit_result_carries_ap(self, scripted_dice):
        weapon = WeaponProfile(name="Lance", attacks=1, ap=2)
        assert resolve_hits(weapon, 4, 1, scripted_dice([3])).ap == 2


class TestResolveSaves:
    def test_ap_raises_save_target(self, scripted_dice):
        # defense 4 + AP 1 -> saves on 5+
        assert resolve_saves(3, 4, 1, scripted_dice([4, 5, 6])) == 2

    def test_natural_six_always_saves(self, scripted_dice):
        assert resolve_saves(2, 5, 3, scripted_dice([6, 5])) == 1


def test_deadly_multiplies_wounds():
    weapon = WeaponProfile(name="Rail", deadly=3)
    assert apply_deadly(2, weapon) == 6
    assert apply_deadly(2, WeaponProfile(name="Plain")) == 2


def test_deadly_two_turns_three_net_wounds_into_six(make_unit, scripted_dice):
    weapon = WeaponProfile(name="Rail", count=3, range=24, attacks=1, deadly=2)
    attacker = state(make_unit, quality=4)
    defender = state(make_unit, defense=5)
    # three hits on 4s, then three failed saves
    dice = scripted_dice([4, 4, 4, 1, 2, 3])
    result = ranged_exchange(weapon, attacker, 3, defender, 12, dice)
    assert result.hits == 3
    assert result.saves == 0
    assert result.total_wounds == 6
    assert kills_from_wounds(result.total_wounds, 3) == 2


def test_out_of_range_rolls_nothing(make_unit, scripted_dice):
    weapon = WeaponProfile(name="Pistol", range=12, attacks=1)
    dice = scripted_dice([])
    result = ranged_exchange(weapon, state(make_unit), 5, state(make_unit), 13, dice)
    assert result.in_range is False
    assert result.total_wounds == 0


def test_range_boundary_is_inclusive(make_unit, scripted_dice):
    weapon = WeaponProfile(name="Pistol", range=12, attacks=1)
    result = ranged_exchange(weapon, state(make_unit), 1, state(make_unit), 12, scripted_dice([5, 1]))
    assert result.in_range is True
    assert result.total_wounds == 1


class TestMeleeExchange:
    def test_missing_melee_weapon_uses_baseline(self, make_unit, scripted_dice):
        a = state(make_unit, num_models=1)
        b = state(make_unit, num_models=1)
        # a hits, b misses, no save rolls for a, b fails its save
        result = melee_exchange(a, b, scripted_dice([5, 2, 1]))
        assert result.attacker_weapon == BASELINE_MELEE_WEAPON
        assert result.wounds_to_defender == 1
        assert result.wounds_to_attacker == 0
        assert result.loser == "defender"

    def test_first_melee_weapon_is_used(self, make_unit, scripted_dice):
        first = WeaponProfile(name="Blade", attacks=2)
        second = WeaponProfile(name="Fist", attacks=5)
        a = state(make_unit, num_models=1, weapons=(WeaponProfile(name="Gun", range=18), first, second))
        b = state(make_unit, num_models=1, weapons=())
        dice = scripted_dice([1, 1, 1])
        result = melee_exchange(a, b, dice)
        assert result.attacker_weapon is first
        assert dice.remaining == 0

    def test_fatigue_forces_natural_six(self, make_unit, scripted_dice):
        a = state(make_unit, num_models=2, quality=2)
        b = state(make_unit, num_models=1)
        a.fought_in_melee_this_turn = True
        # a rolls 5, 5 (misses at quality 7), b rolls 1
        result = melee_exchange(a, b, scripted_dice([5, 5, 1]))
        assert result.wounds_to_defender == 0
        assert result.loser is None
        assert FATIGUED_QUALITY == 7

    def test_each_side_applies_its_own_deadly(self, make_unit, scripted_dice):
        a = state(make_unit, num_models=1, weapons=(WeaponProfile(name="Maul", deadly=3),))
        b = state(make_unit, num_models=1, weapons=(WeaponProfile(name="Knife"),))
        # a hits, b hits, a fails save, b fails save
        result = melee_exchange(a, b, scripted_dice([4, 4, 2, 2]))
        assert result.wounds_to_defender == 3
        assert result.wounds_to_attacker == 1
        assert result.loser == "defender"


@pytest.mark.parametrize("wounds, toughness, kills", [(0, 1, 0), (5, 1, 5), (5, 2, 2), (2, 3, 0), (-1, 1, 0)])
def test_kills_from_wounds(wounds, toughness, kills):
    assert kills_from_wounds(wounds, toughness) == kills
