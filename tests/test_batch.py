import pytest

from skirmish_sim.batch import score_engagement
from skirmish_sim.units import WeaponProfile

BLADE = WeaponProfile(name="Blade", attacks=1)
GREAT_AXE = WeaponProfile(name="Great Axe", attacks=3, ap=3, deadly=2)


def test_odds_are_probabilities(make_unit):
    a = make_unit(name="A")
    b = make_unit(name="B")
    odds = score_engagement(a, b, n_sims=40, seed=5)
    assert odds.n_sims == 40
    assert odds.win_prob_a + odds.win_prob_b + odds.draw_prob == pytest.approx(1.0)
    assert 0 <= odds.mean_surviving_a <= 5
    assert 0 <= odds.mean_surviving_b <= 5
    assert 1 <= odds.mean_turns <= 4


def test_batch_is_reproducible(make_unit):
    a = make_unit(name="A", weapons=(BLADE,))
    b = make_unit(name="B", weapons=(BLADE,))
    assert score_engagement(a, b, n_sims=25, seed=3, starting_distance=10) == score_engagement(
        a, b, n_sims=25, seed=3, starting_distance=10
    )


def test_stronger_unit_is_favoured(make_unit):
    elite = make_unit(name="Elite", num_models=10, quality=2, defense=2, weapons=(GREAT_AXE,))
    rabble = make_unit(name="Rabble", num_models=3, quality=6, defense=6, weapons=(BLADE,))
    odds = score_engagement(elite, rabble, n_sims=200, seed=11, starting_distance=6)
    assert odds.win_prob_a > 0.9
    assert odds.win_prob_b < 0.05


def test_rejects_empty_batch(make_unit):
    with pytest.raises(ValueError):
        score_engagement(make_unit(), make_unit(), n_sims=0)
