from skirmish_sim.parser import load_units, parse_unit_block, parse_weapon
from skirmish_sim.units import SpecialRule

SAMPLE = """
++ Demo List ++

Grunts [5] Q4+ D5+ | 100 | Fast
5x Rifle (24, A1), 5x CombatBlade (A1)

Brutes [3] Q3+ D4+ | 145pts | Fearless, Tough(3), Scout
3x Heavy Cleaver (A3, AP(1), Furious, Deadly(2)), 1x Slug Pistol (12", A1)
"""


def test_single_unit_block():
    units = parse_unit_block("Grunts [5] Q4+ D5+ | 100 | Fast\n5x Rifle (24, A1), 5x CombatBlade (A1)")
    assert len(units) == 1
    unit = units[0]
    assert unit.name == "Grunts"
    assert unit.num_models == 5
    assert unit.quality == 4
    assert unit.defense == 5
    assert unit.toughness == 1
    assert unit.points == 100
    assert unit.special_rules == frozenset({SpecialRule.FAST})
    assert unit.advance_range == 8 and unit.charge_range == 16

    rifle, blade = unit.weapons
    assert (rifle.name, rifle.count, rifle.range, rifle.attacks, rifle.ap) == ("Rifle", 5, 24, 1, 0)
    assert (blade.name, blade.range, blade.attacks, blade.ap) == ("CombatBlade", 0, 1, 0)
    assert blade.deadly is None and not blade.furious and not blade.predator


def test_multiple_units_and_tags():
    units = parse_unit_block(SAMPLE)
    assert [u.name for u in units] == ["Grunts", "Brutes"]
    brutes = units[1]
    assert brutes.points == 145
    assert brutes.toughness == 3
    assert brutes.has_rule(SpecialRule.FEARLESS)
    assert brutes.other_rules == ("Scout",)
    cleaver, pistol = brutes.weapons
    assert cleaver.attacks == 3 and cleaver.ap == 1
    assert cleaver.furious is True
    assert cleaver.deadly == 2
    assert pistol.range == 12 and pistol.count == 1


def test_malformed_blocks_are_skipped():
    text = "\n".join(
        [
            "Nameless Q4+ D5+ | 50 |",
            "5x Rifle (24, A1)",
            "NoPoints [5] Q4+ D5+",
            "5x Rifle (24, A1)",
            "Scouts [4] Q4+ D5+ | 60 | Slow",
            "4x Carbine (18, A2)",
        ]
    )
    units = parse_unit_block(text)
    assert [u.name for u in units] == ["Scouts"]
    assert units[0].has_rule(SpecialRule.SLOW)


def test_unit_without_weapon_line():
    units = parse_unit_block("Lonely [1] Q5+ D6+ | 10 |")
    assert len(units) == 1
    assert units[0].weapons == ()
    assert units[0].melee_weapon().attacks == 1


def test_bad_weapon_is_dropped():
    units = parse_unit_block("Odd [2] Q4+ D4+ | 30 |\n2x Spear (A1), 2x Broken Thing, 2x Sling (18, A1)")
    assert [w.name for w in units[0].weapons] == ["Spear", "Sling"]


def test_parse_weapon_predator():
    weapon = parse_weapon("2x Fangs (A2, Predator)")
    assert weapon.predator is True
    assert weapon.is_melee


def test_load_units(tmp_path):
    path = tmp_path / "units.txt"
    path.write_text(SAMPLE, encoding="utf-8")
    assert len(load_units(path)) == 2
