"""
Test dice rolling and attack roll primitives
"""
import random

import pytest

from campaign_engine import config
from campaign_engine.dice import (
    DiceExpressionError,
    DamageDice,
    does_attack_hit,
    is_valid_dice_expression,
    make_attack_roll,
    parse_damage_roll,
    roll_attack,
    roll_d20,
    roll_damage,
    roll_die,
    set_seed,
    get_rng,
)
from campaign_engine.schemas import AttackRollResult


def test_roll_die_stays_in_range(seeded_rng):
    for sides in (4, 6, 8, 10, 12, 20):
        rolls = [roll_die(sides, seeded_rng) for _ in range(200)]
        assert min(rolls) >= 1
        assert max(rolls) <= sides

    assert all(1 <= roll_d20(seeded_rng) <= 20 for _ in range(100))


def test_shared_rng_is_reproducible():
    set_seed(1234)
    first = [roll_d20() for _ in range(10)]
    set_seed(1234)
    second = [roll_d20() for _ in range(10)]
    assert first == second
    assert isinstance(get_rng(), random.Random)


def test_parse_damage_roll():
    assert parse_damage_roll("1d8+3") == DamageDice(1, 8, 3)
    assert parse_damage_roll("2d6") == DamageDice(2, 6, 0)
    assert parse_damage_roll("1D10+2") == DamageDice(1, 10, 2)
    assert parse_damage_roll(" 3d4+1 ") == DamageDice(3, 4, 1)


@pytest.mark.parametrize("expression", ["", "d8", "1d8-1", "fireball", "2d", "0d6", "1d0", None])
def test_malformed_dice_fall_back_to_1d6(expression, caplog):
    with caplog.at_level("WARNING"):
        assert parse_damage_roll(expression, strict=False) == DamageDice(1, 6, 0)
    assert "Invalid dice expression" in caplog.text


def test_strict_mode_raises(monkeypatch):
    with pytest.raises(DiceExpressionError):
        parse_damage_roll("1d8-1", strict=True)

    monkeypatch.setattr(config.settings, "strict_dice", True)
    with pytest.raises(ValueError):
        parse_damage_roll("banana")


def test_is_valid_dice_expression():
    assert is_valid_dice_expression("2d6+3")
    assert is_valid_dice_expression("1d12")
    assert not is_valid_dice_expression("1d6-1")
    assert not is_valid_dice_expression("d20")
    assert not is_valid_dice_expression(12)


def test_roll_damage_adds_modifier(scripted_rng):
    damage = roll_damage("2d6+3", rng=scripted_rng(rolls=[4, 5]))
    assert damage.dice_rolls == (4, 5)
    assert isinstance(damage.dice_rolls, tuple)
    assert damage.to_dict()['diceRolls'] == [4, 5]
    assert damage.dice_type == "d6"
    assert damage.modifier == 3
    assert damage.total == 12
    assert not damage.is_critical


def test_critical_doubles_dice_not_modifier(scripted_rng):
    damage = roll_damage("1d8+3", is_critical=True, rng=scripted_rng(rolls=[2, 7]))
    assert damage.dice_rolls == (2, 7)
    assert damage.total == 2 + 7 + 3
    assert damage.is_critical

    for expression in ("1d8+3", "2d6", "4d4+1"):
        normal = roll_damage(expression, False, random.Random(7))
        critical = roll_damage(expression, True, random.Random(7))
        assert len(critical.dice_rolls) == 2 * len(normal.dice_rolls)


def test_damage_is_at_least_one(seeded_rng):
    for expression in ("1d4", "1d6", "2d6+1", "1d12+5", "nonsense"):
        for is_critical in (False, True):
            for _ in range(50):
                assert roll_damage(expression, is_critical, seeded_rng).total >= 1


def test_make_attack_roll_flags(scripted_rng):
    crit = make_attack_roll(-2, scripted_rng(rolls=[20]))
    assert crit == AttackRollResult(roll=20, modifier=-2, total=18, is_critical=True, is_critical_miss=False)

    fumble = make_attack_roll(10, scripted_rng(rolls=[1]))
    assert fumble.is_critical_miss
    assert not fumble.is_critical
    assert fumble.total == 11

    normal = make_attack_roll(5, scripted_rng(rolls=[12]))
    assert normal.total == 17
    assert not normal.is_critical and not normal.is_critical_miss


def test_does_attack_hit_priority():
    # Natural 20 hits even when the total falls short
    assert does_attack_hit(AttackRollResult(20, -5, 15, True, False), 30)
    # Natural 1 misses even when the total beats the AC
    assert not does_attack_hit(AttackRollResult(1, 15, 16, False, True), 10)

    for roll in range(2, 20):
        for modifier in (-3, 0, 4):
            attack = AttackRollResult(roll, modifier, roll + modifier)
            for ac in (10, 15, 20):
                assert does_attack_hit(attack, ac) == (roll + modifier >= ac)


def test_advantage_keeps_higher(scripted_rng):
    attack = roll_attack(3, advantage=True, rng=scripted_rng(rolls=[6, 17]))
    assert attack.roll == 17


def test_disadvantage_keeps_lower(scripted_rng):
    attack = roll_attack(3, disadvantage=True, rng=scripted_rng(rolls=[6, 17]))
    assert attack.roll == 6


def test_advantage_and_disadvantage_cancel():
    both = [roll_attack(2, True, True, random.Random(99)) for _ in range(5)]
    neither = [roll_attack(2, False, False, random.Random(99)) for _ in range(5)]
    assert both == neither

    rng_both, rng_neither = random.Random(5), random.Random(5)
    assert ([roll_attack(0, True, True, rng_both).roll for _ in range(50)]
            == [roll_attack(0, rng=rng_neither).roll for _ in range(50)])


if __name__ == "__main__":
    config.configure_logging("DEBUG")
    raise SystemExit(pytest.main([__file__, "-v"]))
