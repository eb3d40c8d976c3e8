"""
Test XP, encounter and proficiency tables
"""
import pytest

from campaign_engine.xp_rules import (
    XP_THRESHOLDS,
    calculate_encounter_xp,
    calculate_quest_xp,
    format_xp_progress,
    get_ability_modifier,
    get_encounter_multiplier,
    get_level_from_xp,
    get_proficiency_bonus,
    get_xp_for_level,
    get_xp_from_cr,
    get_xp_to_next_level,
)


def test_level_xp_round_trip():
    for level in range(1, 21):
        assert get_level_from_xp(get_xp_for_level(level)) == level


def test_level_from_xp():
    assert get_level_from_xp(0) == 1
    assert get_level_from_xp(299) == 1
    assert get_level_from_xp(300) == 2
    assert get_level_from_xp(6499) == 4
    assert get_level_from_xp(1_000_000) == 20
    assert get_level_from_xp(-50) == 1


def test_xp_for_level_clamps():
    assert get_xp_for_level(0) == 0
    assert get_xp_for_level(-3) == 0
    assert get_xp_for_level(5) == 6500
    assert get_xp_for_level(25) == 355000


def test_xp_to_next_level():
    progress = get_xp_to_next_level(600)
    assert progress.current_level == 2
    assert progress.xp_needed == 300
    assert progress.xp_progress == 300
    assert progress.percent_complete == 50

    just_started = get_xp_to_next_level(6500)
    assert just_started.current_level == 5
    assert just_started.percent_complete == 0

    # 1/3 of the way floors to 33
    assert get_xp_to_next_level(100).percent_complete == 33


def test_max_level_progress():
    progress = get_xp_to_next_level(400000)
    assert progress.current_level == 20
    assert progress.xp_needed == 0
    assert progress.xp_progress == 45000
    assert progress.percent_complete == 100


def test_format_xp_progress():
    assert format_xp_progress(6500) == "Level 5 - 6,500 XP (7,500 to next level, 0%)"
    assert format_xp_progress(355000) == "Level 20 (Max) - 355,000 XP"
    assert format_xp_progress(-50) == "Level 1 - 0 XP (300 to next level, 0%)"


@pytest.mark.parametrize("cr, xp", [
    ("0", 10), ("1/8", 25), ("1/4", 50), ("1/2", 100),
    (1, 200), ("5", 1800), (30, 155000),
    (0.25, 50), ("0.5", 100), (0.125, 25), (2.0, 450),
])
def test_xp_from_cr(cr, xp):
    assert get_xp_from_cr(cr) == xp


def test_unknown_cr_is_worth_nothing(caplog):
    assert get_xp_from_cr("31") == 0
    assert get_xp_from_cr("dragon") == 0
    assert "Unknown challenge rating" in caplog.text


@pytest.mark.parametrize("cr", ["2.01", "0.1", "0.13", 0.1])
def test_inexact_cr_is_not_rounded_to_a_table_entry(cr):
    assert get_xp_from_cr(cr) == 0


@pytest.mark.parametrize("count, multiplier", [
    (1, 1), (2, 1.5), (3, 2), (6, 2), (7, 2.5), (10, 2.5), (11, 3), (14, 3), (15, 4), (40, 4),
])
def test_encounter_multiplier(count, multiplier):
    assert get_encounter_multiplier(count) == multiplier


def test_encounter_xp_scenario():
    result = calculate_encounter_xp(["1/4", "1/4", "1/2"], 4)
    assert result.base_xp == 200
    assert result.adjusted_xp == 400
    assert result.per_character_xp == 50
    assert result.difficulty == "trivial"
    assert result.breakdown == [
        {'cr': "1/4", 'xp': 50},
        {'cr': "1/4", 'xp': 50},
        {'cr': "1/2", 'xp': 100},
    ]


def test_encounter_party_size_adjustment():
    # Small parties face a harder multiplier, large parties an easier one
    assert calculate_encounter_xp(["1"], 2).adjusted_xp == 300
    assert calculate_encounter_xp(["1"], 6).adjusted_xp == 100
    assert calculate_encounter_xp(["1", "1"], 5).adjusted_xp == 600


def test_encounter_difficulty_uses_level_5_thresholds():
    # Level 5 party of 4: easy 1000, medium 2000, hard 3000, deadly 4400.
    # Difficulty ignores the party's real level.
    assert calculate_encounter_xp(["3"], 4).difficulty == "trivial"
    assert calculate_encounter_xp(["4"], 4).difficulty == "easy"
    assert calculate_encounter_xp(["4", "4"], 4).difficulty == "hard"
    assert calculate_encounter_xp(["6"], 4).difficulty == "medium"
    assert calculate_encounter_xp(["5", "5"], 4).difficulty == "deadly"
    assert calculate_encounter_xp(["8"], 4).difficulty == "hard"
    assert calculate_encounter_xp(["9"], 4).difficulty == "deadly"


def test_empty_encounter():
    result = calculate_encounter_xp([], 4)
    assert result.base_xp == 0
    assert result.adjusted_xp == 0
    assert result.difficulty == "trivial"


def test_encounter_with_no_party_uses_one_character():
    assert calculate_encounter_xp(["1"], 0).per_character_xp == 200


def test_quest_xp():
    assert calculate_quest_xp("minor") == 15
    assert calculate_quest_xp("story", party_level=1, party_size=4) == 250
    assert calculate_quest_xp("major", party_level=4, party_size=4) == 170
    assert calculate_quest_xp("side", party_level=1, party_size=1) == 200
    assert calculate_quest_xp("epic") == 0


def test_proficiency_bonus():
    bonuses = [get_proficiency_bonus(level) for level in range(1, 21)]
    assert bonuses == sorted(bonuses)
    assert set(bonuses) == {2, 3, 4, 5, 6}
    assert get_proficiency_bonus(4) == 2
    assert get_proficiency_bonus(5) == 3
    assert get_proficiency_bonus(17) == 6
    assert get_proficiency_bonus(0) == 2
    assert get_proficiency_bonus(30) == 6
    assert get_proficiency_bonus(4.5) == 2


@pytest.mark.parametrize("score, modifier", [
    (1, -5), (3, -4), (8, -1), (9, -1), (10, 0), (11, 0), (14, 2), (15, 2), (20, 5), (30, 10),
])
def test_ability_modifier(score, modifier):
    assert get_ability_modifier(score) == modifier


def test_thresholds_are_increasing():
    assert list(XP_THRESHOLDS) == sorted(set(XP_THRESHOLDS))
    assert len(XP_THRESHOLDS) == 20
