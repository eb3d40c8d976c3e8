"""
Pytest fixtures for the campaign engine tests.
"""

import random

import pytest

from campaign_engine.schemas import Combatant, CombatantType


class ScriptedRng:
    """Random source that returns queued values, for exact roll sequences."""

    def __init__(self, rolls=(), picks=()):
        self.rolls = list(rolls)
        self.picks = list(picks)

    def randint(self, low, high):
        value = self.rolls.pop(0)
        assert low <= value <= high, f"scripted roll {value} outside [{low}, {high}]"
        return value

    def randrange(self, stop):
        value = self.picks.pop(0) if self.picks else 0
        assert 0 <= value < stop
        return value


@pytest.fixture
def seeded_rng():
    """Provide a seeded random source for reproducible tests."""
    return random.Random(42)


@pytest.fixture
def scripted_rng():
    return ScriptedRng


@pytest.fixture
def fighter():
    return Combatant(
        id=1,
        name="Brakka",
        type=CombatantType.PLAYER,
        current_hp=12,
        max_hp=12,
        armor_class=16,
        attack_bonus=5,
        damage_roll="1d8+3",
        char_class="Fighter",
        level=1
    )


@pytest.fixture
def goblin():
    return Combatant(
        id=1,
        name="Goblin",
        type=CombatantType.ENEMY,
        current_hp=7,
        max_hp=7,
        armor_class=15,
        attack_bonus=4,
        damage_roll="1d6+2"
    )
