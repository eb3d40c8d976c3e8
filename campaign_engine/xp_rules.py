"""
D&D 5e experience, encounter and proficiency tables.

Everything here is a pure function over constant tables.
"""

import math
import logging
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Dict, List, Sequence, Union

logger = logging.getLogger(__name__)

MAX_LEVEL = 20

# Minimum XP for each level, index 0 = level 1
XP_THRESHOLDS = (
    0, 300, 900, 2700, 6500,
    14000, 23000, 34000, 48000, 64000,
    85000, 100000, 120000, 140000, 165000,
    195000, 225000, 265000, 305000, 355000,
)

CR_XP_TABLE = {
    "0": 10,
    "1/8": 25,
    "1/4": 50,
    "1/2": 100,
    "1": 200,
    "2": 450,
    "3": 700,
    "4": 1100,
    "5": 1800,
    "6": 2300,
    "7": 2900,
    "8": 3900,
    "9": 5000,
    "10": 5900,
    "11": 7200,
    "12": 8400,
    "13": 10000,
    "14": 11500,
    "15": 13000,
    "16": 15000,
    "17": 18000,
    "18": 20000,
    "19": 22000,
    "20": 25000,
    "21": 33000,
    "22": 41000,
    "23": 50000,
    "24": 62000,
    "25": 75000,
    "26": 90000,
    "27": 105000,
    "28": 120000,
    "29": 135000,
    "30": 155000,
}

# (max creatures, multiplier)
ENCOUNTER_MULTIPLIERS = (
    (1, 1.0),
    (2, 1.5),
    (6, 2.0),
    (10, 2.5),
    (14, 3.0),
    (math.inf, 4.0),
)

# Per-character XP thresholds by character level
ENCOUNTER_DIFFICULTY_BY_LEVEL = {
    1: {'easy': 25, 'medium': 50, 'hard': 75, 'deadly': 100},
    2: {'easy': 50, 'medium': 100, 'hard': 150, 'deadly': 200},
    3: {'easy': 75, 'medium': 150, 'hard': 225, 'deadly': 400},
    4: {'easy': 125, 'medium': 250, 'hard': 375, 'deadly': 500},
    5: {'easy': 250, 'medium': 500, 'hard': 750, 'deadly': 1100},
    6: {'easy': 300, 'medium': 600, 'hard': 900, 'deadly': 1400},
    7: {'easy': 350, 'medium': 750, 'hard': 1100, 'deadly': 1700},
    8: {'easy': 450, 'medium': 900, 'hard': 1400, 'deadly': 2100},
    9: {'easy': 550, 'medium': 1100, 'hard': 1600, 'deadly': 2400},
    10: {'easy': 600, 'medium': 1200, 'hard': 1900, 'deadly': 2800},
    11: {'easy': 800, 'medium': 1600, 'hard': 2400, 'deadly': 3600},
    12: {'easy': 1000, 'medium': 2000, 'hard': 3000, 'deadly': 4500},
    13: {'easy': 1100, 'medium': 2200, 'hard': 3400, 'deadly': 5100},
    14: {'easy': 1250, 'medium': 2500, 'hard': 3800, 'deadly': 5700},
    15: {'easy': 1400, 'medium': 2800, 'hard': 4300, 'deadly': 6400},
    16: {'easy': 1600, 'medium': 3200, 'hard': 4800, 'deadly': 7200},
    17: {'easy': 2000, 'medium': 3900, 'hard': 5900, 'deadly': 8800},
    18: {'easy': 2100, 'medium': 4200, 'hard': 6300, 'deadly': 9500},
    19: {'easy': 2400, 'medium': 4900, 'hard': 7300, 'deadly': 10900},
    20: {'easy': 2800, 'medium': 5700, 'hard': 8500, 'deadly': 12700},
}

# Difficulty labels are always judged against this level's thresholds,
# whatever the party's actual level.
DIFFICULTY_REFERENCE_LEVEL = 5

QUEST_XP_REWARDS = {
    'minor': {'min': 25, 'max': 100},
    'side': {'min': 100, 'max': 300},
    'major': {'min': 300, 'max': 750},
    'story': {'min': 500, 'max': 1500},
}

PROFICIENCY_BY_LEVEL = {
    1: 2, 2: 2, 3: 2, 4: 2,
    5: 3, 6: 3, 7: 3, 8: 3,
    9: 4, 10: 4, 11: 4, 12: 4,
    13: 5, 14: 5, 15: 5, 16: 5,
    17: 6, 18: 6, 19: 6, 20: 6,
}


def _clamp_level(level: int) -> int:
    return max(1, min(MAX_LEVEL, int(level)))


# =============================================================================
# LEVELS
# =============================================================================

@dataclass(frozen=True)
class XPProgress:
    current_level: int
    xp_needed: int
    xp_progress: int
    percent_complete: int


def get_level_from_xp(xp: int) -> int:
    """Highest level whose threshold the XP meets; level 1 otherwise."""
    for index in range(len(XP_THRESHOLDS) - 1, -1, -1):
        if xp >= XP_THRESHOLDS[index]:
            return index + 1
    return 1


def get_xp_for_level(level: int) -> int:
    return XP_THRESHOLDS[_clamp_level(level) - 1]


def get_xp_to_next_level(current_xp: int) -> XPProgress:
    """How far a character is through their current level."""
    current_xp = max(0, current_xp)
    current_level = get_level_from_xp(current_xp)

    if current_level >= MAX_LEVEL:
        return XPProgress(
            current_level=MAX_LEVEL,
            xp_needed=0,
            xp_progress=current_xp - XP_THRESHOLDS[-1],
            percent_complete=100
        )

    current_threshold = XP_THRESHOLDS[current_level - 1]
    next_threshold = XP_THRESHOLDS[current_level]
    xp_into_level = current_xp - current_threshold

    return XPProgress(
        current_level=current_level,
        xp_needed=next_threshold - current_xp,
        xp_progress=xp_into_level,
        percent_complete=(xp_into_level * 100) // (next_threshold - current_threshold)
    )


def format_xp_progress(current_xp: int) -> str:
    """Human-readable XP line for character sheets."""
    current_xp = max(0, current_xp)
    progress = get_xp_to_next_level(current_xp)

    if progress.current_level >= MAX_LEVEL:
        return f"Level 20 (Max) - {current_xp:,} XP"

    return (f"Level {progress.current_level} - {current_xp:,} XP "
            f"({progress.xp_needed:,} to next level, {progress.percent_complete}%)")


# =============================================================================
# CHALLENGE RATING & ENCOUNTERS
# =============================================================================

def normalize_cr(cr: Union[str, int, float]) -> str:
    """
    Turn a challenge rating into a CR_XP_TABLE key.

    Accepts "1/4", "0.25", 0.25, 2, "2".
    """
    text = str(cr).strip()
    if text in CR_XP_TABLE:
        return text
    try:
        value = Fraction(text)
    except (ValueError, ZeroDivisionError):
        return text
    if value.denominator == 1:
        return str(value.numerator)
    return f"{value.numerator}/{value.denominator}"


def get_xp_from_cr(cr: Union[str, int, float]) -> int:
    """XP award for a monster of the given CR. Unknown CRs award nothing."""
    key = normalize_cr(cr)
    xp = CR_XP_TABLE.get(key)
    if xp is None:
        logger.warning(f"Unknown challenge rating: {cr!r}")
        return 0
    return xp


def get_encounter_multiplier(creature_count: int) -> float:
    for max_creatures, multiplier in ENCOUNTER_MULTIPLIERS:
        if creature_count <= max_creatures:
            return multiplier
    return 4.0


@dataclass
class EncounterXP:
    """XP budget and difficulty of a group of monsters"""
    base_xp: int
    adjusted_xp: int
    per_character_xp: int
    difficulty: str  # "trivial", "easy", "medium", "hard", "deadly"
    breakdown: List[Dict] = field(default_factory=list)  # [{'cr': '1/4', 'xp': 50}]


def classify_difficulty(adjusted_xp: int, party_size: int) -> str:
    thresholds = ENCOUNTER_DIFFICULTY_BY_LEVEL[DIFFICULTY_REFERENCE_LEVEL]

    for label in ('deadly', 'hard', 'medium', 'easy'):
        if adjusted_xp >= thresholds[label] * party_size:
            return label
    return 'trivial'


def calculate_encounter_xp(monster_crs: Sequence[Union[str, int, float]],
                           party_size: int = 4) -> EncounterXP:
    """
    Calculate encounter XP and difficulty.

    Args:
        monster_crs: Challenge rating of every monster in the encounter
        party_size: Number of characters facing it

    The creature-count multiplier is raised by 0.5 for parties under 3 and
    lowered by 0.5 for parties over 5. Difficulty uses the level 5 table.
    """
    if party_size < 1:
        logger.warning(f"Party size {party_size} is not positive, using 1")
        party_size = 1

    breakdown = [{'cr': str(cr), 'xp': get_xp_from_cr(cr)} for cr in monster_crs]
    base_xp = sum(entry['xp'] for entry in breakdown)

    multiplier = get_encounter_multiplier(len(breakdown))
    if party_size < 3:
        multiplier += 0.5
    elif party_size > 5:
        multiplier -= 0.5

    adjusted_xp = math.floor(base_xp * multiplier)

    return EncounterXP(
        base_xp=base_xp,
        adjusted_xp=adjusted_xp,
        per_character_xp=base_xp // party_size,
        difficulty=classify_difficulty(adjusted_xp, party_size),
        breakdown=breakdown
    )


def calculate_quest_xp(quest_type: str, party_level: int = 1, party_size: int = 4) -> int:
    """Per-character XP for completing a quest of the given type."""
    reward = QUEST_XP_REWARDS.get(quest_type)
    if reward is None:
        logger.warning(f"Unknown quest type: {quest_type!r}")
        return 0
    if party_size < 1:
        logger.warning(f"Party size {party_size} is not positive, using 1")
        party_size = 1

    level_multiplier = 1 + (party_level - 1) * 0.1
    base_xp = math.floor((reward['min'] + reward['max']) / 2 * level_multiplier)
    return base_xp // party_size


# =============================================================================
# PROFICIENCY & ABILITIES
# =============================================================================

def get_proficiency_bonus(level: int) -> int:
    return PROFICIENCY_BY_LEVEL[_clamp_level(level)]


def get_ability_modifier(ability_score: int) -> int:
    """Calculate ability modifier: (score - 10) // 2"""
    return (ability_score - 10) // 2
