"""
Derived character statistics: armor class, attack and save bonuses, hit points.
"""
import logging
from typing import Optional

from .xp_rules import get_ability_modifier, get_proficiency_bonus

logger = logging.getLogger(__name__)

# Hit dice by class
HIT_DICE = {
    "Barbarian": 12,
    "Fighter": 10,
    "Paladin": 10,
    "Ranger": 10,
    "Bard": 8,
    "Cleric": 8,
    "Druid": 8,
    "Monk": 8,
    "Rogue": 8,
    "Warlock": 8,
    "Sorcerer": 6,
    "Wizard": 6
}
DEFAULT_HIT_DIE = 8

LIGHT = "light"
MEDIUM = "medium"
HEAVY = "heavy"

# name -> (base AC, category)
ARMOR_TABLE = {
    "Padded Armor": (11, LIGHT),
    "Leather Armor": (11, LIGHT),
    "Studded Leather Armor": (12, LIGHT),
    "Hide Armor": (12, MEDIUM),
    "Chain Shirt": (13, MEDIUM),
    "Scale Mail": (14, MEDIUM),
    "Breastplate": (14, MEDIUM),
    "Half Plate": (15, MEDIUM),
    "Ring Mail": (14, HEAVY),
    "Chain Mail": (16, HEAVY),
    "Splint": (17, HEAVY),
    "Plate": (18, HEAVY),
}

# Names players commonly type on character sheets
ARMOR_ALIASES = {
    "padded": "Padded Armor",
    "leather": "Leather Armor",
    "studded leather": "Studded Leather Armor",
    "hide": "Hide Armor",
    "half plate armor": "Half Plate",
    "splint armor": "Splint",
    "plate armor": "Plate",
}

SHIELD_BONUS = 2
MEDIUM_ARMOR_MAX_DEX = 2

_ARMOR_BY_KEY = {name.lower(): name for name in ARMOR_TABLE}
_ARMOR_BY_KEY.update(ARMOR_ALIASES)


def find_armor(armor_name: Optional[str]) -> Optional[str]:
    """Resolve an armor name (case-insensitive) to its ARMOR_TABLE entry."""
    if not armor_name:
        return None
    return _ARMOR_BY_KEY.get(armor_name.strip().lower())


def get_hit_die(char_class: Optional[str]) -> int:
    """Hit die size for a class; unknown classes use a d8."""
    if char_class:
        hit_die = HIT_DICE.get(char_class.strip().title())
        if hit_die is not None:
            return hit_die
    logger.warning(f"Unknown class {char_class!r}, using d{DEFAULT_HIT_DIE} hit die")
    return DEFAULT_HIT_DIE


def calculate_armor_class(armor_name: Optional[str], dexterity: int,
                          has_shield: bool = False, unarmored_bonus: int = 0) -> int:
    """
    Calculate AC from equipped armor and DEX.

    Args:
        armor_name: Equipped armor, or None when unarmored
        dexterity: DEX score
        has_shield: Shields always add +2
        unarmored_bonus: Unarmored Defense bonus (e.g. CON mod for Barbarians),
            only applied without armor
    """
    dex_mod = get_ability_modifier(dexterity)
    shield = SHIELD_BONUS if has_shield else 0

    if not armor_name:
        return 10 + dex_mod + unarmored_bonus + shield

    armor = find_armor(armor_name)
    if armor is None:
        logger.warning(f"Unknown armor {armor_name!r}, treating as unarmored")
        return 10 + dex_mod + shield

    base_ac, category = ARMOR_TABLE[armor]

    # Light armor: full DEX bonus
    # Medium armor: max +2 DEX bonus
    # Heavy armor: no DEX bonus
    if category == LIGHT:
        return base_ac + dex_mod + shield
    elif category == MEDIUM:
        return base_ac + min(MEDIUM_ARMOR_MAX_DEX, dex_mod) + shield
    return base_ac + shield


def calculate_attack_bonus(level: int, ability_score: int, is_proficient: bool = True) -> int:
    """Ability modifier plus proficiency bonus when proficient."""
    bonus = get_ability_modifier(ability_score)
    if is_proficient:
        bonus += get_proficiency_bonus(level)
    return bonus


def calculate_saving_throw(level: int, ability_score: int, is_proficient: bool = False) -> int:
    return calculate_attack_bonus(level, ability_score, is_proficient)


def calculate_starting_hp(char_class: Optional[str], constitution: int) -> int:
    """Level 1 HP: maximum hit die + CON mod."""
    return get_hit_die(char_class) + get_ability_modifier(constitution)


def calculate_hp_gain_on_level_up(char_class: Optional[str], constitution: int,
                                  levels_gained: int = 1) -> int:
    """
    HP gained using the fixed average per level.

    Average per level is half the hit die + 1 + CON mod. At least 1 HP is
    gained per level, however low the CON.
    """
    if levels_gained < 1:
        return 0
    avg_per_level = (get_hit_die(char_class) // 2) + 1 + get_ability_modifier(constitution)
    return max(levels_gained, avg_per_level * levels_gained)
