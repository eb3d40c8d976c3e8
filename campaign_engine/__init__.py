"""
Campaign Engine

D&D 5e rules core for the campaign companion: dice, attack resolution
with narrated mechanics, XP and encounter tables, and derived character stats.
"""

from .schemas import *
from .config import Settings, settings, load_settings, configure_logging
from .dice import (
    DiceExpressionError,
    DamageDice,
    roll_die,
    roll_d20,
    parse_damage_roll,
    is_valid_dice_expression,
    roll_damage,
    make_attack_roll,
    does_attack_hit,
    roll_attack,
    get_rng,
    set_seed,
)
from .combat_manager import (
    AttackOutcome,
    CompanionStats,
    process_player_attack,
    process_enemy_attacks,
    get_companion_default_stats,
    companion_combatant,
)
from .xp_rules import (
    XPProgress,
    EncounterXP,
    get_level_from_xp,
    get_xp_for_level,
    get_xp_to_next_level,
    format_xp_progress,
    get_xp_from_cr,
    get_encounter_multiplier,
    calculate_encounter_xp,
    calculate_quest_xp,
    get_proficiency_bonus,
    get_ability_modifier,
)
from .character_stats import (
    calculate_armor_class,
    calculate_attack_bonus,
    calculate_saving_throw,
    calculate_starting_hp,
    calculate_hp_gain_on_level_up,
)
from .monster_loader import (
    monster_to_combatant,
    encounter_xp_for_monsters,
)

__version__ = "1.0.0"

__all__ = [
    # Config
    "Settings",
    "settings",
    "load_settings",
    "configure_logging",

    # Dice
    "DiceExpressionError",
    "DamageDice",
    "roll_die",
    "roll_d20",
    "parse_damage_roll",
    "is_valid_dice_expression",
    "roll_damage",
    "make_attack_roll",
    "does_attack_hit",
    "roll_attack",
    "get_rng",
    "set_seed",

    # Combat
    "AttackOutcome",
    "CompanionStats",
    "process_player_attack",
    "process_enemy_attacks",
    "get_companion_default_stats",
    "companion_combatant",

    # XP & Encounters
    "XPProgress",
    "EncounterXP",
    "get_level_from_xp",
    "get_xp_for_level",
    "get_xp_to_next_level",
    "format_xp_progress",
    "get_xp_from_cr",
    "get_encounter_multiplier",
    "calculate_encounter_xp",
    "calculate_quest_xp",
    "get_proficiency_bonus",
    "get_ability_modifier",

    # Character Stats
    "calculate_armor_class",
    "calculate_attack_bonus",
    "calculate_saving_throw",
    "calculate_starting_hp",
    "calculate_hp_gain_on_level_up",

    # Monsters
    "monster_to_combatant",
    "encounter_xp_for_monsters",

    # Schemas
    "CombatantType",
    "CombatantStatus",
    "Combatant",
    "AttackRollResult",
    "DamageRollResult",
    "CombatLogEntry",
    "DamageRecord",
    "CombatTurnResult",
]
