"""
Monster stat blocks to enemy combatants.

Stat blocks are plain dicts in the SRD/Open5e shape (armor_class,
hit_points, challenge_rating, actions); fetching them is up to the host.
"""
import logging
from typing import Dict, Optional, Sequence

from .dice import is_valid_dice_expression
from .schemas.combat import Combatant, CombatantType
from .xp_rules import EncounterXP, calculate_encounter_xp

logger = logging.getLogger(__name__)

DEFAULT_ENEMY_DAMAGE = "1d4"


def _parse_armor_class(monster: Dict) -> int:
    # Some SRD exports list several AC entries
    armor_class = monster.get('armor_class', 10)
    if isinstance(armor_class, list):
        return armor_class[0].get('value', 10) if armor_class else 10
    return int(armor_class or 10)


def _primary_attack(monster: Dict) -> Optional[Dict]:
    for action in monster.get('actions') or []:
        if action.get('attack_bonus') is not None and action.get('damage_dice'):
            return action
    return None


def _damage_expression(action: Dict) -> str:
    expression = action['damage_dice'].replace(' ', '')
    bonus = action.get('damage_bonus') or 0
    if bonus > 0 and '+' not in expression:
        expression = f"{expression}+{bonus}"

    if not is_valid_dice_expression(expression):
        logger.warning(f"Unsupported damage dice {expression!r} on {action.get('name')}, "
                       f"using {DEFAULT_ENEMY_DAMAGE}")
        return DEFAULT_ENEMY_DAMAGE
    return expression


def monster_to_combatant(monster: Dict, combatant_id: int, name: Optional[str] = None,
                         hp_modifier: int = 0) -> Combatant:
    """
    Create an enemy combatant from a monster stat block.

    Args:
        monster: Monster data (armor_class, hit_points, actions)
        combatant_id: Id unique within the combat
        name: Display name (defaults to monster name)
        hp_modifier: Adjust HP from base
    """
    attack = _primary_attack(monster)
    if attack:
        attack_bonus = int(attack['attack_bonus'])
        damage_roll = _damage_expression(attack)
    else:
        logger.warning(f"{monster.get('name', 'Monster')} has no attack action, "
                       f"using +0 / {DEFAULT_ENEMY_DAMAGE}")
        attack_bonus = 0
        damage_roll = DEFAULT_ENEMY_DAMAGE

    hp = max(1, int(monster.get('hit_points') or 10) + hp_modifier)

    return Combatant(
        id=combatant_id,
        name=name or monster.get('name', 'Monster'),
        type=CombatantType.ENEMY,
        current_hp=hp,
        max_hp=hp,
        armor_class=_parse_armor_class(monster),
        attack_bonus=attack_bonus,
        damage_roll=damage_roll
    )


def encounter_xp_for_monsters(monsters: Sequence[Dict], party_size: int = 4) -> EncounterXP:
    """Encounter XP for a list of monster stat blocks, using their challenge ratings."""
    crs = [monster.get('challenge_rating', monster.get('cr', '0')) for monster in monsters]
    return calculate_encounter_xp(crs, party_size)
