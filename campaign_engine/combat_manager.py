"""
D&D 5e Combat Manager - resolves attacks with transparent mechanics.

Each attack produces a narrated log entry plus a breakdown of the dice
arithmetic, so players learn the real rules while they play. Combatants
are never modified in place; updated copies are returned.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from .dice import does_attack_hit, get_rng, roll_attack, roll_damage
from .schemas.combat import (
    AttackRollResult,
    Combatant,
    CombatantStatus,
    CombatantType,
    CombatLogEntry,
    CombatTurnResult,
    DamageRecord,
    DamageRollResult,
)
from .xp_rules import get_ability_modifier, get_proficiency_bonus

logger = logging.getLogger(__name__)


# Narration templates, filled with attacker/target names and damage
PARTY_NARRATION = {
    'critical': "{attacker} lands a devastating critical hit on {target} for {damage} damage!",
    'fumble': "{attacker} swings at {target} but fumbles!",
    'hit': "{attacker} hits {target} for {damage} damage!",
    'miss': "{attacker} attacks {target} but misses!",
    'defeated': " {target} is defeated!",
}

ENEMY_NARRATION = {
    'critical': "{attacker} lands a devastating critical hit on {target} for {damage} damage!",
    'fumble': "{attacker} swings wildly at {target} but fumbles completely!",
    'hit': "{attacker} strikes {target} for {damage} damage!",
    'miss': "{attacker} attacks {target} but misses!",
    'defeated': " {target} falls unconscious!",
}


class AttackOutcome(NamedTuple):
    log: CombatLogEntry
    updated_target: Combatant


# =============================================================================
# EXPLANATIONS
# =============================================================================

def format_attack_roll_explanation(attack: AttackRollResult, target_ac: int, is_hit: bool) -> str:
    """Explain how the attack roll compared against the target's AC."""
    if attack.is_critical:
        return "🎯 CRITICAL HIT! Natural 20 on the d20 automatically hits and deals double damage dice!"
    if attack.is_critical_miss:
        return "❌ CRITICAL MISS! Natural 1 on the d20 automatically misses regardless of target's AC."

    mod_text = f"+{attack.modifier}" if attack.modifier >= 0 else f"{attack.modifier}"
    comparison = '≥' if is_hit else '<'
    result_text = 'HIT' if is_hit else 'MISS'
    return f"Attack: d20({attack.roll}){mod_text} = {attack.total} {comparison} AC {target_ac} → {result_text}"


def format_damage_roll_explanation(damage: DamageRollResult) -> str:
    dice_text = '+'.join(str(r) for r in damage.dice_rolls)
    crit_text = " (CRITICAL - double dice!)" if damage.is_critical else ""
    if damage.modifier > 0:
        mod_text = f"+{damage.modifier}"
    elif damage.modifier < 0:
        mod_text = f"{damage.modifier}"
    else:
        mod_text = ""
    return f"Damage{crit_text}: {dice_text}{mod_text} = {damage.total} damage"


def _describe(narration: Dict[str, str], attacker: Combatant, target: Combatant,
              attack: AttackRollResult, damage: Optional[DamageRollResult], new_hp: int) -> str:
    names = {'attacker': attacker.name, 'target': target.name}

    if attack.is_critical and damage:
        description = narration['critical'].format(damage=damage.total, **names)
    elif attack.is_critical_miss:
        description = narration['fumble'].format(**names)
    elif damage:
        description = narration['hit'].format(damage=damage.total, **names)
    else:
        description = narration['miss'].format(**names)

    if damage and new_hp <= 0:
        description += narration['defeated'].format(**names)
    return description


# =============================================================================
# ATTACK RESOLUTION
# =============================================================================

def _resolve_attack(attacker: Combatant, target: Combatant, attack: AttackRollResult,
                    narration: Dict[str, str], attacker_type: CombatantType,
                    rng=None) -> AttackOutcome:
    """Apply a rolled attack to a target, returning the log and the target's new copy."""
    is_hit = does_attack_hit(attack, target.armor_class)

    damage = None
    new_hp = max(0, min(target.max_hp, target.current_hp))
    new_status = target.status

    if is_hit:
        damage = roll_damage(attacker.damage_roll, attack.is_critical, rng)
        new_hp = max(0, min(target.max_hp, target.current_hp - damage.total))
        # Only a conscious target can drop; dead stays dead
        if new_hp == 0 and target.status == CombatantStatus.CONSCIOUS:
            new_status = CombatantStatus.UNCONSCIOUS

    breakdown = format_attack_roll_explanation(attack, target.armor_class, is_hit)
    if damage:
        breakdown += "\n" + format_damage_roll_explanation(damage)

    log = CombatLogEntry(
        attacker=attacker.name,
        attacker_type=attacker_type,
        target=target.name,
        target_type=target.type,
        attack_roll=attack,
        target_ac=target.armor_class,
        is_hit=is_hit,
        damage=damage,
        target_new_hp=new_hp,
        target_max_hp=target.max_hp,
        target_status=new_status,
        description=_describe(narration, attacker, target, attack, damage, new_hp),
        mechanics_breakdown=breakdown
    )

    logger.debug(f"{attacker.name} -> {target.name}: {log.description}")
    return AttackOutcome(log, replace(target, current_hp=new_hp, status=new_status))


def process_player_attack(attacker: Combatant, target: Combatant,
                          has_advantage: bool = False, has_disadvantage: bool = False,
                          rng=None) -> AttackOutcome:
    """
    Resolve a player or companion attack against a single target.

    Args:
        attacker: The attacking combatant
        target: The combatant being attacked
        has_advantage: Roll twice, keep the higher total
        has_disadvantage: Roll twice, keep the lower total (cancels advantage)
        rng: Random source, defaults to the shared dice RNG

    Returns:
        AttackOutcome(log, updated_target). The input target is untouched.
    """
    attack = roll_attack(attacker.attack_bonus, has_advantage, has_disadvantage, rng)
    return _resolve_attack(attacker, target, attack, PARTY_NARRATION, attacker.type, rng)


def _roster_key(combatant: Combatant) -> Tuple[int, CombatantType]:
    return combatant.id, combatant.type


def _summarize(logs: Sequence[CombatLogEntry], damage_records: Sequence[DamageRecord]) -> str:
    attacks = len(logs)
    hits = sum(1 for log in logs if log.is_hit)
    total_damage = sum(r.damage_taken for r in damage_records)
    downed = sum(1 for r in damage_records if r.defeated)

    summary = (f"Enemies made {attacks} attack{'s' if attacks != 1 else ''}: "
               f"{hits} hit{'s' if hits != 1 else ''} for {total_damage} total damage.")
    if downed > 0:
        summary += f" {downed} party member{'s' if downed != 1 else ''} fell!"
    return summary


def process_enemy_attacks(enemies: Sequence[Combatant], party_members: Sequence[Combatant],
                          rng=None) -> CombatTurnResult:
    """
    Resolve the enemy phase: every active enemy attacks a random active party member.

    Targets are drawn from the party members active at the start of the
    phase, so a member dropped mid-phase can still be picked again. Every
    attack resolves against that start-of-phase snapshot; when a member is
    hit more than once, the last hit's result is what lands in the roster.

    Returns:
        CombatTurnResult whose updated_combatants is the whole party roster,
        untouched members included.
    """
    rng = rng or get_rng()
    updated_party: List[Combatant] = list(party_members)

    active_enemies = [e for e in enemies if e.is_active]
    active_keys = [_roster_key(p) for p in updated_party if p.is_active]

    if not active_enemies or not active_keys:
        return CombatTurnResult(
            logs=[],
            updated_combatants=updated_party,
            party_damage_dealt=[],
            combat_summary="No active combatants.",
            mechanics_explanation=""
        )

    positions = {}
    for index, member in enumerate(updated_party):
        positions.setdefault(_roster_key(member), index)
    snapshot = {key: updated_party[positions[key]] for key in active_keys}

    logs: List[CombatLogEntry] = []
    damage_records: List[DamageRecord] = []

    for enemy in active_enemies:
        key = active_keys[rng.randrange(len(active_keys))]
        position = positions[key]
        target = snapshot[key]

        attack = roll_attack(enemy.attack_bonus, rng=rng)
        outcome = _resolve_attack(enemy, target, attack, ENEMY_NARRATION, CombatantType.ENEMY, rng)
        updated_party[position] = outcome.updated_target
        logs.append(outcome.log)

        if outcome.log.is_hit:
            damage_records.append(DamageRecord(
                name=target.name,
                damage_taken=outcome.log.damage.total,
                new_hp=outcome.updated_target.current_hp,
                max_hp=target.max_hp,
                defeated=outcome.updated_target.current_hp <= 0
            ))

    result = CombatTurnResult(
        logs=logs,
        updated_combatants=updated_party,
        party_damage_dealt=damage_records,
        combat_summary=_summarize(logs, damage_records),
        mechanics_explanation="\n\n".join(log.mechanics_breakdown for log in logs)
    )
    logger.info(result.combat_summary)
    return result


# =============================================================================
# COMPANIONS
# =============================================================================

@dataclass(frozen=True)
class CompanionStats:
    attack_bonus: int
    damage_roll: str
    armor_class: int
    max_hp: int


# class -> (attack ability score, CON score, damage roll, AC, base HP, HP per level)
COMPANION_CLASS_STATS = {
    "Fighter": (16, 14, "1d8+3", 16, 10, 6),
    "Rogue": (16, 12, "1d6+3", 14, 8, 5),
    "Wizard": (16, 12, "1d6+3", 12, 6, 4),
    "Cleric": (14, 14, "1d8+2", 16, 8, 5),
    "Ranger": (16, 12, "1d8+3", 14, 10, 6),
    "Paladin": (16, 14, "1d10+3", 18, 10, 6),
    "Barbarian": (16, 16, "1d12+3", 14, 12, 7),
    "Bard": (14, 12, "1d8+2", 13, 8, 5),
    "Druid": (14, 14, "1d8+2", 13, 8, 5),
    "Monk": (16, 12, "1d6+3", 15, 8, 5),
    "Sorcerer": (16, 14, "1d6+3", 12, 6, 4),
    "Warlock": (16, 14, "1d10+3", 12, 8, 5),
}


def get_companion_default_stats(npc_class: str, level: int = 1) -> CompanionStats:
    """Default combat stats for an NPC companion. Unknown classes fight like Fighters."""
    row = COMPANION_CLASS_STATS.get((npc_class or "").strip().title())
    if row is None:
        logger.warning(f"No companion defaults for class {npc_class!r}, using Fighter")
        row = COMPANION_CLASS_STATS["Fighter"]

    attack_score, con_score, damage_roll, armor_class, hp_base, hp_per_level = row
    level = max(1, level)

    return CompanionStats(
        attack_bonus=get_proficiency_bonus(level) + get_ability_modifier(attack_score),
        damage_roll=damage_roll,
        armor_class=armor_class,
        max_hp=hp_base + (level - 1) * hp_per_level + get_ability_modifier(con_score) * level
    )


def companion_combatant(combatant_id: int, name: str, npc_class: str, level: int = 1) -> Combatant:
    """Build a full-health companion combatant from class defaults."""
    stats = get_companion_default_stats(npc_class, level)
    return Combatant(
        id=combatant_id,
        name=name,
        type=CombatantType.COMPANION,
        current_hp=stats.max_hp,
        max_hp=stats.max_hp,
        armor_class=stats.armor_class,
        attack_bonus=stats.attack_bonus,
        damage_roll=stats.damage_roll,
        char_class=npc_class,
        level=level
    )
