"""
Campaign Engine Schemas

These dataclasses define the structure of all combat data.
"""

from .combat import (
    CombatantType,
    CombatantStatus,
    Combatant,
    AttackRollResult,
    DamageRollResult,
    CombatLogEntry,
    DamageRecord,
    CombatTurnResult,
)

__all__ = [
    "CombatantType",
    "CombatantStatus",
    "Combatant",
    "AttackRollResult",
    "DamageRollResult",
    "CombatLogEntry",
    "DamageRecord",
    "CombatTurnResult",
]
