"""
Combat Schema - Combatants and the records produced when they fight
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from enum import Enum


class CombatantType(str, Enum):
    PLAYER = "player"
    COMPANION = "companion"
    ENEMY = "enemy"


class CombatantStatus(str, Enum):
    CONSCIOUS = "conscious"
    UNCONSCIOUS = "unconscious"
    DEAD = "dead"
    STABILIZED = "stabilized"


@dataclass
class Combatant:
    """A participant in combat"""
    id: int
    name: str
    type: CombatantType
    current_hp: int
    max_hp: int
    armor_class: int
    attack_bonus: int
    damage_roll: str  # "1d8+3", "2d6+2"
    status: CombatantStatus = CombatantStatus.CONSCIOUS

    # Only used when generating stats
    char_class: Optional[str] = None
    level: Optional[int] = None

    @property
    def is_active(self) -> bool:
        return self.status == CombatantStatus.CONSCIOUS and self.current_hp > 0

    def to_dict(self) -> Dict:
        """Serialize using the keys the browser client expects"""
        data = {
            'id': self.id,
            'name': self.name,
            'type': self.type.value,
            'currentHp': self.current_hp,
            'maxHp': self.max_hp,
            'armorClass': self.armor_class,
            'attackBonus': self.attack_bonus,
            'damageRoll': self.damage_roll,
            'status': self.status.value,
        }
        if self.char_class is not None:
            data['class'] = self.char_class
        if self.level is not None:
            data['level'] = self.level
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> 'Combatant':
        """
        Build a combatant from persisted character/NPC data.

        Accepts the client's camelCase keys, falling back to snake_case.
        Missing required fields raise KeyError.
        """
        def pick(camel: str, snake: str, default=KeyError):
            if camel in data:
                return data[camel]
            if snake in data:
                return data[snake]
            if default is KeyError:
                raise KeyError(camel)
            return default

        return cls(
            id=int(data['id']),
            name=data['name'],
            type=CombatantType(data['type']),
            current_hp=int(pick('currentHp', 'current_hp')),
            max_hp=int(pick('maxHp', 'max_hp')),
            armor_class=int(pick('armorClass', 'armor_class')),
            attack_bonus=int(pick('attackBonus', 'attack_bonus', 0)),
            damage_roll=pick('damageRoll', 'damage_roll', '1d4'),
            status=CombatantStatus(data.get('status', CombatantStatus.CONSCIOUS.value)),
            char_class=pick('class', 'char_class', None),
            level=pick('level', 'level', None),
        )


@dataclass(frozen=True)
class AttackRollResult:
    """Outcome of a single d20 attack roll"""
    roll: int
    modifier: int
    total: int
    is_critical: bool = False
    is_critical_miss: bool = False

    def to_dict(self) -> Dict:
        return {
            'roll': self.roll,
            'modifier': self.modifier,
            'total': self.total,
            'isCritical': self.is_critical,
            'isCriticalMiss': self.is_critical_miss,
        }


@dataclass(frozen=True)
class DamageRollResult:
    """Outcome of rolling an attacker's damage expression"""
    dice_rolls: Tuple[int, ...]
    dice_type: str  # "d8"
    modifier: int
    total: int
    is_critical: bool = False

    def to_dict(self) -> Dict:
        return {
            'diceRolls': list(self.dice_rolls),
            'diceType': self.dice_type,
            'modifier': self.modifier,
            'total': self.total,
            'isCritical': self.is_critical,
        }


@dataclass
class CombatLogEntry:
    """One narrated combat event, with the arithmetic shown for learning players"""
    attacker: str
    attacker_type: CombatantType
    target: str
    target_type: CombatantType
    attack_roll: AttackRollResult
    target_ac: int
    is_hit: bool
    description: str
    mechanics_breakdown: str
    damage: Optional[DamageRollResult] = None
    target_new_hp: Optional[int] = None
    target_max_hp: Optional[int] = None
    target_status: Optional[CombatantStatus] = None

    def to_dict(self) -> Dict:
        return {
            'attacker': self.attacker,
            'attackerType': self.attacker_type.value,
            'target': self.target,
            'targetType': self.target_type.value,
            'attackRoll': self.attack_roll.to_dict(),
            'targetAC': self.target_ac,
            'isHit': self.is_hit,
            'damage': self.damage.to_dict() if self.damage else None,
            'targetNewHp': self.target_new_hp,
            'targetMaxHp': self.target_max_hp,
            'targetStatus': self.target_status.value if self.target_status else None,
            'description': self.description,
            'mechanicsBreakdown': self.mechanics_breakdown,
        }


@dataclass
class DamageRecord:
    """Damage a single combatant took during a phase"""
    name: str
    damage_taken: int
    new_hp: int
    max_hp: int
    defeated: bool = False

    def to_dict(self) -> Dict:
        return {
            'name': self.name,
            'damageTaken': self.damage_taken,
            'newHp': self.new_hp,
            'maxHp': self.max_hp,
            'defeated': self.defeated,
        }


@dataclass
class CombatTurnResult:
    """Everything that happened while a whole side attacked"""
    logs: List[CombatLogEntry] = field(default_factory=list)
    updated_combatants: List[Combatant] = field(default_factory=list)
    party_damage_dealt: List[DamageRecord] = field(default_factory=list)
    combat_summary: str = ""
    mechanics_explanation: str = ""

    @property
    def hit_count(self) -> int:
        return sum(1 for log in self.logs if log.is_hit)

    @property
    def total_damage(self) -> int:
        return sum(record.damage_taken for record in self.party_damage_dealt)

    def to_dict(self) -> Dict:
        return {
            'logs': [log.to_dict() for log in self.logs],
            'updatedCombatants': [c.to_dict() for c in self.updated_combatants],
            'partyDamageDealt': [r.to_dict() for r in self.party_damage_dealt],
            'combatSummary': self.combat_summary,
            'mechanicsExplanation': self.mechanics_explanation,
        }
