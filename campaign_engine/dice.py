"""
Dice rolling and attack primitives for D&D 5e combat.

Every roll goes through an injectable random source so combat can be
replayed in tests. Pass any object with ``randint``/``randrange`` (e.g. a
seeded ``random.Random``); the shared default is seeded from
CAMPAIGN_ENGINE_RNG_SEED when it is set.
"""

import random
import re
import logging
from typing import NamedTuple, Optional

from . import config
from .schemas.combat import AttackRollResult, DamageRollResult

logger = logging.getLogger(__name__)

# Damage expressions: 1d8, 2d6+3, 1D10+2
DAMAGE_PATTERN = re.compile(r'^(\d+)d(\d+)(?:\+(\d+))?$', re.IGNORECASE)

_rng = random.Random(config.settings.rng_seed)


class DiceExpressionError(ValueError):
    """Raised for malformed dice expressions when strict dice mode is on."""


class DamageDice(NamedTuple):
    count: int
    sides: int
    modifier: int = 0


DEFAULT_DAMAGE_DICE = DamageDice(count=1, sides=6, modifier=0)


def get_rng() -> random.Random:
    """Return the shared random source used when no rng is passed."""
    return _rng


def set_seed(seed: Optional[int]):
    """Reseed the shared random source for reproducible sessions."""
    _rng.seed(seed)


# =============================================================================
# DICE
# =============================================================================

def roll_die(sides: int, rng=None) -> int:
    """Roll a single die, uniform in [1, sides]."""
    return (rng or _rng).randint(1, sides)


def roll_d20(rng=None) -> int:
    return roll_die(20, rng)


def _match_damage(expression) -> Optional[DamageDice]:
    if not isinstance(expression, str):
        return None
    match = DAMAGE_PATTERN.match(expression.strip())
    if not match:
        return None
    count, sides = int(match.group(1)), int(match.group(2))
    if count < 1 or sides < 1:
        return None
    return DamageDice(count, sides, int(match.group(3)) if match.group(3) else 0)


def is_valid_dice_expression(expression) -> bool:
    """Check a damage expression where stat blocks are authored."""
    return _match_damage(expression) is not None


def parse_damage_roll(expression: str, strict: Optional[bool] = None) -> DamageDice:
    """
    Parse a damage expression like "1d8+3".

    Args:
        expression: Dice expression "<count>d<sides>[+<modifier>]"
        strict: Raise instead of falling back. Defaults to CAMPAIGN_ENGINE_STRICT_DICE

    Returns:
        DamageDice(count, sides, modifier). Malformed input yields 1d6+0
        unless strict mode is on.
    """
    dice = _match_damage(expression)
    if dice is not None:
        return dice

    if strict is None:
        strict = config.settings.strict_dice
    if strict:
        raise DiceExpressionError(f"Invalid dice expression: {expression!r}")

    logger.warning(f"Invalid dice expression {expression!r}, falling back to 1d6")
    return DEFAULT_DAMAGE_DICE


def roll_damage(expression: str, is_critical: bool = False, rng=None) -> DamageRollResult:
    """
    Roll damage for a hit.

    A critical hit rolls twice as many dice; the flat modifier is added once.
    The total never drops below 1.
    """
    count, sides, modifier = parse_damage_roll(expression)
    dice_count = count * 2 if is_critical else count

    rolls = [roll_die(sides, rng) for _ in range(dice_count)]

    return DamageRollResult(
        dice_rolls=tuple(rolls),
        dice_type=f"d{sides}",
        modifier=modifier,
        total=max(1, sum(rolls) + modifier),
        is_critical=is_critical
    )


# =============================================================================
# ATTACK ROLLS
# =============================================================================

def make_attack_roll(attack_bonus: int, rng=None) -> AttackRollResult:
    """Roll a d20 attack. Crit flags come from the natural roll only."""
    roll = roll_d20(rng)
    return AttackRollResult(
        roll=roll,
        modifier=attack_bonus,
        total=roll + attack_bonus,
        is_critical=roll == 20,
        is_critical_miss=roll == 1
    )


def does_attack_hit(attack: AttackRollResult, target_ac: int) -> bool:
    """Natural 20 always hits, natural 1 always misses, otherwise meet the AC."""
    if attack.is_critical:
        return True
    if attack.is_critical_miss:
        return False
    return attack.total >= target_ac


def roll_attack(attack_bonus: int, advantage: bool = False,
                disadvantage: bool = False, rng=None) -> AttackRollResult:
    """
    Make an attack roll, applying advantage or disadvantage.

    Advantage and disadvantage together cancel out into a single roll.
    Ties keep the first roll.
    """
    if advantage and not disadvantage:
        roll1 = make_attack_roll(attack_bonus, rng)
        roll2 = make_attack_roll(attack_bonus, rng)
        return roll1 if roll1.total >= roll2.total else roll2
    if disadvantage and not advantage:
        roll1 = make_attack_roll(attack_bonus, rng)
        roll2 = make_attack_roll(attack_bonus, rng)
        return roll1 if roll1.total <= roll2.total else roll2
    return make_attack_roll(attack_bonus, rng)
