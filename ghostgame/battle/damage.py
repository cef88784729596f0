"""Damage calculation.

Simplified main-series formula with integer flooring after every
multiplicative step so results are reproducible:

    base = floor(((2*L/5 + 2) * power * atk / def) / 50 + 2)
    STAB -> type effectiveness -> critical -> minimum 1

A no-effect matchup short-circuits to 0 damage and never crits.
"""
from __future__ import annotations
import math
import random
from dataclasses import dataclass
from typing import Optional

from .models import GhostType, MIN_STAGE, MAX_STAGE
from .typechart import get_effectiveness, NO_EFFECT

CRITICAL_HIT_RATE = 1 / 16
CRITICAL_MULTIPLIER = 1.5
STAB_MULTIPLIER = 1.5
MIN_DAMAGE = 1

@dataclass(frozen=True)
class DamageParams:
    move_power: int
    move_type: GhostType
    attacker_attack: int
    attacker_type: GhostType
    attacker_level: int
    defender_defense: int
    defender_type: GhostType

@dataclass(frozen=True)
class DamageResult:
    damage: int
    is_critical: bool
    effectiveness: float

# ---------------------------------------------------------------------------
# Stage helpers
# ---------------------------------------------------------------------------

def _clamp_stage(stage: int) -> int: return max(MIN_STAGE, min(MAX_STAGE, int(stage)))

def stage_multiplier(stage: int) -> float:
    s = _clamp_stage(stage)
    return (2 + s)/2 if s >= 0 else 2/(2 - s)

def modified_stat(value: int, stage: int) -> int:
    """Stat after applying a battle stage; never below 1."""
    return max(1, math.floor(value * stage_multiplier(stage)))

# ---------------------------------------------------------------------------
# Formula pieces
# ---------------------------------------------------------------------------

def is_critical_hit(random_value: Optional[float] = None) -> bool:
    roll = random.random() if random_value is None else random_value
    return roll < CRITICAL_HIT_RATE

def stab_bonus(move_type: str, attacker_type: str) -> float:
    return STAB_MULTIPLIER if move_type == attacker_type else 1.0

def calculate_base_damage(level: int, power: int, attack: int, defense: int) -> int:
    level_factor = (2 * level) / 5 + 2
    return math.floor((level_factor * power * attack / defense) / 50 + 2)

def calculate_damage(params: DamageParams, critical_roll: Optional[float] = None) -> DamageResult:
    effectiveness = get_effectiveness(params.move_type, params.defender_type)
    if effectiveness == NO_EFFECT:
        return DamageResult(damage=0, is_critical=False, effectiveness=effectiveness)

    damage = calculate_base_damage(params.attacker_level, params.move_power,
                                   params.attacker_attack, params.defender_defense)
    damage = math.floor(damage * stab_bonus(params.move_type, params.attacker_type))
    damage = math.floor(damage * effectiveness)

    critical = is_critical_hit(critical_roll)
    if critical:
        damage = math.floor(damage * CRITICAL_MULTIPLIER)

    return DamageResult(damage=max(damage, MIN_DAMAGE), is_critical=critical, effectiveness=effectiveness)

__all__ = [
    "DamageParams","DamageResult","calculate_damage","calculate_base_damage","stab_bonus",
    "is_critical_hit","stage_multiplier","modified_stat",
    "CRITICAL_HIT_RATE","CRITICAL_MULTIPLIER","STAB_MULTIPLIER","MIN_DAMAGE",
]
