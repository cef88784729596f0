"""Type effectiveness table for the six ghost types.

fire/water/grass form a triangle; electric beats water; ghost beats ghost;
ghost and normal cannot touch each other. Every pairing is spelled out.
"""
from __future__ import annotations
from typing import Dict

from .models import GhostType

NO_EFFECT = 0.0
NOT_VERY_EFFECTIVE = 0.5
NORMAL_EFFECT = 1.0
SUPER_EFFECTIVE = 2.0

_F, _W, _G, _E, _H, _N = (GhostType.FIRE, GhostType.WATER, GhostType.GRASS,
                          GhostType.ELECTRIC, GhostType.GHOST, GhostType.NORMAL)

TYPE_CHART: Dict[GhostType, Dict[GhostType, float]] = {
    _F: {_F: 0.5, _W: 0.5, _G: 2.0, _E: 1.0, _H: 1.0, _N: 1.0},
    _W: {_F: 2.0, _W: 0.5, _G: 0.5, _E: 1.0, _H: 1.0, _N: 1.0},
    _G: {_F: 0.5, _W: 2.0, _G: 0.5, _E: 1.0, _H: 1.0, _N: 1.0},
    _E: {_F: 1.0, _W: 2.0, _G: 0.5, _E: 0.5, _H: 1.0, _N: 1.0},
    _H: {_F: 1.0, _W: 1.0, _G: 1.0, _E: 1.0, _H: 2.0, _N: 0.0},
    _N: {_F: 1.0, _W: 1.0, _G: 1.0, _E: 1.0, _H: 0.0, _N: 1.0},
}

def get_effectiveness(attack_type: str, defense_type: str) -> float:
    return TYPE_CHART[GhostType(attack_type)][GhostType(defense_type)]

def effectiveness_message(multiplier: float) -> str:
    if multiplier >= SUPER_EFFECTIVE:
        return "It's super effective!"
    if multiplier == NO_EFFECT:
        return "It had no effect..."
    if multiplier < NORMAL_EFFECT:
        return "It's not very effective..."
    return ""

__all__ = ["TYPE_CHART","get_effectiveness","effectiveness_message",
           "NO_EFFECT","NOT_VERY_EFFECTIVE","NORMAL_EFFECT","SUPER_EFFECTIVE"]
