"""Speed arbitration between the two combatants."""
from __future__ import annotations
import random
from dataclasses import dataclass
from typing import Optional

from .models import Side

SPEED_TIE_THRESHOLD = 0.5

@dataclass(frozen=True)
class TurnOrderResult:
    first: Side
    second: Side
    was_speed_tie: bool

def determine_turn_order(player_speed: int, enemy_speed: int, tie_breaker: Optional[float] = None) -> TurnOrderResult:
    if player_speed > enemy_speed:
        return TurnOrderResult("player", "enemy", False)
    if enemy_speed > player_speed:
        return TurnOrderResult("enemy", "player", False)
    roll = random.random() if tie_breaker is None else tie_breaker
    if roll < SPEED_TIE_THRESHOLD:
        return TurnOrderResult("player", "enemy", True)
    return TurnOrderResult("enemy", "player", True)

def goes_first(my_speed: int, opponent_speed: int, tie_breaker: Optional[float] = None) -> bool:
    if my_speed != opponent_speed:
        return my_speed > opponent_speed
    roll = random.random() if tie_breaker is None else tie_breaker
    return roll < SPEED_TIE_THRESHOLD

__all__ = ["TurnOrderResult","determine_turn_order","goes_first"]
