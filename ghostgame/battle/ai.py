"""Opponent move selection policies.

A selector takes the opponent's move list and a draw in [0, 1) and returns
the index of the move to use. The state machine accepts any such callable.
"""
from __future__ import annotations
from typing import Callable, Optional, Sequence

from .models import GhostType, Move, OwnedMove
from .typechart import get_effectiveness

MoveSelector = Callable[[Sequence[OwnedMove], float], int]
MoveLookup = Callable[[str], Optional[Move]]


def random_usable_move(moves: Sequence[OwnedMove], roll: float) -> int:
    """Uniform pick among moves with PP left; index 0 when all are depleted."""
    usable = [i for i, m in enumerate(moves) if m.current_pp > 0]
    if not usable:
        return 0
    pick = min(int(roll * len(usable)), len(usable) - 1)
    return usable[pick]


class StrongestMoveSelector:
    """Pick the usable move with the highest power x effectiveness against ``target_type``."""

    def __init__(self, move_lookup: MoveLookup, target_type: GhostType):
        self.move_lookup = move_lookup
        self.target_type = target_type

    def __call__(self, moves: Sequence[OwnedMove], roll: float) -> int:
        best = None
        best_score = -1.0
        for i, owned in enumerate(moves):
            if owned.current_pp <= 0:
                continue
            mv = self.move_lookup(owned.move_id)
            if mv is None:
                continue
            score = mv.power * get_effectiveness(mv.type, self.target_type)
            if score > best_score:
                best_score = score
                best = i
        return random_usable_move(moves, roll) if best is None else best

__all__ = ["MoveSelector","random_usable_move","StrongestMoveSelector"]
