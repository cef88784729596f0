"""Runtime loader for move master data."""
from __future__ import annotations
from functools import lru_cache
from typing import Dict, Optional

from ghostgame.battle.models import Move
from ghostgame.core.paths import MOVES_FILE
from .loader import build_catalog

@lru_cache(maxsize=None)
def all_moves() -> Dict[str, Move]:
    return build_catalog(MOVES_FILE, Move.from_dict)

def get_move(move_id: str) -> Move:
    try:
        return all_moves()[move_id]
    except KeyError:
        raise KeyError(f"Move not found: {move_id}") from None

def find_move(move_id: str) -> Optional[Move]:
    return all_moves().get(move_id)

__all__ = ["get_move","find_move","all_moves"]
