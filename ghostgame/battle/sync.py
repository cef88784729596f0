"""Fold a finished battle back into the player's party."""
from __future__ import annotations
import copy
from typing import List, Sequence

from ghostgame.core.logging import logger
from .models import BattleEndReason, OwnedGhost
from .state_machine import BattleSummary


def sync_party_after_battle(summary: BattleSummary, party: Sequence[OwnedGhost],
                            active_ghost_id: str) -> List[OwnedGhost]:
    """Return the updated party.

    On a loss every ghost is restored to full HP (the player is sent home).
    Otherwise the active ghost is replaced by the battle's snapshot, so HP,
    PP and any experience earned carry over. The input list is not modified.
    """
    updated = [copy.deepcopy(g) for g in party]
    if summary.end_reason == BattleEndReason.PLAYER_LOSE:
        for ghost in updated:
            ghost.current_hp = ghost.max_hp
        logger.info("PartyRestored", size=len(updated))
        return updated
    for i, ghost in enumerate(updated):
        if ghost.id == active_ghost_id:
            updated[i] = copy.deepcopy(summary.player_ghost)
            break
    else:
        logger.warn("ActiveGhostMissing", ghost_id=active_ghost_id)
    return updated

__all__ = ["sync_party_after_battle"]
