"""Factory helpers for constructing owned ghosts from species data.

Shared by the simulation script, wild encounter setup and tests.
"""
from __future__ import annotations
import uuid
from typing import Callable, List, Optional

from ghostgame.data import find_move, find_species, get_species
from .experience import calculate_stats, clamp_level, exp_for_level
from .models import GhostSpecies, Move, OwnedGhost, OwnedMove, MAX_MOVES


def starting_moves(species: GhostSpecies, level: int,
                   move_lookup: Callable[[str], Optional[Move]] = find_move) -> List[OwnedMove]:
    """The last four learnset moves at or below ``level`` that exist in master data."""
    known = [lm for lm in species.learnable_moves if lm.level <= level]
    known_sorted = sorted(known, key=lambda lm: (lm.level, lm.move_id))
    moves: List[OwnedMove] = []
    for lm in known_sorted:
        md = move_lookup(lm.move_id)
        if md is None or any(m.move_id == md.id for m in moves):
            continue
        moves.append(OwnedMove(move_id=md.id, current_pp=md.pp, max_pp=md.pp))
    return moves[-MAX_MOVES:]


def ghost_name(ghost: OwnedGhost,
               species_lookup: Callable[[str], Optional[GhostSpecies]] = find_species) -> str:
    """Nickname, else species name, else the raw species id."""
    if ghost.nickname:
        return ghost.nickname
    species = species_lookup(ghost.species_id)
    return species.name if species is not None else ghost.species_id


def ghost_from_species(species: GhostSpecies | str, level: int, ghost_id: Optional[str] = None,
                       nickname: Optional[str] = None,
                       move_lookup: Callable[[str], Optional[Move]] = find_move) -> OwnedGhost:
    if isinstance(species, str):
        species = get_species(species)
    level = clamp_level(level)
    stats = calculate_stats(species.base_stats, level)
    ghost = OwnedGhost(
        id=ghost_id or uuid.uuid4().hex,
        species_id=species.id,
        level=level,
        experience=exp_for_level(level),
        current_hp=stats.hp,
        max_hp=stats.hp,
        stats=stats,
        moves=starting_moves(species, level, move_lookup),
        nickname=nickname,
    )
    return ghost.validate()

__all__ = ["ghost_from_species","ghost_name","starting_moves"]
