"""Runtime loader utilities for ghost species data."""
from __future__ import annotations
from functools import lru_cache
from typing import Dict, Iterable, Optional

from ghostgame.battle.models import GhostSpecies
from ghostgame.core.paths import SPECIES_FILE
from .loader import build_catalog

@lru_cache(maxsize=None)
def all_species() -> Dict[str, GhostSpecies]:
    return build_catalog(SPECIES_FILE, GhostSpecies.from_dict)

def get_species(species_id: str) -> GhostSpecies:
    try:
        return all_species()[species_id]
    except KeyError:
        raise KeyError(f"Species not found: {species_id}") from None

def find_species(species_id: str) -> Optional[GhostSpecies]:
    return all_species().get(species_id)

def all_species_ids() -> Iterable[str]:
    return tuple(all_species())

def species_by_rarity(rarity: str) -> list[GhostSpecies]:
    return [s for s in all_species().values() if s.rarity == rarity]

__all__ = ["get_species","find_species","all_species","all_species_ids","species_by_rarity"]
