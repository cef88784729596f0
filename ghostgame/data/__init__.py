"""Read-only master data (moves, species, items) shipped with the package."""
from .moves import get_move, find_move, all_moves
from .species import get_species, find_species, all_species, all_species_ids, species_by_rarity
from .items import get_item, find_item, all_items, items_by_category, capture_bonus

__all__ = [
    "get_move", "find_move", "all_moves",
    "get_species", "find_species", "all_species", "all_species_ids", "species_by_rarity",
    "get_item", "find_item", "all_items", "items_by_category", "capture_bonus",
]
