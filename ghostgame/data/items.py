"""Item master data loader."""
from __future__ import annotations
from functools import lru_cache
from typing import Dict, Optional

from ghostgame.battle.models import Item, ItemCategory
from ghostgame.core.paths import ITEMS_FILE
from .loader import build_catalog

@lru_cache(maxsize=None)
def all_items() -> Dict[str, Item]:
    return build_catalog(ITEMS_FILE, Item.from_dict)

def get_item(item_id: str) -> Item:
    try:
        return all_items()[item_id]
    except KeyError:
        raise KeyError(f"Item not found: {item_id}") from None

def find_item(item_id: str) -> Optional[Item]:
    return all_items().get(item_id)

def items_by_category(category: ItemCategory) -> list[Item]:
    return [i for i in all_items().values() if i.category == category]

def capture_bonus(item: Item) -> int:
    """Capture bonus in percent; 0 for anything that is not a capture item."""
    if item.category != ItemCategory.CAPTURE:
        return 0
    return item.effect_value

__all__ = ["get_item","find_item","all_items","items_by_category","capture_bonus"]
