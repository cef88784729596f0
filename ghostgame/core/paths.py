"""
Centralized path helpers.
"""
from __future__ import annotations
from pathlib import Path

# This file lives at ghostgame/core/paths.py
PACKAGE_ROOT = Path(__file__).resolve().parents[1]
ASSETS = PACKAGE_ROOT / "assets"
MOVES_FILE = ASSETS / "moves.json"
SPECIES_FILE = ASSETS / "species.json"
ITEMS_FILE = ASSETS / "items.json"
