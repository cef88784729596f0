"""Global type metadata: colors & abbreviations.

Provides:
  TYPE_COLORS_HEX: mapping type -> hex color string (#RRGGBB)
  TYPE_ABBREVIATIONS: mapping type -> 3-letter abbreviation (upper)
  ABBREVIATION_TYPES: reverse mapping
  helpers for colorized terminal output (ANSI via colorama, or rich markup).
"""
from __future__ import annotations
from typing import Dict
import os, re

from colorama import Fore, Style

TYPE_COLORS_HEX: Dict[str, str] = {
    "fire": "#EE8130",
    "water": "#6390F0",
    "grass": "#7AC74C",
    "electric": "#F7D02C",
    "ghost": "#735797",
    "normal": "#A8A77A",
}

TYPE_ABBREVIATIONS: Dict[str, str] = {
    "fire": "FIR",
    "water": "WTR",
    "grass": "GRS",
    "electric": "ELE",
    "ghost": "GHO",
    "normal": "NRM",
}

ABBREVIATION_TYPES: Dict[str, str] = {abbr: t for t, abbr in TYPE_ABBREVIATIONS.items()}

_TRUECOLOR = "truecolor" in os.environ.get("COLORTERM", "").lower()

_FALLBACK_FORE: Dict[str,str] = {
    "fire": Fore.RED,
    "water": Fore.CYAN,
    "grass": Fore.GREEN,
    "electric": Fore.YELLOW,
    "ghost": Fore.MAGENTA,
    "normal": Fore.WHITE,
}

RESET = Style.RESET_ALL

def _type_key(type_name) -> str:
    # GhostType members carry their name in str(); use the value
    return str(getattr(type_name, "value", type_name)).lower()

def _hex_to_rgb(h: str) -> tuple[int,int,int]:
    h = h.lstrip('#')
    return int(h[0:2],16), int(h[2:4],16), int(h[4:6],16)

def color_code(type_name: str) -> str:
    t = _type_key(type_name)
    hex_val = TYPE_COLORS_HEX.get(t)
    if not hex_val:
        return ''
    if _TRUECOLOR:
        r,g,b = _hex_to_rgb(hex_val)
        return f"\033[38;2;{r};{g};{b}m"
    return _FALLBACK_FORE.get(t,'')

def colorize_type_text(type_name: str, text: str) -> str:
    code = color_code(type_name)
    if not code:
        return text
    return f"{code}{text}{RESET}"

def rich_type_markup(type_name: str, text: str) -> str:
    """Wrap text in rich markup using the type's hex color."""
    hex_color = TYPE_COLORS_HEX.get(_type_key(type_name))
    if not hex_color:
        return text
    return f"[{hex_color}]{text}[/{hex_color}]"

def type_abbreviation(type_name: str) -> str:
    t = _type_key(type_name)
    return TYPE_ABBREVIATIONS.get(t, t[:3].upper())

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*m")

def strip_ansi(s: str) -> str:
    return ANSI_ESCAPE_RE.sub('', s)

__all__ = [
    'TYPE_COLORS_HEX','TYPE_ABBREVIATIONS','ABBREVIATION_TYPES',
    'colorize_type_text','rich_type_markup','type_abbreviation','strip_ansi'
]
