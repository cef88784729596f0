"""Rich rendering of a battle for terminal tooling.

Not used by the engine; the simulation script and manual debugging print
the HUD and turn narration with it.
"""
from __future__ import annotations
from typing import Iterable, Optional

from rich.align import Align
from rich.box import ROUNDED
from rich.columns import Columns
from rich.console import Console
from rich.panel import Panel

from ghostgame.core.types import rich_type_markup, type_abbreviation
from .factory import ghost_name
from .models import BattleGhostState, BattleState, GhostType, TurnResult

HP_BAR_LENGTH = 20


def hp_bar_markup(current: int, max_hp: int, length: int = HP_BAR_LENGTH) -> str:
    if max_hp <= 0 or current <= 0:
        return "[red]FAINTED[/red]"
    percent = min(current, max_hp) / max_hp
    filled = int(percent * length)
    if percent > 0.5:
        color = "green"
    elif percent > 0.25:
        color = "yellow"
    else:
        color = "red"
    bar = "█" * filled + "░" * (length - filled)
    return f"[{color}]{bar}[/{color}]"


def ghost_panel(ghost: BattleGhostState, ghost_type: Optional[GhostType], title: str,
                name: Optional[str] = None) -> Panel:
    g = ghost.ghost
    label = name or ghost_name(g)
    type_text = rich_type_markup(ghost_type, type_abbreviation(ghost_type)) if ghost_type else "???"
    body = (
        f"[bold bright_white]{label} Lv{g.level}[/bold bright_white]\n"
        f"[bright_white][[/bright_white]{type_text}[bright_white]][/bright_white]\n"
        f"[bright_white]HP: {ghost.current_hp}/{g.max_hp}[/bright_white]\n"
        f"{hp_bar_markup(ghost.current_hp, g.max_hp)}"
    )
    return Panel(body, title=f"[bright_white bold]{title}[/bright_white bold]",
                 box=ROUNDED, style="bright_white", width=40, padding=(0, 1))


def render_hud(console: Console, state: BattleState, player_type: Optional[GhostType] = None,
               enemy_type: Optional[GhostType] = None, *, player_name: Optional[str] = None,
               enemy_name: Optional[str] = None) -> None:
    if not state.started:
        return
    assert state.player_ghost is not None and state.enemy_ghost is not None
    enemy_panel = ghost_panel(state.enemy_ghost, enemy_type, "OPPONENT", enemy_name)
    player_panel = ghost_panel(state.player_ghost, player_type, "YOUR GHOST", player_name)
    columns = Columns([enemy_panel, player_panel], equal=True, expand=False, padding=(0, 4))
    console.print(Align.center(columns))


def render_messages(console: Console, lines: Iterable[str]) -> None:
    for line in lines:
        console.print(f"  {line}")


def render_turn(console: Console, turn_number: int, result: TurnResult) -> None:
    console.print(f"[bold cyan]Turn {turn_number}[/bold cyan]")
    render_messages(console, result.messages)
    if result.battle_ended and result.end_reason is not None:
        console.print(f"[bold magenta]Battle over: {result.end_reason.value}[/bold magenta]")

__all__ = ["hp_bar_markup","ghost_panel","render_hud","render_messages","render_turn"]
