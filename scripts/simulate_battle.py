"""Auto-play one wild battle in the terminal.

Both sides pick moves on their own (the player uses the strongest usable move,
the opponent the default random policy) and the HUD plus narration are printed
with rich after every turn. Handy for eyeballing balance changes in the JSON
master data.

Usage:
    python scripts/simulate_battle.py [player_species] [enemy_species] [--level N] [--enemy-level N] [--seed N] [--fast]
"""
from __future__ import annotations
import argparse
import random
import sys
import time
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from rich.console import Console

from ghostgame.battle.ai import StrongestMoveSelector
from ghostgame.battle.factory import ghost_from_species
from ghostgame.battle.models import AttackAction
from ghostgame.battle.render import render_hud, render_turn
from ghostgame.battle.state_machine import BattleStateMachine
from ghostgame.core.logging import logger
from ghostgame.data import find_move, get_species
from ghostgame.system.settings import Settings

MAX_TURNS = 100
TURN_DELAY = {1: 0.0, 2: 0.4, 3: 1.0}  # seconds per turn by text_speed


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument("player", nargs="?", default="fireling")
    ap.add_argument("enemy", nargs="?", default="leafshade")
    ap.add_argument("--level", type=int, default=10)
    ap.add_argument("--enemy-level", type=int, default=None)
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--fast", action="store_true", help="no pause between turns")
    return ap.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    settings = Settings.load()
    settings.apply_log_level()
    if settings.data.debug:
        logger.set_level("DEBUG")
    console = Console()
    delay = 0.0 if args.fast else TURN_DELAY[settings.data.text_speed]

    try:
        player_species = get_species(args.player)
        enemy_species = get_species(args.enemy)
    except KeyError as e:
        console.print(f"[red]{e}[/red]")
        return 1

    player = ghost_from_species(player_species, args.level, ghost_id="player-1")
    enemy = ghost_from_species(enemy_species, args.enemy_level or args.level, ghost_id="wild-1")
    chooser = StrongestMoveSelector(find_move, enemy_species.type)
    rng = random.Random(args.seed)
    machine = BattleStateMachine(rng, max_level=settings.data.max_level)

    state = machine.start_battle(player, enemy, enemy_species.type)
    for line in state.messages:
        console.print(f"[bold]{line}[/bold]")
    render_hud(console, state, player_species.type, enemy_species.type,
               player_name=player_species.name, enemy_name=enemy_species.name)

    for _ in range(MAX_TURNS):
        if not state.is_active:
            break
        assert state.player_ghost is not None
        idx = chooser(state.player_ghost.ghost.moves, rng.random())
        turn_number = state.turn_count
        result = machine.execute_player_action(AttackAction(idx), player_species.type, enemy_species.type)
        render_turn(console, turn_number, result)
        render_hud(console, state, player_species.type, enemy_species.type,
                   player_name=player_species.name, enemy_name=enemy_species.name)
        time.sleep(delay)
    if state.is_active:
        console.print(f"[yellow]Stopped after {MAX_TURNS} turns.[/yellow]")
        return 0

    summary = machine.end_battle()
    if summary is None:
        return 0
    console.print(f"[bold green]Result: {summary.end_reason.value} in {summary.turns - 1} turns[/bold green]")
    if summary.exp_gained:
        g = summary.player_ghost
        console.print(f"{player_species.name} gained {summary.exp_gained} EXP (Lv{g.level}, {g.experience} total)")
    if summary.level_up and summary.level_up.learnable_move_ids:
        console.print(f"Can now learn: {', '.join(summary.level_up.learnable_move_ids)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
