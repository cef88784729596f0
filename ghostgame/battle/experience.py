"""Experience calculation, level-up handling & move learning.

- EXP yield is a flat 10 x the defeated ghost's level.
- The curve is cubic: reaching level L takes L**3 total EXP (level 1 takes 0).
- EXP keeps accumulating past the level cap; the level itself stops there.
- Stats are recomputed from species base stats on every level change.
"""
from __future__ import annotations
import copy
import math
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

from .models import BaseStats, GhostSpecies, LearnableMove, Move, OwnedGhost, OwnedMove, MAX_MOVES

MIN_LEVEL = 1
MAX_LEVEL = 100
BASE_EXP_MULTIPLIER = 10


@dataclass(frozen=True)
class ExperienceResult:
    new_level: int
    new_exp: int
    leveled_up: bool
    levels_gained: int


@dataclass(frozen=True)
class LevelUpResult:
    new_level: int
    new_stats: BaseStats
    new_max_hp: int
    learnable_move_ids: List[str]


@dataclass(frozen=True)
class ExperienceApplied:
    ghost: OwnedGhost
    result: ExperienceResult
    level_up: Optional[LevelUpResult] = None


def clamp_level(level: int, max_level: int = MAX_LEVEL) -> int:
    return max(MIN_LEVEL, min(int(level), max_level))

# ---------------- EXP curve -----------------

def calculate_exp_gain(defeated_level: int) -> int:
    return math.floor(defeated_level * BASE_EXP_MULTIPLIER)


def exp_for_level(level: int) -> int:
    """Total EXP required to reach ``level``."""
    if level <= 1:
        return 0
    return math.floor(level ** 3)


def exp_to_next_level(current_level: int, current_exp: int) -> int:
    return max(0, exp_for_level(current_level + 1) - current_exp)


def level_from_exp(total_exp: int, max_level: int = MAX_LEVEL) -> int:
    level = MIN_LEVEL
    while level < max_level and exp_for_level(level + 1) <= total_exp:
        level += 1
    return level


def add_experience(current_level: int, current_exp: int, gained_exp: int,
                   max_level: int = MAX_LEVEL) -> ExperienceResult:
    new_exp = current_exp + gained_exp
    # a ghost never loses levels, even when its EXP sits below its level threshold
    new_level = max(current_level, min(level_from_exp(new_exp, max_level), max_level))
    return ExperienceResult(
        new_level=new_level,
        new_exp=new_exp,
        leveled_up=new_level > current_level,
        levels_gained=new_level - current_level,
    )

# ---------------- Stats & learnsets -----------------

def calculate_max_hp(base_hp: int, level: int) -> int:
    return math.floor((2 * base_hp * level) / 100) + level + 10


def _calc_stat(base: int, level: int) -> int:
    return math.floor((2 * base * level) / 100) + 5


def calculate_stats(base_stats: BaseStats, level: int) -> BaseStats:
    return BaseStats(
        hp=calculate_max_hp(base_stats.hp, level),
        attack=_calc_stat(base_stats.attack, level),
        defense=_calc_stat(base_stats.defense, level),
        speed=_calc_stat(base_stats.speed, level),
    )


def new_learnable_moves(learnable: Iterable[LearnableMove], from_level: int, to_level: int) -> List[str]:
    """Move ids unlocked in ``(from_level, to_level]``, lowest level first."""
    unlocked = [lm for lm in learnable if from_level < lm.level <= to_level]
    return [lm.move_id for lm in sorted(unlocked, key=lambda lm: lm.level)]


def process_level_up(old_level: int, new_level: int, base_stats: BaseStats,
                     learnable: Iterable[LearnableMove]) -> LevelUpResult:
    new_stats = calculate_stats(base_stats, new_level)
    return LevelUpResult(
        new_level=new_level,
        new_stats=new_stats,
        new_max_hp=calculate_max_hp(base_stats.hp, new_level),
        learnable_move_ids=new_learnable_moves(learnable, old_level, new_level),
    )

# ---------------- Applying to owned ghosts -----------------

def apply_experience(ghost: OwnedGhost, gained: int, *, species: Optional[GhostSpecies] = None,
                     max_level: int = MAX_LEVEL) -> ExperienceApplied:
    """Return a new snapshot of ``ghost`` with ``gained`` EXP added.

    Without species data the EXP and level still move but stats stay as they
    were. Max HP growth is added to current HP as well.
    """
    result = add_experience(ghost.level, ghost.experience, gained, max_level)
    updated = replace(ghost, experience=result.new_exp, level=result.new_level,
                      moves=copy.deepcopy(ghost.moves))
    if not result.leveled_up or species is None:
        return ExperienceApplied(updated, result)
    level_up = process_level_up(ghost.level, result.new_level, species.base_stats, species.learnable_moves)
    hp_growth = level_up.new_max_hp - ghost.max_hp
    updated.stats = level_up.new_stats
    updated.max_hp = level_up.new_max_hp
    updated.current_hp = max(0, min(ghost.current_hp + hp_growth, updated.max_hp))
    return ExperienceApplied(updated, result, level_up)


def learn_move(ghost: OwnedGhost, move: Move, forget_index: Optional[int] = None) -> OwnedGhost:
    """Return a snapshot of ``ghost`` that knows ``move``.

    With a full move list the move at ``forget_index`` is replaced, or the
    oldest one when no index is given. Already-known moves are a no-op.
    """
    moves = copy.deepcopy(ghost.moves)
    if any(m.move_id == move.id for m in moves):
        return replace(ghost, moves=moves)
    new = OwnedMove(move_id=move.id, current_pp=move.pp, max_pp=move.pp)
    if len(moves) < MAX_MOVES:
        moves.append(new)
    elif forget_index is not None and 0 <= forget_index < len(moves):
        moves[forget_index] = new
    else:
        moves.pop(0)
        moves.append(new)
    return replace(ghost, moves=moves)

__all__ = [
    "calculate_exp_gain","exp_for_level","exp_to_next_level","level_from_exp","add_experience",
    "calculate_stats","calculate_max_hp","new_learnable_moves","process_level_up",
    "apply_experience","learn_move","clamp_level",
    "ExperienceResult","LevelUpResult","ExperienceApplied","MIN_LEVEL","MAX_LEVEL","BASE_EXP_MULTIPLIER",
]
