"""Battle data model: master data records, owned ghost snapshots and battle state.

Master data (Move, GhostSpecies, Item) is frozen. Owned snapshots and battle
state are plain mutable dataclasses owned by whoever constructed them; the
state machine works on its own deep copies.

Every record has ``validate()`` which raises :class:`ValidationError` on
out-of-range values. Loaders and factories call it; the engine does not.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from ghostgame.core.errors import ValidationError

MAX_MOVES = 4
MIN_STAGE = -6
MAX_STAGE = 6


class GhostType(str, Enum):
    FIRE = "fire"
    WATER = "water"
    GRASS = "grass"
    ELECTRIC = "electric"
    GHOST = "ghost"
    NORMAL = "normal"


class BattlePhase(str, Enum):
    COMMAND_SELECT = "command_select"
    MOVE_SELECT = "move_select"
    ITEM_SELECT = "item_select"
    EXECUTING = "executing"
    RESULT = "result"
    CAPTURE_SUCCESS = "capture_success"


TERMINAL_PHASES = frozenset({BattlePhase.RESULT, BattlePhase.CAPTURE_SUCCESS})


class BattleEndReason(str, Enum):
    PLAYER_WIN = "player_win"
    PLAYER_LOSE = "player_lose"
    ESCAPE = "escape"
    CAPTURE = "capture"


class ItemCategory(str, Enum):
    HEALING = "healing"
    CAPTURE = "capture"
    OTHER = "other"


RARITIES = ("common", "uncommon", "rare", "epic", "legendary")

Side = Literal["player", "enemy"]


def _check_range(model: str, name: str, value: Any, lo: Optional[int], hi: Optional[int]):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(model, name, f"expected int, got {value!r}")
    if lo is not None and value < lo:
        raise ValidationError(model, name, f"{value} < {lo}")
    if hi is not None and value > hi:
        raise ValidationError(model, name, f"{value} > {hi}")


def _check_type(model: str, name: str, value: Any):
    try:
        GhostType(value)
    except ValueError:
        raise ValidationError(model, name, f"unknown ghost type {value!r}") from None


# ---------------------------------------------------------------------------
# Master data
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class BaseStats:
    hp: int
    attack: int
    defense: int
    speed: int

    def validate(self) -> "BaseStats":
        for name in ("hp", "attack", "defense", "speed"):
            _check_range("BaseStats", name, getattr(self, name), 1, 255)
        return self

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "BaseStats":
        return cls(hp=raw["hp"], attack=raw["attack"], defense=raw["defense"], speed=raw["speed"])


@dataclass(frozen=True)
class Move:
    id: str
    name: str
    type: GhostType
    power: int
    accuracy: int
    pp: int
    description: str = ""

    def validate(self) -> "Move":
        if not self.name:
            raise ValidationError("Move", "name", "must not be empty")
        _check_type("Move", "type", self.type)
        _check_range("Move", "power", self.power, 0, 250)
        _check_range("Move", "accuracy", self.accuracy, 0, 100)
        _check_range("Move", "pp", self.pp, 1, 40)
        return self

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Move":
        return cls(
            id=raw["id"], name=raw["name"], type=GhostType(raw["type"]),
            power=raw["power"], accuracy=raw["accuracy"], pp=raw["pp"],
            description=raw.get("description", ""),
        )


@dataclass(frozen=True)
class LearnableMove:
    level: int
    move_id: str

    def validate(self) -> "LearnableMove":
        _check_range("LearnableMove", "level", self.level, 1, 100)
        return self


@dataclass(frozen=True)
class GhostSpecies:
    id: str
    name: str
    type: GhostType
    base_stats: BaseStats
    learnable_moves: Tuple[LearnableMove, ...] = ()
    description: str = ""
    rarity: str = "common"

    def validate(self) -> "GhostSpecies":
        if not self.name:
            raise ValidationError("GhostSpecies", "name", "must not be empty")
        _check_type("GhostSpecies", "type", self.type)
        self.base_stats.validate()
        for lm in self.learnable_moves:
            lm.validate()
        if self.rarity not in RARITIES:
            raise ValidationError("GhostSpecies", "rarity", f"unknown rarity {self.rarity!r}")
        return self

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "GhostSpecies":
        return cls(
            id=raw["id"], name=raw["name"], type=GhostType(raw["type"]),
            base_stats=BaseStats.from_dict(raw["base_stats"]),
            learnable_moves=tuple(LearnableMove(level=m["level"], move_id=m["move_id"])
                                  for m in raw.get("learnable_moves", [])),
            description=raw.get("description", ""),
            rarity=raw.get("rarity", "common"),
        )


@dataclass(frozen=True)
class Item:
    id: str
    name: str
    category: ItemCategory
    effect_value: int
    price: int = 0
    description: str = ""

    def validate(self) -> "Item":
        if not self.name:
            raise ValidationError("Item", "name", "must not be empty")
        _check_range("Item", "effect_value", self.effect_value, 0, None)
        _check_range("Item", "price", self.price, 0, None)
        return self

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Item":
        return cls(
            id=raw["id"], name=raw["name"], category=ItemCategory(raw["category"]),
            effect_value=raw["effect_value"], price=raw.get("price", 0),
            description=raw.get("description", ""),
        )


# ---------------------------------------------------------------------------
# Owned snapshots (handed in/out by the persistence layer)
# ---------------------------------------------------------------------------
@dataclass
class OwnedMove:
    move_id: str
    current_pp: int
    max_pp: int

    @property
    def usable(self) -> bool:
        return self.current_pp > 0

    def validate(self) -> "OwnedMove":
        _check_range("OwnedMove", "max_pp", self.max_pp, 1, None)
        _check_range("OwnedMove", "current_pp", self.current_pp, 0, self.max_pp)
        return self


@dataclass
class OwnedGhost:
    id: str
    species_id: str
    level: int
    experience: int
    current_hp: int
    max_hp: int
    stats: BaseStats
    moves: List[OwnedMove] = field(default_factory=list)
    nickname: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.nickname or self.species_id

    def validate(self) -> "OwnedGhost":
        _check_range("OwnedGhost", "level", self.level, 1, 100)
        _check_range("OwnedGhost", "experience", self.experience, 0, None)
        _check_range("OwnedGhost", "max_hp", self.max_hp, 1, None)
        _check_range("OwnedGhost", "current_hp", self.current_hp, 0, self.max_hp)
        # computed stats outgrow the 255 base-stat ceiling at high levels
        for name in ("hp", "attack", "defense", "speed"):
            _check_range("OwnedGhost", f"stats.{name}", getattr(self.stats, name), 1, None)
        if len(self.moves) > MAX_MOVES:
            raise ValidationError("OwnedGhost", "moves", f"{len(self.moves)} moves, at most {MAX_MOVES}")
        for mv in self.moves:
            mv.validate()
        return self


# ---------------------------------------------------------------------------
# Battle-local state
# ---------------------------------------------------------------------------
@dataclass
class StatModifiers:
    attack: int = 0
    defense: int = 0
    speed: int = 0

    def validate(self) -> "StatModifiers":
        for name in ("attack", "defense", "speed"):
            _check_range("StatModifiers", name, getattr(self, name), MIN_STAGE, MAX_STAGE)
        return self


@dataclass
class BattleGhostState:
    ghost: OwnedGhost
    current_hp: int
    stat_modifiers: StatModifiers = field(default_factory=StatModifiers)

    @property
    def fainted(self) -> bool:
        return self.current_hp <= 0


@dataclass
class BattleState:
    phase: BattlePhase = BattlePhase.COMMAND_SELECT
    player_ghost: Optional[BattleGhostState] = None
    enemy_ghost: Optional[BattleGhostState] = None
    turn_count: int = 1
    escape_attempts: int = 0
    messages: List[str] = field(default_factory=list)
    is_active: bool = False
    end_reason: Optional[BattleEndReason] = None

    @property
    def started(self) -> bool:
        return self.player_ghost is not None and self.enemy_ghost is not None


# ---------------------------------------------------------------------------
# Player actions & turn results
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class AttackAction:
    move_index: int


@dataclass(frozen=True)
class ItemAction:
    item_id: str
    heal_amount: Optional[int] = None  # None -> the item's catalog effect value


@dataclass(frozen=True)
class CaptureAction:
    item_bonus: int = 0  # percent; >= 100 never fails


@dataclass(frozen=True)
class EscapeAction:
    pass


BattleAction = Union[AttackAction, ItemAction, CaptureAction, EscapeAction]


@dataclass(frozen=True)
class RandomValues:
    """Fixed draws in [0, 1) for one turn; None means draw from the battle RNG."""
    critical: Optional[float] = None
    escape: Optional[float] = None
    capture: Optional[float] = None
    tie_break: Optional[float] = None
    enemy_move: Optional[float] = None


@dataclass
class DamageInfo:
    player_damage: Optional[int] = None  # damage taken by the player's ghost
    enemy_damage: Optional[int] = None   # damage taken by the enemy ghost


@dataclass
class TurnResult:
    player_action_message: Optional[str] = None
    enemy_action_message: Optional[str] = None
    messages: List[str] = field(default_factory=list)
    battle_ended: bool = False
    end_reason: Optional[BattleEndReason] = None
    damage_info: DamageInfo = field(default_factory=DamageInfo)


__all__ = [
    "GhostType", "BattlePhase", "BattleEndReason", "ItemCategory", "TERMINAL_PHASES",
    "BaseStats", "Move", "LearnableMove", "GhostSpecies", "Item",
    "OwnedMove", "OwnedGhost", "StatModifiers", "BattleGhostState", "BattleState",
    "AttackAction", "ItemAction", "CaptureAction", "EscapeAction", "BattleAction",
    "RandomValues", "DamageInfo", "TurnResult", "Side", "MAX_MOVES", "MIN_STAGE", "MAX_STAGE",
]
