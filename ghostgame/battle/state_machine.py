"""Single-encounter battle flow.

One :class:`BattleStateMachine` drives one wild encounter from
``start_battle`` to ``end_battle``. The UI moves between the selection
phases with ``set_phase`` and submits a command through
``execute_player_action``; everything probabilistic draws from the machine's
own RNG unless a fixed value is injected through :class:`RandomValues`.

Phase graph::

    command_select -> move_select | item_select | executing
    move_select    -> command_select | executing
    item_select    -> command_select | executing
    executing      -> command_select | result | capture_success

``result`` and ``capture_success`` are terminal.
"""
from __future__ import annotations
import copy
import random
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, FrozenSet, List, Optional

from ghostgame.core.errors import BattleStateError
from ghostgame.core.logging import logger
from ghostgame.data import find_item, find_move, find_species
from .ai import MoveSelector, random_usable_move
from .capture import attempt_capture, attempt_escape
from .damage import DamageParams, calculate_damage, modified_stat
from .factory import ghost_name
from .experience import MAX_LEVEL, ExperienceApplied, LevelUpResult, apply_experience, calculate_exp_gain
from .models import (
    AttackAction, BattleAction, BattleEndReason, BattleGhostState, BattlePhase, BattleState,
    CaptureAction, DamageInfo, EscapeAction, GhostSpecies, GhostType, Item, ItemAction,
    ItemCategory, Move, OwnedGhost, RandomValues, Side, StatModifiers, TurnResult,
    TERMINAL_PHASES, MIN_STAGE, MAX_STAGE,
)
from .turn_order import determine_turn_order
from .typechart import effectiveness_message

PHASE_EDGES: Dict[BattlePhase, FrozenSet[BattlePhase]] = {
    BattlePhase.COMMAND_SELECT: frozenset({BattlePhase.MOVE_SELECT, BattlePhase.ITEM_SELECT, BattlePhase.EXECUTING}),
    BattlePhase.MOVE_SELECT: frozenset({BattlePhase.COMMAND_SELECT, BattlePhase.EXECUTING}),
    BattlePhase.ITEM_SELECT: frozenset({BattlePhase.COMMAND_SELECT, BattlePhase.EXECUTING}),
    BattlePhase.EXECUTING: frozenset({BattlePhase.COMMAND_SELECT, BattlePhase.RESULT, BattlePhase.CAPTURE_SUCCESS}),
    BattlePhase.RESULT: frozenset(),
    BattlePhase.CAPTURE_SUCCESS: frozenset(),
}

# Phases the UI may request directly; the rest are reached by resolving a turn
_SELECTABLE_PHASES = frozenset({BattlePhase.COMMAND_SELECT, BattlePhase.MOVE_SELECT, BattlePhase.ITEM_SELECT})

STAT_NAMES = ("attack", "defense", "speed")


@dataclass(frozen=True)
class BattleSummary:
    """What the persistence layer needs once an encounter is over."""
    end_reason: BattleEndReason
    player_ghost: OwnedGhost
    enemy_ghost: OwnedGhost
    turns: int
    captured_ghost: Optional[OwnedGhost] = None
    exp_gained: int = 0
    experience: Optional[ExperienceApplied] = None

    @property
    def level_up(self) -> Optional[LevelUpResult]:
        return self.experience.level_up if self.experience else None


@dataclass
class _Turn:
    player_message: Optional[str] = None
    enemy_message: Optional[str] = None
    messages: List[str] = field(default_factory=list)
    damage: DamageInfo = field(default_factory=DamageInfo)
    end_reason: Optional[BattleEndReason] = None

    def player_says(self, text: str):
        self.player_message = text if self.player_message is None else f"{self.player_message} {text}"
        self.messages.append(text)

    def enemy_says(self, text: str):
        self.enemy_message = text if self.enemy_message is None else f"{self.enemy_message} {text}"
        self.messages.append(text)

    def result(self) -> TurnResult:
        return TurnResult(
            player_action_message=self.player_message,
            enemy_action_message=self.enemy_message,
            messages=list(self.messages),
            battle_ended=self.end_reason is not None,
            end_reason=self.end_reason,
            damage_info=self.damage,
        )


class BattleStateMachine:
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        *,
        move_lookup: Callable[[str], Optional[Move]] = find_move,
        item_lookup: Callable[[str], Optional[Item]] = find_item,
        species_lookup: Callable[[str], Optional[GhostSpecies]] = find_species,
        select_opponent_move: MoveSelector = random_usable_move,
        max_level: int = MAX_LEVEL,
        message_cb: Optional[Callable[[str], None]] = None,
    ):
        self.rng = rng or random.Random()
        self.move_lookup = move_lookup
        self.item_lookup = item_lookup
        self.species_lookup = species_lookup
        self.select_opponent_move = select_opponent_move
        self.max_level = max_level
        self.message_cb = message_cb
        self.state = BattleState()
        self.enemy_type: Optional[GhostType] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start_battle(self, player_ghost: OwnedGhost, enemy_ghost: OwnedGhost,
                     enemy_type: Optional[GhostType] = None) -> BattleState:
        self.state = BattleState(
            phase=BattlePhase.COMMAND_SELECT,
            player_ghost=self._battle_ghost(player_ghost),
            enemy_ghost=self._battle_ghost(enemy_ghost),
            turn_count=1,
            escape_attempts=0,
            messages=[],
            is_active=True,
            end_reason=None,
        )
        self.enemy_type = GhostType(enemy_type) if enemy_type is not None else None
        self.add_message(f"A wild {self._name('enemy')} appeared!")
        logger.debug("BattleStart", player=player_ghost.species_id, player_level=player_ghost.level,
                     enemy=enemy_ghost.species_id, enemy_level=enemy_ghost.level)
        return self.state

    def end_battle(self) -> Optional[BattleSummary]:
        """Summarize a finished battle; None while it is still running."""
        st = self.state
        if not st.started or st.is_active or st.end_reason is None:
            logger.warn("EndBattleIgnored", started=st.started, active=st.is_active)
            return None
        assert st.player_ghost is not None and st.enemy_ghost is not None
        player = self._snapshot(st.player_ghost)
        enemy = self._snapshot(st.enemy_ghost)
        exp_gained = 0
        applied: Optional[ExperienceApplied] = None
        if st.end_reason == BattleEndReason.PLAYER_WIN:
            exp_gained = calculate_exp_gain(enemy.level)
            species = self.species_lookup(player.species_id)
            applied = apply_experience(player, exp_gained, species=species, max_level=self.max_level)
            player = applied.ghost
        logger.debug("BattleEnd", reason=st.end_reason.value, turns=st.turn_count, exp=exp_gained)
        return BattleSummary(
            end_reason=st.end_reason,
            player_ghost=player,
            enemy_ghost=enemy,
            turns=st.turn_count,
            captured_ghost=enemy if st.end_reason == BattleEndReason.CAPTURE else None,
            exp_gained=exp_gained,
            experience=applied,
        )

    def reset(self):
        self.state = BattleState()
        self.enemy_type = None

    # ------------------------------------------------------------------
    # UI helpers
    # ------------------------------------------------------------------
    def set_phase(self, phase: BattlePhase) -> BattleState:
        target = BattlePhase(phase)
        st = self.state
        if target == st.phase:
            return st
        if not st.is_active or target not in _SELECTABLE_PHASES:
            raise BattleStateError(st.phase.value, target.value)
        self._transition(target)
        return st

    def add_message(self, message: str):
        self.state.messages.append(message)
        if self.message_cb:
            self.message_cb(message)

    def clear_messages(self):
        self.state.messages = []

    def apply_stat_change(self, side: Side, stat: str, stages: int) -> int:
        """Shift a battle stat stage, clamped to [-6, 6]. Returns the applied change."""
        if stat not in STAT_NAMES:
            raise ValueError(f"Unknown stat: {stat}")
        st = self.state
        ghost = st.player_ghost if side == "player" else st.enemy_ghost
        if ghost is None or not st.is_active or int(stages) == 0:
            return 0
        before = getattr(ghost.stat_modifiers, stat)
        after = max(MIN_STAGE, min(MAX_STAGE, before + int(stages)))
        setattr(ghost.stat_modifiers, stat, after)
        name = self._name(side)
        if after > before:
            self.add_message(f"{name}'s {stat} rose!")
        elif after < before:
            self.add_message(f"{name}'s {stat} fell!")
        else:
            self.add_message(f"{name}'s {stat} won't go any {'higher' if stages > 0 else 'lower'}!")
        return after - before

    # ------------------------------------------------------------------
    # Turn resolution
    # ------------------------------------------------------------------
    def execute_player_action(self, action: BattleAction, player_type: GhostType, enemy_type: GhostType,
                              random_values: Optional[RandomValues] = None) -> TurnResult:
        st = self.state
        rv = random_values or RandomValues()
        if not st.started:
            return TurnResult()
        if not st.is_active:
            st.turn_count += 1
            text = "The battle is already over."
            return TurnResult(player_action_message=text, messages=[text],
                              battle_ended=True, end_reason=st.end_reason)

        if not isinstance(action, (AttackAction, ItemAction, CaptureAction, EscapeAction)):
            raise TypeError(f"Unsupported battle action: {action!r}")
        player_type, enemy_type = GhostType(player_type), GhostType(enemy_type)
        phase_before = st.phase
        saved = copy.deepcopy((st.player_ghost, st.enemy_ghost, st.escape_attempts))
        self._transition(BattlePhase.EXECUTING)
        turn = _Turn()
        try:
            if isinstance(action, AttackAction):
                self._resolve_attack(turn, action, player_type, enemy_type, rv)
            elif isinstance(action, ItemAction):
                self._resolve_item(turn, action, player_type, enemy_type, rv)
            elif isinstance(action, CaptureAction):
                self._resolve_capture(turn, action, player_type, enemy_type, rv)
            else:
                self._resolve_escape(turn, player_type, enemy_type, rv)
        except Exception as e:
            # A failed turn leaves no trace: the state is as before the call
            st.player_ghost, st.enemy_ghost, st.escape_attempts = saved
            st.phase = phase_before
            logger.error("TurnAborted", action=type(action).__name__, error=repr(e))
            raise

        st.turn_count += 1
        for text in turn.messages:
            self.add_message(text)
        if turn.end_reason is not None:
            st.is_active = False
            st.end_reason = turn.end_reason
            self._transition(BattlePhase.CAPTURE_SUCCESS if turn.end_reason == BattleEndReason.CAPTURE
                             else BattlePhase.RESULT)
        else:
            self._transition(BattlePhase.COMMAND_SELECT)
        logger.debug("TurnResolved", turn=st.turn_count - 1, action=type(action).__name__,
                     player_hp=self._player.current_hp, enemy_hp=self._enemy.current_hp,
                     ended=turn.end_reason.value if turn.end_reason else None)
        return turn.result()

    def _resolve_attack(self, turn: _Turn, action: AttackAction, player_type: GhostType,
                        enemy_type: GhostType, rv: RandomValues):
        player = self._player
        moves = player.ghost.moves
        owned = moves[action.move_index] if 0 <= action.move_index < len(moves) else None
        move = self.move_lookup(owned.move_id) if owned is not None else None
        if owned is None or move is None:
            turn.player_says(f"{self._name('player')} can't use that move!")
            return
        if owned.current_pp <= 0:
            turn.player_says(f"{self._name('player')} has no PP left for {move.name}!")
            return

        player_speed, enemy_speed = self._speed(player), self._speed(self._enemy)
        tie = rv.tie_break
        if tie is None and player_speed == enemy_speed:
            tie = self.rng.random()
        order = determine_turn_order(player_speed, enemy_speed, tie)

        def player_strikes():
            owned.current_pp -= 1
            turn.damage.enemy_damage = self._strike(turn, "player", move, player_type, enemy_type, rv)

        def enemy_strikes():
            self._enemy_acts(turn, player_type, enemy_type, rv)

        steps = [player_strikes, enemy_strikes] if order.first == "player" else [enemy_strikes, player_strikes]
        for step in steps:
            step()
            if turn.end_reason is not None:
                break

    def _resolve_item(self, turn: _Turn, action: ItemAction, player_type: GhostType,
                      enemy_type: GhostType, rv: RandomValues):
        item = self.item_lookup(action.item_id)
        if item is None or item.category != ItemCategory.HEALING:
            turn.player_says("That item can't be used here.")
            return
        player = self._player
        requested = item.effect_value if action.heal_amount is None else action.heal_amount
        healed = max(0, min(requested, player.ghost.max_hp - player.current_hp))
        player.current_hp += healed
        if healed > 0:
            turn.player_says(f"Used {item.name}! {self._name('player')} recovered {healed} HP!")
        else:
            turn.player_says(f"Used {item.name}! {self._name('player')}'s HP is already full!")
        self._enemy_acts(turn, player_type, enemy_type, rv)

    def _resolve_capture(self, turn: _Turn, action: CaptureAction, player_type: GhostType,
                         enemy_type: GhostType, rv: RandomValues):
        enemy = self._enemy
        roll = rv.capture if rv.capture is not None else self.rng.random()
        result = attempt_capture(enemy.current_hp, enemy.ghost.max_hp, action.item_bonus, roll)
        logger.debug("CaptureRoll", rate=round(result.capture_rate, 4), roll=round(roll, 4), success=result.success)
        if result.success:
            turn.player_says(f"Gotcha! The wild {self._name('enemy')} was caught!")
            turn.end_reason = BattleEndReason.CAPTURE
            return
        turn.player_says(f"Oh no! The wild {self._name('enemy')} broke free!")
        self._enemy_acts(turn, player_type, enemy_type, rv)

    def _resolve_escape(self, turn: _Turn, player_type: GhostType, enemy_type: GhostType, rv: RandomValues):
        st = self.state
        roll = rv.escape if rv.escape is not None else self.rng.random()
        result = attempt_escape(self._speed(self._player), self._speed(self._enemy), st.escape_attempts, roll)
        st.escape_attempts += 1
        logger.debug("EscapeRoll", rate=round(result.escape_rate, 4), roll=round(roll, 4),
                     attempts=st.escape_attempts, success=result.success)
        if result.success:
            turn.player_says("Got away safely!")
            turn.end_reason = BattleEndReason.ESCAPE
            return
        turn.player_says("Couldn't get away!")
        self._enemy_acts(turn, player_type, enemy_type, rv)

    def _enemy_acts(self, turn: _Turn, player_type: GhostType, enemy_type: GhostType, rv: RandomValues):
        moves = self._enemy.ghost.moves
        roll = rv.enemy_move if rv.enemy_move is not None else self.rng.random()
        idx = self.select_opponent_move(moves, roll) if moves else -1
        owned = moves[idx] if 0 <= idx < len(moves) else None
        move = self.move_lookup(owned.move_id) if owned is not None else None
        if owned is None or move is None or owned.current_pp <= 0:
            turn.enemy_says(f"The wild {self._name('enemy')} has no moves it can use!")
            return
        owned.current_pp -= 1
        turn.damage.player_damage = self._strike(turn, "enemy", move, enemy_type, player_type, rv)

    def _strike(self, turn: _Turn, side: Side, move: Move, attacker_type: GhostType,
                defender_type: GhostType, rv: RandomValues) -> int:
        attacker, defender = (self._player, self._enemy) if side == "player" else (self._enemy, self._player)
        crit_roll = rv.critical if rv.critical is not None else self.rng.random()
        result = calculate_damage(DamageParams(
            move_power=move.power,
            move_type=move.type,
            attacker_attack=modified_stat(attacker.ghost.stats.attack, attacker.stat_modifiers.attack),
            attacker_type=attacker_type,
            attacker_level=attacker.ghost.level,
            defender_defense=modified_stat(defender.ghost.stats.defense, defender.stat_modifiers.defense),
            defender_type=defender_type,
        ), crit_roll)
        defender.current_hp = max(0, defender.current_hp - result.damage)

        prefix = "" if side == "player" else "The wild "
        parts = [f"{prefix}{self._name(side)} used {move.name}! {result.damage} damage!"]
        if result.is_critical:
            parts.append("A critical hit!")
        eff = effectiveness_message(result.effectiveness)
        if eff:
            parts.append(eff)
        say = turn.player_says if side == "player" else turn.enemy_says
        say(" ".join(parts))

        if defender.current_hp == 0:
            other: Side = "enemy" if side == "player" else "player"
            say(f"{'The wild ' if other == 'enemy' else ''}{self._name(other)} fainted!")
            turn.end_reason = BattleEndReason.PLAYER_WIN if side == "player" else BattleEndReason.PLAYER_LOSE
        return result.damage

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    @property
    def _player(self) -> BattleGhostState:
        assert self.state.player_ghost is not None
        return self.state.player_ghost

    @property
    def _enemy(self) -> BattleGhostState:
        assert self.state.enemy_ghost is not None
        return self.state.enemy_ghost

    def _transition(self, target: BattlePhase):
        current = self.state.phase
        if target not in PHASE_EDGES[current]:
            raise BattleStateError(current.value, target.value)
        self.state.phase = target
        logger.debug("PhaseChange", frm=current.value, to=target.value)

    def _name(self, side: Side) -> str:
        ghost = self.state.player_ghost if side == "player" else self.state.enemy_ghost
        if ghost is None:
            return "???"
        return ghost_name(ghost.ghost, self.species_lookup)

    @staticmethod
    def _speed(ghost: BattleGhostState) -> int:
        return modified_stat(ghost.ghost.stats.speed, ghost.stat_modifiers.speed)

    @staticmethod
    def _battle_ghost(ghost: OwnedGhost) -> BattleGhostState:
        snapshot = copy.deepcopy(ghost)
        return BattleGhostState(
            ghost=snapshot,
            current_hp=max(0, min(snapshot.current_hp, snapshot.max_hp)),
            stat_modifiers=StatModifiers(),
        )

    @staticmethod
    def _snapshot(ghost: BattleGhostState) -> OwnedGhost:
        return replace(copy.deepcopy(ghost.ghost), current_hp=ghost.current_hp)

    @property
    def is_terminal(self) -> bool:
        return self.state.phase in TERMINAL_PHASES


__all__ = ["BattleStateMachine","BattleSummary","PHASE_EDGES","STAT_NAMES"]
