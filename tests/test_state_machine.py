import random

import pytest

from ghostgame.battle.models import (
    AttackAction, BaseStats, BattleEndReason, BattlePhase, CaptureAction, EscapeAction,
    GhostType, ItemAction, OwnedGhost, OwnedMove, RandomValues,
)
from ghostgame.battle.state_machine import BattleStateMachine
from ghostgame.core.errors import BattleStateError

NORMAL, FIRE, GHOST = GhostType.NORMAL, GhostType.FIRE, GhostType.GHOST
NO_CRIT = RandomValues(critical=0.99, enemy_move=0.0)


def make_ghost(gid, species_id, *, hp=30, max_hp=30, speed=50, level=10, exp=1000, moves=None):
    return OwnedGhost(
        id=gid, species_id=species_id, level=level, experience=exp,
        current_hp=hp, max_hp=max_hp, stats=BaseStats(max_hp, 50, 50, speed),
        moves=moves if moves is not None else [OwnedMove("tackle", 35, 35)],
    )


def start(player=None, enemy=None, **kw):
    m = BattleStateMachine(random.Random(1), **kw)
    m.start_battle(player or make_ghost("p1", "spiritpuff", speed=100),
                   enemy or make_ghost("e1", "fireling", speed=50), FIRE)
    return m


def test_start_battle_initial_state():
    m = start()
    st = m.state
    assert st.is_active and st.phase == BattlePhase.COMMAND_SELECT
    assert st.turn_count == 1 and st.escape_attempts == 0
    assert st.messages == ["A wild Fireling appeared!"]
    assert st.player_ghost.current_hp == 30
    assert st.end_reason is None


def test_start_battle_copies_snapshots():
    player = make_ghost("p1", "spiritpuff", speed=100)
    m = start(player=player)
    m.execute_player_action(AttackAction(0), NORMAL, FIRE, NO_CRIT)
    assert player.moves[0].current_pp == 35
    assert player.current_hp == 30


def test_attack_turn_both_sides_hit():
    m = start()
    res = m.execute_player_action(AttackAction(0), NORMAL, FIRE, NO_CRIT)
    st = m.state
    # player tackle has STAB: 6 -> 9; enemy tackle: 6
    assert st.enemy_ghost.current_hp == 21
    assert st.player_ghost.current_hp == 24
    assert res.damage_info.enemy_damage == 9
    assert res.damage_info.player_damage == 6
    assert st.player_ghost.ghost.moves[0].current_pp == 34
    assert st.enemy_ghost.ghost.moves[0].current_pp == 34
    assert st.turn_count == 2
    assert st.phase == BattlePhase.COMMAND_SELECT
    assert not res.battle_ended
    assert res.messages[0].startswith("Spiritpuff used Tackle! 9 damage!")
    assert res.messages[1].startswith("The wild Fireling used Tackle! 6 damage!")
    assert st.messages[-2:] == res.messages


def test_player_knockout_ends_battle_and_skips_enemy():
    m = start(enemy=make_ghost("e1", "fireling", hp=5))
    res = m.execute_player_action(AttackAction(0), NORMAL, FIRE, NO_CRIT)
    st = m.state
    assert res.battle_ended and res.end_reason == BattleEndReason.PLAYER_WIN
    assert st.enemy_ghost.current_hp == 0
    assert st.player_ghost.current_hp == 30
    assert res.damage_info.player_damage is None
    assert st.phase == BattlePhase.RESULT
    assert not st.is_active
    assert "The wild Fireling fainted!" in res.messages


def test_enemy_first_knockout_player_never_acts():
    m = start(player=make_ghost("p1", "spiritpuff", hp=5, speed=10))
    res = m.execute_player_action(AttackAction(0), NORMAL, FIRE, NO_CRIT)
    st = m.state
    assert res.end_reason == BattleEndReason.PLAYER_LOSE
    assert st.player_ghost.current_hp == 0
    assert st.enemy_ghost.current_hp == 30
    assert st.player_ghost.ghost.moves[0].current_pp == 35


@pytest.mark.parametrize("tie,reason", [(0.2, BattleEndReason.PLAYER_WIN), (0.7, BattleEndReason.PLAYER_LOSE)])
def test_speed_tie_breaker(tie, reason):
    m = start(player=make_ghost("p1", "spiritpuff", hp=5, speed=50),
              enemy=make_ghost("e1", "fireling", hp=5, speed=50))
    res = m.execute_player_action(AttackAction(0), NORMAL, FIRE,
                                  RandomValues(critical=0.99, tie_break=tie, enemy_move=0.0))
    assert res.end_reason == reason


def test_critical_hits_both_ways():
    m = start()
    res = m.execute_player_action(AttackAction(0), NORMAL, FIRE, RandomValues(critical=0.0, enemy_move=0.0))
    assert res.damage_info.enemy_damage == 13
    assert res.damage_info.player_damage == 9
    assert "A critical hit!" in res.messages[0]


def test_no_effect_narration():
    m = start(enemy=make_ghost("e1", "shadowwisp"))
    res = m.execute_player_action(AttackAction(0), NORMAL, GHOST, NO_CRIT)
    assert res.damage_info.enemy_damage == 0
    assert m.state.enemy_ghost.current_hp == 30
    assert "It had no effect..." in res.messages[0]


@pytest.mark.parametrize("moves,index", [
    ([OwnedMove("tackle", 0, 35)], 0),
    ([OwnedMove("tackle", 35, 35)], 3),
    ([OwnedMove("tackle", 35, 35)], -1),
    ([OwnedMove("no-such-move", 10, 10)], 0),
])
def test_unusable_move_is_noop_turn(moves, index):
    m = start(player=make_ghost("p1", "spiritpuff", speed=100, moves=moves))
    res = m.execute_player_action(AttackAction(index), NORMAL, FIRE, NO_CRIT)
    st = m.state
    assert st.enemy_ghost.current_hp == 30 and st.player_ghost.current_hp == 30
    assert st.turn_count == 2
    assert st.phase == BattlePhase.COMMAND_SELECT
    assert res.player_action_message and res.enemy_action_message is None
    assert not res.battle_ended


def test_enemy_without_usable_moves_does_nothing():
    m = start(enemy=make_ghost("e1", "fireling", moves=[OwnedMove("tackle", 0, 35)]))
    res = m.execute_player_action(AttackAction(0), NORMAL, FIRE, NO_CRIT)
    assert m.state.player_ghost.current_hp == 30
    assert "no moves it can use" in res.enemy_action_message


def test_custom_opponent_selector():
    enemy = make_ghost("e1", "fireling", moves=[OwnedMove("tackle", 35, 35), OwnedMove("ember", 25, 25)])
    m = start(enemy=enemy, select_opponent_move=lambda moves, roll: 1)
    res = m.execute_player_action(AttackAction(0), NORMAL, FIRE, NO_CRIT)
    assert "used Ember" in res.enemy_action_message
    assert m.state.enemy_ghost.ghost.moves[1].current_pp == 24


def test_healing_item_then_enemy_acts():
    m = start(player=make_ghost("p1", "spiritpuff", hp=10, speed=100))
    res = m.execute_player_action(ItemAction("potion"), NORMAL, FIRE, NO_CRIT)
    assert "recovered 20 HP" in res.player_action_message
    assert m.state.player_ghost.current_hp == 24


def test_healing_item_explicit_amount():
    m = start(player=make_ghost("p1", "spiritpuff", hp=10, speed=100))
    m.execute_player_action(ItemAction("potion", heal_amount=5), NORMAL, FIRE, NO_CRIT)
    assert m.state.player_ghost.current_hp == 9


def test_healing_at_full_hp():
    m = start()
    res = m.execute_player_action(ItemAction("potion"), NORMAL, FIRE, NO_CRIT)
    assert "already full" in res.player_action_message
    assert m.state.player_ghost.current_hp == 24


@pytest.mark.parametrize("item_id", ["no-such-item", "ghost-ball"])
def test_unusable_item_is_noop(item_id):
    m = start(player=make_ghost("p1", "spiritpuff", hp=10, speed=100))
    res = m.execute_player_action(ItemAction(item_id), NORMAL, FIRE, NO_CRIT)
    assert m.state.player_ghost.current_hp == 10
    assert res.enemy_action_message is None
    assert m.state.turn_count == 2


def test_guaranteed_capture():
    m = start()
    res = m.execute_player_action(CaptureAction(item_bonus=100), NORMAL, FIRE, NO_CRIT)
    st = m.state
    assert res.battle_ended and res.end_reason == BattleEndReason.CAPTURE
    assert st.phase == BattlePhase.CAPTURE_SUCCESS
    assert st.player_ghost.current_hp == 30
    summary = m.end_battle()
    assert summary.captured_ghost is not None
    assert summary.captured_ghost.species_id == "fireling"
    assert summary.exp_gained == 0


def test_failed_capture_lets_enemy_act():
    m = start()
    res = m.execute_player_action(CaptureAction(), NORMAL, FIRE,
                                  RandomValues(critical=0.99, capture=0.99, enemy_move=0.0))
    assert not res.battle_ended
    assert "broke free" in res.player_action_message
    assert m.state.player_ghost.current_hp == 24


def test_escape_attempts_accumulate():
    m = start(player=make_ghost("p1", "spiritpuff", speed=50))
    res = m.execute_player_action(EscapeAction(), NORMAL, FIRE,
                                  RandomValues(critical=0.99, escape=0.5, enemy_move=0.0))
    assert not res.battle_ended
    assert m.state.escape_attempts == 1
    assert m.state.player_ghost.current_hp == 24
    res = m.execute_player_action(EscapeAction(), NORMAL, FIRE, RandomValues(escape=0.55))
    assert res.end_reason == BattleEndReason.ESCAPE
    assert m.state.escape_attempts == 2
    assert m.state.phase == BattlePhase.RESULT


def test_escape_equal_speed_succeeds_below_half():
    m = start(player=make_ghost("p1", "spiritpuff", speed=50))
    res = m.execute_player_action(EscapeAction(), NORMAL, FIRE, RandomValues(escape=0.49))
    assert res.end_reason == BattleEndReason.ESCAPE
    assert res.messages == ["Got away safely!"]


def test_actions_after_end_change_nothing_but_turn_count():
    m = start(enemy=make_ghost("e1", "fireling", hp=5))
    m.execute_player_action(AttackAction(0), NORMAL, FIRE, NO_CRIT)
    messages = list(m.state.messages)
    res = m.execute_player_action(AttackAction(0), NORMAL, FIRE, NO_CRIT)
    assert m.state.turn_count == 3
    assert m.state.messages == messages
    assert m.state.player_ghost.ghost.moves[0].current_pp == 34
    assert res.battle_ended and res.end_reason == BattleEndReason.PLAYER_WIN


def test_action_before_start_is_empty():
    m = BattleStateMachine()
    res = m.execute_player_action(AttackAction(0), NORMAL, FIRE)
    assert res.messages == [] and not res.battle_ended
    assert m.state.turn_count == 1


def test_turn_count_and_hp_bounds_over_random_battles():
    for seed in range(20):
        rng = random.Random(seed)
        m = BattleStateMachine(random.Random(seed))
        m.start_battle(make_ghost("p1", "spiritpuff", speed=rng.randint(1, 100)),
                       make_ghost("e1", "fireling", speed=rng.randint(1, 100)))
        actions = [AttackAction(0), ItemAction("potion"), CaptureAction(10), EscapeAction(), AttackAction(2)]
        for n in range(1, 16):
            m.execute_player_action(rng.choice(actions), NORMAL, FIRE)
            st = m.state
            assert st.turn_count == 1 + n
            for side in (st.player_ghost, st.enemy_ghost):
                assert 0 <= side.current_hp <= side.ghost.max_hp
            assert (st.end_reason is None) == st.is_active
            if not st.is_active:
                assert st.phase in (BattlePhase.RESULT, BattlePhase.CAPTURE_SUCCESS)


def test_set_phase_navigation():
    m = start()
    m.set_phase(BattlePhase.MOVE_SELECT)
    assert m.state.phase == BattlePhase.MOVE_SELECT
    with pytest.raises(BattleStateError):
        m.set_phase(BattlePhase.ITEM_SELECT)
    with pytest.raises(BattleStateError):
        m.set_phase(BattlePhase.RESULT)
    m.set_phase("command_select")
    m.set_phase(BattlePhase.ITEM_SELECT)
    m.execute_player_action(ItemAction("potion"), NORMAL, FIRE, NO_CRIT)
    assert m.state.phase == BattlePhase.COMMAND_SELECT


def test_set_phase_after_end_raises():
    m = start(player=make_ghost("p1", "spiritpuff", speed=50))
    m.execute_player_action(EscapeAction(), NORMAL, FIRE, RandomValues(escape=0.0))
    with pytest.raises(BattleStateError):
        m.set_phase(BattlePhase.COMMAND_SELECT)


def test_stat_change_clamps_and_affects_order():
    m = start(player=make_ghost("p1", "spiritpuff", hp=5, speed=40),
              enemy=make_ghost("e1", "fireling", hp=5, speed=50))
    assert m.apply_stat_change("player", "speed", 1) == 1
    assert m.state.messages[-1] == "Spiritpuff's speed rose!"
    res = m.execute_player_action(AttackAction(0), NORMAL, FIRE, NO_CRIT)
    assert res.end_reason == BattleEndReason.PLAYER_WIN
    m2 = start()
    assert m2.apply_stat_change("enemy", "defense", -10) == -6
    assert m2.apply_stat_change("enemy", "defense", -1) == 0
    with pytest.raises(ValueError):
        m2.apply_stat_change("enemy", "hp", 1)


def test_end_battle_none_while_active():
    m = start()
    assert m.end_battle() is None
    assert BattleStateMachine().end_battle() is None


def test_end_battle_win_awards_experience():
    player = make_ghost("p1", "spiritpuff", speed=100, exp=1300)
    m = start(player=player, enemy=make_ghost("e1", "fireling", hp=5))
    m.execute_player_action(AttackAction(0), NORMAL, FIRE, NO_CRIT)
    summary = m.end_battle()
    assert summary.end_reason == BattleEndReason.PLAYER_WIN
    assert summary.exp_gained == 100
    g = summary.player_ghost
    assert g.level == 11 and g.experience == 1400
    assert summary.level_up is not None
    assert g.max_hp == summary.level_up.new_max_hp
    assert g.moves[0].current_pp == 34
    assert summary.enemy_ghost.current_hp == 0
    assert summary.captured_ghost is None


def test_end_battle_loss_carries_battle_hp():
    m = start(player=make_ghost("p1", "spiritpuff", hp=5, speed=10))
    m.execute_player_action(AttackAction(0), NORMAL, FIRE, NO_CRIT)
    summary = m.end_battle()
    assert summary.end_reason == BattleEndReason.PLAYER_LOSE
    assert summary.player_ghost.current_hp == 0
    assert summary.exp_gained == 0


def test_messages_and_reset():
    seen = []
    m = start(message_cb=seen.append)
    m.add_message("hello")
    assert m.state.messages[-1] == "hello"
    assert seen[-1] == "hello"
    m.clear_messages()
    assert m.state.messages == []
    m.reset()
    assert not m.state.started and not m.state.is_active
    assert m.state.turn_count == 1


def test_win_never_lowers_level():
    m = start(player=make_ghost("p1", "spiritpuff", speed=100, exp=0),
              enemy=make_ghost("e1", "fireling", hp=1))
    m.execute_player_action(AttackAction(0), NORMAL, FIRE, NO_CRIT)
    summary = m.end_battle()
    assert summary.player_ghost.level == 10
    assert summary.player_ghost.experience == 100
    assert summary.experience.result.levels_gained == 0
    assert summary.level_up is None


def test_failed_turn_rolls_back_state():
    calls = []

    def flaky_selector(moves, roll):
        calls.append(roll)
        if len(calls) == 1:
            raise RuntimeError("selector unavailable")
        return 0

    m = start(select_opponent_move=flaky_selector)
    with pytest.raises(RuntimeError):
        m.execute_player_action(AttackAction(0), NORMAL, FIRE, NO_CRIT)
    st = m.state
    assert st.phase == BattlePhase.COMMAND_SELECT
    assert st.turn_count == 1
    assert st.enemy_ghost.current_hp == 30
    assert st.player_ghost.ghost.moves[0].current_pp == 35
    assert st.messages == ["A wild Fireling appeared!"]

    res = m.execute_player_action(AttackAction(0), NORMAL, FIRE, NO_CRIT)
    assert st.turn_count == 2
    assert m.state.enemy_ghost.current_hp == 21
    assert m.state.player_ghost.current_hp == 24
    assert len(res.messages) == 2


def test_failed_escape_restores_attempt_counter():
    def broken_selector(moves, roll):
        raise RuntimeError("boom")

    m = start(player=make_ghost("p1", "spiritpuff", speed=50), select_opponent_move=broken_selector)
    m.set_phase(BattlePhase.ITEM_SELECT)
    with pytest.raises(RuntimeError):
        m.execute_player_action(EscapeAction(), NORMAL, FIRE, RandomValues(escape=0.99))
    assert m.state.escape_attempts == 0
    assert m.state.phase == BattlePhase.ITEM_SELECT


def test_zero_stat_change_is_silent():
    m = start()
    before = list(m.state.messages)
    assert m.apply_stat_change("player", "attack", 0) == 0
    assert m.state.messages == before
    assert m.state.player_ghost.stat_modifiers.attack == 0
