import logging
import pathlib
import random
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rummikub.board import Delta, Position
from rummikub.engine import apply_move, is_move_ok, new_game, replay_moves, try_create_move
from rummikub.errors import FailureKind, MoveError
from rummikub.factory import (
    create_combined_move,
    create_initial_move,
    create_meld_move,
    create_move_move,
    create_pick_move,
    create_sort_move,
    create_undo_move,
    hand_delta,
)
from rummikub.move import Move, MoveKind, SetValue
from rummikub.state import GameState
from rummikub.tiles import initial_tiles


def _dealt():
    return GameState.from_hands([[9, 10, 11, 50, 0], [13, 14, 15]])


def _send(state, player, tile, row, col):
    move = create_move_move(player, state, hand_delta(player, state, tile, Position(row, col)))
    return apply_move(state, move)


def test_initial_move_is_accepted_before_the_deal():
    move = create_initial_move(3)
    assert is_move_ok(0, None, move)
    assert is_move_ok(0, GameState.empty(), move.to_wire())
    assert not is_move_ok(1, None, move)


def test_initial_move_is_rejected_once_dealt():
    assert not is_move_ok(0, _dealt(), create_initial_move(2))


def test_every_authored_move_validates():
    state = _dealt()
    assert is_move_ok(0, state, create_pick_move(0, state))
    assert is_move_ok(0, state, create_sort_move(0, state, "color"))

    move = create_move_move(0, state, hand_delta(0, state, 9, Position(0, 0)))
    assert is_move_ok(0, state, move)
    sent = apply_move(state, move)
    assert is_move_ok(0, sent, create_undo_move(0, sent))

    sent = _send(_send(sent, 0, 10, 0, 1), 0, 11, 0, 2)
    assert is_move_ok(0, sent, create_meld_move(0, sent))

    batch = [hand_delta(0, state, tile, Position(2, col)) for col, tile in enumerate([9, 10, 11])]
    assert is_move_ok(0, state, create_combined_move(0, state, batch))


def test_moves_survive_the_wire():
    state = _dealt()
    batch = [hand_delta(0, state, tile, Position(2, col)) for col, tile in enumerate([9, 10, 11])]
    for move in (create_pick_move(0, state), create_combined_move(0, state, batch), create_initial_move(2)):
        assert Move.from_wire(move.to_wire()) == move

    assert is_move_ok(0, state, create_sort_move(0, state, "set").to_wire())


def test_move_by_the_wrong_player_is_rejected():
    state = _dealt()
    state.turn_index = 1
    legit = create_move_move(1, state, Delta(13, Position(7, 0), Position(0, 0)))
    assert is_move_ok(1, state, legit)
    assert not is_move_ok(0, state, legit)


def test_tampered_move_is_rejected_and_logged(caplog):
    state = _dealt()
    honest = create_pick_move(0, state)
    board = [list(row) for row in honest.board]
    board[6].append(105)
    forged = Move.of([SetValue("board", board) if getattr(op, "key", None) == "board" else op for op in honest])

    caplog.set_level(logging.DEBUG, logger="rummikub.engine")
    assert not is_move_ok(0, state, forged)
    assert any(record.getMessage().startswith("exp:") for record in caplog.records)


def test_extra_or_missing_operations_are_rejected():
    state = _dealt()
    honest = create_pick_move(0, state)
    assert not is_move_ok(0, state, Move.of(honest.operations[:-1]))
    assert not is_move_ok(0, state, Move.of(honest.operations + (SetValue("type", MoveKind.PICK),)))


@pytest.mark.parametrize(
    "payload",
    [
        "PICK",
        [{"bogus": {}}],
        [{"set": {"key": "type", "value": "FLY"}}],
        [{"set": {"key": "type", "value": "MOVE"}}, {"set": {"key": "deltas", "value": [{"tileIndex": 1}]}}],
        [{"set": {"key": "type", "value": "SORT"}}, {"set": {"key": "sorttype", "value": "size"}}],
        [{"set": {"key": "type", "value": "MOVE"}}],
        [],
        Move.of([SetValue("type", MoveKind.MOVE), SetValue("deltas", ["junk"])]),
    ],
)
def test_garbage_is_rejected_without_raising(payload):
    assert not is_move_ok(0, _dealt(), payload)


def test_try_create_move_reports_the_failure():
    result = try_create_move(_dealt(), 0, Move.of([SetValue("type", MoveKind.MELD)]))
    assert not result.ok
    assert result.error.kind == FailureKind.NO_TILES_SENT

    result = try_create_move(_dealt(), 0, Move.of([SetValue("type", MoveKind.PICK)]))
    assert result.ok
    assert result.move.kind == MoveKind.PICK


def test_new_game_shuffles_tile_attributes():
    state = new_game(2, rng_seed=7)

    key = lambda info: (info.color, info.score)
    assert sorted(state.tiles, key=key) == sorted(initial_tiles(), key=key)
    assert state.tiles != initial_tiles()
    assert new_game(2, rng_seed=7).tiles == state.tiles
    assert state.visibility[0] == (0,)
    assert state.visibility[27] == (1,)
    assert state.kind == MoveKind.INIT


def test_shuffled_game_still_validates():
    state = new_game(4, rng_seed=11)
    assert len(state.board) == 10
    move = create_pick_move(0, state)
    assert is_move_ok(0, state, move)
    assert apply_move(state, move).turn_index == 1


def test_replay_matches_step_by_step_application():
    init = create_initial_move(2)
    dealt = apply_move(None, init)
    pick = create_pick_move(0, dealt)
    sort = create_sort_move(1, apply_move(dealt, pick), "score")

    replayed = replay_moves([init, pick, sort])
    stepped = apply_move(apply_move(dealt, pick), sort)
    assert replayed.state_key() == stepped.state_key()
    assert not replay_moves([]).is_dealt()


def test_apply_move_leaves_prior_state_alone():
    state = _dealt()
    before = state.stable_hash()
    apply_move(state, create_pick_move(0, state), rng=random.Random(1))
    assert state.stable_hash() == before


def test_apply_move_rejects_unknown_keys():
    with pytest.raises(MoveError) as exc:
        apply_move(_dealt(), Move.of([SetValue("color", "red")]))
    assert exc.value.kind == FailureKind.MALFORMED_MOVE


def test_state_wire_round_trip():
    state = new_game(3, rng_seed=5)
    state = _send(state, 0, state.hand(0)[0], 0, 0)
    restored = GameState.from_wire(state.to_wire())
    assert restored.state_key() == state.state_key()
    assert not GameState.from_wire({}).is_dealt()


def test_validator_accepts_the_wire_form_of_the_state():
    state = _dealt()
    assert is_move_ok(0, state.to_wire(), create_pick_move(0, state).to_wire())
    assert not is_move_ok(1, state.to_wire(), create_pick_move(0, state).to_wire())


@pytest.mark.parametrize("state", [42, [], {"board": "x"}, {"board": [[0]], "trace": None}, {"board": [[0]], "deltas": {}}])
def test_malformed_state_is_rejected_without_raising(state):
    assert not is_move_ok(0, state, create_initial_move(2))
    assert not is_move_ok(0, state, [{"set": {"key": "type", "value": "PICK"}}])
