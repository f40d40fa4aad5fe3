from __future__ import annotations

import logging
import random
from typing import Any, Iterable, Optional, Union

from .errors import FailureKind, MoveError, MoveResult, check
from .factory import (
    create_combined_move,
    create_initial_move,
    create_meld_move,
    create_move_move,
    create_pick_move,
    create_sort_move,
    create_undo_move,
)
from .move import (
    KEY_BOARD,
    KEY_DELTAS,
    KEY_SORT_TYPE,
    KEY_TRACE,
    KEY_TYPE,
    EndMatch,
    Move,
    MoveKind,
    SetTurn,
    SetValue,
    SetVisibility,
    Shuffle,
    operation_to_wire,
)
from .rules import Ruleset
from .state import GameState
from .tiles import is_tile_key, parse_tile_key

logger = logging.getLogger(__name__)


def create_expected_move(
    state: Optional[GameState], player: int, claimed: Move, ruleset: Ruleset | None = None
) -> Move:
    """Rebuild the canonical move for the intent declared in ``claimed``.

    Only the intent is read from the claimed move (its kind, last delta,
    batch, sort type or player count); everything else is recomputed.
    """
    kind = claimed.kind
    check(isinstance(kind, MoveKind), FailureKind.UNEXPECTED_MOVE_KIND, f"unexpected move type: {kind!r}")

    if kind == MoveKind.INIT:
        check(state is None or not state.is_dealt(), FailureKind.ILLEGAL_TURN, "tiles were already dealt")
        trace = claimed.trace
        check(trace is not None, FailureKind.MALFORMED_MOVE, "INIT without a trace")
        return create_initial_move(trace.player_count, state.ruleset if state else ruleset, player)

    check(state is not None, FailureKind.ILLEGAL_TURN, "tiles have not been dealt yet")
    if kind == MoveKind.MOVE:
        deltas = claimed.deltas
        check(bool(deltas), FailureKind.MALFORMED_MOVE, "MOVE without a delta")
        return create_move_move(player, state, deltas[-1])
    if kind == MoveKind.PICK:
        return create_pick_move(player, state)
    if kind == MoveKind.MELD:
        return create_meld_move(player, state)
    if kind == MoveKind.SORT:
        sort_type = claimed.sort_type
        check(sort_type is not None, FailureKind.UNEXPECTED_SORT_TYPE, "SORT without a sort type")
        return create_sort_move(player, state, sort_type)
    if kind == MoveKind.UNDO:
        return create_undo_move(player, state)
    if kind == MoveKind.COMB:
        return create_combined_move(player, state, claimed.deltas or [])
    raise MoveError(FailureKind.UNEXPECTED_MOVE_KIND, f"unexpected move type: {kind!r}")


def try_create_move(
    state: Optional[GameState], player: int, claimed: Union[Move, Any], ruleset: Ruleset | None = None
) -> MoveResult:
    try:
        if not isinstance(claimed, Move):
            claimed = Move.from_wire(claimed)
        return MoveResult.success(create_expected_move(state, player, claimed, ruleset))
    except MoveError as exc:
        return MoveResult.failure(exc)


def _log_mismatch(claimed: Move, expected: Move) -> None:
    if not logger.isEnabledFor(logging.DEBUG):
        return
    if len(claimed) != len(expected):
        logger.debug("claimed move has %d operations, expected %d", len(claimed), len(expected))
        return
    for actual_op, expected_op in zip(claimed, expected):
        if actual_op != expected_op:
            logger.debug("act: %s", operation_to_wire(actual_op))
            logger.debug("exp: %s", operation_to_wire(expected_op))


def is_move_ok(
    turn_index_before_move: int,
    state_before_move: Union[GameState, Any, None],
    move: Union[Move, Any],
    ruleset: Ruleset | None = None,
) -> bool:
    """Recompute the move from the prior state and compare it exactly.

    Both the state and the move may be given in their wire form. Never
    raises: any precondition failure is a rejected move.
    """
    try:
        claimed = move if isinstance(move, Move) else Move.from_wire(move)
        if state_before_move is not None and not isinstance(state_before_move, GameState):
            state_before_move = GameState.from_wire(state_before_move, ruleset)
    except MoveError as exc:
        logger.debug("rejected malformed move or state: %s", exc)
        return False

    try:
        result = try_create_move(state_before_move, turn_index_before_move, claimed, ruleset)
    except (AttributeError, IndexError, KeyError, TypeError, ValueError) as exc:
        logger.debug("rejected move against a malformed state: %r", exc)
        return False
    if result.error is not None:
        logger.debug("rejected %s by player %s: %s", claimed.kind, turn_index_before_move, result.error)
        return False
    if result.move != claimed:
        _log_mismatch(claimed, result.move)
        return False
    return True


def apply_move(
    state: Optional[GameState],
    move: Move,
    rng: random.Random | None = None,
    ruleset: Ruleset | None = None,
) -> GameState:
    """Fold an accepted move onto a copy of the state.

    This is the transport's side of the protocol, kept here for replays,
    simulations and tests. ``Shuffle`` permutes the values held under the
    named keys with ``rng``; without one the keys keep their values.
    """
    new_state = state.copy() if state is not None else GameState.empty(ruleset)
    for op in move:
        if isinstance(op, SetTurn):
            new_state.turn_index = op.turn_index
        elif isinstance(op, EndMatch):
            new_state.end_scores = list(op.end_match_scores)
        elif isinstance(op, SetValue):
            _apply_set(new_state, op)
        elif isinstance(op, SetVisibility):
            new_state.visibility[parse_tile_key(op.key)] = op.visible_to_player_indices
        elif isinstance(op, Shuffle):
            if rng is not None:
                tile_ids = [parse_tile_key(key) for key in op.keys]
                values = [new_state.tiles[tile] for tile in tile_ids]
                rng.shuffle(values)
                for tile, value in zip(tile_ids, values):
                    new_state.tiles[tile] = value
    return new_state


def _apply_set(state: GameState, op: SetValue) -> None:
    if op.key == KEY_TYPE:
        state.kind = op.value
    elif op.key == KEY_BOARD:
        state.board = [list(row) for row in op.value]
    elif op.key == KEY_DELTAS:
        state.deltas = list(op.value)
    elif op.key == KEY_TRACE:
        state.trace = op.value.copy()
    elif op.key == KEY_SORT_TYPE:
        state.sort_type = op.value
    elif is_tile_key(op.key):
        state.tiles[parse_tile_key(op.key)] = op.value
    else:
        raise MoveError(FailureKind.MALFORMED_MOVE, f"unknown state key: {op.key!r}")


def replay_moves(
    moves: Iterable[Move], ruleset: Ruleset | None = None, rng: random.Random | None = None
) -> GameState:
    state: Optional[GameState] = None
    for move in moves:
        state = apply_move(state, move, rng=rng, ruleset=ruleset)
    if state is None:
        return GameState.empty(ruleset)
    return state


def new_game(player_count: int = 2, ruleset: Ruleset | None = None, rng_seed: Optional[int] = None) -> GameState:
    """Deal a game: the INIT move folded with a seeded shuffle."""
    move = create_initial_move(player_count, ruleset)
    return apply_move(None, move, rng=random.Random(rng_seed), ruleset=ruleset)
