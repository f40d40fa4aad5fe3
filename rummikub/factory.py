"""One constructor per move kind.

Every constructor takes the prior state and the acting player, validates its
preconditions and returns the canonical operation list. The first violated
precondition raises :class:`MoveError`; nothing is ever half built, and the
prior state is never modified.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Union

from .board import EMPTY, Delta, Position, Trace, check_within_board, copy_board, hand_tiles, initial_board
from .errors import FailureKind, MoveError, check
from .hand import SortType, sort_hand, sort_hand_by_sets
from .melds import check_board_meld, tiles_sent_this_turn
from .move import (
    KEY_BOARD,
    KEY_DELTAS,
    KEY_SORT_TYPE,
    KEY_TRACE,
    KEY_TYPE,
    EndMatch,
    Move,
    MoveKind,
    Operation,
    SetTurn,
    SetValue,
    SetVisibility,
    Shuffle,
)
from .rules import Ruleset
from .state import GameState
from .tiles import TILE_COUNT, tile_attributes, tile_key
from .turns import compute_end_scores, is_game_over, next_player


def _check_playing(player: int, state: GameState) -> None:
    check(state.is_dealt(), FailureKind.ILLEGAL_TURN, "tiles have not been dealt yet")
    check(not is_game_over(state), FailureKind.GAME_ALREADY_OVER, "game is over, no more moves")
    check(
        0 <= player < state.trace.player_count,
        FailureKind.ILLEGAL_TURN,
        f"player {player} is not in a {state.trace.player_count} player game",
    )


def _was_placed_by(tile: int, player_row: int, deltas: Sequence[Delta]) -> bool:
    return any(delta.tile_id == tile and delta.from_pos.row == player_row for delta in deltas)


def _check_rows_owned(ruleset: Ruleset, player_row: int, delta: Delta) -> None:
    check(
        ruleset.is_table_row(delta.from_pos.row) or delta.from_pos.row == player_row,
        FailureKind.ILLEGAL_OWNERSHIP,
        "cannot move tiles from another player's hand",
    )
    check(
        ruleset.is_table_row(delta.to_pos.row) or delta.to_pos.row == player_row,
        FailureKind.ILLEGAL_OWNERSHIP,
        "cannot move tiles to another player's hand",
    )


def _check_tile_owned(
    state: GameState, player: int, player_row: int, delta: Delta, deltas: Sequence[Delta]
) -> None:
    # deltas is the turn log so far, including earlier deltas of the same batch
    tile, src, dst = delta.tile_id, delta.from_pos, delta.to_pos
    placed_by_player = _was_placed_by(tile, player_row, deltas)
    if not state.trace.initial_meld_done[player]:
        check(
            src.row == player_row or placed_by_player,
            FailureKind.ILLEGAL_OWNERSHIP,
            "cannot move tiles on the table before the initial meld",
        )
    if dst.row == player_row:
        check(
            src.row == player_row or placed_by_player,
            FailureKind.ILLEGAL_OWNERSHIP,
            f"tile{tile} was not sent to the table by you this turn",
        )


def _check_cells(board, delta: Delta) -> None:
    src, dst = delta.from_pos, delta.to_pos
    check_within_board(board, src)
    check(
        delta.tile_id != EMPTY and board[src.row][src.col] == delta.tile_id,
        FailureKind.OCCUPIED_OR_EMPTY_MISMATCH,
        f"tile{delta.tile_id} is not at board[{src.row}][{src.col}]",
    )
    check_within_board(board, dst)
    check(
        board[dst.row][dst.col] == EMPTY,
        FailureKind.OCCUPIED_OR_EMPTY_MISMATCH,
        f"board[{dst.row}][{dst.col}] is occupied by tile{board[dst.row][dst.col]}",
    )


def create_initial_move(player_count: int, ruleset: Ruleset | None = None, player: int = 0) -> Move:
    ruleset = ruleset or Ruleset()
    check(player == 0, FailureKind.ILLEGAL_TURN, "only player 0 deals")
    check(
        ruleset.min_players <= player_count <= ruleset.max_players,
        FailureKind.ILLEGAL_PLAYER_COUNT,
        f"{player_count} players given, {ruleset.min_players}-{ruleset.max_players} allowed",
    )
    dealt = ruleset.dealt_tiles(player_count)
    ops: List[Operation] = [
        SetTurn(0),
        SetValue(KEY_TYPE, MoveKind.INIT),
        SetValue(KEY_TRACE, Trace(player_count, [False] * player_count, dealt)),
        SetValue(KEY_BOARD, initial_board(player_count, ruleset)),
        SetValue(KEY_DELTAS, []),
    ]
    ops.extend(SetValue(tile_key(tile), tile_attributes(tile)) for tile in range(TILE_COUNT))
    ops.append(Shuffle(tuple(tile_key(tile) for tile in range(TILE_COUNT))))
    ops.extend(SetVisibility(tile_key(tile), (tile // ruleset.initial_hand_size,)) for tile in range(dealt))
    return Move.of(ops)


def create_move_move(player: int, state: GameState, delta: Delta, undo: bool = False) -> Move:
    """Relocate a single tile (send, retrieve or replace).

    With ``undo`` the delta log is popped instead of appended and the move is
    tagged UNDO.
    """
    _check_playing(player, state)
    ruleset = state.ruleset
    player_row = ruleset.player_row(player)
    tile, src, dst = delta.tile_id, delta.from_pos, delta.to_pos

    _check_cells(state.board, delta)
    _check_rows_owned(ruleset, player_row, delta)
    _check_tile_owned(state, player, player_row, delta, state.deltas)

    visibility: Optional[SetVisibility] = None
    if dst.row == player_row:
        if src.row != player_row:
            visibility = SetVisibility(tile_key(tile), (player,))
    elif src.row == player_row:
        visibility = SetVisibility(tile_key(tile), None)

    board_after = copy_board(state.board)
    board_after[src.row][src.col] = EMPTY
    board_after[dst.row][dst.col] = tile

    deltas_after = list(state.deltas)
    if undo:
        check(bool(deltas_after), FailureKind.NOTHING_TO_UNDO, "nothing to undo this turn")
        deltas_after.pop()
    else:
        deltas_after.append(delta)

    ops: List[Operation] = [
        SetTurn(player),
        SetValue(KEY_TYPE, MoveKind.UNDO if undo else MoveKind.MOVE),
        SetValue(KEY_BOARD, board_after),
        SetValue(KEY_DELTAS, deltas_after),
    ]
    if visibility is not None:
        ops.append(visibility)
    return Move.of(ops)


def create_pick_move(player: int, state: GameState) -> Move:
    _check_playing(player, state)
    ruleset = state.ruleset
    player_row = ruleset.player_row(player)

    check(
        not tiles_sent_this_turn(state.deltas, player_row),
        FailureKind.TILES_ALREADY_SENT,
        "cannot draw after sending tiles to the table",
    )
    # rearranging is fine, leaving a broken table behind is not
    check_board_meld(state, state.board, player, True)

    tile = state.trace.next_tile_to_draw
    check(tile < TILE_COUNT, FailureKind.NO_TILES_LEFT, "no tiles left to draw")

    board_after = copy_board(state.board)
    board_after[player_row] = sort_hand_by_sets(hand_tiles(board_after[player_row]) + [tile], state.tiles)

    trace_after = state.trace.copy()
    trace_after.next_tile_to_draw = tile + 1

    first: Operation
    if trace_after.next_tile_to_draw >= TILE_COUNT:
        first = EndMatch(tuple(compute_end_scores(None, state)))
    else:
        first = SetTurn(next_player(player, state.trace.player_count))
    return Move.of(
        [
            first,
            SetValue(KEY_TYPE, MoveKind.PICK),
            SetValue(KEY_BOARD, board_after),
            SetValue(KEY_DELTAS, []),
            SetValue(KEY_TRACE, trace_after),
            SetVisibility(tile_key(tile), (player,)),
        ]
    )


def create_meld_move(player: int, state: GameState) -> Move:
    _check_playing(player, state)
    player_row = state.ruleset.player_row(player)

    check(
        bool(tiles_sent_this_turn(state.deltas, player_row)),
        FailureKind.NO_TILES_SENT,
        "no tiles were sent to the table this turn",
    )
    check_board_meld(state, state.board, player, state.trace.initial_meld_done[player])

    board_after = copy_board(state.board)
    board_after[player_row] = hand_tiles(board_after[player_row])

    first: Operation
    if not board_after[player_row]:
        first = EndMatch(tuple(compute_end_scores(player, state)))
    else:
        first = SetTurn(next_player(player, state.trace.player_count))

    trace_after = state.trace.copy()
    trace_after.initial_meld_done[player] = True
    return Move.of(
        [
            first,
            SetValue(KEY_TYPE, MoveKind.MELD),
            SetValue(KEY_BOARD, board_after),
            SetValue(KEY_DELTAS, []),
            SetValue(KEY_TRACE, trace_after),
        ]
    )


def create_sort_move(player: int, state: GameState, sort_type: Union[SortType, str]) -> Move:
    _check_playing(player, state)
    try:
        sort_type = SortType(sort_type)
    except ValueError:
        raise MoveError(FailureKind.UNEXPECTED_SORT_TYPE, f"unexpected sort type: {sort_type!r}") from None
    player_row = state.ruleset.player_row(player)
    board_after = copy_board(state.board)
    board_after[player_row] = sort_hand(board_after[player_row], sort_type, state.tiles)
    return Move.of(
        [
            SetTurn(player),
            SetValue(KEY_TYPE, MoveKind.SORT),
            SetValue(KEY_SORT_TYPE, sort_type),
            SetValue(KEY_BOARD, board_after),
        ]
    )


def create_undo_move(player: int, state: GameState) -> Move:
    _check_playing(player, state)
    check(bool(state.deltas), FailureKind.NOTHING_TO_UNDO, "nothing to undo this turn")
    return create_move_move(player, state, state.deltas[-1].inverse(), undo=True)


def create_combined_move(player: int, state: GameState, deltas: Sequence[Delta]) -> Move:
    """Apply a batch of relocations as one move and record it as the turn."""
    _check_playing(player, state)
    check(bool(deltas), FailureKind.EMPTY_BATCH, "no move to make")
    ruleset = state.ruleset
    player_row = ruleset.player_row(player)

    board = copy_board(state.board)
    seen = list(state.deltas)
    for delta in deltas:
        _check_cells(board, delta)
        _check_rows_owned(ruleset, player_row, delta)
        _check_tile_owned(state, player, player_row, delta, seen)
        seen.append(delta)
        board[delta.from_pos.row][delta.from_pos.col] = EMPTY
        board[delta.to_pos.row][delta.to_pos.col] = delta.tile_id

    if not state.trace.initial_meld_done[player]:
        check_board_meld(state, board, player, False, deltas=deltas)

    trace_after = state.trace.copy()
    trace_after.initial_meld_done[player] = True
    return Move.of(
        [
            SetTurn(player),
            SetValue(KEY_TYPE, MoveKind.COMB),
            SetValue(KEY_BOARD, board),
            SetValue(KEY_DELTAS, list(deltas)),
            SetValue(KEY_TRACE, trace_after),
        ]
    )


def hand_delta(player: int, state: GameState, tile: int, to_pos: Position) -> Delta:
    """Delta sending ``tile`` from wherever it sits in the player's hand."""
    player_row = state.ruleset.player_row(player)
    hand = state.board[player_row]
    check(tile in hand, FailureKind.OCCUPIED_OR_EMPTY_MISMATCH, f"tile{tile} is not in player {player}'s hand")
    return Delta(tile, Position(player_row, hand.index(tile)), to_pos)
