from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .board import EMPTY, Board, Delta, Position, copy_board
from .errors import MoveError
from .factory import create_combined_move, create_pick_move, hand_delta
from .hand import find_maximal_sets
from .melds import initial_meld_score
from .move import Move
from .state import GameState

logger = logging.getLogger(__name__)


def find_empty_slot(board: Board, length: int, table_rows: int) -> Optional[Position]:
    """First table position that can host ``length`` tiles as a separate set.

    The cells right before and after the slot must be empty (or the row
    edge) so the placed tiles never merge with a neighbouring set.
    """
    for row_index in range(table_rows):
        row = board[row_index]
        for col in range(len(row) - length + 1):
            if any(row[col + i] != EMPTY for i in range(length)):
                continue
            if col > 0 and row[col - 1] != EMPTY:
                continue
            if col + length < len(row) and row[col + length] != EMPTY:
                continue
            return Position(row_index, col)
    return None


def _placement_deltas(state: GameState, player: int, sets: Sequence[Sequence[int]]) -> Optional[List[Delta]]:
    board = copy_board(state.board)
    deltas: List[Delta] = []
    for tile_set in sets:
        slot = find_empty_slot(board, len(tile_set), state.ruleset.table_rows)
        if slot is None:
            return None
        for offset, tile in enumerate(tile_set):
            target = Position(slot.row, slot.col + offset)
            deltas.append(hand_delta(player, state, tile, target))
            board[target.row][target.col] = tile
    return deltas


def generate_candidate_moves(state: GameState, player: Optional[int] = None) -> List[Move]:
    """A small list of legal moves for a computer player.

    Drawing is always offered first; a single batched placement of every set
    found in hand follows when the whole batch fits on the table.
    """
    player = state.turn_index if player is None else player
    candidates: List[Move] = []

    try:
        candidates.append(create_pick_move(player, state))
    except MoveError as exc:
        logger.debug("draw not available for player %d: %s", player, exc)

    hand = [tile for tile in state.hand(player) if tile != EMPTY]
    sets = find_maximal_sets(hand, state.tiles).sets
    if not sets:
        return candidates
    if not state.trace.initial_meld_done[player]:
        score = initial_meld_score(sets, state.tiles, hand)
        if score < state.ruleset.initial_meld_min_points:
            return candidates

    deltas = _placement_deltas(state, player, sets)
    if deltas is None:
        logger.debug("no room on the table for %d sets", len(sets))
        return candidates
    try:
        candidates.append(create_combined_move(player, state, deltas))
    except MoveError as exc:
        logger.debug("batched placement rejected for player %d: %s", player, exc)
    return candidates
