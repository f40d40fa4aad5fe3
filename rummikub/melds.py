from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Iterator, List, Optional, Sequence

from .board import EMPTY, Board, Delta
from .errors import FailureKind, MoveError, check
from .tiles import TileInfo

if TYPE_CHECKING:
    from .state import GameState


class SetKind(str, Enum):
    RUN = "RUN"
    GROUP = "GROUP"
    INVALID = "INVALID"


def split_row_into_candidate_sets(row: Sequence[int]) -> Iterator[List[int]]:
    """Yield each maximal stretch of occupied cells in a table row.

    ``[1, 2, 3, -1, -1, 4, 8, 9, -1]`` yields ``[1, 2, 3]`` then ``[4, 8, 9]``.
    """
    current: List[int] = []
    for tile in row:
        if tile == EMPTY:
            if current:
                yield current
                current = []
        else:
            current.append(tile)
    if current:
        yield current


def is_valid_run(tiles: Sequence[TileInfo], require_anchor: bool = False) -> bool:
    if not 3 <= len(tiles) <= 13:
        return False
    color = None
    expected = 0
    for tile in tiles:
        if not tile.is_joker():
            if color is None:
                color = tile.color
            if tile.color != color:
                return False
            if expected == 0:
                expected = tile.score
            if tile.score != expected:
                return False
        # jokers before the first anchor do not advance anything
        if expected != 0:
            expected += 1
    if require_anchor and color is None:
        return False
    return True


def is_valid_group(tiles: Sequence[TileInfo]) -> bool:
    if len(tiles) not in (3, 4):
        return False
    score = None
    colors: List[str] = []
    for tile in tiles:
        if tile.is_joker():
            continue
        if score is None:
            score = tile.score
        if tile.score != score or tile.color in colors:
            return False
        colors.append(tile.color)
    return True


def classify_set(tiles: Sequence[TileInfo], require_anchor: bool = False) -> SetKind:
    if is_valid_run(tiles, require_anchor):
        return SetKind.RUN
    if is_valid_group(tiles):
        return SetKind.GROUP
    return SetKind.INVALID


def table_sets(board: Board, table_rows: int) -> List[List[int]]:
    sets: List[List[int]] = []
    for row in board[:table_rows]:
        sets.extend(split_row_into_candidate_sets(row))
    return sets


def tiles_sent_this_turn(deltas: Sequence[Delta], player_row: int) -> List[int]:
    """Tiles currently on the table that came from ``player_row`` this turn."""
    sent: List[int] = []
    for delta in deltas:
        if delta.from_pos.row == player_row and delta.to_pos.row != player_row:
            sent.append(delta.tile_id)
        elif delta.from_pos.row != player_row and delta.to_pos.row == player_row:
            if delta.tile_id in sent:
                sent.remove(delta.tile_id)
    return sent


def initial_meld_score(sets: Sequence[Sequence[int]], tiles: Sequence[TileInfo], sent: Sequence[int]) -> int:
    # only sets made entirely of tiles sent this turn count, jokers score 0
    score = 0
    for tile_set in sets:
        if all(tile in sent for tile in tile_set):
            score += sum(tiles[tile].score for tile in tile_set)
    return score


def check_board_meld(
    state: "GameState",
    board: Board,
    player: int,
    initial_meld_done: bool,
    deltas: Optional[Sequence[Delta]] = None,
) -> None:
    ruleset = state.ruleset
    sets = table_sets(board, ruleset.table_rows)
    for tile_set in sets:
        check(0 <= min(tile_set) and max(tile_set) < len(state.tiles), FailureKind.ILLEGAL_TILE_INDEX, f"bad tile in {tile_set}")
        kind = classify_set([state.tiles[tile] for tile in tile_set], ruleset.run_requires_anchor)
        check(kind != SetKind.INVALID, FailureKind.MELD_INVALID, f"tiles {tile_set} are neither a run nor a group")
    if not initial_meld_done:
        sent = tiles_sent_this_turn(state.deltas if deltas is None else deltas, ruleset.player_row(player))
        score = initial_meld_score(sets, state.tiles, sent)
        check(
            score >= ruleset.initial_meld_min_points,
            FailureKind.INITIAL_MELD_TOO_LOW,
            f"initial meld scores {score}, at least {ruleset.initial_meld_min_points} needed",
        )


def is_board_meld_valid(state: "GameState", board: Board, player: int, initial_meld_done: bool) -> bool:
    try:
        check_board_meld(state, board, player, initial_meld_done)
    except MoveError:
        return False
    return True
