from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .errors import FailureKind, check
from .rules import Ruleset

EMPTY = -1

Board = List[List[int]]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class Position:
    row: int
    col: int

    def to_wire(self) -> Dict[str, int]:
        return {"row": self.row, "col": self.col}

    @classmethod
    def from_wire(cls, data: Any) -> "Position":
        check(
            isinstance(data, dict) and _is_int(data.get("row")) and _is_int(data.get("col")),
            FailureKind.MALFORMED_MOVE,
            f"bad position: {data!r}",
        )
        return cls(data["row"], data["col"])


@dataclass(frozen=True)
class Delta:
    """One tile relocation made during the current turn."""

    tile_id: int
    from_pos: Position
    to_pos: Position

    def inverse(self) -> "Delta":
        return Delta(self.tile_id, self.to_pos, self.from_pos)

    def to_wire(self) -> Dict[str, Any]:
        return {"tileIndex": self.tile_id, "from": self.from_pos.to_wire(), "to": self.to_pos.to_wire()}

    @classmethod
    def from_wire(cls, data: Any) -> "Delta":
        check(
            isinstance(data, dict) and _is_int(data.get("tileIndex")) and "from" in data and "to" in data,
            FailureKind.MALFORMED_MOVE,
            f"missing part for delta: {data!r}",
        )
        return cls(data["tileIndex"], Position.from_wire(data["from"]), Position.from_wire(data["to"]))


@dataclass
class Trace:
    player_count: int
    initial_meld_done: List[bool] = field(default_factory=list)
    next_tile_to_draw: int = 0

    def copy(self) -> "Trace":
        return Trace(self.player_count, list(self.initial_meld_done), self.next_tile_to_draw)

    def to_wire(self) -> Dict[str, Any]:
        return {
            "nplayers": self.player_count,
            "initial": list(self.initial_meld_done),
            "nexttile": self.next_tile_to_draw,
        }

    @classmethod
    def from_wire(cls, data: Any) -> "Trace":
        check(isinstance(data, dict), FailureKind.MALFORMED_MOVE, f"bad trace: {data!r}")
        player_count = data.get("nplayers")
        initial = data.get("initial")
        next_tile = data.get("nexttile")
        check(
            _is_int(player_count)
            and _is_int(next_tile)
            and isinstance(initial, list)
            and all(isinstance(flag, bool) for flag in initial),
            FailureKind.MALFORMED_MOVE,
            f"bad trace: {data!r}",
        )
        return cls(player_count, list(initial), next_tile)


def initial_board(player_count: int, ruleset: Ruleset) -> Board:
    board: Board = [[EMPTY] * ruleset.table_cols for _ in range(ruleset.table_rows)]
    hand_size = ruleset.initial_hand_size
    for player in range(player_count):
        board.append(list(range(player * hand_size, (player + 1) * hand_size)))
    return board


def copy_board(board: Board) -> Board:
    return copy.deepcopy(board)


def check_within_board(board: Board, pos: Position) -> None:
    check(0 <= pos.row < len(board), FailureKind.OUT_OF_BOUNDS, f"row out of board: {pos}")
    check(0 <= pos.col < len(board[pos.row]), FailureKind.OUT_OF_BOUNDS, f"col out of board: {pos}")


def hand_tiles(row: List[int]) -> List[int]:
    return [tile for tile in row if tile != EMPTY]


def board_from_wire(data: Any) -> Board:
    check(
        isinstance(data, list)
        and all(isinstance(row, list) and all(_is_int(cell) for cell in row) for row in data),
        FailureKind.MALFORMED_MOVE,
        "board must be a list of integer rows",
    )
    return [list(row) for row in data]
