from __future__ import annotations

import copy
import hashlib
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .board import EMPTY, Board, Delta, Trace, board_from_wire
from .errors import FailureKind, MoveError, check
from .hand import SortType
from .move import KEY_BOARD, KEY_DELTAS, KEY_SORT_TYPE, KEY_TRACE, KEY_TYPE, MoveKind
from .rules import Ruleset
from .tiles import TileInfo, initial_tiles, is_tile_key, parse_tile_key, tile_key

Visibility = Optional[Tuple[int, ...]]


@dataclass
class GameState:
    """Everything the engine reads to author or check a move.

    ``tiles`` is indexed by tile id; after the deal shuffle it no longer
    matches the catalog, so it is the only source of tile attributes.
    ``visibility`` is owned by the transport and only mirrored here.
    """

    ruleset: Ruleset
    board: Board
    deltas: List[Delta]
    trace: Trace
    tiles: List[TileInfo] = field(default_factory=initial_tiles)
    visibility: Dict[int, Visibility] = field(default_factory=dict)
    turn_index: int = 0
    end_scores: Optional[List[int]] = None
    kind: Optional[MoveKind] = None
    sort_type: Optional[SortType] = None

    @classmethod
    def empty(cls, ruleset: Ruleset | None = None) -> "GameState":
        return cls(ruleset=ruleset or Ruleset(), board=[], deltas=[], trace=Trace(0))

    @classmethod
    def from_hands(
        cls,
        hands: Sequence[Sequence[int]],
        ruleset: Ruleset | None = None,
        initial_meld_done: Optional[Sequence[bool]] = None,
        next_tile_to_draw: Optional[int] = None,
    ) -> "GameState":
        """An empty table with the given hands and unshuffled tiles.

        Handy for tools and tests that need a specific position rather
        than a dealt one.
        """
        ruleset = ruleset or Ruleset()
        board: Board = [[EMPTY] * ruleset.table_cols for _ in range(ruleset.table_rows)]
        board.extend(list(hand) for hand in hands)
        player_count = len(hands)
        trace = Trace(
            player_count,
            list(initial_meld_done) if initial_meld_done is not None else [False] * player_count,
            ruleset.dealt_tiles(player_count) if next_tile_to_draw is None else next_tile_to_draw,
        )
        return cls(ruleset=ruleset, board=board, deltas=[], trace=trace)

    def is_dealt(self) -> bool:
        return bool(self.board)

    def player_row(self, player: int) -> int:
        return self.ruleset.player_row(player)

    def hand(self, player: int) -> List[int]:
        return self.board[self.player_row(player)]

    def copy(self) -> "GameState":
        return GameState(
            ruleset=self.ruleset,
            board=copy.deepcopy(self.board),
            deltas=list(self.deltas),
            trace=self.trace.copy(),
            tiles=list(self.tiles),
            visibility=dict(self.visibility),
            turn_index=self.turn_index,
            end_scores=None if self.end_scores is None else list(self.end_scores),
            kind=self.kind,
            sort_type=self.sort_type,
        )

    def state_key(self) -> Tuple:
        return (
            self.turn_index,
            tuple(tuple(row) for row in self.board),
            tuple(self.deltas),
            (self.trace.player_count, tuple(self.trace.initial_meld_done), self.trace.next_tile_to_draw),
            tuple(self.tiles),
            None if self.end_scores is None else tuple(self.end_scores),
        )

    def stable_hash(self) -> str:
        return hashlib.sha256(repr(self.state_key()).encode("utf-8")).hexdigest()

    def to_wire(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            KEY_BOARD: [list(row) for row in self.board],
            KEY_DELTAS: [delta.to_wire() for delta in self.deltas],
            KEY_TRACE: self.trace.to_wire(),
        }
        if self.kind is not None:
            data[KEY_TYPE] = self.kind.value
        if self.sort_type is not None:
            data[KEY_SORT_TYPE] = self.sort_type.value
        for tile_id, info in enumerate(self.tiles):
            data[tile_key(tile_id)] = info.to_wire()
        return data

    @classmethod
    def from_wire(cls, data: Any, ruleset: Ruleset | None = None) -> "GameState":
        """Build a state from the transport's key/value view of it."""
        check(isinstance(data, dict), FailureKind.MALFORMED_MOVE, "state must be a mapping")
        state = cls.empty(ruleset)
        if not data.get(KEY_BOARD):
            return state
        state.board = board_from_wire(data[KEY_BOARD])
        deltas = data.get(KEY_DELTAS, [])
        check(isinstance(deltas, list), FailureKind.MALFORMED_MOVE, "deltas must be a list")
        state.deltas = [Delta.from_wire(item) for item in deltas]
        state.trace = Trace.from_wire(data.get(KEY_TRACE))
        try:
            if data.get(KEY_TYPE) is not None:
                state.kind = MoveKind(data[KEY_TYPE])
            if data.get(KEY_SORT_TYPE) is not None:
                state.sort_type = SortType(data[KEY_SORT_TYPE])
        except ValueError as exc:
            raise MoveError(FailureKind.MALFORMED_MOVE, str(exc)) from exc
        for key, value in data.items():
            if is_tile_key(key):
                state.tiles[parse_tile_key(key)] = TileInfo.from_wire(value)
        return state
