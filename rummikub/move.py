from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .board import Board, Delta, Trace, board_from_wire
from .errors import FailureKind, MoveError, check
from .hand import SortType
from .tiles import TileInfo, is_tile_key


class MoveKind(str, Enum):
    INIT = "INIT"
    MOVE = "MOVE"
    PICK = "PICK"
    MELD = "MELD"
    UNDO = "UNDO"
    SORT = "SORT"
    COMB = "COMB"


KEY_TYPE = "type"
KEY_BOARD = "board"
KEY_DELTAS = "deltas"
KEY_TRACE = "trace"
KEY_SORT_TYPE = "sorttype"


@dataclass(frozen=True)
class SetTurn:
    turn_index: int


@dataclass(frozen=True)
class EndMatch:
    end_match_scores: Tuple[int, ...]


@dataclass(frozen=True)
class SetValue:
    key: str
    value: Any


@dataclass(frozen=True)
class SetVisibility:
    key: str
    visible_to_player_indices: Optional[Tuple[int, ...]]


@dataclass(frozen=True)
class Shuffle:
    keys: Tuple[str, ...]


Operation = Union[SetTurn, EndMatch, SetValue, SetVisibility, Shuffle]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _value_to_wire(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (Trace, TileInfo)):
        return value.to_wire()
    if isinstance(value, list) and value and isinstance(value[0], Delta):
        return [delta.to_wire() for delta in value]
    if isinstance(value, list):
        return [list(row) if isinstance(row, list) else row for row in value]
    return value


def _value_from_wire(key: str, value: Any) -> Any:
    if key == KEY_TYPE:
        try:
            return MoveKind(value)
        except ValueError:
            raise MoveError(FailureKind.UNEXPECTED_MOVE_KIND, f"unexpected move type: {value!r}") from None
    if key == KEY_SORT_TYPE:
        try:
            return SortType(value)
        except ValueError:
            raise MoveError(FailureKind.UNEXPECTED_SORT_TYPE, f"unexpected sort type: {value!r}") from None
    if key == KEY_BOARD:
        return board_from_wire(value)
    if key == KEY_DELTAS:
        check(isinstance(value, list), FailureKind.MALFORMED_MOVE, "deltas must be a list")
        return [Delta.from_wire(item) for item in value]
    if key == KEY_TRACE:
        return Trace.from_wire(value)
    if is_tile_key(key):
        return TileInfo.from_wire(value)
    raise MoveError(FailureKind.MALFORMED_MOVE, f"unknown state key: {key!r}")


def operation_to_wire(op: Operation) -> Dict[str, Any]:
    if isinstance(op, SetTurn):
        return {"setTurn": {"turnIndex": op.turn_index}}
    if isinstance(op, EndMatch):
        return {"endMatch": {"endMatchScores": list(op.end_match_scores)}}
    if isinstance(op, SetValue):
        return {"set": {"key": op.key, "value": _value_to_wire(op.value)}}
    if isinstance(op, SetVisibility):
        indices = None if op.visible_to_player_indices is None else list(op.visible_to_player_indices)
        return {"setVisibility": {"key": op.key, "visibleToPlayerIndices": indices}}
    if isinstance(op, Shuffle):
        return {"shuffle": {"keys": list(op.keys)}}
    raise TypeError(f"not an operation: {op!r}")


def operation_from_wire(data: Any) -> Operation:
    check(isinstance(data, dict) and len(data) == 1, FailureKind.MALFORMED_MOVE, f"bad operation: {data!r}")
    tag, body = next(iter(data.items()))
    check(isinstance(body, dict), FailureKind.MALFORMED_MOVE, f"bad operation body: {data!r}")
    if tag == "setTurn":
        check(_is_int(body.get("turnIndex")), FailureKind.MALFORMED_MOVE, f"bad turn index: {body!r}")
        return SetTurn(body["turnIndex"])
    if tag == "endMatch":
        scores = body.get("endMatchScores")
        check(
            isinstance(scores, list) and all(_is_int(score) for score in scores),
            FailureKind.MALFORMED_MOVE,
            f"bad end scores: {body!r}",
        )
        return EndMatch(tuple(scores))
    if tag == "set":
        key = body.get("key")
        check(isinstance(key, str), FailureKind.MALFORMED_MOVE, f"bad key: {body!r}")
        return SetValue(key, _value_from_wire(key, body.get("value")))
    if tag == "setVisibility":
        key = body.get("key")
        indices = body.get("visibleToPlayerIndices")
        check(
            isinstance(key, str)
            and (indices is None or (isinstance(indices, list) and all(_is_int(i) for i in indices))),
            FailureKind.MALFORMED_MOVE,
            f"bad visibility: {body!r}",
        )
        return SetVisibility(key, None if indices is None else tuple(indices))
    if tag == "shuffle":
        keys = body.get("keys")
        check(
            isinstance(keys, list) and all(isinstance(key, str) for key in keys),
            FailureKind.MALFORMED_MOVE,
            f"bad shuffle keys: {body!r}",
        )
        return Shuffle(tuple(keys))
    raise MoveError(FailureKind.MALFORMED_MOVE, f"unknown operation {tag!r}")


@dataclass(frozen=True)
class Move:
    """An ordered, atomic list of state operations.

    Accessors look operations up by role, so callers never depend on the
    position of an operation inside the list.
    """

    operations: Tuple[Operation, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, operations: Sequence[Operation]) -> "Move":
        return cls(tuple(operations))

    def __len__(self) -> int:
        return len(self.operations)

    def __iter__(self):
        return iter(self.operations)

    def get(self, key: str, default: Any = None) -> Any:
        for op in self.operations:
            if isinstance(op, SetValue) and op.key == key:
                return op.value
        return default

    @property
    def kind(self) -> Optional[MoveKind]:
        return self.get(KEY_TYPE)

    @property
    def board(self) -> Optional[Board]:
        return self.get(KEY_BOARD)

    @property
    def deltas(self) -> Optional[List[Delta]]:
        return self.get(KEY_DELTAS)

    @property
    def trace(self) -> Optional[Trace]:
        return self.get(KEY_TRACE)

    @property
    def sort_type(self) -> Optional[SortType]:
        return self.get(KEY_SORT_TYPE)

    @property
    def turn_index(self) -> Optional[int]:
        for op in self.operations:
            if isinstance(op, SetTurn):
                return op.turn_index
        return None

    @property
    def end_scores(self) -> Optional[Tuple[int, ...]]:
        for op in self.operations:
            if isinstance(op, EndMatch):
                return op.end_match_scores
        return None

    def visibility_changes(self) -> List[SetVisibility]:
        return [op for op in self.operations if isinstance(op, SetVisibility)]

    def to_wire(self) -> List[Dict[str, Any]]:
        return [operation_to_wire(op) for op in self.operations]

    @classmethod
    def from_wire(cls, data: Any) -> "Move":
        check(isinstance(data, list), FailureKind.MALFORMED_MOVE, "a move is a list of operations")
        return cls(tuple(operation_from_wire(item) for item in data))
