from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .move import Move


class FailureKind(str, Enum):
    ILLEGAL_TILE_INDEX = "IllegalTileIndex"
    OUT_OF_BOUNDS = "OutOfBounds"
    OCCUPIED_OR_EMPTY_MISMATCH = "OccupiedOrEmptyMismatch"
    ILLEGAL_OWNERSHIP = "IllegalOwnership"
    MELD_INVALID = "MeldInvalid"
    INITIAL_MELD_TOO_LOW = "InitialMeldTooLow"
    NO_TILES_LEFT = "NoTilesLeft"
    GAME_ALREADY_OVER = "GameAlreadyOver"
    UNEXPECTED_MOVE_KIND = "UnexpectedMoveKind"
    ILLEGAL_PLAYER_COUNT = "IllegalPlayerCount"
    ILLEGAL_TURN = "IllegalTurn"
    NO_TILES_SENT = "NoTilesSent"
    TILES_ALREADY_SENT = "TilesAlreadySent"
    NOTHING_TO_UNDO = "NothingToUndo"
    EMPTY_BATCH = "EmptyBatch"
    UNEXPECTED_SORT_TYPE = "UnexpectedSortType"
    MALFORMED_MOVE = "MalformedMove"


class MoveError(ValueError):
    """A violated move precondition.

    The message is meant for local diagnostics; protocol callers only ever
    see the boolean verdict of the validator.
    """

    def __init__(self, kind: FailureKind, message: str) -> None:
        super().__init__(f"[{kind.value}] {message}")
        self.kind = kind
        self.message = message


def check(condition: bool, kind: FailureKind, message: str) -> None:
    if not condition:
        raise MoveError(kind, message)


@dataclass(frozen=True)
class MoveResult:
    move: Optional["Move"] = None
    error: Optional[MoveError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, move: "Move") -> "MoveResult":
        return cls(move=move)

    @classmethod
    def failure(cls, error: MoveError) -> "MoveResult":
        return cls(error=error)
