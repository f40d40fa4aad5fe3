from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from .errors import FailureKind, MoveError, check

TILE_COUNT = 106
JOKER_IDS = (104, 105)
JOKER = "joker"
COLORS = ("blue", "red", "black", "orange")
TILE_KEY_PREFIX = "tile"


@dataclass(frozen=True)
class TileInfo:
    color: str
    score: int

    def is_joker(self) -> bool:
        return self.color == JOKER

    def to_wire(self) -> Dict[str, Any]:
        return {"color": self.color, "score": self.score}

    @classmethod
    def from_wire(cls, data: Any) -> "TileInfo":
        check(
            isinstance(data, dict) and isinstance(data.get("color"), str) and _is_int(data.get("score")),
            FailureKind.MALFORMED_MOVE,
            f"bad tile attributes: {data!r}",
        )
        return cls(data["color"], data["score"])


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def tile_attributes(tile_id: int) -> TileInfo:
    """Color and score of a tile, as dealt before any shuffle.

    ``tile_attributes(1)`` -> ``TileInfo("blue", 2)``.
    """
    check(_is_int(tile_id) and 0 <= tile_id < TILE_COUNT, FailureKind.ILLEGAL_TILE_INDEX, f"illegal tile index {tile_id!r}")
    if tile_id in JOKER_IDS:
        return TileInfo(JOKER, 0)
    return TileInfo(COLORS[tile_id // 26], tile_id % 13 + 1)


def initial_tiles() -> List[TileInfo]:
    return [tile_attributes(tile_id) for tile_id in range(TILE_COUNT)]


def tile_key(tile_id: int) -> str:
    return f"{TILE_KEY_PREFIX}{tile_id}"


def parse_tile_key(key: str) -> int:
    suffix = key[len(TILE_KEY_PREFIX):] if key.startswith(TILE_KEY_PREFIX) else ""
    if not suffix.isdigit():
        raise MoveError(FailureKind.MALFORMED_MOVE, f"not a tile key: {key!r}")
    tile_id = int(suffix)
    check(tile_id < TILE_COUNT, FailureKind.ILLEGAL_TILE_INDEX, f"illegal tile index {tile_id}")
    return tile_id


def is_tile_key(key: str) -> bool:
    return key.startswith(TILE_KEY_PREFIX) and key[len(TILE_KEY_PREFIX):].isdigit()
