from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from itertools import groupby
from typing import Callable, Iterable, List, Sequence, Tuple

from .board import EMPTY
from .errors import FailureKind, MoveError
from .tiles import JOKER, TileInfo


class SortType(str, Enum):
    SCORE = "score"
    COLOR = "color"
    SET = "set"


@dataclass
class HandSets:
    sets: List[List[int]] = field(default_factory=list)
    remaining: List[int] = field(default_factory=list)

    def tiles(self) -> List[int]:
        return [tile for tile_set in self.sets for tile in tile_set] + list(self.remaining)


def _by_score(tiles: Sequence[TileInfo]) -> Callable[[int], int]:
    return lambda tile_id: tiles[tile_id].score


def _by_color(tiles: Sequence[TileInfo]) -> Callable[[int], Tuple[str, int]]:
    return lambda tile_id: (tiles[tile_id].color, tiles[tile_id].score)


def _without(hand: Iterable[int], sets: Iterable[Iterable[int]]) -> List[int]:
    used = {tile for tile_set in sets for tile in tile_set}
    return [tile for tile in hand if tile not in used]


def find_all_groups(hand: Sequence[int], tiles: Sequence[TileInfo]) -> List[List[int]]:
    groups: List[List[int]] = []
    ordered = sorted(hand, key=_by_score(tiles))
    for _, bucket in groupby(ordered, key=_by_score(tiles)):
        group: List[int] = []
        colors: List[str] = []
        for tile_id in bucket:
            color = tiles[tile_id].color
            if color == JOKER or color in colors:
                continue
            colors.append(color)
            group.append(tile_id)
        if len(group) >= 3:
            groups.append(group)
    return groups


def _runs_of_one_color(candidates: Sequence[int], tiles: Sequence[TileInfo]) -> List[List[int]]:
    runs: List[List[int]] = []
    current: List[int] = []
    for tile_id in candidates:
        score = tiles[tile_id].score
        if current and score == tiles[current[-1]].score:
            # second copy of the same number stays in hand
            continue
        if current and score == tiles[current[-1]].score + 1:
            current.append(tile_id)
            continue
        if len(current) >= 3:
            runs.append(current)
        current = [tile_id]
    if len(current) >= 3:
        runs.append(current)
    return runs


def find_all_runs(hand: Sequence[int], tiles: Sequence[TileInfo]) -> List[List[int]]:
    runs: List[List[int]] = []
    ordered = sorted(hand, key=_by_color(tiles))
    for color, bucket in groupby(ordered, key=lambda tile_id: tiles[tile_id].color):
        if color == JOKER:
            continue
        runs.extend(_runs_of_one_color(list(bucket), tiles))
    return runs


def find_maximal_sets(hand: Sequence[int], tiles: Sequence[TileInfo]) -> HandSets:
    """Greedily pull groups, then runs, out of an unordered collection of tiles.

    Groups are searched first on the whole hand; runs only among what the
    groups left over. The result is deterministic because every sort is
    stable and keyed on tile attributes only.
    """
    groups = find_all_groups(hand, tiles)
    remaining = _without(hand, groups)
    runs = find_all_runs(remaining, tiles)
    remaining = _without(remaining, runs)
    return HandSets(sets=groups + runs, remaining=remaining)


def sort_hand_by_sets(hand: Sequence[int], tiles: Sequence[TileInfo]) -> List[int]:
    return find_maximal_sets(hand, tiles).tiles()


def sort_hand(hand: Sequence[int], sort_type: SortType, tiles: Sequence[TileInfo]) -> List[int]:
    """Reorder the tiles of a hand row; empty cells keep their columns."""
    present = [tile for tile in hand if tile != EMPTY]
    if sort_type == SortType.SCORE:
        ordered = sorted(present, key=_by_score(tiles))
    elif sort_type == SortType.COLOR:
        ordered = sorted(present, key=_by_color(tiles))
    elif sort_type == SortType.SET:
        ordered = sort_hand_by_sets(present, tiles)
    else:
        raise MoveError(FailureKind.UNEXPECTED_SORT_TYPE, f"unexpected sort type: {sort_type!r}")
    refill = iter(ordered)
    return [EMPTY if tile == EMPTY else next(refill) for tile in hand]
