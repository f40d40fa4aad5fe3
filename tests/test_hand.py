import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rummikub.board import EMPTY
from rummikub.errors import FailureKind, MoveError
from rummikub.hand import SortType, find_all_groups, find_maximal_sets, sort_hand, sort_hand_by_sets
from rummikub.tiles import initial_tiles

TILES = initial_tiles()
JOKER = 104


def test_groups_first_then_runs_on_the_rest():
    # blue/red/black 5, blue 1-2-3, red 9
    hand = [4, 30, 56, 0, 1, 2, 34]
    found = find_maximal_sets(hand, TILES)
    assert found.sets == [[4, 30, 56], [0, 1, 2]]
    assert found.remaining == [34]


def test_group_takes_one_tile_per_color():
    hand = [4, 17, 30, 56, 82]  # two blue 5s
    assert find_all_groups(hand, TILES) == [[4, 30, 56, 82]]


def test_duplicate_number_stays_out_of_run():
    hand = [0, 13, 1, 2]  # blue 1 twice
    found = find_maximal_sets(hand, TILES)
    assert found.sets == [[0, 1, 2]]
    assert found.remaining == [13]


def test_jokers_and_loose_tiles_are_left_over_in_order():
    hand = [JOKER, 40, 0, 1, 2, 7]
    found = find_maximal_sets(hand, TILES)
    assert found.sets == [[0, 1, 2]]
    assert found.remaining == [JOKER, 40, 7]


def test_sort_by_sets_is_idempotent():
    hand = [34, 13, 2, 56, 1, 30, 0, JOKER, 4, 17, 82, 3, 66]
    once = sort_hand_by_sets(hand, TILES)
    assert sorted(once) == sorted(hand)
    assert sort_hand_by_sets(once, TILES) == once


def test_sort_by_score_and_color():
    hand = [26, 0, 52, 1]  # red 1, blue 1, black 1, blue 2
    assert sort_hand(hand, SortType.SCORE, TILES) == [26, 0, 52, 1]
    assert sort_hand(hand, SortType.COLOR, TILES) == [52, 0, 1, 26]


def test_sort_keeps_empty_cells_in_place():
    hand = [2, EMPTY, 0, 1]
    assert sort_hand(hand, SortType.SCORE, TILES) == [0, EMPTY, 1, 2]


def test_unknown_sort_type():
    with pytest.raises(MoveError) as exc:
        sort_hand([0, 1], "size", TILES)
    assert exc.value.kind == FailureKind.UNEXPECTED_SORT_TYPE
