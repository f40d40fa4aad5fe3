import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rummikub.board import Delta, Position
from rummikub.errors import FailureKind, MoveError
from rummikub.rules import Ruleset
from rummikub.state import GameState
from rummikub.turns import compute_end_scores, find_winner, is_game_over, is_tie, next_player


def test_next_player_wraps_around():
    assert next_player(0, 2) == 1
    assert next_player(3, 4) == 0
    with pytest.raises(MoveError) as exc:
        next_player(2, 2)
    assert exc.value.kind == FailureKind.ILLEGAL_TURN


def test_winner_is_the_player_with_an_empty_hand():
    state = GameState.from_hands([[0, 1], [], [5]])
    assert find_winner(state) == 1
    assert is_game_over(state)


def test_no_winner_while_the_turn_is_open():
    state = GameState.from_hands([[0, 1], [], [5]])
    state.deltas = [Delta(2, Position(7, 0), Position(0, 0))]
    assert find_winner(state) is None


def test_no_winner_before_the_deal_or_with_all_hands_empty():
    assert find_winner(GameState.from_hands([[], []])) is None
    assert find_winner(GameState.from_hands([[0], [1]])) is None


def test_tie_when_the_pool_runs_out():
    assert is_tie(GameState.from_hands([[0], [1]], next_tile_to_draw=106))
    assert not is_tie(GameState.from_hands([[0], [1]], next_tile_to_draw=105))


def test_end_scores_for_a_winner():
    # blue 1 and a joker against red 13
    state = GameState.from_hands([[0, 104], [], [38]])
    assert compute_end_scores(1, state) == [-31, 44, -13]


def test_joker_penalty_follows_the_ruleset():
    state = GameState.from_hands([[105], []], ruleset=Ruleset(joker_penalty=50))
    assert compute_end_scores(1, state) == [-50, 50]


def test_end_scores_for_a_tie():
    state = GameState.from_hands([[0, 1], [2], [3]])
    assert compute_end_scores(None, state) == [0, 0, 0]
