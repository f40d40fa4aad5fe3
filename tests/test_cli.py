import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rummikub import cli
from rummikub.turns import find_winner, is_game_over


def test_run_game_plays_to_the_end():
    state = cli.run_game(players=3, seed=4)
    assert is_game_over(state)
    assert state.end_scores is not None
    assert sum(state.end_scores) == 0
    winner = find_winner(state)
    if winner is not None:
        assert state.end_scores[winner] >= 0


def test_run_game_is_deterministic_for_a_seed():
    assert cli.run_game(seed=9).state_key() == cli.run_game(seed=9).state_key()


def test_main_prints_the_outcome(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["rummikub", "--players", "2", "--seed", "1"])
    cli.main()
    out = capsys.readouterr().out
    assert "Scores:" in out
    assert "Hand sizes:" in out
