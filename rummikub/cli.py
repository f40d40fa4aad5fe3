from __future__ import annotations

import argparse
import logging
import random
from typing import Optional

from .candidates import generate_candidate_moves
from .engine import apply_move, is_move_ok
from .factory import create_initial_move, create_meld_move
from .move import Move, MoveKind
from .state import GameState
from .turns import find_winner, is_game_over

logger = logging.getLogger(__name__)


def _submit(state: Optional[GameState], player: int, move: Move, rng: random.Random) -> GameState:
    if not is_move_ok(player, state, move):
        raise ValueError(f"illegal move: {move.kind} by player {player}")
    logger.debug("player %d plays %s", player, move.kind.value)
    return apply_move(state, move, rng=rng)


def _play_turn(state: GameState, rng: random.Random) -> GameState:
    player = state.turn_index
    candidates = generate_candidate_moves(state, player)
    combined = next((move for move in candidates if move.kind == MoveKind.COMB), None)
    if combined is not None:
        state = _submit(state, player, combined, rng)
        return _submit(state, player, create_meld_move(player, state), rng)
    if not candidates:
        raise ValueError(f"player {player} has no move")
    return _submit(state, player, candidates[0], rng)


def run_game(players: int = 2, seed: Optional[int] = None, max_turns: int = 500) -> GameState:
    rng = random.Random(seed)
    state = _submit(None, 0, create_initial_move(players), rng)
    for _ in range(max_turns):
        if is_game_over(state):
            break
        state = _play_turn(state, rng)
    return state


def main() -> None:
    parser = argparse.ArgumentParser(description="Play a computer-only Rummikub game through the move validator.")
    parser.add_argument("--players", type=int, default=2, help="Number of players (2-4).")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for the tile shuffle.")
    parser.add_argument("--max-turns", type=int, default=500, help="Stop after this many turns.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug-level logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    state = run_game(players=args.players, seed=args.seed, max_turns=args.max_turns)
    winner = find_winner(state)
    if winner is not None:
        print(f"Winner: player {winner}")
    elif state.end_scores is not None:
        print("Tie: the tile pool ran out")
    else:
        print("No winner (turn limit reached)")
    print("Hand sizes:", [len(state.hand(p)) for p in range(state.trace.player_count)])
    print("Scores:", state.end_scores)


if __name__ == "__main__":
    main()
