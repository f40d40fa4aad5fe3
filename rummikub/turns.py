from __future__ import annotations

from typing import List, Optional

from .board import EMPTY
from .errors import FailureKind, check
from .state import GameState
from .tiles import TILE_COUNT


def next_player(current: int, player_count: int) -> int:
    check(0 <= current < player_count, FailureKind.ILLEGAL_TURN, f"player {current} of {player_count}")
    return (current + 1) % player_count


def find_winner(state: GameState) -> Optional[int]:
    """Index of the player whose hand emptied at the end of a turn, if any."""
    if state.deltas:
        return None
    rows = state.ruleset.table_rows
    hands = state.board[rows:]
    empty = [player for player, hand in enumerate(hands) if not hand]
    if empty and len(empty) < len(hands):
        return empty[-1]
    return None


def is_tie(state: GameState) -> bool:
    return state.trace.next_tile_to_draw >= TILE_COUNT


def is_game_over(state: GameState) -> bool:
    return find_winner(state) is not None or is_tie(state)


def compute_end_scores(winner: Optional[int], state: GameState) -> List[int]:
    """Final scores; ``winner=None`` is the forced tie of an exhausted pool.

    Each loser gets minus the value of what is left in their hand (a joker
    costs ``ruleset.joker_penalty``); the winner collects the sum.
    """
    player_count = state.trace.player_count
    if winner is None:
        return [0] * player_count
    scores = [0] * player_count
    for player in range(player_count):
        if player == winner:
            continue
        penalty = 0
        for tile in state.hand(player):
            if tile == EMPTY:
                continue
            info = state.tiles[tile]
            penalty += state.ruleset.joker_penalty if info.is_joker() else info.score
        scores[player] = -penalty
    scores[winner] = -sum(scores)
    return scores
