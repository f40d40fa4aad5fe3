"""Move authoring and validation engine for grid Rummikub."""

from .rules import Ruleset
from .errors import FailureKind, MoveError, MoveResult
from .board import EMPTY, Delta, Position, Trace
from .tiles import TileInfo, tile_attributes
from .state import GameState
from .move import Move, MoveKind
from .hand import SortType, find_maximal_sets, sort_hand_by_sets
from .factory import (
    create_combined_move,
    create_initial_move,
    create_meld_move,
    create_move_move,
    create_pick_move,
    create_sort_move,
    create_undo_move,
)
from .engine import apply_move, create_expected_move, is_move_ok, new_game, replay_moves, try_create_move
from .candidates import generate_candidate_moves

__all__ = [
    "Ruleset",
    "FailureKind",
    "MoveError",
    "MoveResult",
    "EMPTY",
    "Delta",
    "Position",
    "Trace",
    "TileInfo",
    "tile_attributes",
    "GameState",
    "Move",
    "MoveKind",
    "SortType",
    "find_maximal_sets",
    "sort_hand_by_sets",
    "create_initial_move",
    "create_move_move",
    "create_pick_move",
    "create_meld_move",
    "create_sort_move",
    "create_undo_move",
    "create_combined_move",
    "create_expected_move",
    "try_create_move",
    "is_move_ok",
    "apply_move",
    "new_game",
    "replay_moves",
    "generate_candidate_moves",
]
