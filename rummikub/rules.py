from dataclasses import dataclass


@dataclass(frozen=True)
class Ruleset:
    table_rows: int = 6
    table_cols: int = 18
    min_players: int = 2
    max_players: int = 4
    initial_hand_size: int = 14
    initial_meld_min_points: int = 30
    joker_penalty: int = 30
    run_requires_anchor: bool = False

    def player_row(self, player: int) -> int:
        return self.table_rows + player

    def is_table_row(self, row: int) -> bool:
        return 0 <= row < self.table_rows

    def dealt_tiles(self, player_count: int) -> int:
        return self.initial_hand_size * player_count
