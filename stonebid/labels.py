"""
Label grids: the per-half cost and value map.

Each player's half of the board carries every integer 1..N exactly once
(N = half rows x columns) in shuffled order. A label is the credit cost
of placing on that square for its owner, and the positional value of
the square for an opposing stone that ends up on it.
"""

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from stonebid.player import Player

Matrix = Tuple[Tuple[int, ...], ...]


@dataclass(frozen=True)
class Labels:
    """Two same-shaped matrices, zero outside their owner's half."""

    white_half: Matrix
    black_half: Matrix

    def for_player(self, player: Player) -> Matrix:
        return self.white_half if player is Player.WHITE else self.black_half

    def to_dict(self) -> dict:
        return {
            "white_half": [list(row) for row in self.white_half],
            "black_half": [list(row) for row in self.black_half],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Labels":
        return cls(
            white_half=to_matrix(data["white_half"]),
            black_half=to_matrix(data["black_half"]),
        )


def to_matrix(rows: Sequence[Sequence[int]]) -> Matrix:
    return tuple(tuple(int(v) for v in row) for row in rows)


def shuffled_values(count: int, rng: random.Random) -> List[int]:
    """A fresh uniform permutation of 1..count."""
    values = list(range(1, count + 1))
    rng.shuffle(values)
    return values


def _fill_half(rows: int, cols: int, player: Player, rng: random.Random) -> Matrix:
    grid = [[0] * cols for _ in range(rows)]
    home = player.home_rows(rows)
    values = shuffled_values(len(home) * cols, rng)
    for index, value in enumerate(values):
        row = home[index // cols]
        grid[row][index % cols] = value
    return to_matrix(grid)


def make_labels(rows: int = 10, cols: int = 10, rng: Optional[random.Random] = None) -> Labels:
    """
    Generate the label grids for a new game.

    Each half is shuffled independently. Pass a seeded ``random.Random``
    for reproducible grids.
    """
    rng = rng or random.Random()
    white = _fill_half(rows, cols, Player.WHITE, rng)
    black = _fill_half(rows, cols, Player.BLACK, rng)
    return Labels(white_half=white, black_half=black)


def _read(matrix: Matrix, row: int, col: int) -> int:
    if 0 <= row < len(matrix) and 0 <= col < len(matrix[row]):
        return matrix[row][col]
    return 0


def label_for_player_half(labels: Labels, player: Player, row: int, col: int) -> int:
    """Label of a square in the player's own half, 0 elsewhere."""
    return _read(labels.for_player(player), row, col)


def label_for_opponent_half(labels: Labels, player: Player, row: int, col: int) -> int:
    """Label of a square in the opponent's half, 0 elsewhere."""
    return _read(labels.for_player(player.opponent), row, col)


def half_owner(row: int, rows: int = 10) -> Optional[Player]:
    """Which player's home half a row belongs to (None for a middle row on odd boards)."""
    for player in Player:
        if row in player.home_rows(rows):
            return player
    return None


def mirrored_label(labels: Labels, player: Player, row: int, col: int) -> int:
    """
    Player's own label at the square mirroring (row, col) across the midline.

    Only squares in the opponent's half have a mirror; 0 elsewhere.
    """
    rows = len(labels.for_player(player))
    if half_owner(row, rows) is not player.opponent:
        return 0
    return label_for_player_half(labels, player, rows - 1 - row, col)
