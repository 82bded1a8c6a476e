"""
Players and their home halves of the board.
"""

from enum import Enum
from typing import Optional


class Player(str, Enum):
    """The two sides. White's home half is the bottom of the board, Black's the top."""

    WHITE = "W"
    BLACK = "B"

    @property
    def opponent(self) -> "Player":
        """The other side."""
        return Player.BLACK if self is Player.WHITE else Player.WHITE

    def home_rows(self, rows: int) -> range:
        """Rows that make up this player's home half."""
        half = rows // 2
        if self is Player.WHITE:
            return range(rows - half, rows)
        return range(0, half)

    def __repr__(self) -> str:
        return f"Player.{self.name}"


def coerce_player(value) -> Optional[Player]:
    """Return the Player for 'W'/'B' (or a Player), None for anything else."""
    if isinstance(value, Player):
        return value
    try:
        return Player(value)
    except (TypeError, ValueError):
        return None
