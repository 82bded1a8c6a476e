"""
Score calculation.

A player's score is their remaining credits plus a positional bonus for
every stone they have standing in the opponent's half.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict

from stonebid.labels import label_for_opponent_half
from stonebid.player import Player

if TYPE_CHECKING:
    from stonebid.game import GameState


@dataclass(frozen=True)
class ScoreDetail:
    """Credits vs. positional bonus for one player."""

    credits: int
    position: int
    total: int

    def to_dict(self) -> Dict[str, int]:
        return {"credits": self.credits, "position": self.position, "total": self.total}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScoreDetail":
        return cls(
            credits=int(data["credits"]),
            position=int(data["position"]),
            total=int(data["total"]),
        )


def positional_value(label: int, half_size: int) -> int:
    """
    Points for a stone standing on an opponent square with this label.

    Cheap squares are worth the most: value = half_size + 1 - label
    (51 - label on the standard board). Unlabelled squares score 0.
    """
    if label <= 0:
        return 0
    return half_size + 1 - label


def compute_score_details(state: "GameState") -> Dict[Player, ScoreDetail]:
    """Recompute both players' score breakdown from credits and stone positions."""
    half_size = state.config.half_size
    bonus = {Player.WHITE: 0, Player.BLACK: 0}
    for stone in state.stones.values():
        label = label_for_opponent_half(state.labels, stone.owner, stone.row, stone.col)
        bonus[stone.owner] += positional_value(label, half_size)

    return {
        player: ScoreDetail(
            credits=state.credits[player],
            position=bonus[player],
            total=state.credits[player] + bonus[player],
        )
        for player in Player
    }


def score_winner(details: Dict[Player, ScoreDetail]) -> Player:
    """Higher total wins; Black takes ties."""
    if details[Player.WHITE].total > details[Player.BLACK].total:
        return Player.WHITE
    return Player.BLACK
