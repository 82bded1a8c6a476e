"""
Sealed-bid auctions.

Both players commit a hidden amount; nothing is decided until both are
in. The opening auction picks who places first, the movement auction
fixes how many moves the movement phase allows.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from stonebid.player import Player

logger = logging.getLogger(__name__)


def clamp_bid(amount: int, credits: int) -> int:
    """Bids are clamped to [0, available credits]."""
    return max(0, min(credits, amount))


@dataclass
class SealedBids:
    """
    Locked bids for one auction.

    Treated as a value: ``lock`` and ``reveal`` return new instances.
    Ties go to White.
    """

    amounts: Dict[Player, int] = field(default_factory=dict)
    revealed: bool = False
    winner: Optional[Player] = None

    def is_locked(self, player: Player) -> bool:
        return player in self.amounts

    def both_locked(self) -> bool:
        return all(p in self.amounts for p in Player)

    def lock(self, player: Player, amount: int) -> Optional["SealedBids"]:
        """
        Lock a player's bid.
        Returns None if the auction is already revealed or the player has locked.
        """
        if self.revealed or self.is_locked(player):
            return None
        amounts = dict(self.amounts)
        amounts[player] = amount
        return SealedBids(amounts=amounts)

    def reveal(self) -> "SealedBids":
        """Open both bids and decide the winner. Higher bid wins; White takes ties."""
        white = self.amounts[Player.WHITE]
        black = self.amounts[Player.BLACK]
        winner = Player.WHITE if white >= black else Player.BLACK
        logger.info(f"Bids revealed: W={white} B={black}, winner {winner.value}")
        return SealedBids(amounts=dict(self.amounts), revealed=True, winner=winner)

    @property
    def winning_bid(self) -> Optional[int]:
        if not self.revealed or self.winner is None:
            return None
        return self.amounts[self.winner]

    def ticking_mode(self) -> Union[str, Player]:
        """Both clocks run until someone locks, then only the side still thinking."""
        if self.revealed:
            return "none"
        waiting = [p for p in Player if p not in self.amounts]
        if len(waiting) == 2:
            return "both"
        if len(waiting) == 1:
            return waiting[0]
        return "none"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "W": self.amounts.get(Player.WHITE),
            "B": self.amounts.get(Player.BLACK),
            "revealed": self.revealed,
            "winner": self.winner.value if self.winner else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SealedBids":
        amounts = {
            p: int(data[p.value]) for p in Player if data.get(p.value) is not None
        }
        winner = data.get("winner")
        return cls(
            amounts=amounts,
            revealed=bool(data.get("revealed", False)),
            winner=Player(winner) if winner else None,
        )
