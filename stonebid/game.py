"""
Main game state.

A GameState is treated as an immutable value: the reducer in
``stonebid.rules`` builds a new state for every accepted action and
hands back the very same object when an action is rejected.
"""

import logging
import random
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from stonebid.auction import SealedBids
from stonebid.config import GameConfig
from stonebid.labels import Labels, make_labels
from stonebid.player import Player
from stonebid.scoring import ScoreDetail, compute_score_details
from stonebid.stone import Assignment, Stone

logger = logging.getLogger(__name__)

Board = List[List[Optional[str]]]

_STONE_NUMBER = re.compile(r"(\d+)$")

# upper bound for GameConfig.max_stones
MAX_STONES_CAP = 10


class Phase(str, Enum):
    """Master state-machine discriminator."""

    BIDDING = "BIDDING"
    PLACEMENT = "PLACEMENT"
    ASSIGN_STATS_W = "ASSIGN_STATS_W"
    ASSIGN_STATS_B = "ASSIGN_STATS_B"
    MOVEMENT_BIDDING = "MOVEMENT_BIDDING"
    MOVEMENT = "MOVEMENT"
    ENDED = "ENDED"

    @property
    def assigning_player(self) -> Optional[Player]:
        """The player whose assign sub-phase this is, if any."""
        if self is Phase.ASSIGN_STATS_W:
            return Player.WHITE
        if self is Phase.ASSIGN_STATS_B:
            return Player.BLACK
        return None


class ActionType(Enum):
    """Types of actions a driver can submit."""

    RESET = "reset"
    TICK = "tick"
    LOCK_BID = "lock_bid"
    START_PLACEMENT = "start_placement"
    PLACE_STONE = "place_stone"
    PLACEMENT_PASS = "placement_pass"
    ASSIGN_STATS = "assign_stats"
    MOVEMENT_BID = "movement_bid"
    MOVEMENT_PLAN = "movement_plan"
    MOVE_STONE = "move_stone"
    MOVEMENT_PASS = "movement_pass"
    RESIGN = "resign"


class EndReason(str, Enum):
    """How a finished game was decided."""

    ELIMINATION = "ELIMINATION"
    SCORE = "SCORE"
    MOVE_LIMIT = "MOVE_LIMIT"
    STALEMATE = "STALEMATE"
    DOUBLE_PASS = "DOUBLE_PASS"
    FLAG = "FLAG"
    RESIGN = "RESIGN"


@dataclass
class MovementState:
    """Bookkeeping for the movement auction and the movement phase."""

    bids: SealedBids = field(default_factory=SealedBids)
    move_limit: Optional[int] = None
    move_count: int = 0
    decider: Optional[Player] = None
    starting_player: Optional[Player] = None

    def limit_reached(self) -> bool:
        return self.move_limit is not None and self.move_count >= self.move_limit

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bids": self.bids.to_dict(),
            "move_limit": self.move_limit,
            "move_count": self.move_count,
            "decider": self.decider.value if self.decider else None,
            "starting_player": self.starting_player.value if self.starting_player else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MovementState":
        move_limit = data.get("move_limit")
        decider = data.get("decider")
        starting = data.get("starting_player")
        return cls(
            bids=SealedBids.from_dict(data.get("bids") or {}),
            move_limit=int(move_limit) if move_limit is not None else None,
            move_count=int(data.get("move_count", 0)),
            decider=Player(decider) if decider else None,
            starting_player=Player(starting) if starting else None,
        )


def per_player(value: Any) -> Dict[Player, Any]:
    return {Player.WHITE: value, Player.BLACK: value}


def empty_board(rows: int = 10, cols: int = 10) -> Board:
    return [[None] * cols for _ in range(rows)]


@dataclass
class GameState:
    """Represents the complete state of a game."""

    config: GameConfig
    labels: Labels
    board: Board
    credits: Dict[Player, int]
    clocks: Dict[Player, int]  # milliseconds
    stones: Dict[str, Stone] = field(default_factory=dict)
    phase: Phase = Phase.BIDDING
    turn: Optional[Player] = None
    scores: Dict[Player, int] = field(default_factory=lambda: per_player(0))
    score_details: Dict[Player, ScoreDetail] = field(default_factory=dict)
    bids: SealedBids = field(default_factory=SealedBids)
    movement: MovementState = field(default_factory=MovementState)
    placement_counts: Dict[Player, int] = field(default_factory=lambda: per_player(0))
    # label values each player may now claim in the opponent's half
    unlocked_labels: Dict[Player, FrozenSet[int]] = field(default_factory=lambda: per_player(frozenset()))
    assignments: Dict[Player, Dict[str, Assignment]] = field(
        default_factory=lambda: {Player.WHITE: {}, Player.BLACK: {}}
    )
    passes_in_a_row: int = 0
    last_placement_by: Optional[Player] = None
    winner: Optional[Player] = None
    end_reason: Optional[EndReason] = None
    seed: Optional[str] = None

    @property
    def rows(self) -> int:
        return len(self.board)

    @property
    def cols(self) -> int:
        return len(self.board[0]) if self.board else 0

    @property
    def is_over(self) -> bool:
        return self.phase == Phase.ENDED

    @property
    def starting_player(self) -> Optional[Player]:
        """Winner of the opening auction, once revealed."""
        return self.bids.winner if self.bids.revealed else None

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def stone_at(self, row: int, col: int) -> Optional[Stone]:
        if not self.in_bounds(row, col):
            return None
        stone_id = self.board[row][col]
        return self.stones.get(stone_id) if stone_id else None

    def stones_of(self, player: Player) -> List[Stone]:
        return [s for s in self.stones.values() if s.owner == player]

    def __repr__(self) -> str:
        return (
            f"GameState(phase={self.phase.value}, turn={self.turn.value if self.turn else None}, "
            f"credits=W{self.credits[Player.WHITE]}/B{self.credits[Player.BLACK]}, "
            f"stones={len(self.stones)}, winner={self.winner.value if self.winner else None})"
        )


def stone_number(stone_id: str) -> Optional[int]:
    match = _STONE_NUMBER.search(stone_id)
    return int(match.group(1)) if match else None


def restore_id_counter(stones: Mapping[str, Any]) -> int:
    """
    Highest numeric suffix among existing stone ids (0 when there are none).

    The counter is always rebuilt from the stones themselves so a state
    loaded from storage keeps issuing fresh ids.
    """
    numbers = [n for n in (stone_number(sid) for sid in stones) if n is not None]
    return max(numbers, default=0)


def next_stone_id(stones: Mapping[str, Any]) -> str:
    return f"S{restore_id_counter(stones) + 1}"


def with_scores(state: GameState) -> GameState:
    """Return a copy of state with scores and score details recomputed."""
    details = compute_score_details(state)
    scores = {player: detail.total for player, detail in details.items()}
    return replace(state, scores=scores, score_details=details)


def create_game(config: Optional[GameConfig] = None, rng: Optional[random.Random] = None) -> GameState:
    """
    Create a new game in the opening bidding phase.

    The label shuffle uses ``rng`` when given, otherwise a Random seeded
    from ``config.seed``.
    """
    config = config or GameConfig()
    if config.rows < 2 or config.cols < 1:
        raise ValueError("Board needs at least two rows and one column")
    if not 1 <= config.max_stones <= MAX_STONES_CAP:
        raise ValueError(f"max_stones must be between 1 and {MAX_STONES_CAP}")

    if rng is None:
        rng = random.Random(config.seed)

    state = GameState(
        config=config,
        labels=make_labels(config.rows, config.cols, rng),
        board=empty_board(config.rows, config.cols),
        credits=per_player(config.starting_credits),
        clocks=per_player(config.starting_clock_ms),
        seed=str(config.seed) if config.seed is not None else None,
    )

    logger.info(
        f"New game: {config.rows}x{config.cols}, credits={config.starting_credits}, "
        f"clock={config.starting_clock_ms}ms, seed={config.seed}"
    )
    return with_scores(state)
