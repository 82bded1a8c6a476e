"""
StoneBid Rules Engine

A deterministic, pure implementation of the StoneBid board game:
sealed-bid auctions, label-cost placement, stat assignment and
sliding-capture movement on a 10x10 board.
"""

from .config import GameConfig
from .game import ActionType, EndReason, GameState, Phase, create_game
from .player import Player
from .rules import Action, apply_action, get_legal_actions, get_ticking_mode
from .snapshot import deserialize_state, serialize_state
from .stone import Assignment, Direction, Stone

__all__ = [
    "GameConfig",
    "ActionType",
    "EndReason",
    "GameState",
    "Phase",
    "create_game",
    "Player",
    "Action",
    "apply_action",
    "get_legal_actions",
    "get_ticking_mode",
    "serialize_state",
    "deserialize_state",
    "Assignment",
    "Direction",
    "Stone",
]
