"""Shared test fixtures for StoneBid tests."""

from dataclasses import replace

import pytest
from stonebid.config import GameConfig
from stonebid.game import MovementState, Phase, create_game, empty_board, with_scores
from stonebid.player import Player
from stonebid.rules import apply_action, lock_bid, start_placement
from stonebid.stone import Stone


@pytest.fixture
def game_config():
    """Default game configuration with fixed seed for reproducibility."""
    return GameConfig(seed=42)


@pytest.fixture
def new_game(game_config):
    """Fresh game in the opening bidding phase."""
    return create_game(game_config)


@pytest.fixture
def placement_game(new_game):
    """Opening bids W=10, B=5 revealed and placement started; White to place."""
    state = apply_action(new_game, lock_bid(Player.WHITE, 10))
    state = apply_action(state, lock_bid(Player.BLACK, 5))
    return apply_action(state, start_placement())


@pytest.fixture
def make_state(new_game):
    """
    Build a mid-game state with the given stones already on the board.

    Defaults to the movement phase with White to move and a move limit of 10.
    """
    def _make(stones, phase=Phase.MOVEMENT, turn=Player.WHITE, move_limit=10, credits=None):
        board = empty_board(new_game.rows, new_game.cols)
        stone_map = {}
        for stone in stones:
            board[stone.row][stone.col] = stone.stone_id
            stone_map[stone.stone_id] = stone
        counts = {p: sum(1 for s in stones if s.owner == p) for p in Player}
        movement = MovementState(move_limit=move_limit, decider=Player.WHITE, starting_player=turn)
        state = replace(
            new_game,
            phase=phase,
            turn=turn,
            stones=stone_map,
            board=board,
            placement_counts=counts,
            movement=movement,
            credits=dict(credits) if credits else dict(new_game.credits),
        )
        return with_scores(state)

    return _make


def stone(stone_id, owner, row, col, distance=None, dirs=None, persistent=False):
    return Stone(stone_id, owner, row, col, distance, dirs, persistent)


@pytest.fixture
def stone_factory():
    """Shorthand for building stones in tests."""
    return stone
