"""
Tests for the placement phase.
"""

from dataclasses import replace

from stonebid.config import GameConfig
from stonebid.game import Phase, create_game
from stonebid.placement import can_place, has_legal_placement, legal_placements, square_cost_for_player
from stonebid.player import Player
from stonebid.rules import apply_action, lock_bid, place_stone, placement_pass, start_placement

W = Player.WHITE
B = Player.BLACK


def _square_with_label(matrix, value):
    for r, row in enumerate(matrix):
        for c, label in enumerate(row):
            if label == value:
                return r, c
    raise AssertionError(f"label {value} not found")


def _cheapest(state, player):
    return min(legal_placements(state, player), key=lambda sq: square_cost_for_player(state, player, *sq))


def _unlock_pair(state):
    """
    A white-half square for White to claim, and the white-half square that
    claim opens up for Black (the mirror of Black's own square with that label).
    """
    rows = state.rows
    for r in range(rows // 2, rows):
        for c in range(state.cols):
            value = state.labels.white_half[r][c]
            br, bc = _square_with_label(state.labels.black_half, value)
            mirror = (rows - 1 - br, bc)
            if mirror != (r, c):
                return (r, c), mirror, value
    raise AssertionError("no usable square")


def test_place_in_own_half(placement_game):
    cost = placement_game.labels.white_half[9][0]
    state = apply_action(placement_game, place_stone(9, 0))

    stone = state.stones["S1"]
    assert stone.owner is W
    assert stone.position == (9, 0)
    assert stone.distance is None and stone.dirs is None
    assert state.board[9][0] == "S1"
    assert state.credits[W] == 90 - cost
    assert state.placement_counts[W] == 1
    assert state.turn is B
    assert state.last_placement_by is W
    assert cost in state.unlocked_labels[B]


def test_stone_ids_increase(placement_game):
    state = apply_action(placement_game, place_stone(9, 0))
    state = apply_action(state, place_stone(0, 0))

    assert set(state.stones) == {"S1", "S2"}
    assert state.stones["S2"].owner is B


def test_opponent_half_locked_initially(placement_game):
    assert square_cost_for_player(placement_game, W, 0, 0) == 0
    assert apply_action(placement_game, place_stone(0, 0)) is placement_game


def test_claim_unlocks_mirrored_square_for_opponent(placement_game):
    claim, mirror, value = _unlock_pair(placement_game)

    assert square_cost_for_player(placement_game, B, *mirror) == 0

    state = apply_action(placement_game, place_stone(*claim))
    assert square_cost_for_player(state, B, *mirror) == value

    credits_before = state.credits[B]
    state = apply_action(state, place_stone(*mirror))
    assert state.board[mirror[0]][mirror[1]] is not None
    assert state.credits[B] == credits_before - value


def test_unlock_disabled_keeps_halves_strict():
    state = create_game(GameConfig(seed=42, cross_half_unlock=False))
    state = apply_action(state, lock_bid(W, 1))
    state = apply_action(state, lock_bid(B, 0))
    state = apply_action(state, start_placement())
    claim, mirror, _ = _unlock_pair(state)

    state = apply_action(state, place_stone(*claim))
    assert square_cost_for_player(state, B, *mirror) == 0
    assert apply_action(state, place_stone(*mirror)) is state


def test_occupied_square_rejected(placement_game):
    state = apply_action(placement_game, place_stone(9, 0))
    state = apply_action(state, place_stone(0, 0))

    assert apply_action(state, place_stone(9, 0)) is state


def test_out_of_bounds_rejected(placement_game):
    assert apply_action(placement_game, place_stone(10, 0)) is placement_game
    assert apply_action(placement_game, place_stone(-1, 0)) is placement_game


def test_insufficient_credits_rejected(placement_game):
    broke = replace(placement_game, credits={W: 0, B: 95})

    assert not can_place(broke, W, 9, 0)
    assert apply_action(broke, place_stone(9, 0)) is broke


def test_max_stones_cap():
    state = create_game(GameConfig(seed=42, max_stones=1))
    state = apply_action(state, lock_bid(W, 1))
    state = apply_action(state, lock_bid(B, 0))
    state = apply_action(state, start_placement())

    state = apply_action(state, place_stone(9, 0))
    state = apply_action(state, place_stone(0, 0))
    assert state.turn is W
    assert not has_legal_placement(state, W)
    assert apply_action(state, place_stone(9, 1)) is state


def test_pass_refused_before_first_placement(placement_game):
    assert apply_action(placement_game, placement_pass()) is placement_game


def test_pass_allowed_without_legal_placement(placement_game):
    broke = replace(placement_game, credits={W: 0, B: 95})
    state = apply_action(broke, placement_pass())

    assert state.passes_in_a_row == 1
    assert state.turn is B


def test_two_passes_end_placement(placement_game):
    state = apply_action(placement_game, place_stone(9, 0))
    state = apply_action(state, place_stone(0, 0))
    state = apply_action(state, placement_pass())
    assert state.phase == Phase.PLACEMENT
    state = apply_action(state, placement_pass())

    assert state.phase == Phase.ASSIGN_STATS_W
    assert state.turn is W
    assert state.passes_in_a_row == 0


def test_placement_resets_pass_counter(placement_game):
    state = apply_action(placement_game, place_stone(9, 0))
    state = apply_action(state, place_stone(0, 0))
    state = apply_action(state, placement_pass())
    state = apply_action(state, place_stone(*_cheapest(state, B)))

    assert state.passes_in_a_row == 0
    assert state.phase == Phase.PLACEMENT


def test_place_outside_placement_phase(new_game):
    assert apply_action(new_game, place_stone(9, 0)) is new_game
