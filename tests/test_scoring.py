"""
Tests for score calculation.
"""

import pytest
from stonebid.player import Player
from stonebid.scoring import ScoreDetail, compute_score_details, positional_value, score_winner

W = Player.WHITE
B = Player.BLACK


@pytest.mark.parametrize(
    "label,expected",
    [(1, 50), (50, 1), (26, 25), (0, 0)],
)
def test_positional_value_standard_board(label, expected):
    assert positional_value(label, 50) == expected


def test_score_credits_plus_opponent_half_positions(make_state, stone_factory):
    """W=80, B=75 with one stone each deep in the other half."""
    w_stone = stone_factory("S1", W, 2, 3)
    b_stone = stone_factory("S2", B, 7, 4)
    state = make_state([w_stone, b_stone], credits={W: 80, B: 75})

    l_w = state.labels.black_half[2][3]
    l_b = state.labels.white_half[7][4]

    assert state.scores[W] == 80 + (51 - l_w)
    assert state.scores[B] == 75 + (51 - l_b)
    assert state.score_details[W] == ScoreDetail(credits=80, position=51 - l_w, total=80 + 51 - l_w)


def test_stones_in_own_half_score_nothing(make_state, stone_factory):
    state = make_state([stone_factory("S1", W, 8, 8), stone_factory("S2", B, 1, 1)])

    details = compute_score_details(state)
    assert details[W].position == 0
    assert details[B].position == 0
    assert details[W].total == state.credits[W]


def test_score_winner_tie_goes_to_black():
    tied = {W: ScoreDetail(10, 5, 15), B: ScoreDetail(15, 0, 15)}
    assert score_winner(tied) is B


def test_score_winner_higher_total():
    details = {W: ScoreDetail(10, 6, 16), B: ScoreDetail(15, 0, 15)}
    assert score_winner(details) is W
