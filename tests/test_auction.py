"""
Tests for the opening sealed-bid auction.
"""

from stonebid.auction import SealedBids, clamp_bid
from stonebid.config import GameConfig
from stonebid.game import ActionType, Phase, create_game
from stonebid.player import Player
from stonebid.rules import Action, apply_action, lock_bid, start_placement

W = Player.WHITE
B = Player.BLACK


def test_clamp_bid():
    assert clamp_bid(-5, 100) == 0
    assert clamp_bid(30, 100) == 30
    assert clamp_bid(500, 100) == 100


def test_sealed_bids_lock_and_reveal():
    bids = SealedBids()
    assert bids.ticking_mode() == "both"

    bids = bids.lock(W, 7)
    assert bids.is_locked(W)
    assert not bids.both_locked()
    assert bids.ticking_mode() is B
    assert bids.lock(W, 9) is None

    bids = bids.lock(B, 9).reveal()
    assert bids.revealed
    assert bids.winner is B
    assert bids.winning_bid == 9
    assert bids.ticking_mode() == "none"
    assert bids.lock(B, 1) is None


def test_sealed_bids_dict_roundtrip():
    bids = SealedBids().lock(W, 3).lock(B, 3).reveal()
    assert SealedBids.from_dict(bids.to_dict()) == bids


def test_first_lock_hides_bid(new_game):
    state = apply_action(new_game, lock_bid(W, 10))

    assert state.bids.is_locked(W)
    assert not state.bids.revealed
    assert state.credits == new_game.credits
    assert state.phase == Phase.BIDDING


def test_relock_is_noop(new_game):
    state = apply_action(new_game, lock_bid(W, 10))
    assert apply_action(state, lock_bid(W, 20)) is state


def test_reveal_debits_both_players(new_game):
    state = apply_action(new_game, lock_bid(W, 10))
    state = apply_action(state, lock_bid(B, 5))

    assert state.bids.revealed
    assert state.bids.winner is W
    assert state.starting_player is W
    assert state.credits == {W: 90, B: 95}
    assert state.scores == {W: 90, B: 95}
    assert state.phase == Phase.BIDDING


def test_higher_black_bid_wins(new_game):
    state = apply_action(new_game, lock_bid(B, 12))
    state = apply_action(state, lock_bid(W, 4))

    assert state.bids.winner is B


def test_bid_tie_goes_to_white(new_game):
    state = apply_action(new_game, lock_bid(W, 8))
    state = apply_action(state, lock_bid(B, 8))

    assert state.bids.winner is W


def test_bids_clamped_to_credits(new_game):
    state = apply_action(new_game, lock_bid(W, 500))
    state = apply_action(state, lock_bid(B, -3))

    assert state.bids.amounts == {W: 100, B: 0}
    assert state.credits == {W: 0, B: 100}


def test_fractional_bid_floored(new_game):
    state = apply_action(new_game, Action(ActionType.LOCK_BID, player="W", amount=7.9))
    assert state.bids.amounts[W] == 7


def test_malformed_bids_are_noops(new_game):
    assert apply_action(new_game, Action(ActionType.LOCK_BID, player="X", amount=5)) is new_game
    assert apply_action(new_game, Action(ActionType.LOCK_BID, player="W", amount=True)) is new_game
    assert apply_action(new_game, Action(ActionType.LOCK_BID, player="W", amount="5")) is new_game
    assert apply_action(new_game, Action(ActionType.LOCK_BID, player="W")) is new_game


def test_start_placement_requires_reveal(new_game):
    assert apply_action(new_game, start_placement()) is new_game

    state = apply_action(new_game, lock_bid(W, 1))
    assert apply_action(state, start_placement()) is state


def test_start_placement_gives_winner_the_turn(new_game):
    state = apply_action(new_game, lock_bid(W, 1))
    state = apply_action(state, lock_bid(B, 2))
    state = apply_action(state, start_placement())

    assert state.phase == Phase.PLACEMENT
    assert state.turn is B
    assert state.passes_in_a_row == 0


def test_auto_start_placement():
    state = create_game(GameConfig(seed=1, auto_start_placement=True))
    state = apply_action(state, lock_bid(W, 3))
    state = apply_action(state, lock_bid(B, 2))

    assert state.phase == Phase.PLACEMENT
    assert state.turn is W


def test_input_state_not_mutated(new_game):
    apply_action(new_game, lock_bid(W, 10))

    assert new_game.bids.amounts == {}
    assert new_game.credits == {W: 100, B: 100}
