"""
Placement availability and cost.

A player may place in their own half at the square's label cost. A
square in the opponent's half mirrors one of the player's own squares;
it becomes available, at the mirrored label's cost, once the opponent
has claimed a square carrying that same label value.
"""

from typing import TYPE_CHECKING, List, Tuple

from stonebid.labels import label_for_player_half, mirrored_label
from stonebid.player import Player

if TYPE_CHECKING:
    from stonebid.game import GameState


def square_cost_for_player(state: "GameState", player: Player, row: int, col: int) -> int:
    """
    Credit cost for player to claim (row, col); 0 means not available.

    Occupancy and remaining credits are not considered here.
    """
    own = label_for_player_half(state.labels, player, row, col)
    if own > 0:
        return own
    if state.config.cross_half_unlock:
        mirrored = mirrored_label(state.labels, player, row, col)
        if mirrored > 0 and mirrored in state.unlocked_labels[player]:
            return mirrored
    return 0


def can_place(state: "GameState", player: Player, row: int, col: int) -> bool:
    """Whether player could place a stone on (row, col) right now, ignoring whose turn it is."""
    if not state.in_bounds(row, col):
        return False
    if state.board[row][col] is not None:
        return False
    if state.placement_counts[player] >= state.config.max_stones:
        return False
    cost = square_cost_for_player(state, player, row, col)
    if cost <= 0:
        return False
    return state.credits[player] >= cost


def legal_placements(state: "GameState", player: Player) -> List[Tuple[int, int]]:
    return [
        (row, col)
        for row in range(state.rows)
        for col in range(state.cols)
        if can_place(state, player, row, col)
    ]


def has_legal_placement(state: "GameState", player: Player) -> bool:
    if state.placement_counts[player] >= state.config.max_stones:
        return False
    return any(
        can_place(state, player, row, col)
        for row in range(state.rows)
        for col in range(state.cols)
    )
