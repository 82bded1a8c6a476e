"""
Legal-move generation.

A stone slides up to its distance along each enabled direction. Empty
squares are reachable and the slide continues; the first occupied
square ends the slide, and is itself reachable only when it holds an
enemy stone (a capture).
"""

from typing import TYPE_CHECKING, List, Tuple

from stonebid.player import Player
from stonebid.stone import DIRECTION_DELTAS, Stone

if TYPE_CHECKING:
    from stonebid.game import GameState

Square = Tuple[int, int]


def legal_moves(state: "GameState", stone: Stone) -> List[Square]:
    """All destinations for a stone, in direction-bit order then by distance."""
    if not stone.can_move():
        return []

    moves: List[Square] = []
    for direction, (dr, dc) in DIRECTION_DELTAS.items():
        if not stone.dirs & direction:
            continue
        row, col = stone.row, stone.col
        for _ in range(stone.distance):
            row += dr
            col += dc
            if not state.in_bounds(row, col):
                break
            occupant = state.stone_at(row, col)
            if occupant is None:
                moves.append((row, col))
                continue
            if occupant.owner != stone.owner:
                moves.append((row, col))
            break
    return moves


def is_legal_move(state: "GameState", stone: Stone, row: int, col: int) -> bool:
    return (row, col) in legal_moves(state, stone)


def has_any_legal_move(state: "GameState", player: Player) -> bool:
    return any(legal_moves(state, stone) for stone in state.stones_of(player))
