"""
Snapshot serialization of GameState.

Produces a plain, JSON-ready dict holding every state field, derived
ones included, so a host can persist a game opaquely and load it back.
The stone id counter is not stored: it is re-derived from the stones.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

from stonebid.auction import SealedBids
from stonebid.config import GameConfig
from stonebid.exceptions import SnapshotError
from stonebid.game import EndReason, GameState, MovementState, Phase
from stonebid.labels import Labels
from stonebid.player import Player
from stonebid.scoring import ScoreDetail
from stonebid.stone import Assignment, Stone

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


def _by_player(values: Dict[Player, Any]) -> Dict[str, Any]:
    return {player.value: values[player] for player in Player}


def serialize_state(state: GameState) -> Dict[str, Any]:
    """Serialize a GameState into a stable JSON dict."""
    return {
        "version": SNAPSHOT_VERSION,
        "config": state.config.to_dict(),
        "phase": state.phase.value,
        "turn": state.turn.value if state.turn else None,
        "board": [list(row) for row in state.board],
        "stones": [stone.to_dict() for stone in state.stones.values()],
        "labels": state.labels.to_dict(),
        "credits": _by_player(state.credits),
        "clocks": _by_player(state.clocks),
        "scores": _by_player(state.scores),
        "score_details": {
            player.value: detail.to_dict() for player, detail in state.score_details.items()
        },
        "bids": state.bids.to_dict(),
        "movement": state.movement.to_dict(),
        "placement_counts": _by_player(state.placement_counts),
        "unlocked_labels": {
            player.value: sorted(state.unlocked_labels[player]) for player in Player
        },
        "assignments": {
            player.value: {sid: a.to_dict() for sid, a in state.assignments[player].items()}
            for player in Player
        },
        "passes_in_a_row": state.passes_in_a_row,
        "last_placement_by": state.last_placement_by.value if state.last_placement_by else None,
        "winner": state.winner.value if state.winner else None,
        "end_reason": state.end_reason.value if state.end_reason else None,
        "seed": state.seed,
    }


def _int_map(data: Dict[str, Any]) -> Dict[Player, int]:
    return {player: int(data[player.value]) for player in Player}


def _optional_player(value: Any) -> Any:
    return Player(value) if value else None


def _read_assignment(value: Any) -> Assignment:
    assignment = Assignment.from_value(value)
    if assignment is None:
        raise ValueError(f"Unreadable assignment: {value!r}")
    return assignment


def _check_board(state: GameState) -> None:
    config = state.config
    if len(state.board) != config.rows or any(len(row) != config.cols for row in state.board):
        raise SnapshotError(
            f"Board shape does not match config {config.rows}x{config.cols}"
        )
    for matrix in (state.labels.white_half, state.labels.black_half):
        if len(matrix) != config.rows or any(len(row) != config.cols for row in matrix):
            raise SnapshotError("Label matrix shape does not match the board")

    on_board = {}
    for r, row in enumerate(state.board):
        for c, stone_id in enumerate(row):
            if stone_id is None:
                continue
            if not isinstance(stone_id, str):
                raise SnapshotError(f"Board cell ({r},{c}) holds {stone_id!r}")
            if stone_id in on_board:
                raise SnapshotError(f"Stone {stone_id} appears in more than one cell")
            on_board[stone_id] = (r, c)

    if set(on_board) != set(state.stones):
        raise SnapshotError("Board and stone list disagree")
    for stone_id, stone in state.stones.items():
        if on_board[stone_id] != stone.position:
            raise SnapshotError(f"Stone {stone_id} is not where the board puts it")


def deserialize_state(data: Dict[str, Any]) -> GameState:
    """
    Rebuild a GameState from ``serialize_state`` output.

    Raises:
        SnapshotError: if the payload is malformed or inconsistent
    """
    if not isinstance(data, dict):
        raise SnapshotError(f"Snapshot must be an object, got {type(data).__name__}")

    try:
        stones = {}
        for raw in data["stones"]:
            stone = Stone.from_dict(raw)
            if stone.stone_id in stones:
                raise SnapshotError(f"Stone {stone.stone_id} listed twice")
            stones[stone.stone_id] = stone

        details = data.get("score_details") or {}
        state = GameState(
            config=GameConfig.from_dict(data["config"]),
            labels=Labels.from_dict(data["labels"]),
            board=[[cell for cell in row] for row in data["board"]],
            credits=_int_map(data["credits"]),
            clocks=_int_map(data["clocks"]),
            stones=stones,
            phase=Phase(data["phase"]),
            turn=_optional_player(data.get("turn")),
            scores=_int_map(data["scores"]),
            score_details={
                player: ScoreDetail.from_dict(details[player.value])
                for player in Player
                if player.value in details
            },
            bids=SealedBids.from_dict(data.get("bids") or {}),
            movement=MovementState.from_dict(data.get("movement") or {}),
            placement_counts=_int_map(data["placement_counts"]),
            unlocked_labels={
                player: frozenset(int(v) for v in data["unlocked_labels"][player.value])
                for player in Player
            },
            assignments={
                player: {
                    str(sid): _read_assignment(value)
                    for sid, value in data["assignments"][player.value].items()
                }
                for player in Player
            },
            passes_in_a_row=int(data.get("passes_in_a_row", 0)),
            last_placement_by=_optional_player(data.get("last_placement_by")),
            winner=_optional_player(data.get("winner")),
            end_reason=EndReason(data["end_reason"]) if data.get("end_reason") else None,
            seed=data.get("seed"),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.debug(f"Snapshot decode failed: {e!r}")
        raise SnapshotError(f"Malformed snapshot: {e}") from e

    _check_board(state)
    return state


def to_json(state: GameState, **kwargs: Any) -> str:
    return json.dumps(serialize_state(state), **kwargs)


def from_json(text: str) -> GameState:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e
    return deserialize_state(data)
