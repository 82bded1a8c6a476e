"""
High-level rules API for controlling game flow.

``apply_action`` is the single entry point: it takes a state and an
action and returns the next state. Actions that do not apply (wrong
phase, wrong player, not enough credits, illegal square...) return the
input state object unchanged, so a driver can dispatch anything at any
time and duplicate deliveries are harmless.
"""

import logging
import math
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from stonebid.auction import clamp_bid
from stonebid.exceptions import InvalidActionError
from stonebid.game import (
    ActionType,
    EndReason,
    GameState,
    MovementState,
    Phase,
    create_game,
    next_stone_id,
    with_scores,
)
from stonebid.geometry import has_any_legal_move, is_legal_move, legal_moves
from stonebid.placement import can_place, has_legal_placement, legal_placements, square_cost_for_player
from stonebid.player import Player, coerce_player
from stonebid.scoring import score_winner
from stonebid.stone import Assignment, Stone

logger = logging.getLogger(__name__)


class Action:
    """Represents a game action that can be taken."""

    def __init__(self, action_type: ActionType, **params: Any):
        self.action_type = action_type
        self.params = params

    def __repr__(self) -> str:
        return f"Action({self.action_type.value}, {self.params})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Action):
            return NotImplemented
        return self.action_type == other.action_type and self.params == other.params

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.action_type.value}
        for key, value in self.params.items():
            if isinstance(value, Player):
                value = value.value
            elif key == "assignments" and isinstance(value, Mapping):
                value = {
                    sid: a.to_dict() if isinstance(a, Assignment) else a
                    for sid, a in value.items()
                }
            data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "Action":
        """Decode an action record such as ``{"type": "lock_bid", "player": "W", "amount": 10}``."""
        if not isinstance(data, dict) or "type" not in data:
            raise InvalidActionError(f"Action record must be an object with a 'type': {data!r}")
        try:
            action_type = ActionType(data["type"])
        except ValueError as exc:
            raise InvalidActionError(f"Unknown action type: {data['type']!r}") from exc
        params = {k: v for k, v in data.items() if k != "type"}
        return cls(action_type, **params)


# ===== Action factories =====

def reset(seed: Any = None) -> Action:
    return Action(ActionType.RESET, seed=seed)


def tick(dt: int) -> Action:
    return Action(ActionType.TICK, dt=dt)


def lock_bid(player: Player, amount: int) -> Action:
    return Action(ActionType.LOCK_BID, player=player, amount=amount)


def start_placement() -> Action:
    return Action(ActionType.START_PLACEMENT)


def place_stone(row: int, col: int) -> Action:
    return Action(ActionType.PLACE_STONE, row=row, col=col)


def placement_pass() -> Action:
    return Action(ActionType.PLACEMENT_PASS)


def assign_stats(player: Player, assignments: Mapping[str, Any]) -> Action:
    return Action(ActionType.ASSIGN_STATS, player=player, assignments=dict(assignments))


def movement_bid(player: Player, amount: int) -> Action:
    return Action(ActionType.MOVEMENT_BID, player=player, amount=amount)


def movement_plan(player: Player, starting_player: Player) -> Action:
    return Action(ActionType.MOVEMENT_PLAN, player=player, starting_player=starting_player)


def move_stone(stone_id: str, row: int, col: int) -> Action:
    return Action(ActionType.MOVE_STONE, stone_id=stone_id, row=row, col=col)


def movement_pass() -> Action:
    return Action(ActionType.MOVEMENT_PASS)


def resign(player: Player) -> Action:
    return Action(ActionType.RESIGN, player=player)


# ===== Parameter coercion =====

def _int_param(params: Mapping[str, Any], name: str) -> Optional[int]:
    value = params.get(name)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return math.floor(value)
    return None


def _coerce_assignments(raw: Any) -> Optional[Dict[str, Assignment]]:
    if not isinstance(raw, Mapping):
        return None
    result: Dict[str, Assignment] = {}
    for stone_id, value in raw.items():
        assignment = Assignment.from_value(value)
        if assignment is None:
            return None
        result[str(stone_id)] = assignment
    return result


def calculate_assignment_cost(assignments: Mapping[str, Assignment]) -> int:
    """Total credits for a batch of stat assignments."""
    return sum(a.cost() for a in assignments.values())


# ===== Queries =====

def get_ticking_mode(state: GameState) -> Union[str, Player]:
    """
    Which clock(s) run right now: "none", "both", or a single Player.
    """
    if state.phase == Phase.BIDDING:
        return state.bids.ticking_mode()
    if state.phase == Phase.MOVEMENT_BIDDING:
        return state.movement.bids.ticking_mode()
    if state.phase in (Phase.PLACEMENT, Phase.MOVEMENT):
        return state.turn if state.turn is not None else "none"
    assigning = state.phase.assigning_player
    if assigning is not None:
        return assigning
    return "none"


def get_legal_actions(state: GameState, player: Player) -> List[Action]:
    """
    Get all actions that would currently be accepted for a player.

    Bids and assignments are listed once, without amounts: the caller
    picks the numbers. TICK and RESET are driver actions and not listed.
    """
    if state.is_over:
        return []

    actions: List[Action] = []

    if state.phase == Phase.BIDDING:
        if not state.bids.revealed and not state.bids.is_locked(player):
            actions.append(Action(ActionType.LOCK_BID, player=player))
        if state.bids.revealed:
            actions.append(Action(ActionType.START_PLACEMENT))

    elif state.phase == Phase.PLACEMENT:
        if state.turn == player:
            for row, col in legal_placements(state, player):
                actions.append(Action(ActionType.PLACE_STONE, row=row, col=col))
            if state.placement_counts[player] > 0 or not actions:
                actions.append(Action(ActionType.PLACEMENT_PASS))

    elif state.phase.assigning_player == player:
        actions.append(Action(ActionType.ASSIGN_STATS, player=player))

    elif state.phase == Phase.MOVEMENT_BIDDING:
        bids = state.movement.bids
        if not bids.revealed and not bids.is_locked(player):
            actions.append(Action(ActionType.MOVEMENT_BID, player=player))
        if bids.revealed and state.movement.decider == player:
            for starter in Player:
                actions.append(Action(ActionType.MOVEMENT_PLAN, player=player, starting_player=starter))

    elif state.phase == Phase.MOVEMENT:
        if state.turn == player:
            for stone in state.stones_of(player):
                for row, col in legal_moves(state, stone):
                    actions.append(Action(ActionType.MOVE_STONE, stone_id=stone.stone_id, row=row, col=col))
            if not actions:
                actions.append(Action(ActionType.MOVEMENT_PASS))

    actions.append(Action(ActionType.RESIGN, player=player))
    return actions


# ===== Reducer =====

def apply_action(state: GameState, action: Action) -> GameState:
    """
    Apply an action to the game state.

    This is the main interface for executing moves.

    Args:
        state: Current game state (never modified)
        action: Action to apply

    Returns:
        The next state, or ``state`` itself if the action was rejected
    """
    params = action.params
    action_type = action.action_type

    if action_type == ActionType.RESET:
        new_state = _handle_reset(state, params.get("seed"))

    elif state.phase == Phase.ENDED:
        new_state = state

    elif action_type == ActionType.TICK:
        new_state = _handle_tick(state, _int_param(params, "dt"))

    elif action_type == ActionType.LOCK_BID:
        new_state = _handle_lock_bid(
            state, coerce_player(params.get("player")), _int_param(params, "amount")
        )

    elif action_type == ActionType.START_PLACEMENT:
        new_state = _handle_start_placement(state)

    elif action_type == ActionType.PLACE_STONE:
        new_state = _handle_place_stone(state, _int_param(params, "row"), _int_param(params, "col"))

    elif action_type == ActionType.PLACEMENT_PASS:
        new_state = _handle_placement_pass(state)

    elif action_type == ActionType.ASSIGN_STATS:
        new_state = _handle_assign_stats(
            state, coerce_player(params.get("player")), params.get("assignments")
        )

    elif action_type == ActionType.MOVEMENT_BID:
        new_state = _handle_movement_bid(
            state, coerce_player(params.get("player")), _int_param(params, "amount")
        )

    elif action_type == ActionType.MOVEMENT_PLAN:
        new_state = _handle_movement_plan(
            state,
            coerce_player(params.get("player")),
            coerce_player(params.get("starting_player")),
        )

    elif action_type == ActionType.MOVE_STONE:
        new_state = _handle_move_stone(
            state, params.get("stone_id"), _int_param(params, "row"), _int_param(params, "col")
        )

    elif action_type == ActionType.MOVEMENT_PASS:
        new_state = _handle_movement_pass(state)

    elif action_type == ActionType.RESIGN:
        new_state = _handle_resign(state, coerce_player(params.get("player")))

    else:
        new_state = state

    if new_state is state:
        logger.debug(f"Rejected {action!r} in phase {state.phase.value}")
        return state

    if new_state.phase != state.phase:
        logger.info(f"Phase {state.phase.value} -> {new_state.phase.value}")
    return new_state


def replay_actions(state: GameState, actions: Iterable[Action]) -> GameState:
    """Apply a sequence of actions in order and return the final state."""
    for action in actions:
        state = apply_action(state, action)
    return state


def _end_game(state: GameState, winner: Player, reason: EndReason) -> GameState:
    logger.info(f"Game over: {winner.value} wins ({reason.value})")
    return replace(state, phase=Phase.ENDED, turn=None, winner=winner, end_reason=reason)


def _end_by_score(state: GameState, reason: EndReason) -> GameState:
    state = with_scores(state)
    return _end_game(state, score_winner(state.score_details), reason)


def _handle_reset(state: GameState, seed: Any) -> GameState:
    if seed is None:
        return create_game(state.config)
    if isinstance(seed, bool) or not isinstance(seed, (int, str)):
        return state
    config = replace(state.config, seed=seed)
    return create_game(config)


def _handle_tick(state: GameState, dt: Optional[int]) -> GameState:
    """Run the active clock(s) down by dt ms. A flag fall ends the game."""
    if dt is None or dt <= 0:
        return state
    mode = get_ticking_mode(state)
    if mode == "none":
        return state

    running = list(Player) if mode == "both" else [mode]
    clocks = dict(state.clocks)
    for player in running:
        clocks[player] = max(0, clocks[player] - dt)
    new_state = replace(state, clocks=clocks)

    for player in Player:
        if clocks[player] == 0:
            return _end_game(new_state, player.opponent, EndReason.FLAG)
    return new_state


def _handle_lock_bid(state: GameState, player: Optional[Player], amount: Optional[int]) -> GameState:
    """
    Lock an opening bid. Once both are in, bids are revealed and BOTH
    players pay their own bid; the higher bidder places first.
    """
    if state.phase != Phase.BIDDING or player is None or amount is None:
        return state

    bids = state.bids.lock(player, clamp_bid(amount, state.credits[player]))
    if bids is None:
        return state
    if not bids.both_locked():
        return replace(state, bids=bids)

    bids = bids.reveal()
    credits = {p: state.credits[p] - bids.amounts[p] for p in Player}
    new_state = with_scores(replace(state, bids=bids, credits=credits))

    if state.config.auto_start_placement:
        return _handle_start_placement(new_state)
    return new_state


def _handle_start_placement(state: GameState) -> GameState:
    if state.phase != Phase.BIDDING or not state.bids.revealed:
        return state
    return replace(state, phase=Phase.PLACEMENT, turn=state.bids.winner, passes_in_a_row=0)


def _handle_place_stone(state: GameState, row: Optional[int], col: Optional[int]) -> GameState:
    if state.phase != Phase.PLACEMENT or state.turn is None:
        return state
    if row is None or col is None:
        return state

    player = state.turn
    if not can_place(state, player, row, col):
        return state

    cost = square_cost_for_player(state, player, row, col)
    stone_id = next_stone_id(state.stones)

    stones = dict(state.stones)
    stones[stone_id] = Stone(stone_id=stone_id, owner=player, row=row, col=col)
    board = [cells[:] for cells in state.board]
    board[row][col] = stone_id

    credits = dict(state.credits)
    credits[player] -= cost
    counts = dict(state.placement_counts)
    counts[player] += 1

    # claiming label v opens the other-half square labelled v to the opponent
    unlocked = dict(state.unlocked_labels)
    unlocked[player.opponent] = unlocked[player.opponent] | {cost}

    logger.debug(f"{player.value} placed {stone_id} at ({row},{col}) for {cost}")
    return with_scores(replace(
        state,
        stones=stones,
        board=board,
        credits=credits,
        placement_counts=counts,
        unlocked_labels=unlocked,
        turn=player.opponent,
        passes_in_a_row=0,
        last_placement_by=player,
    ))


def _handle_placement_pass(state: GameState) -> GameState:
    """
    Pass during placement. A player who has not placed yet may not pass
    while a placement is open to them. Two passes in a row end placement.
    """
    if state.phase != Phase.PLACEMENT or state.turn is None:
        return state

    player = state.turn
    if state.placement_counts[player] == 0 and has_legal_placement(state, player):
        return state

    passes = state.passes_in_a_row + 1
    if passes >= 2:
        return replace(state, phase=Phase.ASSIGN_STATS_W, turn=Player.WHITE, passes_in_a_row=0)
    return replace(state, passes_in_a_row=passes, turn=player.opponent)


def _handle_assign_stats(state: GameState, player: Optional[Player], raw: Any) -> GameState:
    """
    Commit stats for every stone the player owns, paying
    distance x (directions + persistence) per stone.
    """
    expected = state.phase.assigning_player
    if expected is None or player != expected:
        return state

    assignments = _coerce_assignments(raw)
    if assignments is None:
        return state

    owned = {stone.stone_id for stone in state.stones_of(player)}
    if set(assignments) != owned:
        return state
    if not all(a.is_valid(state.config.max_distance) for a in assignments.values()):
        return state

    cost = calculate_assignment_cost(assignments)
    if cost > state.credits[player]:
        return state

    stones = dict(state.stones)
    for stone_id, assignment in assignments.items():
        stones[stone_id] = stones[stone_id].with_stats(assignment)
    credits = dict(state.credits)
    credits[player] -= cost
    recorded = dict(state.assignments)
    recorded[player] = dict(assignments)

    new_state = replace(state, stones=stones, credits=credits, assignments=recorded)
    if player is Player.WHITE:
        new_state = replace(new_state, phase=Phase.ASSIGN_STATS_B, turn=Player.BLACK)
    else:
        new_state = replace(
            new_state,
            phase=Phase.MOVEMENT_BIDDING,
            turn=None,
            movement=MovementState(),
            passes_in_a_row=0,
        )
    return with_scores(new_state)


def _handle_movement_bid(state: GameState, player: Optional[Player], amount: Optional[int]) -> GameState:
    """
    Lock a movement bid. Only the winner pays; the winning bid becomes
    the move limit and the winner decides who moves first.
    """
    if state.phase != Phase.MOVEMENT_BIDDING or player is None or amount is None:
        return state

    bids = state.movement.bids.lock(player, clamp_bid(amount, state.credits[player]))
    if bids is None:
        return state
    if not bids.both_locked():
        return replace(state, movement=replace(state.movement, bids=bids))

    bids = bids.reveal()
    winner = bids.winner
    limit = bids.winning_bid
    credits = dict(state.credits)
    credits[winner] -= limit
    movement = replace(state.movement, bids=bids, move_limit=limit, decider=winner, move_count=0)
    return with_scores(replace(state, movement=movement, credits=credits))


def _handle_movement_plan(
    state: GameState,
    player: Optional[Player],
    starting_player: Optional[Player],
) -> GameState:
    if state.phase != Phase.MOVEMENT_BIDDING or not state.movement.bids.revealed:
        return state
    if player is None or starting_player is None or player != state.movement.decider:
        return state

    movement = replace(state.movement, starting_player=starting_player, move_count=0)
    new_state = replace(state, movement=movement, passes_in_a_row=0)
    if not movement.move_limit:
        return _end_by_score(new_state, EndReason.MOVE_LIMIT)
    return replace(new_state, phase=Phase.MOVEMENT, turn=starting_player)


def _handle_move_stone(state: GameState, stone_id: Any, row: Optional[int], col: Optional[int]) -> GameState:
    if state.phase != Phase.MOVEMENT or state.turn is None:
        return state
    if not isinstance(stone_id, str) or row is None or col is None:
        return state

    stone = state.stones.get(stone_id)
    if stone is None or stone.owner != state.turn:
        return state
    if not is_legal_move(state, stone, row, col):
        return state

    player = state.turn
    stones = dict(state.stones)
    board = [cells[:] for cells in state.board]
    board[stone.row][stone.col] = None

    victim = state.stone_at(row, col)
    if victim is None or stone.persistent:
        stones[stone_id] = stone.moved_to(row, col)
        board[row][col] = stone_id
    else:
        # capturing without persistence trades the mover for the victim
        del stones[stone_id]
        board[row][col] = None
    if victim is not None:
        del stones[victim.stone_id]
        logger.debug(f"{stone_id} captured {victim.stone_id} at ({row},{col})")

    movement = replace(state.movement, move_count=state.movement.move_count + 1)
    new_state = with_scores(replace(
        state,
        stones=stones,
        board=board,
        turn=player.opponent,
        movement=movement,
        passes_in_a_row=0,
    ))
    return _check_movement_end(new_state)


def _check_movement_end(state: GameState) -> GameState:
    """Elimination, then move limit, then no legal move for either side."""
    white_alive = bool(state.stones_of(Player.WHITE))
    black_alive = bool(state.stones_of(Player.BLACK))
    if not white_alive and not black_alive:
        return _end_by_score(state, EndReason.ELIMINATION)
    if not white_alive:
        return _end_game(state, Player.BLACK, EndReason.ELIMINATION)
    if not black_alive:
        return _end_game(state, Player.WHITE, EndReason.ELIMINATION)

    if state.movement.limit_reached():
        return _end_by_score(state, EndReason.MOVE_LIMIT)

    if not has_any_legal_move(state, Player.WHITE) and not has_any_legal_move(state, Player.BLACK):
        return _end_by_score(state, EndReason.STALEMATE)
    return state


def _handle_movement_pass(state: GameState) -> GameState:
    """Passing is only allowed without a legal move. Two passes in a row end the game."""
    if state.phase != Phase.MOVEMENT or state.turn is None:
        return state

    player = state.turn
    if has_any_legal_move(state, player):
        return state

    passes = state.passes_in_a_row + 1
    if passes >= 2:
        return _end_by_score(replace(state, passes_in_a_row=passes), EndReason.DOUBLE_PASS)
    return replace(state, passes_in_a_row=passes, turn=player.opponent)


def _handle_resign(state: GameState, player: Optional[Player]) -> GameState:
    if player is None:
        return state
    return _end_game(state, player.opponent, EndReason.RESIGN)
