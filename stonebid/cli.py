"""
CLI for replaying StoneBid games from JSONL action logs.

Each non-empty line of the input file is one action record, e.g.::

    {"type": "lock_bid", "player": "W", "amount": 12}
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from stonebid.config import GameConfig
from stonebid.exceptions import InvalidActionError
from stonebid.game import GameState, create_game
from stonebid.player import Player
from stonebid.rules import Action, apply_action
from stonebid.settings import get_settings
from stonebid.snapshot import serialize_state

logger = logging.getLogger(__name__)


def load_actions(path: Path) -> List[Action]:
    """Read action records from a JSONL file."""
    actions: List[Action] = []
    with path.open("r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                raise InvalidActionError(f"Line {line_no}: not valid JSON ({e.msg})") from e
            try:
                actions.append(Action.from_dict(record))
            except InvalidActionError as e:
                raise InvalidActionError(f"Line {line_no}: {e}") from e
    return actions


def format_summary(state: GameState, applied: int, rejected: int) -> str:
    lines = [
        f"Phase:    {state.phase.value}",
        f"Actions:  {applied} applied, {rejected} rejected",
    ]
    for player in Player:
        detail = state.score_details[player]
        lines.append(
            f"{player.name.title():<6}    credits={state.credits[player]} "
            f"score={detail.total} (position {detail.position}) "
            f"stones={len(state.stones_of(player))} clock={state.clocks[player]}ms"
        )
    if state.winner is not None:
        reason = state.end_reason.value if state.end_reason else "?"
        lines.append(f"Winner:   {state.winner.name.title()} ({reason})")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Replay a StoneBid game from a JSONL action log"
    )
    parser.add_argument(
        "file",
        type=str,
        help="Path to JSONL action file"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the label shuffle (default: random)"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the final state as a JSON snapshot"
    )

    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    file_path = Path(args.file)
    if not file_path.exists():
        print(f"File does not exist: {args.file}", file=sys.stderr)
        return 1

    try:
        actions = load_actions(file_path)
    except InvalidActionError as e:
        print(f"Invalid action log: {e}", file=sys.stderr)
        return 2

    state = create_game(GameConfig.from_settings(settings, seed=args.seed))
    applied = rejected = 0
    for action in actions:
        next_state = apply_action(state, action)
        if next_state is state:
            rejected += 1
        else:
            applied += 1
        state = next_state

    logger.info(f"Replayed {len(actions)} actions from {file_path}")

    if args.json:
        print(json.dumps(serialize_state(state), indent=2))
    else:
        print(format_summary(state, applied, rejected))
    return 0


if __name__ == "__main__":
    sys.exit(main())
