"""
Stones, their combat attributes, and the direction mask.
"""

from dataclasses import dataclass, replace
from enum import IntFlag
from typing import Any, Dict, Optional, Tuple

from stonebid.player import Player


class Direction(IntFlag):
    """Compass directions a stone may slide in. Up is towards row 0."""

    R = 1
    L = 2
    U = 4
    D = 8
    UR = 16
    UL = 32
    DR = 64
    DL = 128


ALL_DIRECTIONS = 0xFF
ORTHOGONAL = Direction.R | Direction.L | Direction.U | Direction.D
DIAGONAL = Direction.UR | Direction.UL | Direction.DR | Direction.DL

# (row delta, col delta) per direction bit
DIRECTION_DELTAS: Dict[Direction, Tuple[int, int]] = {
    Direction.R: (0, 1),
    Direction.L: (0, -1),
    Direction.U: (-1, 0),
    Direction.D: (1, 0),
    Direction.UR: (-1, 1),
    Direction.UL: (-1, -1),
    Direction.DR: (1, 1),
    Direction.DL: (1, -1),
}


def count_directions(dirs: int) -> int:
    """Number of direction bits set in a mask."""
    return bin(dirs & ALL_DIRECTIONS).count("1")


@dataclass(frozen=True)
class Assignment:
    """Stats bought for one stone during the assign phase."""

    distance: int
    dirs: int
    persistent: bool = False

    def cost(self) -> int:
        """distance x (directions + 1 if persistent)."""
        surcharge = 1 if self.persistent else 0
        return self.distance * (count_directions(self.dirs) + surcharge)

    def is_valid(self, max_distance: int = 5) -> bool:
        if isinstance(self.distance, bool) or not isinstance(self.distance, int):
            return False
        if isinstance(self.dirs, bool) or not isinstance(self.dirs, int):
            return False
        return 1 <= self.distance <= max_distance and 0 <= self.dirs <= ALL_DIRECTIONS

    def to_dict(self) -> Dict[str, Any]:
        return {"distance": self.distance, "dirs": self.dirs, "persistent": self.persistent}

    @classmethod
    def from_value(cls, value: Any) -> Optional["Assignment"]:
        """
        Build an Assignment from an Assignment or a dict payload.

        Accepts the short keys ``d``/``dirs`` as well as ``distance``.
        Returns None when the payload cannot be read.
        """
        if isinstance(value, Assignment):
            return value
        if not isinstance(value, dict):
            return None
        distance = value.get("distance", value.get("d"))
        dirs = value.get("dirs", 0)
        persistent = value.get("persistent", False)
        if isinstance(distance, bool) or not isinstance(distance, int):
            return None
        if isinstance(dirs, bool) or not isinstance(dirs, int):
            return None
        if not isinstance(persistent, bool):
            return None
        return cls(distance=distance, dirs=int(dirs), persistent=persistent)


@dataclass(frozen=True)
class Stone:
    """A stone on the board. Stats stay unset until the assign phase."""

    stone_id: str
    owner: Player
    row: int
    col: int
    distance: Optional[int] = None
    dirs: Optional[int] = None
    persistent: bool = False

    @property
    def position(self) -> Tuple[int, int]:
        return (self.row, self.col)

    def can_move(self) -> bool:
        """A stone needs both a distance and at least one direction to move."""
        return bool(self.distance) and bool(self.dirs)

    def moved_to(self, row: int, col: int) -> "Stone":
        return replace(self, row=row, col=col)

    def with_stats(self, assignment: Assignment) -> "Stone":
        return replace(
            self,
            distance=assignment.distance,
            dirs=assignment.dirs,
            persistent=assignment.persistent,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stone_id": self.stone_id,
            "owner": self.owner.value,
            "row": self.row,
            "col": self.col,
            "distance": self.distance,
            "dirs": self.dirs,
            "persistent": self.persistent,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Stone":
        distance = data.get("distance")
        dirs = data.get("dirs")
        return cls(
            stone_id=str(data["stone_id"]),
            owner=Player(data["owner"]),
            row=int(data["row"]),
            col=int(data["col"]),
            distance=int(distance) if distance is not None else None,
            dirs=int(dirs) if dirs is not None else None,
            persistent=bool(data.get("persistent", False)),
        )

    def __repr__(self) -> str:
        return (
            f"Stone(id={self.stone_id}, owner={self.owner.value}, at=({self.row},{self.col}), "
            f"d={self.distance}, dirs={self.dirs}, persistent={self.persistent})"
        )
