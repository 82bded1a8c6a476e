"""
Game configuration settings.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from stonebid.settings import EngineSettings, get_settings


@dataclass
class GameConfig:
    """Rules configuration for a game."""

    rows: int = 10
    cols: int = 10

    starting_credits: int = 100
    starting_clock_ms: int = 10 * 60 * 1000

    max_stones: int = 10
    max_distance: int = 5

    # Squares in the opponent's half open up once the opponent claims
    # the square carrying the same label. False keeps placement strictly
    # inside the home half.
    cross_half_unlock: bool = True

    # Move straight into placement once the opening bids are revealed.
    auto_start_placement: bool = False

    seed: Optional[int] = None

    @property
    def half_size(self) -> int:
        """Number of labelled squares in one half (50 on the standard board)."""
        return (self.rows // 2) * self.cols

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameConfig":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)

    @classmethod
    def from_settings(cls, settings: Optional[EngineSettings] = None, **overrides: Any) -> "GameConfig":
        """Build a config from environment settings, with explicit overrides on top."""
        settings = settings or get_settings()
        values: Dict[str, Any] = {
            "starting_credits": settings.starting_credits,
            "starting_clock_ms": int(settings.clock_minutes * 60 * 1000),
            "max_stones": settings.max_stones,
            "cross_half_unlock": settings.cross_half_unlock,
        }
        values.update(overrides)
        return cls(**values)
