"""
Exception hierarchy for code around the engine.

The reducer itself never raises: rejected actions come back as the
unchanged input state. These errors cover decoding data that arrives
from outside (action logs, stored snapshots).
"""


class StoneBidError(Exception):
    """Base exception for all engine-related errors."""


class InvalidActionError(StoneBidError):
    """Action record could not be decoded."""


class SnapshotError(StoneBidError):
    """Serialized game state could not be decoded."""
