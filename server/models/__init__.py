"""Models package for the Presidente server."""

from .events import EventType, GameEvent
from .match_state import rebuild_match

__all__ = [
    "EventType",
    "GameEvent",
    "rebuild_match",
]
