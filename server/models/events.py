"""
Match events for replay and auditing.

The engine emits one event per accepted play or skip, plus the events
those actions imply (a round closing, a seat going out, the match
ending). Rejected actions emit nothing, so the stream is exactly the
history of the match. models.match_state rebuilds a Match from it.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class EventType(str, Enum):
    """Kinds of match event."""

    # Lifecycle
    MATCH_STARTED = "match_started"
    MATCH_ENDED = "match_ended"

    # Seat actions
    CARDS_PLAYED = "cards_played"
    TURN_SKIPPED = "turn_skipped"

    # Consequences of seat actions
    ROUND_CLOSED = "round_closed"
    PLAYER_FINISHED = "player_finished"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class GameEvent:
    """
    One entry in a match's event stream.

    Attributes:
        event_type: What happened.
        match_id: Match the event belongs to.
        sequence_num: 1-based position in the match's stream.
        timestamp: When it happened (UTC).
        seat: Acting or affected seat, if any.
        data: Type-specific payload (cards, positions, the deal...).
    """

    event_type: EventType
    match_id: str
    sequence_num: int
    timestamp: datetime = field(default_factory=_utc_now)
    seat: Optional[int] = None
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type.value,
            "match_id": self.match_id,
            "sequence_num": self.sequence_num,
            "timestamp": self.timestamp.isoformat(),
            "seat": self.seat,
            "data": self.data,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, d: dict) -> "GameEvent":
        """
        Inverse of to_dict().

        Raises:
            ValueError: On an unknown event type or bad timestamp.
            KeyError: If a required field is missing.
        """
        timestamp = d.get("timestamp")
        if timestamp is None:
            timestamp = _utc_now()
        elif isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp)

        return cls(
            event_type=EventType(d["event_type"]),
            match_id=d["match_id"],
            sequence_num=int(d["sequence_num"]),
            timestamp=timestamp,
            seat=d.get("seat"),
            data=dict(d.get("data") or {}),
        )

    @classmethod
    def from_json(cls, json_str: str) -> "GameEvent":
        return cls.from_dict(json.loads(json_str))
