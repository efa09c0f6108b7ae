"""
Match rebuilder for event sourcing.

Reconstructs a Match from its event stream by re-dealing the hands
recorded in the match_started event and feeding every recorded play and
skip back through the engine. Derived events (round_closed,
player_finished, match_ended) are consequences of those actions and are
reproduced by the engine itself, so they are not re-applied.

Usage:
    collector = []
    match = create_match(names, event_emitter=collector.append)
    ...
    rebuilt = rebuild_match(collector)
    assert rebuilt.to_dict() == match.to_dict()
"""

from typing import Optional

from game import Match, parse_cards
from models.events import GameEvent, EventType

_DERIVED_EVENTS = {
    EventType.ROUND_CLOSED,
    EventType.PLAYER_FINISHED,
    EventType.MATCH_ENDED,
}


def _start_from_event(event: GameEvent) -> Match:
    data = event.data
    names = data["names"]
    hands = [parse_cards(data["dealt_cards"][str(seat)]) for seat in range(len(names))]
    return Match.from_deal(
        names,
        hands,
        starting_seat=data["starting_seat"],
        deck_seed=data.get("deck_seed"),
        match_id=event.match_id,
    )


def rebuild_match(
    events: list[GameEvent],
    to_sequence: Optional[int] = None,
) -> Match:
    """
    Rebuild a match from a list of events.

    Args:
        events: Events in sequence order, starting with match_started.
        to_sequence: Optional last sequence number to apply.

    Returns:
        The reconstructed Match.

    Raises:
        ValueError: If the list is empty, does not start with
            match_started, mixes matches, is out of order, or contains
            an action the engine rejects.
    """
    if not events:
        raise ValueError("Cannot rebuild match from empty event list")

    first = events[0]
    if first.event_type != EventType.MATCH_STARTED:
        raise ValueError(f"Event stream must start with match_started, got {first.event_type.value}")

    match = _start_from_event(first)
    last_sequence = first.sequence_num

    for event in events[1:]:
        if to_sequence is not None and event.sequence_num > to_sequence:
            break
        if event.match_id != match.match_id:
            raise ValueError(
                f"Event for match {event.match_id} in stream for {match.match_id}"
            )
        if event.sequence_num <= last_sequence:
            raise ValueError(
                f"Event sequence {event.sequence_num} follows {last_sequence}"
            )
        last_sequence = event.sequence_num

        if event.event_type in _DERIVED_EVENTS:
            continue

        if event.event_type == EventType.CARDS_PLAYED:
            result = match.play_cards(event.seat, parse_cards(event.data["cards"]))
        elif event.event_type == EventType.TURN_SKIPPED:
            result = match.skip_turn(event.seat)
        else:
            raise ValueError(f"Unexpected event type: {event.event_type.value}")

        if not result:
            raise ValueError(
                f"Event {event.sequence_num} ({event.event_type.value}) rejected: "
                f"{result.rejection.value}"
            )

    return match
