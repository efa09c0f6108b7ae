"""
Tests for event sourcing and match replay.

These tests verify that:
1. Events are emitted correctly from match actions
2. A match can be rebuilt from its events
3. The rebuilt match equals the original
4. Broken event streams are refused
"""

import random

import pytest

from game import Card, Match, MatchPhase, Rank, create_match, play_cards, skip_turn
from models.events import GameEvent, EventType
from models.match_state import rebuild_match


NAMES = ["Ana", "Bruno", "Carla", "Diego"]


class EventCollector:
    """Helper class to collect events from a match."""

    def __init__(self):
        self.events: list[GameEvent] = []

    def collect(self, event: GameEvent) -> None:
        """Callback to collect an event."""
        self.events.append(event)

    def of_type(self, event_type: EventType) -> list[GameEvent]:
        return [e for e in self.events if e.event_type == event_type]


def create_test_match(seed: int = 1) -> tuple[Match, EventCollector]:
    """
    Create a match with event collection enabled.

    Returns:
        Tuple of (Match, EventCollector).
    """
    collector = EventCollector()
    match = create_match(NAMES, seed=seed, event_emitter=collector.collect)
    return match, collector


def play_randomly(match: Match, rng: random.Random, max_actions: int = 2000) -> None:
    """Drive the match with random legal actions until it ends."""
    for _ in range(max_actions):
        if match.phase == MatchPhase.GAME_OVER:
            return
        seat = match.current_seat
        groups: dict[Rank, list[Card]] = {}
        for c in match.seats[seat].sorted_hand():
            groups.setdefault(c.rank, []).append(c)

        if not match.table_cards:
            group = rng.choice(list(groups.values()))
            assert play_cards(match, seat, group[:rng.randint(1, len(group))])
            continue

        size = len(match.table_cards)
        options = [
            g[:size] for g in groups.values()
            if len(g) >= size and g[0].value() > match.table_value()
        ]
        if options and rng.random() < 0.6:
            assert play_cards(match, seat, rng.choice(options))
        else:
            assert skip_turn(match, seat)


class TestEventEmission:
    """Test that events are emitted correctly."""

    def test_match_started_event(self):
        match, collector = create_test_match()

        assert len(collector.events) == 1
        event = collector.events[0]
        assert event.event_type == EventType.MATCH_STARTED
        assert event.sequence_num == 1
        assert event.match_id == match.match_id
        assert event.data["names"] == NAMES
        assert event.data["starting_seat"] == match.starting_seat
        assert event.data["deck_seed"] == 1
        assert sorted(event.data["dealt_cards"]) == ["0", "1", "2", "3"]
        assert all(len(cards) == 13 for cards in event.data["dealt_cards"].values())

    def test_play_and_skip_events(self):
        match, collector = create_test_match()
        seat = match.current_seat
        lowest = match.seats[seat].sorted_hand()[0]

        play_cards(match, seat, [lowest])
        skip_turn(match, match.current_seat)

        played = collector.of_type(EventType.CARDS_PLAYED)[0]
        assert played.seat == seat
        assert played.data["cards"] == [{"suit": lowest.suit.value, "rank": lowest.rank.value}]
        skipped = collector.of_type(EventType.TURN_SKIPPED)[0]
        assert skipped.seat == (seat + 1) % 4

    def test_round_closed_event(self):
        match, collector = create_test_match()
        leader = match.current_seat
        play_cards(match, leader, [match.seats[leader].sorted_hand()[0]])
        for _ in range(3):
            skip_turn(match, match.current_seat)

        closed = collector.of_type(EventType.ROUND_CLOSED)
        assert len(closed) == 1
        assert closed[0].seat == leader

    def test_rejected_actions_emit_nothing(self):
        match, collector = create_test_match()
        wrong_seat = (match.current_seat + 1) % 4
        skip_turn(match, wrong_seat)
        play_cards(match, wrong_seat, [match.seats[wrong_seat].sorted_hand()[0]])
        assert len(collector.events) == 1

    def test_sequence_numbers_increase(self):
        match, collector = create_test_match(seed=4)
        play_randomly(match, random.Random(4))
        sequence = [e.sequence_num for e in collector.events]
        assert sequence == list(range(1, len(sequence) + 1))

    def test_full_match_ends_with_match_ended(self):
        match, collector = create_test_match(seed=5)
        play_randomly(match, random.Random(5))

        assert collector.events[-1].event_type == EventType.MATCH_ENDED
        assert collector.events[-1].data["ranking"] == [p.seat for p in match.ranking()]
        assert len(collector.of_type(EventType.PLAYER_FINISHED)) == 4


class TestEventSerialization:

    def test_json_round_trip(self):
        match, collector = create_test_match()
        original = collector.events[0]
        restored = GameEvent.from_json(original.to_json())

        assert restored.event_type == original.event_type
        assert restored.match_id == original.match_id
        assert restored.sequence_num == original.sequence_num
        assert restored.data == original.data


class TestRebuild:
    """Test rebuilding a match from its events."""

    @pytest.mark.parametrize("seed", [1, 2, 3, 7])
    def test_rebuilt_match_equals_original(self, seed):
        match, collector = create_test_match(seed=seed)
        play_randomly(match, random.Random(seed))

        rebuilt = rebuild_match(collector.events)
        assert rebuilt.to_dict() == match.to_dict()

    def test_rebuild_from_serialized_events(self):
        match, collector = create_test_match(seed=6)
        play_randomly(match, random.Random(6))

        events = [GameEvent.from_json(e.to_json()) for e in collector.events]
        assert rebuild_match(events).to_dict() == match.to_dict()

    def test_rebuild_to_sequence(self):
        match, collector = create_test_match(seed=2)
        seat = match.current_seat
        play_cards(match, seat, [match.seats[seat].sorted_hand()[0]])
        snapshot = match.to_dict()
        skip_turn(match, match.current_seat)

        rebuilt = rebuild_match(collector.events, to_sequence=2)
        assert rebuilt.to_dict() == snapshot

    def test_rebuild_mid_match(self):
        match, collector = create_test_match(seed=3)
        rng = random.Random(3)
        for _ in range(10):
            seat = match.current_seat
            if match.table_cards:
                skip_turn(match, seat)
            else:
                play_cards(match, seat, [rng.choice(match.seats[seat].sorted_hand())])

        assert rebuild_match(collector.events).to_dict() == match.to_dict()


class TestRebuildErrors:

    def test_empty_stream(self):
        with pytest.raises(ValueError):
            rebuild_match([])

    def test_must_start_with_match_started(self):
        match, collector = create_test_match()
        skip_turn(match, match.current_seat)
        with pytest.raises(ValueError):
            rebuild_match(collector.events[1:])

    def test_mixed_matches(self):
        match_a, events_a = create_test_match(seed=1)
        match_b, events_b = create_test_match(seed=2)
        skip_turn(match_b, match_b.current_seat)
        with pytest.raises(ValueError):
            rebuild_match([events_a.events[0], events_b.events[1]])

    def test_out_of_order(self):
        match, collector = create_test_match()
        skip_turn(match, match.current_seat)
        skip_turn(match, match.current_seat)
        events = collector.events
        with pytest.raises(ValueError):
            rebuild_match([events[0], events[2], events[1]])

    def test_illegal_action(self):
        match, collector = create_test_match()
        wrong_seat = (match.current_seat + 1) % 4
        forged = GameEvent(
            event_type=EventType.TURN_SKIPPED,
            match_id=match.match_id,
            sequence_num=2,
            seat=wrong_seat,
        )
        with pytest.raises(ValueError):
            rebuild_match([collector.events[0], forged])
