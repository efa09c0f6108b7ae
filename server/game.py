"""
Game logic for Presidente.

This module implements the authoritative match engine for Presidente, a
four-player climbing card game: card/deck management, seat state, play
validation, round resolution and finish ranking.

Presidente Rules Summary:
    - A standard 52-card deck is dealt out, 13 cards to each of 4 seats
    - A random seat leads first; turns rotate in seat order 0 -> 1 -> 2 -> 3 -> 0
    - On a clear table any group of same-rank cards may be played
    - Otherwise a play must use the same number of cards as the table and
      be of a strictly higher rank
    - A seat may skip instead of playing
    - When everyone else has skipped, the round leader wins the round,
      the table is cleared and the leader opens the next round
    - The first seat to empty its hand is the Presidente; the last seat
      holding cards is ranked last automatically

Rank Order:
    3 < 4 < 5 < 6 < 7 < 8 < 9 < 10 < J < Q < K < A < 2

The engine is synchronous and performs no I/O. Callers (the room layer)
must serialize actions on a single Match; see room.Room.game_lock.
"""

import logging
import random
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from constants import (
    CARDS_PER_PLAYER,
    DECK_SIZE,
    PLAYERS_PER_MATCH,
    SUIT_NAMES,
    get_finish_title,
    get_rank_value,
)

logger = logging.getLogger(__name__)


# Card suits for a standard deck, named in constants.py. Suit never affects comparison.
Suit = Enum("Suit", [(name.upper(), name) for name in SUIT_NAMES])


class Rank(Enum):
    """Card ranks, declared lowest to highest."""

    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"
    TWO = "2"


# Map Rank enum to comparison values (derived from constants.py as single source of truth)
RANK_VALUES: dict[Rank, int] = {rank: get_rank_value(rank.value) for rank in Rank}

SUIT_ORDER: dict[Suit, int] = {suit: idx for idx, suit in enumerate(Suit)}


@dataclass(frozen=True)
class Card:
    """
    An immutable playing card.

    Two cards are the same card iff suit and rank match, so a Card can be
    used directly as a set member or dict key.

    Attributes:
        suit: The card's suit.
        rank: The card's rank.
    """

    suit: Suit
    rank: Rank

    def value(self) -> int:
        """Comparison value, 3 (lowest) through 15 (the "2")."""
        return RANK_VALUES[self.rank]

    def sort_key(self) -> tuple[int, int]:
        return (self.value(), SUIT_ORDER[self.suit])

    def to_dict(self) -> dict:
        """
        Convert card to dictionary for JSON serialization.

        Returns:
            Dict with suit, rank and numeric value.
        """
        return {
            "suit": self.suit.value,
            "rank": self.rank.value,
            "value": self.value(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Card":
        """
        Build a card from a {"suit", "rank"} mapping.

        Raises:
            ValueError: If suit or rank is not recognised.
        """
        try:
            return cls(Suit(data["suit"]), Rank(str(data["rank"])))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed card: {data!r}") from e

    def __str__(self) -> str:
        return f"{self.rank.value} of {self.suit.value}"


def sort_cards(cards: Iterable[Card]) -> list[Card]:
    """Sort cards by rank, then suit."""
    return sorted(cards, key=Card.sort_key)


def cards_to_dicts(cards: Iterable[Card]) -> list[dict]:
    return [card.to_dict() for card in sort_cards(cards)]


def parse_cards(data: Iterable[dict]) -> list[Card]:
    """
    Parse a list of card mappings as sent by clients.

    Raises:
        ValueError: If any entry is not a valid card.
    """
    return [Card.from_dict(item) for item in data]


class Deck:
    """
    A standard 52-card deck, shuffled on creation.

    With a seed the shuffle is reproducible (tests, replays). Without one,
    cards are shuffled from the operating system's entropy source so every
    one of the 52! orderings is reachable.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        """
        Initialize and shuffle a new deck.

        Args:
            seed: Optional random seed for deterministic shuffle.
        """
        self.seed: Optional[int] = seed
        self.rng: random.Random = (
            random.Random(seed) if seed is not None else random.SystemRandom()
        )
        self.cards: list[Card] = [Card(suit, rank) for suit in Suit for rank in Rank]
        self.shuffle()

    def shuffle(self) -> None:
        """Fisher-Yates shuffle of the remaining cards."""
        self.rng.shuffle(self.cards)

    def deal(self, num_hands: int, cards_per_hand: int) -> list[list[Card]]:
        """
        Deal consecutive blocks of cards off the top of the deck.

        Hand i receives cards [i * cards_per_hand, (i + 1) * cards_per_hand).

        Raises:
            ValueError: If the deck does not hold enough cards.
        """
        needed = num_hands * cards_per_hand
        if needed > len(self.cards):
            raise ValueError(
                f"Cannot deal {needed} cards from a deck of {len(self.cards)}"
            )
        hands = [
            self.cards[i * cards_per_hand:(i + 1) * cards_per_hand]
            for i in range(num_hands)
        ]
        del self.cards[:needed]
        return hands

    def cards_remaining(self) -> int:
        """Return the number of cards left in the deck."""
        return len(self.cards)


@dataclass
class Player:
    """
    A seat at the Presidente table.

    Attributes:
        seat: Fixed seat index 0-3 (also turn order).
        name: Display name.
        hand: Cards currently held.
        finish_position: None until the hand is emptied, then 1-4.
    """

    seat: int
    name: str
    hand: set[Card] = field(default_factory=set)
    finish_position: Optional[int] = None

    @property
    def is_finished(self) -> bool:
        return self.finish_position is not None

    @property
    def is_presidente(self) -> bool:
        return self.finish_position == 1

    @property
    def title(self) -> str:
        if self.finish_position is None:
            return ""
        return get_finish_title(self.finish_position)

    def has_cards(self, cards: Iterable[Card]) -> bool:
        """Check the hand holds every one of the given cards."""
        return all(card in self.hand for card in cards)

    def remove_cards(self, cards: Iterable[Card]) -> None:
        """
        Remove cards from the hand.

        Callers must check has_cards() first; a missing card raises
        KeyError before anything is removed.
        """
        cards = set(cards)
        missing = cards - self.hand
        if missing:
            raise KeyError(f"Cards not in hand: {sort_cards(missing)}")
        self.hand -= cards

    def sorted_hand(self) -> list[Card]:
        return sort_cards(self.hand)

    def hand_to_dict(self) -> list[dict]:
        return cards_to_dicts(self.hand)


class MatchPhase(Enum):
    """
    Phases of a Presidente match.

    Flow: PLAYING -> GAME_OVER. The lobby ("waiting") lives in the room
    layer; a Match only exists once cards are dealt.
    """

    PLAYING = "playing"
    GAME_OVER = "game_over"


class RejectReason(str, Enum):
    """Why an action was refused. The player may simply try again."""

    NOT_YOUR_TURN = "not_your_turn"
    CARDS_NOT_IN_HAND = "cards_not_in_hand"
    MIXED_RANK = "mixed_rank"
    CANNOT_BEAT = "cannot_beat"

    @property
    def message(self) -> str:
        return _REJECT_MESSAGES[self]


_REJECT_MESSAGES: dict[RejectReason, str] = {
    RejectReason.NOT_YOUR_TURN: "It is not your turn",
    RejectReason.CARDS_NOT_IN_HAND: "You do not hold those cards",
    RejectReason.MIXED_RANK: "All played cards must share one rank",
    RejectReason.CANNOT_BEAT: "Play the same number of cards at a higher rank",
}


@dataclass(frozen=True)
class ActionResult:
    """
    Outcome of a play or skip.

    Truthy when the action was applied. On rejection the match is
    untouched and `rejection` names the reason.
    """

    match: "Match"
    rejection: Optional[RejectReason] = None

    @property
    def ok(self) -> bool:
        return self.rejection is None

    def __bool__(self) -> bool:
        return self.ok


def _validate_names(names: list[str]) -> None:
    if len(names) != PLAYERS_PER_MATCH:
        raise ValueError(f"Presidente needs exactly {PLAYERS_PER_MATCH} players, got {len(names)}")
    if len(set(names)) != len(names):
        raise ValueError("Player names must be distinct")


@dataclass
class Match:
    """
    Authoritative state of one Presidente match.

    Attributes:
        seats: The four players in fixed turn order.
        current_seat: Seat whose turn it is.
        table_cards: Cards currently standing on the table; empty when the
            table is clear, otherwise all of one rank.
        round_leader: Seat whose play stands on the table (None when clear).
        skipped_seats: Seats that passed since the last successful play.
        finished_count: How many seats have a finish position.
        phase: PLAYING until every position is decided.
        discard_pile: Cards swept off the table so far.
        starting_seat: Seat chosen to lead the first round.
        deck_seed: Shuffle seed, if the deal was seeded.
        action_count: Number of accepted actions (plays and skips).
        match_id: Unique identifier for event sourcing.
    """

    seats: list[Player]
    current_seat: int = 0
    table_cards: frozenset = field(default_factory=frozenset)
    round_leader: Optional[int] = None
    skipped_seats: set[int] = field(default_factory=set)
    finished_count: int = 0
    phase: MatchPhase = MatchPhase.PLAYING
    discard_pile: list[Card] = field(default_factory=list)
    starting_seat: int = 0
    deck_seed: Optional[int] = None
    action_count: int = 0

    # Event sourcing support
    match_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    _event_emitter: Optional[Callable[["GameEvent"], None]] = field(
        default=None, repr=False, compare=False
    )
    _sequence_num: int = field(default=0, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.seats) != PLAYERS_PER_MATCH:
            raise ValueError(f"A match has exactly {PLAYERS_PER_MATCH} seats")
        for idx, player in enumerate(self.seats):
            if player.seat != idx:
                raise ValueError(f"Player {player.name!r} sits at {player.seat}, expected {idx}")

        all_cards: list[Card] = [c for p in self.seats for c in p.hand]
        all_cards.extend(self.table_cards)
        all_cards.extend(self.discard_pile)
        if len(all_cards) != DECK_SIZE or len(set(all_cards)) != DECK_SIZE:
            raise ValueError("Hands, table and discard pile must hold one full deck")

        if not (0 <= self.current_seat < len(self.seats)):
            raise ValueError(f"current_seat out of range: {self.current_seat}")
        if self.table_cards and len({c.rank for c in self.table_cards}) != 1:
            raise ValueError("Table cards must share one rank")

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def new(
        cls,
        names: list[str],
        seed: Optional[int] = None,
        event_emitter: Optional[Callable[["GameEvent"], None]] = None,
    ) -> "Match":
        """
        Shuffle, deal and pick a random starting seat.

        Args:
            names: Four distinct player names, in seat order.
            seed: Optional seed for a reproducible deal and starting seat.
            event_emitter: Optional callback receiving GameEvents.

        Raises:
            ValueError: If names are not four distinct strings.
        """
        _validate_names(names)
        deck = Deck(seed)
        hands = deck.deal(PLAYERS_PER_MATCH, CARDS_PER_PLAYER)
        starting_seat = deck.rng.randrange(PLAYERS_PER_MATCH)

        match = cls.from_deal(names, hands, starting_seat, deck_seed=deck.seed)
        if event_emitter is not None:
            match.set_event_emitter(event_emitter)
        match._emit(
            "match_started",
            names=list(names),
            deck_seed=deck.seed,
            starting_seat=starting_seat,
            dealt_cards={
                str(p.seat): [{"suit": c.suit.value, "rank": c.rank.value} for c in p.sorted_hand()]
                for p in match.seats
            },
        )
        logger.info(
            f"Match {match.match_id} started, seat {starting_seat} ({names[starting_seat]}) leads"
        )
        return match

    @classmethod
    def from_deal(
        cls,
        names: list[str],
        hands: list[list[Card]],
        starting_seat: int,
        deck_seed: Optional[int] = None,
        match_id: Optional[str] = None,
    ) -> "Match":
        """
        Build a match from an already dealt set of hands.

        Used by Match.new() and by event replay.
        """
        _validate_names(names)
        if len(hands) != len(names):
            raise ValueError("One hand per player is required")
        seats = [
            Player(seat=idx, name=name, hand=set(hand))
            for idx, (name, hand) in enumerate(zip(names, hands))
        ]
        kwargs: dict[str, Any] = {}
        if match_id is not None:
            kwargs["match_id"] = match_id
        return cls(
            seats=seats,
            current_seat=starting_seat,
            starting_seat=starting_seat,
            deck_seed=deck_seed,
            **kwargs,
        )

    # -------------------------------------------------------------------------
    # Event emission
    # -------------------------------------------------------------------------

    def set_event_emitter(self, emitter: Callable[["GameEvent"], None]) -> None:
        """
        Set callback for event emission.

        The emitter will be called with each GameEvent as it occurs.

        Args:
            emitter: Callback function that receives GameEvent objects.
        """
        self._event_emitter = emitter

    def _emit(
        self,
        event_type: str,
        seat: Optional[int] = None,
        **data: Any,
    ) -> None:
        """
        Emit an event if emitter is configured.

        Args:
            event_type: Event type string (from EventType enum).
            seat: Seat that triggered the event.
            **data: Event-specific data fields.
        """
        if self._event_emitter is None:
            return

        # Import here to avoid circular dependency
        from models.events import GameEvent, EventType

        self._sequence_num += 1
        event = GameEvent(
            event_type=EventType(event_type),
            match_id=self.match_id,
            sequence_num=self._sequence_num,
            seat=seat,
            data=data,
        )
        self._event_emitter(event)

    # -------------------------------------------------------------------------
    # Turn Actions
    # -------------------------------------------------------------------------

    def _is_turn_of(self, seat: int) -> bool:
        if self.phase != MatchPhase.PLAYING:
            return False
        if not (0 <= seat < len(self.seats)):
            return False
        return seat == self.current_seat and not self.seats[seat].is_finished

    def table_value(self) -> Optional[int]:
        """Rank value of the cards on the table, or None when clear."""
        for card in self.table_cards:
            return card.value()
        return None

    def check_play(self, seat: int, cards: list[Card]) -> Optional[RejectReason]:
        """
        Validate a play without applying it.

        Checks run in a fixed order and the first failure wins:
        turn, card ownership, single rank, beat rule.

        Returns:
            None if the play is legal, otherwise the RejectReason.
        """
        if not self._is_turn_of(seat):
            return RejectReason.NOT_YOUR_TURN

        player = self.seats[seat]
        if not cards or len(set(cards)) != len(cards) or not player.has_cards(cards):
            return RejectReason.CARDS_NOT_IN_HAND

        if len({card.rank for card in cards}) != 1:
            return RejectReason.MIXED_RANK

        if self.table_cards:
            if len(cards) != len(self.table_cards):
                return RejectReason.CANNOT_BEAT
            if cards[0].value() <= self.table_value():
                return RejectReason.CANNOT_BEAT

        return None

    def play_cards(self, seat: int, cards: Iterable[Card]) -> ActionResult:
        """
        Play a group of same-rank cards from a seat's hand.

        On success the cards replace the table, the seat becomes round
        leader, skips are reset, and the turn advances. Emptying the hand
        assigns the next finish position.

        Args:
            seat: Acting seat.
            cards: Cards to play.

        Returns:
            ActionResult; falsy with a RejectReason if the play is illegal.
        """
        cards = list(cards)
        rejection = self.check_play(seat, cards)
        if rejection is not None:
            logger.debug(f"Seat {seat} play rejected: {rejection.value}")
            return ActionResult(self, rejection)

        player = self.seats[seat]
        played = frozenset(cards)
        player.remove_cards(played)

        self.discard_pile.extend(sort_cards(self.table_cards))
        self.table_cards = played
        self.round_leader = seat
        self.skipped_seats.clear()
        self.action_count += 1

        self._emit(
            "cards_played",
            seat=seat,
            cards=[{"suit": c.suit.value, "rank": c.rank.value} for c in sort_cards(played)],
        )
        logger.debug(
            f"Seat {seat} ({player.name}) played {len(played)}x {cards[0].rank.value}, "
            f"{len(player.hand)} left"
        )

        if not player.hand:
            self._finish_player(player)

        self._advance_turn()
        return ActionResult(self)

    def skip_turn(self, seat: int) -> ActionResult:
        """
        Pass instead of playing.

        After the turn advances, the round closes if it has come back
        around to the round leader or every other active seat has passed.
        The round leader then opens the next round on a clear table.

        Args:
            seat: Acting seat.

        Returns:
            ActionResult; falsy with NOT_YOUR_TURN if the seat may not act.
        """
        if not self._is_turn_of(seat):
            logger.debug(f"Seat {seat} skip rejected: not their turn")
            return ActionResult(self, RejectReason.NOT_YOUR_TURN)

        self.skipped_seats.add(seat)
        self.action_count += 1
        self._emit("turn_skipped", seat=seat)
        logger.debug(f"Seat {seat} ({self.seats[seat].name}) skipped")

        self._advance_turn()

        if self.round_leader is None:
            # Nothing on the table, so nothing to win.
            self.skipped_seats.clear()
            return ActionResult(self)

        others = [
            p.seat for p in self.active_players() if p.seat != self.round_leader
        ]
        all_others_skipped = all(s in self.skipped_seats for s in others)
        if self.current_seat == self.round_leader or all_others_skipped:
            self._close_round()

        return ActionResult(self)

    # -------------------------------------------------------------------------
    # Turn & Round Flow (Internal)
    # -------------------------------------------------------------------------

    def _advance_turn(self) -> None:
        """
        Step to the next seat still holding cards.

        Bounded to one lap so a fully finished table leaves the turn where
        it is.
        """
        num_seats = len(self.seats)
        seat = self.current_seat
        for _ in range(num_seats):
            seat = (seat + 1) % num_seats
            if not self.seats[seat].is_finished:
                self.current_seat = seat
                return

    def _clear_table(self) -> None:
        self.discard_pile.extend(sort_cards(self.table_cards))
        self.table_cards = frozenset()
        self.round_leader = None
        self.skipped_seats.clear()

    def _close_round(self) -> None:
        """The round leader wins the round and leads the next one."""
        winner = self.round_leader
        self._clear_table()
        self.current_seat = winner
        self._emit("round_closed", seat=winner)
        logger.info(f"Round won by seat {winner} ({self.seats[winner].name})")

    def _finish_player(self, player: Player) -> None:
        """
        Record a seat emptying its hand.

        When only one seat is left holding cards it is ranked last and the
        match ends. Otherwise the table is cleared: nobody can beat a seat
        that has already gone out, so the next active seat opens fresh.
        """
        self.finished_count += 1
        player.finish_position = self.finished_count
        self._emit(
            "player_finished",
            seat=player.seat,
            position=player.finish_position,
            title=player.title,
        )
        logger.info(
            f"Seat {player.seat} ({player.name}) finished {player.finish_position}: {player.title}"
        )

        if self.finished_count == len(self.seats) - 1:
            last = next(p for p in self.seats if not p.is_finished)
            self.finished_count += 1
            last.finish_position = len(self.seats)
            self._emit(
                "player_finished",
                seat=last.seat,
                position=last.finish_position,
                title=last.title,
            )
            self.phase = MatchPhase.GAME_OVER
            self._emit(
                "match_ended",
                ranking=[p.seat for p in self.ranking()],
            )
            logger.info(f"Match {self.match_id} over, {last.name} finishes last")
        else:
            self._clear_table()

    # -------------------------------------------------------------------------
    # State Queries
    # -------------------------------------------------------------------------

    def current_player(self) -> Player:
        """Get the player whose turn it currently is."""
        return self.seats[self.current_seat]

    def active_players(self) -> list[Player]:
        """Players still holding cards, in seat order."""
        return [p for p in self.seats if not p.is_finished]

    def is_game_over(self) -> bool:
        """True once at most one seat still holds cards."""
        return len(self.active_players()) <= 1

    def ranking(self) -> list[Player]:
        """Finished players ordered by finish position."""
        return sorted(
            (p for p in self.seats if p.is_finished),
            key=lambda p: p.finish_position,
        )

    def presidente(self) -> Optional[Player]:
        """The first seat to go out, once decided."""
        for player in self.seats:
            if player.is_presidente:
                return player
        return None

    def get_state(self, for_seat: Optional[int]) -> dict:
        """
        Get the match state as seen from one seat.

        Only the viewing seat's own cards are included; every other hand
        is reduced to a count. Pass None for a spectator view with no
        hand at all.

        Args:
            for_seat: The seat that will receive this state, or None.

        Returns:
            Dict suitable for JSON serialization.
        """
        own_hand: list[dict] = []
        if for_seat is not None and 0 <= for_seat < len(self.seats):
            own_hand = self.seats[for_seat].hand_to_dict()

        players_data = []
        for player in self.seats:
            players_data.append({
                "seat": player.seat,
                "name": player.name,
                "hand_count": len(player.hand),
                "finish_position": player.finish_position,
                "title": player.title,
                "is_presidente": player.is_presidente,
                "skipped": player.seat in self.skipped_seats,
            })

        return {
            "match_id": self.match_id,
            "phase": self.phase.value,
            "your_seat": for_seat,
            "own_hand": own_hand,
            "opponent_hand_counts": {
                p.seat: len(p.hand) for p in self.seats if p.seat != for_seat
            },
            "players": players_data,
            "current_seat": self.current_seat,
            "round_leader": self.round_leader,
            "table_cards": cards_to_dicts(self.table_cards),
            "skipped_seats": sorted(self.skipped_seats),
            "finish_positions": {
                p.seat: p.finish_position for p in self.seats if p.is_finished
            },
            "discard_count": len(self.discard_pile),
            "is_game_over": self.is_game_over(),
        }

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict:
        """
        Full server-side snapshot, including every hand.

        Never send this to a client; use get_state() instead.
        """
        return {
            "match_id": self.match_id,
            "seats": [
                {
                    "seat": p.seat,
                    "name": p.name,
                    "hand": p.hand_to_dict(),
                    "finish_position": p.finish_position,
                }
                for p in self.seats
            ],
            "current_seat": self.current_seat,
            "table_cards": cards_to_dicts(self.table_cards),
            "round_leader": self.round_leader,
            "skipped_seats": sorted(self.skipped_seats),
            "finished_count": self.finished_count,
            "phase": self.phase.value,
            "discard_pile": [c.to_dict() for c in self.discard_pile],
            "starting_seat": self.starting_seat,
            "deck_seed": self.deck_seed,
            "action_count": self.action_count,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Match":
        """Restore a match from a to_dict() snapshot."""
        seats = [
            Player(
                seat=s["seat"],
                name=s["name"],
                hand=set(parse_cards(s["hand"])),
                finish_position=s.get("finish_position"),
            )
            for s in d["seats"]
        ]
        return cls(
            seats=seats,
            current_seat=d["current_seat"],
            table_cards=frozenset(parse_cards(d["table_cards"])),
            round_leader=d.get("round_leader"),
            skipped_seats=set(d.get("skipped_seats", [])),
            finished_count=d.get("finished_count", 0),
            phase=MatchPhase(d.get("phase", MatchPhase.PLAYING.value)),
            discard_pile=parse_cards(d.get("discard_pile", [])),
            starting_seat=d.get("starting_seat", 0),
            deck_seed=d.get("deck_seed"),
            action_count=d.get("action_count", 0),
            match_id=d["match_id"],
        )


# =============================================================================
# Collaborator-facing contract
# =============================================================================

def create_match(
    names: list[str],
    seed: Optional[int] = None,
    event_emitter: Optional[Callable[["GameEvent"], None]] = None,
) -> Match:
    """Deal a fresh match for four named players."""
    return Match.new(names, seed=seed, event_emitter=event_emitter)


def play_cards(match: Match, seat: int, cards: Iterable[Card]) -> ActionResult:
    """Apply a play; see Match.play_cards."""
    return match.play_cards(seat, cards)


def skip_turn(match: Match, seat: int) -> ActionResult:
    """Apply a skip; see Match.skip_turn."""
    return match.skip_turn(seat)


def serialize_for_seat(match: Match, seat: Optional[int]) -> dict:
    """Redacted per-seat view; see Match.get_state."""
    return match.get_state(seat)
