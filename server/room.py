"""
Room management for multiplayer Presidente matches.

This module handles room creation, seat assignment, and WebSocket
communication for multiplayer sessions.

A Room contains:
    - A unique 4-letter code for joining
    - Up to four RoomPlayers, each holding a fixed seat
    - A Match instance once all four seats are filled
    - An asyncio.Lock that serializes every engine call for the room
"""

import asyncio
import logging
import random
import string
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

from fastapi import WebSocket

from constants import PLAYERS_PER_MATCH
from game import Match, MatchPhase
from models.events import GameEvent

logger = logging.getLogger(__name__)


class RoomError(Exception):
    """Base class for room-level refusals."""


class RoomFullError(RoomError):
    """All seats are taken."""


class MatchInProgressError(RoomError):
    """A match is being played."""


@dataclass
class RoomPlayer:
    """
    A player in a game room (lobby-level representation).

    This is separate from game.Player - RoomPlayer tracks the connection
    and host status, while game.Player tracks the hand and finish position.

    Attributes:
        id: Unique player identifier (connection_id).
        name: Display name, unique within the room.
        seat: Seat index 0-3, fixed for the match.
        websocket: WebSocket connection.
        is_host: Whether this player created the room.
    """

    id: str
    name: str
    seat: int
    websocket: Optional[WebSocket] = None
    is_host: bool = False


@dataclass
class Room:
    """
    A game room/lobby hosting one Presidente match.

    Attributes:
        code: 4-letter room code for joining (e.g., "ABCD").
        players: Dict mapping player IDs to RoomPlayer objects.
        match: The Match, once started.
        events: Events emitted by the match, in order.
        game_lock: asyncio.Lock serializing match actions.
        turn_timer: Pending turn-timeout task, if armed.
    """

    code: str
    players: dict[str, RoomPlayer] = field(default_factory=dict)
    match: Optional[Match] = None
    events: list[GameEvent] = field(default_factory=list)
    game_lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    turn_timer: Optional[asyncio.Task] = field(default=None, repr=False)

    @property
    def phase(self) -> str:
        """'waiting' before the deal, then the match phase."""
        if self.match is None:
            return "waiting"
        return self.match.phase.value

    def is_full(self) -> bool:
        return len(self.players) >= PLAYERS_PER_MATCH

    def is_empty(self) -> bool:
        """Check if the room has no players."""
        return len(self.players) == 0

    def _free_seat(self) -> int:
        taken = {p.seat for p in self.players.values()}
        return next(seat for seat in range(PLAYERS_PER_MATCH) if seat not in taken)

    def _unique_name(self, name: str) -> str:
        names = {p.name for p in self.players.values()}
        if name not in names:
            return name
        suffix = 2
        while f"{name} ({suffix})" in names:
            suffix += 1
        return f"{name} ({suffix})"

    def add_player(
        self,
        player_id: str,
        name: str,
        websocket: Optional[WebSocket] = None,
    ) -> RoomPlayer:
        """
        Seat a player in the lowest free seat.

        The first player to join becomes the host. A seat freed after a
        match ended can be taken before the next deal. Names are made unique
        within the room by suffixing duplicates.

        Args:
            player_id: Unique identifier for the player (connection_id).
            name: Display name.
            websocket: The player's WebSocket connection.

        Returns:
            The RoomPlayer (the existing one if already seated).

        Raises:
            MatchInProgressError: If a match is being played.
            RoomFullError: If all four seats are taken.
        """
        if player_id in self.players:
            return self.players[player_id]
        if self.match is not None and not self.match.is_game_over():
            raise MatchInProgressError(f"Room {self.code} already in progress")
        if self.is_full():
            raise RoomFullError(f"Room {self.code} is full")

        room_player = RoomPlayer(
            id=player_id,
            name=self._unique_name(name),
            seat=self._free_seat(),
            websocket=websocket,
            is_host=self.is_empty(),
        )
        self.players[player_id] = room_player
        return room_player

    def remove_player(self, player_id: str) -> Optional[RoomPlayer]:
        """
        Remove a player from the room.

        The seat stays in the match (if any); the turn timer keeps the
        game moving past an absent seat.

        Returns:
            The removed RoomPlayer, or None if not found.
        """
        if player_id not in self.players:
            return None

        room_player = self.players.pop(player_id)

        # Assign new host if needed
        if room_player.is_host and self.players:
            next_host = min(self.players.values(), key=lambda p: p.seat)
            next_host.is_host = True

        return room_player

    def get_player(self, player_id: str) -> Optional[RoomPlayer]:
        """Get a player by ID, or None if not found."""
        return self.players.get(player_id)

    def get_player_by_seat(self, seat: int) -> Optional[RoomPlayer]:
        for player in self.players.values():
            if player.seat == seat:
                return player
        return None

    def player_list(self) -> list[dict]:
        """Players in seat order for client display."""
        return [
            {"id": p.id, "name": p.name, "seat": p.seat, "is_host": p.is_host}
            for p in sorted(self.players.values(), key=lambda p: p.seat)
        ]

    def summary(self) -> dict:
        """Short description for room listings."""
        return {
            "code": self.code,
            "count": len(self.players),
            "status": self.phase,
        }

    # -------------------------------------------------------------------------
    # Match lifecycle
    # -------------------------------------------------------------------------

    def start_match(self, seed: Optional[int] = None) -> Match:
        """
        Deal a match once every seat is filled.

        A finished match may be replaced by a fresh deal for the same table;
        its events are discarded.

        Raises:
            MatchInProgressError: If a match is still being played.
            RoomError: If seats are still empty.
        """
        if self.match is not None and not self.match.is_game_over():
            raise MatchInProgressError(f"Room {self.code} already in progress")
        if not self.is_full():
            raise RoomError(f"Room {self.code} needs {PLAYERS_PER_MATCH} players")

        names = [p.name for p in sorted(self.players.values(), key=lambda p: p.seat)]
        self.events = []
        self.match = Match.new(names, seed=seed, event_emitter=self.events.append)
        logger.info(f"Room {self.code} dealt match {self.match.match_id}")
        return self.match

    def arm_turn_timer(
        self,
        timeout: float,
        on_expire: Callable[[int], Awaitable[None]],
    ) -> None:
        """
        (Re)start the per-turn timeout.

        After `timeout` seconds `on_expire` is awaited with the match's
        action_count as it was when armed, so the callback can tell
        whether the turn has since moved on.
        """
        self.cancel_turn_timer()
        if timeout <= 0 or self.match is None or self.match.phase != MatchPhase.PLAYING:
            return

        expected = self.match.action_count

        async def _wait() -> None:
            await asyncio.sleep(timeout)
            await on_expire(expected)

        self.turn_timer = asyncio.create_task(_wait())

    def cancel_turn_timer(self) -> None:
        timer = self.turn_timer
        self.turn_timer = None
        if timer is None or timer.done():
            return
        # The expiry callback re-arms from inside the timer task itself.
        if timer is asyncio.current_task():
            return
        timer.cancel()

    # -------------------------------------------------------------------------
    # Messaging
    # -------------------------------------------------------------------------

    async def broadcast(self, message: dict, exclude: Optional[str] = None) -> None:
        """
        Send a message to all connected players in the room.

        Args:
            message: JSON-serializable message dict.
            exclude: Optional player ID to skip.
        """
        for player_id in list(self.players):
            if player_id != exclude:
                await self.send_to(player_id, message)

    async def send_to(self, player_id: str, message: dict) -> None:
        """
        Send a message to a specific player.

        A failed send is logged and dropped; the disconnect handler
        removes the player.
        """
        player = self.players.get(player_id)
        if player and player.websocket:
            try:
                await player.websocket.send_json(message)
            except Exception as e:
                logger.warning(f"Send to {player_id} in room {self.code} failed: {e}")


class RoomManager:
    """
    Manages all active game rooms.

    Provides room creation with unique codes, lookup, and cleanup.
    A single RoomManager instance is used by the server.
    """

    def __init__(self, code_length: int = 4) -> None:
        """Initialize an empty room manager."""
        self.rooms: dict[str, Room] = {}
        self.code_length = code_length

    def _generate_code(self, max_attempts: int = 100) -> str:
        """Generate a unique room code."""
        for _ in range(max_attempts):
            code = "".join(random.choices(string.ascii_uppercase, k=self.code_length))
            if code not in self.rooms:
                return code
        raise RuntimeError("Could not generate unique room code")

    def create_room(self) -> Room:
        """Create a new room with a unique code."""
        code = self._generate_code()
        room = Room(code=code)
        self.rooms[code] = room
        return room

    def get_room(self, code: str) -> Optional[Room]:
        """Get a room by its code (case-insensitive)."""
        return self.rooms.get(code.upper())

    def remove_room(self, code: str) -> None:
        """Delete a room, cancelling its turn timer."""
        room = self.rooms.pop(code, None)
        if room:
            room.cancel_turn_timer()

    def available_rooms(self) -> list[dict]:
        """Rooms with a free seat and no match being played."""
        return [
            room.summary()
            for room in self.rooms.values()
            if not room.is_full()
            and (room.match is None or room.match.is_game_over())
        ]
