"""WebSocket message handlers for the Presidente server.

Each handler corresponds to a single message type from the client.
Handlers are dispatched via the HANDLERS dict in main.py.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import WebSocket
from pydantic import BaseModel, Field, ValidationError

from game import Card, Rank, Suit, play_cards, skip_turn
from logging_config import get_logger
from room import Room, RoomError

logger = get_logger(__name__)

MAX_CHAT_LENGTH = 500


@dataclass
class ConnectionContext:
    """State tracked per WebSocket connection."""

    websocket: WebSocket
    connection_id: str
    player_id: str
    current_room: Optional[Room] = None


class CardPayload(BaseModel):
    """A card as sent by the client."""
    suit: Suit
    rank: Rank

    def to_card(self) -> Card:
        return Card(self.suit, self.rank)


class PlayCardsMessage(BaseModel):
    """Payload of a play_cards message."""
    cards: list[CardPayload] = Field(default_factory=list)


async def _send_rejection(ctx: ConnectionContext, rejection) -> None:
    await ctx.websocket.send_json({
        "type": "action_rejected",
        "reason": rejection.value,
        "message": rejection.message,
    })


async def _deal_and_announce(room: Room, broadcast_game_state) -> None:
    """Deal a match for the seated players and push the opening state. Caller holds the lock."""
    match = room.start_match()
    logger.with_context(room_code=room.code, match_id=match.match_id).info(
        f"Match started, seat {match.current_seat} leads"
    )
    await room.broadcast({
        "type": "match_started",
        "match_id": match.match_id,
        "starting_seat": match.starting_seat,
        "players": room.player_list(),
    })
    await broadcast_game_state(room)


# ---------------------------------------------------------------------------
# Lobby / Room handlers
# ---------------------------------------------------------------------------

async def handle_create_room(data: dict, ctx: ConnectionContext, *, room_manager, **kw) -> None:
    if ctx.current_room:
        await ctx.websocket.send_json({"type": "error", "message": "Already in a room"})
        return

    player_name = str(data.get("player_name") or "Player")
    room = room_manager.create_room()
    room_player = room.add_player(ctx.player_id, player_name, ctx.websocket)
    ctx.current_room = room

    logger.with_context(room_code=room.code).info(f"{room_player.name} created room")

    await ctx.websocket.send_json({
        "type": "room_created",
        "room_code": room.code,
        "player_id": ctx.player_id,
        "seat": room_player.seat,
    })

    await room.broadcast({
        "type": "player_joined",
        "players": room.player_list(),
    })


async def handle_join_room(data: dict, ctx: ConnectionContext, *, room_manager, broadcast_game_state, **kw) -> None:
    room_code = str(data.get("room_code", "")).upper()
    player_name = str(data.get("player_name") or "Player")

    if ctx.current_room:
        await ctx.websocket.send_json({"type": "error", "message": "Already in a room"})
        return

    room = room_manager.get_room(room_code)
    if not room:
        await ctx.websocket.send_json({"type": "error", "message": "Room not found"})
        return

    async with room.game_lock:
        try:
            room_player = room.add_player(ctx.player_id, player_name, ctx.websocket)
        except RoomError as e:
            await ctx.websocket.send_json({"type": "error", "message": str(e)})
            return
        ctx.current_room = room

        await ctx.websocket.send_json({
            "type": "room_joined",
            "room_code": room.code,
            "player_id": ctx.player_id,
            "seat": room_player.seat,
        })

        await room.broadcast({
            "type": "player_joined",
            "players": room.player_list(),
        })

        # Deal as soon as the last seat is taken
        if room.is_full() and room.match is None:
            await _deal_and_announce(room, broadcast_game_state)


async def handle_list_rooms(data: dict, ctx: ConnectionContext, *, room_manager, **kw) -> None:
    await ctx.websocket.send_json({
        "type": "room_list",
        "rooms": room_manager.available_rooms(),
    })


async def handle_chat(data: dict, ctx: ConnectionContext, **kw) -> None:
    if not ctx.current_room:
        return

    room_player = ctx.current_room.get_player(ctx.player_id)
    message = str(data.get("message", "")).strip()[:MAX_CHAT_LENGTH]
    if not room_player or not message:
        return

    await ctx.current_room.broadcast({
        "type": "chat",
        "name": room_player.name,
        "seat": room_player.seat,
        "message": message,
    })


# ---------------------------------------------------------------------------
# Turn action handlers
# ---------------------------------------------------------------------------

async def handle_play_cards(data: dict, ctx: ConnectionContext, *, broadcast_game_state, **kw) -> None:
    room = ctx.current_room
    if not room:
        return

    try:
        message = PlayCardsMessage.model_validate(data)
    except ValidationError as e:
        logger.debug(f"Malformed play_cards from {ctx.player_id}: {e.error_count()} errors")
        await ctx.websocket.send_json({"type": "error", "message": "Malformed cards"})
        return
    cards = [payload.to_card() for payload in message.cards]

    async with room.game_lock:
        room_player = room.get_player(ctx.player_id)
        if room.match is None or room_player is None:
            await ctx.websocket.send_json({"type": "error", "message": "No match in progress"})
            return

        result = play_cards(room.match, room_player.seat, cards)
        if not result:
            logger.with_context(room_code=room.code, seat=room_player.seat).debug(
                f"Play rejected: {result.rejection.value}"
            )
            await _send_rejection(ctx, result.rejection)
            return

        await broadcast_game_state(room)


async def handle_skip_turn(data: dict, ctx: ConnectionContext, *, broadcast_game_state, **kw) -> None:
    room = ctx.current_room
    if not room:
        return

    async with room.game_lock:
        room_player = room.get_player(ctx.player_id)
        if room.match is None or room_player is None:
            await ctx.websocket.send_json({"type": "error", "message": "No match in progress"})
            return

        result = skip_turn(room.match, room_player.seat)
        if not result:
            await _send_rejection(ctx, result.rejection)
            return

        await broadcast_game_state(room)


async def handle_new_match(data: dict, ctx: ConnectionContext, *, broadcast_game_state, **kw) -> None:
    """Host re-deals for the same table once the previous match is over."""
    room = ctx.current_room
    if not room:
        return

    async with room.game_lock:
        room_player = room.get_player(ctx.player_id)
        if room_player is None or not room_player.is_host:
            await ctx.websocket.send_json({"type": "error", "message": "Only the host can start a new match"})
            return
        if room.phase != "game_over":
            await ctx.websocket.send_json({"type": "error", "message": "Current match is not over"})
            return

        try:
            await _deal_and_announce(room, broadcast_game_state)
        except RoomError as e:
            await ctx.websocket.send_json({"type": "error", "message": str(e)})


# ---------------------------------------------------------------------------
# Leave handlers
# ---------------------------------------------------------------------------

async def handle_leave_room(data: dict, ctx: ConnectionContext, *, handle_player_leave, **kw) -> None:
    if ctx.current_room:
        await handle_player_leave(ctx.current_room, ctx.player_id)
        ctx.current_room = None


# ---------------------------------------------------------------------------
# Handler dispatch table
# ---------------------------------------------------------------------------

HANDLERS = {
    "create_room": handle_create_room,
    "join_room": handle_join_room,
    "list_rooms": handle_list_rooms,
    "chat": handle_chat,
    "play_cards": handle_play_cards,
    "skip_turn": handle_skip_turn,
    "new_match": handle_new_match,
    "leave_room": handle_leave_room,
}
