"""FastAPI WebSocket server for Presidente."""

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from functools import partial

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect

from config import config
from game import Match, MatchPhase, skip_turn
from handlers import HANDLERS, ConnectionContext
from logging_config import connection_id_var, match_id_var, room_code_var, setup_logging
from room import Room, RoomManager
from routers.health import router as health_router, set_health_dependencies
from score_log import ScoreLog, get_score_log, set_score_log

# Configure logging based on environment
setup_logging(
    level=config.LOG_LEVEL,
    environment=config.ENVIRONMENT,
)
logger = logging.getLogger(__name__)

room_manager = RoomManager(code_length=config.ROOM_CODE_LENGTH)

# Strong references to fire-and-forget work (score recording)
_background_tasks: set[asyncio.Task] = set()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    if config.SCORES_DB_PATH:
        set_score_log(ScoreLog(config.SCORES_DB_PATH))
    else:
        logger.warning("SCORES_DB_PATH not configured - standings will not be recorded")

    set_health_dependencies(room_manager=room_manager)

    logger.info(f"Presidente server started (environment={config.ENVIRONMENT})")

    yield

    logger.info("Shutdown initiated...")
    await _close_all_websockets()
    for code in list(room_manager.rooms):
        room_manager.remove_room(code)
    if _background_tasks:
        await asyncio.gather(*_background_tasks)
    set_score_log(None)
    logger.info("Shutdown complete")


async def _close_all_websockets():
    """Close all active WebSocket connections gracefully."""
    for room in list(room_manager.rooms.values()):
        for player in room.players.values():
            if player.websocket:
                try:
                    await player.websocket.close(code=1001, reason="Server shutting down")
                except Exception as e:
                    logger.debug(f"Close failed for {player.id}: {e}")
    logger.info("All WebSocket connections closed")


app = FastAPI(
    title="Presidente",
    debug=config.DEBUG,
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(health_router)


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    await websocket.accept()

    connection_id = str(uuid.uuid4())
    connection_id_var.set(connection_id)
    logger.debug("WebSocket connected")

    ctx = ConnectionContext(
        websocket=websocket,
        connection_id=connection_id,
        player_id=connection_id,
    )

    # Shared dependencies passed to every handler
    handler_deps = dict(
        room_manager=room_manager,
        broadcast_game_state=broadcast_game_state,
        handle_player_leave=handle_player_leave,
    )

    await websocket.send_json({"type": "room_list", "rooms": room_manager.available_rooms()})

    try:
        while True:
            try:
                data = await websocket.receive_json()
            except ValueError:
                await websocket.send_json({"type": "error", "message": "Malformed message"})
                continue
            handler = HANDLERS.get(data.get("type")) if isinstance(data, dict) else None
            if handler:
                await handler(data, ctx, **handler_deps)
            else:
                await websocket.send_json({"type": "error", "message": "Unknown message type"})
            if ctx.current_room:
                room_code_var.set(ctx.current_room.code)
    except WebSocketDisconnect:
        logger.debug("WebSocket disconnected")
    except Exception:
        logger.exception("WebSocket handler failed, dropping connection")
    finally:
        # Free the seat however the loop ended
        if ctx.current_room:
            await handle_player_leave(ctx.current_room, ctx.player_id)
            ctx.current_room = None


async def broadcast_game_state(room: Room):
    """
    Send every seated player their own view of the match.

    Also tells the seat to move that it is their turn, announces the final
    ranking once the match is over, and (re)arms the turn timer.
    Callers hold room.game_lock.
    """
    match = room.match
    if match is None:
        return
    match_id_var.set(match.match_id)

    ranking = [
        {"seat": p.seat, "name": p.name, "position": p.finish_position, "title": p.title}
        for p in match.ranking()
    ]

    for pid, player in list(room.players.items()):
        await room.send_to(pid, {
            "type": "game_state",
            "game_state": match.get_state(player.seat),
        })

        if match.phase == MatchPhase.GAME_OVER:
            await room.send_to(pid, {"type": "match_over", "ranking": ranking})
        elif match.current_seat == player.seat:
            await room.send_to(pid, {"type": "your_turn"})

    if match.phase == MatchPhase.GAME_OVER:
        room.cancel_turn_timer()
        if get_score_log():
            task = asyncio.create_task(_record_match_safe(match, room.code))
            _background_tasks.add(task)
            task.add_done_callback(_background_tasks.discard)
    else:
        room.arm_turn_timer(config.TURN_TIMEOUT_SECONDS, partial(expire_turn, room))


async def _record_match_safe(match: Match, room_code: str):
    """
    Write a finished match to the score log in a worker thread.

    Started with asyncio.create_task once match_over has gone out.
    Failures are logged and dropped.
    """
    score_log = get_score_log()
    if score_log is None:
        return
    try:
        await asyncio.to_thread(score_log.record_match, match, room_code)
    except Exception as e:
        logger.error(f"Failed to record match {match.match_id} from room {room_code}: {e}")


async def expire_turn(room: Room, expected_action_count: int):
    """Skip the seat to move if nothing has happened since the timer was armed."""
    async with room.game_lock:
        match = room.match
        if match is None or match.phase != MatchPhase.PLAYING:
            return
        if match.action_count != expected_action_count:
            return

        seat = match.current_seat
        if not skip_turn(match, seat):
            return
        logger.info(f"Room {room.code}: seat {seat} timed out and was skipped")

        # The seat may be empty if its player left mid-match
        room_player = room.get_player_by_seat(seat)
        await room.broadcast({
            "type": "turn_timeout",
            "seat": seat,
            "player_name": room_player.name if room_player else match.seats[seat].name,
        })
        await broadcast_game_state(room)


async def handle_player_leave(room: Room, player_id: str):
    """Handle a player leaving a room."""
    room_player = room.remove_player(player_id)

    if room.is_empty():
        room_manager.remove_room(room.code)
        logger.info(f"Room {room.code} closed")
    elif room_player:
        await room.broadcast({
            "type": "player_left",
            "player_id": player_id,
            "player_name": room_player.name,
            "seat": room_player.seat,
            "players": room.player_list(),
        })


@app.get("/api/rooms")
async def list_rooms():
    """Rooms still waiting for players."""
    return {"rooms": room_manager.available_rooms()}


@app.get("/api/scores")
async def get_scores():
    """Finish standings per player name."""
    score_log = get_score_log()
    return {"standings": score_log.get_standings() if score_log else []}


@app.delete("/api/scores")
async def reset_scores():
    """Forget every recorded match."""
    score_log = get_score_log()
    if score_log is None:
        raise HTTPException(status_code=404, detail="Score log not configured")
    await asyncio.to_thread(score_log.reset)
    logger.info("Score log reset")
    return {"standings": []}


def run():
    """Run the server using uvicorn."""
    import uvicorn

    logger.info(f"Starting Presidente server on {config.HOST}:{config.PORT}")
    logger.info(f"Debug mode: {config.DEBUG}")

    uvicorn.run(
        "main:app",
        host=config.HOST,
        port=config.PORT,
        reload=config.DEBUG,
        log_level=config.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
