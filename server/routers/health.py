"""
Health check endpoints for production deployment.

Provides:
- /health - Basic liveness check (is the app running?)
- /ready - Readiness check (can the score log be reached?)
- /metrics - Room and match counts for monitoring
"""

import logging
import sqlite3
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from game import MatchPhase
from score_log import get_score_log

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

# Service references (set during app initialization)
_room_manager = None


class MetricsResponse(BaseModel):
    """Operational counters."""
    timestamp: str
    active_rooms: int = 0
    waiting_rooms: int = 0
    matches_in_progress: int = 0
    total_players: int = 0


def set_health_dependencies(room_manager=None):
    """Set dependencies for health checks."""
    global _room_manager
    _room_manager = room_manager


@router.get("/health")
async def health_check():
    """
    Basic liveness check - is the app running?

    This endpoint should always return 200 if the process is alive.
    """
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/ready")
async def readiness_check():
    """
    Readiness check: 503 while the configured score log cannot be queried.

    A server running without a score log is always ready.
    """
    score_log = get_score_log()
    if score_log is None:
        check = {"status": "not_configured"}
    else:
        try:
            score_log.get_standings()
            check = {"status": "ok"}
        except sqlite3.Error as e:
            logger.warning(f"Score log unavailable: {e}")
            check = {"status": "error", "message": str(e)}

    healthy = check["status"] != "error"
    return JSONResponse(
        {
            "status": "ok" if healthy else "degraded",
            "checks": {"score_log": check},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        status_code=200 if healthy else 503,
    )


@router.get("/metrics", response_model=MetricsResponse)
async def metrics():
    """
    Expose application metrics for monitoring.

    Returns operational metrics useful for dashboards and alerting.
    """
    result = MetricsResponse(timestamp=datetime.now(timezone.utc).isoformat())

    if _room_manager is not None:
        rooms = list(_room_manager.rooms.values())
        result.active_rooms = len(rooms)
        result.waiting_rooms = sum(1 for r in rooms if r.match is None)
        result.matches_in_progress = sum(
            1 for r in rooms
            if r.match is not None and r.match.phase == MatchPhase.PLAYING
        )
        result.total_players = sum(len(r.players) for r in rooms)

    return result
