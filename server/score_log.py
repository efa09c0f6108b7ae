"""SQLite log of finished Presidente matches and per-name standings."""

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from game import Match

logger = logging.getLogger(__name__)


class ScoreLog:
    """Records every finished match and tallies finish positions by player name."""

    def __init__(self, db_path: str = "scores.db"):
        self.db_path = Path(db_path)
        self._init_db()

    def _init_db(self):
        """Initialize database schema."""
        with sqlite3.connect(self.db_path) as conn:
            conn.executescript("""
                -- One row per finished match
                CREATE TABLE IF NOT EXISTS matches (
                    id TEXT PRIMARY KEY,
                    room_code TEXT,
                    ended_at TIMESTAMP,
                    deck_seed INTEGER,
                    actions INTEGER
                );

                -- One row per seat in a finished match
                CREATE TABLE IF NOT EXISTS finishes (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    match_id TEXT REFERENCES matches(id),
                    seat INTEGER,
                    player_name TEXT,
                    position INTEGER,
                    title TEXT
                );

                CREATE INDEX IF NOT EXISTS idx_finishes_name ON finishes(player_name);
            """)

    def record_match(self, match: Match, room_code: Optional[str] = None) -> bool:
        """
        Store the final ranking of a finished match.

        Returns:
            False if the match is not over or was already recorded.
        """
        if not match.is_game_over():
            return False

        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "INSERT OR IGNORE INTO matches (id, room_code, ended_at, deck_seed, actions) "
                "VALUES (?, ?, ?, ?, ?)",
                (
                    match.match_id,
                    room_code,
                    datetime.now(timezone.utc).isoformat(),
                    match.deck_seed,
                    match.action_count,
                ),
            )
            if cursor.rowcount == 0:
                return False
            conn.executemany(
                "INSERT INTO finishes (match_id, seat, player_name, position, title) "
                "VALUES (?, ?, ?, ?, ?)",
                [
                    (match.match_id, p.seat, p.name, p.finish_position, p.title)
                    for p in match.ranking()
                ],
            )

        logger.info(f"Recorded match {match.match_id} from room {room_code}")
        return True

    def get_standings(self) -> list[dict]:
        """
        Finish counts per player name.

        Ordered by first places, then second places, and so on.
        """
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.execute("""
                SELECT player_name AS name,
                       SUM(position = 1) AS first,
                       SUM(position = 2) AS second,
                       SUM(position = 3) AS third,
                       SUM(position = 4) AS fourth,
                       COUNT(*) AS total_games
                FROM finishes
                GROUP BY player_name
                ORDER BY first DESC, second DESC, third DESC, total_games DESC, name
            """)
            return [dict(row) for row in cursor.fetchall()]

    def reset(self):
        """Delete all recorded matches."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM finishes")
            conn.execute("DELETE FROM matches")


# Global score log instance (set during application startup)
_score_log: Optional[ScoreLog] = None


def get_score_log() -> Optional[ScoreLog]:
    """
    Get the global score log instance.

    Returns:
        ScoreLog if configured, None otherwise.
    """
    return _score_log


def set_score_log(score_log: Optional[ScoreLog]) -> None:
    """Set (or clear) the global score log instance."""
    global _score_log
    _score_log = score_log
