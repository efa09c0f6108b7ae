"""
Server settings for Presidente.

Values come from the process environment. A `.env` file at the project
root is loaded first (python-dotenv never overrides variables that are
already set), and anything still missing falls back to the defaults on
ServerConfig.

Usage:
    from config import config
    config.TURN_TIMEOUT_SECONDS
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

_DOTENV = Path(__file__).resolve().parent.parent / ".env"
if _DOTENV.is_file():
    load_dotenv(_DOTENV)

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def get_env(key: str, default: str = "") -> str:
    """Raw string value, or the default when unset."""
    return os.environ.get(key, default)


def get_env_bool(key: str, default: bool = False) -> bool:
    """Boolean value; unrecognised spellings give the default."""
    raw = os.environ.get(key, "").strip().lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    return default


def get_env_int(key: str, default: int = 0) -> int:
    """Integer value; unset or unparsable gives the default."""
    raw = os.environ.get(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class ServerConfig:
    """Everything the server reads from the environment."""

    # Network / runtime
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # Letters in a generated room code
    ROOM_CODE_LENGTH: int = 4

    # Seconds a seat may think before it is skipped automatically (0 = never)
    TURN_TIMEOUT_SECONDS: int = 30

    # SQLite file for finish standings (empty = disabled)
    SCORES_DB_PATH: str = "scores.db"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        defaults = cls()
        return cls(
            HOST=get_env("HOST", defaults.HOST),
            PORT=get_env_int("PORT", defaults.PORT),
            DEBUG=get_env_bool("DEBUG", defaults.DEBUG),
            LOG_LEVEL=get_env("LOG_LEVEL", defaults.LOG_LEVEL),
            ENVIRONMENT=get_env("ENVIRONMENT", defaults.ENVIRONMENT),
            ROOM_CODE_LENGTH=get_env_int("ROOM_CODE_LENGTH", defaults.ROOM_CODE_LENGTH),
            TURN_TIMEOUT_SECONDS=get_env_int("TURN_TIMEOUT_SECONDS", defaults.TURN_TIMEOUT_SECONDS),
            SCORES_DB_PATH=get_env("SCORES_DB_PATH", defaults.SCORES_DB_PATH),
        )


config = ServerConfig.from_env()
