from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from .constants import (
    API_FOOTBALL_BASE_URL,
    API_TIMEOUT_FOOTBALL,
    API_TIMEOUT_TELEGRAM,
    TELEGRAM_API_BASE_URL,
)


def _get_bool(env: Mapping[str, str], name: str, default: bool = False) -> bool:
    val = env.get(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def _get_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not str(raw).strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_int(env: Mapping[str, str], name: str) -> Optional[int]:
    raw = env.get(name)
    if raw is None or not str(raw).strip():
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _read_secret_file(path: str | None) -> str | None:
    if not path:
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return None


def _secret(env: Mapping[str, str], name: str) -> Optional[str]:
    return env.get(name) or _read_secret_file(env.get(f"{name}_FILE"))


def _split_csv(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return tuple()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    """Runtime configuration handed to the upstream clients and the app."""

    football_api_key: Optional[str] = None
    football_api_base: str = API_FOOTBALL_BASE_URL
    football_api_timeout: float = API_TIMEOUT_FOOTBALL
    season: Optional[int] = None
    telegram_bot_token: Optional[str] = None
    telegram_api_base: str = TELEGRAM_API_BASE_URL
    telegram_timeout: float = API_TIMEOUT_TELEGRAM
    telegram_chat_ids: Tuple[str, ...] = field(default_factory=tuple)
    display_timezone: str = "UTC"
    debug: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from the process environment (after loading ``.env``)."""

        if env is None:
            # Load .env from repo root (dotenv auto-walks up from CWD)
            load_dotenv()
            env = os.environ

        return cls(
            football_api_key=_secret(env, "FOOTBALL_API_KEY"),
            football_api_base=env.get("FOOTBALL_API_BASE", API_FOOTBALL_BASE_URL).rstrip("/"),
            football_api_timeout=_get_float(env, "FOOTBALL_API_TIMEOUT", API_TIMEOUT_FOOTBALL),
            season=_get_int(env, "FOOTBALL_SEASON"),
            telegram_bot_token=_secret(env, "TELEGRAM_BOT_TOKEN"),
            telegram_api_base=env.get("TELEGRAM_API_BASE", TELEGRAM_API_BASE_URL).rstrip("/"),
            telegram_timeout=_get_float(env, "TELEGRAM_TIMEOUT", API_TIMEOUT_TELEGRAM),
            telegram_chat_ids=_split_csv(env.get("TELEGRAM_CHAT_IDS")),
            display_timezone=env.get("DISPLAY_TIMEZONE", "UTC").strip() or "UTC",
            debug=_get_bool(env, "FLASK_DEBUG", False),
        )
