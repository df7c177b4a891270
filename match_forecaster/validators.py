import re
from typing import Any, List, Optional

from .config import setup_logger
from .domain.contracts import MatchForecast
from .errors import PayloadError

logger = setup_logger(__name__)

# Numeric user/group ids (groups and channels are negative) or @channel names.
_CHAT_ID_RE = re.compile(r"^(-?\d{1,20}|@[A-Za-z][A-Za-z0-9_]{4,31})$")

MAX_CHAT_NAME_LENGTH = 64


def validate_chat_id(raw: Any) -> str:
    """Return a trimmed Telegram chat id or raise PayloadError."""
    if isinstance(raw, bool) or raw is None:
        raise PayloadError("chat_id", "Chat ID is required")
    chat_id = str(raw).strip()
    if not chat_id:
        raise PayloadError("chat_id", "Chat ID is required")
    if not _CHAT_ID_RE.match(chat_id):
        logger.warning("chat_id_invalid: %s", chat_id)
        raise PayloadError("chat_id", f"Invalid chat id: {chat_id}")
    return chat_id


def validate_chat_ids(payload: dict) -> List[str]:
    """Collect ``chat_id`` and ``chat_ids`` from a request body, de-duplicated in order."""
    candidates: List[Any] = []
    if payload.get("chat_id") not in (None, ""):
        candidates.append(payload["chat_id"])
    extra = payload.get("chat_ids")
    if extra is not None:
        if not isinstance(extra, list):
            raise PayloadError("chat_ids", "must be a list")
        candidates.extend(extra)

    seen: List[str] = []
    for raw in candidates:
        chat_id = validate_chat_id(raw)
        if chat_id not in seen:
            seen.append(chat_id)
    return seen


def normalize_chat_name(name: Optional[str]) -> Optional[str]:
    """Trim/collapse spaces; return None if empty."""
    if not name:
        return None
    n = " ".join(str(name).strip().split())
    return n[:MAX_CHAT_NAME_LENGTH] if n else None


def validate_chat_name(name: Any) -> str:
    n = normalize_chat_name(name if isinstance(name, str) else None)
    if n is None:
        raise PayloadError("name", "Chat name is required")
    return n


def parse_forecasts(raw: Any) -> List[MatchForecast]:
    """Rebuild the forecasts a client posted back; empty input is rejected."""
    if not isinstance(raw, list) or not raw:
        raise PayloadError("predictions", "No predictions to send")
    return [MatchForecast.from_dict(item) for item in raw]
