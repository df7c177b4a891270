"""
Utility functions shared by the forecaster modules.
"""

import logging
import re
from datetime import datetime, timezone, tzinfo
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")


def coerce_number(value: Any) -> Optional[float]:
    """
    Read a numeric value from an upstream payload field.

    API-Football reports some figures as strings ("1.6", "45%"). Booleans,
    empty strings and anything without a number yield None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _NUMBER_RE.search(value)
        if match:
            return float(match.group(0))
    return None


def dig(payload: Any, *path: str) -> Any:
    """Walk nested mappings, returning None as soon as a level is missing."""
    current = payload
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def get_current_season(now: Optional[datetime] = None) -> int:
    """
    Season year used for team statistics lookups.

    API-Football keys seasons by their start year; the calendar year is used
    here so that calendar-year leagues (South America) resolve correctly.
    """
    now = now or datetime.now(timezone.utc)
    return now.year


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """Return a tzinfo for ``name``, falling back to UTC when unknown."""
    if not name or name.strip().upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("display_timezone_unknown: %s, using UTC", name)
        return timezone.utc


def parse_kickoff(raw: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 kickoff timestamp into an aware datetime."""
    if not raw:
        return None
    try:
        dt = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_match_date(dt: datetime) -> str:
    """Day/month/year without zero padding, e.g. ``5/3/2025``."""
    return f"{dt.day}/{dt.month}/{dt.year}"


def format_match_time(dt: datetime) -> str:
    return dt.strftime("%H:%M")
