from __future__ import annotations

from datetime import datetime
from typing import Optional

import requests

from .config import setup_logger
from .domain.contracts import ForecastBatch, IForecastProvider
from .errors import APIError
from .fallback import fallback_forecasts

logger = setup_logger(__name__)

LIVE_SOURCE = "API-Football"
BACKUP_SOURCE = "backup"


def load_forecasts(provider: IForecastProvider, now: Optional[datetime] = None) -> ForecastBatch:
    """Live forecasts when the provider has any, otherwise the backup set."""
    try:
        forecasts = provider.get_today_forecasts(now=now)
    except (APIError, requests.RequestException) as exc:
        logger.error("API failed, using fallback: %s", getattr(exc, "code", type(exc).__name__))
        return _backup(now)

    if not forecasts:
        logger.info("No predictions from API, using fallback")
        return _backup(now)

    return ForecastBatch(forecasts=forecasts, is_backup=False, source=LIVE_SOURCE)


def _backup(now: Optional[datetime]) -> ForecastBatch:
    today = now.date() if now is not None else None
    return ForecastBatch(forecasts=fallback_forecasts(today), is_backup=True, source=BACKUP_SOURCE)
