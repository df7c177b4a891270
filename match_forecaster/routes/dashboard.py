from __future__ import annotations

from datetime import datetime, timezone

from flask import Blueprint, render_template

from ..app_utils import get_services, make_ok
from ..constants import HIGH_CONFIDENCE, MEDIUM_CONFIDENCE, RECOMMENDED_CONFIDENCE

bp = Blueprint("dashboard", __name__)


@bp.get("/")
def index():
    """Render the dashboard page; forecasts are loaded client-side."""
    services = get_services()
    return render_template(
        "index.html",
        telegram_configured=services.notifier.configured,
        recommended_confidence=RECOMMENDED_CONFIDENCE,
        high_confidence=HIGH_CONFIDENCE,
        medium_confidence=MEDIUM_CONFIDENCE,
    )


@bp.get("/health")
def health():
    return make_ok(
        {"ok": True, "ts": datetime.now(timezone.utc).isoformat()},
        "OK",
        status_code=200,
    )
