from __future__ import annotations

from typing import Any, Dict, List

from flask import Blueprint

from ..app_utils import get_services, json_body, make_error, make_ok
from ..chats import ChatRegistry
from ..config import setup_logger
from ..errors import PayloadError
from ..forecast_service import load_forecasts
from ..telegram import format_predictions
from ..validators import parse_forecasts, validate_chat_ids

bp = Blueprint("predictions_api", __name__, url_prefix="/api")

logger = setup_logger(__name__)


def _resolve_chat_ids(body: Dict[str, Any], chats: ChatRegistry) -> List[str]:
    """
    Destinations for a send request.

    Explicit ``chat_id``/``chat_ids`` win, ``chats`` picks registry entries by
    id, and an empty body falls back to every active registry chat.
    """
    explicit = validate_chat_ids(body)
    if explicit:
        return explicit
    if "chats" in body:
        entry_ids = body.get("chats")
        if not isinstance(entry_ids, list):
            raise PayloadError("chats", "must be a list")
        return [chat.chat_id for chat in chats.active(entry_ids)]
    return [chat.chat_id for chat in chats.active()]


@bp.get("/predictions")
def predictions():
    """Today's forecasts, live or backup."""
    services = get_services()
    try:
        batch = load_forecasts(services.provider)
    except Exception:
        logger.exception("Error in predictions API")
        return make_error("Failed to get predictions", "Failed to get predictions", status_code=500)

    return make_ok(
        batch.to_dict(),
        f"{batch.recommended} recommended of {batch.count} matches",
    )


@bp.post("/send-predictions")
def send_predictions():
    """Fetch fresh forecasts and send them to the selected chats."""
    services = get_services()
    body = json_body()
    try:
        chat_ids = _resolve_chat_ids(body, services.chats)
    except PayloadError as exc:
        return make_error(exc, exc.message, status_code=400)
    if not chat_ids:
        return make_error("Chat ID is required", "Chat ID is required", status_code=400)

    logger.info("Sending NEW predictions to %d chat(s)", len(chat_ids))
    batch = load_forecasts(services.provider)
    message = format_predictions(batch.forecasts, batch.is_backup)
    report = services.notifier.broadcast(chat_ids, message)

    if not report.ok:
        return make_error(report.to_dict(), "Failed to send message", status_code=500)

    return make_ok(
        {**batch.to_dict(), **report.to_dict()},
        "New predictions sent successfully",
    )


@bp.post("/send-current-predictions")
def send_current_predictions():
    """Send the forecasts the dashboard is currently showing."""
    services = get_services()
    body = json_body()
    try:
        chat_ids = _resolve_chat_ids(body, services.chats)
        if not chat_ids:
            raise PayloadError("chat_id", "Chat ID is required")
        forecasts = parse_forecasts(body.get("predictions"))
    except PayloadError as exc:
        return make_error(exc, exc.message, status_code=400)

    is_backup = bool(body.get("is_backup"))
    logger.info("Sending current predictions to %d chat(s)", len(chat_ids))
    message = format_predictions(forecasts, is_backup)
    report = services.notifier.broadcast(chat_ids, message)

    if not report.ok:
        return make_error(report.to_dict(), "Failed to send message", status_code=500)

    return make_ok(
        {
            "count": len(forecasts),
            "recommended": sum(1 for f in forecasts if f.is_likely_over25),
            "is_backup": is_backup,
            **report.to_dict(),
        },
        "Current predictions sent successfully",
    )


@bp.get("/chats")
def list_chats():
    chats = get_services().chats
    return make_ok({"chats": [chat.to_dict() for chat in chats.list()]})


@bp.post("/chats")
def add_chat():
    body = json_body()
    try:
        entry = get_services().chats.add(body.get("name"), body.get("chat_id"))
    except PayloadError as exc:
        return make_error(exc, exc.message, status_code=400)
    return make_ok(entry.to_dict(), "Chat added", status_code=201)


@bp.delete("/chats/<entry_id>")
def remove_chat(entry_id: str):
    if not get_services().chats.remove(entry_id):
        return make_error("chat_not_found", "Chat not found", status_code=404)
    return make_ok({"id": entry_id}, "Chat removed")


@bp.post("/chats/<entry_id>/toggle")
def toggle_chat(entry_id: str):
    entry = get_services().chats.toggle(entry_id)
    if entry is None:
        return make_error("chat_not_found", "Chat not found", status_code=404)
    return make_ok(entry.to_dict(), "Chat updated")
