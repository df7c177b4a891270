"""Telegram Bot API delivery and message formatting."""
from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence

import requests

from .config import setup_logger
from .constants import MESSAGE_SEPARATOR, TELEGRAM_MAX_MESSAGE_LENGTH
from .domain.contracts import MatchForecast
from .logging_utils import warn_once
from .settings import Settings

logger = setup_logger(__name__)


def sanitize_error_message(message: Any) -> str:
    """Strip bot tokens from URLs that end up in exception text."""
    if not message:
        return ""
    return re.sub(r"/bot[^/\s]+/", "/bot***/", str(message))


def _escape(value: Any) -> str:
    # parse_mode=HTML rejects the whole message on a stray "&" or "<".
    return html.escape(str(value), quote=False)


def format_predictions(forecasts: Sequence[MatchForecast], is_backup: bool = False) -> str:
    """Render recommended forecasts as a Telegram HTML message."""
    message = "🔮 <b>PRONÓSTICOS REALES</b> 🔮\n\n"

    if is_backup:
        message += "⚠️ <i>Usando datos de respaldo - API no disponible</i>\n\n"

    recommended = [f for f in forecasts if f.is_recommended]
    if not recommended:
        return message + "❌ No hay pronósticos recomendados hoy"

    for pred in recommended:
        message += f"⚽ <b>{_escape(pred.home_team)} vs {_escape(pred.away_team)}</b>\n"
        message += f"🏆 {_escape(pred.league)}\n"
        message += f"🕐 {_escape(pred.match_date)}, {_escape(pred.match_time)}\n\n"

        message += f"🏆 <b>Ganador probable:</b> {_escape(pred.winner_name)}\n\n"

        message += "📊 <b>Probabilidades:</b>\n"
        message += f"- Victoria local: {pred.home_win_prob}%\n"
        message += f"- Empate: {pred.draw_prob}%\n"
        message += f"- Victoria visitante: {pred.away_win_prob}%\n\n"

        if pred.is_likely_over25:
            message += f"⚽ <b>Over 2.5 goles:</b> {pred.over25_pct}% ({pred.avg_goals:.1f} promedio)\n"
            message += "✅ <b>RECOMENDADO OVER 2.5</b>\n\n"

        message += f"📈 <b>Confianza:</b> {pred.confidence}%\n"
        message += f"{MESSAGE_SEPARATOR}\n\n"

    message += f"📋 <b>Total pronósticos: {len(recommended)}</b>"
    return message


def format_pregame_alert(forecasts: Sequence[MatchForecast]) -> Optional[str]:
    """Compact over 2.5 digest used by the scheduled bot; None when nothing qualifies."""
    picks = [f for f in forecasts if f.is_likely_over25]
    if not picks:
        return None

    lines = ["⚽ PREDICCIONES PRE-PARTIDO ⚽", ""]
    for pred in picks:
        lines.extend(
            [
                f"🔥 {_escape(pred.home_team)} vs {_escape(pred.away_team)}",
                f"📊 {pred.avg_goals:.2f} goles promedio",
                f"📈 {pred.over25_pct}% over 2.5",
                "✅ RECOMENDADO: Over 2.5",
                "",
            ]
        )
    return "\n".join(lines).rstrip("\n")


def split_message(text: str, limit: int = TELEGRAM_MAX_MESSAGE_LENGTH) -> List[str]:
    """Split ``text`` on line breaks into chunks no longer than ``limit``."""
    text = (text or "").strip()
    if not text:
        return []

    chunks = []
    while len(text) > limit:
        cut = text.rfind("\n", 0, limit)
        if cut <= 0:
            cut = limit
        chunks.append(text[:cut].rstrip())
        text = text[cut:].lstrip()
    chunks.append(text)
    return chunks


@dataclass
class DeliveryReport:
    delivered: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(self.delivered)

    def to_dict(self) -> dict:
        return {"delivered": list(self.delivered), "failed": list(self.failed)}


class TelegramNotifier:
    SOURCE = "Telegram"

    def __init__(self, settings: Settings, session: Optional[Any] = None) -> None:
        self.settings = settings
        self.timeout = settings.telegram_timeout
        self.session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.settings.telegram_bot_token)

    def _endpoint(self, method: str) -> str:
        return f"{self.settings.telegram_api_base}/bot{self.settings.telegram_bot_token}/{method}"

    def send_message(self, chat_id: str, message: str) -> bool:
        """Send ``message`` to one chat; False on any failure, never raises."""
        if not self.configured:
            warn_once("telegram_token_missing", "TELEGRAM_BOT_TOKEN is not set; messages are not sent", logger=logger)
            return False

        chunks = split_message(message)
        if not chunks:
            logger.warning("Refusing to send an empty message to chat %s", chat_id)
            return False

        for chunk in chunks:
            try:
                response = self.session.post(
                    self._endpoint("sendMessage"),
                    json={"chat_id": chat_id, "text": chunk, "parse_mode": "HTML"},
                    timeout=self.timeout,
                )
            except requests.RequestException as exc:
                logger.error("Error sending Telegram message to %s: %s", chat_id, sanitize_error_message(exc))
                return False

            if response.status_code != 200:
                logger.error("Telegram API error for chat %s: %s", chat_id, response.status_code)
                return False

        logger.info("Telegram message delivered to %s (%d part(s))", chat_id, len(chunks))
        return True

    def broadcast(self, chat_ids: Iterable[str], message: str) -> DeliveryReport:
        report = DeliveryReport()
        for chat_id in chat_ids:
            if self.send_message(chat_id, message):
                report.delivered.append(chat_id)
            else:
                report.failed.append(chat_id)
        return report
