from dataclasses import replace
from datetime import date
from unittest.mock import MagicMock

import pytest
import requests

from match_forecaster.constants import MESSAGE_SEPARATOR
from match_forecaster.fallback import fallback_forecasts
from match_forecaster.logging_utils import reset_warn_once_cache
from match_forecaster.settings import Settings
from match_forecaster.telegram import (
    TelegramNotifier,
    format_predictions,
    format_pregame_alert,
    sanitize_error_message,
    split_message,
)


@pytest.fixture
def forecasts():
    return fallback_forecasts(date(2025, 3, 5))


@pytest.fixture(autouse=True)
def _reset_warnings():
    reset_warn_once_cache()


def test_format_predictions_lists_recommended_only(forecasts):
    message = format_predictions(forecasts)

    assert message.startswith("🔮 <b>PRONÓSTICOS REALES</b> 🔮\n\n⚽ <b>Olimpia Asunción vs CD San Antonio</b>")
    assert "Racing Club" not in message
    assert message.count("⚽ <b>") - message.count("⚽ <b>Over 2.5") == 4
    assert message.index("Olimpia") < message.index("Peñarol") < message.index("Colo Colo") < message.index("Grêmio")
    assert message.splitlines()[-1] == "📋 <b>Total pronósticos: 4</b>"


def test_format_predictions_block_layout(forecasts):
    message = format_predictions([forecasts[2]])

    assert "🕐 6/3/2025, 19:30\n\n" in message
    assert "🏆 <b>Ganador probable:</b> Atlético Bucaramanga\n\n" in message
    assert "- Victoria local: 25%\n- Empate: 32%\n- Victoria visitante: 43%\n\n" in message
    assert "⚽ <b>Over 2.5 goles:</b> 68% (3.3 promedio)\n✅ <b>RECOMENDADO OVER 2.5</b>\n\n" in message
    assert f"📈 <b>Confianza:</b> 43%\n{MESSAGE_SEPARATOR}\n\n" in message


def test_format_predictions_backup_notice(forecasts):
    message = format_predictions(forecasts, is_backup=True)

    assert "⚠️ <i>Usando datos de respaldo - API no disponible</i>\n\n" in message


def test_format_predictions_without_recommendations(forecasts):
    message = format_predictions([forecasts[3]])

    assert message == "🔮 <b>PRONÓSTICOS REALES</b> 🔮\n\n❌ No hay pronósticos recomendados hoy"


def test_draw_is_named_empate(forecasts):
    draw = forecasts[0].__class__(**{**forecasts[0].to_dict(), "predicted_winner": "draw", "confidence": 55})

    assert "<b>Ganador probable:</b> Empate" in format_predictions([draw])


def test_pregame_alert_only_over25(forecasts):
    alert = format_pregame_alert(forecasts)

    assert alert.splitlines()[0] == "⚽ PREDICCIONES PRE-PARTIDO ⚽"
    assert "🔥 Peñarol vs Vélez Sarsfield\n📊 2.39 goles promedio\n📈 58% over 2.5" in alert
    assert "Racing Club" not in alert
    assert alert.count("✅ RECOMENDADO: Over 2.5") == 4
    assert format_pregame_alert([forecasts[3]]) is None


def test_split_message_respects_limit_on_line_breaks():
    text = "\n".join(f"line {i:03d}" for i in range(50))

    chunks = split_message(text, limit=100)

    assert all(len(c) <= 100 for c in chunks)
    assert "\n".join(chunks) == text
    assert split_message("short") == ["short"]
    assert split_message("   ") == []


def test_split_message_hard_cuts_long_lines():
    assert split_message("x" * 25, limit=10) == ["x" * 10, "x" * 10, "x" * 5]


def test_sanitize_error_message_masks_token():
    raw = "HTTPSConnectionPool: /bot123:ABC/sendMessage failed"

    assert sanitize_error_message(raw) == "HTTPSConnectionPool: /bot***/sendMessage failed"
    assert sanitize_error_message(None) == ""


def _notifier(token="123:ABC", status=200, error=None):
    session = MagicMock()
    if error:
        session.post.side_effect = error
    else:
        session.post.return_value = MagicMock(status_code=status)
    return TelegramNotifier(Settings(telegram_bot_token=token), session=session), session


def test_send_message_posts_html_payload():
    notifier, session = _notifier()

    assert notifier.send_message("-100200", "<b>hola</b>") is True
    session.post.assert_called_once_with(
        "https://api.telegram.org/bot123:ABC/sendMessage",
        json={"chat_id": "-100200", "text": "<b>hola</b>", "parse_mode": "HTML"},
        timeout=10,
    )


def test_send_message_sends_long_messages_in_parts():
    notifier, session = _notifier()
    message = "\n".join("x" * 99 for _ in range(60))

    assert notifier.send_message("42", message) is True
    assert session.post.call_count == 2


def test_send_message_failures_return_false():
    notifier, session = _notifier(token=None)
    assert notifier.configured is False
    assert notifier.send_message("42", "hola") is False
    session.post.assert_not_called()

    notifier, _ = _notifier(status=403)
    assert notifier.send_message("42", "hola") is False

    notifier, _ = _notifier(error=requests.ConnectionError("boom"))
    assert notifier.send_message("42", "hola") is False

    notifier, session = _notifier()
    assert notifier.send_message("42", "  ") is False
    session.post.assert_not_called()


def test_broadcast_reports_per_chat():
    notifier, session = _notifier()
    session.post.side_effect = [MagicMock(status_code=200), MagicMock(status_code=400)]

    report = notifier.broadcast(["1", "2"], "hola")

    assert report.delivered == ["1"]
    assert report.failed == ["2"]
    assert report.ok is True
    assert report.to_dict() == {"delivered": ["1"], "failed": ["2"]}


def test_names_are_html_escaped(forecasts):
    pred = replace(forecasts[0], home_team="Brighton & Hove Albion", league="U<21 League")

    message = format_predictions([pred])
    assert "⚽ <b>Brighton &amp; Hove Albion vs CD San Antonio</b>" in message
    assert "🏆 U&lt;21 League\n" in message
    assert "<b>Ganador probable:</b> Brighton &amp; Hove Albion" in message
    assert "Brighton & Hove" not in message

    alert = format_pregame_alert([pred])
    assert "🔥 Brighton &amp; Hove Albion vs CD San Antonio" in alert
