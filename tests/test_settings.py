import logging
from datetime import datetime, timezone

from match_forecaster.config import setup_logger
from match_forecaster.settings import Settings
from match_forecaster.utils import (
    coerce_number,
    dig,
    format_match_date,
    get_current_season,
    parse_kickoff,
    resolve_timezone,
)


def test_from_env_defaults():
    settings = Settings.from_env({})

    assert settings.football_api_key is None
    assert settings.football_api_base == "https://v3.football.api-sports.io"
    assert settings.football_api_timeout == 10
    assert settings.season is None
    assert settings.telegram_chat_ids == ()
    assert settings.display_timezone == "UTC"
    assert settings.debug is False


def test_from_env_reads_values():
    settings = Settings.from_env(
        {
            "FOOTBALL_API_KEY": "abc",
            "FOOTBALL_API_BASE": "http://localhost:9000/",
            "FOOTBALL_API_TIMEOUT": "4.5",
            "FOOTBALL_SEASON": "2024",
            "TELEGRAM_BOT_TOKEN": "1:xyz",
            "TELEGRAM_CHAT_IDS": " -1001, ,@alerts_chan ",
            "DISPLAY_TIMEZONE": "America/Montevideo",
            "FLASK_DEBUG": "yes",
        }
    )

    assert settings.football_api_key == "abc"
    assert settings.football_api_base == "http://localhost:9000"
    assert settings.football_api_timeout == 4.5
    assert settings.season == 2024
    assert settings.telegram_bot_token == "1:xyz"
    assert settings.telegram_chat_ids == ("-1001", "@alerts_chan")
    assert settings.display_timezone == "America/Montevideo"
    assert settings.debug is True


def test_from_env_ignores_garbage_numbers():
    settings = Settings.from_env({"FOOTBALL_API_TIMEOUT": "soon", "FOOTBALL_SEASON": "next"})

    assert settings.football_api_timeout == 10
    assert settings.season is None


def test_secrets_can_come_from_files(tmp_path):
    key_file = tmp_path / "key"
    key_file.write_text("from-file\n", encoding="utf-8")

    settings = Settings.from_env(
        {"FOOTBALL_API_KEY_FILE": str(key_file), "TELEGRAM_BOT_TOKEN_FILE": str(tmp_path / "missing")}
    )

    assert settings.football_api_key == "from-file"
    assert settings.telegram_bot_token is None


def test_coerce_number_and_dig():
    assert coerce_number("45%") == 45.0
    assert coerce_number("1.6") == 1.6
    assert coerce_number(3) == 3.0
    assert coerce_number(False) is None
    assert coerce_number("n/a") is None
    assert dig({"a": {"b": {"c": 1}}}, "a", "b", "c") == 1
    assert dig({"a": None}, "a", "b") is None


def test_time_helpers():
    assert get_current_season(datetime(2025, 1, 2, tzinfo=timezone.utc)) == 2025
    assert format_match_date(datetime(2025, 3, 5)) == "5/3/2025"
    assert parse_kickoff("2025-03-05T18:30:00Z") == datetime(2025, 3, 5, 18, 30, tzinfo=timezone.utc)
    assert parse_kickoff("yesterday") is None
    assert resolve_timezone("UTC") is timezone.utc
    assert resolve_timezone("Not/AZone") is timezone.utc


def test_setup_logger_honours_log_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert setup_logger("match_forecaster.test_level").level == logging.DEBUG
    monkeypatch.setenv("LOG_LEVEL", "nonsense")
    assert setup_logger("match_forecaster.test_level").level == logging.INFO
