"""Command-line runner for scheduled forecast deliveries.

Usage::

    match-forecaster preview
    match-forecaster send --chat-id -1001234567890
    match-forecaster pregame
"""
from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from .api_football import APIFootballClient
from .config import setup_logger
from .forecast_service import load_forecasts
from .settings import Settings
from .telegram import TelegramNotifier, format_pregame_alert, format_predictions
from .validators import validate_chat_id

logger = setup_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="match-forecaster", description="Football forecast bot")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("preview", help="print today's message without sending it")

    for name, help_text in (
        ("send", "send today's full forecast message"),
        ("pregame", "send the compact over 2.5 alert"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument(
            "--chat-id",
            action="append",
            dest="chat_ids",
            help="destination chat (repeatable); defaults to TELEGRAM_CHAT_IDS",
        )
    return parser


def main(argv: Optional[Sequence[str]] = None, settings: Optional[Settings] = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = settings or Settings.from_env()

    batch = load_forecasts(APIFootballClient(settings))
    logger.info("Loaded %d forecasts (backup=%s)", batch.count, batch.is_backup)

    if args.command == "preview":
        print(format_predictions(batch.forecasts, batch.is_backup))
        return 0

    try:
        chat_ids = [validate_chat_id(c) for c in (args.chat_ids or settings.telegram_chat_ids)]
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    if not chat_ids:
        print("error: no chat ids given and TELEGRAM_CHAT_IDS is empty", file=sys.stderr)
        return 2

    if args.command == "pregame":
        message = format_pregame_alert(batch.forecasts)
        if message is None:
            logger.info("No over 2.5 picks today, nothing sent")
            return 0
    else:
        message = format_predictions(batch.forecasts, batch.is_backup)

    report = TelegramNotifier(settings).broadcast(chat_ids, message)
    for chat_id in report.failed:
        logger.error("Delivery failed for chat %s", chat_id)
    return 0 if report.ok else 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
