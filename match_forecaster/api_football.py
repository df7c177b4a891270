"""API-Football (api-sports.io) client and fixture forecast orchestration."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import requests

from .config import setup_logger
from .constants import FIXTURE_DAYS_AHEAD, MAX_FIXTURES
from .domain.contracts import IForecastProvider, MatchContext, MatchForecast
from .errors import APIError
from .logging_utils import warn_once
from .prediction import predict_match
from .settings import Settings
from .utils import dig, get_current_season, parse_kickoff, resolve_timezone

logger = setup_logger(__name__)

SOURCE = "APIFootball"


def _session(settings: Settings) -> requests.Session:
    session = requests.Session()
    session.headers.update(
        {
            "x-apisports-key": settings.football_api_key or "",
            "Accept": "application/json",
        }
    )
    return session


def fixture_to_context(fixture: Dict[str, Any]) -> Optional[MatchContext]:
    """Map a ``/fixtures`` item to a MatchContext, or None when it is incomplete."""
    kickoff = parse_kickoff(dig(fixture, "fixture", "date"))
    home_id = dig(fixture, "teams", "home", "id")
    away_id = dig(fixture, "teams", "away", "id")
    league_id = dig(fixture, "league", "id")
    if kickoff is None or not all(isinstance(v, int) for v in (home_id, away_id, league_id)):
        return None
    return MatchContext(
        home_id=home_id,
        away_id=away_id,
        league_id=league_id,
        kickoff=kickoff,
        home_name=dig(fixture, "teams", "home", "name") or "",
        away_name=dig(fixture, "teams", "away", "name") or "",
        league_name=dig(fixture, "league", "name") or "",
    )


class APIFootballClient(IForecastProvider):
    def __init__(self, settings: Settings, session: Optional[Any] = None) -> None:
        self.settings = settings
        self.base_url = settings.football_api_base.rstrip("/")
        self.timeout = settings.football_api_timeout
        self.session = session or _session(settings)
        self.tz = resolve_timezone(settings.display_timezone)

    def make_request(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET ``path`` and return the envelope's ``response`` value.

        No retries: a timeout or failure surfaces immediately as APIError.
        """
        if not self.settings.football_api_key:
            warn_once("football_api_key_missing", "FOOTBALL_API_KEY is not set", logger=logger)
            raise APIError(SOURCE, "CONFIG_ERROR", "No FOOTBALL_API_KEY configured.")

        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.Timeout as exc:
            logger.warning("API-Football timeout for %s", path)
            raise APIError(SOURCE, "TIMEOUT", "API request timeout") from exc
        except requests.RequestException as exc:
            logger.warning("API-Football network error for %s: %s", path, exc)
            raise APIError(SOURCE, "NETWORK_ERROR", "API-Football unreachable", details=str(exc)) from exc

        if response.status_code != 200:
            raise APIError(
                SOURCE,
                f"HTTP_{response.status_code}",
                f"API Error: {response.status_code} {getattr(response, 'reason', '')}".strip(),
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise APIError(SOURCE, "INVALID_RESPONSE", "API-Football returned invalid JSON") from exc

        if not isinstance(data, dict):
            raise APIError(SOURCE, "INVALID_RESPONSE", "API-Football returned an unexpected payload")
        # Problems arrive as a list or a dict; both are empty on success.
        if data.get("errors"):
            raise APIError(SOURCE, "UPSTREAM_ERROR", "API-Football rejected the request", details=str(data["errors"]))
        return data.get("response")

    def get_fixtures(self, day: date) -> List[Dict[str, Any]]:
        fixtures = self.make_request("fixtures", {"date": day.isoformat()})
        return list(fixtures or [])

    def get_team_stats(self, team_id: int, league_id: int, season: int) -> Optional[Any]:
        """Season statistics for one team, or None when they cannot be fetched.

        An empty payload is returned as-is; the forecast then runs on defaults.
        """
        try:
            stats = self.make_request(
                "teams/statistics",
                {"team": team_id, "league": league_id, "season": season},
            )
        except APIError as exc:
            logger.error("Error getting stats for team %s: %s", team_id, exc.code)
            return None
        return stats

    def get_today_forecasts(self, now: Optional[datetime] = None) -> List[MatchForecast]:
        """
        Forecast the next few fixtures from today's and tomorrow's schedule.

        Fixture list failures propagate as APIError; a fixture whose team
        statistics are unavailable is skipped.
        """
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        today = now.astimezone(timezone.utc).date()
        days = [today + timedelta(days=offset) for offset in range(FIXTURE_DAYS_AHEAD + 1)]
        logger.info("Fetching fixtures for %s", ", ".join(d.isoformat() for d in days))

        with ThreadPoolExecutor(max_workers=len(days)) as executor:
            futures = [executor.submit(self.get_fixtures, day) for day in days]
            all_fixtures = [fixture for future in futures for fixture in future.result()]

        if not all_fixtures:
            logger.info("No fixtures found")
            return []

        contexts = [ctx for ctx in map(fixture_to_context, all_fixtures) if ctx is not None and ctx.kickoff > now]
        logger.info("Found %d future fixtures from %d total", len(contexts), len(all_fixtures))
        if not contexts:
            return []

        contexts.sort(key=lambda ctx: ctx.kickoff)
        season = self.settings.season or get_current_season(now)

        forecasts: List[MatchForecast] = []
        with ThreadPoolExecutor(max_workers=2) as executor:
            for ctx in contexts[:MAX_FIXTURES]:
                try:
                    home_future = executor.submit(self.get_team_stats, ctx.home_id, ctx.league_id, season)
                    away_future = executor.submit(self.get_team_stats, ctx.away_id, ctx.league_id, season)
                    home_stats, away_stats = home_future.result(), away_future.result()
                    if home_stats is None or away_stats is None:
                        logger.warning(
                            "Skipping %s vs %s: team statistics unavailable",
                            ctx.home_name,
                            ctx.away_name,
                        )
                        continue
                    forecasts.append(predict_match(home_stats, away_stats, ctx, self.tz))
                except Exception:
                    logger.exception("Error processing match %s vs %s", ctx.home_name, ctx.away_name)

        return forecasts
