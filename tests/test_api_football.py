from datetime import datetime, timezone

import pytest
import requests

from match_forecaster.api_football import APIFootballClient, fixture_to_context
from match_forecaster.errors import APIError
from match_forecaster.logging_utils import reset_warn_once_cache
from match_forecaster.settings import Settings

NOW = datetime(2025, 3, 5, 12, 0, tzinfo=timezone.utc)


class MockResponse:
    def __init__(self, status_code=200, json_data=None, reason="OK"):
        self.status_code = status_code
        self._json_data = json_data
        self.reason = reason

    def json(self):
        if isinstance(self._json_data, Exception):
            raise self._json_data
        return self._json_data


class FakeSession:
    """Routes GET calls by path; records every call."""

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, dict(params or {}), timeout))
        path = url.split("v3.football.api-sports.io/", 1)[-1]
        handler = self.routes[path]
        result = handler(params or {})
        if isinstance(result, Exception):
            raise result
        return result


def _fixture(fixture_id, kickoff, home_id, away_id, league_id=13):
    return {
        "fixture": {"id": fixture_id, "date": kickoff},
        "teams": {
            "home": {"id": home_id, "name": f"Home {home_id}"},
            "away": {"id": away_id, "name": f"Away {away_id}"},
        },
        "league": {"id": league_id, "name": "Copa Libertadores"},
    }


def _envelope(response):
    return MockResponse(json_data={"errors": [], "response": response})


@pytest.fixture
def settings():
    reset_warn_once_cache()
    return Settings(football_api_key="test-key", season=2025)


def test_fixture_to_context_rejects_incomplete_items():
    assert fixture_to_context({"fixture": {"date": "2025-03-05T18:00:00+00:00"}}) is None
    ctx = fixture_to_context(_fixture(1, "2025-03-05T18:00:00+00:00", 100, 200))
    assert (ctx.home_id, ctx.away_id, ctx.league_id) == (100, 200, 13)
    assert ctx.kickoff == datetime(2025, 3, 5, 18, 0, tzinfo=timezone.utc)


def test_make_request_returns_response_field(settings):
    session = FakeSession({"fixtures": lambda p: _envelope([{"id": 1}])})
    client = APIFootballClient(settings, session=session)

    assert client.make_request("fixtures", {"date": "2025-03-05"}) == [{"id": 1}]
    url, params, timeout = session.calls[0]
    assert url == "https://v3.football.api-sports.io/fixtures"
    assert params == {"date": "2025-03-05"}
    assert timeout == 10


def test_make_request_maps_timeout(settings):
    session = FakeSession({"fixtures": lambda p: requests.Timeout("slow")})
    client = APIFootballClient(settings, session=session)

    with pytest.raises(APIError) as exc:
        client.make_request("fixtures")
    assert exc.value.code == "TIMEOUT"
    assert exc.value.source == "APIFootball"


def test_make_request_maps_http_and_upstream_errors(settings):
    client = APIFootballClient(
        settings,
        session=FakeSession({"fixtures": lambda p: MockResponse(status_code=503, reason="Service Unavailable")}),
    )
    with pytest.raises(APIError) as exc:
        client.make_request("fixtures")
    assert exc.value.code == "HTTP_503"
    assert exc.value.status_code == 503

    client = APIFootballClient(
        settings,
        session=FakeSession(
            {"fixtures": lambda p: MockResponse(json_data={"errors": {"token": "invalid key"}, "response": []})}
        ),
    )
    with pytest.raises(APIError) as exc:
        client.make_request("fixtures")
    assert exc.value.code == "UPSTREAM_ERROR"
    assert "invalid key" in exc.value.details


def test_make_request_without_key_is_config_error():
    session = FakeSession({})
    client = APIFootballClient(Settings(football_api_key=None), session=session)

    with pytest.raises(APIError) as exc:
        client.make_request("fixtures")
    assert exc.value.code == "CONFIG_ERROR"
    assert session.calls == []


def test_get_team_stats_swallows_api_errors(settings):
    session = FakeSession({"teams/statistics": lambda p: requests.ConnectionError("down")})
    client = APIFootballClient(settings, session=session)

    assert client.get_team_stats(100, 13, 2025) is None


def test_get_today_forecasts_filters_sorts_and_limits(settings):
    fixtures_by_day = {
        "2025-03-05": [
            _fixture(1, "2025-03-05T10:00:00+00:00", 1, 2),  # already started
            _fixture(2, "2025-03-05T22:00:00+00:00", 100, 200),
            _fixture(3, "2025-03-05T19:00:00+00:00", 300, 400),
        ],
        "2025-03-06": [
            _fixture(4, "2025-03-06T01:00:00+00:00", 500, 600),
            _fixture(5, "2025-03-06T23:00:00+00:00", 700, 800),
            _fixture(6, "2025-03-06T02:00:00+00:00", 900, 1000),
            _fixture(7, "2025-03-06T03:00:00+00:00", 1100, 1200),
        ],
    }
    stats_requests = []

    def stats(params):
        stats_requests.append((params["team"], params["league"], params["season"]))
        return _envelope({"goals": {"for": {"average": {"total": "1.5"}, "percentage": {"total": "40%"}}}})

    session = FakeSession(
        {
            "fixtures": lambda p: _envelope(fixtures_by_day.get(p["date"], [])),
            "teams/statistics": stats,
        }
    )
    client = APIFootballClient(settings, session=session)

    forecasts = client.get_today_forecasts(now=NOW)

    assert [f.home_team for f in forecasts] == ["Home 300", "Home 100", "Home 500", "Home 900", "Home 1100"]
    assert all(f.avg_goals == pytest.approx(3.0) for f in forecasts)
    assert all(f.over25_pct == 40 and f.is_likely_over25 for f in forecasts)
    assert len(stats_requests) == 10
    assert all(league == 13 and season == 2025 for _, league, season in stats_requests)
    assert {params["date"] for url, params, _ in session.calls if url.endswith("/fixtures")} == {
        "2025-03-05",
        "2025-03-06",
    }


def test_get_today_forecasts_skips_fixture_without_stats(settings):
    fixtures = [
        _fixture(2, "2025-03-05T22:00:00+00:00", 100, 200),
        _fixture(3, "2025-03-05T19:00:00+00:00", 300, 400),
    ]

    def stats(params):
        if params["team"] == 400:
            return MockResponse(status_code=500, reason="Server Error")
        return _envelope({})

    session = FakeSession(
        {
            "fixtures": lambda p: _envelope(fixtures if p["date"] == "2025-03-05" else []),
            "teams/statistics": stats,
        }
    )
    forecasts = APIFootballClient(settings, session=session).get_today_forecasts(now=NOW)

    assert len(forecasts) == 1
    only = forecasts[0]
    assert only.home_team == "Home 100"
    # empty stats payloads run on defaults: same triple as the regression oracle
    assert (only.home_win_prob, only.draw_prob, only.away_win_prob) == (35, 29, 36)


def test_get_today_forecasts_returns_empty_when_everything_started(settings):
    session = FakeSession(
        {"fixtures": lambda p: _envelope([_fixture(1, "2025-03-05T09:00:00+00:00", 1, 2)])}
    )

    assert APIFootballClient(settings, session=session).get_today_forecasts(now=NOW) == []


def test_get_today_forecasts_propagates_fixture_failure(settings):
    session = FakeSession({"fixtures": lambda p: requests.Timeout("slow")})

    with pytest.raises(APIError):
        APIFootballClient(settings, session=session).get_today_forecasts(now=NOW)
