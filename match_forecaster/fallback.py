"""Fixed forecasts served when API-Football is unreachable or has nothing upcoming."""

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from .domain.contracts import MatchForecast
from .utils import format_match_date

# (home, away, league, time, avg_goals, over25_pct, over25, home%, draw%, away%, winner, confidence)
_FALLBACK_ROWS = (
    ("Olimpia Asunción", "CD San Antonio", "Liga Boliviana", "17:00", 3.45, 72, True, 50, 24, 26, "home", 50),
    ("Peñarol", "Vélez Sarsfield", "Copa Libertadores", "17:00", 2.39, 58, True, 39, 27, 34, "home", 39),
    ("Colo Colo", "Atlético Bucaramanga", "Copa Libertadores", "19:30", 3.33, 68, True, 25, 32, 43, "away", 43),
    ("Racing Club", "Fortaleza", "Copa Sudamericana", "19:30", 2.16, 45, False, 48, 32, 20, "home", 48),
    ("Grêmio", "Sportivo Luqueño", "Copa Libertadores", "17:00", 2.73, 62, True, 40, 29, 31, "home", 40),
)


def fallback_forecasts(today: Optional[date] = None) -> List[MatchForecast]:
    """Return the five backup forecasts, all dated the day after ``today``."""
    today = today or datetime.now(timezone.utc).date()
    tomorrow = format_match_date(today + timedelta(days=1))
    return [
        MatchForecast(
            home_team=home,
            away_team=away,
            league=league,
            match_date=tomorrow,
            match_time=kickoff,
            avg_goals=avg_goals,
            over25_pct=over25_pct,
            is_likely_over25=over25,
            home_win_prob=home_pct,
            draw_prob=draw_pct,
            away_win_prob=away_pct,
            predicted_winner=winner,
            confidence=confidence,
        )
        for (home, away, league, kickoff, avg_goals, over25_pct, over25,
             home_pct, draw_pct, away_pct, winner, confidence) in _FALLBACK_ROWS
    ]
