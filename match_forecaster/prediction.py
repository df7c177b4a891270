"""
Heuristic match forecasts from API-Football season statistics.

Everything here is pure: the same statistics and team ids always give the
same forecast, so repeated dashboard refreshes never reshuffle the numbers.
"""

import math
from datetime import tzinfo
from typing import Any, Mapping, Optional, Tuple

from .constants import (
    AWAY_PROB_RANGE,
    DEFAULT_AWAY_DRAWS,
    DEFAULT_AWAY_GOALS_AGAINST,
    DEFAULT_AWAY_GOALS_FOR,
    DEFAULT_AWAY_LOSSES,
    DEFAULT_AWAY_WINS,
    DEFAULT_HOME_DRAWS,
    DEFAULT_HOME_GOALS_AGAINST,
    DEFAULT_HOME_GOALS_FOR,
    DEFAULT_HOME_LOSSES,
    DEFAULT_HOME_WINS,
    DRAW_PROB_BASE,
    DRAW_PROB_RANGE,
    DRAW_VARIATION_FACTOR,
    DRAW_VARIATION_SPREAD,
    GOAL_DIFF_WEIGHT,
    HOME_ADVANTAGE,
    HOME_PROB_RANGE,
    OVER_25_GOALS_THRESHOLD,
    OVER_25_PCT_THRESHOLD,
    STRENGTH_FLOOR,
    VARIATION_SPREAD,
    WIN_RATE_WEIGHT,
    WIN_VARIATION_FACTOR,
)
from .domain.contracts import MatchContext, MatchForecast, TeamSeasonStats, Winner
from .utils import coerce_number, dig, format_match_date, format_match_time

Probabilities = Tuple[int, int, int]


def round_half_up(value: float) -> int:
    """Round .5 towards positive infinity (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def _clamp(value: float, bounds: Tuple[float, float]) -> float:
    low, high = bounds
    return max(low, min(high, value))


def _count(payload: Any, path: Tuple[str, ...], default: int) -> int:
    # Zero is treated like a missing field so games played never hits zero.
    value = coerce_number(dig(payload, *path))
    if not value:
        return default
    return int(value)


def normalize_team_stats(home_payload: Optional[Mapping[str, Any]], away_payload: Optional[Mapping[str, Any]]) -> TeamSeasonStats:
    """
    Flatten two API-Football ``teams/statistics`` payloads.

    The home side is read at its home venue and the away side at its away
    venue. Never raises: unusable fields fall back to fixed defaults.
    """
    return TeamSeasonStats(
        home_wins=_count(home_payload, ("fixtures", "wins", "home"), DEFAULT_HOME_WINS),
        home_draws=_count(home_payload, ("fixtures", "draws", "home"), DEFAULT_HOME_DRAWS),
        home_losses=_count(home_payload, ("fixtures", "loses", "home"), DEFAULT_HOME_LOSSES),
        away_wins=_count(away_payload, ("fixtures", "wins", "away"), DEFAULT_AWAY_WINS),
        away_draws=_count(away_payload, ("fixtures", "draws", "away"), DEFAULT_AWAY_DRAWS),
        away_losses=_count(away_payload, ("fixtures", "loses", "away"), DEFAULT_AWAY_LOSSES),
        home_goals_for=_count(home_payload, ("goals", "for", "total", "home"), DEFAULT_HOME_GOALS_FOR),
        home_goals_against=_count(home_payload, ("goals", "against", "total", "home"), DEFAULT_HOME_GOALS_AGAINST),
        away_goals_for=_count(away_payload, ("goals", "for", "total", "away"), DEFAULT_AWAY_GOALS_FOR),
        away_goals_against=_count(away_payload, ("goals", "against", "total", "away"), DEFAULT_AWAY_GOALS_AGAINST),
    )


def deterministic_variation(id_a: int, id_b: int, factor: int) -> float:
    """
    Map two team ids and a salt to a reproducible value in [0, 1).

    Stands in for randomness: ``((id_a + id_b * factor) mod 100) / 100``.
    """
    return ((id_a + id_b * factor) % 100) / 100


def calculate_strengths(stats: TeamSeasonStats, home_id: int, away_id: int) -> Tuple[float, float]:
    """
    Combine win rate, goal differential and id-based variation per side.

    Args:
        stats (TeamSeasonStats): Normalized statistics for both sides
        home_id (int): Home team id
        away_id (int): Away team id

    Returns:
        tuple: (home_strength, away_strength)
    """
    home_games = stats.home_games_played
    away_games = stats.away_games_played

    home_win_rate = stats.home_wins / home_games * 100
    away_win_rate = stats.away_wins / away_games * 100

    home_goal_diff = (stats.home_goals_for - stats.home_goals_against) / home_games
    away_goal_diff = (stats.away_goals_for - stats.away_goals_against) / away_games

    variation = (deterministic_variation(home_id, away_id, WIN_VARIATION_FACTOR) - 0.5) * VARIATION_SPREAD

    home_strength = home_win_rate * WIN_RATE_WEIGHT + home_goal_diff * GOAL_DIFF_WEIGHT + variation + HOME_ADVANTAGE
    away_strength = away_win_rate * WIN_RATE_WEIGHT + away_goal_diff * GOAL_DIFF_WEIGHT - variation / 2
    return home_strength, away_strength


def normalize_probabilities(home_strength: float, away_strength: float, draw_variation: float) -> Probabilities:
    """
    Turn two strengths into (home, draw, away) percentages summing to 100.

    Home and away are rescaled and rounded on their own; draw takes whatever
    is left, so all rounding error lands on the draw.
    """
    total = abs(home_strength) + abs(away_strength) + STRENGTH_FLOOR

    home_raw = _clamp(home_strength / total * 100, HOME_PROB_RANGE)
    away_raw = _clamp(away_strength / total * 100, AWAY_PROB_RANGE)
    draw_raw = _clamp(DRAW_PROB_BASE + draw_variation, DRAW_PROB_RANGE)

    raw_sum = home_raw + draw_raw + away_raw
    home = round_half_up(home_raw / raw_sum * 100)
    away = round_half_up(away_raw / raw_sum * 100)
    draw = 100 - home - away
    return home, draw, away


def classify_outcome(home: int, draw: int, away: int) -> Tuple[Winner, int]:
    """Pick the predicted winner and the confidence behind it.

    Home needs to beat both other outcomes outright; away only needs to
    beat the draw. Ties otherwise fall through to a draw.
    """
    if home > away and home > draw:
        winner: Winner = "home"
    elif away > draw:
        winner = "away"
    else:
        winner = "draw"
    return winner, max(home, draw, away)


def classify_over25(home_payload: Optional[Mapping[str, Any]], away_payload: Optional[Mapping[str, Any]]) -> Tuple[float, int, bool]:
    """
    Over 2.5 recommendation from season per-game averages.

    Returns:
        tuple: (avg_goals, over25_pct, is_likely_over25)
    """
    home_avg = coerce_number(dig(home_payload, "goals", "for", "average", "total")) or 0.0
    away_avg = coerce_number(dig(away_payload, "goals", "for", "average", "total")) or 0.0
    home_pct = coerce_number(dig(home_payload, "goals", "for", "percentage", "total")) or 0.0
    away_pct = coerce_number(dig(away_payload, "goals", "for", "percentage", "total")) or 0.0

    avg_goals = home_avg + away_avg
    over25_pct = round_half_up((home_pct + away_pct) / 2)
    return avg_goals, over25_pct, is_likely_over25(avg_goals, over25_pct)


def is_likely_over25(avg_goals: float, over25_pct: int) -> bool:
    return avg_goals >= OVER_25_GOALS_THRESHOLD and over25_pct >= OVER_25_PCT_THRESHOLD


def predict_probabilities(stats: TeamSeasonStats, home_id: int, away_id: int) -> Probabilities:
    home_strength, away_strength = calculate_strengths(stats, home_id, away_id)
    draw_variation = deterministic_variation(home_id, away_id, DRAW_VARIATION_FACTOR) * DRAW_VARIATION_SPREAD - DRAW_VARIATION_SPREAD / 2
    return normalize_probabilities(home_strength, away_strength, draw_variation)


def predict_match(
    home_payload: Optional[Mapping[str, Any]],
    away_payload: Optional[Mapping[str, Any]],
    context: MatchContext,
    tz: Optional[tzinfo] = None,
) -> MatchForecast:
    """
    Build the full forecast for one fixture.

    Args:
        home_payload (dict): Home team ``teams/statistics`` response
        away_payload (dict): Away team ``teams/statistics`` response
        context (MatchContext): Fixture ids, names and kickoff
        tz (tzinfo): Zone used for the displayed date and time

    Returns:
        MatchForecast
    """
    stats = normalize_team_stats(home_payload, away_payload)
    home, draw, away = predict_probabilities(stats, context.home_id, context.away_id)
    winner, confidence = classify_outcome(home, draw, away)
    avg_goals, over25_pct, likely_over = classify_over25(home_payload, away_payload)

    kickoff = context.kickoff.astimezone(tz) if tz is not None else context.kickoff
    return MatchForecast(
        home_team=context.home_name,
        away_team=context.away_name,
        league=context.league_name,
        match_date=format_match_date(kickoff),
        match_time=format_match_time(kickoff),
        avg_goals=avg_goals,
        over25_pct=over25_pct,
        is_likely_over25=likely_over,
        home_win_prob=home,
        draw_prob=draw,
        away_win_prob=away,
        predicted_winner=winner,
        confidence=confidence,
    )
