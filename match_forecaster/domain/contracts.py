from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Literal, Mapping, Optional, TypedDict

from ..constants import RECOMMENDED_CONFIDENCE
from ..errors import PayloadError

Winner = Literal["home", "draw", "away"]
WINNERS = ("home", "draw", "away")


@dataclass(frozen=True)
class TeamSeasonStats:
    """Venue-split season figures for a fixture, already default-filled."""

    home_wins: int
    home_draws: int
    home_losses: int
    away_wins: int
    away_draws: int
    away_losses: int
    home_goals_for: int
    home_goals_against: int
    away_goals_for: int
    away_goals_against: int

    @property
    def home_games_played(self) -> int:
        return self.home_wins + self.home_draws + self.home_losses

    @property
    def away_games_played(self) -> int:
        return self.away_wins + self.away_draws + self.away_losses


@dataclass(frozen=True)
class MatchContext:
    home_id: int
    away_id: int
    league_id: int
    kickoff: datetime
    home_name: str = ""
    away_name: str = ""
    league_name: str = ""


class MatchForecastDict(TypedDict):
    home_team: str
    away_team: str
    league: str
    match_date: str
    match_time: str
    avg_goals: float
    over25_pct: int
    is_likely_over25: bool
    home_win_prob: int
    draw_prob: int
    away_win_prob: int
    predicted_winner: Winner
    confidence: int


@dataclass(frozen=True)
class MatchForecast:
    home_team: str
    away_team: str
    league: str
    match_date: str
    match_time: str
    avg_goals: float
    over25_pct: int
    is_likely_over25: bool
    home_win_prob: int
    draw_prob: int
    away_win_prob: int
    predicted_winner: Winner
    confidence: int

    @property
    def winner_name(self) -> str:
        if self.predicted_winner == "home":
            return self.home_team
        if self.predicted_winner == "away":
            return self.away_team
        return "Empate"

    @property
    def is_recommended(self) -> bool:
        return self.is_likely_over25 or self.confidence >= RECOMMENDED_CONFIDENCE

    def to_dict(self) -> MatchForecastDict:
        return asdict(self)  # type: ignore[return-value]

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "MatchForecast":
        """Rebuild a forecast posted back by the dashboard."""
        if not isinstance(payload, Mapping):
            raise PayloadError("predictions", "each prediction must be an object")

        def _text(name: str) -> str:
            value = payload.get(name)
            if not isinstance(value, str) or not value.strip():
                raise PayloadError(name, "required text field")
            return value

        def _int(name: str) -> int:
            value = payload.get(name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise PayloadError(name, "required number")
            return int(value)

        avg_goals = payload.get("avg_goals")
        if isinstance(avg_goals, bool) or not isinstance(avg_goals, (int, float)):
            raise PayloadError("avg_goals", "required number")

        over25 = payload.get("is_likely_over25", False)
        if not isinstance(over25, bool):
            raise PayloadError("is_likely_over25", "must be true or false")

        winner = payload.get("predicted_winner")
        if winner not in WINNERS:
            raise PayloadError("predicted_winner", f"must be one of {', '.join(WINNERS)}")

        return cls(
            home_team=_text("home_team"),
            away_team=_text("away_team"),
            league=_text("league"),
            match_date=_text("match_date"),
            match_time=_text("match_time"),
            avg_goals=float(avg_goals),
            over25_pct=_int("over25_pct"),
            is_likely_over25=over25,
            home_win_prob=_int("home_win_prob"),
            draw_prob=_int("draw_prob"),
            away_win_prob=_int("away_win_prob"),
            predicted_winner=winner,
            confidence=_int("confidence"),
        )


@dataclass
class ForecastBatch:
    forecasts: List[MatchForecast] = field(default_factory=list)
    is_backup: bool = False
    source: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.forecasts)

    @property
    def recommended(self) -> int:
        return sum(1 for f in self.forecasts if f.is_likely_over25)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "predictions": [f.to_dict() for f in self.forecasts],
            "is_backup": self.is_backup,
            "count": self.count,
            "recommended": self.recommended,
            "source": self.source,
        }


class IForecastProvider:
    def get_today_forecasts(self, now: Optional[datetime] = None) -> List[MatchForecast]:
        ...
