"""Centralized configuration constants for the match forecaster."""

# Upstream endpoints
API_FOOTBALL_BASE_URL = "https://v3.football.api-sports.io"
TELEGRAM_API_BASE_URL = "https://api.telegram.org"

# API Timeouts (seconds)
API_TIMEOUT_FOOTBALL = 10  # API-Football fixtures / statistics
API_TIMEOUT_TELEGRAM = 10  # Bot API sendMessage

# Fixture selection
MAX_FIXTURES = 5  # Upcoming fixtures forecast per request
FIXTURE_DAYS_AHEAD = 1  # Today plus this many following days

# Stat normalizer defaults (used when a field is missing, non-numeric or zero)
DEFAULT_HOME_WINS = 8
DEFAULT_HOME_DRAWS = 4
DEFAULT_HOME_LOSSES = 3
DEFAULT_AWAY_WINS = 5
DEFAULT_AWAY_DRAWS = 6
DEFAULT_AWAY_LOSSES = 4
DEFAULT_HOME_GOALS_FOR = 18
DEFAULT_HOME_GOALS_AGAINST = 12
DEFAULT_AWAY_GOALS_FOR = 14
DEFAULT_AWAY_GOALS_AGAINST = 16

# Deterministic variation salts
WIN_VARIATION_FACTOR = 7
DRAW_VARIATION_FACTOR = 13

# Strength scorer weights
WIN_RATE_WEIGHT = 0.4
GOAL_DIFF_WEIGHT = 8
VARIATION_SPREAD = 30  # variation spans -15..+15
HOME_ADVANTAGE = 10

# Probability normalizer
STRENGTH_FLOOR = 25  # keeps the denominator away from zero
HOME_PROB_RANGE = (20, 60)
AWAY_PROB_RANGE = (15, 55)
DRAW_PROB_BASE = 30
DRAW_VARIATION_SPREAD = 10  # draw variation spans -5..+5
DRAW_PROB_RANGE = (20, 40)

# Over 2.5 classifier
OVER_25_GOALS_THRESHOLD = 2.5
OVER_25_PCT_THRESHOLD = 10

# Message formatting
RECOMMENDED_CONFIDENCE = 50  # forecasts at or above are sent even without over 2.5
TELEGRAM_MAX_MESSAGE_LENGTH = 4096
MESSAGE_SEPARATOR = "━━━━━━━━━━━━━━━━━━━━"

# Dashboard confidence colours
HIGH_CONFIDENCE = 60
MEDIUM_CONFIDENCE = 40

# Server
DEV_SERVER_HOST = "0.0.0.0"  # Bind to all interfaces
DEV_SERVER_PORT = 5000  # Standard development port
