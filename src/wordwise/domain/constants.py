"""Centralized constants for the wordwise study engine.

Score bounds, timing thresholds and the default tuning values live here so
every layer imports from a single source of truth. The tuning values are
only defaults: `ScoringParams` exposes each of them as an overridable field.
"""

# ---------- Score domain ----------
MIN_SCORE = 0.5
MAX_SCORE = 5.5
SCORE_PRECISION = 0.1
NEUTRAL_SCORE = 3.0

MIN_LEVEL = 1
MAX_LEVEL = 5
UNRATED_LEVEL = 0

# ---------- Score bands (learning rate) ----------
EASY_SCORE_THRESHOLD = 2.0
HARD_SCORE_THRESHOLD = 4.0

LEARNING_RATE_EASY = 1.2
LEARNING_RATE_MEDIUM = 1.0
LEARNING_RATE_HARD = 0.8

# ---------- Base step sizes ----------
EASY_CORRECT_DECREMENT = 0.8
MEDIUM_CORRECT_DECREMENT = 0.6
HARD_CORRECT_DECREMENT = 0.4

EASY_INCORRECT_INCREMENT = 1.2
MEDIUM_INCORRECT_INCREMENT = 0.8
HARD_INCORRECT_INCREMENT = 0.4

MAX_STEP_DECREMENT = 2.0
MAX_STEP_INCREMENT = 2.5

# ---------- Response speed ----------
EASY_TIME_RATIO = 0.8
HARD_TIME_RATIO = 1.5
FAST_RESPONSE_MS = 3000.0
SLOW_RESPONSE_MS = 8000.0

# ---------- Streaks ----------
STREAK_BONUS_STEP = 0.1
STREAK_BONUS_CAP = 0.5
MASTERY_STREAK = 3
MASTERY_BONUS = 0.2
CONSECUTIVE_TIMING_STEP = 0.05
CONSECUTIVE_TIMING_CAP = 1.5
MIN_TIMING_FACTOR = 0.7

# ---------- Recent failures ----------
FAILURE_PENALTY_STEP = 0.2
FAILURE_PENALTY_CAP = 1.0
FAILURE_LOOKBACK_RESPONSES = 5
FAILURE_LOOKBACK_HOURS = 24.0

# ---------- Time decay ----------
TIME_DECAY_HOURS = 24.0
TIME_DECAY_FACTOR = 0.3

# ---------- Response-time estimation ----------
AWAY_THRESHOLD_MS = 30000.0
OUTLIER_MULTIPLIER = 4.0
AWAY_AVERAGE_MULTIPLIER = 3.0
AWAY_RECENT_MULTIPLIER = 2.0
DEFAULT_AVERAGE_RESPONSE_MS = 5000.0

# ---------- Priority shuffle ----------
FAILURE_PRIORITY_BOOST = 0.5
MIN_PRIORITY = 0.1

# ---------- Session ----------
AUTO_ADVANCE_DELAY = 0.5  # seconds
