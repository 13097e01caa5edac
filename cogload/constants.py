"""Policy constants - single source of truth.

Numeric knobs used by the engine. Settings defaults read from here,
and every pure function takes these as overridable defaults.
"""

# Recovery sessions
MIN_RECOVERY_SESSION_SECONDS = 1800
RECOVERY_XP_PER_MINUTE = 0.05
MIN_WALKING_MINUTES = 30
WALKING_XP_MULTIPLIER = 1.0
NO_WALKING_XP_MULTIPLIER = 0.5

# Overrides
MAX_DAILY_OVERRIDES = 1
MAX_WEEKLY_OVERRIDES = 3
OVERRIDE_PENALTY = 3
OVERRIDE_MIN_RECOVERY_BUFFER = 40

# Difficulty
MEANINGFUL_XP_RATIO = 0.35
HARD_MIN_RECOVERY = 55
HARD_MIN_READINESS = 45
MEDIUM_MIN_RECOVERY = 40

# Global mode
RECOVERY_MODE_BUFFER = 45
LOW_BANDWIDTH_CAPACITY = 55

# Training capacity
TC_FLOOR = 30
TC_GROWTH_ALPHA = 0.06
TC_DECAY_PER_WEEK = 3
TC_INACTIVITY_THRESHOLD_DAYS = 7
TC_OPTIMAL_MIN_PERCENT = 0.60
TC_OPTIMAL_MAX_PERCENT = 0.85
TC_INITIAL_CAP_RATIO = 0.6
