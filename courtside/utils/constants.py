"""
Constants for the Courtside rotation application.

This module contains configuration defaults and bounds used throughout the application.
"""

# Application metadata
APP_TITLE = "Courtside Rotation"

# Round timing defaults (seconds)
DEFAULT_ROUND_LENGTH_SECONDS = 12 * 60
MIN_ROUND_LENGTH_SECONDS = 180
MAX_ROUND_LENGTH_SECONDS = 2400

DEFAULT_WARN_SECONDS = 30
MIN_WARN_SECONDS = 5
MAX_WARN_SECONDS = 120

TICK_INTERVAL_SECONDS = 1.0

# Courts
DEFAULT_MAX_COURTS = 4
MIN_COURTS = 1
MAX_COURTS = 20
PLAYERS_PER_COURT = 4

# Skill ratings
MIN_SKILL_LEVEL = 1
MAX_SKILL_LEVEL = 10
DEFAULT_SKILL_LEVEL = 5

# Grouping tolerances
DEFAULT_WINDOW_SIZE = 2
MAX_WINDOW_SIZE = 5
BAND_WIDTH = 2
MAX_BAND_WINDOW = 4

# Team balancing
HOMOGENEOUS_SPREAD_LIMIT = 2
HOMOGENEOUS_DIFF_THRESHOLD = 1.0
HOMOGENEOUS_PENALTY = 1.0

# Session memory
HISTORY_WINDOW_ROUNDS = 6

# Persistence
BATCH_CHUNK_SIZE = 25

# Tone cues (frequency Hz, duration ms)
WARNING_TONE = (700, 120)
ROUND_END_TONE = (1200, 300)
