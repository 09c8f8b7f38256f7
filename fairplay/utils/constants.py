"""
Constants for the Fairplay rotation engine.

This module holds the configuration values shared by the engine, the match
service and the web host.
"""

# Application metadata
APP_TITLE = "Fairplay Rotation"

# Role point budget per player per match
TOTAL_ROLE_POINTS = 3

# Match configuration
DEFAULT_PERIOD_COUNT = 3
PERIOD_OPTIONS = [1, 2, 3]
DURATION_OPTIONS = [10, 15, 20, 25, 30]  # minutes per period
DEFAULT_PERIOD_DURATION_MINUTES = 15

# Web host defaults
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7122

# Default roster used when the host has not loaded a team
INITIAL_ROSTER = [
    "Alma", "Ebba", "Elise", "Filippa", "Fiona", "Ines", "Isabelle",
    "Julie", "Leonie", "Nicole", "Rebecka", "Sigrid", "Sophie", "Tyra"
]

# Formation slot names
GOALIE_SLOT = "goalie"
SUB_PAIR_SLOT = "subPair"
SUBSTITUTE_SLOT_PREFIX = "substitute"

# Single-letter codes for how a player started the match (report columns)
START_CODE_GOALIE = "M"
START_CODE_ON_FIELD = "S"
START_CODE_SUBSTITUTE = "A"
START_CODE_NONE = "-"
