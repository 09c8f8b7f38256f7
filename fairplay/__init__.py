"""
Fairplay Rotation

Player rotation and playing-time fairness engine for youth sports coaching.
Tracks each player's stints in goal, defence, attack and on the bench, keeps
the squad selection consistent, and scores fairness with a 3-point role
budget. A Flask host exposes the engine as a JSON API.
"""
from .models import Player, PlayerStats, PlayerRole, PlayerStatus, MatchState, initialize_players
from .services import (
    begin_stint, end_stint, apply_squad_selection, calculate_role_points,
    MatchService, MatchOperationError
)
from .utils import fmt_mmss, now_ts, APP_TITLE

__version__ = "1.0.0"

__all__ = [
    "Player", "PlayerStats", "PlayerRole", "PlayerStatus", "MatchState",
    "initialize_players", "begin_stint", "end_stint", "apply_squad_selection",
    "calculate_role_points", "MatchService", "MatchOperationError",
    "fmt_mmss", "now_ts", "APP_TITLE"
]
