"""
Models package for the Fairplay rotation engine.

This package contains the core data models used throughout the application.
"""
from .player import Player, PlayerStats, PlayerRole, PlayerStatus, initialize_players
from .formation import FormationType, SlotAssignment, resolve_formation
from .rotation_queue import RotationQueue
from .match_state import MatchState
from .match_report import MatchReport, PlayerPointsSummary, RolePoints

__all__ = [
    "Player", "PlayerStats", "PlayerRole", "PlayerStatus", "initialize_players",
    "FormationType", "SlotAssignment", "resolve_formation",
    "RotationQueue", "MatchState", "MatchReport", "PlayerPointsSummary", "RolePoints"
]
