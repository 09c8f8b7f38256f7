"""
Services package for the Fairplay rotation engine.

This package contains the stint tracker, squad reconciler, role point
allocator and the match-level services built on top of them.
"""
from .stint_service import (
    begin_stint, end_stint, flush_stint, stint_elapsed_seconds,
    close_all_stints, pause_stints, resume_stints
)
from .squad_service import apply_squad_selection, reset_player_match_start_state
from .role_points import calculate_role_points, round_to_nearest_half, format_points
from .match_service import MatchService, MatchOperationError
from .match_commands import (
    MatchCommandManager, SubstituteCommand, ChangeGoalieCommand, EndPeriodCommand
)
from .report_service import ReportService, MatchReportExporter

__all__ = [
    "begin_stint", "end_stint", "flush_stint", "stint_elapsed_seconds",
    "close_all_stints", "pause_stints", "resume_stints",
    "apply_squad_selection", "reset_player_match_start_state",
    "calculate_role_points", "round_to_nearest_half", "format_points",
    "MatchService", "MatchOperationError",
    "MatchCommandManager", "SubstituteCommand", "ChangeGoalieCommand", "EndPeriodCommand",
    "ReportService", "MatchReportExporter"
]
