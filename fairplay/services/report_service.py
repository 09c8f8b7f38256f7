"""End-of-match reporting for the Fairplay rotation engine."""

from __future__ import annotations

import csv
import io
import statistics
from typing import List, Optional, Protocol

from ..models import MatchReport, MatchState, Player, PlayerPointsSummary, PlayerRole
from ..utils import fmt_mmss, now_ts
from ..utils.constants import (
    START_CODE_GOALIE, START_CODE_NONE, START_CODE_ON_FIELD, START_CODE_SUBSTITUTE
)
from .role_points import calculate_role_points, format_points


class ExportServiceInterface(Protocol):
    """Interface for report export - supports ISP."""

    def export_to_text(self, report: MatchReport) -> str:
        ...

    def export_to_csv(self, report: MatchReport) -> str:
        ...


START_CODES = {
    PlayerRole.GOALIE: START_CODE_GOALIE,
    PlayerRole.ON_FIELD: START_CODE_ON_FIELD,
    PlayerRole.SUBSTITUTE: START_CODE_SUBSTITUTE,
}

REPORT_HEADERS = ["Player", "Started", "M", "B", "A", "Field Time"]


def start_code(player: Player) -> str:
    """Single-letter code for how the player started the match."""
    return START_CODES.get(player.stats.started_match_as, START_CODE_NONE)


class MatchReportExporter:
    """Render a :class:`MatchReport` as clipboard text or CSV."""

    def _rows(self, report: MatchReport) -> List[List[str]]:
        return [
            [
                summary.name,
                summary.start_code,
                format_points(summary.points.goalie_points),
                format_points(summary.points.defender_points),
                format_points(summary.points.attacker_points),
                fmt_mmss(summary.time_on_field_seconds),
            ]
            for summary in report.players
        ]

    def export_to_text(self, report: MatchReport) -> str:
        """Tab separated table for pasting into a chat or spreadsheet."""
        lines = ["\t".join(REPORT_HEADERS)]
        lines.extend("\t".join(row) for row in self._rows(report))
        return "\n".join(lines) + "\n"

    def export_to_csv(self, report: MatchReport) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(REPORT_HEADERS)
        writer.writerows(self._rows(report))
        return buffer.getvalue()


class ReportService:
    """
    Build end-of-match reports from the accumulated player stats.

    Reads the match state and never mutates it.
    """

    def __init__(
        self,
        match_state: MatchState,
        export_service: Optional[ExportServiceInterface] = None,
    ) -> None:
        self.match_state = match_state
        self.export_service = export_service or MatchReportExporter()

    def generate_match_report(self) -> MatchReport:
        """Build a :class:`MatchReport` for every player who took part."""
        participants = [
            p for p in self.match_state.players if p.stats.started_match_as is not None
        ]

        summaries = [
            PlayerPointsSummary(
                player_id=p.id,
                name=p.name,
                start_code=start_code(p),
                points=calculate_role_points(p),
                time_on_field_seconds=p.stats.time_on_field_seconds,
                time_as_goalie_seconds=p.stats.time_as_goalie_seconds,
                time_as_sub_seconds=p.stats.time_as_sub_seconds,
            )
            for p in participants
        ]

        field_times = [s.time_on_field_seconds for s in summaries]
        report = MatchReport(
            generated_ts=now_ts(),
            periods_played=len(self.match_state.game_log),
            players=summaries,
        )
        if field_times:
            report.average_field_seconds = statistics.mean(field_times)
            report.min_field_seconds = min(field_times)
            report.max_field_seconds = max(field_times)
        return report

    def export_text(self) -> str:
        return self.export_service.export_to_text(self.generate_match_report())

    def export_csv(self) -> str:
        return self.export_service.export_to_csv(self.generate_match_report())
