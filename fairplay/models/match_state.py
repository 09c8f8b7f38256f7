"""
MatchState model for the Fairplay rotation engine.

This module contains the MatchState dataclass which represents the complete
in-memory state of a match: roster, squad selection, period progress and the
per-period game log.
"""
import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .formation import FormationType
from .player import Player
from .rotation_queue import RotationQueue
from ..utils import DEFAULT_PERIOD_COUNT, DEFAULT_PERIOD_DURATION_MINUTES


@dataclass
class MatchState:
    """
    Represents the complete state of a match.

    Attributes:
        players: All roster players, in roster order
        selected_squad_ids: Ids of players eligible to play this match
        formation_type: Squad format in use
        period_count: Number of periods in the match
        period_duration_minutes: Planned length of each period
        current_period_number: Active period (1-based)
        match_started: Whether period 1 has been started
        period_active: Whether a period is currently being played
        paused: Whether the match clock is paused
        finished: Whether the match has ended
        formation: Current formation dictionary (slot -> player id or pair)
        period_goalie_ids: Goalie chosen for each period, keyed by period number
        game_log: One entry per finished period with a stats snapshot
        rotation_queue: Outfield substitution order and inactive players
    """
    players: List[Player] = field(default_factory=list)
    selected_squad_ids: List[str] = field(default_factory=list)
    formation_type: FormationType = FormationType.PAIRS_7
    period_count: int = DEFAULT_PERIOD_COUNT
    period_duration_minutes: int = DEFAULT_PERIOD_DURATION_MINUTES
    current_period_number: int = 1
    match_started: bool = False
    period_active: bool = False
    paused: bool = False
    finished: bool = False
    formation: Dict[str, Any] = field(default_factory=dict)
    period_goalie_ids: Dict[int, str] = field(default_factory=dict)
    game_log: List[Dict[str, Any]] = field(default_factory=list)
    rotation_queue: RotationQueue = field(default_factory=RotationQueue)

    def get_player(self, player_id: str) -> Optional[Player]:
        """Return the player with the given id, or None."""
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def squad_players(self) -> List[Player]:
        """Return the selected squad players in selection order."""
        lookup = {p.id: p for p in self.players}
        return [lookup[pid] for pid in self.selected_squad_ids if pid in lookup]

    def to_json(self) -> dict:
        """
        Convert MatchState to JSON-serializable dictionary.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        return {
            "players": [p.to_dict() for p in self.players],
            "selected_squad_ids": list(self.selected_squad_ids),
            "formation_type": self.formation_type.value,
            "period_count": self.period_count,
            "period_duration_minutes": self.period_duration_minutes,
            "current_period_number": self.current_period_number,
            "match_started": self.match_started,
            "period_active": self.period_active,
            "paused": self.paused,
            "finished": self.finished,
            "formation": copy.deepcopy(self.formation),
            "period_goalie_ids": {str(k): v for k, v in self.period_goalie_ids.items()},
            "game_log": copy.deepcopy(self.game_log),
            "rotation_queue": self.rotation_queue.to_dict(),
        }

    @staticmethod
    def from_json(data: dict) -> "MatchState":
        """
        Create MatchState from JSON dictionary.

        Args:
            data: Dictionary with match state data

        Returns:
            New MatchState instance
        """
        ms = MatchState()
        ms.players = [Player.from_dict(p) for p in data.get("players", [])]
        ms.selected_squad_ids = list(data.get("selected_squad_ids", []))
        ms.formation_type = FormationType(data.get("formation_type", FormationType.PAIRS_7.value))
        ms.period_count = max(1, int(data.get("period_count", DEFAULT_PERIOD_COUNT)))
        ms.period_duration_minutes = int(
            data.get("period_duration_minutes", DEFAULT_PERIOD_DURATION_MINUTES)
        )
        ms.current_period_number = max(1, int(data.get("current_period_number", 1)))
        ms.match_started = bool(data.get("match_started", False))
        ms.period_active = bool(data.get("period_active", False))
        ms.paused = bool(data.get("paused", False))
        ms.finished = bool(data.get("finished", False))
        ms.formation = copy.deepcopy(data.get("formation", {}) or {})
        ms.period_goalie_ids = {
            int(k): v for k, v in (data.get("period_goalie_ids", {}) or {}).items()
        }
        ms.game_log = copy.deepcopy(data.get("game_log", []) or [])
        ms.rotation_queue = RotationQueue.from_dict(data.get("rotation_queue"))
        return ms
