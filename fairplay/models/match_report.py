"""Dataclasses representing role points and end-of-match reports."""

from dataclasses import dataclass, field
from typing import Dict, List, Union

Points = Union[int, float]


@dataclass(frozen=True)
class RolePoints:
    """Fairness score split across goalie, defender and attacker roles."""

    goalie_points: Points
    defender_points: Points
    attacker_points: Points

    @property
    def total(self) -> Points:
        return self.goalie_points + self.defender_points + self.attacker_points

    def to_dict(self) -> Dict[str, Points]:
        return {
            "goalie_points": self.goalie_points,
            "defender_points": self.defender_points,
            "attacker_points": self.attacker_points,
        }


@dataclass
class PlayerPointsSummary:
    """Report row for a single player who took part in the match."""

    player_id: str
    name: str
    start_code: str
    points: RolePoints
    time_on_field_seconds: int
    time_as_goalie_seconds: int
    time_as_sub_seconds: int


@dataclass
class MatchReport:
    """Snapshot of role points and playing time at the end of a match."""

    generated_ts: float
    periods_played: int
    players: List[PlayerPointsSummary] = field(default_factory=list)
    average_field_seconds: float = 0.0
    min_field_seconds: int = 0
    max_field_seconds: int = 0
