"""
Player model for the Fairplay rotation engine.

This module contains the Player and PlayerStats dataclasses which hold the
canonical roster and the per-player playing time accumulators, plus the closed
role and status enumerations used by the stint tracker.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum


class PlayerRole(Enum):
    """Role a player holds during a stint."""
    GOALIE = "Goalie"
    DEFENDER = "Defender"
    ATTACKER = "Attacker"
    SUBSTITUTE = "Substitute"
    ON_FIELD = "On Field"  # generic outfield, used for match-start snapshots


class PlayerStatus(Enum):
    """Coarse live status of a player."""
    ON_FIELD = "on_field"
    SUBSTITUTE = "substitute"
    GOALIE = "goalie"


OUTFIELD_ROLES = frozenset({PlayerRole.DEFENDER, PlayerRole.ATTACKER, PlayerRole.ON_FIELD})

# Cumulative fields, never reset by squad membership changes
CUMULATIVE_FIELDS = (
    "time_on_field_seconds",
    "time_as_goalie_seconds",
    "time_as_defender_seconds",
    "time_as_attacker_seconds",
    "time_as_sub_seconds",
    "periods_as_goalie",
    "periods_as_defender",
    "periods_as_attacker",
)


def _enum_value(value: Optional[Enum]) -> Optional[str]:
    return value.value if value is not None else None


def _role_from(value: Any) -> Optional[PlayerRole]:
    if value is None or isinstance(value, PlayerRole):
        return value
    return PlayerRole(value)


def _status_from(value: Any) -> Optional[PlayerStatus]:
    if value is None or isinstance(value, PlayerStatus):
        return value
    return PlayerStatus(value)


@dataclass
class PlayerStats:
    """
    Per-player match statistics.

    Attributes:
        started_match_as: How the player started the match (Goalie, On Field, Substitute)
        started_at_role: Specific role held at kickoff
        started_at_position: Formation slot held at kickoff
        current_role: Role of the live assignment
        current_status: Status of the live assignment
        current_pair_key: Formation slot of the live assignment
        last_stint_start_time_epoch: When the current stint began (epoch seconds)
        stint_open: Whether a stint is currently open
        time_*_seconds: Cumulative durations per bucket
        periods_as_*: Number of periods finished in each role
        is_inactive: Temporarily taken out of the rotation
        is_captain: Team captain for this match
    """
    started_match_as: Optional[PlayerRole] = None
    started_at_role: Optional[PlayerRole] = None
    started_at_position: Optional[str] = None

    current_role: Optional[PlayerRole] = None
    current_status: Optional[PlayerStatus] = None
    current_pair_key: Optional[str] = None
    last_stint_start_time_epoch: Optional[float] = None
    stint_open: bool = False

    time_on_field_seconds: int = 0  # all outfield time
    time_as_goalie_seconds: int = 0
    time_as_defender_seconds: int = 0
    time_as_attacker_seconds: int = 0
    time_as_sub_seconds: int = 0
    periods_as_goalie: int = 0
    periods_as_defender: int = 0
    periods_as_attacker: int = 0

    is_inactive: bool = False
    is_captain: bool = False

    def cumulative_totals(self) -> Dict[str, int]:
        """Return the cumulative counters keyed by field name."""
        return {name: getattr(self, name) for name in CUMULATIVE_FIELDS}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "started_match_as": _enum_value(self.started_match_as),
            "started_at_role": _enum_value(self.started_at_role),
            "started_at_position": self.started_at_position,
            "current_role": _enum_value(self.current_role),
            "current_status": _enum_value(self.current_status),
            "current_pair_key": self.current_pair_key,
            "last_stint_start_time_epoch": self.last_stint_start_time_epoch,
            "stint_open": self.stint_open,
            **self.cumulative_totals(),
            "is_inactive": self.is_inactive,
            "is_captain": self.is_captain,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'PlayerStats':
        """Create from dictionary for JSON deserialization."""
        if not data:
            return cls()
        stats = cls(
            started_match_as=_role_from(data.get("started_match_as")),
            started_at_role=_role_from(data.get("started_at_role")),
            started_at_position=data.get("started_at_position"),
            current_role=_role_from(data.get("current_role")),
            current_status=_status_from(data.get("current_status")),
            current_pair_key=data.get("current_pair_key"),
            last_stint_start_time_epoch=data.get("last_stint_start_time_epoch"),
            stint_open=bool(data.get("stint_open", False)),
            is_inactive=bool(data.get("is_inactive", False)),
            is_captain=bool(data.get("is_captain", False)),
        )
        for name in CUMULATIVE_FIELDS:
            setattr(stats, name, int(data.get(name, 0) or 0))
        return stats


@dataclass
class Player:
    """
    A squad member with identity and match statistics.

    Attributes:
        id: Unique, stable identifier for the lifetime of the match
        name: Display name only
        stats: Playing time and assignment state
    """
    id: str
    name: str
    stats: PlayerStats = field(default_factory=PlayerStats)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert player to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the player
        """
        return {
            "id": self.id,
            "name": self.name,
            "stats": self.stats.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Player':
        """
        Create player from dictionary for JSON deserialization.

        Args:
            data: Dictionary representation of player

        Returns:
            Player instance
        """
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            stats=PlayerStats.from_dict(data.get("stats")),
        )


def initialize_players(roster_names: List[str]) -> List[Player]:
    """
    Build players with zeroed statistics from a list of names.

    Ids are assigned positionally as ``p1``, ``p2``, ...

    Args:
        roster_names: Display names in roster order

    Returns:
        New Player instances
    """
    return [
        Player(id=f"p{index + 1}", name=name)
        for index, name in enumerate(roster_names)
    ]
