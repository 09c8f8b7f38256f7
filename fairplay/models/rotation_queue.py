"""
Rotation queue model for the Fairplay rotation engine.

The queue orders the outfield squad by substitution priority: the first
on-field player in the queue is the next to come off and the first bench
player is the next to go on. Inactive players are taken out of the queue and
tracked separately until they are reactivated.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional


@dataclass
class RotationQueue:
    """
    Ordered player ids plus the inactive players held out of the rotation.

    Attributes:
        queue: Active player ids, highest substitution priority first
        inactive_players: Ids taken out of the rotation, in deactivation order
    """
    queue: List[str] = field(default_factory=list)
    inactive_players: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.queue)

    def __contains__(self, player_id: str) -> bool:
        return player_id in self.queue

    def position(self, player_id: str) -> int:
        """Index of the player in the queue, or -1."""
        return self.queue.index(player_id) if player_id in self.queue else -1

    def next_players(self, count: int = 1) -> List[str]:
        """Return the first ``count`` ids of the queue."""
        return self.queue[:max(0, count)]

    def rotate_player(self, player_id: str) -> None:
        """Move a player to the back of the queue; unknown ids are ignored."""
        if player_id in self.queue:
            self.queue.remove(player_id)
            self.queue.append(player_id)

    def add_player(self, player_id: str, position: Optional[int] = None) -> None:
        """Insert a player at ``position`` (end when None), moving them if present."""
        self.remove_player(player_id)
        if position is None:
            self.queue.append(player_id)
        else:
            self.queue.insert(position, player_id)

    def remove_player(self, player_id: str) -> None:
        if player_id in self.queue:
            self.queue.remove(player_id)

    def move_to_front(self, player_id: str) -> None:
        self.add_player(player_id, 0)

    def insert_before(self, player_id: str, target_id: str) -> None:
        """Place ``player_id`` right before ``target_id``; no-op if the target is missing."""
        if target_id not in self.queue or player_id == target_id:
            return
        self.remove_player(player_id)
        self.queue.insert(self.queue.index(target_id), player_id)

    def replace_player(self, old_id: str, new_id: str) -> None:
        """Put ``new_id`` in the queue slot held by ``old_id``."""
        if old_id not in self.queue or old_id == new_id:
            return
        self.remove_player(new_id)
        self.queue[self.queue.index(old_id)] = new_id

    def deactivate_player(self, player_id: str) -> None:
        self.remove_player(player_id)
        if player_id not in self.inactive_players:
            self.inactive_players.append(player_id)

    def reactivate_player(self, player_id: str) -> None:
        """Bring a player back at the end of the queue."""
        if player_id in self.inactive_players:
            self.inactive_players.remove(player_id)
        self.add_player(player_id)

    def is_inactive(self, player_id: str) -> bool:
        return player_id in self.inactive_players

    def reorder(self, player_ids: Iterable[str]) -> None:
        """Order the queue by ``player_ids``; ids not listed keep their order at the end."""
        ordered = [pid for pid in dict.fromkeys(player_ids) if pid in self.queue]
        self.queue = ordered + [pid for pid in self.queue if pid not in ordered]

    def reset(self, player_ids: Iterable[str] = ()) -> None:
        self.queue = list(dict.fromkeys(player_ids))
        self.inactive_players = []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "queue": list(self.queue),
            "inactive_players": list(self.inactive_players),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'RotationQueue':
        if not data:
            return cls()
        return cls(
            queue=list(data.get("queue", [])),
            inactive_players=list(data.get("inactive_players", [])),
        )
