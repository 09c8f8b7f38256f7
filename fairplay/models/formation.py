"""Formation models for the Fairplay rotation engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from .player import PlayerRole, PlayerStatus
from ..utils.constants import GOALIE_SLOT, SUB_PAIR_SLOT, SUBSTITUTE_SLOT_PREFIX


class FormationType(Enum):
    """Supported squad formats."""
    PAIRS_7 = "pairs_7"
    INDIVIDUAL_6 = "individual_6"
    INDIVIDUAL_7 = "individual_7"


@dataclass(frozen=True)
class SlotAssignment:
    """Role, status and pair key a player receives from a formation slot."""
    role: PlayerRole
    status: PlayerStatus
    pair_key: Optional[str]


def _slot_role(slot: str) -> PlayerRole:
    lowered = slot.lower()
    if "defender" in lowered:
        return PlayerRole.DEFENDER
    if "attacker" in lowered:
        return PlayerRole.ATTACKER
    return PlayerRole.ON_FIELD


def resolve_slot(slot: str, sub_role: Optional[str] = None) -> SlotAssignment:
    """
    Resolve a single formation slot.

    Args:
        slot: Formation key, e.g. ``"goalie"``, ``"leftDefender"``, ``"substitute_1"``
        sub_role: ``"defender"`` or ``"attacker"`` inside a pair slot

    Returns:
        SlotAssignment for a player placed in that slot
    """
    if slot == GOALIE_SLOT:
        return SlotAssignment(PlayerRole.GOALIE, PlayerStatus.GOALIE, slot)

    if sub_role is not None:
        role = _slot_role(sub_role)
        # Sub pair players keep their pending role but sit on the bench
        status = PlayerStatus.SUBSTITUTE if slot == SUB_PAIR_SLOT else PlayerStatus.ON_FIELD
        return SlotAssignment(role, status, slot)

    if slot.startswith(SUBSTITUTE_SLOT_PREFIX):
        return SlotAssignment(PlayerRole.SUBSTITUTE, PlayerStatus.SUBSTITUTE, slot)

    return SlotAssignment(_slot_role(slot), PlayerStatus.ON_FIELD, slot)


def resolve_formation(formation: Mapping[str, Any]) -> Dict[str, SlotAssignment]:
    """
    Map every player placed in a formation to their slot assignment.

    Individual slots hold a player id; pair slots hold a mapping with
    ``"defender"`` and ``"attacker"`` ids. Empty slots are skipped.

    Args:
        formation: Formation dictionary as sent by the host

    Returns:
        Dictionary of player id -> SlotAssignment

    Raises:
        ValueError: If the same player appears in two slots
    """
    assignments: Dict[str, SlotAssignment] = {}

    def _place(player_id: Optional[str], assignment: SlotAssignment) -> None:
        if not player_id:
            return
        if player_id in assignments:
            raise ValueError(f"Player '{player_id}' is placed in more than one slot")
        assignments[player_id] = assignment

    for slot, value in formation.items():
        if isinstance(value, Mapping):
            for sub_role in ("defender", "attacker"):
                _place(value.get(sub_role), resolve_slot(slot, sub_role))
        else:
            _place(value, resolve_slot(slot))

    return assignments


def find_slot_of(formation: Mapping[str, Any], player_id: str) -> Optional[Tuple[str, Optional[str]]]:
    """Return ``(slot, sub_role)`` where the player sits, or None."""
    for slot, value in formation.items():
        if isinstance(value, Mapping):
            for sub_role in ("defender", "attacker"):
                if value.get(sub_role) == player_id:
                    return (slot, sub_role)
        elif value == player_id:
            return (slot, None)
    return None
