"""
Squad membership handling for the Fairplay rotation engine.

Keeps the transient "current" fields of each player consistent with the
squad selection while leaving historical playing time untouched, and
provides the lookup helpers used by the match service and the web host.
"""
import logging
import uuid
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..models.player import Player, PlayerStatus

logger = logging.getLogger(__name__)


def reset_player_match_start_state(player: Player) -> Player:
    """
    Clear match-start and live assignment fields of a player leaving the squad.

    Cumulative durations and period counters are left unchanged.

    Args:
        player: Player to reset in place

    Returns:
        The same player, for chaining
    """
    stats = player.stats
    stats.started_match_as = None
    stats.started_at_role = None
    stats.started_at_position = None
    stats.current_role = None
    stats.current_pair_key = None
    stats.current_status = PlayerStatus.SUBSTITUTE
    stats.last_stint_start_time_epoch = None
    stats.stint_open = False
    return player


def apply_squad_selection(
    players: List[Player],
    new_selected_ids: Iterable[str],
) -> Tuple[List[Player], List[str]]:
    """
    Reconcile players with a new squad selection.

    Duplicate ids are dropped (first occurrence wins) and ids that do not
    resolve to a player are ignored. Every player outside the resulting
    selection is reset via :func:`reset_player_match_start_state`; players in
    the selection are left untouched.

    Args:
        players: All roster players, updated in place
        new_selected_ids: Ids the coach selected

    Returns:
        Tuple of (players, cleaned selection in the given order)
    """
    known_ids = {p.id for p in players}
    selection: List[str] = []
    seen = set()

    for player_id in new_selected_ids:
        if player_id in seen:
            continue
        seen.add(player_id)
        if player_id not in known_ids:
            logger.warning("Ignoring unknown player id in squad selection: %s", player_id)
            continue
        selection.append(player_id)

    selected = set(selection)
    for player in players:
        if player.id not in selected:
            reset_player_match_start_state(player)

    return players, selection


def find_player_by_id(players: Iterable[Player], player_id: Optional[str]) -> Optional[Player]:
    """Return the player with the given id, or None."""
    if player_id is None:
        return None
    return next((p for p in players if p.id == player_id), None)


def create_player_lookup(players: Iterable[Player]) -> Callable[[str], Optional[Player]]:
    """Build an id -> player lookup function over a snapshot of the roster."""
    index: Dict[str, Player] = {p.id: p for p in players}
    return index.get


def get_selected_squad_players(players: Iterable[Player], selected_ids: Iterable[str]) -> List[Player]:
    """Return the players whose ids are in the selection, in roster order."""
    selected = set(selected_ids or [])
    return [p for p in (players or []) if p.id in selected]


def get_outfield_players(
    players: Iterable[Player],
    selected_ids: Iterable[str],
    goalie_id: Optional[str],
) -> List[Player]:
    """Return the selected squad players excluding the goalie."""
    return [p for p in get_selected_squad_players(players, selected_ids) if p.id != goalie_id]


def get_players_by_status(
    players: Iterable[Player],
    selected_ids: Iterable[str],
    status: PlayerStatus,
) -> List[Player]:
    """Return the selected squad players that currently have the given status."""
    return [
        p for p in get_selected_squad_players(players, selected_ids)
        if p.stats.current_status is status
    ]


def is_player_inactive(players: Iterable[Player], player_id: str) -> bool:
    """Return True if the player exists and is marked inactive."""
    player = find_player_by_id(players, player_id)
    return bool(player and player.stats.is_inactive)


def has_inactive_players_in_squad(players: Iterable[Player], selected_ids: Iterable[str]) -> bool:
    """Return True if any selected player is inactive."""
    return any(p.stats.is_inactive for p in get_selected_squad_players(players, selected_ids))


def set_captain(players: Iterable[Player], captain_id: Optional[str]) -> None:
    """Mark a single captain; ``None`` clears the designation for everyone."""
    for player in players:
        player.stats.is_captain = captain_id is not None and player.id == captain_id


def add_temporary_player(
    players: List[Player],
    selected_ids: List[str],
    name: str,
) -> Player:
    """
    Add a guest player to the roster and the squad selection.

    Args:
        players: Roster, extended in place
        selected_ids: Squad selection, extended in place
        name: Display name of the guest

    Returns:
        The new player

    Raises:
        ValueError: If the name is empty
    """
    name = (name or "").strip()
    if not name:
        raise ValueError("Player name is required")

    player = Player(id=f"temp_{uuid.uuid4().hex[:8]}", name=name)
    players.append(player)
    selected_ids.append(player.id)
    logger.info("Added temporary player %s (%s)", player.name, player.id)
    return player
