"""Match lifecycle service for the Fairplay rotation engine."""

import copy
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..models import MatchState, Player, PlayerRole, PlayerStatus, RolePoints
from ..models.formation import FormationType, SlotAssignment, find_slot_of, resolve_formation, resolve_slot
from ..utils.constants import DURATION_OPTIONS, GOALIE_SLOT, PERIOD_OPTIONS
from .role_points import calculate_role_points
from .squad_service import (
    add_temporary_player, apply_squad_selection, create_player_lookup, find_player_by_id,
    get_outfield_players, get_players_by_status, has_inactive_players_in_squad,
    is_player_inactive
)
from .stint_service import (
    begin_stint, close_all_stints, end_stint, flush_stint, pause_stints, resume_stints
)

logger = logging.getLogger(__name__)

_STARTED_AS = {
    PlayerStatus.GOALIE: PlayerRole.GOALIE,
    PlayerStatus.ON_FIELD: PlayerRole.ON_FIELD,
    PlayerStatus.SUBSTITUTE: PlayerRole.SUBSTITUTE,
}

_UNASSIGNED = SlotAssignment(PlayerRole.SUBSTITUTE, PlayerStatus.SUBSTITUTE, None)


class MatchOperationError(Exception):
    """Raised when a match action is not valid in the current state."""
    pass


class MatchService:
    """Drive periods, substitutions and squad edits for a single match.

    Every action takes an explicit ``now`` (epoch seconds) supplied by the host.
    """

    def __init__(self, match_state: MatchState):
        self.match_state = match_state

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def configure_match(
        self,
        *,
        period_count: Optional[int] = None,
        formation_type: Optional[FormationType] = None,
        period_duration_minutes: Optional[int] = None,
    ) -> None:
        """Set the number and length of periods and the squad format before kickoff.

        Raises:
            MatchOperationError: If the match has already started or values are invalid.
        """
        if self.match_state.match_started:
            raise MatchOperationError("Cannot configure the match after it has started")

        if period_count is not None:
            if int(period_count) not in PERIOD_OPTIONS:
                raise MatchOperationError(
                    f"Period count must be one of {PERIOD_OPTIONS}, got {period_count}"
                )
            self.match_state.period_count = int(period_count)
        if period_duration_minutes is not None:
            if int(period_duration_minutes) not in DURATION_OPTIONS:
                raise MatchOperationError(
                    f"Period duration must be one of {DURATION_OPTIONS}, got {period_duration_minutes}"
                )
            self.match_state.period_duration_minutes = int(period_duration_minutes)
        if formation_type is not None:
            self.match_state.formation_type = FormationType(formation_type)

    def set_squad(self, selected_ids: Iterable[str], now: Optional[float] = None) -> List[str]:
        """Replace the squad selection.

        When ``now`` is given, open stints of leaving players are closed first so
        their time up to that moment is kept. Once the match has started,
        leaving players drop out of the rotation queue and new ones join at
        the back.

        Raises:
            MatchOperationError: If a player placed in the live formation is removed.
        """
        state = self.match_state
        requested = list(dict.fromkeys(selected_ids))
        requested_set = set(requested)
        previous = set(state.selected_squad_ids)
        leaving = [p for p in state.squad_players() if p.id not in requested_set]

        if state.period_active:
            for player in leaving:
                if find_slot_of(state.formation, player.id) is not None:
                    raise MatchOperationError(
                        f"Player '{player.name}' is in the current formation and cannot leave the squad"
                    )

        if now is not None:
            for player in leaving:
                if player.stats.stint_open:
                    end_stint(player, now)

        _, selection = apply_squad_selection(state.players, requested)
        state.selected_squad_ids = selection

        if state.match_started:
            queue = state.rotation_queue
            for player in leaving:
                queue.remove_player(player.id)
                if queue.is_inactive(player.id):
                    queue.inactive_players.remove(player.id)
            for player_id in selection:
                if player_id not in previous:
                    queue.add_player(player_id)

        logger.info("Squad updated: %d players selected", len(selection))
        return selection

    def add_temporary_player(self, name: str) -> Player:
        """Add a guest to the roster and squad; joins the back of the rotation once started."""
        state = self.match_state
        player = add_temporary_player(state.players, state.selected_squad_ids, name)
        if state.match_started:
            state.rotation_queue.add_player(player.id)
        return player

    # ------------------------------------------------------------------
    # Periods
    # ------------------------------------------------------------------
    def start_period(self, formation: Mapping[str, Any], now: float) -> None:
        """Place the squad according to ``formation`` and open their stints.

        In the first period the match-start snapshot of every squad player is
        recorded. Squad players not placed in the formation start on the bench.
        The rotation queue is rebuilt from the formation: on-field players in
        slot order, then the bench.
        """
        state = self.match_state
        if state.finished:
            raise MatchOperationError("The match has already finished")
        if state.period_active:
            raise MatchOperationError("A period is already in progress")
        if not state.selected_squad_ids:
            raise MatchOperationError("No players selected for the squad")

        try:
            assignments = resolve_formation(formation)
        except ValueError as exc:
            raise MatchOperationError(str(exc)) from exc

        outside = [pid for pid in assignments if pid not in state.selected_squad_ids]
        if outside:
            raise MatchOperationError(f"Players not in the squad: {', '.join(outside)}")

        first_period = not state.match_started
        for player in state.squad_players():
            assignment = assignments.get(player.id, _UNASSIGNED)
            if first_period:
                player.stats.started_match_as = _STARTED_AS[assignment.status]
                player.stats.started_at_role = assignment.role
                player.stats.started_at_position = assignment.pair_key
            begin_stint(player, assignment.role, assignment.status, assignment.pair_key, now)

        state.formation = copy.deepcopy(dict(formation))
        goalie_id = state.formation.get(GOALIE_SLOT)
        if goalie_id:
            state.period_goalie_ids[state.current_period_number] = goalie_id
        self._rebuild_rotation_queue(assignments, goalie_id)

        state.match_started = True
        state.period_active = True
        state.paused = False
        logger.info("Period %d started", state.current_period_number)

    def end_period(self, now: float) -> None:
        """Close all squad stints, count the period per final role and log it."""
        state = self.match_state
        self._require_active_period()
        self._close_period(now)

        if state.current_period_number >= state.period_count:
            state.finished = True
            logger.info("Match finished after %d periods", state.current_period_number)
        else:
            state.current_period_number += 1

    def end_match(self, now: float) -> None:
        """Finish the match early.

        A period in progress is closed and counted as played, then every
        remaining open stint is closed.
        """
        state = self.match_state
        if state.period_active:
            self._close_period(now)
        closed = close_all_stints(state.players, now)
        state.period_active = False
        state.paused = False
        state.finished = True
        logger.info("Match ended; %d stints closed", closed)

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------
    def pause(self, now: float) -> None:
        self._require_active_period()
        if self.match_state.paused:
            raise MatchOperationError("The match is already paused")
        pause_stints(self.match_state.squad_players(), now)
        self.match_state.paused = True

    def resume(self, now: float) -> None:
        if not self.match_state.period_active or not self.match_state.paused:
            raise MatchOperationError("The match is not paused")
        resume_stints(self.match_state.squad_players(), now)
        self.match_state.paused = False

    def sync_time(self, now: float) -> None:
        """Credit elapsed time of all open squad stints without ending them."""
        for player in self.match_state.squad_players():
            flush_stint(player, now)

    # ------------------------------------------------------------------
    # Rotation
    # ------------------------------------------------------------------
    def substitute(self, player_out_id: str, player_in_id: str, now: float) -> None:
        """Swap an on-field player with a bench player, exchanging their slots.

        The player coming off moves to the back of the rotation queue.
        """
        self._require_running()
        player_out = self._squad_player(player_out_id)
        player_in = self._squad_player(player_in_id)

        if player_out.stats.current_status is not PlayerStatus.ON_FIELD:
            raise MatchOperationError(f"Player '{player_out.name}' is not on the field")
        if player_in.stats.current_status is not PlayerStatus.SUBSTITUTE:
            raise MatchOperationError(f"Player '{player_in.name}' is not a substitute")
        if is_player_inactive(self.match_state.players, player_in.id):
            raise MatchOperationError(f"Player '{player_in.name}' is inactive")

        self._swap_slots(player_out, player_in, now)
        self.match_state.rotation_queue.rotate_player(player_out.id)
        logger.info("Substitution: %s off, %s on", player_out.name, player_in.name)

    def change_goalie(self, new_goalie_id: str, now: float) -> None:
        """Put a squad player in goal; the previous goalie takes their slot and queue place."""
        self._require_running()
        state = self.match_state
        new_goalie = self._squad_player(new_goalie_id)
        current_id = state.formation.get(GOALIE_SLOT)

        if current_id == new_goalie.id:
            raise MatchOperationError(f"Player '{new_goalie.name}' is already the goalie")
        if is_player_inactive(state.players, new_goalie.id):
            raise MatchOperationError(f"Player '{new_goalie.name}' is inactive")

        current = find_player_by_id(state.players, current_id)
        if current is None:
            self._move_to_slot(new_goalie, GOALIE_SLOT, None, now)
            state.rotation_queue.remove_player(new_goalie.id)
        else:
            self._swap_slots(current, new_goalie, now)
            state.rotation_queue.replace_player(new_goalie.id, current.id)
        state.period_goalie_ids[state.current_period_number] = new_goalie.id
        logger.info("Goalie changed to %s", new_goalie.name)

    def swap_pair_roles(self, pair_key: str, now: float) -> None:
        """Swap defender and attacker inside a pair."""
        self._require_running()
        pair = self.match_state.formation.get(pair_key)
        if not isinstance(pair, dict) or not pair.get("defender") or not pair.get("attacker"):
            raise MatchOperationError(f"'{pair_key}' is not a complete pair")

        defender = self._squad_player(pair["defender"])
        attacker = self._squad_player(pair["attacker"])
        self._swap_slots(defender, attacker, now)

    def set_player_inactive(self, player_id: str, inactive: bool) -> None:
        """Take a bench player out of (or back into) the rotation."""
        player = self._squad_player(player_id)
        if inactive and player.stats.current_status not in (None, PlayerStatus.SUBSTITUTE):
            raise MatchOperationError("Only substitutes can be made inactive")
        player.stats.is_inactive = inactive

        queue = self.match_state.rotation_queue
        if inactive:
            queue.deactivate_player(player.id)
        elif queue.is_inactive(player.id):
            queue.reactivate_player(player.id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def role_points(self) -> Dict[str, RolePoints]:
        """Role points of every player who took part in the match."""
        return {
            p.id: calculate_role_points(p)
            for p in self.match_state.players
            if p.stats.started_match_as is not None
        }

    def rotation_recommendation(self) -> Dict[str, Optional[str]]:
        """Next player to come off and next to go on, following the rotation queue."""
        lookup = create_player_lookup(self.match_state.squad_players())
        next_off = next_on = None
        for player_id in self.match_state.rotation_queue.queue:
            player = lookup(player_id)
            if player is None:
                continue
            status = player.stats.current_status
            if next_off is None and status is PlayerStatus.ON_FIELD:
                next_off = player_id
            elif next_on is None and status is PlayerStatus.SUBSTITUTE and not player.stats.is_inactive:
                next_on = player_id
        return {"next_off": next_off, "next_on": next_on}

    def squad_overview(self) -> Dict[str, Any]:
        """Ids of the squad grouped for display."""
        state = self.match_state
        squad_ids = state.selected_squad_ids
        goalie_id = state.formation.get(GOALIE_SLOT)
        return {
            "on_field_ids": [
                p.id for p in get_players_by_status(state.players, squad_ids, PlayerStatus.ON_FIELD)
            ],
            "bench_ids": [
                p.id for p in get_players_by_status(state.players, squad_ids, PlayerStatus.SUBSTITUTE)
            ],
            "outfield_ids": [p.id for p in get_outfield_players(state.players, squad_ids, goalie_id)],
            "goalie_id": goalie_id,
            "has_inactive_players": has_inactive_players_in_squad(state.players, squad_ids),
        }

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _require_active_period(self) -> None:
        if not self.match_state.period_active:
            raise MatchOperationError("No period is in progress")

    def _require_running(self) -> None:
        self._require_active_period()
        if self.match_state.paused:
            raise MatchOperationError("Resume the match first")

    def _squad_player(self, player_id: str) -> Player:
        if player_id not in self.match_state.selected_squad_ids:
            raise MatchOperationError(f"Player '{player_id}' is not in the squad")
        player = self.match_state.get_player(player_id)
        if player is None:
            raise MatchOperationError(f"Unknown player '{player_id}'")
        return player

    def _close_period(self, now: float) -> None:
        state = self.match_state
        squad = state.squad_players()
        close_all_stints(squad, now)

        for player in squad:
            role = player.stats.current_role
            if role is PlayerRole.GOALIE:
                player.stats.periods_as_goalie += 1
            elif role is PlayerRole.DEFENDER:
                player.stats.periods_as_defender += 1
            elif role is PlayerRole.ATTACKER:
                player.stats.periods_as_attacker += 1

        state.game_log.append({
            "period_number": state.current_period_number,
            "formation": copy.deepcopy(state.formation),
            "final_stats_snapshot": [
                {"id": p.id, "name": p.name, "stats": p.stats.to_dict()} for p in state.players
            ],
        })

        state.period_active = False
        state.paused = False
        logger.info("Period %d ended", state.current_period_number)

    def _rebuild_rotation_queue(self, assignments: Mapping[str, SlotAssignment], goalie_id: Optional[str]) -> None:
        state = self.match_state
        outfield = [p.id for p in get_outfield_players(state.players, state.selected_squad_ids, goalie_id)]
        placed = [pid for pid in assignments if pid in outfield]
        on_field = [pid for pid in placed if assignments[pid].status is PlayerStatus.ON_FIELD]
        bench = [pid for pid in placed if pid not in on_field]
        bench += [pid for pid in outfield if pid not in assignments]
        queue = state.rotation_queue
        queue.reset(on_field + bench)
        for player in state.squad_players():
            if player.stats.is_inactive:
                queue.deactivate_player(player.id)

    def _set_slot(self, slot: Optional[Tuple[str, Optional[str]]], player_id: Optional[str]) -> None:
        if slot is None:
            return
        key, sub_role = slot
        if sub_role is None:
            self.match_state.formation[key] = player_id
        else:
            self.match_state.formation[key][sub_role] = player_id

    def _move_to_slot(self, player: Player, key: str, sub_role: Optional[str], now: float) -> None:
        self._set_slot(find_slot_of(self.match_state.formation, player.id), None)
        self._set_slot((key, sub_role), player.id)
        assignment = resolve_slot(key, sub_role)
        end_stint(player, now)
        begin_stint(player, assignment.role, assignment.status, assignment.pair_key, now)

    def _swap_slots(self, first: Player, second: Player, now: float) -> None:
        formation = self.match_state.formation
        first_slot = find_slot_of(formation, first.id)
        second_slot = find_slot_of(formation, second.id)

        self._set_slot(first_slot, second.id)
        self._set_slot(second_slot, first.id)

        for player, slot in ((first, second_slot), (second, first_slot)):
            assignment = resolve_slot(*slot) if slot is not None else _UNASSIGNED
            end_stint(player, now)
            begin_stint(player, assignment.role, assignment.status, assignment.pair_key, now)
