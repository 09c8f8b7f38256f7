"""
Stint tracking for the Fairplay rotation engine.

A stint is a continuous interval during which a player holds one fixed
role/status/pair assignment. Transitions are always end-then-begin; the
elapsed time of a closed stint is credited to the player's cumulative
duration counters.

All timestamps are epoch seconds supplied by the caller; this module never
reads the clock.
"""
import logging
import math
from typing import Iterable, Optional

from ..models.player import Player, PlayerRole, PlayerStats, PlayerStatus

logger = logging.getLogger(__name__)


def _stint_bucket(role: Optional[PlayerRole], status: Optional[PlayerStatus]) -> Optional[str]:
    """Pick the accumulator family for a stint: goalie, sub, field or None."""
    if status is PlayerStatus.GOALIE:
        return "goalie"
    if status is PlayerStatus.SUBSTITUTE:
        return "sub"
    if status is PlayerStatus.ON_FIELD:
        return "field"

    if role is PlayerRole.GOALIE:
        return "goalie"
    if role is PlayerRole.SUBSTITUTE:
        return "sub"
    if role in (PlayerRole.DEFENDER, PlayerRole.ATTACKER, PlayerRole.ON_FIELD):
        return "field"
    return None


def _apply_stint_time(player: Player, seconds: int) -> None:
    stats = player.stats
    bucket = _stint_bucket(stats.current_role, stats.current_status)

    if bucket == "goalie":
        stats.time_as_goalie_seconds += seconds
    elif bucket == "sub":
        stats.time_as_sub_seconds += seconds
    elif bucket == "field":
        stats.time_on_field_seconds += seconds
        if stats.current_role is PlayerRole.DEFENDER:
            stats.time_as_defender_seconds += seconds
        elif stats.current_role is PlayerRole.ATTACKER:
            stats.time_as_attacker_seconds += seconds
    else:
        logger.warning(
            "Player %s has no role or status; %ss not allocated", player.id, seconds
        )


def _round_seconds(raw: float) -> int:
    """Round to the nearest whole second, halves rounding up."""
    return int(math.floor(raw + 0.5))


def _elapsed_seconds(player: Player, at_time_epoch: float) -> int:
    start = player.stats.last_stint_start_time_epoch
    elapsed = _round_seconds(at_time_epoch - start)
    if elapsed < 0:
        logger.warning(
            "Negative stint duration for player %s (start=%s, at=%s); clamped to 0",
            player.id, start, at_time_epoch,
        )
        return 0
    return elapsed


def _has_open_stint(stats: PlayerStats) -> bool:
    return stats.stint_open and stats.last_stint_start_time_epoch is not None


def begin_stint(
    player: Player,
    role: Optional[PlayerRole],
    status: Optional[PlayerStatus],
    pair_key: Optional[str],
    at_time_epoch: float,
) -> None:
    """
    Open a new stint with the given assignment.

    An already open stint is closed at ``at_time_epoch`` first so its elapsed
    time is not lost.

    Args:
        player: Player to update in place
        role: Role held during the stint
        status: Coarse status held during the stint
        pair_key: Formation slot held during the stint
        at_time_epoch: Stint start (epoch seconds)
    """
    stats = player.stats
    if _has_open_stint(stats):
        logger.debug("Implicitly closing open stint of player %s", player.id)
        end_stint(player, at_time_epoch)

    stats.current_role = role
    stats.current_status = status
    stats.current_pair_key = pair_key

    if at_time_epoch is None:
        logger.warning("begin_stint without timestamp for player %s; stint not opened", player.id)
        stats.last_stint_start_time_epoch = None
        stats.stint_open = False
        return

    stats.last_stint_start_time_epoch = at_time_epoch
    stats.stint_open = True
    logger.debug(
        "Stint opened for %s: role=%s status=%s pair=%s at=%s",
        player.id, role, status, pair_key, at_time_epoch,
    )


def end_stint(player: Player, at_time_epoch: float) -> int:
    """
    Close the open stint and credit its duration.

    Defender and attacker time is also added to the outfield total. The stint
    start timestamp is left as is; callers open the next stint with
    :func:`begin_stint`.

    Args:
        player: Player to update in place
        at_time_epoch: Stint end (epoch seconds)

    Returns:
        Seconds credited (0 when there was no open stint or the clock went backwards)
    """
    stats = player.stats
    if not _has_open_stint(stats):
        logger.warning("end_stint called without an open stint for player %s", player.id)
        stats.stint_open = False
        return 0

    elapsed = _elapsed_seconds(player, at_time_epoch)
    _apply_stint_time(player, elapsed)
    stats.stint_open = False
    logger.debug("Stint closed for %s: %ss credited", player.id, elapsed)
    return elapsed


def flush_stint(player: Player, now: float) -> int:
    """
    Credit the elapsed part of an open stint without closing it.

    The start is advanced by the whole seconds credited, so the remainder
    carries over to the next flush or close. A flush that lands before the
    advanced start credits nothing.

    Returns:
        Seconds credited
    """
    stats = player.stats
    if not _has_open_stint(stats):
        return 0

    raw = now - stats.last_stint_start_time_epoch
    if raw <= 0:
        return 0

    elapsed = _round_seconds(raw)
    _apply_stint_time(player, elapsed)
    stats.last_stint_start_time_epoch += elapsed
    return elapsed


def stint_elapsed_seconds(player: Player, now: float) -> int:
    """Seconds spent in the open stint so far, or 0 if none is open."""
    stats = player.stats
    if not _has_open_stint(stats):
        return 0
    return max(0, _round_seconds(now - stats.last_stint_start_time_epoch))


def close_all_stints(players: Iterable[Player], now: float) -> int:
    """
    Close every open stint, e.g. at match end.

    Returns:
        Number of stints closed
    """
    closed = 0
    for player in players:
        if _has_open_stint(player.stats):
            end_stint(player, now)
            closed += 1
    return closed


def pause_stints(players: Iterable[Player], now: float) -> int:
    """Close open stints at a pause boundary so paused time is never counted."""
    closed = close_all_stints(players, now)
    logger.debug("Paused %d stints at %s", closed, now)
    return closed


def resume_stints(players: Iterable[Player], now: float) -> int:
    """
    Reopen the stints closed by :func:`pause_stints`.

    Only players that still carry an assignment and a stint start are
    reopened; players reset by a squad change have no start and stay closed.

    Returns:
        Number of stints reopened
    """
    reopened = 0
    for player in players:
        stats = player.stats
        if (
            not stats.stint_open
            and stats.current_status is not None
            and stats.last_stint_start_time_epoch is not None
        ):
            begin_stint(player, stats.current_role, stats.current_status, stats.current_pair_key, now)
            reopened += 1
    logger.debug("Resumed %d stints at %s", reopened, now)
    return reopened
