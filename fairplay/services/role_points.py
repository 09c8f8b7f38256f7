"""Role point allocation for the Fairplay rotation engine."""

import math

from ..models.match_report import Points, RolePoints
from ..models.player import Player
from ..utils.constants import TOTAL_ROLE_POINTS


def round_to_nearest_half(value: float) -> float:
    """
    Round to the nearest 0.5, halves rounding up.

    Example:
        >>> round_to_nearest_half(1.25)
        1.5
        >>> round_to_nearest_half(1.2)
        1.0
    """
    return math.floor(value * 2 + 0.5) / 2


def calculate_role_points(player: Player) -> RolePoints:
    """
    Convert a player's accumulated role time into a 3-point fairness score.

    One point is awarded per period played as goalie. The remaining budget is
    split between defender and attacker in proportion to time spent in each
    role, in 0.5 steps. Any rounding difference goes to the role with the
    larger share (attacker on a tie), so the three values add up to the
    budget whenever fewer than three goalie periods were played.

    This function reads the player and never mutates it.

    Args:
        player: Player whose stats are scored

    Returns:
        RolePoints for the player
    """
    stats = player.stats
    goalie_points = stats.periods_as_goalie
    remaining_points = TOTAL_ROLE_POINTS - goalie_points

    if remaining_points <= 0:
        return RolePoints(goalie_points, 0, 0)

    total_outfield_time = stats.time_as_defender_seconds + stats.time_as_attacker_seconds
    if total_outfield_time == 0:
        return RolePoints(goalie_points, 0, 0)

    defender_ratio = stats.time_as_defender_seconds / total_outfield_time
    attacker_ratio = stats.time_as_attacker_seconds / total_outfield_time

    defender_points: Points = round_to_nearest_half(defender_ratio * remaining_points)
    attacker_points: Points = round_to_nearest_half(attacker_ratio * remaining_points)

    difference = remaining_points - (defender_points + attacker_points)
    if difference:
        if defender_ratio > attacker_ratio:
            defender_points += difference
        else:
            attacker_points += difference

    return RolePoints(goalie_points, defender_points, attacker_points)


def format_points(points: Points) -> str:
    """Format points for display: ``"2"`` for whole values, ``"1.5"`` otherwise."""
    if float(points).is_integer():
        return str(int(points))
    return f"{points:.1f}"
