"""
Undoable match actions.

Each command records the match state right before and right after it ran.
Undo and redo swap between those two snapshots instead of re-running the
action, so a redo never replays a stale timestamp. Both are only allowed while
the match state is exactly as the command left it: any other change since
(a pause, a pair swap, a squad edit, a later sync) invalidates the history,
since rolling back across it would discard that change or credit paused time.
"""
import dataclasses
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..models import MatchState
from ..utils import now_ts
from .match_service import MatchOperationError, MatchService

logger = logging.getLogger(__name__)


@dataclass
class MatchSnapshot:
    """Serialized match state captured around a command."""
    timestamp: float
    state: Dict[str, Any]

    @classmethod
    def from_match_state(cls, match_state: MatchState) -> 'MatchSnapshot':
        return cls(timestamp=now_ts(), state=match_state.to_json())

    def matches(self, match_state: MatchState) -> bool:
        """True if ``match_state`` still equals the captured state."""
        return match_state.to_json() == self.state

    def restore_into(self, match_state: MatchState) -> None:
        """Overwrite ``match_state`` in place with the captured values."""
        restored = MatchState.from_json(self.state)
        for f in dataclasses.fields(MatchState):
            setattr(match_state, f.name, getattr(restored, f.name))


class MatchCommand(ABC):
    """A match action applied through a MatchService at a fixed time."""

    def __init__(self, service: MatchService, now: float):
        self.service = service
        self.now = now
        self.before: Optional[MatchSnapshot] = None
        self.after: Optional[MatchSnapshot] = None
        self.last_error: Optional[str] = None

    @property
    def match_state(self) -> MatchState:
        return self.service.match_state

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description for the history list."""

    @abstractmethod
    def _apply(self) -> None:
        pass

    def execute(self) -> bool:
        """
        Run the action once.

        A rejected action leaves the match state untouched.

        Returns:
            True if the action was applied
        """
        before = MatchSnapshot.from_match_state(self.match_state)
        try:
            self._apply()
        except (MatchOperationError, ValueError) as e:
            logger.warning("%s failed: %s", self.description, e)
            self.last_error = str(e)
            before.restore_into(self.match_state)
            return False
        self.before = before
        self.after = MatchSnapshot.from_match_state(self.match_state)
        self.last_error = None
        return True

    def undo(self) -> None:
        self.before.restore_into(self.match_state)

    def redo(self) -> None:
        self.after.restore_into(self.match_state)

    def is_undoable(self) -> bool:
        return self.after is not None and self.after.matches(self.match_state)

    def is_redoable(self) -> bool:
        return self.before is not None and self.before.matches(self.match_state)


class SubstituteCommand(MatchCommand):
    """Swap an on-field player with a bench player."""

    def __init__(self, service: MatchService, player_out_id: str, player_in_id: str, now: float):
        super().__init__(service, now)
        self.player_out_id = player_out_id
        self.player_in_id = player_in_id

    def _apply(self) -> None:
        self.service.substitute(self.player_out_id, self.player_in_id, self.now)

    @property
    def description(self) -> str:
        return f"Substitute {self.player_out_id} → {self.player_in_id}"


class ChangeGoalieCommand(MatchCommand):
    """Put a different player in goal."""

    def __init__(self, service: MatchService, new_goalie_id: str, now: float):
        super().__init__(service, now)
        self.new_goalie_id = new_goalie_id

    def _apply(self) -> None:
        self.service.change_goalie(self.new_goalie_id, self.now)

    @property
    def description(self) -> str:
        return f"Goalie → {self.new_goalie_id}"


class EndPeriodCommand(MatchCommand):
    """End the current period."""

    def _apply(self) -> None:
        self.service.end_period(self.now)

    @property
    def description(self) -> str:
        return "End Period"


class MatchCommandManager:
    """
    Undo/redo history of match commands.

    The history is dropped as soon as the match state has moved on from the
    point a command left it at.
    """

    def __init__(self, max_history: int = 50):
        self.max_history = max_history
        self._history: List[MatchCommand] = []
        self._index = -1

    def execute_command(self, command: MatchCommand) -> bool:
        """
        Run a command and record it.

        Returns:
            True if the command was applied
        """
        if not command.execute():
            return False

        del self._history[self._index + 1:]
        self._history.append(command)
        if len(self._history) > self.max_history:
            del self._history[0]
        self._index = len(self._history) - 1
        return True

    def undo(self) -> bool:
        """
        Revert the most recent command.

        Returns:
            False when there is nothing to undo or the match changed since
            the command ran (the history is cleared in that case)
        """
        if not self.can_undo():
            return False
        command = self._history[self._index]
        if not command.is_undoable():
            self._invalidate(command)
            return False
        command.undo()
        self._index -= 1
        return True

    def redo(self) -> bool:
        """Reapply the last undone command, with the same result as before."""
        if not self.can_redo():
            return False
        command = self._history[self._index + 1]
        if not command.is_redoable():
            self._invalidate(command)
            return False
        command.redo()
        self._index += 1
        return True

    def can_undo(self) -> bool:
        return self._index >= 0

    def can_redo(self) -> bool:
        return self._index < len(self._history) - 1

    def get_command_history(self) -> List[str]:
        return [cmd.description for cmd in self._history]

    def clear_history(self) -> None:
        self._history.clear()
        self._index = -1

    def _invalidate(self, command: MatchCommand) -> None:
        logger.info("Match changed since '%s'; command history cleared", command.description)
        self.clear_history()
