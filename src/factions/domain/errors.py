from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from factions.domain.models.game_state import GameState


class FactionsError(Exception):
    """Base class for every error the engine raises on purpose."""


class PreconditionError(FactionsError):
    """Raised when an operation is invoked against a state that cannot accept it."""


class PersistenceError(FactionsError):
    """A resolved turn could not be committed.

    ``state`` is the fully resolved game state that failed to save and
    ``report`` the turn report that produced it, so the caller can retry the
    commit without re-running the turn.
    """

    def __init__(self, message: str, state: Optional["GameState"] = None, report: Any = None) -> None:
        super().__init__(message)
        self.state = state
        self.report = report
