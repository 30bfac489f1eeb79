from abc import ABC, abstractmethod
from typing import List, Optional

from factions.domain.models.achievement import GlobalAchievement
from factions.domain.models.game_state import GameState


class GameStateRepository(ABC):
    @abstractmethod
    def get(self, game_id: str) -> Optional[GameState]:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> List[GameState]:
        raise NotImplementedError

    @abstractmethod
    def save(self, state: GameState) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, game_id: str) -> bool:
        raise NotImplementedError

    def list_recent(self) -> List[GameState]:
        """Saved games ordered by last played, newest first."""
        return sorted(self.list_all(), key=lambda state: state.last_played, reverse=True)


class AchievementRepository(ABC):
    @abstractmethod
    def is_unlocked(self, name: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def unlock(self, name: str, description: str = "") -> bool:
        """Record ``name``; returns False when it was already unlocked."""
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> List[GlobalAchievement]:
        raise NotImplementedError
