import copy
from datetime import datetime, timezone
from typing import Dict, List, Optional

from factions.domain.models.achievement import GlobalAchievement
from factions.domain.models.game_state import GameState
from factions.domain.repositories import AchievementRepository, GameStateRepository


class InMemoryGameStateRepository(GameStateRepository):
    """Stores deep copies so callers never share state with the store."""

    def __init__(self) -> None:
        self._games: Dict[str, GameState] = {}

    def get(self, game_id: str) -> Optional[GameState]:
        stored = self._games.get(str(game_id))
        return copy.deepcopy(stored) if stored is not None else None

    def list_all(self) -> List[GameState]:
        return [copy.deepcopy(state) for state in self._games.values()]

    def save(self, state: GameState) -> None:
        self._games[state.id] = copy.deepcopy(state)

    def delete(self, game_id: str) -> bool:
        return self._games.pop(str(game_id), None) is not None


class InMemoryAchievementRepository(AchievementRepository):
    def __init__(self) -> None:
        self._achievements: Dict[str, GlobalAchievement] = {}

    def is_unlocked(self, name: str) -> bool:
        return str(name) in self._achievements

    def unlock(self, name: str, description: str = "") -> bool:
        key = str(name)
        if key in self._achievements:
            return False
        self._achievements[key] = GlobalAchievement(
            name=key,
            description=str(description or ""),
            unlocked_at=datetime.now(timezone.utc),
        )
        return True

    def list_all(self) -> List[GlobalAchievement]:
        return [copy.copy(achievement) for achievement in self._achievements.values()]
