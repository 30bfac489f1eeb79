from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from factions.application.services import balance_tables as bt
from factions.domain.models import achievement as names
from factions.domain.models.faction import Faction
from factions.domain.models.game_state import GameState
from factions.domain.repositories import AchievementRepository


logger = logging.getLogger(__name__)


@dataclass
class EvaluationResult:
    unlocked: List[str] = field(default_factory=list)
    won: bool = False
    lost: bool = False
    loss_reason: str = ""


def defeat_reason(state: GameState) -> Optional[str]:
    faction = state.player_faction
    if faction is None:
        return None
    for label, value in (
        ("stability", faction.stability),
        ("population", faction.population),
        ("resources", faction.resources),
    ):
        if int(value) <= 0:
            return f"{label} depleted"
    if int(state.galactic_stability) <= 0:
        return "galactic stability collapsed"
    return None


def is_victorious(state: GameState) -> bool:
    faction = state.player_faction
    if faction is None:
        return False
    return int(state.current_cycle) > bt.VICTORY_CYCLE or int(faction.technology) >= bt.VICTORY_TECHNOLOGY


# Stat milestones checked every cycle regardless of the game's outcome.
MILESTONES: Tuple[Tuple[str, Callable[[GameState, Faction], bool]], ...] = (
    (names.SURVIVOR, lambda state, faction: int(state.current_cycle) >= bt.SURVIVOR_CYCLE),
    (names.MASTER_OF_TECHNOLOGY, lambda state, faction: int(faction.technology) >= bt.VICTORY_TECHNOLOGY),
    (names.TECH_ASCENDANT, lambda state, faction: int(faction.technology) >= bt.VICTORY_TECHNOLOGY),
    (names.LEGENDARY_REPUTATION, lambda state, faction: int(faction.reputation) >= bt.LEGENDARY_REPUTATION),
    (names.WARLORD, lambda state, faction: int(faction.military) >= bt.WARLORD_MILITARY),
)


class AchievementEvaluator:
    def __init__(self, achievement_repo: AchievementRepository) -> None:
        self.achievement_repo = achievement_repo

    def evaluate(self, state: GameState) -> EvaluationResult:
        """Set terminal flags and unlock achievements for the resolved cycle.

        Defeat is checked before victory; a game lost this cycle is never
        also won.
        """

        result = EvaluationResult()
        faction = state.player_faction
        if faction is None:
            return result

        if not state.is_over:
            reason = defeat_reason(state)
            if reason is not None:
                state.mark_lost()
                result.lost = True
                result.loss_reason = reason
                self._unlock(state, names.DEFEAT, result)
            elif is_victorious(state):
                state.mark_won()
                result.won = True
                self._unlock(state, names.VICTORY, result)
                if not self.achievement_repo.is_unlocked(names.FIRST_VICTORY):
                    self._unlock(state, names.FIRST_VICTORY, result)

        for name, condition in MILESTONES:
            if condition(state, faction):
                self._unlock(state, name, result)
        return result

    def _unlock(self, state: GameState, name: str, result: EvaluationResult) -> None:
        if name not in state.achievements:
            state.achievements.append(name)
        if self.achievement_repo.is_unlocked(name):
            return
        if self.achievement_repo.unlock(name, names.ACHIEVEMENT_DESCRIPTIONS.get(name, "")):
            logger.info("Achievement unlocked: %s", name)
            result.unlocked.append(name)
