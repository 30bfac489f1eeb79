from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set

from factions.domain.models.action import PlayerActionType
from factions.domain.models.event import GameEvent
from factions.domain.models.faction import Faction
from factions.domain.models.stats import clamp


AMBIENT_MIN = 0
AMBIENT_MAX = 100


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _zero_action_counts() -> Dict[PlayerActionType, int]:
    return {action: 0 for action in PlayerActionType}


@dataclass
class GameState:
    player_faction: Optional[Faction] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    save_name: str = "New Game"
    current_cycle: int = 1
    created_at: datetime = field(default_factory=_utcnow)
    last_played: datetime = field(default_factory=_utcnow)
    galactic_stability: int = 40
    gate_network_integrity: int = 60
    ancient_tech_discovery: int = 10
    recent_events: List[GameEvent] = field(default_factory=list)
    galactic_news: List[str] = field(default_factory=list)
    blocked_actions: Set[PlayerActionType] = field(default_factory=set)
    recent_action_counts: Dict[PlayerActionType, int] = field(default_factory=_zero_action_counts)
    pending_choice_event_ids: List[str] = field(default_factory=list)
    achievements: List[str] = field(default_factory=list)
    has_won: bool = False
    has_lost: bool = False

    @property
    def is_over(self) -> bool:
        return bool(self.has_won or self.has_lost)

    def events_for_cycle(self, cycle: int) -> List[GameEvent]:
        return [event for event in self.recent_events if int(event.cycle) == int(cycle)]

    def find_event(self, event_id: str) -> Optional[GameEvent]:
        for event in reversed(self.recent_events):
            if event.id == event_id:
                return event
        return None

    def action_count(self, action: PlayerActionType) -> int:
        return int(self.recent_action_counts.get(action, 0))

    def mark_won(self) -> None:
        self.has_won = True

    def mark_lost(self) -> None:
        self.has_lost = True


def clamp_world(state: GameState) -> GameState:
    state.galactic_stability = clamp(state.galactic_stability, AMBIENT_MIN, AMBIENT_MAX)
    state.gate_network_integrity = clamp(state.gate_network_integrity, AMBIENT_MIN, AMBIENT_MAX)
    state.ancient_tech_discovery = clamp(state.ancient_tech_discovery, AMBIENT_MIN, AMBIENT_MAX)
    return state
