from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from factions.domain.models.action import PlayerActionType
from factions.domain.models.stats import StatKey


class EventCategory(str, Enum):
    MILITARY = "military"
    ECONOMIC = "economic"
    TECHNOLOGICAL = "technological"
    CRISIS = "crisis"
    DISCOVERY = "discovery"
    NATURAL = "natural"

    @property
    def display_name(self) -> str:
        return self.value.title()


@dataclass(frozen=True)
class EventChoice:
    description: str
    effects: Mapping[StatKey, int] = field(default_factory=dict)
    blocked_actions: frozenset[PlayerActionType] = frozenset()
    children: tuple["EventChoice", ...] = ()

    @property
    def is_leaf(self) -> bool:
        return not self.children


@dataclass(frozen=True)
class GameEvent:
    title: str
    description: str
    category: EventCategory
    cycle: int
    effects: Mapping[StatKey, int] = field(default_factory=dict)
    blocked_actions: frozenset[PlayerActionType] = frozenset()
    unblocked_actions: frozenset[PlayerActionType] = frozenset()
    parameters: Mapping[str, Any] = field(default_factory=dict)
    choices: tuple[EventChoice, ...] = ()
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def has_choices(self) -> bool:
        return bool(self.choices)


# Parameter marker for events the session layer answers with accept/decline.
CHOICE_PARAMETER = "choice"
ACCEPT_DECLINE = "accept_decline"
