from __future__ import annotations

import logging
from typing import List, Optional

from factions.application.services import balance_tables as bt
from factions.application.services.event_catalog import (
    ANCIENT_TECHNOLOGY_UNEARTHED,
    ARCHETYPE_EVENTS,
    CATEGORY_TABLES,
    DILEMMAS,
    DIPLOMATIC_OVERTURE,
    crisis_for,
    repetition_penalty,
)
from factions.application.services.random_source import RandomSource
from factions.domain.models.action import PlayerActionType
from factions.domain.models.event import EventCategory, GameEvent
from factions.domain.models.game_state import GameState


logger = logging.getLogger(__name__)

ROLLED_CATEGORIES = (
    EventCategory.MILITARY,
    EventCategory.ECONOMIC,
    EventCategory.TECHNOLOGICAL,
    EventCategory.DISCOVERY,
    EventCategory.NATURAL,
)
POSITIVE_CATEGORIES = (
    EventCategory.DISCOVERY,
    EventCategory.TECHNOLOGICAL,
)


def reputation_skew(reputation: int) -> int:
    """Signed widening of the main event window, in percentage points."""
    magnitude = min(
        bt.REPUTATION_WINDOW_CAP,
        (abs(int(reputation)) // bt.REPUTATION_WINDOW_STEP) * bt.REPUTATION_WINDOW_BONUS,
    )
    return magnitude if int(reputation) >= 0 else -magnitude


class EventSelector:
    """Draws the narrative events for one cycle from a single random source.

    Draw order is fixed so a seeded source replays the same cycle: the
    dilemma roll first, then the main roll, the galactic crisis roll, the
    ancient surge roll and the overture roll.
    """

    def __init__(self, random_source: RandomSource) -> None:
        self.random = random_source

    def select_events(self, state: GameState) -> List[GameEvent]:
        cycle = int(state.current_cycle)
        if self.random.chance(bt.DILEMMA_CHANCE):
            template = DILEMMAS[self.random.next_below(len(DILEMMAS))]
            logger.debug("Dilemma %r selected for cycle %s", template.title, cycle)
            return [template.build(cycle)]

        events: List[GameEvent] = []
        for action in PlayerActionType:
            if state.action_count(action) >= bt.REPETITION_THRESHOLD:
                events.append(repetition_penalty(action, cycle))

        category = self._roll_main_category(state)
        if category is not None:
            events.append(self.generate(category, state))

        if int(state.galactic_stability) <= bt.GALACTIC_CRISIS_THRESHOLD and self.random.chance(bt.GALACTIC_CRISIS_CHANCE):
            events.append(self.generate(EventCategory.CRISIS, state))

        if int(state.ancient_tech_discovery) >= bt.ANCIENT_SURGE_THRESHOLD and self.random.chance(bt.ANCIENT_SURGE_CHANCE):
            events.append(ANCIENT_TECHNOLOGY_UNEARTHED.build(cycle))

        if self.random.chance(bt.OVERTURE_CHANCE):
            events.append(DIPLOMATIC_OVERTURE.build(cycle))

        if events:
            logger.debug("Selected events for cycle %s: %s", cycle, [event.title for event in events])
        return events

    def _roll_main_category(self, state: GameState) -> Optional[EventCategory]:
        reputation = state.player_faction.reputation if state.player_faction is not None else 0
        skew = reputation_skew(reputation)
        roll = self.random.next_int(1, 101)
        if roll > bt.MAIN_EVENT_WINDOW + abs(skew):
            return None
        if int(state.galactic_stability) < bt.LOW_GALACTIC_STABILITY and self.random.chance(bt.LOW_STABILITY_CRISIS_CHANCE):
            return EventCategory.CRISIS
        if roll > bt.MAIN_EVENT_WINDOW:
            if skew > 0:
                return POSITIVE_CATEGORIES[self.random.next_below(len(POSITIVE_CATEGORIES))]
            return EventCategory.CRISIS
        return ROLLED_CATEGORIES[self.random.next_below(len(ROLLED_CATEGORIES))]

    def generate(self, category: EventCategory, state: GameState) -> GameEvent:
        cycle = int(state.current_cycle)
        faction = state.player_faction
        if category == EventCategory.CRISIS:
            if faction is None:
                return crisis_for(100, 100, 100).build(cycle)
            return crisis_for(faction.population, faction.resources, faction.stability).build(cycle)

        faction_type = faction.faction_type if faction is not None else None
        for bonus in ARCHETYPE_EVENTS.get(category, ()):
            if bonus.faction_type != faction_type:
                continue
            if self.random.chance(bonus.chance):
                return bonus.template.build(cycle)

        table = CATEGORY_TABLES[category]
        return table[self.random.next_below(len(table))].build(cycle)
