from __future__ import annotations

from typing import Iterable, List

from factions.application.services import balance_tables as bt
from factions.application.services.event_catalog import HEADLINE_TEMPLATES
from factions.domain.models.event import GameEvent
from factions.domain.models.game_state import GameState


LEGENDARY_HEADLINE = "Legendary Reputation: {faction} hailed as a galactic hero!"
RISING_STAR_HEADLINE = "Rising Star: {faction}'s reputation grows."
TURMOIL_HEADLINE = "Galaxy in Turmoil: Stability at all-time low!"
GATE_FAILING_HEADLINE = "Gate Network Failing: Travel and trade disrupted."
ANCIENT_TECH_HEADLINE = "Ancient Technology: Mysterious discoveries spark hope and fear."

# Checked top to bottom; the first matching threshold names the label.
_POSITIVE_LABELS = (
    (100, "Legendary"),
    (50, "Respected"),
    (20, "Noted"),
)
_NEGATIVE_LABELS = (
    (-100, "Infamous"),
    (-50, "Feared"),
    (-20, "Notorious"),
)


def reputation_label(reputation: int) -> str:
    value = int(reputation)
    for floor, label in _POSITIVE_LABELS:
        if value >= floor:
            return label
    for ceiling, label in _NEGATIVE_LABELS:
        if value <= ceiling:
            return label
    return "Neutral"


def headlines_for(state: GameState, new_events: Iterable[GameEvent]) -> List[str]:
    faction = state.player_faction
    faction_name = faction.name if faction is not None else "galaxy"
    headlines = [
        HEADLINE_TEMPLATES[event.category].format(title=event.title, faction=faction_name)
        for event in new_events
        if event.category in HEADLINE_TEMPLATES
    ]

    if faction is not None:
        if int(faction.reputation) >= bt.LEGENDARY_REPUTATION:
            headlines.append(LEGENDARY_HEADLINE.format(faction=faction_name))
        elif int(faction.reputation) >= bt.RISING_STAR_REPUTATION:
            headlines.append(RISING_STAR_HEADLINE.format(faction=faction_name))
    if int(state.galactic_stability) < bt.TURMOIL_GALACTIC_STABILITY:
        headlines.append(TURMOIL_HEADLINE)
    if int(state.gate_network_integrity) < bt.FAILING_GATE_INTEGRITY:
        headlines.append(GATE_FAILING_HEADLINE)
    if int(state.ancient_tech_discovery) >= bt.ANCIENT_SURGE_THRESHOLD:
        headlines.append(ANCIENT_TECH_HEADLINE)
    return headlines


def publish_headlines(state: GameState, headlines: Iterable[str]) -> List[str]:
    """Append headlines and keep only the most recent ones."""
    state.galactic_news.extend(headlines)
    if len(state.galactic_news) > bt.GALACTIC_NEWS_LIMIT:
        del state.galactic_news[: len(state.galactic_news) - bt.GALACTIC_NEWS_LIMIT]
    return list(state.galactic_news)
