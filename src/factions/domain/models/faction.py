from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from factions.domain.models.stats import FactionStatus, StatKey, clamp_stat, derive_status


class FactionType(str, Enum):
    MILITARY_JUNTA = "military_junta"
    CORPORATE_COUNCIL = "corporate_council"
    RELIGIOUS_ORDER = "religious_order"
    PIRATE_ALLIANCE = "pirate_alliance"
    TECHNOCRATIC_UNION = "technocratic_union"
    REBELLION_CELL = "rebellion_cell"
    IMPERIAL_REMNANT = "imperial_remnant"
    ANCIENT_AWAKENED = "ancient_awakened"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()

    @property
    def description(self) -> str:
        return FACTION_DESCRIPTIONS.get(self, DEFAULT_FACTION_DESCRIPTION)

    @property
    def traits(self) -> tuple[str, ...]:
        return FACTION_TRAITS.get(self, DEFAULT_FACTION_TRAITS)


DEFAULT_FACTION_DESCRIPTION = "A faction struggling for survival in a dying galaxy."
DEFAULT_FACTION_TRAITS = ("Determined", "Adaptive")

FACTION_DESCRIPTIONS = {
    FactionType.MILITARY_JUNTA: "A ruthless military organization maintaining order through force.",
    FactionType.CORPORATE_COUNCIL: "Mega-corporations united in pursuit of profit above all else.",
    FactionType.RELIGIOUS_ORDER: "Zealous believers seeking to spread their faith across the stars.",
    FactionType.PIRATE_ALLIANCE: "Raiders and smugglers operating outside galactic law.",
    FactionType.TECHNOCRATIC_UNION: "Scientists and engineers believing technology will save civilization.",
    FactionType.REBELLION_CELL: "Freedom fighters opposing tyranny wherever they find it.",
    FactionType.IMPERIAL_REMNANT: "Loyalists clinging to the glory of the fallen empire.",
    FactionType.ANCIENT_AWAKENED: "Mysterious beings from a bygone era, recently stirred to action.",
}

FACTION_TRAITS = {
    FactionType.MILITARY_JUNTA: ("Disciplined", "Aggressive", "Organized"),
    FactionType.CORPORATE_COUNCIL: ("Wealthy", "Calculating", "Opportunistic"),
    FactionType.RELIGIOUS_ORDER: ("Fanatical", "United", "Missionary"),
    FactionType.PIRATE_ALLIANCE: ("Mobile", "Unpredictable", "Resourceful"),
    FactionType.TECHNOCRATIC_UNION: ("Innovative", "Logical", "Progressive"),
    FactionType.REBELLION_CELL: ("Idealistic", "Guerrilla", "Inspiring"),
    FactionType.IMPERIAL_REMNANT: ("Traditional", "Proud", "Declining"),
    FactionType.ANCIENT_AWAKENED: ("Mysterious", "Powerful", "Alien"),
}


@dataclass
class Faction:
    name: str
    faction_type: FactionType
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    is_player: bool = False
    description: str = ""
    traits: List[str] = field(default_factory=list)
    population: int = 0
    military: int = 0
    technology: int = 0
    influence: int = 0
    resources: int = 0
    stability: int = 50
    reputation: int = 25
    status: FactionStatus = FactionStatus.STABLE

    def get_stat(self, key: StatKey) -> int:
        return int(getattr(self, key.value))

    def set_stat(self, key: StatKey, value: int) -> None:
        setattr(self, key.value, int(value))

    def adjust_stat(self, key: StatKey, delta: int) -> int:
        """Add ``delta`` without clamping; callers clamp once per mutation batch."""

        updated = self.get_stat(key) + int(delta)
        self.set_stat(key, updated)
        return updated

    def stats(self) -> dict[StatKey, int]:
        return {key: self.get_stat(key) for key in StatKey}


def clamp_faction(faction: Faction) -> Faction:
    """Saturate every bounded stat and re-derive status.

    This is the only place ``status`` is written.
    """

    for key in StatKey:
        faction.set_stat(key, clamp_stat(key, faction.get_stat(key)))
    faction.status = derive_status(faction.stability, faction.population, faction.resources)
    return faction
