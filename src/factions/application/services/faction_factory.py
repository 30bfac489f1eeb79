from __future__ import annotations

from typing import Dict, Mapping

from factions.application.services import balance_tables as bt
from factions.application.services.random_source import RandomSource
from factions.domain.models.faction import Faction, FactionType, clamp_faction
from factions.domain.models.stats import StatKey


ARCHETYPE_MODIFIERS: Dict[FactionType, Mapping[StatKey, int]] = {
    FactionType.MILITARY_JUNTA: {StatKey.MILITARY: 15, StatKey.STABILITY: -10},
    FactionType.CORPORATE_COUNCIL: {StatKey.RESOURCES: 15, StatKey.REPUTATION: -10},
    FactionType.TECHNOCRATIC_UNION: {StatKey.TECHNOLOGY: 15, StatKey.INFLUENCE: -10},
    FactionType.RELIGIOUS_ORDER: {StatKey.POPULATION: 10, StatKey.INFLUENCE: 10, StatKey.TECHNOLOGY: -10},
    FactionType.IMPERIAL_REMNANT: {
        StatKey.INFLUENCE: 10,
        StatKey.MILITARY: 10,
        StatKey.REPUTATION: 10,
        StatKey.RESOURCES: -10,
    },
    FactionType.ANCIENT_AWAKENED: {StatKey.TECHNOLOGY: 20, StatKey.POPULATION: -20},
    FactionType.PIRATE_ALLIANCE: {StatKey.MILITARY: 10, StatKey.RESOURCES: 10, StatKey.STABILITY: -10},
    FactionType.REBELLION_CELL: {StatKey.STABILITY: 10, StatKey.INFLUENCE: 10, StatKey.RESOURCES: -10},
}

# Applied after the starting draw and player bonus.
ARCHETYPE_BONUS: Dict[FactionType, Mapping[StatKey, int]] = {
    FactionType.MILITARY_JUNTA: {StatKey.MILITARY: 5},
    FactionType.CORPORATE_COUNCIL: {StatKey.RESOURCES: 5},
    FactionType.RELIGIOUS_ORDER: {StatKey.STABILITY: 5},
    FactionType.PIRATE_ALLIANCE: {StatKey.INFLUENCE: 5},
    FactionType.TECHNOCRATIC_UNION: {StatKey.TECHNOLOGY: 5},
    FactionType.REBELLION_CELL: {StatKey.STABILITY: 3, StatKey.INFLUENCE: 2},
    FactionType.IMPERIAL_REMNANT: {StatKey.POPULATION: 4, StatKey.REPUTATION: 1},
    FactionType.ANCIENT_AWAKENED: {StatKey.TECHNOLOGY: 3, StatKey.STABILITY: 2},
}


class FactionFactory:
    def __init__(self, random_source: RandomSource) -> None:
        self.random = random_source

    def create(self, name: str, faction_type: FactionType | str, is_player: bool = False) -> Faction:
        clean_name = str(name or "").strip()
        if not clean_name:
            raise ValueError("Faction name is required.")
        if len(clean_name) > bt.FACTION_NAME_MAX_LENGTH:
            raise ValueError(f"Faction name must be at most {bt.FACTION_NAME_MAX_LENGTH} characters.")
        try:
            archetype = FactionType(faction_type)
        except ValueError as exc:
            raise ValueError(f"Unknown faction type: {faction_type!r}.") from exc

        faction = Faction(
            name=clean_name,
            faction_type=archetype,
            is_player=bool(is_player),
            description=archetype.description,
            traits=list(archetype.traits),
        )
        for stat_name, (low, high) in bt.STARTING_RANGES.items():
            faction.set_stat(StatKey(stat_name), self.random.next_int(int(low), int(high) + 1))

        self._apply(faction, ARCHETYPE_MODIFIERS.get(archetype, {}))
        if faction.is_player:
            self._apply(faction, {StatKey(key): value for key, value in bt.PLAYER_STARTING_BONUS.items()})
        self._apply(faction, ARCHETYPE_BONUS.get(archetype, {}))
        return clamp_faction(faction)

    @staticmethod
    def _apply(faction: Faction, deltas: Mapping[StatKey, int]) -> None:
        for key, delta in deltas.items():
            faction.adjust_stat(key, int(delta))
