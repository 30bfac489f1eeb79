from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping

from factions.domain.models.action import PlayerActionType
from factions.domain.models.faction import Faction
from factions.domain.models.game_state import GameState
from factions.domain.models.stats import StatKey


@dataclass(frozen=True)
class ActionEffect:
    faction: Mapping[StatKey, int] = field(default_factory=dict)
    galactic_stability: int = 0
    gate_network_integrity: int = 0
    ancient_tech_discovery: int = 0


ACTION_EFFECTS: Dict[PlayerActionType, ActionEffect] = {
    PlayerActionType.BUILD_DEFENSES: ActionEffect(
        faction={StatKey.MILITARY: 5, StatKey.STABILITY: 2},
    ),
    PlayerActionType.RECRUIT_TROOPS: ActionEffect(
        faction={StatKey.MILITARY: 7, StatKey.RESOURCES: -3},
    ),
    PlayerActionType.DEVELOP_INFRASTRUCTURE: ActionEffect(
        faction={StatKey.RESOURCES: 5, StatKey.STABILITY: 2},
    ),
    PlayerActionType.EXPLOIT_RESOURCES: ActionEffect(
        faction={StatKey.RESOURCES: 8, StatKey.STABILITY: -1},
    ),
    PlayerActionType.MILITARY_TECH: ActionEffect(
        faction={StatKey.TECHNOLOGY: 4, StatKey.MILITARY: 2},
    ),
    PlayerActionType.ECONOMIC_TECH: ActionEffect(
        faction={StatKey.TECHNOLOGY: 4, StatKey.RESOURCES: 2},
    ),
    PlayerActionType.ANCIENT_STUDIES: ActionEffect(
        faction={StatKey.TECHNOLOGY: 2},
        ancient_tech_discovery=5,
    ),
    PlayerActionType.GATE_NETWORK_RESEARCH: ActionEffect(
        faction={StatKey.TECHNOLOGY: 2},
        gate_network_integrity=3,
    ),
    PlayerActionType.DIPLOMACY: ActionEffect(
        faction={StatKey.INFLUENCE: 2, StatKey.REPUTATION: 5},
        galactic_stability=3,
    ),
    PlayerActionType.ESPIONAGE: ActionEffect(
        faction={StatKey.TECHNOLOGY: 1, StatKey.RESOURCES: 2},
    ),
}


def effect_for(action_type: object) -> ActionEffect | None:
    parsed = PlayerActionType.parse(action_type)
    if parsed is None:
        return None
    return ACTION_EFFECTS.get(parsed)


def apply_action(faction: Faction, state: GameState, action_type: object) -> bool:
    """Apply one action's deltas without clamping.

    Unknown kinds leave everything untouched and return False.
    """

    effect = effect_for(action_type)
    if effect is None:
        return False
    for key, delta in effect.faction.items():
        faction.adjust_stat(key, int(delta))
    state.galactic_stability = int(state.galactic_stability) + int(effect.galactic_stability)
    state.gate_network_integrity = int(state.gate_network_integrity) + int(effect.gate_network_integrity)
    state.ancient_tech_discovery = int(state.ancient_tech_discovery) + int(effect.ancient_tech_discovery)
    return True


def describe_effect(action_type: PlayerActionType) -> str:
    effect = ACTION_EFFECTS.get(action_type)
    if effect is None:
        return ""
    parts = [f"{key.display_name} {int(delta):+d}" for key, delta in effect.faction.items()]
    for label, delta in (
        ("Galactic Stability", effect.galactic_stability),
        ("Gate Network", effect.gate_network_integrity),
        ("Ancient Tech", effect.ancient_tech_discovery),
    ):
        if delta:
            parts.append(f"{label} {int(delta):+d}")
    return ", ".join(parts)
