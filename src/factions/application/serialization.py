from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Mapping

from factions.domain.models.action import PlayerActionType
from factions.domain.models.event import EventCategory, EventChoice, GameEvent
from factions.domain.models.faction import Faction, FactionType
from factions.domain.models.game_state import GameState
from factions.domain.models.stats import StatKey, derive_status


SAVE_FORMAT_VERSION = 1


def _effects_to_dict(effects: Mapping[StatKey, int]) -> Dict[str, int]:
    return {StatKey(key).value: int(value) for key, value in effects.items()}


def _mapping(payload: Any, label: str) -> Mapping[str, Any]:
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"{label} must be an object, got {type(payload).__name__}.")
    return payload


def _sequence(payload: Any, label: str) -> list:
    if payload is None:
        return []
    if not isinstance(payload, (list, tuple)):
        raise ValueError(f"{label} must be a list, got {type(payload).__name__}.")
    return list(payload)


def _effects_from_dict(payload: Any) -> Dict[StatKey, int]:
    return {StatKey(key): int(value) for key, value in _mapping(payload, "effects").items()}


def _actions_to_list(actions) -> list[str]:
    return sorted(PlayerActionType(action).value for action in actions)


def _actions_from_list(payload) -> frozenset[PlayerActionType]:
    return frozenset(PlayerActionType(value) for value in _sequence(payload, "blocked actions"))


def choice_to_dict(choice: EventChoice) -> Dict[str, Any]:
    return {
        "description": choice.description,
        "effects": _effects_to_dict(choice.effects),
        "blocked_actions": _actions_to_list(choice.blocked_actions),
        "children": [choice_to_dict(child) for child in choice.children],
    }


def choice_from_dict(payload: Mapping[str, Any]) -> EventChoice:
    payload = _mapping(payload, "choice")
    return EventChoice(
        description=str(payload["description"]),
        effects=_effects_from_dict(payload.get("effects")),
        blocked_actions=_actions_from_list(payload.get("blocked_actions")),
        children=tuple(choice_from_dict(child) for child in _sequence(payload.get("children"), "choice children")),
    )


def event_to_dict(event: GameEvent) -> Dict[str, Any]:
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description,
        "category": event.category.value,
        "cycle": int(event.cycle),
        "effects": _effects_to_dict(event.effects),
        "blocked_actions": _actions_to_list(event.blocked_actions),
        "unblocked_actions": _actions_to_list(event.unblocked_actions),
        "parameters": dict(event.parameters),
        "choices": [choice_to_dict(choice) for choice in event.choices],
    }


def event_from_dict(payload: Mapping[str, Any]) -> GameEvent:
    payload = _mapping(payload, "event")
    return GameEvent(
        id=str(payload["id"]),
        title=str(payload["title"]),
        description=str(payload.get("description", "")),
        category=EventCategory(payload["category"]),
        cycle=int(payload["cycle"]),
        effects=_effects_from_dict(payload.get("effects")),
        blocked_actions=_actions_from_list(payload.get("blocked_actions")),
        unblocked_actions=_actions_from_list(payload.get("unblocked_actions")),
        parameters=dict(_mapping(payload.get("parameters"), "event parameters")),
        choices=tuple(choice_from_dict(choice) for choice in _sequence(payload.get("choices"), "event choices")),
    )


def faction_to_dict(faction: Faction) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": faction.id,
        "name": faction.name,
        "faction_type": faction.faction_type.value,
        "is_player": bool(faction.is_player),
        "description": faction.description,
        "traits": list(faction.traits),
        "status": faction.status.value,
    }
    payload.update({key.value: faction.get_stat(key) for key in StatKey})
    return payload


def faction_from_dict(payload: Mapping[str, Any]) -> Faction:
    """Rebuild a faction; status is re-derived from the stats, never trusted."""
    payload = _mapping(payload, "faction")
    faction = Faction(
        id=str(payload["id"]),
        name=str(payload["name"]),
        faction_type=FactionType(payload["faction_type"]),
        is_player=bool(payload.get("is_player", False)),
        description=str(payload.get("description", "")),
        traits=[str(trait) for trait in _sequence(payload.get("traits"), "traits")],
    )
    for key in StatKey:
        if key.value in payload:
            faction.set_stat(key, int(payload[key.value]))
    faction.status = derive_status(faction.stability, faction.population, faction.resources)
    return faction


def game_state_to_dict(state: GameState) -> Dict[str, Any]:
    return {
        "format_version": SAVE_FORMAT_VERSION,
        "id": state.id,
        "save_name": state.save_name,
        "current_cycle": int(state.current_cycle),
        "created_at": state.created_at.isoformat(),
        "last_played": state.last_played.isoformat(),
        "player_faction": faction_to_dict(state.player_faction) if state.player_faction is not None else None,
        "galactic_stability": int(state.galactic_stability),
        "gate_network_integrity": int(state.gate_network_integrity),
        "ancient_tech_discovery": int(state.ancient_tech_discovery),
        "recent_events": [event_to_dict(event) for event in state.recent_events],
        "galactic_news": list(state.galactic_news),
        "blocked_actions": _actions_to_list(state.blocked_actions),
        "recent_action_counts": {action.value: int(count) for action, count in state.recent_action_counts.items()},
        "pending_choice_event_ids": list(state.pending_choice_event_ids),
        "achievements": list(state.achievements),
        "has_won": bool(state.has_won),
        "has_lost": bool(state.has_lost),
    }


def game_state_from_dict(payload: Mapping[str, Any]) -> GameState:
    version = int(payload.get("format_version", SAVE_FORMAT_VERSION))
    if version > SAVE_FORMAT_VERSION:
        raise ValueError(f"Unsupported save format version: {version}")
    faction_payload = payload.get("player_faction")
    state = GameState(
        id=str(payload["id"]),
        save_name=str(payload.get("save_name", "")),
        current_cycle=int(payload.get("current_cycle", 1)),
        created_at=datetime.fromisoformat(payload["created_at"]),
        last_played=datetime.fromisoformat(payload["last_played"]),
        player_faction=faction_from_dict(faction_payload) if faction_payload else None,
        galactic_stability=int(payload.get("galactic_stability", 40)),
        gate_network_integrity=int(payload.get("gate_network_integrity", 60)),
        ancient_tech_discovery=int(payload.get("ancient_tech_discovery", 10)),
        recent_events=[event_from_dict(event) for event in _sequence(payload.get("recent_events"), "recent events")],
        galactic_news=[str(line) for line in _sequence(payload.get("galactic_news"), "galactic news")],
        blocked_actions=set(_actions_from_list(payload.get("blocked_actions"))),
        pending_choice_event_ids=[str(value) for value in _sequence(payload.get("pending_choice_event_ids"), "pending choices")],
        achievements=[str(name) for name in _sequence(payload.get("achievements"), "achievements")],
        has_won=bool(payload.get("has_won", False)),
        has_lost=bool(payload.get("has_lost", False)),
    )
    counts = _mapping(payload.get("recent_action_counts"), "recent action counts")
    for raw_action, count in counts.items():
        state.recent_action_counts[PlayerActionType(raw_action)] = int(count)
    return state


def game_state_to_json(state: GameState, *, indent: int | None = None) -> str:
    return json.dumps(game_state_to_dict(state), indent=indent, sort_keys=True)


def game_state_from_json(text: str) -> GameState:
    payload = json.loads(text)
    if not isinstance(payload, dict):
        raise ValueError("Save file must contain a JSON object.")
    return game_state_from_dict(payload)
