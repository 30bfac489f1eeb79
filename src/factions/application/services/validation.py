from __future__ import annotations

from typing import Iterable, List

from factions.application.services.balance_tables import FACTION_NAME_MAX_LENGTH
from factions.domain.models.action import PlayerAction, PlayerActionType
from factions.domain.models.event import EventChoice, GameEvent
from factions.domain.models.faction import Faction, FactionType
from factions.domain.models.game_state import AMBIENT_MAX, AMBIENT_MIN, GameState
from factions.domain.models.stats import STAT_BOUNDS, StatKey


EVENT_TITLE_MAX_LENGTH = 128
EVENT_DESCRIPTION_MAX_LENGTH = 1024
EVENT_PARAMETER_LIMIT = 32
CHOICE_DESCRIPTION_MAX_LENGTH = 256


def validate_action(action: PlayerAction) -> List[str]:
    errors: List[str] = []
    if PlayerActionType.parse(getattr(action, "action_type", None)) is None:
        errors.append(f"Unknown action type: {getattr(action, 'action_type', None)!r}.")
    if not str(getattr(action, "faction_id", "") or "").strip():
        errors.append("Action is missing a faction id.")
    return errors


def validate_choice(choice: EventChoice) -> List[str]:
    errors: List[str] = []
    description = str(choice.description or "")
    if not description.strip():
        errors.append("Choice description is required.")
    elif len(description) > CHOICE_DESCRIPTION_MAX_LENGTH:
        errors.append(f"Choice description exceeds {CHOICE_DESCRIPTION_MAX_LENGTH} characters.")
    errors.extend(_validate_effects(choice.effects))
    for child in choice.children:
        errors.extend(validate_choice(child))
    return errors


def validate_event(event: GameEvent) -> List[str]:
    errors: List[str] = []
    if not str(event.title or "").strip():
        errors.append("Event title is required.")
    elif len(event.title) > EVENT_TITLE_MAX_LENGTH:
        errors.append(f"Event title exceeds {EVENT_TITLE_MAX_LENGTH} characters.")
    if len(str(event.description or "")) > EVENT_DESCRIPTION_MAX_LENGTH:
        errors.append(f"Event description exceeds {EVENT_DESCRIPTION_MAX_LENGTH} characters.")
    if int(event.cycle) < 1:
        errors.append("Event cycle must be at least 1.")
    if len(event.parameters) > EVENT_PARAMETER_LIMIT:
        errors.append(f"Event carries more than {EVENT_PARAMETER_LIMIT} parameters.")
    errors.extend(_validate_effects(event.effects))
    for choice in event.choices:
        errors.extend(validate_choice(choice))
    return errors


def validate_faction(faction: Faction) -> List[str]:
    errors: List[str] = []
    name = str(faction.name or "")
    if not name.strip():
        errors.append("Faction name is required.")
    elif len(name) > FACTION_NAME_MAX_LENGTH:
        errors.append(f"Faction name exceeds {FACTION_NAME_MAX_LENGTH} characters.")
    if not isinstance(faction.faction_type, FactionType):
        errors.append(f"Unknown faction type: {faction.faction_type!r}.")
    for key in StatKey:
        low, high = STAT_BOUNDS[key]
        value = faction.get_stat(key)
        if value < low or value > high:
            errors.append(f"{key.display_name} {value} is outside [{low}, {high}].")
    return errors


def validate_game_state(state: GameState) -> List[str]:
    errors: List[str] = []
    if int(state.current_cycle) < 1:
        errors.append("Current cycle must be at least 1.")
    for label, value in (
        ("Galactic stability", state.galactic_stability),
        ("Gate network integrity", state.gate_network_integrity),
        ("Ancient tech discovery", state.ancient_tech_discovery),
    ):
        if int(value) < AMBIENT_MIN or int(value) > AMBIENT_MAX:
            errors.append(f"{label} {value} is outside [{AMBIENT_MIN}, {AMBIENT_MAX}].")
    if state.player_faction is not None:
        errors.extend(validate_faction(state.player_faction))
    for event in state.recent_events:
        errors.extend(validate_event(event))
    return errors


def _validate_effects(effects) -> Iterable[str]:
    for key in effects:
        if not isinstance(key, StatKey):
            yield f"Unknown effect key: {key!r}."
