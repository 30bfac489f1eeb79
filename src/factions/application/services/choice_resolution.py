from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence, Set

from factions.application.services.event_catalog import OVERTURE_ACCEPT_EFFECTS, OVERTURE_DECLINE_EFFECTS
from factions.domain.errors import PreconditionError
from factions.domain.models.action import PlayerActionType
from factions.domain.models.event import ACCEPT_DECLINE, CHOICE_PARAMETER, EventChoice, GameEvent
from factions.domain.models.faction import Faction, clamp_faction
from factions.domain.models.game_state import GameState, clamp_world
from factions.domain.models.stats import StatKey


@dataclass
class ChoiceOutcome:
    event_id: str
    steps: List[str] = field(default_factory=list)
    effects: Dict[StatKey, int] = field(default_factory=dict)
    blocked_actions: Set[PlayerActionType] = field(default_factory=set)


def apply_effects(faction: Faction, effects: Mapping[StatKey, int]) -> None:
    for key, delta in effects.items():
        faction.adjust_stat(StatKey(key), int(delta))


def walk_path(choices: Sequence[EventChoice], path: Sequence[int]) -> List[EventChoice]:
    """Return every choice traversed by ``path``; it must end on a leaf."""
    if not path:
        raise PreconditionError("A choice path needs at least one step.")
    traversed: List[EventChoice] = []
    options = tuple(choices)
    for depth, raw_index in enumerate(path):
        index = int(raw_index)
        if index < 0 or index >= len(options):
            raise PreconditionError(f"Choice index {index} at step {depth + 1} is out of range.")
        step = options[index]
        traversed.append(step)
        options = step.children
    if not traversed[-1].is_leaf:
        raise PreconditionError("The choice path stops before a final decision.")
    return traversed


def _pending_event(state: GameState, event_id: str) -> GameEvent:
    if state.player_faction is None:
        raise PreconditionError("No player faction in this game.")
    if event_id not in state.pending_choice_event_ids:
        raise PreconditionError(f"Event {event_id} is not awaiting a decision.")
    event = state.find_event(event_id)
    if event is None:
        raise PreconditionError(f"Unknown event: {event_id}.")
    return event


def resolve_choice(state: GameState, event_id: str, path: Sequence[int]) -> ChoiceOutcome:
    """Apply a dilemma decision.

    Effects and blocked actions of every traversed step accumulate, the root
    step included.
    """

    event = _pending_event(state, event_id)
    if not event.choices:
        raise PreconditionError(f"Event {event_id} has no choices.")
    traversed = walk_path(event.choices, path)

    outcome = ChoiceOutcome(event_id=event_id)
    for step in traversed:
        outcome.steps.append(step.description)
        for key, delta in step.effects.items():
            outcome.effects[key] = outcome.effects.get(key, 0) + int(delta)
        outcome.blocked_actions.update(step.blocked_actions)

    apply_effects(state.player_faction, outcome.effects)
    clamp_faction(state.player_faction)
    clamp_world(state)
    state.blocked_actions.update(outcome.blocked_actions)
    state.pending_choice_event_ids.remove(event_id)
    return outcome


def answer_overture(state: GameState, event_id: str, accept: bool) -> ChoiceOutcome:
    event = _pending_event(state, event_id)
    if event.parameters.get(CHOICE_PARAMETER) != ACCEPT_DECLINE:
        raise PreconditionError(f"Event {event_id} is not an accept/decline offer.")

    effects = OVERTURE_ACCEPT_EFFECTS if accept else OVERTURE_DECLINE_EFFECTS
    outcome = ChoiceOutcome(
        event_id=event_id,
        steps=["Accept" if accept else "Decline"],
        effects=dict(effects),
    )
    apply_effects(state.player_faction, effects)
    clamp_faction(state.player_faction)
    state.pending_choice_event_ids.remove(event_id)
    return outcome


def awaits_decision(event: GameEvent) -> bool:
    return bool(event.choices) or event.parameters.get(CHOICE_PARAMETER) == ACCEPT_DECLINE
