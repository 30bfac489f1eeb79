from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from factions.application.dtos import (
    AchievementView,
    ActionOptionView,
    ChoiceResultView,
    ChoiceView,
    EventView,
    FactionView,
    GameView,
    SavedGameView,
    TurnReportView,
)
from factions.application.services.action_catalog import describe_effect
from factions.application.services.choice_resolution import ChoiceOutcome
from factions.application.services.galactic_news import reputation_label
from factions.application.services.turn_engine import TurnReport
from factions.domain.models.achievement import GlobalAchievement
from factions.domain.models.action import PlayerActionType
from factions.domain.models.event import ACCEPT_DECLINE, CHOICE_PARAMETER, EventChoice, GameEvent
from factions.domain.models.faction import Faction
from factions.domain.models.game_state import GameState
from factions.domain.models.stats import StatKey


def _effects(effects: Mapping[StatKey, int]) -> dict[str, int]:
    return {StatKey(key).display_name: int(value) for key, value in effects.items()}


def _action_names(actions: Iterable[PlayerActionType]) -> list[str]:
    return sorted(PlayerActionType(action).display_name for action in actions)


def to_faction_view(faction: Faction) -> FactionView:
    return FactionView(
        id=faction.id,
        name=faction.name,
        faction_type=faction.faction_type.display_name,
        description=faction.description,
        traits=list(faction.traits),
        population=int(faction.population),
        military=int(faction.military),
        technology=int(faction.technology),
        influence=int(faction.influence),
        resources=int(faction.resources),
        stability=int(faction.stability),
        reputation=int(faction.reputation),
        reputation_label=reputation_label(faction.reputation),
        status=faction.status.display_name,
        is_player=bool(faction.is_player),
    )


def to_choice_view(choice: EventChoice, path: Sequence[int]) -> ChoiceView:
    return ChoiceView(
        path=list(path),
        description=choice.description,
        effects=_effects(choice.effects),
        blocked_actions=_action_names(choice.blocked_actions),
        children=[to_choice_view(child, [*path, index]) for index, child in enumerate(choice.children)],
    )


def to_event_view(event: GameEvent, pending_ids: Sequence[str] = ()) -> EventView:
    return EventView(
        id=event.id,
        title=event.title,
        description=event.description,
        category=event.category.display_name,
        cycle=int(event.cycle),
        effects=_effects(event.effects),
        blocked_actions=_action_names(event.blocked_actions),
        unblocked_actions=_action_names(event.unblocked_actions),
        choices=[to_choice_view(choice, [index]) for index, choice in enumerate(event.choices)],
        awaiting_decision=event.id in pending_ids,
        accept_decline=event.parameters.get(CHOICE_PARAMETER) == ACCEPT_DECLINE,
    )


def to_game_view(state: GameState) -> GameView:
    latest_cycle = max((int(event.cycle) for event in state.recent_events), default=int(state.current_cycle))
    return GameView(
        game_id=state.id,
        save_name=state.save_name,
        cycle=int(state.current_cycle),
        faction=to_faction_view(state.player_faction),
        galactic_stability=int(state.galactic_stability),
        gate_network_integrity=int(state.gate_network_integrity),
        ancient_tech_discovery=int(state.ancient_tech_discovery),
        blocked_actions=_action_names(state.blocked_actions),
        galactic_news=list(state.galactic_news),
        current_events=[to_event_view(event, state.pending_choice_event_ids) for event in state.events_for_cycle(latest_cycle)],
        achievements=list(state.achievements),
        has_won=bool(state.has_won),
        has_lost=bool(state.has_lost),
    )


def to_action_option_view(action: PlayerActionType, state: GameState) -> ActionOptionView:
    return ActionOptionView(
        action_type=action.value,
        name=action.display_name,
        description=action.description,
        effect_summary=describe_effect(action),
        blocked=action in state.blocked_actions,
        recent_uses=state.action_count(action),
    )


def to_turn_report_view(report: TurnReport) -> TurnReportView:
    pending = report.state.pending_choice_event_ids
    return TurnReportView(
        cycle=int(report.cycle),
        applied_actions=[action.display_name for action in report.applied_actions],
        rejected_actions=[f"{getattr(row.action, 'action_type', '?')}: {row.reason}" for row in report.rejected_actions],
        events=[to_event_view(event, pending) for event in report.events],
        headlines=list(report.headlines),
        unlocked_achievements=list(report.unlocked_achievements),
        pending_choice_event_ids=list(pending),
        won=bool(report.won),
        lost=bool(report.lost),
        loss_reason=report.loss_reason,
    )


def to_choice_result_view(outcome: ChoiceOutcome) -> ChoiceResultView:
    return ChoiceResultView(
        event_id=outcome.event_id,
        steps=list(outcome.steps),
        effects=_effects(outcome.effects),
        blocked_actions=_action_names(outcome.blocked_actions),
    )


def to_saved_game_view(state: GameState) -> SavedGameView:
    faction = state.player_faction
    if state.has_won:
        outcome = "Won"
    elif state.has_lost:
        outcome = "Lost"
    else:
        outcome = "In progress"
    return SavedGameView(
        id=state.id,
        save_name=state.save_name,
        faction_name=faction.name if faction is not None else "",
        faction_type=faction.faction_type.display_name if faction is not None else "",
        cycle=int(state.current_cycle),
        last_played=state.last_played.strftime("%Y-%m-%d %H:%M"),
        outcome=outcome,
    )


def to_achievement_view(achievement: GlobalAchievement) -> AchievementView:
    unlocked_at = achievement.unlocked_at.strftime("%Y-%m-%d %H:%M") if achievement.unlocked_at else ""
    return AchievementView(name=achievement.name, description=achievement.description, unlocked_at=unlocked_at)
