from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Optional

from factions.application.dtos import (
    AchievementView,
    ActionOptionView,
    ActionResult,
    ChoiceResultView,
    EventView,
    GameView,
    SavedGameView,
    TurnReportView,
)
from factions.application.mappers.game_service_mapper import (
    to_achievement_view,
    to_action_option_view,
    to_choice_result_view,
    to_event_view,
    to_game_view,
    to_saved_game_view,
    to_turn_report_view,
)
from factions.application.serialization import game_state_from_json, game_state_to_json
from factions.application.services import choice_resolution
from factions.application.services.event_bus import EventBus
from factions.application.services.event_catalog import COLLAPSE
from factions.application.services.faction_factory import FactionFactory
from factions.application.services.random_source import RandomSource, SeededRandomSource
from factions.application.services.turn_engine import TurnEngine, TurnReport
from factions.application.services.validation import validate_game_state
from factions.domain.errors import PersistenceError, PreconditionError
from factions.domain.events import (
    AchievementUnlocked,
    ChoiceResolved,
    GameCreated,
    GameLost,
    GameWon,
    TurnProcessed,
)
from factions.domain.models.action import PlayerAction, PlayerActionType
from factions.domain.models.faction import FactionType
from factions.domain.models.game_state import GameState
from factions.domain.repositories import AchievementRepository, GameStateRepository


logger = logging.getLogger(__name__)


class GameService:
    """Session facade: owns the current game and wires engine, storage and events."""

    _SAVE_NAME_FORMAT = "Game Started %Y-%m-%d %H:%M"

    def __init__(
        self,
        game_repo: GameStateRepository,
        achievement_repo: AchievementRepository,
        random_source: RandomSource | None = None,
        event_bus: EventBus | None = None,
        clock=None,
    ) -> None:
        self.game_repo = game_repo
        self.achievement_repo = achievement_repo
        self.random = random_source or SeededRandomSource()
        self.event_bus = event_bus or EventBus()
        self.clock = clock or datetime.now
        self.faction_factory = FactionFactory(self.random)
        self.engine = TurnEngine(self.random, achievement_repo, game_repo=game_repo)
        self._state: Optional[GameState] = None
        self._pending_save: Optional[GameState] = None

    @property
    def current_game(self) -> Optional[GameState]:
        return self._state

    @property
    def has_pending_save(self) -> bool:
        return self._pending_save is not None

    def _require_game(self) -> GameState:
        if self._state is None or self._state.player_faction is None:
            raise PreconditionError("No active game. Start or load a game first.")
        return self._state

    def _require_open_game(self) -> GameState:
        state = self._require_game()
        if state.is_over:
            raise PreconditionError("This game is over.")
        return state

    def _checkpoint(self, state: GameState) -> None:
        try:
            self.game_repo.save(state)
        except Exception as exc:
            logger.exception("Checkpoint save failed for game %s", state.id)
            self._pending_save = state
            raise PersistenceError(f"Failed to save game {state.id}: {exc}", state=state) from exc
        self._pending_save = None

    def new_game(self, name: str, faction_type: FactionType | str) -> GameView:
        faction = self.faction_factory.create(name, faction_type, is_player=True)
        state = GameState(
            player_faction=faction,
            save_name=self.clock().strftime(self._SAVE_NAME_FORMAT),
            current_cycle=1,
        )
        state.recent_events.append(COLLAPSE.build(state.current_cycle))
        self._state = state
        self._checkpoint(state)
        logger.info("New game %s started for %s (%s)", state.id, faction.name, faction.faction_type.value)
        self.event_bus.publish(GameCreated(game_id=state.id, faction_name=faction.name, faction_type=faction.faction_type.value))
        return to_game_view(state)

    def list_saved_games(self) -> list[SavedGameView]:
        return [to_saved_game_view(state) for state in self.game_repo.list_recent()]

    def load_game(self, game_id: str) -> GameView:
        state = self.game_repo.get(game_id)
        if state is None:
            raise PreconditionError(f"No saved game with id {game_id}.")
        self._state = state
        self._pending_save = None
        return to_game_view(state)

    def delete_game(self, game_id: str) -> ActionResult:
        deleted = self.game_repo.delete(game_id)
        if deleted and self._state is not None and self._state.id == game_id:
            self._state = None
            self._pending_save = None
        message = "Saved game deleted." if deleted else "No saved game with that id."
        return ActionResult(messages=[message])

    def get_game_view(self) -> GameView:
        return to_game_view(self._require_game())

    def list_action_options(self) -> list[ActionOptionView]:
        state = self._require_game()
        return [to_action_option_view(action, state) for action in PlayerActionType]

    def _build_actions(self, state: GameState, actions: Sequence[object]) -> list[PlayerAction]:
        built: list[PlayerAction] = []
        for action in actions or ():
            if isinstance(action, PlayerAction):
                built.append(action)
            else:
                built.append(PlayerAction(action_type=action, faction_id=state.player_faction.id))
        return built

    def end_turn(self, actions: Sequence[object]) -> TurnReportView:
        state = self._require_open_game()
        if self._pending_save is not None:
            raise PreconditionError("The previous turn has not been saved yet. Retry the save first.")
        try:
            report = self.engine.process_turn(state, self._build_actions(state, actions))
        except PersistenceError as exc:
            self._state = exc.state
            self._pending_save = exc.state
            if exc.report is not None:
                self._publish_turn(exc.report)
            raise

        self._state = report.state
        self._publish_turn(report)
        self._checkpoint(report.state)
        return to_turn_report_view(report)

    def _publish_turn(self, report: TurnReport) -> None:
        state = report.state
        self.event_bus.publish(
            TurnProcessed(
                game_id=state.id,
                cycle=report.cycle,
                actions_applied=len(report.applied_actions),
                actions_rejected=len(report.rejected_actions),
                events_drawn=len(report.events),
            )
        )
        for name in report.unlocked_achievements:
            self.event_bus.publish(AchievementUnlocked(game_id=state.id, name=name, cycle=report.cycle))
        if report.lost:
            self.event_bus.publish(GameLost(game_id=state.id, cycle=report.cycle, reason=report.loss_reason))
        elif report.won:
            self.event_bus.publish(GameWon(game_id=state.id, cycle=report.cycle))

    def retry_pending_save(self) -> ActionResult:
        if self._pending_save is None:
            return ActionResult(messages=["Nothing to save."])
        self._checkpoint(self._pending_save)
        return ActionResult(messages=["Game saved."])

    def pending_choices(self) -> list[EventView]:
        state = self._require_game()
        events = []
        for event_id in state.pending_choice_event_ids:
            event = state.find_event(event_id)
            if event is not None:
                events.append(to_event_view(event, state.pending_choice_event_ids))
        return events

    def resolve_choice(self, event_id: str, path: Sequence[int]) -> ChoiceResultView:
        state = self._require_open_game()
        outcome = choice_resolution.resolve_choice(state, event_id, path)
        self._checkpoint(state)
        self.event_bus.publish(ChoiceResolved(game_id=state.id, event_id=event_id, path=tuple(int(step) for step in path)))
        return to_choice_result_view(outcome)

    def answer_overture(self, event_id: str, accept: bool) -> ChoiceResultView:
        state = self._require_open_game()
        outcome = choice_resolution.answer_overture(state, event_id, accept)
        self._checkpoint(state)
        self.event_bus.publish(ChoiceResolved(game_id=state.id, event_id=event_id, path=(0 if accept else 1,)))
        return to_choice_result_view(outcome)

    def export_game(self) -> str:
        return game_state_to_json(self._require_game(), indent=2)

    def import_game(self, json_text: str) -> GameView:
        try:
            state = game_state_from_json(json_text)
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Save file could not be read: {exc}") from exc
        if state.player_faction is None:
            raise ValueError("Save file has no player faction.")
        errors = validate_game_state(state)
        if errors:
            raise ValueError("Save file failed validation: " + "; ".join(errors))
        self._state = state
        self._checkpoint(state)
        return to_game_view(state)

    def list_achievements(self) -> list[AchievementView]:
        return [to_achievement_view(achievement) for achievement in self.achievement_repo.list_all()]
