from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Set

from factions.application.services import balance_tables as bt
from factions.application.services.achievement_evaluator import AchievementEvaluator
from factions.application.services.action_catalog import apply_action
from factions.application.services.choice_resolution import apply_effects, awaits_decision
from factions.application.services.event_selector import EventSelector
from factions.application.services.galactic_news import headlines_for, publish_headlines
from factions.application.services.random_source import RandomSource
from factions.application.services.validation import validate_action
from factions.domain.errors import PersistenceError, PreconditionError
from factions.domain.models.action import PlayerAction, PlayerActionType
from factions.domain.models.event import GameEvent
from factions.domain.models.faction import clamp_faction
from factions.domain.models.game_state import AMBIENT_MAX, AMBIENT_MIN, GameState, clamp_world
from factions.domain.repositories import AchievementRepository, GameStateRepository


logger = logging.getLogger(__name__)


@dataclass
class RejectedAction:
    action: PlayerAction
    reason: str


@dataclass
class TurnReport:
    cycle: int
    state: GameState
    applied_actions: List[PlayerActionType] = field(default_factory=list)
    rejected_actions: List[RejectedAction] = field(default_factory=list)
    events: List[GameEvent] = field(default_factory=list)
    headlines: List[str] = field(default_factory=list)
    unlocked_achievements: List[str] = field(default_factory=list)
    won: bool = False
    lost: bool = False
    loss_reason: str = ""

    @property
    def pending_choice_event_ids(self) -> List[str]:
        return list(self.state.pending_choice_event_ids)


class TurnEngine:
    """Resolves one cycle of play.

    The caller's state is never mutated: the engine works on a deep copy and
    hands the resolved copy back in the report.
    """

    def __init__(
        self,
        random_source: RandomSource,
        achievement_repo: AchievementRepository,
        game_repo: Optional[GameStateRepository] = None,
        selector: Optional[EventSelector] = None,
    ) -> None:
        self.random = random_source
        self.game_repo = game_repo
        self.selector = selector or EventSelector(random_source)
        self.evaluator = AchievementEvaluator(achievement_repo)

    def process_turn(self, state: GameState, actions: Iterable[PlayerAction]) -> TurnReport:
        if state is None or state.player_faction is None:
            raise PreconditionError("No active game with a player faction.")
        if state.is_over:
            raise PreconditionError("The game is over; no further turns can be processed.")

        working = copy.deepcopy(state)
        report = TurnReport(cycle=int(working.current_cycle), state=working)
        self._resolve(working, list(actions or []), report)
        save_error = self._commit(working)
        self._finalize(working, report)
        if save_error is not None:
            raise PersistenceError(f"Failed to save cycle {report.cycle}: {save_error}", state=working, report=report) from save_error
        return report

    def _resolve(self, state: GameState, actions: List[PlayerAction], report: TurnReport) -> None:
        faction = state.player_faction
        accepted = self.filter_actions(state, actions, report)
        self._update_action_counts(state, accepted)

        for action_type in accepted:
            apply_action(faction, state, action_type)
        report.applied_actions = list(accepted)
        clamp_faction(faction)
        clamp_world(state)

        self._drift_world(state)

        events = self.selector.select_events(state)
        state.recent_events.extend(events)
        report.events = list(events)
        report.headlines = headlines_for(state, events)
        publish_headlines(state, report.headlines)

        self._apply_events(state, events)

    def filter_actions(self, state: GameState, actions: List[PlayerAction], report: TurnReport) -> List[PlayerActionType]:
        faction_id = state.player_faction.id
        accepted: List[PlayerActionType] = []
        for action in actions:
            reason = self._rejection_reason(state, faction_id, action, accepted)
            if reason:
                logger.debug("Rejected action %r: %s", getattr(action, "action_type", None), reason)
                report.rejected_actions.append(RejectedAction(action=action, reason=reason))
                continue
            accepted.append(PlayerActionType.parse(action.action_type))
        return accepted

    @staticmethod
    def _rejection_reason(state: GameState, faction_id: str, action: PlayerAction, accepted: List[PlayerActionType]) -> str:
        errors = validate_action(action)
        if errors:
            return " ".join(errors)
        if str(action.faction_id) != str(faction_id):
            return "Action targets a different faction."
        action_type = PlayerActionType.parse(action.action_type)
        if action_type in state.blocked_actions:
            return f"{action_type.display_name} is blocked this cycle."
        if action_type in accepted:
            return f"{action_type.display_name} was already chosen this cycle."
        if len(accepted) >= bt.MAX_ACTIONS_PER_TURN:
            return f"At most {bt.MAX_ACTIONS_PER_TURN} actions per cycle."
        return ""

    @staticmethod
    def _update_action_counts(state: GameState, accepted: List[PlayerActionType]) -> None:
        used = set(accepted)
        counts: Dict[PlayerActionType, int] = {}
        for action_type in PlayerActionType:
            current = state.action_count(action_type)
            counts[action_type] = current + 1 if action_type in used else max(0, current - 1)
        state.recent_action_counts = counts

    def _drift_world(self, state: GameState) -> None:
        state.galactic_stability = max(AMBIENT_MIN, int(state.galactic_stability) - self.random.next_int(0, bt.GALACTIC_DRIFT_MAX))
        state.gate_network_integrity = max(AMBIENT_MIN, int(state.gate_network_integrity) - self.random.next_int(0, bt.GATE_DRIFT_MAX))
        if self.random.chance(bt.ANCIENT_DRIFT_CHANCE):
            surge = self.random.next_int(bt.ANCIENT_DRIFT_MIN, bt.ANCIENT_DRIFT_MAX)
            state.ancient_tech_discovery = min(AMBIENT_MAX, int(state.ancient_tech_discovery) + surge)

    @staticmethod
    def _apply_events(state: GameState, events: List[GameEvent]) -> None:
        faction = state.player_faction
        blocked: Set[PlayerActionType] = set()
        unblocked: Set[PlayerActionType] = set()
        for event in events:
            apply_effects(faction, event.effects)
            blocked.update(event.blocked_actions)
            unblocked.update(event.unblocked_actions)
        state.blocked_actions = blocked - unblocked
        state.pending_choice_event_ids = [event.id for event in events if awaits_decision(event)]
        clamp_faction(faction)
        clamp_world(state)

    def _commit(self, state: GameState) -> Optional[Exception]:
        state.last_played = datetime.now(timezone.utc)
        if self.game_repo is None:
            return None
        try:
            self.game_repo.save(state)
        except Exception as exc:
            logger.exception("Saving game %s failed at cycle %s", state.id, state.current_cycle)
            return exc
        return None

    def _finalize(self, state: GameState, report: TurnReport) -> None:
        result = self.evaluator.evaluate(state)
        report.unlocked_achievements = list(result.unlocked)
        report.won = result.won
        report.lost = result.lost
        report.loss_reason = result.loss_reason
        if result.lost:
            logger.info("Game %s lost at cycle %s: %s", state.id, state.current_cycle, result.loss_reason)
        elif result.won:
            logger.info("Game %s won at cycle %s", state.id, state.current_cycle)
        state.current_cycle = int(state.current_cycle) + 1
