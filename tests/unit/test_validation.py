import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from factions.application.services.event_catalog import DILEMMAS
from factions.application.services.validation import (
    validate_action,
    validate_choice,
    validate_event,
    validate_faction,
    validate_game_state,
)
from factions.domain.models.action import PlayerAction, PlayerActionType
from factions.domain.models.event import EventCategory, EventChoice, GameEvent
from factions.domain.models.faction import Faction, FactionType
from factions.domain.models.game_state import GameState


class ValidationTests(unittest.TestCase):
    def test_action_needs_known_kind_and_faction(self) -> None:
        self.assertEqual([], validate_action(PlayerAction(PlayerActionType.DIPLOMACY, faction_id="f1")))
        self.assertEqual(1, len(validate_action(PlayerAction("terraform", faction_id="f1"))))
        self.assertEqual(2, len(validate_action(PlayerAction(None, faction_id=" "))))

    def test_event_limits(self) -> None:
        event = GameEvent(
            title="x" * 129,
            description="y" * 1025,
            category=EventCategory.NATURAL,
            cycle=0,
            parameters={f"p{index}": index for index in range(33)},
        )
        self.assertEqual(4, len(validate_event(event)))

    def test_catalog_dilemmas_are_valid(self) -> None:
        for template in DILEMMAS:
            self.assertEqual([], validate_event(template.build(1)), template.title)

    def test_nested_choice_errors_are_reported(self) -> None:
        choice = EventChoice(description="Root", children=(EventChoice(description=""),))
        self.assertEqual(["Choice description is required."], validate_choice(choice))

    def test_faction_stats_must_be_in_range(self) -> None:
        faction = Faction(name="", faction_type=FactionType.PIRATE_ALLIANCE, population=101, reputation=-101)
        errors = validate_faction(faction)
        self.assertEqual(3, len(errors))

    def test_game_state_checks_world_and_nested_records(self) -> None:
        state = GameState(
            player_faction=Faction(name="Aurora", faction_type=FactionType.PIRATE_ALLIANCE),
            current_cycle=0,
            galactic_stability=120,
        )
        state.recent_events.append(GameEvent(title="", description="", category=EventCategory.CRISIS, cycle=1))
        self.assertEqual(3, len(validate_game_state(state)))


if __name__ == "__main__":
    unittest.main()
