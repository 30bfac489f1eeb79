import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from factions.application.services.choice_resolution import answer_overture, awaits_decision, resolve_choice, walk_path
from factions.application.services.event_catalog import DILEMMAS, DIPLOMATIC_OVERTURE, find_template
from factions.domain.errors import PreconditionError
from factions.domain.models.action import PlayerActionType
from factions.domain.models.faction import Faction, FactionType
from factions.domain.models.game_state import GameState


def _state_with(template) -> tuple[GameState, str]:
    faction = Faction(
        name="Aurora",
        faction_type=FactionType.REBELLION_CELL,
        is_player=True,
        population=50,
        military=50,
        technology=50,
        influence=50,
        resources=50,
        stability=50,
        reputation=0,
    )
    state = GameState(player_faction=faction, current_cycle=4)
    event = template.build(4)
    state.recent_events.append(event)
    state.pending_choice_event_ids.append(event.id)
    return state, event.id


class ChoiceResolutionTests(unittest.TestCase):
    def test_nested_choice_accumulates_effects_of_every_step(self) -> None:
        state, event_id = _state_with(find_template("A Fork in the Road"))
        outcome = resolve_choice(state, event_id, [0, 0])

        faction = state.player_faction
        self.assertEqual(52, faction.influence)
        self.assertEqual(45, faction.resources)
        self.assertEqual(6, faction.reputation)
        self.assertEqual(2, len(outcome.steps))
        self.assertEqual([], state.pending_choice_event_ids)

    def test_leaf_choice_can_block_actions_for_the_next_cycle(self) -> None:
        state, event_id = _state_with(find_template("A Fork in the Road"))
        outcome = resolve_choice(state, event_id, [1])
        self.assertEqual(-3, state.player_faction.reputation)
        self.assertEqual({PlayerActionType.DIPLOMACY}, outcome.blocked_actions)
        self.assertIn(PlayerActionType.DIPLOMACY, state.blocked_actions)

    def test_path_must_end_on_a_leaf(self) -> None:
        state, event_id = _state_with(find_template("Mysterious Discovery"))
        with self.assertRaises(PreconditionError):
            resolve_choice(state, event_id, [0])
        self.assertEqual(50, state.player_faction.technology)
        self.assertEqual([event_id], state.pending_choice_event_ids)

    def test_out_of_range_and_empty_paths_are_rejected(self) -> None:
        choices = DILEMMAS[0].choices
        with self.assertRaises(PreconditionError):
            walk_path(choices, [])
        with self.assertRaises(PreconditionError):
            walk_path(choices, [2])
        with self.assertRaises(PreconditionError):
            walk_path(choices, [0, 0])

    def test_event_can_only_be_answered_once(self) -> None:
        state, event_id = _state_with(DILEMMAS[0])
        resolve_choice(state, event_id, [0])
        with self.assertRaises(PreconditionError):
            resolve_choice(state, event_id, [1])

    def test_choice_effects_are_clamped(self) -> None:
        state, event_id = _state_with(DILEMMAS[1])
        state.player_faction.resources = 95
        resolve_choice(state, event_id, [0])
        self.assertEqual(100, state.player_faction.resources)

    def test_overture_accept_and_decline(self) -> None:
        state, event_id = _state_with(DIPLOMATIC_OVERTURE)
        self.assertTrue(awaits_decision(state.find_event(event_id)))
        answer_overture(state, event_id, accept=True)
        faction = state.player_faction
        self.assertEqual((55, 5, 47), (faction.influence, faction.reputation, faction.resources))

        declined, declined_id = _state_with(DIPLOMATIC_OVERTURE)
        answer_overture(declined, declined_id, accept=False)
        self.assertEqual(-2, declined.player_faction.reputation)

    def test_overture_answer_is_refused_for_dilemmas(self) -> None:
        state, event_id = _state_with(DILEMMAS[0])
        with self.assertRaises(PreconditionError):
            answer_overture(state, event_id, accept=True)


if __name__ == "__main__":
    unittest.main()
