import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from factions.application.services.achievement_evaluator import AchievementEvaluator, defeat_reason, is_victorious
from factions.domain.models import achievement as names
from factions.domain.models.faction import Faction, FactionType
from factions.domain.models.game_state import GameState
from factions.infrastructure.inmemory.repos import InMemoryAchievementRepository


def _state(cycle: int = 5, **overrides) -> GameState:
    stats = dict(population=50, military=50, technology=50, influence=50, resources=50, stability=50, reputation=0)
    stats.update(overrides)
    faction = Faction(name="Aurora", faction_type=FactionType.IMPERIAL_REMNANT, is_player=True, **stats)
    return GameState(player_faction=faction, current_cycle=cycle)


class AchievementEvaluatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.repo = InMemoryAchievementRepository()
        self.evaluator = AchievementEvaluator(self.repo)

    def test_defeat_reason_names_the_first_depleted_vital(self) -> None:
        self.assertEqual("stability depleted", defeat_reason(_state(stability=0, population=0)))
        self.assertEqual("population depleted", defeat_reason(_state(population=0)))
        state = _state()
        state.galactic_stability = 0
        self.assertEqual("galactic stability collapsed", defeat_reason(state))
        self.assertIsNone(defeat_reason(_state()))

    def test_victory_needs_cycle_past_twenty_or_full_technology(self) -> None:
        self.assertFalse(is_victorious(_state(cycle=20)))
        self.assertTrue(is_victorious(_state(cycle=21)))
        self.assertTrue(is_victorious(_state(technology=100)))

    def test_loss_sets_flag_and_records_defeat(self) -> None:
        state = _state(population=0)
        result = self.evaluator.evaluate(state)
        self.assertTrue(result.lost)
        self.assertTrue(state.has_lost)
        self.assertFalse(state.has_won)
        self.assertEqual([names.DEFEAT], result.unlocked)
        self.assertTrue(self.repo.is_unlocked(names.DEFEAT))

    def test_first_victory_is_global_and_unlocks_once(self) -> None:
        first = _state(cycle=21)
        result = self.evaluator.evaluate(first)
        self.assertIn(names.FIRST_VICTORY, result.unlocked)
        self.assertIn(names.SURVIVOR, result.unlocked)

        second = _state(cycle=21)
        again = self.evaluator.evaluate(second)
        self.assertTrue(again.won)
        self.assertEqual([], again.unlocked)
        self.assertIn(names.VICTORY, second.achievements)
        self.assertNotIn(names.FIRST_VICTORY, second.achievements)

    def test_milestones_unlock_without_ending_the_game(self) -> None:
        state = _state(military=100, reputation=100)
        result = self.evaluator.evaluate(state)
        self.assertFalse(result.won)
        self.assertFalse(result.lost)
        self.assertEqual({names.WARLORD, names.LEGENDARY_REPUTATION}, set(result.unlocked))

    def test_finished_games_are_not_re_evaluated_for_outcome(self) -> None:
        state = _state(population=0)
        state.mark_won()
        result = self.evaluator.evaluate(state)
        self.assertFalse(result.lost)
        self.assertFalse(state.has_lost)


if __name__ == "__main__":
    unittest.main()
