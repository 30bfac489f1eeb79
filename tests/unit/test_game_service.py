import json
import sys
from datetime import datetime
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from factions.application.services.event_bus import EventBus
from factions.application.services.event_catalog import DIPLOMATIC_OVERTURE, find_template
from factions.application.services.game_service import GameService
from factions.application.services.random_source import RandomSource
from factions.domain.errors import PersistenceError, PreconditionError
from factions.domain.events import ChoiceResolved, GameCreated, GameWon, TurnProcessed
from factions.domain.models.action import PlayerActionType
from factions.domain.models.faction import FactionType
from factions.domain.models.game_state import GameState
from factions.domain.models.stats import FactionStatus
from factions.infrastructure.inmemory.repos import InMemoryAchievementRepository, InMemoryGameStateRepository


class QuietRandom(RandomSource):
    def next_int(self, minimum: int, maximum: int) -> int:
        if (minimum, maximum) == (1, 101):
            return 100
        return minimum

    def next_double(self) -> float:
        return 0.99


class _FlakyGameRepository(InMemoryGameStateRepository):
    def __init__(self) -> None:
        super().__init__()
        self.fail = False

    def save(self, state: GameState) -> None:
        if self.fail:
            raise RuntimeError("database is locked")
        super().save(state)


def _service(repo=None, bus=None) -> GameService:
    return GameService(
        repo or InMemoryGameStateRepository(),
        InMemoryAchievementRepository(),
        random_source=QuietRandom(),
        event_bus=bus,
        clock=lambda: datetime(2031, 5, 4, 9, 30),
    )


class GameServiceTests(unittest.TestCase):
    def test_new_game_opens_with_the_collapse_event_and_is_saved(self) -> None:
        bus = EventBus()
        created = []
        bus.subscribe(GameCreated, created.append)
        service = _service(bus=bus)

        view = service.new_game("Aurora", FactionType.TECHNOCRATIC_UNION)

        self.assertEqual(1, view.cycle)
        self.assertEqual("Game Started 2031-05-04 09:30", view.save_name)
        self.assertEqual(["Collapse"], [event.title for event in view.current_events])
        self.assertEqual(45, view.faction.technology)
        self.assertEqual("Technocratic Union", view.faction.faction_type)
        self.assertEqual(1, len(service.list_saved_games()))
        self.assertEqual("Aurora", created[0].faction_name)

    def test_queries_require_an_active_game(self) -> None:
        service = _service()
        with self.assertRaises(PreconditionError):
            service.get_game_view()
        with self.assertRaises(PreconditionError):
            service.end_turn([])

    def test_end_turn_accepts_kinds_and_reports_the_cycle(self) -> None:
        bus = EventBus()
        processed = []
        bus.subscribe(TurnProcessed, processed.append)
        service = _service(bus=bus)
        service.new_game("Aurora", FactionType.MILITARY_JUNTA)

        report = service.end_turn(["build_defenses", PlayerActionType.DIPLOMACY, "espionage"])

        self.assertEqual(1, report.cycle)
        self.assertEqual(["Build Defenses", "Diplomacy"], report.applied_actions)
        self.assertEqual(1, len(report.rejected_actions))
        self.assertEqual(2, service.get_game_view().cycle)
        self.assertEqual(2, service.list_saved_games()[0].cycle)
        self.assertEqual(2, processed[0].actions_applied)
        self.assertEqual(1, processed[0].actions_rejected)

    def test_action_options_flag_blocked_kinds(self) -> None:
        service = _service()
        service.new_game("Aurora", FactionType.MILITARY_JUNTA)
        service.current_game.blocked_actions = {PlayerActionType.RECRUIT_TROOPS}
        options = {option.action_type: option for option in service.list_action_options()}
        self.assertEqual(10, len(options))
        self.assertTrue(options["recruit_troops"].blocked)
        self.assertFalse(options["diplomacy"].blocked)
        self.assertEqual("Military +5, Stability +2", options["build_defenses"].effect_summary)

    def test_failed_save_keeps_the_turn_and_can_be_retried(self) -> None:
        repo = _FlakyGameRepository()
        service = _service(repo=repo)
        service.new_game("Aurora", FactionType.CORPORATE_COUNCIL)
        repo.fail = True

        with self.assertRaises(PersistenceError):
            service.end_turn(["develop_infrastructure"])

        self.assertTrue(service.has_pending_save)
        self.assertEqual(2, service.get_game_view().cycle)
        with self.assertRaises(PreconditionError):
            service.end_turn([])

        repo.fail = False
        result = service.retry_pending_save()
        self.assertEqual(["Game saved."], result.messages)
        self.assertFalse(service.has_pending_save)
        self.assertEqual(2, repo.get(service.current_game.id).current_cycle)
        self.assertEqual(["Nothing to save."], service.retry_pending_save().messages)

    def test_resolving_a_dilemma_is_saved_and_published(self) -> None:
        bus = EventBus()
        resolved = []
        bus.subscribe(ChoiceResolved, resolved.append)
        repo = InMemoryGameStateRepository()
        service = _service(repo=repo, bus=bus)
        service.new_game("Aurora", FactionType.REBELLION_CELL)
        state = service.current_game
        event = find_template("A Fork in the Road").build(1)
        state.recent_events.append(event)
        state.pending_choice_event_ids.append(event.id)
        reputation = state.player_faction.reputation

        pending = service.pending_choices()
        self.assertEqual([event.id], [item.id for item in pending])
        self.assertEqual([0, 1], pending[0].choices[0].children[1].path)

        result = service.resolve_choice(event.id, [0, 1])

        self.assertEqual(2, len(result.steps))
        self.assertEqual(reputation - 4, service.get_game_view().faction.reputation)
        self.assertEqual([], service.pending_choices())
        self.assertEqual(reputation - 4, repo.get(state.id).player_faction.reputation)
        self.assertEqual((0, 1), resolved[0].path)

    def test_overture_answer(self) -> None:
        service = _service()
        service.new_game("Aurora", FactionType.REBELLION_CELL)
        state = service.current_game
        event = DIPLOMATIC_OVERTURE.build(1)
        state.recent_events.append(event)
        state.pending_choice_event_ids.append(event.id)
        influence = state.player_faction.influence

        result = service.answer_overture(event.id, accept=True)

        self.assertEqual(["Accept"], result.steps)
        self.assertEqual(influence + 5, service.get_game_view().faction.influence)

    def test_finished_games_refuse_further_play(self) -> None:
        bus = EventBus()
        won = []
        bus.subscribe(GameWon, won.append)
        service = _service(bus=bus)
        service.new_game("Aurora", FactionType.TECHNOCRATIC_UNION)
        service.current_game.player_faction.technology = 96

        report = service.end_turn(["military_tech"])

        self.assertTrue(report.won)
        self.assertIn("First Victory", report.unlocked_achievements)
        self.assertEqual(1, len(won))
        self.assertEqual("Won", service.list_saved_games()[0].outcome)
        self.assertIn("First Victory", [item.name for item in service.list_achievements()])
        with self.assertRaises(PreconditionError):
            service.end_turn([])

    def test_load_and_delete(self) -> None:
        service = _service()
        first = service.new_game("Aurora", FactionType.PIRATE_ALLIANCE)
        second = service.new_game("Borealis", FactionType.IMPERIAL_REMNANT)

        loaded = service.load_game(first.game_id)
        self.assertEqual("Aurora", loaded.faction.name)
        with self.assertRaises(PreconditionError):
            service.load_game("missing")

        self.assertEqual(["Saved game deleted."], service.delete_game(first.game_id).messages)
        self.assertIsNone(service.current_game)
        self.assertEqual(["No saved game with that id."], service.delete_game(first.game_id).messages)
        self.assertEqual([second.game_id], [game.id for game in service.list_saved_games()])

    def test_export_and_import(self) -> None:
        service = _service()
        service.new_game("Aurora", FactionType.RELIGIOUS_ORDER)
        service.end_turn(["diplomacy"])
        exported = service.export_game()

        other = _service()
        view = other.import_game(exported)

        self.assertEqual(service.get_game_view(), view)
        self.assertEqual(1, len(other.list_saved_games()))

    def test_import_rejects_broken_files(self) -> None:
        service = _service()
        service.new_game("Aurora", FactionType.RELIGIOUS_ORDER)
        exported = service.export_game()

        with self.assertRaises(ValueError):
            _service().import_game("not json")
        with self.assertRaises(ValueError):
            _service().import_game(exported.replace('"population": ', '"population": 5', 1))

    def test_import_rejects_wrongly_shaped_sections(self) -> None:
        service = _service()
        service.new_game("Aurora", FactionType.RELIGIOUS_ORDER)
        payload = json.loads(service.export_game())

        counts_as_list = dict(payload, recent_action_counts=["build_defenses"])
        effects_as_list = json.loads(json.dumps(payload))
        effects_as_list["recent_events"][0]["effects"] = [1, 2]
        choices_as_object = json.loads(json.dumps(payload))
        choices_as_object["recent_events"][0]["choices"] = {"0": "accept"}

        for broken in (counts_as_list, effects_as_list, choices_as_object):
            importer = _service()
            with self.assertRaises(ValueError):
                importer.import_game(json.dumps(broken))
            self.assertIsNone(importer.current_game)

    def test_import_derives_status_from_stats(self) -> None:
        service = _service()
        service.new_game("Aurora", FactionType.RELIGIOUS_ORDER)
        payload = json.loads(service.export_game())
        payload["player_faction"]["resources"] = 5
        payload["player_faction"]["status"] = "thriving"

        importer = _service()
        view = importer.import_game(json.dumps(payload))

        self.assertEqual(FactionStatus.DESPERATE, importer.current_game.player_faction.status)
        self.assertEqual(FactionStatus.DESPERATE.display_name, view.faction.status)


if __name__ == "__main__":
    unittest.main()
