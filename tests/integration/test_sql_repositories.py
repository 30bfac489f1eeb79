import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
import unittest
from unittest import mock

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from factions.application.services.event_catalog import find_template
from factions.application.services.game_service import GameService
from factions.application.services.random_source import SeededRandomSource
from factions.domain.models.action import PlayerActionType
from factions.domain.models.faction import Faction, FactionType
from factions.domain.models.game_state import GameState
from factions.infrastructure.db.sql import repos as sql_repos
from factions.infrastructure.db.sql.migrate import MIGRATIONS
from factions.infrastructure.db.sql.repos import SqlAchievementRepository, SqlGameStateRepository


def _bootstrap_schema(engine) -> None:
    with engine.begin() as conn:
        for migration in MIGRATIONS:
            for statement in migration.statements:
                conn.exec_driver_sql(statement)


def _state(name: str = "Aurora", last_played: datetime | None = None) -> GameState:
    faction = Faction(
        name=name,
        faction_type=FactionType.PIRATE_ALLIANCE,
        is_player=True,
        population=55,
        military=60,
        technology=30,
        influence=40,
        resources=20,
        stability=35,
        reputation=-15,
    )
    state = GameState(player_faction=faction, current_cycle=6, save_name=f"{name} campaign")
    if last_played is not None:
        state.last_played = last_played
    event = find_template("A Fork in the Road").build(5)
    state.recent_events.append(event)
    state.pending_choice_event_ids.append(event.id)
    state.blocked_actions = {PlayerActionType.ESPIONAGE}
    return state


class SqlRepositoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        _bootstrap_schema(self.engine)
        session_local = sessionmaker(bind=self.engine, autoflush=False)
        patcher = mock.patch.object(sql_repos, "SessionLocal", session_local)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self.engine.dispose)

    def test_game_state_round_trips_through_the_payload(self) -> None:
        repo = SqlGameStateRepository()
        state = _state()
        repo.save(state)

        loaded = repo.get(state.id)

        self.assertEqual(state, loaded)
        self.assertIsNone(repo.get("missing"))

    def test_save_upserts_the_same_row(self) -> None:
        repo = SqlGameStateRepository()
        state = _state()
        repo.save(state)
        state.current_cycle = 7
        state.player_faction.resources = 5
        repo.save(state)

        self.assertEqual(1, len(repo.list_all()))
        self.assertEqual(7, repo.get(state.id).current_cycle)
        self.assertEqual(5, repo.get(state.id).player_faction.resources)

    def test_list_recent_orders_by_last_played(self) -> None:
        repo = SqlGameStateRepository()
        now = datetime.now(timezone.utc)
        older = _state("Older", now - timedelta(days=2))
        newer = _state("Newer", now)
        repo.save(older)
        repo.save(newer)

        self.assertEqual(["Newer", "Older"], [state.player_faction.name for state in repo.list_recent()])

    def test_delete_reports_whether_a_row_was_removed(self) -> None:
        repo = SqlGameStateRepository()
        state = _state()
        repo.save(state)
        self.assertTrue(repo.delete(state.id))
        self.assertFalse(repo.delete(state.id))
        self.assertEqual([], repo.list_all())

    def test_achievements_unlock_once(self) -> None:
        repo = SqlAchievementRepository()
        self.assertFalse(repo.is_unlocked("Survivor"))
        self.assertTrue(repo.unlock("Survivor", "Survive 20 cycles in a single game."))
        self.assertFalse(repo.unlock("Survivor", "again"))
        self.assertTrue(repo.is_unlocked("Survivor"))

        ledger = repo.list_all()
        self.assertEqual(["Survivor"], [item.name for item in ledger])
        self.assertEqual("Survive 20 cycles in a single game.", ledger[0].description)
        self.assertIsNotNone(ledger[0].unlocked_at.tzinfo)

    def test_game_service_plays_against_sql_storage(self) -> None:
        service = GameService(SqlGameStateRepository(), SqlAchievementRepository(), random_source=SeededRandomSource(11))
        view = service.new_game("Aurora", FactionType.IMPERIAL_REMNANT)
        service.end_turn(["diplomacy", "build_defenses"])

        reloaded = GameService(SqlGameStateRepository(), SqlAchievementRepository())
        loaded = reloaded.load_game(view.game_id)

        self.assertEqual(2, loaded.cycle)
        self.assertEqual(service.get_game_view(), loaded)


if __name__ == "__main__":
    unittest.main()
