import logging
import os

from factions.application.services.event_bus import EventBus
from factions.application.services.game_service import GameService
from factions.application.services.random_source import SeededRandomSource, parse_seed
from factions.domain.events import AchievementUnlocked, GameCreated, GameLost, GameWon
from factions.infrastructure.inmemory.repos import InMemoryAchievementRepository, InMemoryGameStateRepository


logger = logging.getLogger(__name__)


def _build_random_source() -> SeededRandomSource:
    seed = parse_seed(os.getenv("FACTIONS_RNG_SEED"))
    if seed is not None:
        logger.info("Using fixed random seed %s", seed)
    return SeededRandomSource(seed)


def _log_session_event(event: object) -> None:
    logger.info("Session event: %s", event)


def _build_event_bus() -> EventBus:
    event_bus = EventBus()
    for event_type in (GameCreated, AchievementUnlocked, GameWon, GameLost):
        event_bus.subscribe(event_type, _log_session_event, priority=200)
    return event_bus


def _build_inmemory_game_service() -> GameService:
    return GameService(
        InMemoryGameStateRepository(),
        InMemoryAchievementRepository(),
        random_source=_build_random_source(),
        event_bus=_build_event_bus(),
    )


def _build_sql_game_service(database_url: str) -> GameService:
    # Connection settings are read when the connection module is imported.
    from factions.infrastructure.db.sql.migrate import apply_migrations
    from factions.infrastructure.db.sql.repos import SqlAchievementRepository, SqlGameStateRepository

    apply_migrations(database_url)
    game_repo = SqlGameStateRepository()
    achievement_repo = SqlAchievementRepository()

    # Force an early connectivity check so fallback happens before entering menus.
    try:
        game_repo.list_all()
    except Exception as exc:
        raise RuntimeError(f"SQL bootstrap probe failed: {exc}") from exc

    return GameService(
        game_repo,
        achievement_repo,
        random_source=_build_random_source(),
        event_bus=_build_event_bus(),
    )


def create_game_service() -> GameService:
    database_url = os.getenv("FACTIONS_DATABASE_URL")
    if database_url:
        try:
            return _build_sql_game_service(database_url)
        except Exception as exc:  # pragma: no cover - best-effort fallback
            print(f"Database unavailable, falling back to in-memory. Reason: {exc}")

    return _build_inmemory_game_service()
