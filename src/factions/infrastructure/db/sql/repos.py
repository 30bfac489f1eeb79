from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import text

from factions.application.serialization import game_state_from_json, game_state_to_json
from factions.domain.models.achievement import GlobalAchievement
from factions.domain.models.game_state import GameState
from factions.domain.repositories import AchievementRepository, GameStateRepository
from .connection import SessionLocal


def _dialect(session) -> str:
    return session.bind.dialect.name if session.bind is not None else "sqlite"


def _parse_timestamp(raw) -> Optional[datetime]:
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw if raw.tzinfo is not None else raw.replace(tzinfo=timezone.utc)
    parsed = datetime.fromisoformat(str(raw))
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=timezone.utc)


class SqlGameStateRepository(GameStateRepository):
    """Saved games as one row each: summary columns plus the full JSON payload."""

    def get(self, game_id: str) -> Optional[GameState]:
        with SessionLocal() as session:
            row = session.execute(
                text("SELECT payload FROM game_state WHERE game_id = :gid"),
                {"gid": str(game_id)},
            ).first()
            if not row:
                return None
            return game_state_from_json(row.payload)

    def list_all(self) -> List[GameState]:
        with SessionLocal() as session:
            rows = session.execute(
                text("SELECT payload FROM game_state ORDER BY last_played DESC")
            ).all()
            return [game_state_from_json(row.payload) for row in rows]

    def list_recent(self) -> List[GameState]:
        return self.list_all()

    def save(self, state: GameState) -> None:
        faction = state.player_faction
        params = {
            "gid": state.id,
            "save_name": state.save_name,
            "current_cycle": int(state.current_cycle),
            "faction_name": faction.name if faction is not None else None,
            "faction_type": faction.faction_type.value if faction is not None else None,
            "has_won": 1 if state.has_won else 0,
            "has_lost": 1 if state.has_lost else 0,
            "last_played": state.last_played.isoformat(),
            "payload": game_state_to_json(state),
        }
        with SessionLocal.begin() as session:
            if _dialect(session) == "mysql":
                conflict = """
                    ON DUPLICATE KEY UPDATE
                        save_name = VALUES(save_name),
                        current_cycle = VALUES(current_cycle),
                        faction_name = VALUES(faction_name),
                        faction_type = VALUES(faction_type),
                        has_won = VALUES(has_won),
                        has_lost = VALUES(has_lost),
                        last_played = VALUES(last_played),
                        payload = VALUES(payload)
                """
            else:
                conflict = """
                    ON CONFLICT(game_id) DO UPDATE SET
                        save_name = excluded.save_name,
                        current_cycle = excluded.current_cycle,
                        faction_name = excluded.faction_name,
                        faction_type = excluded.faction_type,
                        has_won = excluded.has_won,
                        has_lost = excluded.has_lost,
                        last_played = excluded.last_played,
                        payload = excluded.payload
                """
            session.execute(
                text(
                    """
                    INSERT INTO game_state (
                        game_id, save_name, current_cycle, faction_name, faction_type,
                        has_won, has_lost, last_played, payload
                    )
                    VALUES (
                        :gid, :save_name, :current_cycle, :faction_name, :faction_type,
                        :has_won, :has_lost, :last_played, :payload
                    )
                    """
                    + conflict
                ),
                params,
            )

    def delete(self, game_id: str) -> bool:
        with SessionLocal.begin() as session:
            result = session.execute(
                text("DELETE FROM game_state WHERE game_id = :gid"),
                {"gid": str(game_id)},
            )
            return bool(result.rowcount)


class SqlAchievementRepository(AchievementRepository):
    def is_unlocked(self, name: str) -> bool:
        with SessionLocal() as session:
            row = session.execute(
                text("SELECT name FROM global_achievement WHERE name = :name"),
                {"name": str(name)},
            ).first()
            return row is not None

    def unlock(self, name: str, description: str = "") -> bool:
        with SessionLocal.begin() as session:
            existing = session.execute(
                text("SELECT name FROM global_achievement WHERE name = :name"),
                {"name": str(name)},
            ).first()
            if existing is not None:
                return False
            session.execute(
                text(
                    """
                    INSERT INTO global_achievement (name, description, unlocked_at)
                    VALUES (:name, :description, :unlocked_at)
                    """
                ),
                {
                    "name": str(name),
                    "description": str(description or ""),
                    "unlocked_at": datetime.now(timezone.utc).isoformat(),
                },
            )
            return True

    def list_all(self) -> List[GlobalAchievement]:
        with SessionLocal() as session:
            rows = session.execute(
                text("SELECT name, description, unlocked_at FROM global_achievement ORDER BY unlocked_at, name")
            ).all()
            return [
                GlobalAchievement(
                    name=row.name,
                    description=row.description or "",
                    unlocked_at=_parse_timestamp(row.unlocked_at),
                )
                for row in rows
            ]
