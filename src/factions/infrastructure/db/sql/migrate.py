"""Create or upgrade the SQL schema using SQLAlchemy.

Usage examples:
    set FACTIONS_DATABASE_URL=sqlite:///factions_at_the_end.db
    python -m factions.infrastructure.db.sql.migrate

    python -m factions.infrastructure.db.sql.migrate --dry-run
"""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError


@dataclass(frozen=True)
class Migration:
    name: str
    statements: tuple[str, ...]


MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        name="001_game_state",
        statements=(
            """
            CREATE TABLE IF NOT EXISTS game_state (
                game_id VARCHAR(64) PRIMARY KEY,
                save_name VARCHAR(128) NOT NULL,
                current_cycle INTEGER NOT NULL,
                faction_name VARCHAR(32),
                faction_type VARCHAR(32),
                has_won INTEGER NOT NULL DEFAULT 0,
                has_lost INTEGER NOT NULL DEFAULT 0,
                last_played VARCHAR(40) NOT NULL,
                payload TEXT NOT NULL
            )
            """,
        ),
    ),
    Migration(
        name="002_global_achievement",
        statements=(
            """
            CREATE TABLE IF NOT EXISTS global_achievement (
                name VARCHAR(64) PRIMARY KEY,
                description VARCHAR(256) NOT NULL DEFAULT '',
                unlocked_at VARCHAR(40) NOT NULL
            )
            """,
        ),
    ),
)


def _ensure_schema_migrations_table(conn) -> None:
    conn.exec_driver_sql(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            migration_name VARCHAR(255) PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
        """
    )


def _already_applied(conn, migration_name: str) -> bool:
    row = conn.execute(
        text("SELECT migration_name FROM schema_migrations WHERE migration_name = :name"),
        {"name": migration_name},
    ).first()
    return row is not None


def _mark_applied(conn, migration_name: str) -> None:
    conn.execute(
        text("INSERT INTO schema_migrations (migration_name) VALUES (:name)"),
        {"name": migration_name},
    )


def apply_migrations(database_url: str, migrations: Sequence[Migration] = MIGRATIONS) -> tuple[int, int]:
    """Apply pending migrations; returns (migrations applied, statements executed)."""
    engine = create_engine(database_url, echo=False, future=True)
    applied = 0
    executed = 0
    try:
        with engine.begin() as conn:
            _ensure_schema_migrations_table(conn)
            for migration in migrations:
                if _already_applied(conn, migration.name):
                    continue
                for statement in migration.statements:
                    conn.exec_driver_sql(statement)
                    executed += 1
                _mark_applied(conn, migration.name)
                applied += 1
    finally:
        engine.dispose()
    return applied, executed


def _resolve_database_url(explicit_url: str | None) -> str:
    if explicit_url:
        return explicit_url
    from factions.infrastructure.db.sql.connection import DEFAULT_DATABASE_URL

    return os.getenv("FACTIONS_DATABASE_URL") or DEFAULT_DATABASE_URL


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Create the saved-game schema using SQLAlchemy")
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Database URL override (defaults to FACTIONS_DATABASE_URL / local SQLite file)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only print the migration plan",
    )
    args = parser.parse_args(argv)

    total_statements = sum(len(item.statements) for item in MIGRATIONS)
    print(f"Resolved {len(MIGRATIONS)} migration(s), {total_statements} statement(s).")
    for migration in MIGRATIONS:
        print(f"  - {migration.name}")

    if args.dry_run:
        for migration in MIGRATIONS:
            for statement in migration.statements:
                print(statement.strip() + ";")
        print("Dry run complete. No SQL executed.")
        return

    database_url = _resolve_database_url(args.database_url)
    try:
        applied, executed = apply_migrations(database_url)
    except SQLAlchemyError as exc:
        raise SystemExit(
            "Migration execution failed. Verify FACTIONS_DATABASE_URL points to a reachable database instance. "
            f"Details: {exc}"
        ) from exc
    print(f"Applied {applied} migration(s), {executed} statement(s).")


if __name__ == "__main__":
    main()
