import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Ensure the src directory is on sys.path when running as a script
_SRC_DIR = Path(__file__).resolve().parents[1]
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from factions.bootstrap import create_game_service
from factions.presentation.main_menu import main_menu

load_dotenv()


def _configure_logging() -> None:
    level_name = (os.getenv("FACTIONS_LOG_LEVEL") or "WARNING").strip().upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _print_help_surface() -> None:
    print("\nHelp:")
    print("- Main menu: use UP/DOWN (or W/S), ENTER to select, ESC/Q to go back.")
    print("- In game: pick up to two actions, then End Cycle; answer dilemmas under Decisions.")
    print("- Startup issues: verify FACTIONS_DATABASE_URL or unset it to use in-memory mode.")


def _is_database_connectivity_error(exc: Exception) -> bool:
    text = str(exc).lower()
    markers = (
        "unable to open database file",
        "connection refused",
        "could not connect",
        "sql bootstrap probe failed",
        "sqlalchemy.exc.operationalerror",
    )
    return any(marker in text for marker in markers)


def main():
    _configure_logging()
    try:
        game_service = create_game_service()
        main_menu(game_service)
    except KeyboardInterrupt:
        print("\nSession ended.")
    except Exception as exc:
        if os.getenv("FACTIONS_DATABASE_URL") and _is_database_connectivity_error(exc):
            print("Database connection unavailable; retrying in-memory mode.")
            os.environ.pop("FACTIONS_DATABASE_URL", None)
            try:
                game_service = create_game_service()
                main_menu(game_service)
                return
            except KeyboardInterrupt:
                print("\nSession ended.")
                return
            except Exception as fallback_exc:
                exc = fallback_exc
        print("An unexpected error occurred. The game closed safely.")
        print(f"Reason: {exc}")
        _print_help_surface()


if __name__ == "__main__":
    main()
