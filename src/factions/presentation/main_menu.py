from pathlib import Path

from rich.console import Console
from rich.panel import Panel

from factions.application.services.game_service import GameService
from factions.domain.errors import PersistenceError
from factions.presentation.faction_creation_ui import run_faction_creation
from factions.presentation.game_loop import run_game_loop
from factions.presentation.load_menu import choose_saved_game
from factions.presentation.menu_controls import arrow_menu, clear_screen


_CONSOLE = Console()
_SPLASH_BORDER = "yellow"
_HELP_BORDER = "yellow"
_LEDGER_BORDER = "green"
_EXIT_BORDER = "magenta"

HELP_LINES = [
    "[bold]Help & Controls[/bold]",
    "- Move menus: UP/DOWN arrows (or W/S), or type an option number",
    "- Select: ENTER",
    "- Cancel/Back: ESC (or Q)",
    "- Each cycle you may take up to two different actions.",
    "- Repeating an action three cycles running costs stability and reputation.",
    "- Decisions from dilemmas and overtures expire at the end of the next cycle.",
    "- You win by reaching cycle 21 or Technology 100. Stability, Population or Resources at 0 ends the game.",
    "- If the database fails, unset FACTIONS_DATABASE_URL to use in-memory mode.",
]


def _ornate_title(title: str) -> str:
    return f"[bold yellow]{title}[/bold yellow]"


def _show_help() -> None:
    clear_screen()
    _CONSOLE.print(Panel.fit("\n".join(HELP_LINES), title=_ornate_title("Guidance"), border_style=_HELP_BORDER))
    input("Press ENTER to return to the menu...")
    clear_screen()


def _show_achievements(game_service: GameService) -> None:
    clear_screen()
    achievements = game_service.list_achievements()
    if achievements:
        lines = [f"[bold]{item.name}[/bold] - {item.description} [dim]({item.unlocked_at})[/dim]" for item in achievements]
    else:
        lines = ["No achievements unlocked yet."]
    _CONSOLE.print(Panel.fit("\n".join(lines), title=_ornate_title("Achievements"), border_style=_LEDGER_BORDER))
    input("Press ENTER to return to the menu...")
    clear_screen()


def _import_game(game_service: GameService) -> bool:
    clear_screen()
    raw_path = input("Path to an exported game file (blank to cancel): ").strip()
    if not raw_path:
        return False
    try:
        text = Path(raw_path).read_text(encoding="utf-8")
        game_service.import_game(text)
    except (OSError, ValueError) as exc:
        _CONSOLE.print(f"[red]Import failed:[/red] {exc}")
        input("Press ENTER to return to the menu...")
        return False
    except PersistenceError as exc:
        _CONSOLE.print(f"[red]Imported, but the game could not be saved:[/red] {exc}")
        input("Press ENTER to continue...")
    return True


def main_menu(game_service: GameService) -> None:
    options = ["New Game", "Continue", "Import Game", "Achievements", "Help", "Quit"]

    while True:
        choice_idx = arrow_menu("Factions at the End", options)

        if choice_idx == 0:  # New Game
            if run_faction_creation(game_service):
                run_game_loop(game_service)

        elif choice_idx == 1:  # Continue
            if choose_saved_game(game_service):
                run_game_loop(game_service)

        elif choice_idx == 2:  # Import
            if _import_game(game_service):
                run_game_loop(game_service)

        elif choice_idx == 3:
            _show_achievements(game_service)

        elif choice_idx == 4:
            _show_help()

        elif choice_idx == 5 or choice_idx == -1:  # Quit or ESC
            clear_screen()
            _CONSOLE.print(
                Panel.fit(
                    "[bold magenta]The stars go dark. Farewell, Commander.[/bold magenta]",
                    title=_ornate_title("Farewell"),
                    border_style=_EXIT_BORDER,
                )
            )
            break
