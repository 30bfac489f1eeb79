from rich.console import Console
from rich.panel import Panel

from factions.application.services.balance_tables import FACTION_NAME_MAX_LENGTH
from factions.domain.errors import PersistenceError
from factions.domain.models.faction import FactionType
from factions.presentation.menu_controls import arrow_menu, clear_screen


_CONSOLE = Console()
_PANEL_BORDER = "yellow"


def _prompt_enter(message: str = "Press ENTER to continue...") -> None:
    _CONSOLE.input(f"[dim]{message}[/dim]")
    clear_screen()


def _prompt_faction_name(error: str = "") -> str:
    clear_screen()
    lines = [
        f"Name your faction (1-{FACTION_NAME_MAX_LENGTH} characters).",
        "Type [bold]esc[/bold] to go back.",
    ]
    if error:
        lines.append(f"[red]{error}[/red]")
    _CONSOLE.print(
        Panel.fit(
            "\n".join(lines),
            title="[bold yellow]Faction Creation[/bold yellow]",
            border_style=_PANEL_BORDER,
        )
    )
    return _CONSOLE.input("[bold yellow]>>> [/bold yellow]")


def _choose_name() -> str | None:
    error = ""
    while True:
        raw_name = (_prompt_faction_name(error) or "").strip()
        if raw_name.lower() in {"esc", "cancel", "q", "quit"}:
            return None
        if not raw_name:
            error = "A faction needs a name."
            continue
        if len(raw_name) > FACTION_NAME_MAX_LENGTH:
            error = f"Names are limited to {FACTION_NAME_MAX_LENGTH} characters."
            continue
        return raw_name


def _choose_archetype() -> FactionType | None:
    archetypes = list(FactionType)
    options = [f"{archetype.display_name} - {archetype.description}" for archetype in archetypes]
    idx = arrow_menu("Choose an Archetype", options, footer_hint="ESC to return to main menu")
    if idx < 0:
        return None
    return archetypes[idx]


def run_faction_creation(game_service) -> bool:
    """Walk the player through naming a faction; True when a game was started."""

    name = _choose_name()
    if name is None:
        return False
    archetype = _choose_archetype()
    if archetype is None:
        return False

    clear_screen()
    try:
        view = game_service.new_game(name, archetype)
    except PersistenceError as exc:
        _CONSOLE.print(f"[red]The new game could not be saved:[/red] {exc}")
        _prompt_enter()
        return game_service.current_game is not None

    faction = view.faction
    _CONSOLE.print(
        Panel.fit(
            "\n".join(
                [
                    f"[bold]{faction.name}[/bold] rises as a {faction.faction_type}.",
                    f"Traits: {', '.join(faction.traits)}",
                    "",
                    "The gate network is failing. Hold your people together.",
                ]
            ),
            title="[bold yellow]A New Faction[/bold yellow]",
            border_style=_PANEL_BORDER,
        )
    )
    _prompt_enter()
    return True
