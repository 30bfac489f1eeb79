from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from factions.application.dtos import ChoiceView, EventView, GameView, TurnReportView
from factions.application.mappers.game_service_mapper import to_turn_report_view
from factions.application.services.balance_tables import MAX_ACTIONS_PER_TURN
from factions.domain.errors import PersistenceError, PreconditionError
from factions.presentation.menu_controls import arrow_menu, clear_screen


_CONSOLE = Console()
_BORDER_LOOP = "yellow"
_BORDER_EVENTS = "cyan"
_BORDER_NEWS = "blue"
_BORDER_WARNING = "red"
_BORDER_VICTORY = "green"


def _ornate_title(title: str) -> str:
    core = str(title or "").strip() or "Panel"
    return f"[bold yellow]{core}[/bold yellow]"


def _panel_subtitle(panel_key: str) -> str:
    lookup = {
        "loop": "[dim]State of the faction[/dim]",
        "events": "[dim]What the cycle brought[/dim]",
        "news": "[dim]Galactic news feed[/dim]",
        "decision": "[dim]The council awaits your word[/dim]",
        "save": "[dim]Archive status[/dim]",
    }
    return lookup.get(str(panel_key), "[dim]Council ledger[/dim]")


def _prompt_continue(message: str = "Press ENTER to continue...") -> None:
    _CONSOLE.input(f"[dim]{message}[/dim]")
    clear_screen()


def _render_message_panel(
    title: str,
    lines: list[str],
    *,
    border_style: str = _BORDER_LOOP,
    panel_key: str = "loop",
) -> None:
    rows = [str(line) for line in lines if str(line).strip()]
    body = "\n".join(rows) if rows else "No updates."
    _CONSOLE.print(
        Panel.fit(
            body,
            title=_ornate_title(title),
            subtitle=_panel_subtitle(panel_key),
            subtitle_align="left",
            border_style=border_style,
        )
    )


def _format_effects(effects: dict[str, int]) -> str:
    return ", ".join(f"{name} {value:+d}" for name, value in effects.items())


def _render_status(view: GameView) -> None:
    faction = view.faction
    header = Table.grid(padding=(0, 1))
    header.add_column(style="bold yellow", justify="right")
    header.add_column(style="white")
    header.add_row("Cycle", str(view.cycle))
    header.add_row("Faction", f"{faction.name} ({faction.faction_type})")
    header.add_row("Status", faction.status)
    header.add_row("Population", str(faction.population))
    header.add_row("Military", str(faction.military))
    header.add_row("Technology", str(faction.technology))
    header.add_row("Influence", str(faction.influence))
    header.add_row("Resources", str(faction.resources))
    header.add_row("Stability", str(faction.stability))
    header.add_row("Reputation", f"{faction.reputation} ({faction.reputation_label})")
    header.add_row(
        "Galaxy",
        f"Stability {view.galactic_stability} | Gates {view.gate_network_integrity} | Ancient Tech {view.ancient_tech_discovery}",
    )
    if view.blocked_actions:
        header.add_row("Blocked", ", ".join(view.blocked_actions))
    _CONSOLE.print(
        Panel.fit(
            header,
            title=_ornate_title(view.save_name),
            subtitle=_panel_subtitle("loop"),
            subtitle_align="left",
            border_style=_BORDER_LOOP,
        )
    )


def _event_lines(events: list[EventView]) -> list[str]:
    lines = []
    for event in events:
        lines.append(f"[bold]{event.title}[/bold] [dim]({event.category})[/dim]")
        lines.append(f"  {event.description}")
        if event.effects:
            lines.append(f"  Effects: {_format_effects(event.effects)}")
        if event.blocked_actions:
            lines.append(f"  Blocks: {', '.join(event.blocked_actions)}")
        if event.unblocked_actions:
            lines.append(f"  Unblocks: {', '.join(event.unblocked_actions)}")
        if event.awaiting_decision:
            lines.append("  [cyan]Awaiting your decision.[/cyan]")
    return lines


def _render_turn_report(report: TurnReportView) -> None:
    lines = [f"Cycle {report.cycle} resolved."]
    if report.applied_actions:
        lines.append("Actions taken: " + ", ".join(report.applied_actions))
    else:
        lines.append("No actions taken.")
    for rejected in report.rejected_actions:
        lines.append(f"[red]Rejected[/red] {rejected}")
    _render_message_panel("Cycle Report", lines)

    if report.events:
        _render_message_panel("Events", _event_lines(report.events), border_style=_BORDER_EVENTS, panel_key="events")
    if report.headlines:
        _render_message_panel("Galactic News", report.headlines, border_style=_BORDER_NEWS, panel_key="news")
    for name in report.unlocked_achievements:
        _CONSOLE.print(f"[bold green]Achievement unlocked:[/bold green] {name}")
    if report.lost:
        _render_message_panel(
            "Defeat",
            [f"Your faction has fallen: {report.loss_reason}."],
            border_style=_BORDER_WARNING,
        )
    elif report.won:
        _render_message_panel("Victory", ["Your faction endures beyond the end."], border_style=_BORDER_VICTORY)


def _choose_actions(game_service) -> list[str] | None:
    """Collect up to the per-cycle limit of distinct actions; None cancels."""

    chosen: list[str] = []
    while len(chosen) < MAX_ACTIONS_PER_TURN:
        options = [
            option
            for option in game_service.list_action_options()
            if not option.blocked and option.action_type not in chosen
        ]
        labels = [f"{option.name} ({option.effect_summary})" for option in options]
        labels.append("End cycle" if chosen else "End cycle without acting")
        hint = f"Chosen: {', '.join(chosen)}" if chosen else f"Pick up to {MAX_ACTIONS_PER_TURN} actions."
        selection = arrow_menu("Actions", labels, footer_hint=hint)
        if selection == -1:
            return None
        if selection == len(labels) - 1:
            break
        chosen.append(options[selection].action_type)
    return chosen


def _choose_path(choices: list[ChoiceView], title: str) -> list[int] | None:
    options = choices
    while True:
        labels = [
            f"{choice.description} ({_format_effects(choice.effects)})" if choice.effects else choice.description
            for choice in options
        ]
        selection = arrow_menu(title, labels, footer_hint="ESC to decide later")
        if selection == -1:
            return None
        picked = options[selection]
        if not picked.children:
            return list(picked.path)
        options = picked.children
        title = picked.description


def _render_choice_result(result) -> None:
    lines = [" -> ".join(result.steps)]
    if result.effects:
        lines.append(f"Effects: {_format_effects(result.effects)}")
    if result.blocked_actions:
        lines.append(f"Blocked next cycle: {', '.join(result.blocked_actions)}")
    _render_message_panel("Decision", lines, border_style=_BORDER_EVENTS, panel_key="decision")


def _run_decisions(game_service) -> None:
    for event in game_service.pending_choices():
        clear_screen()
        _render_message_panel(event.title, [event.description], border_style=_BORDER_EVENTS, panel_key="decision")
        try:
            if event.accept_decline:
                selection = arrow_menu(event.title, ["Accept", "Decline"], footer_hint="ESC to decide later")
                if selection == -1:
                    continue
                result = game_service.answer_overture(event.id, selection == 0)
            else:
                path = _choose_path(event.choices, event.title)
                if path is None:
                    continue
                result = game_service.resolve_choice(event.id, path)
        except PersistenceError as exc:
            _render_save_failure(exc)
            _prompt_continue()
            continue
        except PreconditionError as exc:
            _render_message_panel("Decision", [str(exc)], border_style=_BORDER_WARNING)
            _prompt_continue()
            continue
        clear_screen()
        _render_choice_result(result)
        _prompt_continue()


def _render_save_failure(exc: PersistenceError) -> None:
    _render_message_panel(
        "Save Failed",
        [str(exc), "Your progress is kept in this session. Choose 'Retry save' before the next cycle."],
        border_style=_BORDER_WARNING,
        panel_key="save",
    )


def _retry_save(game_service) -> None:
    clear_screen()
    try:
        result = game_service.retry_pending_save()
    except PersistenceError as exc:
        _render_save_failure(exc)
    else:
        _render_message_panel("Save", result.messages, panel_key="save")
    _prompt_continue()


def _export_game(game_service) -> None:
    view = game_service.get_game_view()
    target = Path(f"{view.game_id}.json")
    target.write_text(game_service.export_game(), encoding="utf-8")
    clear_screen()
    _render_message_panel("Export", [f"Game exported to {target.resolve()}"], panel_key="save")
    _prompt_continue()


def _end_cycle(game_service) -> None:
    actions = _choose_actions(game_service)
    if actions is None:
        return
    clear_screen()
    try:
        report = game_service.end_turn(actions)
    except PersistenceError as exc:
        if exc.report is not None:
            _render_turn_report(to_turn_report_view(exc.report))
        _render_save_failure(exc)
        _prompt_continue()
        return
    _render_turn_report(report)
    _prompt_continue()


def run_game_loop(game_service) -> None:
    while True:
        try:
            view = game_service.get_game_view()
        except PreconditionError:
            clear_screen()
            _render_message_panel("No Game", ["No active game. Returning to the menu."], border_style=_BORDER_WARNING)
            _prompt_continue()
            return

        clear_screen()
        _render_status(view)
        if view.current_events:
            _render_message_panel("Recent Events", _event_lines(view.current_events), border_style=_BORDER_EVENTS, panel_key="events")
        if view.galactic_news:
            _render_message_panel("Galactic News", view.galactic_news[-5:], border_style=_BORDER_NEWS, panel_key="news")

        if view.has_won or view.has_lost:
            outcome = "Victory" if view.has_won else "Defeat"
            _render_message_panel(
                outcome,
                ["This game is over. Start a new game from the main menu."],
                border_style=_BORDER_VICTORY if view.has_won else _BORDER_WARNING,
            )
            _prompt_continue()
            return

        options = ["End Cycle", "Decisions", "Export Game", "Quit to Menu"]
        if game_service.has_pending_save:
            options.insert(0, "Retry save")
        pending = len(game_service.pending_choices())
        hint = f"{pending} decision(s) awaiting your word." if pending else None
        idx = arrow_menu(f"Cycle {view.cycle}", options, footer_hint=hint)
        choice = options[idx] if idx != -1 else "Quit to Menu"

        if choice == "Retry save":
            _retry_save(game_service)
        elif choice == "End Cycle":
            if game_service.has_pending_save:
                clear_screen()
                _render_message_panel(
                    "Save Pending",
                    ["The last cycle has not been saved. Retry the save first."],
                    border_style=_BORDER_WARNING,
                    panel_key="save",
                )
                _prompt_continue()
                continue
            _end_cycle(game_service)
        elif choice == "Decisions":
            if not pending:
                clear_screen()
                _render_message_panel("Decisions", ["Nothing awaits your decision."], panel_key="decision")
                _prompt_continue()
                continue
            _run_decisions(game_service)
        elif choice == "Export Game":
            _export_game(game_service)
        else:
            return
