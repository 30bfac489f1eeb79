import os
import sys

from rich.console import Console
from rich.panel import Panel

try:  # Windows-specific keyboard handling
    import msvcrt  # type: ignore
except ImportError:  # pragma: no cover - fallback for non-Windows
    msvcrt = None


_CONSOLE = Console()
_MENU_BORDER = "cyan"


def clear_screen() -> None:
    """Clear the console in a basic cross-platform way."""

    os.system("cls" if os.name == "nt" else "clear")


def _read_key_windows():
    ch = msvcrt.getch()

    if ch in (b"\x00", b"\xe0"):
        ch2 = msvcrt.getch()
        if ch2 == b"H":
            return "UP"
        if ch2 == b"P":
            return "DOWN"
        return None

    if ch in (b"\r", b"\n"):
        return "ENTER"
    if ch == b"\x1b":
        return "ESC"

    try:
        return ch.decode("utf-8")
    except UnicodeDecodeError:
        return None


def read_key():
    """Read a key, defaulting to line input when msvcrt is unavailable."""

    if msvcrt is not None:
        return _read_key_windows()

    line = sys.stdin.readline()
    if line == "":
        return "ESC"
    return line.strip()


def normalize_menu_key(key):
    if key is None or not isinstance(key, str):
        return key

    if key in {"UP", "DOWN", "ENTER", "ESC"}:
        return key

    lowered = key.lower().strip()
    mapping = {
        "w": "UP",
        "s": "DOWN",
        "": "ENTER",
        "enter": "ENTER",
        "q": "ESC",
        "esc": "ESC",
    }
    return mapping.get(lowered, key)


def _render_menu(title: str, options: list[str], selected: int, footer_hint: str | None) -> None:
    lines = []
    for idx, option in enumerate(options):
        if idx == selected:
            lines.append(f"[bold black on cyan] > {idx + 1}. {option} [/bold black on cyan]")
        else:
            lines.append(f"   {idx + 1}. {option}")
    lines.append("")
    if footer_hint:
        lines.append(f"[cyan]{footer_hint}[/cyan]")
    lines.append("[dim]W/S or arrows to move, a number to jump, ENTER to select, Q to go back.[/dim]")
    _CONSOLE.print(
        Panel.fit(
            "\n".join(lines),
            title=f"[bold cyan]{title or 'Menu'}[/bold cyan]",
            border_style=_MENU_BORDER,
        )
    )


def arrow_menu(title: str, options: list[str], footer_hint: str | None = None) -> int:
    """Render a vertical menu and return the selected index, or -1 on ESC."""

    if not options:
        raise ValueError("arrow_menu requires at least one option")

    selected = 0
    while True:
        clear_screen()
        _render_menu(title, options, selected, footer_hint)
        key = normalize_menu_key(read_key())
        if key == "UP":
            selected = (selected - 1) % len(options)
        elif key == "DOWN":
            selected = (selected + 1) % len(options)
        elif key == "ENTER":
            return selected
        elif key == "ESC":
            return -1
        elif isinstance(key, str) and key.isdigit() and 1 <= int(key) <= len(options):
            return int(key) - 1
