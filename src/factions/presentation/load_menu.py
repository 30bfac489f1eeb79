from factions.domain.errors import PreconditionError
from factions.presentation.menu_controls import arrow_menu, clear_screen


def choose_saved_game(game_service) -> bool:
    """Pick a saved game to load or delete; True when a game is now active."""

    while True:
        games = game_service.list_saved_games()
        if not games:
            clear_screen()
            print("No saved games available.")
            input("Press ENTER to return to the menu...")
            clear_screen()
            return False

        options = [
            f"{game.faction_name} ({game.faction_type}) - Cycle {game.cycle} - {game.outcome} - {game.last_played}"
            for game in games
        ]
        selection = arrow_menu("Continue", options)
        if selection == -1:
            return False

        game = games[selection]
        action = arrow_menu(game.save_name, ["Load", "Delete", "Back"])
        if action == 0:
            try:
                game_service.load_game(game.id)
            except PreconditionError as exc:
                clear_screen()
                print(str(exc))
                input("Press ENTER to return to the menu...")
                continue
            return True
        if action == 1:
            confirm = arrow_menu(f"Delete {game.save_name}?", ["No", "Yes"])
            if confirm == 1:
                result = game_service.delete_game(game.id)
                clear_screen()
                for message in result.messages:
                    print(message)
                input("Press ENTER to continue...")
                clear_screen()
