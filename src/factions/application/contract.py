CONTRACT_VERSION = "1.0.0"

COMMAND_INTENTS = (
    "new_game",
    "load_game",
    "delete_game",
    "end_turn",
    "resolve_choice",
    "answer_overture",
    "retry_pending_save",
    "import_game",
)

QUERY_INTENTS = (
    "list_saved_games",
    "get_game_view",
    "list_action_options",
    "pending_choices",
    "list_achievements",
    "export_game",
)

CONTRACT_DTO_TYPES = (
    "ActionResult",
    "FactionView",
    "EventView",
    "ChoiceView",
    "GameView",
    "TurnReportView",
    "ChoiceResultView",
    "SavedGameView",
    "AchievementView",
    "ActionOptionView",
)
