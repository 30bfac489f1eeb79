from dataclasses import dataclass


@dataclass
class GameCreated:
    game_id: str
    faction_name: str
    faction_type: str


@dataclass
class TurnProcessed:
    game_id: str
    cycle: int
    actions_applied: int
    actions_rejected: int
    events_drawn: int


@dataclass
class AchievementUnlocked:
    game_id: str
    name: str
    cycle: int


@dataclass
class GameWon:
    game_id: str
    cycle: int


@dataclass
class GameLost:
    game_id: str
    cycle: int
    reason: str


@dataclass
class ChoiceResolved:
    game_id: str
    event_id: str
    path: tuple
