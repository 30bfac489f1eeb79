from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class ActionResult:
    messages: List[str] = field(default_factory=list)
    game_over: bool = False


@dataclass
class FactionView:
    id: str
    name: str
    faction_type: str
    description: str
    traits: List[str]
    population: int
    military: int
    technology: int
    influence: int
    resources: int
    stability: int
    reputation: int
    reputation_label: str
    status: str
    is_player: bool = True


@dataclass
class ChoiceView:
    path: List[int]
    description: str
    effects: Dict[str, int] = field(default_factory=dict)
    blocked_actions: List[str] = field(default_factory=list)
    children: List["ChoiceView"] = field(default_factory=list)


@dataclass
class EventView:
    id: str
    title: str
    description: str
    category: str
    cycle: int
    effects: Dict[str, int] = field(default_factory=dict)
    blocked_actions: List[str] = field(default_factory=list)
    unblocked_actions: List[str] = field(default_factory=list)
    choices: List[ChoiceView] = field(default_factory=list)
    awaiting_decision: bool = False
    accept_decline: bool = False


@dataclass
class ActionOptionView:
    action_type: str
    name: str
    description: str
    effect_summary: str
    blocked: bool = False
    recent_uses: int = 0


@dataclass
class GameView:
    game_id: str
    save_name: str
    cycle: int
    faction: FactionView
    galactic_stability: int
    gate_network_integrity: int
    ancient_tech_discovery: int
    blocked_actions: List[str] = field(default_factory=list)
    galactic_news: List[str] = field(default_factory=list)
    current_events: List[EventView] = field(default_factory=list)
    achievements: List[str] = field(default_factory=list)
    has_won: bool = False
    has_lost: bool = False


@dataclass
class TurnReportView:
    cycle: int
    applied_actions: List[str] = field(default_factory=list)
    rejected_actions: List[str] = field(default_factory=list)
    events: List[EventView] = field(default_factory=list)
    headlines: List[str] = field(default_factory=list)
    unlocked_achievements: List[str] = field(default_factory=list)
    pending_choice_event_ids: List[str] = field(default_factory=list)
    won: bool = False
    lost: bool = False
    loss_reason: str = ""


@dataclass
class ChoiceResultView:
    event_id: str
    steps: List[str] = field(default_factory=list)
    effects: Dict[str, int] = field(default_factory=dict)
    blocked_actions: List[str] = field(default_factory=list)


@dataclass
class SavedGameView:
    id: str
    save_name: str
    faction_name: str
    faction_type: str
    cycle: int
    last_played: str
    outcome: str


@dataclass
class AchievementView:
    name: str
    description: str
    unlocked_at: str
