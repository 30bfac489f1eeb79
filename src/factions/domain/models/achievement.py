from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


FIRST_VICTORY = "First Victory"
MASTER_OF_TECHNOLOGY = "Master of Technology"
SURVIVOR = "Survivor"
VICTORY = "Victory"
DEFEAT = "Defeat"
LEGENDARY_REPUTATION = "Legendary Reputation"
WARLORD = "Warlord"
TECH_ASCENDANT = "Tech Ascendant"

ACHIEVEMENT_DESCRIPTIONS = {
    FIRST_VICTORY: "Win your first game.",
    MASTER_OF_TECHNOLOGY: "Reach 100 Technology in a single game.",
    SURVIVOR: "Survive 20 cycles in a single game.",
    VICTORY: "Win a game by surviving 20 turns or reaching 100 Technology.",
    DEFEAT: "Lose a game by running out of a critical resource.",
    LEGENDARY_REPUTATION: "Reach 100 Reputation in a single game.",
    WARLORD: "Reach 100 Military in a single game.",
    TECH_ASCENDANT: "Reach 100 Technology in a single game.",
}


@dataclass
class GlobalAchievement:
    name: str
    description: str = ""
    unlocked_at: Optional[datetime] = field(default_factory=lambda: datetime.now(timezone.utc))
