from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class PlayerActionType(str, Enum):
    BUILD_DEFENSES = "build_defenses"
    RECRUIT_TROOPS = "recruit_troops"
    DEVELOP_INFRASTRUCTURE = "develop_infrastructure"
    EXPLOIT_RESOURCES = "exploit_resources"
    MILITARY_TECH = "military_tech"
    ECONOMIC_TECH = "economic_tech"
    ANCIENT_STUDIES = "ancient_studies"
    GATE_NETWORK_RESEARCH = "gate_network_research"
    DIPLOMACY = "diplomacy"
    ESPIONAGE = "espionage"

    @property
    def display_name(self) -> str:
        return ACTION_DISPLAY_NAMES.get(self, self.value.replace("_", " ").title())

    @property
    def description(self) -> str:
        return ACTION_DESCRIPTIONS.get(self, "(No description available)")

    @classmethod
    def parse(cls, raw: object) -> "PlayerActionType | None":
        if isinstance(raw, cls):
            return raw
        normalized = str(raw or "").strip().lower().replace(" ", "_").replace("-", "_")
        for member in cls:
            if member.value == normalized or member.name.lower() == normalized:
                return member
        return None


ACTION_DISPLAY_NAMES = {
    PlayerActionType.MILITARY_TECH: "Military Tech Research",
    PlayerActionType.ECONOMIC_TECH: "Economic Tech Research",
}

ACTION_DESCRIPTIONS = {
    PlayerActionType.BUILD_DEFENSES: "Increase your defenses to resist attacks.",
    PlayerActionType.RECRUIT_TROOPS: "Recruit new soldiers to boost military.",
    PlayerActionType.DEVELOP_INFRASTRUCTURE: "Improve facilities for long-term growth.",
    PlayerActionType.EXPLOIT_RESOURCES: "Gather more resources for your faction.",
    PlayerActionType.MILITARY_TECH: "Research new military technologies.",
    PlayerActionType.ECONOMIC_TECH: "Research economic improvements.",
    PlayerActionType.ANCIENT_STUDIES: "Study ancient relics for unique benefits.",
    PlayerActionType.GATE_NETWORK_RESEARCH: "Research the lost gate network.",
    PlayerActionType.DIPLOMACY: "Stabilize the galaxy and improve your reputation through diplomatic effort.",
    PlayerActionType.ESPIONAGE: "Gather intelligence and pick up small gains by investigating the unknown.",
}


@dataclass
class PlayerAction:
    # Kept loose so malformed submissions reach the validator instead of failing here.
    action_type: Any
    faction_id: str = ""
    parameters: Dict[str, Any] = field(default_factory=dict)
