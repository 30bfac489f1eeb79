from __future__ import annotations


MAX_ACTIONS_PER_TURN = 2
REPETITION_THRESHOLD = 3
REPETITION_STABILITY_PENALTY = -5
REPETITION_RESOURCES_PENALTY = -3

GALACTIC_DRIFT_MAX = 3
GATE_DRIFT_MAX = 2
ANCIENT_DRIFT_CHANCE = 15
ANCIENT_DRIFT_MIN = 1
ANCIENT_DRIFT_MAX = 5

DILEMMA_CHANCE = 10
MAIN_EVENT_WINDOW = 40
REPUTATION_WINDOW_STEP = 20
REPUTATION_WINDOW_BONUS = 5
REPUTATION_WINDOW_CAP = 25
LOW_GALACTIC_STABILITY = 30
LOW_STABILITY_CRISIS_CHANCE = 30
GALACTIC_CRISIS_THRESHOLD = 20
GALACTIC_CRISIS_CHANCE = 30
ANCIENT_SURGE_THRESHOLD = 70
ANCIENT_SURGE_CHANCE = 25
OVERTURE_CHANCE = 10

ARCHETYPE_EVENT_CHANCE = 20
RARE_ARCHETYPE_EVENT_CHANCE = 5

CRISIS_VITAL_FLOOR = 5
BRINK_STABILITY = 20

VICTORY_CYCLE = 20
VICTORY_TECHNOLOGY = 100
SURVIVOR_CYCLE = 20
LEGENDARY_REPUTATION = 100
WARLORD_MILITARY = 100

GALACTIC_NEWS_LIMIT = 15
RISING_STAR_REPUTATION = 50
TURMOIL_GALACTIC_STABILITY = 20
FAILING_GATE_INTEGRITY = 30

STARTING_RANGES = {
    "population": (40, 70),
    "military": (30, 60),
    "technology": (25, 55),
    "influence": (20, 50),
    "resources": (35, 65),
}
PLAYER_STARTING_BONUS = {
    "population": 10,
    "resources": 10,
}
FACTION_NAME_MAX_LENGTH = 32
