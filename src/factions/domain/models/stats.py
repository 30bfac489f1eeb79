from __future__ import annotations

from enum import Enum


MIN_STAT = 0
MAX_STAT = 100
MIN_REPUTATION = -100
MAX_REPUTATION = 100


class StatKey(str, Enum):
    POPULATION = "population"
    MILITARY = "military"
    TECHNOLOGY = "technology"
    INFLUENCE = "influence"
    RESOURCES = "resources"
    STABILITY = "stability"
    REPUTATION = "reputation"

    @property
    def display_name(self) -> str:
        return self.value.title()


class FactionStatus(str, Enum):
    THRIVING = "thriving"
    STABLE = "stable"
    STRUGGLING = "struggling"
    DESPERATE = "desperate"
    COLLAPSING = "collapsing"

    @property
    def display_name(self) -> str:
        return self.value.title()


STAT_BOUNDS: dict[StatKey, tuple[int, int]] = {
    StatKey.POPULATION: (MIN_STAT, MAX_STAT),
    StatKey.MILITARY: (MIN_STAT, MAX_STAT),
    StatKey.TECHNOLOGY: (MIN_STAT, MAX_STAT),
    StatKey.INFLUENCE: (MIN_STAT, MAX_STAT),
    StatKey.RESOURCES: (MIN_STAT, MAX_STAT),
    StatKey.STABILITY: (MIN_STAT, MAX_STAT),
    StatKey.REPUTATION: (MIN_REPUTATION, MAX_REPUTATION),
}

# Checked in order, first match wins.
_STATUS_FLOORS = (
    (0, FactionStatus.COLLAPSING),
    (10, FactionStatus.DESPERATE),
    (25, FactionStatus.STRUGGLING),
)
THRIVING_THRESHOLD = 80


def clamp(value: int, low: int, high: int) -> int:
    return max(int(low), min(int(high), int(value)))


def clamp_stat(key: StatKey, value: int) -> int:
    low, high = STAT_BOUNDS[key]
    return clamp(value, low, high)


def derive_status(stability: int, population: int, resources: int) -> FactionStatus:
    vitals = (int(stability), int(population), int(resources))
    for floor, status in _STATUS_FLOORS:
        if any(value <= floor for value in vitals):
            return status
    if all(value >= THRIVING_THRESHOLD for value in vitals):
        return FactionStatus.THRIVING
    return FactionStatus.STABLE
