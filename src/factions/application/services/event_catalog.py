from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from factions.application.services import balance_tables as bt
from factions.domain.models.action import PlayerActionType
from factions.domain.models.event import (
    ACCEPT_DECLINE,
    CHOICE_PARAMETER,
    EventCategory,
    EventChoice,
    GameEvent,
)
from factions.domain.models.faction import FactionType
from factions.domain.models.stats import StatKey

P = StatKey.POPULATION
M = StatKey.MILITARY
T = StatKey.TECHNOLOGY
INF = StatKey.INFLUENCE
R = StatKey.RESOURCES
S = StatKey.STABILITY
REP = StatKey.REPUTATION

A = PlayerActionType


@dataclass(frozen=True)
class EventTemplate:
    title: str
    description: str
    category: EventCategory
    effects: Mapping[StatKey, int] = field(default_factory=dict)
    blocked_actions: frozenset[PlayerActionType] = frozenset()
    unblocked_actions: frozenset[PlayerActionType] = frozenset()
    parameters: Mapping[str, object] = field(default_factory=dict)
    choices: Tuple[EventChoice, ...] = ()

    def build(self, cycle: int) -> GameEvent:
        return GameEvent(
            title=self.title,
            description=self.description,
            category=self.category,
            cycle=int(cycle),
            effects=dict(self.effects),
            blocked_actions=frozenset(self.blocked_actions),
            unblocked_actions=frozenset(self.unblocked_actions),
            parameters=dict(self.parameters),
            choices=tuple(self.choices),
        )


@dataclass(frozen=True)
class ArchetypeEvent:
    faction_type: FactionType
    chance: int
    template: EventTemplate


def _t(category, title, description, effects, blocked=()):
    return EventTemplate(
        title=title,
        description=description,
        category=category,
        effects=effects,
        blocked_actions=frozenset(blocked),
    )


_MIL = EventCategory.MILITARY
_ECO = EventCategory.ECONOMIC
_TEC = EventCategory.TECHNOLOGICAL
_DIS = EventCategory.DISCOVERY
_NAT = EventCategory.NATURAL
_CRI = EventCategory.CRISIS

CATEGORY_TABLES: Dict[EventCategory, Tuple[EventTemplate, ...]] = {
    _MIL: (
        _t(_MIL, "Raiders Attack", "A group of raiders attacks your supply lines, straining your defenses.", {M: -5, R: -10}, [A.EXPLOIT_RESOURCES]),
        _t(_MIL, "Internal Mutiny", "A mutiny breaks out among your troops, threatening stability.", {M: -8, S: -5}, [A.RECRUIT_TROOPS]),
        _t(_MIL, "Mercenary Trouble", "Mercenaries demand higher pay or threaten to desert.", {R: -7, M: -3}),
        _t(_MIL, "Elite Training", "Your officers organize elite training, boosting your forces.", {M: 10, S: 2}),
        _t(_MIL, "Border Skirmish", "A border skirmish tests your readiness. Losses are minimal, but morale is shaken.", {M: -3, S: -2}),
        _t(_MIL, "Veteran Recruits", "Veterans from other regions join your cause, strengthening your army.", {M: 7, P: 2}),
        _t(_MIL, "Peaceful Garrison", "Your garrisons report no incidents. Troops rest and recover.", {M: 3, S: 2}),
        _t(_MIL, "Training Accident", "A minor accident during training causes a brief setback.", {M: -2}),
    ),
    _ECO: (
        _t(_ECO, "Resource Shortage", "Critical resources become scarce due to supply chain disruptions.", {R: -12}, [A.EXPLOIT_RESOURCES]),
        _t(_ECO, "Market Instability", "Economic uncertainty causes prices to fluctuate wildly.", {R: -8, S: -3}),
        _t(_ECO, "Black Market Surge", "Illegal goods flood your markets as law enforcement breaks down.", {INF: -5, R: -5}),
        _t(_ECO, "Trade Convoy Arrives", "A friendly trade convoy brings much-needed supplies.", {R: 15, S: 2}),
        _t(_ECO, "Smuggling Ring Busted", "You uncover a smuggling ring, recovering stolen goods.", {R: 8, INF: 3}),
        _t(_ECO, "Resource Windfall", "A new resource deposit is discovered, boosting your economy!", {R: 12}),
        _t(_ECO, "Efficient Logistics", "Your supply officers optimize routes, saving resources.", {R: 5}),
        _t(_ECO, "Charity Drive", "A charity drive boosts morale and stability among the people.", {S: 3}),
    ),
    _TEC: (
        _t(_TEC, "Tech Breakdown", "A critical system fails, requiring urgent repairs.", {T: -7, S: -3}, [A.MILITARY_TECH]),
        _t(_TEC, "Research Breakthrough", "Your scientists make a breakthrough, advancing your technology.", {T: 10, R: -3}),
        _t(_TEC, "Sabotage Attempt", "Saboteurs attempt to disrupt your research efforts.", {T: -5, M: -2}),
        _t(_TEC, "Unexpected Innovation", "A junior scientist invents a new process, boosting morale and tech!", {T: 7, S: 4}),
        _t(_TEC, "Prototype Success", "A risky prototype works perfectly, giving you an edge.", {T: 8, R: -2}),
        _t(_TEC, "Equipment Theft", "Thieves steal valuable research equipment, setting you back.", {T: -6, R: -4}),
        _t(_TEC, "Tech Festival", "A festival celebrating innovation inspires your scientists.", {T: 5, INF: 2}),
        _t(_TEC, "Failed Experiment", "A failed experiment causes a minor setback.", {T: -2}),
    ),
    _DIS: (
        _t(_DIS, "Ancient Ruins Found", "You discover ancient ruins containing valuable technology.", {T: 5, R: 3}),
        _t(_DIS, "Lost Data Recovered", "Lost data archives are recovered, revealing secrets of the past.", {T: 3, S: 2}),
        _t(_DIS, "Mysterious Signal Detected", "A mysterious signal is detected, hinting at unknown opportunities.", {INF: 4}),
        _t(_DIS, "Dangerous Relic Activated", "A relic malfunctions, causing chaos and blocking research!", {S: -6, T: -2}, [A.ANCIENT_STUDIES]),
        _t(_DIS, "Alien Artifact", "An alien artifact is found, boosting your influence and curiosity.", {INF: 6, T: 2}),
        _t(_DIS, "Forgotten Cache", "A forgotten cache of supplies is discovered in the ruins.", {R: 7, S: 1}),
        _t(_DIS, "Cultural Exchange", "A cultural exchange with outsiders brings new ideas.", {INF: 4, S: 2}),
        _t(_DIS, "False Lead", "A promising lead turns out to be a dead end.", {T: -1}),
    ),
    _NAT: (
        _t(_NAT, "Solar Flare", "A solar flare disrupts communications and damages equipment.", {R: -6, T: -3}),
        _t(_NAT, "Meteor Shower", "A meteor shower causes damage to infrastructure.", {P: -4, S: -2}),
        _t(_NAT, "Plague Outbreak", "A sudden outbreak of disease threatens your population.", {P: -8, S: -4}, [A.DEVELOP_INFRASTRUCTURE]),
        _t(_NAT, "Bountiful Harvest", "Against all odds, your crops thrive!", {R: 10, S: 3}),
        _t(_NAT, "Earthquake!", "A powerful earthquake shakes your settlements, causing damage.", {P: -6, R: -5}),
        _t(_NAT, "Mild Season", "The weather is calm and pleasant, helping your people recover.", {S: 4, P: 2}),
        _t(_NAT, "Gentle Rains", "Gentle rains bring a season of prosperity.", {R: 6, P: 2}),
        _t(_NAT, "Minor Flood", "A minor flood causes inconvenience but little damage.", {R: -2}),
    ),
}

# Rolled in order before the plain table; the first success wins.
ARCHETYPE_EVENTS: Dict[EventCategory, Tuple[ArchetypeEvent, ...]] = {
    _MIL: (
        ArchetypeEvent(FactionType.MILITARY_JUNTA, bt.ARCHETYPE_EVENT_CHANCE, _t(
            _MIL, "Veteran Parade", "A parade of veterans inspires your troops and citizens alike.", {M: 8, S: 4})),
        ArchetypeEvent(FactionType.PIRATE_ALLIANCE, bt.ARCHETYPE_EVENT_CHANCE, _t(
            _MIL, "Successful Raid", "Your pirates pull off a daring raid, boosting resources and morale!", {M: 5, R: 8, S: 2})),
        ArchetypeEvent(FactionType.REBELLION_CELL, bt.ARCHETYPE_EVENT_CHANCE, _t(
            _MIL, "Sabotage Success", "Your rebels sabotage enemy supplies, gaining support and resources.", {M: 4, R: 6, INF: 3})),
    ),
    _ECO: (
        ArchetypeEvent(FactionType.CORPORATE_COUNCIL, bt.ARCHETYPE_EVENT_CHANCE, _t(
            _ECO, "Market Boom", "A surge in the market brings a windfall to your coffers.", {R: 12, INF: 4})),
        ArchetypeEvent(FactionType.RELIGIOUS_ORDER, bt.ARCHETYPE_EVENT_CHANCE, _t(
            _ECO, "Tithes and Offerings", "The faithful donate generously, swelling your resources.", {R: 8, S: 3})),
    ),
    _TEC: (
        ArchetypeEvent(FactionType.TECHNOCRATIC_UNION, bt.ARCHETYPE_EVENT_CHANCE, _t(
            _TEC, "Breakthrough Algorithm", "Your scientists develop a revolutionary algorithm, accelerating research.", {T: 15, S: 3})),
        ArchetypeEvent(FactionType.IMPERIAL_REMNANT, bt.ARCHETYPE_EVENT_CHANCE, _t(
            _TEC, "Recovered Imperial Database", "You recover a lost imperial database, boosting your technological edge.", {T: 10, INF: 5})),
    ),
    _DIS: (
        ArchetypeEvent(FactionType.ANCIENT_AWAKENED, bt.ARCHETYPE_EVENT_CHANCE, _t(
            _DIS, "Ancient Memory Stirred", "A memory from a forgotten age grants your people new insight.", {T: 10, S: 5})),
        ArchetypeEvent(FactionType.ANCIENT_AWAKENED, bt.RARE_ARCHETYPE_EVENT_CHANCE, _t(
            _DIS, "Echoes of the First Empire", "Your people recall secrets of the First Empire, unlocking new paths.", {T: 20, INF: 10})),
    ),
    _NAT: (
        ArchetypeEvent(FactionType.RELIGIOUS_ORDER, bt.ARCHETYPE_EVENT_CHANCE, _t(
            _NAT, "Pilgrimage Miracle", "A miracle during a pilgrimage inspires hope and unity.", {S: 7, P: 3})),
    ),
}

POPULATION_CRISIS = _t(_CRI, "Population Crisis", "Your population is on the brink of collapse! Take urgent action.", {S: -3})
RESOURCE_CRISIS = _t(_CRI, "Resource Crisis", "Your resources are nearly depleted! Find new supplies soon.", {S: -2})
STABILITY_CRISIS = _t(_CRI, "Stability Crisis", "Your people are losing faith in your leadership! Restore order quickly.", {P: -2})
FACTION_ON_THE_BRINK = _t(
    _CRI,
    "Faction on the Brink!",
    "Your people are losing hope. Desperate measures are needed.",
    {S: -10, P: -5},
    [A.DEVELOP_INFRASTRUCTURE, A.ECONOMIC_TECH],
)
MAJOR_CRISIS = _t(_CRI, "Major Crisis", "A major crisis shakes your faction to its core, testing your leadership.", {S: -7, R: -5})

COLLAPSE = _t(
    _CRI,
    "Collapse",
    "The imperial government has fallen. You lead the last organized group in your region. Survival is up to you.",
    {},
)

ANCIENT_TECHNOLOGY_UNEARTHED = EventTemplate(
    title="Ancient Technology Unearthed",
    description="You unearth powerful ancient technology, offering new possibilities.",
    category=_DIS,
    effects={T: 15, S: 5},
    unblocked_actions=frozenset({A.ANCIENT_STUDIES}),
)

DIPLOMATIC_OVERTURE = EventTemplate(
    title="Diplomatic Overture",
    description="A neighboring faction offers an alliance. Do you accept?",
    category=_ECO,
    parameters={CHOICE_PARAMETER: ACCEPT_DECLINE},
)
OVERTURE_ACCEPT_EFFECTS: Mapping[StatKey, int] = {INF: 5, REP: 5, R: -3}
OVERTURE_DECLINE_EFFECTS: Mapping[StatKey, int] = {REP: -2}


def repetition_penalty(action: PlayerActionType, cycle: int) -> GameEvent:
    name = action.display_name
    return GameEvent(
        title=f"Repetitive Strategy: {name}",
        description=f"Your repeated use of {name} has led to diminishing returns and unrest.",
        category=_CRI,
        cycle=int(cycle),
        effects={S: bt.REPETITION_STABILITY_PENALTY, R: bt.REPETITION_RESOURCES_PENALTY},
        blocked_actions=frozenset({action}),
    )


def crisis_for(population: int, resources: int, stability: int) -> EventTemplate:
    """Crisis events are picked by the faction's weakest vital, not by a roll."""
    if int(population) <= bt.CRISIS_VITAL_FLOOR:
        return POPULATION_CRISIS
    if int(resources) <= bt.CRISIS_VITAL_FLOOR:
        return RESOURCE_CRISIS
    if int(stability) <= bt.CRISIS_VITAL_FLOOR:
        return STABILITY_CRISIS
    if int(stability) < bt.BRINK_STABILITY:
        return FACTION_ON_THE_BRINK
    return MAJOR_CRISIS


def _c(description, effects=None, blocked=(), children=()):
    return EventChoice(
        description=description,
        effects=dict(effects or {}),
        blocked_actions=frozenset(blocked),
        children=tuple(children),
    )


def _dilemma(category, title, description, *choices):
    return EventTemplate(title=title, description=description, category=category, choices=tuple(choices))


AID_REFUGEES = _c(
    "Aid the Refugees: provide resources and shelter to refugees, improving your reputation but straining your supplies.",
    {R: -5, REP: 6},
)
REJECT_REFUGEES = _c(
    "Reject the Refugees: turn away the refugees, preserving resources but risking a reputation loss.",
    {R: 2, REP: -4},
)
INVESTIGATE_ANOMALY = _c(
    "Investigate the Anomaly: send a team to investigate, risking danger for potential rewards.",
    {T: 6, S: -3},
)
IGNORE_ANOMALY = _c(
    "Ignore the Anomaly: focus on current priorities, possibly missing out on discoveries.",
    {S: 2},
)

DILEMMAS: Tuple[EventTemplate, ...] = (
    _dilemma(
        _MIL,
        "Military Dilemma",
        "A military crisis demands a difficult decision. Will you commit forces or seek a diplomatic solution?",
        _c("Hire the mercenaries", {M: 8, R: -6}),
        _c("Refuse their offer", {M: -2, S: 1}),
    ),
    _dilemma(
        _ECO,
        "Economic Opportunity",
        "A lucrative but risky trade deal is on the table. Do you invest resources for potential gain or play it safe?",
        _c("Accept the investment", {R: 10, INF: -3}),
        _c("Refuse the deal", {S: 2}),
    ),
    _dilemma(
        _TEC,
        "Tech Breakthrough",
        "Scientists propose a radical experiment. Approve it for a chance at major progress, or avoid the risk?",
        _c("Approve the experiment", {T: 8, S: -3}),
        _c("Reject the proposal", {S: 1}),
    ),
    _dilemma(
        _DIS,
        "Mysterious Discovery",
        "An ancient artifact is found. Study it for possible benefits, or sell it to fund your faction?",
        _c("Study the relic", {T: 3}, children=(INVESTIGATE_ANOMALY, IGNORE_ANOMALY)),
        _c("Sell the relic", {R: 8, REP: -2}),
    ),
    _dilemma(
        _NAT,
        "Natural Disaster",
        "A natural disaster strikes. Allocate resources to aid recovery, or focus on protecting your core assets?",
        _c("Send aid", {R: -6, REP: 5, S: 3}),
        _c("Focus on core worlds", {S: -3, REP: -3}),
    ),
    _dilemma(
        _TEC,
        "Espionage Opportunity",
        "A chance arises to spy on a rival. Attempt espionage for potential rewards, or avoid the risk of exposure?",
        _c("Attempt infiltration", {T: 4, INF: 3, REP: -4}),
        _c("Play it safe", {S: 1}),
    ),
    _dilemma(
        _CRI,
        "Reputation at Stake",
        "Your reputation is challenged. Defend your honor at a cost, or ignore the slight and risk public opinion?",
        _c("Cover it up", {REP: -6, S: 2}),
        _c("Accept responsibility", {REP: 4, INF: -3}),
    ),
    _dilemma(
        _CRI,
        "A Fork in the Road",
        "A crisis forces your faction to choose a path.",
        _c("Send aid to a neighboring world", {INF: 2}, children=(AID_REFUGEES, REJECT_REFUGEES)),
        _c("Ignore their plea", {REP: -3}, blocked=[A.DIPLOMACY]),
    ),
)

HEADLINE_TEMPLATES: Dict[EventCategory, str] = {
    _CRI: "Crisis: {title} shakes the {faction}!",
    _MIL: "Military Update: {title} reported by {faction}.",
    _ECO: "Economy: {title} impacts {faction}.",
    _TEC: "Tech Breakthrough: {title} for {faction}.",
    _DIS: "Discovery: {title} stirs the galaxy!",
    _NAT: "Natural Event: {title} affects {faction}.",
}


def find_template(title: str) -> Optional[EventTemplate]:
    for table in CATEGORY_TABLES.values():
        for template in table:
            if template.title == title:
                return template
    for bonus_table in ARCHETYPE_EVENTS.values():
        for bonus in bonus_table:
            if bonus.template.title == title:
                return bonus.template
    for template in DILEMMAS:
        if template.title == title:
            return template
    return None
