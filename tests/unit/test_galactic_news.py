import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from factions.application.services.event_catalog import ANCIENT_TECHNOLOGY_UNEARTHED, MAJOR_CRISIS
from factions.application.services.galactic_news import headlines_for, publish_headlines, reputation_label
from factions.domain.models.faction import Faction, FactionType
from factions.domain.models.game_state import GameState


def _state(reputation: int = 0, **world) -> GameState:
    faction = Faction(name="Aurora", faction_type=FactionType.PIRATE_ALLIANCE, reputation=reputation)
    return GameState(player_faction=faction, **world)


class GalacticNewsTests(unittest.TestCase):
    def test_reputation_labels(self) -> None:
        self.assertEqual("Legendary", reputation_label(100))
        self.assertEqual("Respected", reputation_label(50))
        self.assertEqual("Noted", reputation_label(20))
        self.assertEqual("Neutral", reputation_label(19))
        self.assertEqual("Neutral", reputation_label(-19))
        self.assertEqual("Notorious", reputation_label(-20))
        self.assertEqual("Feared", reputation_label(-50))
        self.assertEqual("Infamous", reputation_label(-100))

    def test_event_headlines_name_the_faction(self) -> None:
        state = _state()
        headlines = headlines_for(state, [MAJOR_CRISIS.build(2), ANCIENT_TECHNOLOGY_UNEARTHED.build(2)])
        self.assertEqual(
            [
                "Crisis: Major Crisis shakes the Aurora!",
                "Discovery: Ancient Technology Unearthed stirs the galaxy!",
            ],
            headlines,
        )

    def test_world_conditions_add_headlines(self) -> None:
        state = _state(reputation=60, galactic_stability=10, gate_network_integrity=20, ancient_tech_discovery=75)
        headlines = headlines_for(state, [])
        self.assertEqual(4, len(headlines))
        self.assertTrue(headlines[0].startswith("Rising Star"))

    def test_news_feed_keeps_the_latest_fifteen(self) -> None:
        state = _state()
        publish_headlines(state, [f"line {index}" for index in range(20)])
        self.assertEqual(15, len(state.galactic_news))
        self.assertEqual("line 5", state.galactic_news[0])
        self.assertEqual("line 19", state.galactic_news[-1])


if __name__ == "__main__":
    unittest.main()
