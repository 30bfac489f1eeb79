import importlib.util
import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from factions.domain.models.faction import Faction, FactionType, clamp_faction
from factions.domain.models.stats import STAT_BOUNDS, StatKey

_HYPOTHESIS_AVAILABLE = importlib.util.find_spec("hypothesis") is not None

if _HYPOTHESIS_AVAILABLE:
    from hypothesis import given, settings
    from hypothesis import strategies as st


@unittest.skipUnless(_HYPOTHESIS_AVAILABLE, "hypothesis is not installed")
class ClampPropertyTests(unittest.TestCase):
    if _HYPOTHESIS_AVAILABLE:

        @settings(max_examples=100, deadline=None)
        @given(
            values=st.fixed_dictionaries({key: st.integers(min_value=-1000, max_value=1000) for key in StatKey}),
        )
        def test_clamp_faction_always_lands_inside_bounds(self, values) -> None:
            faction = Faction(name="Prop", faction_type=FactionType.IMPERIAL_REMNANT)
            for key, value in values.items():
                faction.set_stat(key, value)

            clamp_faction(faction)

            for key in StatKey:
                low, high = STAT_BOUNDS[key]
                self.assertGreaterEqual(faction.get_stat(key), low)
                self.assertLessEqual(faction.get_stat(key), high)


if __name__ == "__main__":
    unittest.main()
