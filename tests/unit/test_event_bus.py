import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from factions.application.services.event_bus import EventBus
from factions.domain.events import GameWon


class EventBusTests(unittest.TestCase):
    def test_publish_notifies_all_handlers_for_event_type(self) -> None:
        bus = EventBus()
        seen: list[str] = []

        bus.subscribe(GameWon, lambda evt: seen.append("first"))
        bus.subscribe(GameWon, lambda evt: seen.append("second"))
        bus.publish(GameWon(game_id="g1", cycle=4))

        self.assertEqual(["first", "second"], seen)

    def test_priority_orders_handlers(self) -> None:
        bus = EventBus()
        seen: list[str] = []
        bus.subscribe(GameWon, lambda evt: seen.append("late"), priority=200)
        bus.subscribe(GameWon, lambda evt: seen.append("early"), priority=10)
        bus.publish(GameWon(game_id="g1", cycle=4))
        self.assertEqual(["early", "late"], seen)

    def test_failing_handler_is_isolated(self) -> None:
        bus = EventBus()
        seen: list[int] = []

        def _boom(evt) -> None:
            raise RuntimeError("handler broke")

        bus.subscribe(GameWon, _boom, priority=1)
        bus.subscribe(GameWon, lambda evt: seen.append(evt.cycle))

        with self.assertLogs("factions.application.services.event_bus", level="ERROR"):
            bus.publish(GameWon(game_id="g1", cycle=7))

        self.assertEqual([7], seen)
        self.assertEqual(1, len(bus.last_publish_errors()))

    def test_unsubscribe_removes_handler(self) -> None:
        bus = EventBus()
        seen: list[int] = []

        def handler(evt) -> None:
            seen.append(evt.cycle)

        bus.subscribe(GameWon, handler)
        self.assertTrue(bus.unsubscribe(GameWon, handler))
        self.assertFalse(bus.unsubscribe(GameWon, handler))
        bus.publish(GameWon(game_id="g1", cycle=3))
        self.assertEqual([], seen)


if __name__ == "__main__":
    unittest.main()
