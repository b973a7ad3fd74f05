import threading
import unittest

from courtside.services import RoundTimer, TickerThread, TimerEvent


class RoundTimerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.timer = RoundTimer(round_length_seconds=60, warn_seconds=10)

    def run_ticks(self, count: int):
        return [self.timer.tick() for _ in range(count)]

    def test_warning_then_expiry(self) -> None:
        self.timer.start()
        events = self.run_ticks(60)

        self.assertEqual(events.count(TimerEvent.WARNING), 1)
        self.assertEqual(events.count(TimerEvent.EXPIRED), 1)
        self.assertEqual(events.index(TimerEvent.WARNING), 49)
        self.assertEqual(events[-1], TimerEvent.EXPIRED)
        self.assertFalse(self.timer.running)
        self.assertEqual(self.timer.remaining_seconds, 0)

    def test_ticks_after_expiry_do_nothing(self) -> None:
        self.timer.start()
        self.run_ticks(60)

        self.assertEqual(self.run_ticks(5), [TimerEvent.NONE] * 5)
        self.assertEqual(self.timer.remaining_seconds, 0)

    def test_pause_stops_countdown(self) -> None:
        self.timer.start()
        self.run_ticks(5)
        self.timer.pause()
        self.run_ticks(5)

        self.assertEqual(self.timer.remaining_seconds, 55)
        self.timer.resume()
        self.run_ticks(5)
        self.assertEqual(self.timer.remaining_seconds, 50)
        self.assertEqual(self.timer.elapsed_seconds, 10)

    def test_reset_rearms_warning(self) -> None:
        self.timer.start()
        self.run_ticks(60)
        self.timer.reset()
        self.timer.start()

        self.assertEqual(self.run_ticks(60).count(TimerEvent.WARNING), 1)

    def test_configure_applies_on_reset(self) -> None:
        self.timer.configure(round_length_seconds=120, warn_seconds=30)
        self.assertEqual(self.timer.remaining_seconds, 60)

        self.timer.reset()
        config = self.timer.get_timer_configuration()
        self.assertEqual(config["remaining_seconds"], 120)
        self.assertEqual(config["remaining_display"], "02:00")
        self.assertEqual(config["warn_seconds"], 30)

    def test_configure_rejects_bad_values(self) -> None:
        with self.assertRaises(ValueError):
            self.timer.configure(round_length_seconds=0)
        with self.assertRaises(ValueError):
            self.timer.configure(warn_seconds=-1)


class TickerThreadTests(unittest.TestCase):
    def test_calls_back_with_token_until_cancelled(self) -> None:
        received = []
        done = threading.Event()

        def callback(token):
            received.append(token)
            if len(received) >= 3:
                done.set()

        ticker = TickerThread(callback, token=7, interval=0.01)
        ticker.start()
        self.assertTrue(done.wait(2))
        ticker.cancel()
        ticker.join(1)

        self.assertTrue(ticker.cancelled)
        self.assertFalse(ticker.is_alive())
        self.assertTrue(all(token == 7 for token in received))


if __name__ == "__main__":
    unittest.main()
