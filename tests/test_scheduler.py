import threading
import time
import unittest

from fretboard_master.core.interfaces import TimerHandle
from fretboard_master.scheduler import ManualScheduler, ThreadingScheduler


class TestTimerHandle(unittest.TestCase):
    def test_fires_once(self):
        calls = []
        handle = TimerHandle("t", 1.0, lambda: calls.append(1))
        self.assertTrue(handle.pending)
        self.assertTrue(handle.fire())
        self.assertFalse(handle.fire())
        self.assertFalse(handle.pending)
        self.assertEqual(calls, [1])

    def test_cancelled_never_fires(self):
        calls = []
        handle = TimerHandle("t", 1.0, lambda: calls.append(1))
        handle.cancel()
        self.assertFalse(handle.fire())
        self.assertEqual(calls, [])


class TestManualScheduler(unittest.TestCase):
    def setUp(self):
        self.scheduler = ManualScheduler()
        self.calls = []

    def record(self, label):
        return lambda: self.calls.append((label, self.scheduler.now()))

    def test_fires_in_time_order(self):
        self.scheduler.call_later(2.0, self.record("b"))
        self.scheduler.call_later(1.0, self.record("a"))
        self.scheduler.call_later(2.0, self.record("c"))

        self.assertEqual(self.scheduler.advance(0.5), 0)
        self.assertEqual(self.scheduler.advance(2.0), 3)
        self.assertEqual(self.calls, [("a", 1.0), ("b", 2.0), ("c", 2.0)])
        self.assertEqual(self.scheduler.now(), 2.5)

    def test_cancel(self):
        handle = self.scheduler.call_later(1.0, self.record("a"))
        handle.cancel()
        self.assertEqual(self.scheduler.advance(5), 0)
        self.assertEqual(self.calls, [])
        self.assertEqual(self.scheduler.pending, [])

    def test_callbacks_scheduled_while_advancing(self):
        def chain():
            self.calls.append(("tick", self.scheduler.now()))
            if len(self.calls) < 3:
                self.scheduler.call_later(1.0, chain)

        self.scheduler.call_later(1.0, chain)
        self.scheduler.advance(10)
        self.assertEqual(self.calls, [("tick", 1.0), ("tick", 2.0), ("tick", 3.0)])

    def test_run_pending_only_fires_due(self):
        self.scheduler.call_later(0.0, self.record("now"))
        self.scheduler.call_later(1.0, self.record("later"))
        self.assertEqual(self.scheduler.run_pending(), 1)
        self.assertEqual([c[0] for c in self.calls], ["now"])
        self.assertEqual(len(self.scheduler.pending), 1)

    def test_shutdown_cancels_everything(self):
        handle = self.scheduler.call_later(1.0, self.record("a"))
        self.scheduler.shutdown()
        self.assertFalse(handle.pending)
        self.scheduler.advance(5)
        self.assertEqual(self.calls, [])


class TestThreadingScheduler(unittest.TestCase):
    def setUp(self):
        self.scheduler = ThreadingScheduler()

    def tearDown(self):
        self.scheduler.shutdown()

    def wait_for(self, predicate, timeout=2.0):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            self.scheduler.run_pending()
            if predicate():
                return True
            time.sleep(0.01)
        return False

    def test_callback_runs_on_polling_thread(self):
        threads = []
        self.scheduler.call_later(0.02, lambda: threads.append(threading.current_thread()))
        self.assertTrue(self.wait_for(lambda: threads))
        self.assertIs(threads[0], threading.current_thread())

    def test_not_run_without_polling(self):
        calls = []
        self.scheduler.call_later(0.01, lambda: calls.append(1))
        time.sleep(0.1)
        self.assertEqual(calls, [])
        self.assertEqual(self.scheduler.run_pending(), 1)
        self.assertEqual(calls, [1])

    def test_cancelled_handle_never_fires(self):
        calls = []
        cancelled = self.scheduler.call_later(0.01, lambda: calls.append("cancelled"))
        self.scheduler.call_later(0.05, lambda: calls.append("kept"))
        cancelled.cancel()
        self.assertTrue(self.wait_for(lambda: "kept" in calls))
        self.assertEqual(calls, ["kept"])

    def test_shutdown(self):
        calls = []
        handle = self.scheduler.call_later(0.05, lambda: calls.append(1))
        self.scheduler.shutdown()
        time.sleep(0.1)
        self.scheduler.run_pending()
        self.assertFalse(handle.pending)
        self.assertEqual(calls, [])


if __name__ == "__main__":
    unittest.main()
