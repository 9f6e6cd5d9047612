import unittest

from fretboard_master.core.events import EventEmitter, SessionEventType


class TestEventEmitter(unittest.TestCase):
    def setUp(self):
        self.emitter = EventEmitter()
        self.received = []

    def listener(self, *args, **kwargs):
        self.received.append((args, kwargs))

    def test_emit_passes_arguments(self):
        self.emitter.on(SessionEventType.NOTICE, self.listener)
        self.emitter.emit(SessionEventType.NOTICE, "hello", level="info")
        self.assertEqual(self.received, [(("hello",), {"level": "info"})])

    def test_listener_registered_once(self):
        self.emitter.on(SessionEventType.NOTICE, self.listener)
        self.emitter.on(SessionEventType.NOTICE, self.listener)
        self.emitter.emit(SessionEventType.NOTICE)
        self.assertEqual(len(self.received), 1)

    def test_off(self):
        self.emitter.on(SessionEventType.NOTICE, self.listener)
        self.emitter.off(SessionEventType.NOTICE, self.listener)
        self.emitter.off(SessionEventType.SESSION_ENDED, self.listener)
        self.emitter.emit(SessionEventType.NOTICE)
        self.assertEqual(self.received, [])

    def test_failing_listener_does_not_stop_others(self):
        def broken(*args):
            raise RuntimeError("boom")

        self.emitter.on(SessionEventType.COUNTDOWN_TICK, broken)
        self.emitter.on(SessionEventType.COUNTDOWN_TICK, self.listener)
        self.emitter.emit(SessionEventType.COUNTDOWN_TICK, 3)
        self.assertEqual(self.received, [((3,), {})])

    def test_clear(self):
        self.emitter.on(SessionEventType.NOTICE, self.listener)
        self.emitter.clear()
        self.emitter.emit(SessionEventType.NOTICE)
        self.assertEqual(self.received, [])


if __name__ == "__main__":
    unittest.main()
