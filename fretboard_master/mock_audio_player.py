from .errors import AudioUnavailableError


class MockAudioPlayer:
    """A mock audio player for unit tests. Records every note it is asked to play."""

    def __init__(self, fail_init=False, fail_play=False):
        self.played = []
        self.init_calls = 0
        self.fail_init = fail_init
        self.fail_play = fail_play
        self._available = False

    @property
    def available(self):
        return self._available

    def initialize(self):
        self.init_calls += 1
        self._available = not self.fail_init
        return self._available

    def play(self, pitch, octave):
        if self.fail_play or self.fail_init:
            raise AudioUnavailableError("mock playback failure")
        self.played.append((pitch, octave))

    def shutdown(self):
        self._available = False
