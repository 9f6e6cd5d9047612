import sys
import unittest
from unittest.mock import MagicMock, patch

import numpy as np

from fretboard_master.audio import (
    SilentAudioPlayer,
    SoundDeviceTonePlayer,
    safe_play,
    synthesize_tone,
)
from fretboard_master.errors import AudioUnavailableError
from fretboard_master.mock_audio_player import MockAudioPlayer


class TestSynthesizeTone(unittest.TestCase):
    def test_length_and_dtype(self):
        samples = synthesize_tone(440.0, 0.5, sample_rate=8000)
        self.assertEqual(samples.dtype, np.float32)
        self.assertEqual(len(samples), 4000)

    def test_amplitude_bounded_by_volume(self):
        samples = synthesize_tone(220.0, 0.5, sample_rate=8000, volume=0.25)
        self.assertLessEqual(float(np.max(np.abs(samples))), 0.25 + 1e-6)
        self.assertGreater(float(np.max(np.abs(samples))), 0.05)

    def test_starts_and_ends_silent(self):
        samples = synthesize_tone(330.0, 0.5, sample_rate=8000)
        self.assertAlmostEqual(float(samples[0]), 0.0, places=4)
        self.assertAlmostEqual(float(samples[-1]), 0.0, places=4)

    def test_fundamental_dominates(self):
        sample_rate = 8000
        samples = synthesize_tone(440.0, 1.0, sample_rate=sample_rate)
        spectrum = np.abs(np.fft.rfft(samples))
        freqs = np.fft.rfftfreq(len(samples), 1.0 / sample_rate)
        self.assertAlmostEqual(float(freqs[np.argmax(spectrum)]), 440.0, delta=2.0)

    def test_degenerate_input(self):
        self.assertEqual(len(synthesize_tone(440.0, 0.0)), 0)
        self.assertEqual(len(synthesize_tone(0.0, 1.0)), 0)


class TestSoundDeviceTonePlayer(unittest.TestCase):
    def setUp(self):
        self.sd = MagicMock()
        patcher = patch.dict(sys.modules, {"sounddevice": self.sd})
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_initialize_is_idempotent(self):
        player = SoundDeviceTonePlayer(device=3)
        self.assertFalse(player.available)
        self.assertTrue(player.initialize())
        self.assertTrue(player.initialize())
        self.assertTrue(player.available)
        self.sd.check_output_settings.assert_called_once_with(
            device=3, samplerate=44100, channels=1
        )

    def test_play_is_non_blocking(self):
        player = SoundDeviceTonePlayer(sample_rate=22050, tone_duration=0.2)
        player.play("A", 2)

        self.sd.play.assert_called_once()
        args, kwargs = self.sd.play.call_args
        self.assertEqual(len(args[0]), 4410)
        self.assertEqual(kwargs["samplerate"], 22050)
        self.assertIs(kwargs["blocking"], False)

    def test_render_is_cached(self):
        player = SoundDeviceTonePlayer(tone_duration=0.1)
        self.assertIs(player.render("Bb", 3), player.render("A#", 3))

    def test_unavailable_device(self):
        self.sd.check_output_settings.side_effect = RuntimeError("no device")
        player = SoundDeviceTonePlayer()
        self.assertFalse(player.initialize())
        self.assertFalse(player.available)
        with self.assertRaises(AudioUnavailableError):
            player.play("E", 2)
        self.sd.play.assert_not_called()

    def test_playback_error_is_wrapped(self):
        self.sd.play.side_effect = RuntimeError("stream error")
        player = SoundDeviceTonePlayer()
        with self.assertRaises(AudioUnavailableError):
            player.play("E", 4)

    def test_shutdown_stops_output(self):
        player = SoundDeviceTonePlayer()
        player.shutdown()
        self.sd.stop.assert_not_called()
        player.initialize()
        player.shutdown()
        self.sd.stop.assert_called_once()


class TestSafePlay(unittest.TestCase):
    def test_success(self):
        player = MockAudioPlayer()
        self.assertTrue(safe_play(player, "C", 3))
        self.assertEqual(player.played, [("C", 3)])

    def test_failures_are_swallowed(self):
        self.assertFalse(safe_play(MockAudioPlayer(fail_play=True), "C", 3))

        broken = MagicMock()
        broken.play.side_effect = OSError("device vanished")
        self.assertFalse(safe_play(broken, "C", 3))

    def test_silent_player(self):
        player = SilentAudioPlayer()
        self.assertTrue(player.initialize())
        self.assertTrue(safe_play(player, "G", 3))


if __name__ == "__main__":
    unittest.main()
