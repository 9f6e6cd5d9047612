"""Note playback: numpy tone synthesis played through sounddevice."""

from __future__ import annotations
import threading
from typing import ClassVar, Dict, Optional, Tuple

import numpy as np

from ..core.interfaces import IAudioPlayer
from ..errors import AudioUnavailableError
from ..fretboard import frequency_of, normalize_pitch_class
from ..logging_config import get_logger

logger = get_logger(__name__)

# Relative strength of the first few harmonics
HARMONICS = (1.0, 0.45, 0.2, 0.1)


def synthesize_tone(
    frequency: float,
    duration: float,
    sample_rate: int = 44100,
    volume: float = 0.3,
    attack: float = 0.01,
    release: float = 0.1,
) -> np.ndarray:
    """Render a plucked-string-like tone.

    Args:
        frequency: Fundamental in Hz
        duration: Length in seconds
        sample_rate: Samples per second
        volume: Peak amplitude (0-1)
        attack: Fraction of the tone spent ramping up
        release: Fraction of the tone spent fading out

    Returns:
        Mono float32 samples in [-volume, volume]
    """
    n_samples = int(round(duration * sample_rate))
    if n_samples <= 0 or frequency <= 0:
        return np.zeros(0, dtype=np.float32)

    t = np.linspace(0.0, n_samples / sample_rate, n_samples, endpoint=False)
    phase = 2 * np.pi * frequency * t

    wave = np.zeros(n_samples, dtype=np.float64)
    for i, amp in enumerate(HARMONICS):
        wave += np.sin((i + 1) * phase) * amp
    peak = np.max(np.abs(wave))
    if peak > 0:
        wave /= peak

    # Fast attack, exponential decay, linear release to silence
    envelope = np.exp(-3.0 * t / max(duration, 1e-6))
    attack_samples = min(n_samples, int(round(attack * n_samples)))
    if attack_samples > 0:
        envelope[:attack_samples] *= np.linspace(0.0, 1.0, attack_samples)
    release_samples = min(n_samples - attack_samples, int(round(release * n_samples)))
    if release_samples > 0:
        envelope[-release_samples:] *= np.linspace(1.0, 0.0, release_samples)

    return (wave * envelope * volume).astype(np.float32)


class SoundDeviceTonePlayer(IAudioPlayer):
    """Plays synthesized tones on the default (or given) output device."""

    SAMPLE_RATE: ClassVar[int] = 44100  # Hz
    TONE_DURATION: ClassVar[float] = 0.8  # seconds
    VOLUME: ClassVar[float] = 0.3

    def __init__(
        self,
        sample_rate: Optional[int] = None,
        tone_duration: Optional[float] = None,
        volume: Optional[float] = None,
        device: Optional[int] = None,
    ) -> None:
        """Initialize the tone player.

        Nothing touches the audio device until initialize() or play().

        Args:
            sample_rate: Sample rate in Hz, or None for default (44100)
            tone_duration: Length of each tone in seconds, or None for default (0.8)
            volume: Peak amplitude 0-1, or None for default (0.3)
            device: Output device ID, or None for the system default
        """
        self._sample_rate = sample_rate or self.SAMPLE_RATE
        self._tone_duration = tone_duration or self.TONE_DURATION
        self._volume = self.VOLUME if volume is None else float(np.clip(volume, 0.0, 1.0))
        self._device = device

        self._sd = None
        self._lock = threading.Lock()
        self._cache: Dict[Tuple[str, int], np.ndarray] = {}

    @property
    def available(self) -> bool:
        return self._sd is not None

    def initialize(self) -> bool:
        with self._lock:
            if self._sd is not None:
                return True

            try:
                # Importing loads PortAudio, which may not be installed
                import sounddevice as sd

                sd.check_output_settings(
                    device=self._device, samplerate=self._sample_rate, channels=1
                )
            except Exception as e:
                logger.warning(f"Audio output unavailable, continuing without sound: {e}")
                return False

            self._sd = sd
            logger.info(
                f"Audio output initialized: device={self._device}, rate={self._sample_rate}Hz"
            )
            return True

    def render(self, pitch: str, octave: int) -> np.ndarray:
        """Samples for a pitch class at an octave, cached per note."""
        key = (normalize_pitch_class(pitch), octave)
        if key not in self._cache:
            self._cache[key] = synthesize_tone(
                frequency_of(key[0], octave),
                self._tone_duration,
                sample_rate=self._sample_rate,
                volume=self._volume,
            )
        return self._cache[key]

    def play(self, pitch: str, octave: int) -> None:
        if not self.initialize():
            raise AudioUnavailableError("No audio output device")

        samples = self.render(pitch, octave)
        try:
            self._sd.play(
                samples, samplerate=self._sample_rate, device=self._device, blocking=False
            )
        except Exception as e:
            raise AudioUnavailableError(f"Could not play {pitch}{octave}: {e}") from e
        logger.debug(f"Playing {pitch}{octave} ({len(samples)} samples)")

    def shutdown(self) -> None:
        if self._sd is not None:
            try:
                self._sd.stop()
            except Exception as e:
                logger.error(f"Error stopping audio output: {e}")


class SilentAudioPlayer(IAudioPlayer):
    """Audio player that never makes a sound."""

    @property
    def available(self) -> bool:
        return True

    def initialize(self) -> bool:
        return True

    def play(self, pitch: str, octave: int) -> None:
        logger.debug(f"Silent playback of {pitch}{octave}")


def safe_play(player: IAudioPlayer, pitch: str, octave: int) -> bool:
    """Play a note, logging and swallowing any failure.

    Returns:
        True if playback was started, False otherwise
    """
    try:
        player.play(pitch, octave)
        return True
    except AudioUnavailableError as e:
        logger.warning(f"Audio playback failed: {e}")
    except Exception as e:
        logger.error(f"Unexpected audio error playing {pitch}{octave}: {e}", exc_info=True)
    return False
