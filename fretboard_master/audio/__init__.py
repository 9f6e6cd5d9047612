"""Audio output for Fretboard Master."""

from .tone_player import (
    SilentAudioPlayer,
    SoundDeviceTonePlayer,
    safe_play,
    synthesize_tone,
)

__all__ = ["SilentAudioPlayer", "SoundDeviceTonePlayer", "safe_play", "synthesize_tone"]
