"""Core components for the Fretboard Master application."""

# Import interfaces for easier access
from .interfaces import (
    IAudioPlayer,
    IScheduler,
    TimerHandle,
)

__all__ = ["IAudioPlayer", "IScheduler", "TimerHandle"]
