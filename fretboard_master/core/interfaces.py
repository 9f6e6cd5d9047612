"""Defines the core interfaces for the Fretboard Master application."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable


class TimerHandle:
    """A scheduled one-shot callback that can be cancelled.

    Once cancelled or fired, the callback never runs (again).
    """

    def __init__(self, name: str, due: float, callback: Callable[[], None]):
        self.name = name
        self.due = due
        self._callback = callback
        self._cancelled = False
        self._fired = False

    @property
    def pending(self) -> bool:
        return not (self._cancelled or self._fired)

    def cancel(self) -> None:
        self._cancelled = True

    def fire(self) -> bool:
        """Run the callback if still pending. Returns True if it ran."""
        if not self.pending:
            return False
        self._fired = True
        self._callback()
        return True

    def __repr__(self):
        state = "pending" if self.pending else ("cancelled" if self._cancelled else "fired")
        return f"TimerHandle({self.name!r}, due={self.due:.3f}, {state})"


class IScheduler(ABC):
    """Interface for timers driving the session."""

    @abstractmethod
    def call_later(
        self, delay: float, callback: Callable[[], None], name: str = "timer"
    ) -> TimerHandle:
        """Schedule callback to run once after delay seconds."""
        pass

    @abstractmethod
    def run_pending(self) -> int:
        """Run callbacks that are due. Returns how many ran."""
        pass

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds on this scheduler's clock."""
        pass

    def shutdown(self) -> None:
        """Release timer resources."""
        pass


class IAudioPlayer(ABC):
    """Interface for note playback."""

    @abstractmethod
    def initialize(self) -> bool:
        """Prepare audio output. Safe to call repeatedly.

        Returns:
            True if audio is available, False otherwise
        """
        pass

    @abstractmethod
    def play(self, pitch: str, octave: int) -> None:
        """Play a single short tone. May raise AudioUnavailableError."""
        pass

    @property
    @abstractmethod
    def available(self) -> bool:
        """Whether the last initialization succeeded."""
        pass

    def shutdown(self) -> None:
        """Stop playback and release the device."""
        pass
