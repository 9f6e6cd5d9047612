"""Type definitions for the Fretboard Master project."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class NotePosition:
    """Represents a position on the guitar fretboard."""

    string: int  # String number (1-6, where 1 is the thinnest string)
    fret: int  # Fret number (0 for open string)

    def __str__(self):
        return f"S{self.string}F{self.fret}"


class Difficulty(Enum):
    """Difficulty levels as (time limit in seconds, highest fret in play)."""

    BEGINNER = (8, 5)
    INTERMEDIATE = (6, 12)
    ADVANCED = (4, 15)
    EXPERT = (3, 22)

    @property
    def time_limit(self) -> int:
        return self.value[0]

    @property
    def max_fret(self) -> int:
        return self.value[1]

    @property
    def label(self) -> str:
        return f"{self.name.capitalize()} ({self.time_limit}s, 0-{self.max_fret} frets)"

    @classmethod
    def parse(cls, value: Union["Difficulty", str]) -> "Difficulty":
        """Accept a Difficulty or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            names = ", ".join(d.name.lower() for d in cls)
            raise ValueError(f"Unknown difficulty '{value}' (expected one of: {names})")

    def next(self) -> "Difficulty":
        levels = list(Difficulty)
        return levels[(levels.index(self) + 1) % len(levels)]


class GameState(Enum):
    IDLE = "idle"
    PLAYING = "playing"
    ENDED = "ended"


@dataclass
class Score:
    correct: int = 0
    total: int = 0

    @property
    def accuracy(self) -> int:
        """Percentage of correct responses, rounded half up; 0 before any attempt."""
        if self.total <= 0:
            return 0
        # half up: 1/8 -> 13
        return int(100 * self.correct / self.total + 0.5)


@dataclass
class Challenge:
    """The quiz question currently on screen."""

    pitch: str  # Target pitch class (e.g., 'A', 'C#')
    string: int  # String the note must be found on
    fret: int  # Fret that was picked as the answer
    countdown: int  # Seconds left to answer
    active: bool = True  # Countdown running
    answer_shown: bool = False
    awaiting_response: bool = False

    @property
    def position(self) -> NotePosition:
        return NotePosition(self.string, self.fret)


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session for the presentation layer."""

    game_state: GameState
    selected_strings: Tuple[int, ...]
    difficulty: Difficulty
    score: Score
    accuracy: int
    audio_enabled: bool
    advance_pending: bool
    notice: Optional[str] = None
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    challenge: Optional[Challenge] = None
