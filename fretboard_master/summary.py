"""Text shown to the player: answers, end-of-session summary and tips."""

from typing import List, Optional

from .fretboard import STRING_NAMES
from .note_types import Challenge, SessionSnapshot

PRACTICE_TIPS = (
    "Start with beginner mode to learn note positions",
    "Focus on one or two strings at first",
    "Use a metronome while practicing",
    "Try to visualize the fretboard in your mind",
    "Practice regularly for better muscle memory",
)


def format_time(seconds: Optional[int]) -> str:
    """Format whole seconds as m:ss."""
    seconds = max(0, int(seconds or 0))
    mins, secs = divmod(seconds, 60)
    return f"{mins}:{secs:02d}"


def performance_message(accuracy: int) -> str:
    if accuracy >= 90:
        return "Excellent work!"
    if accuracy >= 75:
        return "Great job!"
    if accuracy >= 60:
        return "Good effort!"
    return "Keep practicing!"


def prompt_text(challenge: Challenge) -> str:
    return f"Play on {STRING_NAMES[challenge.string]}"


def answer_text(challenge: Challenge) -> str:
    """E.g. 'A is at fret 5 on the 6th (Low E)'."""
    text = f"{challenge.pitch} is at fret {challenge.fret} on the {STRING_NAMES[challenge.string]}"
    if challenge.fret == 0:
        text += " (Open string)"
    return text


def score_text(snapshot: SessionSnapshot) -> str:
    score = snapshot.score
    return f"Score: {score.correct}/{score.total} ({snapshot.accuracy}%)"


def summary_lines(snapshot: SessionSnapshot, duration: Optional[int]) -> List[str]:
    """Lines for the end-of-session screen."""
    return [
        f"Correct Notes: {snapshot.score.correct}",
        f"Total Attempts: {snapshot.score.total}",
        f"Accuracy: {snapshot.accuracy}%",
        f"Duration: {format_time(duration)}",
        "",
        performance_message(snapshot.accuracy),
    ]
