"""Fretboard note model: pitch classes, standard tuning and fret positions.

Everything here is pure. Randomness lives one layer up, in the session
controller.
"""

import re
from typing import Dict, Iterable, List

from .logging_config import get_logger
from .note_types import NotePosition

# Get logger for this module
logger = get_logger(__name__)

NOTES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")

# Standard tuning: Low E (6th) to High E (1st)
STRING_TUNING: Dict[int, str] = {
    6: "E",  # Low E
    5: "A",
    4: "D",
    3: "G",
    2: "B",
    1: "E",  # High E
}

# Octave of each open string, used for tone playback only
BASE_OCTAVES: Dict[int, int] = {6: 2, 5: 2, 4: 3, 3: 3, 2: 3, 1: 4}

STRING_NAMES: Dict[int, str] = {
    6: "6th (Low E)",
    5: "5th (A)",
    4: "4th (D)",
    3: "3rd (G)",
    2: "2nd (B)",
    1: "1st (High E)",
}

ALL_STRINGS = (6, 5, 4, 3, 2, 1)

# Equal temperament, A4 = 440 Hz
REFERENCE_FREQUENCIES: Dict[str, float] = {
    "C": 261.63,
    "C#": 277.18,
    "D": 293.66,
    "D#": 311.13,
    "E": 329.63,
    "F": 349.23,
    "F#": 369.99,
    "G": 392.00,
    "G#": 415.30,
    "A": 440.00,
    "A#": 466.16,
    "B": 493.88,
}
REFERENCE_OCTAVE = 4

FLAT_TO_SHARP = {
    "Ab": "G#",
    "Bb": "A#",
    "Cb": "B",
    "Db": "C#",
    "Eb": "D#",
    "Fb": "E",
    "Gb": "F#",
    "B#": "C",
    "E#": "F",
}

# Note letter plus an optional accidental, nothing else
PITCH_CLASS_PATTERN = re.compile(r"^([A-Ga-g])([#b]?)$")


def normalize_pitch_class(name: str) -> str:
    """Normalize a pitch class name to its sharp spelling.

    Args:
        name: Note name without octave (e.g., 'A', 'c#', 'Bb')

    Returns:
        str: The sharp spelling (e.g., 'A', 'C#', 'A#')

    Raises:
        ValueError: If the name is not a pitch class

    Examples:
        >>> normalize_pitch_class('Bb')
        'A#'
        >>> normalize_pitch_class('f#')
        'F#'
    """
    match = PITCH_CLASS_PATTERN.match(str(name).strip())
    if not match:
        raise ValueError(f"Invalid pitch class: '{name}'")
    note = match.group(1).upper() + match.group(2)
    return FLAT_TO_SHARP.get(note, note)


def check_string(string: int) -> None:
    """Raise ValueError unless string is a string number, 1 to 6."""
    if string not in STRING_TUNING:
        raise ValueError(f"Invalid string number: {string} (expected 1-6)")


def pitch_at(string: int, fret: int) -> str:
    """Return the pitch class sounded at a fret of a string."""
    check_string(string)
    if fret < 0:
        raise ValueError(f"Invalid fret: {fret}")
    open_index = NOTES.index(STRING_TUNING[string])
    return NOTES[(open_index + fret) % 12]


def positions_for(
    pitch: str, strings: Iterable[int], max_fret: int
) -> List[NotePosition]:
    """Find every position of a pitch class on the given strings.

    Strings are visited in the order given; frets ascend from 0 to max_fret
    inclusive.

    Args:
        pitch: Target pitch class (sharps or flats)
        strings: String numbers to search
        max_fret: Highest fret to consider

    Returns:
        List of matching positions, possibly empty
    """
    target = normalize_pitch_class(pitch)
    positions = []
    for string in strings:
        for fret in range(max_fret + 1):
            if pitch_at(string, fret) == target:
                positions.append(NotePosition(string, fret))
    return positions


def frequency_of(pitch: str, octave: int) -> float:
    """Frequency in Hz of a pitch class at an octave (A4 = 440 Hz)."""
    base = REFERENCE_FREQUENCIES[normalize_pitch_class(pitch)]
    return base * 2.0 ** (octave - REFERENCE_OCTAVE)


def octave_for(string: int, fret: int) -> int:
    """Octave number for playback of a fretted note.

    The octave steps up every twelve frets from the open string's octave,
    not at each C.
    """
    check_string(string)
    return BASE_OCTAVES[string] + fret // 12
