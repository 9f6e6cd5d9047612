"""Fretboard Master - a timed fretboard note-finding drill."""

__version__ = "0.1.0"
