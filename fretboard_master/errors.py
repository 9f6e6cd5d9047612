"""Exception types raised by Fretboard Master components."""


class FretboardMasterError(Exception):
    """Base class for all Fretboard Master errors."""


class InvalidOperationError(FretboardMasterError):
    """A session action was rejected in the current state.

    These are never fatal; the presentation layer shows the message as an
    inline notice and carries on.
    """


class AudioUnavailableError(FretboardMasterError):
    """Audio output could not be initialized or a tone could not be played."""
