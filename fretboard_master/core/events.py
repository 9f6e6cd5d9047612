"""Event system for Fretboard Master components."""

from typing import Dict, List, Callable, Any
from enum import Enum, auto

from ..logging_config import get_logger

logger = get_logger(__name__)


class SessionEventType(Enum):
    """Event types emitted by the session controller."""

    CHALLENGE_GENERATED = auto()
    COUNTDOWN_TICK = auto()
    ANSWER_REVEALED = auto()
    RESPONSE_RECORDED = auto()
    SESSION_ENDED = auto()
    SESSION_RESET = auto()
    NOTICE = auto()


class EventEmitter:
    """Event emitter for Fretboard Master components."""

    def __init__(self):
        """Initialize the event emitter."""
        self._listeners: Dict[Any, List[Callable]] = {}

    def on(self, event_type: Any, callback: Callable) -> None:
        """Register a callback for an event type.

        Args:
            event_type: Event type to listen for
            callback: Function to call when the event occurs
        """
        if event_type not in self._listeners:
            self._listeners[event_type] = []

        if callback not in self._listeners[event_type]:
            self._listeners[event_type].append(callback)
            logger.debug(f"Added listener for event {event_type}")

    def off(self, event_type: Any, callback: Callable) -> None:
        """Unregister a callback. Unknown callbacks are ignored."""
        listeners = self._listeners.get(event_type, [])
        if callback in listeners:
            listeners.remove(callback)

    def emit(self, event_type: Any, *args, **kwargs) -> None:
        """Emit an event.

        A failing listener is logged and skipped; it never breaks the emitter
        or the other listeners.

        Args:
            event_type: Event type to emit
            *args: Positional arguments to pass to listeners
            **kwargs: Keyword arguments to pass to listeners
        """
        if event_type not in self._listeners:
            return

        for callback in list(self._listeners[event_type]):
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in event listener for {event_type}: {e}")

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners = {}
        logger.debug("Cleared all event listeners")
