"""Keyboard bindings shared by the terminal and windowed UIs."""

from typing import Callable, Dict, List, Tuple

from ..errors import InvalidOperationError
from ..logging_config import get_logger
from ..session import SessionController

logger = get_logger(__name__)


def _toggle(string: int) -> Callable[[SessionController], None]:
    return lambda controller: controller.toggle_string(string)


KEY_BINDINGS: Dict[str, Tuple[str, Callable[[SessionController], object]]] = {
    " ": ("Next note", SessionController.generate_challenge),
    "n": ("Next note", SessionController.generate_challenge),
    "a": ("Show answer", SessionController.reveal_answer),
    "y": ("Got it!", SessionController.mark_correct),
    "c": ("Got it!", SessionController.mark_correct),
    "x": ("Missed it", SessionController.mark_incorrect),
    "m": ("Missed it", SessionController.mark_incorrect),
    "0": ("Select all strings", SessionController.select_all_strings),
    "d": ("Next difficulty", lambda c: c.set_difficulty(c.difficulty.next())),
    "s": ("Sound on/off", lambda c: c.set_audio_enabled(not c.audio_enabled)),
    "p": ("Replay note", SessionController.replay_current_note),
    "r": ("Reset score", SessionController.reset_score),
    "e": ("End session", SessionController.end_session),
    "g": ("New session", SessionController.start_new_session),
}
for _string in range(1, 7):
    KEY_BINDINGS[str(_string)] = (f"Toggle string {_string}", _toggle(_string))


def help_lines() -> List[str]:
    """One line per distinct action, keys grouped, for the on-screen help."""
    grouped: Dict[str, List[str]] = {}
    for key, (label, _) in KEY_BINDINGS.items():
        if label.startswith("Toggle string"):
            label = "Toggle string"
        grouped.setdefault(label, []).append("space" if key == " " else key)
    lines = [f"{'/'.join(keys)}: {label}" for label, keys in grouped.items()]
    lines.append("q: Quit")
    return lines


def dispatch(controller: SessionController, key: str) -> bool:
    """Run the action bound to a key.

    Rejected actions are not errors here; the controller has already put
    the message in its notice.

    Returns:
        False if the key asks to quit, True otherwise
    """
    if key.lower() == "q":
        return False

    binding = KEY_BINDINGS.get(key) or KEY_BINDINGS.get(key.lower())
    if binding is None:
        return True

    label, action = binding
    try:
        action(controller)
    except InvalidOperationError as e:
        logger.debug(f"'{label}' rejected: {e}")
    return True
