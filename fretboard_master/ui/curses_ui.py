import curses

import pyfiglet

from ..fretboard import ALL_STRINGS, STRING_NAMES
from ..logging_config import get_logger
from ..note_types import GameState
from ..session import SessionController
from ..summary import answer_text, prompt_text, score_text, summary_lines
from .keymap import dispatch, help_lines

# Get logger for this module
logger = get_logger(__name__)


class CursesUI:
    """Terminal UI for Fretboard Master"""

    def __init__(self, frame_interval: float = 0.1):
        self.screen = None
        self.frame_interval = frame_interval

    def init_screen(self):
        self.screen = curses.initscr()
        curses.noecho()
        curses.cbreak()
        try:
            curses.curs_set(0)
        except curses.error:
            # Terminal cannot hide the cursor
            pass
        self.screen.keypad(True)
        self.screen.timeout(int(self.frame_interval * 1000))
        self.screen.clear()
        return self.screen

    def _addstr(self, y, x, text, attr=0):
        height, width = self.screen.getmaxyx()
        if 0 <= y < height and x < width:
            try:
                self.screen.addstr(y, max(0, x), text[: max(0, width - x - 1)], attr)
            except curses.error:
                # Writing the bottom-right cell always raises
                pass

    def update_display(self, controller: SessionController):
        screen = self.screen
        if not screen:
            return
        snapshot = controller.snapshot()
        height, width = screen.getmaxyx()
        screen.erase()

        self._addstr(0, 0, "Fretboard Master", curses.A_BOLD)
        header = f"{score_text(snapshot)}   {snapshot.difficulty.label}   Sound: {'on' if snapshot.audio_enabled else 'off'}"
        self._addstr(1, 0, header)
        strings = "  ".join(
            f"[{'x' if s in snapshot.selected_strings else ' '}] {STRING_NAMES[s]}"
            for s in ALL_STRINGS
        )
        self._addstr(2, 0, strings)

        row = 4
        if snapshot.game_state is GameState.ENDED:
            self._addstr(row, 0, "Game Complete!", curses.A_BOLD)
            for i, line in enumerate(summary_lines(snapshot, controller.session_duration)):
                self._addstr(row + 2 + i, 2, line)
        elif snapshot.challenge is not None:
            challenge = snapshot.challenge
            figlet_text = pyfiglet.figlet_format(challenge.pitch)
            lines = figlet_text.splitlines()
            for i, line in enumerate(lines):
                self._addstr(row + i, max(0, (width // 2) - (len(line) // 2)), line)
            row += len(lines) + 1
            self._addstr(row, max(0, width // 2 - 10), prompt_text(challenge))
            self._addstr(row + 1, max(0, width // 2 - 3), f"{challenge.countdown}s", curses.A_BOLD)
            if challenge.answer_shown:
                self._addstr(row + 3, 2, f"Answer: {answer_text(challenge)}", curses.A_BOLD)
            if challenge.awaiting_response:
                self._addstr(row + 4, 2, "Did you get it?  y = Got it!   x = Missed it")
        else:
            self._addstr(row, 2, "Ready to practice? Press space to start.")

        if not snapshot.selected_strings:
            self._addstr(height - 4, 0, "Please select at least one string to practice")
        elif snapshot.notice:
            self._addstr(height - 4, 0, snapshot.notice)
        self._addstr(height - 2, 0, " | ".join(help_lines()))
        screen.refresh()

    def run(self, controller: SessionController):
        """Drive the session until the player quits."""
        self.init_screen()
        try:
            running = True
            while running:
                controller.process_events()
                self.update_display(controller)
                key = self.screen.getch()
                if key == -1 or key > 255:
                    continue
                running = dispatch(controller, chr(key))
            logger.info("Player quit")
        finally:
            controller.shutdown()
            self.cleanup()

    def show_stats(self, controller: SessionController):
        """Print the session summary after the screen is torn down.

        Quitting mid-session ends it here, so the duration is known.
        """
        self.cleanup()
        if controller.game_state is GameState.PLAYING:
            controller.end_session()
        snapshot = controller.snapshot()
        if snapshot.score.total == 0:
            return
        print("\n===== Session Statistics =====")
        for line in summary_lines(snapshot, controller.session_duration):
            print(line)
        print("\nThank you for playing!")

    def cleanup(self):
        if self.screen:
            self.screen.keypad(False)
            curses.nocbreak()
            curses.echo()
            curses.endwin()
            self.screen = None
