import math

import pygame

from ..fretboard import ALL_STRINGS, STRING_NAMES
from ..logging_config import get_logger
from ..note_types import GameState
from ..session import SessionController
from ..summary import (
    PRACTICE_TIPS,
    answer_text,
    prompt_text,
    score_text,
    summary_lines,
)
from .keymap import dispatch, help_lines

# Get logger for this module
logger = get_logger(__name__)


class PygameUI:
    """Pygame-based UI for Fretboard Master"""

    def __init__(self):
        """Initialize the Pygame UI"""
        self.screen = None
        self.width = 1024
        self.height = 768
        self.bg_color = (20, 20, 30)
        self.text_color = (255, 255, 0)
        self.secondary_color = (180, 255, 180)
        self.answer_color = (255, 210, 90)
        self.notice_color = (255, 120, 120)
        self.initialized = False
        self.clock = None

        # Fonts
        self.title_font = None
        self.large_font = None
        self.medium_font = None
        self.small_font = None

        logger.debug("Initializing PygameUI")

    def init_screen(self):
        """Initialize the Pygame screen and resources"""
        try:
            pygame.init()
            self.screen = pygame.display.set_mode((self.width, self.height))
            pygame.display.set_caption("Fretboard Master")

            # Initialize fonts
            self.title_font = pygame.font.SysFont("Arial", 48, bold=True)
            self.large_font = pygame.font.SysFont("Arial", 120, bold=True)
            self.medium_font = pygame.font.SysFont("Arial", 36)
            self.small_font = pygame.font.SysFont("Arial", 22)

            self.clock = pygame.time.Clock()
            self.initialized = True
            logger.info("Pygame UI initialized successfully")
            return self.screen

        except Exception as e:
            logger.error(f"Failed to initialize Pygame: {e}")
            self.cleanup()
            raise

    def _blit(self, font, text, color, **anchor):
        surface = font.render(text, True, color)
        rect = surface.get_rect(**anchor)
        self.screen.blit(surface, rect)
        return rect

    def _draw_header(self, snapshot):
        header_rect = pygame.Rect(0, 0, self.width, 80)
        pygame.draw.rect(self.screen, (30, 30, 40), header_rect)

        self._blit(self.medium_font, "Fretboard Master", (200, 200, 255), topleft=(20, 20))
        self._blit(self.medium_font, score_text(snapshot), (200, 255, 200), topright=(self.width - 20, 20))

        strings = "   ".join(
            f"{'*' if s in snapshot.selected_strings else '-'} {STRING_NAMES[s]}"
            for s in ALL_STRINGS
        )
        self._blit(self.small_font, strings, (180, 180, 200), midtop=(self.width // 2, 90))
        settings = f"{snapshot.difficulty.label}    Sound: {'on' if snapshot.audio_enabled else 'off'}"
        self._blit(self.small_font, settings, (180, 180, 200), midtop=(self.width // 2, 120))

    def _draw_challenge(self, snapshot):
        challenge = snapshot.challenge
        center_x = self.width // 2

        self._blit(
            self.large_font, challenge.pitch, self.text_color,
            center=(center_x, self.height // 2 - 100),
        )
        self._blit(
            self.medium_font, prompt_text(challenge), (200, 200, 255),
            center=(center_x, self.height // 2),
        )

        # Countdown ring: the arc shrinks as time runs out
        total = snapshot.difficulty.time_limit
        radius = 40
        ring = pygame.Rect(0, 0, radius * 2, radius * 2)
        ring.center = (center_x, self.height // 2 + 80)
        pygame.draw.circle(self.screen, (60, 60, 80), ring.center, radius, 4)
        if challenge.countdown > 0 and total > 0:
            fraction = min(1.0, challenge.countdown / total)
            pygame.draw.arc(self.screen, (90, 160, 255), ring, 0, fraction * math.tau, 4)
        self._blit(self.medium_font, str(challenge.countdown), (255, 255, 255), center=ring.center)

        y = self.height // 2 + 150
        if challenge.answer_shown:
            self._blit(
                self.medium_font, f"Answer: {answer_text(challenge)}", self.answer_color,
                center=(center_x, y),
            )
        if challenge.awaiting_response:
            self._blit(
                self.small_font, "Did you get it?   Y = Got it!    X = Missed it",
                self.secondary_color, center=(center_x, y + 45),
            )

    def _draw_idle(self):
        self._blit(
            self.medium_font, "Ready to practice? Press SPACE to start.", self.secondary_color,
            center=(self.width // 2, self.height // 2 - 60),
        )
        y = self.height // 2
        self._blit(self.small_font, "Practice Tips", (255, 255, 255), midtop=(self.width // 2, y))
        for tip in PRACTICE_TIPS:
            y += 28
            self._blit(self.small_font, f"- {tip}", (180, 180, 200), midtop=(self.width // 2, y))

    def show_stats(self, controller: SessionController):
        """Display the end-of-session statistics"""
        snapshot = controller.snapshot()
        self._blit(
            self.title_font, "Game Complete!", (255, 255, 255),
            center=(self.width // 2, self.height // 2 - 170),
        )

        y_pos = self.height // 2 - 100
        line_height = 45
        for line in summary_lines(snapshot, controller.session_duration):
            if not line.strip():
                y_pos += 20  # Extra space for section breaks
                continue
            self._blit(self.medium_font, line, (255, 255, 255), midleft=(self.width // 3, y_pos))
            y_pos += line_height

        self._blit(
            self.small_font, "Press G for a new session", (200, 200, 200),
            center=(self.width // 2, y_pos + 30),
        )

    def update_display(self, controller: SessionController):
        """Update the game display

        Args:
            controller: The session controller
        """
        if not self.initialized or not self.screen:
            return

        snapshot = controller.snapshot()
        self.screen.fill(self.bg_color)
        self._draw_header(snapshot)

        if snapshot.game_state is GameState.ENDED:
            self.show_stats(controller)
        elif snapshot.challenge is not None:
            self._draw_challenge(snapshot)
        else:
            self._draw_idle()

        if not snapshot.selected_strings:
            notice = "Please select at least one string to practice"
        else:
            notice = snapshot.notice
        if notice:
            self._blit(self.small_font, notice, self.notice_color, center=(self.width // 2, self.height - 90))

        help_text = "  |  ".join(help_lines())
        self._blit(self.small_font, help_text[:140], (150, 150, 150), midbottom=(self.width // 2, self.height - 20))

        pygame.display.flip()

    def run(self, controller: SessionController):
        """Run the main loop until the window is closed or Q is pressed.

        Args:
            controller: The session controller to drive
        """
        if not self.initialized:
            self.init_screen()

        logger.info("Starting game loop")
        try:
            running = True
            while running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        running = False
                        break
                    if event.type == pygame.KEYDOWN and event.unicode:
                        if not dispatch(controller, event.unicode):
                            running = False
                            break

                # Fire due countdown ticks and deferred advances
                controller.process_events()

                self.update_display(controller)
                self.clock.tick(30)
            logger.info("Game loop ended")
        except Exception as e:
            logger.error(f"An error occurred during the UI run loop: {e}", exc_info=True)
            raise
        finally:
            controller.shutdown()
            self.cleanup()

    def cleanup(self):
        """Clean up Pygame resources"""
        if self.initialized:
            logger.debug("Cleaning up Pygame resources")
            try:
                pygame.quit()
            except Exception as e:
                logger.error(f"Error during Pygame cleanup: {e}")
            self.initialized = False
