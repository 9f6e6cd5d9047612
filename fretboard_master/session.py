import random
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Optional, Union

from .audio.tone_player import SilentAudioPlayer, safe_play
from .core.events import EventEmitter, SessionEventType
from .core.interfaces import IAudioPlayer, IScheduler, TimerHandle
from .errors import InvalidOperationError
from .fretboard import ALL_STRINGS, NOTES, check_string, octave_for, positions_for
from .logging_config import get_logger
from .note_types import Challenge, Difficulty, GameState, Score, SessionSnapshot

# Get logger for this module
logger = get_logger(__name__)

TICK_INTERVAL = 1.0  # seconds per countdown step
ADVANCE_DELAY = 1.5  # pause on the result before the next challenge
AUDIO_DELAY = 0.1  # gap between showing a challenge and playing its note

# Timer arena slots
COUNTDOWN = "countdown"
ADVANCE = "advance"
AUDIO = "audio"


class SessionController:
    """A timed drill: find the named note on one of the selected strings.

    The controller owns the whole session (score, current challenge and the
    timers driving them). The presentation layer calls the action methods,
    reads snapshot(), and calls process_events() from its loop so timer
    callbacks run on the UI thread.
    """

    def __init__(
        self,
        scheduler: IScheduler,
        audio_player: Optional[IAudioPlayer] = None,
        difficulty: Union[Difficulty, str] = Difficulty.BEGINNER,
        selected_strings: Iterable[int] = ALL_STRINGS,
        audio_enabled: bool = False,
        rng: Optional[random.Random] = None,
        advance_delay: float = ADVANCE_DELAY,
        audio_delay: float = AUDIO_DELAY,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        """Initialize the session controller.

        Args:
            scheduler: Timer source for the countdown and deferred actions
            audio_player: Note playback, or None for silence
            difficulty: Starting difficulty (a Difficulty or its name)
            selected_strings: Strings in play (1-6, 6 is the low E)
            audio_enabled: Play each challenge's note when it appears
            rng: Random source, injectable for testing
            advance_delay: Seconds between a recorded response and the next challenge
            audio_delay: Seconds between a new challenge and its note playing
            clock: Timestamp source, defaults to the scheduler's clock
        """
        self.scheduler = scheduler
        self.audio = audio_player if audio_player is not None else SilentAudioPlayer()
        self.events = EventEmitter()
        self.advance_delay = advance_delay
        self.audio_delay = audio_delay
        self._rng = rng if rng is not None else random.Random()
        self._clock = clock if clock is not None else scheduler.now

        # Session state
        self.game_state = GameState.IDLE
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.difficulty = Difficulty.parse(difficulty)
        self.selected_strings: List[int] = []
        for string in selected_strings:
            check_string(string)
            if string not in self.selected_strings:
                self.selected_strings.append(string)
        self.selected_strings.sort(reverse=True)
        self.score = Score()
        self.challenge: Optional[Challenge] = None
        self.audio_enabled = False
        # True from a recorded response until the next challenge is installed
        self.advance_pending = False
        self.notice: Optional[str] = None

        self._timers: Dict[str, TimerHandle] = {}

        if audio_enabled:
            self.set_audio_enabled(True)

        logger.debug(
            "SessionController initialized: difficulty=%s strings=%s",
            self.difficulty.name,
            self.selected_strings,
        )

    # Timer arena

    def _schedule(self, slot: str, delay: float, callback: Callable[[], None]) -> None:
        self._cancel(slot)
        self._timers[slot] = self.scheduler.call_later(delay, callback, name=slot)

    def _cancel(self, slot: str) -> None:
        handle = self._timers.pop(slot, None)
        if handle is not None:
            handle.cancel()

    def _cancel_all(self) -> None:
        for slot in list(self._timers):
            self._cancel(slot)

    def pending_timers(self) -> List[str]:
        """Names of timers that are still waiting to fire."""
        return sorted(slot for slot, handle in self._timers.items() if handle.pending)

    def process_events(self) -> int:
        """Run due timer callbacks. Call this from the UI loop."""
        return self.scheduler.run_pending()

    # Helpers

    def _reject(self, message: str) -> None:
        self.notice = message
        logger.warning(message)
        self.events.emit(SessionEventType.NOTICE, message)
        raise InvalidOperationError(message)

    # Actions

    def generate_challenge(self) -> Challenge:
        """Pick a new note and string and start its countdown.

        Returns:
            A copy of the installed challenge

        Raises:
            InvalidOperationError: If no strings are selected or the session has ended
        """
        if self.game_state is GameState.ENDED:
            self._reject("Cannot generate: session has ended")
        if not self.selected_strings:
            self._reject("Cannot generate: no strings selected")

        self._cancel(COUNTDOWN)
        self._cancel(ADVANCE)
        self._cancel(AUDIO)
        self.advance_pending = False

        if self.game_state is GameState.IDLE:
            self.game_state = GameState.PLAYING
            self.start_time = self._clock()
            logger.info("Session started")

        max_fret = self.difficulty.max_fret
        attempts = 0
        while True:
            attempts += 1
            pitch = self._rng.choice(NOTES)
            playable = [
                string
                for string in self.selected_strings
                if positions_for(pitch, [string], max_fret)
            ]
            if playable:
                break
            logger.debug("%s is out of reach on strings %s, retrying", pitch, self.selected_strings)

        string = self._rng.choice(playable)
        position = self._rng.choice(positions_for(pitch, [string], max_fret))

        self.challenge = Challenge(
            pitch=pitch,
            string=string,
            fret=position.fret,
            countdown=self.difficulty.time_limit,
        )
        self.notice = None
        self._schedule(COUNTDOWN, TICK_INTERVAL, self._tick)
        if self.audio_enabled:
            self._schedule(AUDIO, self.audio_delay, self._play_challenge_note)

        logger.debug(
            "New challenge: %s on string %d (fret %d) after %d attempt(s) [%s]",
            pitch,
            string,
            position.fret,
            attempts,
            self.difficulty.name,
        )
        self.events.emit(SessionEventType.CHALLENGE_GENERATED, replace(self.challenge))
        return replace(self.challenge)

    def _tick(self) -> None:
        challenge = self.challenge
        if challenge is None or not challenge.active:
            return

        challenge.countdown = max(0, challenge.countdown - 1)
        self.events.emit(SessionEventType.COUNTDOWN_TICK, challenge.countdown)

        if challenge.countdown > 0:
            self._schedule(COUNTDOWN, TICK_INTERVAL, self._tick)
            return

        self._timers.pop(COUNTDOWN, None)
        challenge.active = False
        challenge.answer_shown = True
        challenge.awaiting_response = True
        logger.info("Time is up: %s is at fret %d", challenge.pitch, challenge.fret)
        self.events.emit(SessionEventType.ANSWER_REVEALED, replace(challenge))

    def reveal_answer(self) -> None:
        """Stop the countdown and show the answer now."""
        challenge = self.challenge
        if challenge is None or not challenge.active:
            self._reject("No active challenge to reveal")

        self._cancel(COUNTDOWN)
        challenge.active = False
        challenge.answer_shown = True
        challenge.awaiting_response = True
        logger.debug("Answer revealed with %ds left", challenge.countdown)
        self.events.emit(SessionEventType.ANSWER_REVEALED, replace(challenge))

    def mark_correct(self) -> None:
        self._record_response(correct=True)

    def mark_incorrect(self) -> None:
        self._record_response(correct=False)

    def _record_response(self, correct: bool) -> None:
        if self.advance_pending:
            self._reject("Response already recorded")
        challenge = self.challenge
        if challenge is None or not challenge.awaiting_response:
            self._reject("No response is awaited")

        self.score.total += 1
        if correct:
            self.score.correct += 1

        self._cancel(COUNTDOWN)
        challenge.active = False
        challenge.awaiting_response = False
        self.advance_pending = True
        self._schedule(ADVANCE, self.advance_delay, self._advance)

        logger.info(
            "%s: %s on string %d. Score %d/%d",
            "Correct" if correct else "Missed",
            challenge.pitch,
            challenge.string,
            self.score.correct,
            self.score.total,
        )
        self.events.emit(
            SessionEventType.RESPONSE_RECORDED,
            correct,
            Score(self.score.correct, self.score.total),
        )

    def _advance(self) -> None:
        self._timers.pop(ADVANCE, None)
        self.advance_pending = False
        try:
            self.generate_challenge()
        except InvalidOperationError as e:
            # Already surfaced as a notice
            logger.info(f"Next challenge skipped: {e}")

    def toggle_string(self, string: int) -> None:
        """Add or remove a string. Takes effect from the next challenge."""
        check_string(string)
        if string in self.selected_strings:
            self.selected_strings.remove(string)
        else:
            self.selected_strings.append(string)
            self.selected_strings.sort(reverse=True)
        logger.debug("Selected strings: %s", self.selected_strings)

    def select_all_strings(self) -> None:
        self.selected_strings = list(ALL_STRINGS)
        logger.debug("Selected all strings")

    def set_difficulty(self, difficulty: Union[Difficulty, str]) -> None:
        """Change difficulty. A running countdown keeps its original length."""
        self.difficulty = Difficulty.parse(difficulty)
        logger.info("Difficulty set to %s", self.difficulty.label)

    def reset_score(self) -> None:
        self.score = Score()
        logger.info("Score reset")

    def end_session(self) -> None:
        """Stop the session and freeze its duration."""
        if self.game_state is not GameState.PLAYING:
            self._reject("Cannot end: no session in progress")

        self._cancel_all()
        self.game_state = GameState.ENDED
        self.end_time = self._clock()
        self.advance_pending = False
        if self.challenge is not None:
            self.challenge.active = False
            self.challenge.awaiting_response = False

        logger.info(
            "Session ended. Final score: %d/%d (%d%%) in %ss",
            self.score.correct,
            self.score.total,
            self.accuracy,
            self.session_duration,
        )
        self.events.emit(SessionEventType.SESSION_ENDED, self.snapshot())

    def start_new_session(self) -> None:
        """Clear score, challenge and timestamps and return to idle.

        Only an ended session can be restarted; a running one must be ended
        first.
        """
        if self.game_state is not GameState.ENDED:
            self._reject("Cannot start a new session: end the current session first")

        self._cancel_all()
        self.game_state = GameState.IDLE
        self.score = Score()
        self.challenge = None
        self.start_time = None
        self.end_time = None
        self.advance_pending = False
        self.notice = None
        logger.info("New session ready")
        self.events.emit(SessionEventType.SESSION_RESET)

    def set_audio_enabled(self, enabled: bool) -> None:
        self.audio_enabled = bool(enabled)
        if not self.audio_enabled:
            self._cancel(AUDIO)
            return

        if not self.audio.initialize():
            self.notice = "Audio unavailable, continuing without sound"
            self.events.emit(SessionEventType.NOTICE, self.notice)

    def replay_current_note(self) -> bool:
        """Play the current challenge's note again.

        Returns:
            True if playback was started
        """
        if not self.audio_enabled or self.challenge is None:
            return False
        return self._play(self.challenge)

    def _play_challenge_note(self) -> None:
        self._timers.pop(AUDIO, None)
        if self.audio_enabled and self.challenge is not None:
            self._play(self.challenge)

    def _play(self, challenge: Challenge) -> bool:
        return safe_play(
            self.audio, challenge.pitch, octave_for(challenge.string, challenge.fret)
        )

    def shutdown(self) -> None:
        """Cancel all timers and release audio."""
        self._cancel_all()
        self.audio.shutdown()

    # Queries

    @property
    def accuracy(self) -> int:
        return self.score.accuracy

    @property
    def session_duration(self) -> Optional[int]:
        """Whole seconds from first challenge to end, once the session has ended."""
        if self.game_state is not GameState.ENDED:
            return None
        if self.start_time is None or self.end_time is None:
            return 0
        return int(round(self.end_time - self.start_time))

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            game_state=self.game_state,
            selected_strings=tuple(self.selected_strings),
            difficulty=self.difficulty,
            score=Score(self.score.correct, self.score.total),
            accuracy=self.accuracy,
            audio_enabled=self.audio_enabled,
            advance_pending=self.advance_pending,
            notice=self.notice,
            start_time=self.start_time,
            end_time=self.end_time,
            challenge=replace(self.challenge) if self.challenge is not None else None,
        )
