"""
Game Service

Contains the game state machine for the four-letter word game and the
registry of running sessions.
"""

import itertools
import threading
import time
import uuid
from dataclasses import asdict
from functools import wraps
from typing import Callable, Dict, List, Optional

from ..config.game_settings import (
    MAX_ATTEMPTS,
    NOTIFICATION_TTL_SECONDS,
    REVEAL_INTERVAL_SECONDS,
    SESSION_IDLE_TIMEOUT_SECONDS,
    SETTLE_MARGIN_SECONDS,
)
from ..models.game import (
    EvaluationRow,
    GameOutcome,
    GameStateView,
    GuessResult,
    KeyboardStatusMap,
    Notification,
    NotificationType,
    RejectionReason,
    Row,
)
from ..utils.game_logger import game_logger
from .evaluator import evaluate
from .keyboard import aggregate
from .lexicon import Lexicon
from .notifications import NotificationCenter
from .scheduler import ScheduledTask, Scheduler


class Game:
    """
    A single game instance.

    The solution never changes, guesses only grow, and the outcome moves from
    PLAYING to a terminal state exactly once. Starting a new game replaces the
    instance instead of resetting it, so callbacks scheduled for an old
    instance can recognise that they are stale.
    """

    def __init__(self, game_id: int, solution: str):
        self.game_id = game_id
        self.solution = solution
        self.guesses: List[str] = []
        self.evaluations: List[EvaluationRow] = []
        self.current_guess = ""
        self.outcome = GameOutcome.PLAYING
        # Decided but not yet finalized (the reveal is still playing)
        self.pending_outcome: Optional[GameOutcome] = None
        self.revealing_row: Optional[int] = None

    @property
    def accepting_input(self) -> bool:
        return self.outcome is GameOutcome.PLAYING and self.pending_outcome is None


def _locked(method):
    """Run a GameSession method while holding the session lock."""
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.lock:
            return method(self, *args, **kwargs)
    return wrapper


class GameSession:
    """
    Game state machine for one player.

    The only mutation entry points are ``append_letter``, ``backspace``,
    ``submit_guess`` and ``start_new_game``. Win/loss is decided synchronously
    on submit but finalized after the reveal delay through the scheduler.
    Calls that arrive after the outcome is decided are silent no-ops.

    Scheduled callbacks may fire on a background thread. They run under
    ``lock``, as do the mutation entry points and ``snapshot``, so a callback
    never interleaves with a new game starting.
    """

    def __init__(self,
                 session_id: str,
                 lexicon: Lexicon,
                 scheduler: Scheduler,
                 max_attempts: int = MAX_ATTEMPTS,
                 reveal_interval: float = REVEAL_INTERVAL_SECONDS,
                 settle_margin: float = SETTLE_MARGIN_SECONDS,
                 notification_ttl: float = NOTIFICATION_TTL_SECONDS,
                 on_change: Optional[Callable[['GameSession'], None]] = None,
                 on_notify: Optional[Callable[['GameSession', Notification], None]] = None,
                 expires_when_idle: bool = True):
        self.session_id = session_id
        self.lexicon = lexicon
        self.scheduler = scheduler
        self.max_attempts = max_attempts
        self.reveal_interval = reveal_interval
        self.settle_margin = settle_margin
        self.on_change = on_change
        self.on_notify = on_notify
        self.expires_when_idle = expires_when_idle
        self.last_active = time.monotonic()
        self.lock = threading.RLock()
        self.notifications = NotificationCenter(
            scheduler, notification_ttl,
            on_change=self._changed, on_post=self._notified, lock=self.lock
        )

        self._game_ids = itertools.count(1)
        self.game: Game = self.start_new_game()

    @property
    def word_length(self) -> int:
        return self.lexicon.word_length

    @property
    def reveal_delay(self) -> float:
        """Time for every letter of a row to flip."""
        return self.word_length * self.reveal_interval

    @property
    def finalize_delay(self) -> float:
        return self.reveal_delay + self.settle_margin

    def touch(self) -> None:
        """Record player activity for idle expiry."""
        self.last_active = time.monotonic()

    # Mutation entry points

    @_locked
    def start_new_game(self) -> Game:
        """Discard the current instance and start a fresh one with a new solution."""
        self.game = Game(next(self._game_ids), self.lexicon.random_word())
        self.notifications.clear()

        game_logger.log_game_event(
            self.session_id, 'game_started', self.game.game_id,
            word_length=self.word_length, max_attempts=self.max_attempts
        )
        return self.game

    @_locked
    def append_letter(self, letter: str) -> bool:
        game = self.game
        if not game.accepting_input or len(game.current_guess) >= self.word_length:
            return False
        if not isinstance(letter, str) or len(letter) != 1 or not (letter.isascii() and letter.isalpha()):
            return False

        game.current_guess += letter.upper()
        return True

    @_locked
    def backspace(self) -> bool:
        game = self.game
        if not game.accepting_input or not game.current_guess:
            return False

        game.current_guess = game.current_guess[:-1]
        return True

    @_locked
    def submit_guess(self) -> Optional[GuessResult]:
        """
        Validates and applies the current input buffer as a guess.

        Returns:
            None when the game is not accepting input, otherwise a GuessResult
            that is either accepted (with its evaluation) or rejected (with the
            first failing reason; state is left unchanged)
        """
        game = self.game
        if not game.accepting_input:
            return None

        guess = self.lexicon.normalize(game.current_guess)

        reason = self._validate(game, guess)
        if reason is not None:
            self.notifications.post(reason.message, NotificationType.ERROR)
            game_logger.log_game_event(
                self.session_id, 'guess_rejected', game.game_id,
                guess=guess, reason=reason.value
            )
            return GuessResult(accepted=False, reason=reason)

        evaluation = evaluate(guess, game.solution)
        game.guesses.append(guess)
        game.evaluations.append(evaluation)
        game.current_guess = ""

        row = len(game.guesses) - 1
        game.revealing_row = row
        self._schedule(game, self.reveal_delay, lambda g: self._end_reveal(g, row))

        game_logger.log_game_event(
            self.session_id, 'guess_accepted', game.game_id,
            guess=guess, attempt=len(game.guesses),
            evaluation=[status.value for status in evaluation]
        )

        if guess == game.solution:
            self._schedule_outcome(game, GameOutcome.WON)
        elif len(game.guesses) >= self.max_attempts:
            self._schedule_outcome(game, GameOutcome.LOST)

        return GuessResult(accepted=True, evaluation=evaluation)

    def _validate(self, game: Game, guess: str) -> Optional[RejectionReason]:
        if len(guess) < self.word_length:
            return RejectionReason.INCOMPLETE
        if not self.lexicon.contains(guess):
            return RejectionReason.NOT_A_WORD
        if guess in game.guesses:
            return RejectionReason.DUPLICATE_GUESS
        return None

    # Deferred transitions

    def _schedule(self, game: Game, delay: float, callback: Callable[[Game], None]) -> ScheduledTask:
        """Schedule ``callback`` for ``game``; it does nothing if another game is current by then."""
        def run():
            with self.lock:
                if self.game is not game:
                    game_logger.logger.debug(
                        f"Session {self.session_id}: ignoring stale callback for game "
                        f"{game.game_id} (current game {self.game.game_id})"
                    )
                    return
                callback(game)

        return self.scheduler.call_later(delay, run)

    def _schedule_outcome(self, game: Game, outcome: GameOutcome) -> ScheduledTask:
        game.pending_outcome = outcome
        return self._schedule(game, self.finalize_delay, lambda g: self._finalize(g, outcome))

    def _end_reveal(self, game: Game, row: int) -> None:
        # A later row may already be revealing
        if game.revealing_row != row:
            return
        game.revealing_row = None
        self._changed()

    def _finalize(self, game: Game, outcome: GameOutcome) -> None:
        if game.outcome.is_terminal:
            return

        game.outcome = outcome
        game.pending_outcome = None
        attempts = len(game.guesses)

        if outcome is GameOutcome.WON:
            self.notifications.post(
                f"Excellent! Found in {attempts} {_tries(attempts)}!", NotificationType.SUCCESS
            )
            game_logger.log_game_event(
                self.session_id, 'game_won', game.game_id,
                attempts_used=attempts, target_word=game.solution
            )
        else:
            self.notifications.post(f"Game over! The word was {game.solution}", NotificationType.INFO)
            game_logger.log_game_event(
                self.session_id, 'game_lost', game.game_id,
                attempts_used=attempts, target_word=game.solution
            )

        self._changed()

    def _changed(self) -> None:
        if self.on_change:
            self.on_change(self)

    def _notified(self, notification: Notification) -> None:
        if self.on_notify:
            self.on_notify(self, notification)

    # Read side

    @property
    def outcome(self) -> GameOutcome:
        return self.game.outcome

    @property
    def guesses(self) -> List[str]:
        return list(self.game.guesses)

    def get_rows(self) -> List[Row]:
        """
        Board rows for rendering, always ``max_attempts`` long.

        Completed guesses carry their evaluation, the in-progress row (only
        while playing) carries the input buffer without statuses, and the rest
        are empty placeholders.
        """
        game = self.game
        length = self.word_length
        empty_statuses = (None,) * length
        rows: List[Row] = []

        for i in range(self.max_attempts):
            if i < len(game.guesses):
                rows.append(Row(tuple(game.guesses[i]), game.evaluations[i]))
            elif i == len(game.guesses) and game.outcome is GameOutcome.PLAYING:
                letters = tuple(game.current_guess) + ('',) * (length - len(game.current_guess))
                rows.append(Row(letters, empty_statuses))
            else:
                rows.append(Row(('',) * length, empty_statuses))

        return rows

    def get_keyboard_status_map(self) -> KeyboardStatusMap:
        return aggregate(self.game.guesses, self.game.solution)

    def get_outcome_message(self) -> Optional[str]:
        game = self.game
        if game.outcome is GameOutcome.WON:
            attempts = len(game.guesses)
            return f"Nice! You found the word in {attempts} {_tries(attempts)}."
        if game.outcome is GameOutcome.LOST:
            return f"The word was {game.solution}."
        return None

    @_locked
    def snapshot(self) -> GameStateView:
        """Client-facing state (the answer only once the game is over)."""
        game = self.game

        return GameStateView(
            session_id=self.session_id,
            game_id=game.game_id,
            word_length=self.word_length,
            max_attempts=self.max_attempts,
            attempts_used=len(game.guesses),
            outcome=game.outcome.value,
            current_guess=game.current_guess,
            rows=[
                {
                    'letters': list(row.letters),
                    'statuses': [status.value if status else None for status in row.statuses]
                }
                for row in self.get_rows()
            ],
            letter_status={letter: status.value for letter, status in self.get_keyboard_status_map().items()},
            revealing_row=game.revealing_row,
            outcome_message=self.get_outcome_message(),
            notifications=[
                {'id': n.id, 'message': n.message, 'type': n.type.value}
                for n in self.notifications.active()
            ],
            answer=game.solution if game.outcome.is_terminal else None
        )

    def to_dict(self) -> Dict:
        return asdict(self.snapshot())


def _tries(attempts: int) -> str:
    return 'try' if attempts == 1 else 'tries'


class GameService:
    """
    Registry of running game sessions.

    This class handles:
    - Session management with unique session IDs
    - Shared lexicon and scheduler for every session
    - Game rule settings applied to new sessions
    - Dropping sessions that have been idle too long
    """

    def __init__(self,
                 scheduler: Scheduler,
                 lexicon: Optional[Lexicon] = None,
                 max_attempts: int = MAX_ATTEMPTS,
                 reveal_interval: float = REVEAL_INTERVAL_SECONDS,
                 settle_margin: float = SETTLE_MARGIN_SECONDS,
                 notification_ttl: float = NOTIFICATION_TTL_SECONDS,
                 idle_timeout: float = SESSION_IDLE_TIMEOUT_SECONDS):
        self.scheduler = scheduler
        self.lexicon = lexicon or Lexicon()
        self.max_attempts = max_attempts
        self.reveal_interval = reveal_interval
        self.settle_margin = settle_margin
        self.notification_ttl = notification_ttl
        self.idle_timeout = idle_timeout
        self.sessions: Dict[str, GameSession] = {}

    def create_session(self,
                       session_id: Optional[str] = None,
                       on_change: Optional[Callable[[GameSession], None]] = None,
                       on_notify: Optional[Callable[[GameSession, Notification], None]] = None,
                       expires_when_idle: bool = True) -> GameSession:
        """
        Creates a session and starts its first game.

        Idle sessions are swept first, so the registry stays bounded without
        a background cleanup task.

        Args:
            session_id: Identifier to use (e.g. a WebSocket sid); a UUID when omitted
            on_change: Called when a timed transition changes the session's state
            on_notify: Called for every notification posted to the session
            expires_when_idle: False for sessions removed by their owner (WebSocket connections)

        Returns:
            GameSession: The new session
        """
        self.expire_idle_sessions()
        session_id = session_id or str(uuid.uuid4())

        session = GameSession(
            session_id,
            self.lexicon,
            self.scheduler,
            max_attempts=self.max_attempts,
            reveal_interval=self.reveal_interval,
            settle_margin=self.settle_margin,
            notification_ttl=self.notification_ttl,
            on_change=on_change,
            on_notify=on_notify,
            expires_when_idle=expires_when_idle
        )
        self.sessions[session_id] = session
        return session

    def expire_idle_sessions(self, now: Optional[float] = None) -> List[str]:
        """
        Deletes sessions with no player activity for ``idle_timeout`` seconds.

        Returns:
            List[str]: IDs of the deleted sessions
        """
        now = time.monotonic() if now is None else now
        expired = [
            session_id for session_id, session in list(self.sessions.items())
            if session.expires_when_idle and now - session.last_active > self.idle_timeout
        ]

        for session_id in expired:
            self.delete_session(session_id)
            game_logger.log_game_event(session_id, 'session_expired', idle_timeout=self.idle_timeout)

        return expired

    def get_session(self, session_id: str) -> Optional[GameSession]:
        return self.sessions.get(session_id)

    def delete_session(self, session_id: str) -> bool:
        """
        Removes a session from memory.

        Returns:
            bool: True if the session was deleted, False if not found
        """
        session = self.sessions.pop(session_id, None)
        if session is None:
            return False

        # Late timers must not push updates for a deleted session
        session.on_change = None
        session.on_notify = None
        return True


# Global service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(scheduler: Scheduler,
                            lexicon: Optional[Lexicon] = None,
                            config_class=None) -> GameService:
    """Initialize the global game service instance."""
    global _game_service

    settings = {}
    if config_class is not None:
        settings = {
            'max_attempts': config_class.MAX_ATTEMPTS,
            'reveal_interval': config_class.REVEAL_INTERVAL_SECONDS,
            'settle_margin': config_class.SETTLE_MARGIN_SECONDS,
            'notification_ttl': config_class.NOTIFICATION_TTL_SECONDS,
            'idle_timeout': config_class.SESSION_IDLE_TIMEOUT_SECONDS,
        }

    _game_service = GameService(scheduler, lexicon, **settings)
    return _game_service
