"""
Game Data Models

Contains all game-related data structures and enums.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class LetterStatus(Enum):
    """Per-letter evaluation status of a guess against the solution."""
    CORRECT = "correct"
    PRESENT = "present"
    ABSENT = "absent"

    @property
    def precedence(self) -> int:
        """Display precedence: correct > present > absent."""
        return _PRECEDENCE[self]


_PRECEDENCE = {
    LetterStatus.CORRECT: 3,
    LetterStatus.PRESENT: 2,
    LetterStatus.ABSENT: 1,
}

# One status per position, produced for exactly one guess
EvaluationRow = Tuple[LetterStatus, ...]

KeyboardStatusMap = Dict[str, LetterStatus]


class GameOutcome(Enum):
    """Lifecycle of a single game instance."""
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self is not GameOutcome.PLAYING


class RejectionReason(Enum):
    """Why a submitted guess was not accepted."""
    INCOMPLETE = "incomplete"
    NOT_A_WORD = "not_a_word"
    DUPLICATE_GUESS = "duplicate_guess"

    @property
    def message(self) -> str:
        return _REJECTION_MESSAGES[self]


_REJECTION_MESSAGES = {
    RejectionReason.INCOMPLETE: "Not enough letters",
    RejectionReason.NOT_A_WORD: "Not in word list",
    RejectionReason.DUPLICATE_GUESS: "Already tried that word",
}


class NotificationType(Enum):
    ERROR = "error"
    SUCCESS = "success"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    """A transient, write-once message for the player."""
    id: int
    message: str
    type: NotificationType = NotificationType.ERROR


@dataclass(frozen=True)
class Row:
    """One row of the board: padded letters and their statuses (None when unset)."""
    letters: Tuple[str, ...]
    statuses: Tuple[Optional[LetterStatus], ...]


@dataclass(frozen=True)
class GuessResult:
    """Result of a submit that passed the playing-state gate."""
    accepted: bool
    reason: Optional[RejectionReason] = None
    evaluation: Optional[EvaluationRow] = None


@dataclass
class GameStateView:
    """Client-facing game state representation."""
    session_id: str
    game_id: int
    word_length: int
    max_attempts: int
    attempts_used: int
    outcome: str
    current_guess: str
    rows: List[Dict[str, List[Optional[str]]]]
    letter_status: Dict[str, str]
    revealing_row: Optional[int] = None
    outcome_message: Optional[str] = None
    notifications: List[Dict[str, object]] = field(default_factory=list)
    answer: Optional[str] = None  # Only included when game is over
