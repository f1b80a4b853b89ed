"""
Keyboard Status Aggregator

Reduces the guess history to the best-known status of every guessed letter.
"""

from typing import Iterable

from ..models.game import KeyboardStatusMap
from .evaluator import evaluate


def aggregate(guesses: Iterable[str], solution: str) -> KeyboardStatusMap:
    """
    Rebuilds the per-letter keyboard status from the full guess history.

    Status can only progress in priority order (absent -> present -> correct),
    so a letter keeps the highest-precedence status it has ever received.
    """
    statuses: KeyboardStatusMap = {}

    for guess in guesses:
        for letter, status in zip(guess, evaluate(guess, solution)):
            current = statuses.get(letter)
            if current is None or status.precedence > current.precedence:
                statuses[letter] = status

    return statuses
