"""
Guess Evaluator

Scores a guess against the solution, letter by letter.
"""

from collections import Counter

from ..models.game import EvaluationRow, LetterStatus


def evaluate(guess: str, solution: str) -> EvaluationRow:
    """
    Implements the two-pass letter evaluation algorithm.

    Exact matches are resolved first so that a CORRECT letter always wins its
    share of the solution's letters before any PRESENT is handed out. The
    number of CORRECT + PRESENT marks for a letter never exceeds the number
    of times it occurs in the solution.

    Raises:
        ValueError: If guess and solution differ in length
    """
    if len(guess) != len(solution):
        raise ValueError(
            f"Guess '{guess}' and solution must have the same length "
            f"({len(guess)} != {len(solution)})"
        )

    remaining = Counter(solution)
    result = [LetterStatus.ABSENT] * len(solution)

    # First pass: exact position matches
    for i, (letter, target) in enumerate(zip(guess, solution)):
        if letter == target:
            result[i] = LetterStatus.CORRECT
            remaining[letter] -= 1

    # Second pass: left to right over the non-exact positions
    for i, letter in enumerate(guess):
        if result[i] is LetterStatus.CORRECT:
            continue
        if remaining[letter] > 0:
            result[i] = LetterStatus.PRESENT
            remaining[letter] -= 1

    return tuple(result)
