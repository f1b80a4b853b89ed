"""
Lexicon

The fixed set of valid words: random solution selection and membership checks.
"""

import random
from typing import Iterable, List, Optional

from ..config.game_settings import WORD_LENGTH, WORD_LIST


class Lexicon:
    """
    Fixed word set used both as the solution pool and the guess dictionary.

    Every entry must be exactly ``word_length`` ASCII letters; a word
    list that breaks this is a configuration error and raises ``ValueError``
    at construction time.
    """

    def __init__(self, words: Iterable[str] = WORD_LIST, word_length: int = WORD_LENGTH,
                 rng: Optional[random.Random] = None):
        self.word_length = word_length
        self._rng = rng or random.Random()

        normalized: List[str] = []
        seen = set()
        for word in words:
            candidate = self.normalize(word)
            if len(candidate) != word_length or not (candidate.isascii() and candidate.isalpha()):
                raise ValueError(f"Word '{word}' is not a {word_length}-letter alphabetic word")
            if candidate not in seen:
                seen.add(candidate)
                normalized.append(candidate)

        if not normalized:
            raise ValueError("Word list cannot be empty")

        self.words: List[str] = normalized
        self._members = frozenset(normalized)

    @staticmethod
    def normalize(word: str) -> str:
        return word.strip().upper()

    def random_word(self) -> str:
        """Uniformly random solution from the word set."""
        return self._rng.choice(self.words)

    def contains(self, word: str) -> bool:
        """Case-normalized exact membership."""
        if not isinstance(word, str):
            return False
        return self.normalize(word) in self._members

    def __contains__(self, word: str) -> bool:
        return self.contains(word)

    def __len__(self) -> int:
        return len(self.words)
