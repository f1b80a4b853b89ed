"""Shared fixtures: a small lexicon with scripted solutions and a virtual clock."""

import os
import random
import tempfile

# Keep test logs out of the working tree
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "four-test-logs"))

import pytest
from four.services.game_service import GameSession
from four.services.lexicon import Lexicon
from four.services.scheduler import ManualScheduler


WORDS = [
    "DATA", "NOTE", "TONE", "CODE", "GAME", "PLAY",
    "WORD", "TASK", "NODE", "DOOR", "BOOK", "TREE",
]

# 4 letters x 0.5 s reveal + 0.1 s settle
FINALIZE_DELAY = 2.1


class ScriptedRandom(random.Random):
    """Random whose choice() hands out a fixed sequence of solutions (the last one repeats)."""

    def __init__(self, picks):
        super().__init__(0)
        self.picks = list(picks)

    def choice(self, seq):
        if len(self.picks) > 1:
            return self.picks.pop(0)
        return self.picks[0]


def make_lexicon(*solutions):
    return Lexicon(WORDS, rng=ScriptedRandom(solutions or ["DATA"]))


def type_word(session, word):
    for letter in word:
        session.append_letter(letter)


def play(session, word):
    type_word(session, word)
    return session.submit_guess()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def make_session(scheduler):
    def _make(*solutions, **kwargs):
        return GameSession("test-session", make_lexicon(*solutions), scheduler, **kwargs)
    return _make


@pytest.fixture
def session(make_session):
    """Session whose first solution is DATA and second is NOTE."""
    return make_session("DATA", "NOTE")
