"""Tests for the game state machine and the session registry."""

import json
import threading
import time

import pytest
from flask import Flask
from flask_socketio import SocketIO
from four.models.game import GameOutcome, LetterStatus, NotificationType, RejectionReason
from four.services.game_service import GameService, GameSession
from four.services.scheduler import SocketIOScheduler
from conftest import FINALIZE_DELAY, make_lexicon, play, type_word

C = LetterStatus.CORRECT
P = LetterStatus.PRESENT
A = LetterStatus.ABSENT

MISSES = ["NOTE", "TONE", "CODE", "GAME", "PLAY", "WORD"]


def messages(session):
    return [n.message for n in session.notifications.active()]


# ── input buffer ──────────────────────────────────────────────────────────

class TestInput:
    def test_initial_state(self, session):
        assert session.outcome is GameOutcome.PLAYING
        assert session.game.game_id == 1
        assert session.game.solution == "DATA"
        assert session.guesses == []
        assert session.get_outcome_message() is None
        assert session.get_keyboard_status_map() == {}

    def test_append_stops_at_word_length(self, session):
        type_word(session, "NOTES")
        assert session.game.current_guess == "NOTE"
        assert session.append_letter("X") is False

    def test_letters_are_uppercased(self, session):
        assert session.append_letter("d") is True
        assert session.game.current_guess == "D"

    @pytest.mark.parametrize("value", ["1", "", "AB", " ", "é", None])
    def test_non_letters_ignored(self, session, value):
        assert session.append_letter(value) is False
        assert session.game.current_guess == ""

    def test_backspace(self, session):
        type_word(session, "NO")
        assert session.backspace() is True
        assert session.game.current_guess == "N"
        assert session.backspace() is True
        assert session.backspace() is False
        assert session.game.current_guess == ""


# ── submit validation ─────────────────────────────────────────────────────

class TestSubmitValidation:
    def test_incomplete(self, session):
        result = play(session, "NOT")
        assert result.accepted is False
        assert result.reason is RejectionReason.INCOMPLETE
        assert session.guesses == []
        assert session.game.current_guess == "NOT"
        assert messages(session) == ["Not enough letters"]

    def test_not_a_word(self, session):
        result = play(session, "ZZZZ")
        assert result.reason is RejectionReason.NOT_A_WORD
        assert session.guesses == []
        assert messages(session) == ["Not in word list"]

    def test_duplicate_guess(self, session):
        assert play(session, "NOTE").accepted
        result = play(session, "note")
        assert result.reason is RejectionReason.DUPLICATE_GUESS
        assert session.guesses == ["NOTE"]
        assert messages(session) == ["Already tried that word"]

    def test_incomplete_checked_before_membership(self, session):
        assert play(session, "ZZ").reason is RejectionReason.INCOMPLETE

    def test_rejection_schedules_no_transition(self, session, scheduler):
        play(session, "ZZZZ")
        # Only the notification expiry is queued
        assert scheduler.pending == 1
        scheduler.run_all()
        assert session.outcome is GameOutcome.PLAYING
        assert messages(session) == []

    def test_accepted_guess_clears_buffer(self, session):
        result = play(session, "NOTE")
        assert result.accepted is True
        assert result.evaluation == (A, A, C, A)
        assert session.game.current_guess == ""
        assert session.guesses == ["NOTE"]


# ── outcome finalization ──────────────────────────────────────────────────

class TestOutcome:
    def test_win_is_finalized_after_reveal(self, session, scheduler):
        result = play(session, "DATA")
        assert result.evaluation == (C, C, C, C)
        assert session.outcome is GameOutcome.PLAYING
        assert session.game.pending_outcome is GameOutcome.WON
        assert session.game.revealing_row == 0

        scheduler.advance(2.0)
        assert session.game.revealing_row is None
        assert session.outcome is GameOutcome.PLAYING

        scheduler.advance(0.15)
        assert session.outcome is GameOutcome.WON
        assert session.game.pending_outcome is None
        assert session.get_outcome_message() == "Nice! You found the word in 1 try."

        (notification,) = session.notifications.active()
        assert notification.message == "Excellent! Found in 1 try!"
        assert notification.type is NotificationType.SUCCESS

    def test_input_ignored_while_outcome_pending(self, session):
        play(session, "DATA")
        assert session.append_letter("N") is False
        assert session.backspace() is False
        assert session.submit_guess() is None

    def test_loss_after_attempt_limit(self, session, scheduler):
        for word in MISSES[:-1]:
            assert play(session, word).accepted
            assert session.game.pending_outcome is None

        play(session, MISSES[-1])
        assert session.game.pending_outcome is GameOutcome.LOST
        assert session.outcome is GameOutcome.PLAYING

        scheduler.advance(FINALIZE_DELAY + 0.1)
        assert session.outcome is GameOutcome.LOST
        assert session.get_outcome_message() == "The word was DATA."
        assert "Game over! The word was DATA" in messages(session)

    def test_win_on_last_attempt(self, session, scheduler):
        for word in MISSES[:-1]:
            play(session, word)
        play(session, "DATA")

        scheduler.run_all()
        assert session.outcome is GameOutcome.WON
        assert session.get_outcome_message() == "Nice! You found the word in 6 tries."

    def test_late_calls_are_silent_no_ops(self, session, scheduler):
        play(session, "DATA")
        scheduler.run_all()

        assert session.append_letter("N") is False
        assert session.backspace() is False
        assert session.submit_guess() is None
        assert session.guesses == ["DATA"]
        assert session.outcome is GameOutcome.WON

    def test_custom_attempt_limit(self, make_session, scheduler):
        session = make_session("DATA", max_attempts=2)
        play(session, "NOTE")
        play(session, "TONE")
        scheduler.run_all()
        assert session.outcome is GameOutcome.LOST

    def test_finalize_delay_scales_with_word_length(self, session):
        assert session.reveal_delay == pytest.approx(2.0)
        assert session.finalize_delay == pytest.approx(FINALIZE_DELAY)


# ── new game ──────────────────────────────────────────────────────────────

class TestNewGame:
    def test_new_game_replaces_instance(self, session):
        play(session, "NOTE")
        type_word(session, "DA")
        play(session, "ZZZZ")
        old = session.game

        session.start_new_game()

        assert session.game is not old
        assert session.game.game_id == 2
        assert session.game.solution == "NOTE"
        assert session.guesses == []
        assert session.game.current_guess == ""
        assert session.outcome is GameOutcome.PLAYING
        assert messages(session) == []
        # The discarded instance is left as it was
        assert old.guesses == ["NOTE"]

    def test_stale_win_finalization_is_suppressed(self, session, scheduler):
        play(session, "DATA")
        first = session.game
        session.start_new_game()

        scheduler.run_all()

        assert session.game.game_id == 2
        assert session.outcome is GameOutcome.PLAYING
        assert session.game.pending_outcome is None
        assert session.guesses == []
        assert messages(session) == []
        assert first.outcome is GameOutcome.PLAYING

    def test_stale_loss_finalization_is_suppressed(self, session, scheduler):
        for word in MISSES:
            play(session, word)
        session.start_new_game()
        scheduler.advance(1.0)

        assert play(session, "NOTE").accepted
        scheduler.run_all()
        assert session.outcome is GameOutcome.WON
        assert session.get_outcome_message() == "Nice! You found the word in 1 try."

    def test_stale_reveal_does_not_touch_new_game(self, session, scheduler):
        play(session, "NOTE")
        scheduler.advance(1.0)
        session.start_new_game()
        play(session, "TONE")

        # Game 1's reveal timer fires here
        scheduler.advance(1.0)
        assert session.game.revealing_row == 0

        scheduler.advance(1.0)
        assert session.game.revealing_row is None


# ── read side ─────────────────────────────────────────────────────────────

class TestRows:
    def test_rows_while_playing(self, session):
        play(session, "NOTE")
        type_word(session, "DA")

        rows = session.get_rows()
        assert len(rows) == 6
        assert rows[0].letters == ("N", "O", "T", "E")
        assert rows[0].statuses == (A, A, C, A)
        assert rows[1].letters == ("D", "A", "", "")
        assert rows[1].statuses == (None, None, None, None)
        for row in rows[2:]:
            assert row.letters == ("", "", "", "")
            assert row.statuses == (None, None, None, None)

    def test_no_input_row_after_game_over(self, session, scheduler):
        play(session, "DATA")
        scheduler.run_all()

        rows = session.get_rows()
        assert len(rows) == 6
        assert rows[0].statuses == (C, C, C, C)
        assert all(row.letters == ("", "", "", "") for row in rows[1:])

    def test_full_board_has_no_input_row(self, session):
        for word in MISSES:
            play(session, word)
        rows = session.get_rows()
        assert [''.join(row.letters) for row in rows] == MISSES

    def test_keyboard_status_map(self, session):
        play(session, "NOTE")
        play(session, "TASK")
        statuses = session.get_keyboard_status_map()
        assert statuses["T"] is C
        assert statuses["A"] is C
        assert statuses["N"] is A
        assert statuses["S"] is A


class TestSnapshot:
    def test_answer_hidden_until_game_over(self, session, scheduler):
        play(session, "DATA")
        assert session.snapshot().answer is None

        scheduler.run_all()
        view = session.snapshot()
        assert view.answer == "DATA"
        assert view.outcome == "won"
        assert view.outcome_message == "Nice! You found the word in 1 try."

    def test_to_dict_is_json_serialisable(self, session):
        play(session, "NOTE")
        type_word(session, "D")
        data = session.to_dict()

        json.dumps(data)
        assert data["session_id"] == "test-session"
        assert data["attempts_used"] == 1
        assert data["current_guess"] == "D"
        assert data["rows"][0]["statuses"] == ["absent", "absent", "correct", "absent"]
        assert data["rows"][1] == {"letters": ["D", "", "", ""], "statuses": [None] * 4}
        assert data["letter_status"]["T"] == "correct"
        assert data["revealing_row"] == 0

    def test_notifications_in_snapshot(self, session):
        play(session, "ZZZZ")
        (notification,) = session.to_dict()["notifications"]
        assert notification["message"] == "Not in word list"
        assert notification["type"] == "error"


# ── session registry ──────────────────────────────────────────────────────

class TestGameService:
    def test_create_get_delete(self, scheduler):
        service = GameService(scheduler, make_lexicon("DATA"))
        session = service.create_session()

        assert service.get_session(session.session_id) is session
        assert service.delete_session(session.session_id) is True
        assert service.get_session(session.session_id) is None
        assert service.delete_session(session.session_id) is False

    def test_explicit_session_id(self, scheduler):
        service = GameService(scheduler, make_lexicon("DATA"))
        assert service.create_session("abc").session_id == "abc"

    def test_settings_applied_to_sessions(self, scheduler):
        service = GameService(scheduler, make_lexicon("DATA"), max_attempts=3, notification_ttl=1.0)
        session = service.create_session()
        assert session.max_attempts == 3
        assert session.notifications.ttl == 1.0

    def test_callbacks(self, scheduler):
        service = GameService(scheduler, make_lexicon("DATA"))
        changes, notified = [], []
        session = service.create_session(
            on_change=lambda s: changes.append(s.outcome),
            on_notify=lambda s, n: notified.append(n.message)
        )

        play(session, "ZZZZ")
        assert notified == ["Not in word list"]

        session.start_new_game()
        play(session, "DATA")
        scheduler.run_all()

        assert GameOutcome.WON in changes
        assert notified[-1] == "Excellent! Found in 1 try!"

    def test_deleted_session_stops_pushing(self, scheduler):
        service = GameService(scheduler, make_lexicon("DATA"))
        changes = []
        session = service.create_session(on_change=lambda s: changes.append(s.outcome))

        play(session, "DATA")
        service.delete_session(session.session_id)
        scheduler.run_all()

        assert changes == []

    def test_idle_sessions_expire(self, scheduler):
        service = GameService(scheduler, make_lexicon("DATA"), idle_timeout=60.0)
        idle = service.create_session("idle")
        active = service.create_session("active")
        idle.last_active -= 120.0

        assert service.expire_idle_sessions() == ["idle"]
        assert service.get_session("idle") is None
        assert service.get_session("active") is active

    def test_connection_sessions_never_expire(self, scheduler):
        service = GameService(scheduler, make_lexicon("DATA"), idle_timeout=60.0)
        session = service.create_session("sid", expires_when_idle=False)

        assert service.expire_idle_sessions(now=session.last_active + 3600.0) == []
        assert service.get_session("sid") is session

    def test_create_sweeps_idle_sessions(self, scheduler):
        service = GameService(scheduler, make_lexicon("DATA"), idle_timeout=60.0)
        service.create_session("idle").last_active -= 120.0

        service.create_session("new")
        assert set(service.sessions) == {"new"}

    def test_touch_keeps_session_alive(self, scheduler):
        service = GameService(scheduler, make_lexicon("DATA"), idle_timeout=60.0)
        session = service.create_session("busy")
        session.last_active -= 120.0
        session.touch()

        assert service.expire_idle_sessions() == []


# ── background timers ─────────────────────────────────────────────────────

class TestBackgroundCallbacks:
    def test_finalization_is_serialized_with_new_game(self):
        app = Flask(__name__)
        socketio = SocketIO(app, async_mode="threading")
        session = GameSession(
            "threaded", make_lexicon("DATA", "NOTE"), SocketIOScheduler(socketio),
            reveal_interval=0.01, settle_margin=0.0, notification_ttl=30.0
        )

        entered, finished = threading.Event(), threading.Event()
        finalize = session._finalize

        def slow_finalize(game, outcome):
            # Hold the finalization open so a new game is requested mid-callback
            entered.set()
            time.sleep(0.3)
            finalize(game, outcome)
            finished.set()

        session._finalize = slow_finalize

        play(session, "DATA")
        assert entered.wait(5)
        session.start_new_game()
        assert finished.wait(5)

        assert session.game.game_id == 2
        assert session.outcome is GameOutcome.PLAYING
        assert messages(session) == []
