"""
WebSocket Event Handlers

Every connection gets its own game session, keyed by the socket id. Timed
transitions (reveal end, win/loss finalization, notification expiry) are
pushed to the client as they happen.
"""

from flask import request
from flask_socketio import emit
from ..services.game_service import get_game_service
from ..utils.decorators import websocket_session_required
from ..utils.game_logger import game_logger
from ..utils.helpers import normalize_key


def _notification_dict(notification):
    return {
        'id': notification.id,
        'message': notification.message,
        'type': notification.type.value
    }


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    def push_state(session):
        socketio.emit('state_update', session.to_dict(), to=session.session_id)

    def push_notification(session, notification):
        socketio.emit('notification', _notification_dict(notification), to=session.session_id)

    @socketio.on('connect')
    def handle_connect(auth=None):
        """Handle WebSocket connection by starting a session for it."""
        game_service = get_game_service()
        if not game_service:
            return False

        session = game_service.create_session(
            request.sid, on_change=push_state, on_notify=push_notification,
            expires_when_idle=False
        )
        game_logger.log_user_action(request, 'connect', session.session_id)

        emit('state_update', session.to_dict())

    @socketio.on('disconnect')
    def handle_disconnect(reason=None):
        """Handle WebSocket disconnection."""
        game_service = get_game_service()
        if game_service and game_service.delete_session(request.sid):
            game_logger.log_user_action(request, 'disconnect', request.sid, reason=str(reason))

    @socketio.on('key')
    @websocket_session_required
    def handle_key(data=None, session=None):
        """Handle a virtual keyboard key: a letter, ENTER or BACKSPACE."""
        key = normalize_key(data.get('key') if isinstance(data, dict) else None)
        if key is None:
            emit('error', {'error': 'Unknown key'})
            return

        if key == 'ENTER':
            game_logger.log_user_action(
                request, 'submit_guess', session.session_id,
                guess=session.game.current_guess
            )
            session.submit_guess()
        elif key == 'BACKSPACE':
            session.backspace()
        else:
            session.append_letter(key)

        emit('state_update', session.to_dict())

    @socketio.on('new_game')
    @websocket_session_required
    def handle_new_game(data=None, session=None):
        """Discard the current game and start a new one."""
        game_logger.log_user_action(request, 'new_game', session.session_id)

        session.start_new_game()
        emit('state_update', session.to_dict())

    @socketio.on('get_state')
    @websocket_session_required
    def handle_get_state(data=None, session=None):
        emit('state_update', session.to_dict())
