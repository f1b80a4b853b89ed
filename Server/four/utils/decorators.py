"""
Session Decorators

Contains decorators that resolve the game session for HTTP and WebSocket handlers.
"""

from functools import wraps
from flask import request, jsonify
from flask_socketio import emit


def require_session(f):
    """
    Decorator for HTTP endpoints taking a ``session_id`` URL parameter.

    Passes the resolved GameSession as the ``session`` keyword argument and
    holds its lock for the whole request, so a mutation and the state it
    returns are never split by a timer firing in between.
    """
    @wraps(f)
    def decorated_function(session_id, *args, **kwargs):
        from ..services.game_service import get_game_service

        game_service = get_game_service()
        if not game_service:
            return jsonify({
                'success': False,
                'error': 'Game service unavailable'
            }), 500

        session = game_service.get_session(session_id)
        if session is None:
            return jsonify({
                'success': False,
                'error': 'Session not found'
            }), 404

        session.touch()
        with session.lock:
            return f(*args, session=session, **kwargs)

    return decorated_function


def websocket_session_required(f):
    """Decorator for WebSocket events; resolves the session bound to ``request.sid``."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.game_service import get_game_service

        game_service = get_game_service()
        session = game_service.get_session(request.sid) if game_service else None
        if session is None:
            emit('error', {'error': 'Session not found'})
            return

        session.touch()
        kwargs['session'] = session
        with session.lock:
            return f(*args, **kwargs)

    return decorated_function
