"""
Four Game Server Application Package

Server for a four-letter word guessing game: the guess evaluator, the game
state machine with its timed transitions, and the HTTP/WebSocket surface
consumed by the game client.
"""

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from .config import Config


def create_app(config_class=Config, scheduler=None, lexicon=None):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use
        scheduler: Scheduler for timed game transitions; Flask-SocketIO
            background tasks when omitted
        lexicon: Word set to play with; the bundled word list when omitted

    Returns:
        Flask application instance and its SocketIO extension
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app)
    socketio = SocketIO(app, cors_allowed_origins="*", logger=False, engineio_logger=False)

    from .services.game_service import initialize_game_service
    from .services.scheduler import SocketIOScheduler

    initialize_game_service(
        scheduler or SocketIOScheduler(socketio),
        lexicon=lexicon,
        config_class=config_class
    )

    # Register blueprints
    from .controllers.game_controller import game_bp

    app.register_blueprint(game_bp, url_prefix='/api')

    # Register WebSocket handlers
    from .websocket.handlers import register_websocket_handlers
    register_websocket_handlers(socketio)

    # Store socketio instance for use in other modules
    app.socketio = socketio

    return app, socketio
