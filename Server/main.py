"""
Four Game Server - Main Entry Point

This is the main entry point for the four-letter word game server.
It initializes the game service and starts the Flask-SocketIO application.
"""

from four import create_app
from four.config import Config, validate_word_list_integrity
from four.services.game_service import get_game_service
from four.utils.game_logger import game_logger


def main():
    """Main function to initialize services and start the server."""
    try:
        print("Validating word list...")
        validate_word_list_integrity()
        print("✓ Word list validation passed")

        print("Creating Flask application...")
        app, socketio = create_app(Config)
        print("✓ Flask application created successfully")

        game_service = get_game_service()
        print(f"✓ Game service initialized with {len(game_service.lexicon)} words")

        game_logger.logger.info("Four Server Starting")

        print(f"\nStarting Four Game Server on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print("=" * 50)

        socketio.run(app, host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Four Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
