"""
Game Controller

Handles all game-related HTTP endpoints.
"""

from flask import Blueprint, request, jsonify
from ..config.game_settings import get_word_statistics
from ..services.game_service import get_game_service
from ..utils.decorators import require_session
from ..utils.game_logger import game_logger

game_bp = Blueprint('game', __name__)


def _guess_result_dict(result):
    if result is None:
        return None
    return {
        'accepted': result.accepted,
        'reason': result.reason.value if result.reason else None,
        'message': result.reason.message if result.reason else None,
        'evaluation': [status.value for status in result.evaluation] if result.evaluation else None
    }


@game_bp.route('/session', methods=['POST'])
def create_session():
    """Create a new game session and start its first game."""
    try:
        game_service = get_game_service()
        if not game_service:
            return jsonify({
                'success': False,
                'error': 'Game service unavailable'
            }), 500

        game_logger.log_user_action(request, 'create_session')

        session = game_service.create_session()

        response_data = {
            'success': True,
            'session_id': session.session_id,
            'state': session.to_dict()
        }

        game_logger.log_server_response(
            request, 'create_session', True, response_data, session.session_id,
            word_length=session.word_length, max_attempts=session.max_attempts
        )

        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'create_session')

        error_response = {
            'success': False,
            'error': str(e)
        }

        game_logger.log_server_response(request, 'create_session', False, error_response)
        return jsonify(error_response), 500


@game_bp.route('/session/<session_id>/state', methods=['GET'])
@require_session
def get_state(session):
    """Get current game state."""
    try:
        game_logger.log_user_action(request, 'get_state', session.session_id)

        response_data = {
            'success': True,
            'state': session.to_dict()
        }

        game_logger.log_server_response(request, 'get_state', True, response_data, session.session_id)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'get_state', session.session_id)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'get_state', False, error_response, session.session_id)
        return jsonify(error_response), 500


@game_bp.route('/session/<session_id>/letter', methods=['POST'])
@require_session
def append_letter(session):
    """Append one letter to the in-progress guess."""
    try:
        data = request.get_json(silent=True)
        game_logger.log_user_action(
            request, 'append_letter', session.session_id,
            letter=data.get('letter') if isinstance(data, dict) else None
        )

        if not data or 'letter' not in data:
            error_response = {
                'success': False,
                'error': 'Letter is required'
            }
            game_logger.log_server_response(request, 'append_letter', False, error_response, session.session_id)
            return jsonify(error_response), 400

        changed = session.append_letter(data['letter'])

        response_data = {
            'success': True,
            'changed': changed,
            'state': session.to_dict()
        }

        game_logger.log_server_response(request, 'append_letter', True, response_data, session.session_id)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'append_letter', session.session_id)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'append_letter', False, error_response, session.session_id)
        return jsonify(error_response), 500


@game_bp.route('/session/<session_id>/backspace', methods=['POST'])
@require_session
def backspace(session):
    """Remove the last letter of the in-progress guess."""
    try:
        game_logger.log_user_action(request, 'backspace', session.session_id)

        changed = session.backspace()

        response_data = {
            'success': True,
            'changed': changed,
            'state': session.to_dict()
        }

        game_logger.log_server_response(request, 'backspace', True, response_data, session.session_id)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'backspace', session.session_id)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'backspace', False, error_response, session.session_id)
        return jsonify(error_response), 500


@game_bp.route('/session/<session_id>/guess', methods=['POST'])
@require_session
def submit_guess(session):
    """Submit the in-progress guess for validation and evaluation."""
    try:
        game_logger.log_user_action(
            request, 'submit_guess', session.session_id,
            guess=session.game.current_guess
        )

        result = session.submit_guess()

        response_data = {
            'success': result is None or result.accepted,
            'result': _guess_result_dict(result),
            'state': session.to_dict()
        }

        if result is not None and not result.accepted:
            response_data['error'] = result.reason.message
            game_logger.log_server_response(
                request, 'submit_guess', False, response_data, session.session_id,
                validation_error=result.reason.value
            )
            return jsonify(response_data), 400

        game_logger.log_server_response(
            request, 'submit_guess', True, response_data, session.session_id,
            attempts_used=response_data['state']['attempts_used']
        )
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'submit_guess', session.session_id)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'submit_guess', False, error_response, session.session_id)
        return jsonify(error_response), 500


@game_bp.route('/session/<session_id>/new_game', methods=['POST'])
@require_session
def new_game(session):
    """Discard the current game and start a new one in the same session."""
    try:
        game_logger.log_user_action(request, 'new_game', session.session_id)

        session.start_new_game()

        response_data = {
            'success': True,
            'state': session.to_dict()
        }

        game_logger.log_server_response(request, 'new_game', True, response_data, session.session_id)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'new_game', session.session_id)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'new_game', False, error_response, session.session_id)
        return jsonify(error_response), 500


@game_bp.route('/session/<session_id>', methods=['DELETE'])
def delete_session(session_id):
    """Delete a game session."""
    game_service = get_game_service()
    if not game_service:
        return jsonify({
            'success': False,
            'error': 'Game service unavailable'
        }), 500

    game_logger.log_user_action(request, 'delete_session', session_id)

    success = game_service.delete_session(session_id)

    response_data = {
        'success': success
    }

    game_logger.log_server_response(request, 'delete_session', success, response_data, session_id)

    if not success:
        response_data['error'] = 'Session not found'
        return jsonify(response_data), 404

    return jsonify(response_data)


@game_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    try:
        game_service = get_game_service()

        game_logger.log_user_action(request, 'health_check')

        response_data = {
            'status': 'healthy',
            'active_sessions': len(game_service.sessions) if game_service else 0,
            'word_stats': get_word_statistics(game_service.lexicon.words) if game_service else None,
            'log_stats': game_logger.get_log_stats()
        }

        game_logger.log_server_response(request, 'health_check', True, response_data)

        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'health_check')
        error_response = {
            'status': 'error',
            'error': str(e)
        }
        game_logger.log_server_response(request, 'health_check', False, error_response)
        return jsonify(error_response), 500
