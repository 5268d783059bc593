from flask import Blueprint, current_app, jsonify

sessions = Blueprint('sessions', __name__)


@sessions.route('/', methods=['GET'])
def list_sessions():
    """
    Returns whether a player is waiting and every session still held,
    including finished sessions inside their retention window.
    """
    return jsonify(current_app.extensions['cardclash'].snapshot())


@sessions.route('/<int:session_id>', methods=['GET'])
def get_session_state(session_id):
    state = current_app.extensions['cardclash'].session_state(session_id)
    if state is None:
        return jsonify({'error': 'Session not found'}), 404
    return jsonify(state)
