from flask import Blueprint, current_app, jsonify

from quiznight.services.games import GameNotFound

games = Blueprint('games', __name__)


@games.route('/<string:game_code>/state', methods=['GET'])
def get_game_state(game_code):
    engine = current_app.extensions['quiznight']
    try:
        payload = engine.get_state(game_code)
    except GameNotFound:
        return jsonify({'error': 'Game not found'}), 404
    payload['timeLimit'] = engine.round_duration
    return jsonify(payload)
