from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    engine = current_app.extensions['quiznight']
    return jsonify({
        'message': 'Welcome to the QuizNight server!',
        'live_games': len(engine.registry),
    })
