from flask import Blueprint, jsonify, request

from quiznight import db
from quiznight.models import Quiz
from quiznight.services.games import InvalidQuiz, RepositoryFailure
from quiznight.services.quizzes import QuizRepository

quizzes = Blueprint('quizzes', __name__)


@quizzes.route('', methods=['GET'])
def list_quizzes():
    try:
        return jsonify(QuizRepository(db.session).list_quizzes())
    except RepositoryFailure as exc:
        return jsonify({'error': str(exc)}), 503


@quizzes.route('', methods=['POST'])
def create_quiz():
    data = request.get_json(silent=True)
    try:
        quiz_id = QuizRepository(db.session).save(data)
    except InvalidQuiz as exc:
        return jsonify({'error': str(exc)}), 400
    except RepositoryFailure as exc:
        return jsonify({'error': str(exc)}), 503
    return jsonify({'id': quiz_id, 'title': data['title'].strip()}), 201


@quizzes.route('/<int:quiz_id>', methods=['GET'])
def get_quiz(quiz_id):
    quiz = db.get_or_404(Quiz, quiz_id)
    return jsonify(quiz.to_dict())
