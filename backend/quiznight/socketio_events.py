from flask import current_app, request
from flask_socketio import emit

from quiznight import db, socketio
from quiznight.services.games import (
    GameNotFound,
    InvalidPhase,
    InvalidQuiz,
    QuizNotFound,
    RegistryFull,
    RepositoryFailure,
    Unauthorized,
)
from quiznight.services.quizzes import QuizRepository


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _engine():
    return current_app.extensions['quiznight']


def _quizzes() -> QuizRepository:
    return QuizRepository(db.session)


def _payload(data) -> dict:
    # Clients occasionally send a bare value instead of an object.
    return data if isinstance(data, dict) else {}


def _game_code(data) -> str:
    return str(_payload(data).get('gameCode') or '').strip()


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] sid={sid}")
    _engine().disconnect(sid)


# ---- Host: quiz library ----

def handle_create_quiz(data):
    try:
        quiz_id = _quizzes().save(data)
    except InvalidQuiz as exc:
        emit('error', {'message': str(exc)})
        return
    except RepositoryFailure:
        emit('error', {'message': 'Failed to save quiz.'})
        return
    emit('quiz_saved', {'title': data['title'].strip(), 'id': quiz_id})


def handle_get_quizzes(data=None):
    try:
        quizzes = _quizzes().list_quizzes()
    except RepositoryFailure:
        emit('error', {'message': 'Failed to load quizzes.'})
        return
    emit('quizzes_list', quizzes)


# ---- Host: game control ----

def handle_create_game(data):
    quiz_id = _payload(data).get('quizId')
    try:
        quiz = _quizzes().get(quiz_id)
    except QuizNotFound:
        emit('error', {'message': 'Selected quiz not found.'})
        return
    except RepositoryFailure:
        emit('error', {'message': 'Could not create game.'})
        return
    try:
        _engine().create_game(_get_sid(), quiz.questions, quiz_id=quiz.id, quiz_title=quiz.title)
    except InvalidQuiz:
        emit('error', {'message': 'Selected quiz has no questions.'})
    except RegistryFull:
        current_app.logger.error(f"[create-failed] quiz={quiz.id} no free game code")
        emit('error', {'message': 'Could not create game.'})


def handle_start_game(data):
    _host_command('start', _engine().start_game, data)


def handle_next_question(data):
    _host_command('next', _engine().advance_question, data)


def handle_end_game(data):
    _host_command('end', _engine().end_game, data)


def handle_host_rejoin(data):
    try:
        _engine().host_rejoin(_game_code(data), _get_sid())
    except GameNotFound:
        emit('error', {'message': 'Game not found.'})


def _host_command(name, command, data):
    # Non-host callers, stale codes and double clicks are expected; drop them.
    code = _game_code(data)
    try:
        command(code, _get_sid())
    except (GameNotFound, Unauthorized, InvalidPhase) as exc:
        current_app.logger.info(f"[{name}-ignored] game={code} sid={_get_sid()} reason={exc}")


# ---- Player ----

def handle_join_game(data):
    player_name = _payload(data).get('playerName') or ''
    try:
        _engine().join_game(_game_code(data), _get_sid(), str(player_name))
    except GameNotFound:
        emit('error', {'message': 'Game not found.'})


def handle_submit_answer(data):
    code = _game_code(data)
    try:
        _engine().submit_answer(code, _get_sid(), _payload(data).get('answer'))
    except GameNotFound:
        current_app.logger.debug(f"[answer-ignored] game={code} sid={_get_sid()} unknown game")


def handle_error(exc):
    # A failing handler must not take other games down with it.
    current_app.logger.exception(f"[socket-error] sid={_get_sid()} event={request.event!r}")


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('host:create_quiz', handle_create_quiz, namespace=namespace)
    socketio.on_event('host:get_quizzes', handle_get_quizzes, namespace=namespace)
    socketio.on_event('host:create_game', handle_create_game, namespace=namespace)
    socketio.on_event('host:start_game', handle_start_game, namespace=namespace)
    socketio.on_event('host:next_question', handle_next_question, namespace=namespace)
    socketio.on_event('host:rejoin', handle_host_rejoin, namespace=namespace)
    socketio.on_event('host:end_game', handle_end_game, namespace=namespace)
    socketio.on_event('player:join_game', handle_join_game, namespace=namespace)
    socketio.on_event('player:submit_answer', handle_submit_answer, namespace=namespace)
    socketio.on_error(namespace)(handle_error)
