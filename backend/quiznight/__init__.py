import logging

from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'
    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Live game engine: one registry per app, owned by the app
    from quiznight.gateway import SocketIOGateway
    from quiznight.services.games import GameEngine, SessionRegistry, SocketIOScheduler
    engine = GameEngine(
        registry=SessionRegistry(max_attempts=int(flask_app.config.get('GAME_CODE_MAX_ATTEMPTS', 1000))),
        gateway=SocketIOGateway(socketio),
        scheduler=SocketIOScheduler(socketio, logger=flask_app.logger),
        round_duration=int(flask_app.config.get('ROUND_DURATION_SEC', 20)),
        base_points=int(flask_app.config.get('BASE_POINTS', 500)),
        logger=flask_app.logger,
    )
    flask_app.extensions['quiznight'] = engine

    # Import and register blueprints here
    from quiznight.main import main
    flask_app.register_blueprint(main)

    from quiznight.api.quizzes import quizzes
    flask_app.register_blueprint(quizzes, url_prefix='/api/quizzes')

    from quiznight.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    # Register Socket.IO event handlers on the freshly initialised server
    from quiznight.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from quiznight.services.quizzes import QuizRepository
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            QuizRepository(db.session).save(SAMPLE_QUIZ)
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app


SAMPLE_QUIZ = {
    'title': 'General Knowledge',
    'questions': [
        {
            'question': 'What is the capital of France?',
            'options': ['Berlin', 'Madrid', 'Paris', 'Rome'],
            'correctAnswer': 'Paris',
        },
        {
            'question': 'Which planet is known as the Red Planet?',
            'options': ['Earth', 'Mars', 'Jupiter', 'Venus'],
            'correctAnswer': 'Mars',
        },
        {
            'question': 'How many continents are there?',
            'options': ['5', '6', '7', '8'],
            'correctAnswer': '7',
        },
    ],
}
