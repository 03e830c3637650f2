import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///quiznight.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Round timer (seconds) and points for an answer given at the buzzer
    ROUND_DURATION_SEC = int(os.environ.get('ROUND_DURATION_SEC', '20'))
    BASE_POINTS = int(os.environ.get('BASE_POINTS', '500'))
    # Upper bound on game code resampling before giving up
    GAME_CODE_MAX_ATTEMPTS = int(os.environ.get('GAME_CODE_MAX_ATTEMPTS', '1000'))
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173'
        ).split(',') if o.strip()
    ]
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
