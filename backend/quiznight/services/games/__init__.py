"""Game domain services: session state, scoring and round timers.

This package holds the live game engine. It is imported by the Socket.IO
handlers and HTTP routes, keeping transport concerns separated from core
game mechanics.
"""

from .engine import GameEngine
from .errors import (
    GameError,
    GameNotFound,
    InvalidPhase,
    InvalidQuiz,
    QuizNotFound,
    RegistryFull,
    RepositoryFailure,
    Unauthorized,
)
from .registry import SessionRegistry
from .scheduler import SocketIOScheduler, TimerHandle
from .state import Phase, Player, Question, Session
