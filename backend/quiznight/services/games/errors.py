"""Errors raised by the game session engine and the quiz repository."""


class GameError(Exception):
    """Base class for game engine errors."""


class GameNotFound(GameError):
    """No live session is registered under the given game code."""

    def __init__(self, game_code):
        super().__init__(f"Game {game_code!r} not found")
        self.game_code = game_code


class Unauthorized(GameError):
    """The command requires host identity."""


class InvalidPhase(GameError):
    """The command is not valid in the session's current phase."""


class InvalidQuiz(GameError):
    """Quiz data is malformed or has no playable questions."""


class RegistryFull(GameError):
    """No free game code could be found."""


class QuizNotFound(GameError):
    def __init__(self, quiz_id):
        super().__init__(f"Quiz {quiz_id!r} not found")
        self.quiz_id = quiz_id


class RepositoryFailure(GameError):
    """The quiz store could not complete a read or write."""
