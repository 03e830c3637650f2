"""Quiz definitions: validation and the SQL-backed repository."""

from .repository import QuizDefinition, QuizRepository, parse_quiz_data
