import json
import logging
from dataclasses import dataclass
from typing import List, Tuple

from sqlalchemy.exc import SQLAlchemyError

from quiznight.models import Quiz, QuizQuestion
from quiznight.services.games.errors import InvalidQuiz, QuizNotFound, RepositoryFailure
from quiznight.services.games.state import Question

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuizDefinition:
    id: int
    title: str
    questions: Tuple[Question, ...]


def parse_quiz_data(data) -> Tuple[str, List[Question]]:
    """Validate client-supplied quiz data.

    Expected shape::

        {"title": "...", "questions": [
            {"question": "...", "options": ["a", "b"], "correctAnswer": "a"}
        ]}
    """
    if not isinstance(data, dict):
        raise InvalidQuiz('Quiz data must be an object')
    title = data.get('title')
    if not isinstance(title, str) or not title.strip():
        raise InvalidQuiz('Quiz title is required')
    raw_questions = data.get('questions')
    if not isinstance(raw_questions, list) or not raw_questions:
        raise InvalidQuiz('Quiz must have at least one question')

    questions = []
    for idx, raw in enumerate(raw_questions):
        if not isinstance(raw, dict):
            raise InvalidQuiz(f'Question {idx + 1} must be an object')
        prompt = raw.get('question')
        options = raw.get('options')
        correct = raw.get('correctAnswer')
        if not isinstance(prompt, str) or not prompt.strip():
            raise InvalidQuiz(f'Question {idx + 1} has no prompt')
        if (not isinstance(options, list) or len(options) < 2
                or not all(isinstance(o, str) for o in options)):
            raise InvalidQuiz(f'Question {idx + 1} needs at least two text options')
        if correct not in options:
            raise InvalidQuiz(f'Question {idx + 1} correct answer is not one of its options')
        questions.append(Question(prompt=prompt.strip(), options=tuple(options), correct_answer=correct))
    return title.strip(), questions


class QuizRepository:
    """Stores quiz definitions through a SQLAlchemy session.

    Database errors are rolled back and re-raised as ``RepositoryFailure``;
    nothing is retried.
    """

    def __init__(self, session):
        self._session = session

    def save(self, data) -> int:
        title, questions = parse_quiz_data(data)
        try:
            quiz = Quiz(title=title)
            for position, q in enumerate(questions):
                quiz.questions.append(QuizQuestion(
                    position=position,
                    prompt=q.prompt,
                    options=json.dumps(list(q.options)),
                    correct_answer=q.correct_answer,
                ))
            self._session.add(quiz)
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.exception(f"[quiz-save-failed] title={title!r}")
            raise RepositoryFailure('Failed to save quiz.') from exc
        logger.info(f"[quiz-saved] id={quiz.id} title={title!r} questions={len(questions)}")
        return quiz.id

    def list_quizzes(self) -> List[dict]:
        try:
            quizzes = self._session.query(Quiz).order_by(Quiz.id).all()
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.exception("[quiz-list-failed]")
            raise RepositoryFailure('Failed to load quizzes.') from exc
        return [q.to_summary() for q in quizzes]

    def get(self, quiz_id) -> QuizDefinition:
        try:
            key = int(quiz_id)
        except (TypeError, ValueError):
            raise QuizNotFound(quiz_id)
        try:
            quiz = self._session.get(Quiz, key)
            if quiz is None:
                raise QuizNotFound(quiz_id)
            questions = tuple(
                Question(prompt=q.prompt, options=tuple(q.option_list), correct_answer=q.correct_answer)
                for q in quiz.questions
            )
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.exception(f"[quiz-get-failed] id={quiz_id!r}")
            raise RepositoryFailure('Failed to load quiz.') from exc
        return QuizDefinition(id=quiz.id, title=quiz.title, questions=questions)
