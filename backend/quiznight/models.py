from datetime import datetime
import json

from quiznight import db


class Quiz(db.Model):
    __tablename__ = 'quiz'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    questions = db.relationship(
        'QuizQuestion',
        back_populates='quiz',
        order_by='QuizQuestion.position',
        cascade='all, delete-orphan',
    )

    def to_summary(self):
        return {'id': self.id, 'title': self.title}

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'questions': [q.to_dict() for q in self.questions],
        }


class QuizQuestion(db.Model):
    __tablename__ = 'quiz_question'
    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey('quiz.id'), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False)
    prompt = db.Column(db.Text, nullable=False)
    options = db.Column(db.Text, nullable=False)  # JSON-encoded list of strings
    correct_answer = db.Column(db.Text, nullable=False)
    quiz = db.relationship('Quiz', back_populates='questions')

    @property
    def option_list(self):
        try:
            return list(json.loads(self.options or '[]'))
        except ValueError:
            return []

    def to_dict(self):
        return {
            'question': self.prompt,
            'options': self.option_list,
            'correctAnswer': self.correct_answer,
        }
