"""In-memory game session state.

Sessions live only as long as the process; nothing here touches the
database. All mutation happens through ``GameEngine`` while holding
``Session.lock``.
"""

import enum
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple


class Phase(str, enum.Enum):
    LOBBY = 'lobby'
    QUESTION_ACTIVE = 'question_active'
    RESULTS = 'results'
    GAME_OVER = 'game_over'


@dataclass(frozen=True)
class Question:
    prompt: str
    options: Tuple[str, ...]
    correct_answer: str

    def public_dict(self) -> dict:
        # Never include the correct answer here: this goes to players.
        return {'question': self.prompt, 'options': list(self.options)}


@dataclass
class Player:
    id: str
    name: str
    score: int = 0
    connected: bool = True

    def to_dict(self) -> dict:
        return {'id': self.id, 'name': self.name, 'score': self.score}


@dataclass
class Session:
    game_code: str
    host_id: str
    questions: Tuple[Question, ...]
    quiz_id: Optional[int] = None
    quiz_title: Optional[str] = None
    players: List[Player] = field(default_factory=list)
    current_question_index: int = 0
    answered: Set[str] = field(default_factory=set)
    question_started_at: Optional[float] = None
    phase: Phase = Phase.LOBBY
    round_timer: Optional[object] = None
    # Bumped every time a round timer is armed; a firing timer must match it.
    timer_generation: int = 0
    retired: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def current_question(self) -> Optional[Question]:
        if 0 <= self.current_question_index < len(self.questions):
            return self.questions[self.current_question_index]
        return None

    def get_player(self, player_id: str) -> Optional[Player]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def ranked_players(self) -> List[Player]:
        """Players by score, highest first; ties keep join order."""
        return sorted(self.players, key=lambda p: -p.score)

    def cancel_round_timer(self) -> None:
        if self.round_timer is not None:
            self.round_timer.cancel()
            self.round_timer = None

    def to_dict(self) -> dict:
        return {
            'gameCode': self.game_code,
            'quizId': self.quiz_id,
            'quizTitle': self.quiz_title,
            'phase': self.phase.value,
            'questionIndex': self.current_question_index,
            'totalQuestions': len(self.questions),
            'answeredCount': len(self.answered),
            'players': [p.to_dict() for p in self.players],
        }
