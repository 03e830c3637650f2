import random
import threading
from typing import Dict, Iterable, List, Optional

from .errors import GameNotFound, RegistryFull
from .state import Question, Session

CODE_MIN = 100000
CODE_MAX = 999999


def generate_game_code(rng=random) -> str:
    """Random 6-digit numeric game code."""
    return str(rng.randint(CODE_MIN, CODE_MAX))


class SessionRegistry:
    """Owns the live sessions, keyed by game code.

    The map has its own lock; it is only held for lookups, inserts and
    removals, never while a session lock is being acquired.
    """

    def __init__(self, rng=None, max_attempts: int = 1000):
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()
        self._rng = rng or random.Random()
        self._max_attempts = max_attempts

    def create(self, host_id: str, questions: Iterable[Question],
               quiz_id: Optional[int] = None, quiz_title: Optional[str] = None) -> Session:
        questions = tuple(questions)
        with self._lock:
            for _ in range(self._max_attempts):
                code = generate_game_code(self._rng)
                if code not in self._sessions:
                    break
            else:
                raise RegistryFull(f"No free game code after {self._max_attempts} attempts")
            session = Session(
                game_code=code,
                host_id=host_id,
                questions=questions,
                quiz_id=quiz_id,
                quiz_title=quiz_title,
            )
            self._sessions[code] = session
            return session

    def get(self, game_code: str) -> Session:
        with self._lock:
            session = self._sessions.get(str(game_code))
        if session is None:
            raise GameNotFound(game_code)
        return session

    def find(self, game_code: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(str(game_code))

    def remove(self, game_code: str) -> Optional[Session]:
        with self._lock:
            session = self._sessions.pop(str(game_code), None)
        if session is None:
            return None
        with session.lock:
            session.retired = True
            session.cancel_round_timer()
        return session

    def sessions(self) -> List[Session]:
        with self._lock:
            return list(self._sessions.values())

    def close(self) -> None:
        for session in self.sessions():
            self.remove(session.game_code)

    def __contains__(self, game_code) -> bool:
        with self._lock:
            return str(game_code) in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
