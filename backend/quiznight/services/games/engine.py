"""The game session state machine.

``GameEngine`` turns host and player commands into session mutations and
outbound events. It is transport agnostic: events go through a gateway
object offering

- ``subscribe(connection_id, game_code)``
- ``publish(game_code, event, payload)``: every subscriber of the game
- ``send(connection_id, event, payload)``: a single connection
- ``close_room(game_code)``

Every command runs under the target session's lock and emits while still
holding it, so events for one game code leave in the order they were
produced. Commands for different game codes never share a lock.

Lookup failures raise ``GameNotFound``. Host commands from a non-host raise
``Unauthorized`` and out-of-phase ones raise ``InvalidPhase``; the socket
layer drops both. Late or duplicate answers are expected under concurrency
and are ignored (``submit_answer`` returns None).
"""

import logging
import time
from typing import Iterable, Optional

from .errors import GameNotFound, InvalidPhase, InvalidQuiz, Unauthorized
from .registry import SessionRegistry
from .scoring import DEFAULT_BASE_POINTS, DEFAULT_ROUND_DURATION, score_answer
from .state import Phase, Player, Question, Session


class GameEngine:

    def __init__(self, registry: SessionRegistry, gateway, scheduler,
                 clock=time.monotonic,
                 round_duration: float = DEFAULT_ROUND_DURATION,
                 base_points: int = DEFAULT_BASE_POINTS,
                 logger: Optional[logging.Logger] = None):
        self.registry = registry
        self.gateway = gateway
        self.scheduler = scheduler
        self.clock = clock
        self.round_duration = round_duration
        self.base_points = base_points
        self.logger = logger or logging.getLogger(__name__)

    # ---- Host commands ----

    def create_game(self, host_id: str, questions: Iterable[Question],
                    quiz_id: Optional[int] = None, quiz_title: Optional[str] = None) -> str:
        questions = tuple(questions)
        if not questions:
            raise InvalidQuiz('Quiz has no questions.')
        session = self.registry.create(host_id, questions, quiz_id=quiz_id, quiz_title=quiz_title)
        code = session.game_code
        with session.lock:
            self.gateway.subscribe(host_id, code)
            self.gateway.send(host_id, 'game_created', {'gameCode': code, 'quizId': quiz_id})
        self.logger.info(
            f"[game-created] game={code} host={host_id} quiz={quiz_id} questions={len(questions)}"
        )
        return code

    def host_rejoin(self, game_code: str, caller_id: str) -> None:
        session = self.registry.get(game_code)
        with session.lock:
            self._ensure_live(session)
            previous = session.host_id
            session.host_id = caller_id
            self.gateway.subscribe(caller_id, session.game_code)
            self.gateway.send(caller_id, 'player_joined', {'players': self._roster(session)})
        self.logger.info(f"[host-rejoin] game={game_code} host={previous} -> {caller_id}")

    def start_game(self, game_code: str, caller_id: str) -> None:
        session = self.registry.get(game_code)
        with session.lock:
            self._ensure_live(session)
            self._require_host(session, caller_id)
            if session.phase != Phase.LOBBY:
                raise InvalidPhase(f"Game {game_code} already started")
            session.current_question_index = 0
            self._begin_question(session)
        self.logger.info(f"[game-start] game={game_code} players={len(session.players)}")

    def advance_question(self, game_code: str, caller_id: str) -> None:
        session = self.registry.get(game_code)
        with session.lock:
            self._ensure_live(session)
            self._require_host(session, caller_id)
            if session.phase not in (Phase.QUESTION_ACTIVE, Phase.RESULTS):
                raise InvalidPhase(f"Game {game_code} is in {session.phase.value}")
            session.cancel_round_timer()
            session.answered.clear()
            session.current_question_index += 1
            if session.current_question_index < len(session.questions):
                self._begin_question(session)
                return
            session.phase = Phase.GAME_OVER
            session.question_started_at = None
            self.gateway.publish(session.game_code, 'game_over', {'players': self._ranking(session)})
        self.logger.info(f"[game-over] game={game_code}")

    def end_game(self, game_code: str, caller_id: str) -> None:
        """Host-initiated termination: notify the room and retire the session."""
        session = self.registry.get(game_code)
        with session.lock:
            self._ensure_live(session)
            self._require_host(session, caller_id)
            session.retired = True
            session.cancel_round_timer()
            self.gateway.publish(session.game_code, 'session_ended', {'gameCode': session.game_code})
            self.gateway.close_room(session.game_code)
        self.registry.remove(game_code)
        self.logger.info(f"[game-ended] game={game_code}")

    # ---- Player commands ----

    def join_game(self, game_code: str, player_id: str, name: str) -> Optional[Player]:
        session = self.registry.get(game_code)
        with session.lock:
            self._ensure_live(session)
            if session.phase == Phase.GAME_OVER:
                self.logger.info(f"[join-skip] game={game_code} player={player_id} game is over")
                return None
            player = session.get_player(player_id)
            if player is not None:
                player.connected = True
            else:
                name = (name or '').strip() or f"Player {len(session.players) + 1}"
                player = Player(id=player_id, name=name)
                session.players.append(player)
            self.gateway.subscribe(player_id, session.game_code)
            self.gateway.publish(session.game_code, 'player_joined', {'players': self._roster(session)})
        self.logger.info(f"[join] game={game_code} player={player_id} name={player.name!r}")
        return player

    def submit_answer(self, game_code: str, player_id: str, answer) -> Optional[int]:
        """Record one answer. Returns the points awarded, or None if ignored."""
        session = self.registry.get(game_code)
        with session.lock:
            if session.retired or session.phase != Phase.QUESTION_ACTIVE:
                self.logger.debug(f"[answer-skip] game={game_code} player={player_id} phase={session.phase.value}")
                return None
            question = session.current_question
            player = session.get_player(player_id)
            if question is None or player is None or player_id in session.answered:
                self.logger.debug(f"[answer-skip] game={game_code} player={player_id}")
                return None
            session.answered.add(player_id)
            elapsed = self.clock() - session.question_started_at
            points = score_answer(answer, question.correct_answer, elapsed,
                                  self.round_duration, self.base_points)
            player.score += points
            self.logger.info(
                f"[answer] game={game_code} player={player_id} question={session.current_question_index} "
                f"elapsed={elapsed:.2f}s points={points}"
            )
            if self._everyone_answered(session):
                self._finish_round(session, reason='all-answered')
            return points

    def disconnect(self, connection_id: str) -> None:
        """A connection closed: mark its players away and unblock their rounds.

        The player keeps their roster entry and score. A closed host
        connection leaves the session alone so the host can rejoin.
        """
        for session in self.registry.sessions():
            with session.lock:
                if session.retired:
                    continue
                if session.host_id == connection_id:
                    self.logger.info(f"[host-away] game={session.game_code} host={connection_id}")
                player = session.get_player(connection_id)
                if player is None or not player.connected:
                    continue
                player.connected = False
                self.logger.info(f"[player-away] game={session.game_code} player={connection_id}")
                if session.phase == Phase.QUESTION_ACTIVE and self._everyone_answered(session):
                    self._finish_round(session, reason='remaining-answered')

    # ---- Timer ----

    def expire_timer(self, game_code: str, question_index: int, generation: int) -> bool:
        """Round time ran out; finish the round with the answers collected."""
        session = self.registry.find(game_code)
        if session is None:
            self.logger.info(f"[timer-abort] game={game_code} session retired")
            return False
        with session.lock:
            self.logger.info(
                f"[timer-fire] game={game_code} expected_question={question_index} "
                f"actual_question={session.current_question_index} phase={session.phase.value}"
            )
            if (session.retired
                    or session.phase != Phase.QUESTION_ACTIVE
                    or session.current_question_index != question_index
                    or session.timer_generation != generation):
                self.logger.info(f"[timer-abort] game={game_code} mismatch phase/question/generation")
                return False
            session.round_timer = None
            self._finish_round(session, reason='timeout')
            return True

    # ---- Queries ----

    def get_state(self, game_code: str) -> dict:
        session = self.registry.get(game_code)
        with session.lock:
            return session.to_dict()

    # ---- Internals (caller holds session.lock) ----

    def _ensure_live(self, session: Session) -> None:
        # Removed between registry lookup and lock acquisition.
        if session.retired:
            raise GameNotFound(session.game_code)

    def _require_host(self, session: Session, caller_id: str) -> None:
        if session.host_id != caller_id:
            raise Unauthorized(f"{caller_id} is not the host of game {session.game_code}")

    def _begin_question(self, session: Session) -> None:
        question = session.current_question
        session.phase = Phase.QUESTION_ACTIVE
        session.answered.clear()
        session.question_started_at = self.clock()
        self._arm_timer(session)
        payload = question.public_dict()
        payload.update({
            'questionIndex': session.current_question_index,
            'totalQuestions': len(session.questions),
            'timeLimit': self.round_duration,
        })
        self.gateway.publish(session.game_code, 'question_started', payload)

    def _arm_timer(self, session: Session) -> None:
        session.cancel_round_timer()
        session.timer_generation += 1
        code = session.game_code
        index = session.current_question_index
        generation = session.timer_generation
        session.round_timer = self.scheduler.schedule(
            self.round_duration, lambda: self.expire_timer(code, index, generation)
        )
        self.logger.info(
            f"[timer-set] game={code} question={index} duration={self.round_duration}s"
        )

    def _everyone_answered(self, session: Session) -> bool:
        if not session.answered:
            return False
        return all(p.id in session.answered for p in session.players if p.connected)

    def _finish_round(self, session: Session, reason: str) -> None:
        session.cancel_round_timer()
        session.phase = Phase.RESULTS
        self.gateway.publish(session.game_code, 'show_results', {
            'correctAnswer': session.current_question.correct_answer,
            'players': self._ranking(session),
        })
        self.logger.info(
            f"[round-complete] game={session.game_code} question={session.current_question_index} "
            f"reason={reason} answered={len(session.answered)}/{len(session.players)}"
        )

    @staticmethod
    def _roster(session: Session) -> list:
        return [p.to_dict() for p in session.players]

    @staticmethod
    def _ranking(session: Session) -> list:
        return [p.to_dict() for p in session.ranked_players()]
