"""Game sessions and answer recording.

Correctness and points are computed here from the stored question and a
server-side clock; the submitted answer text is the only client input
that feeds the score. Room play is timed from the :class:`QuestionRound`
written when the question opened. Solo play has no server-side question
window, so it is timed from the client-reported duration.
"""

import time

from flask import current_app
from sqlalchemy.exc import IntegrityError

from quizroom import db
from quizroom.errors import Conflict, Forbidden, NotFound, ValidationError
from quizroom.models import (
    GameSession, PlayerAnswer, Question, QuestionRound, User,
    ROOM_PLAYING, TIMEOUT_ANSWER, utcnow,
)
from .policy import is_member, is_owner
from .questions import room_question_query
from .rooms import get_room, start_game
from .scoring import score, time_remaining


def start_session(user: User, room_id=None) -> GameSession:
    if room_id is None:
        session = GameSession(room_id=None, user_id=user.id)
        db.session.add(session)
        db.session.commit()
        current_app.logger.info(f"[session-start] session={session.id} user={user.id} solo=True")
        return session

    room = get_room(room_id)
    if is_owner(room, user):
        # The host's session opens together with the room transition
        return start_game(room.id, user)
    if not is_member(room, user):
        raise Forbidden('Join the room before playing')
    if room.status != ROOM_PLAYING:
        raise Conflict('The game has not started yet')

    session = GameSession.query.filter_by(room_id=room.id, user_id=user.id, ended_at=None).first()
    if session is not None:
        return session
    session = GameSession(room_id=room.id, user_id=user.id)
    db.session.add(session)
    db.session.commit()
    current_app.logger.info(f"[session-start] session={session.id} user={user.id} room={room.id}")
    return session


def get_session(user: User, session_id: int) -> GameSession:
    session = db.session.get(GameSession, session_id)
    if session is None:
        raise NotFound('Game session not found')
    if session.user_id != user.id:
        raise Forbidden('This game session belongs to another player')
    return session


def end_session(user: User, session_id: int) -> GameSession:
    session = get_session(user, session_id)
    if session.is_open:
        session.ended_at = utcnow()
        db.session.add(session)
        db.session.commit()
        current_app.logger.info(f"[session-end] session={session.id} final_score={session.final_score}")
    return session


def _room_elapsed(session: GameSession, question: Question) -> float:
    room = get_room(session.room_id)
    if room.status != ROOM_PLAYING:
        raise Conflict('The game is not in progress')
    if question.room_id != room.id:
        raise ValidationError('Question does not belong to this room')
    position = room_question_query(room.id).filter(Question.id < question.id).count()
    if position > room.current_question_index:
        raise Conflict('That question has not been asked yet')
    round_ = QuestionRound.query.filter_by(room_id=room.id, question_index=position).first()
    if round_ is None:
        raise Conflict('That question has not been asked yet')
    return time.time() - round_.started_at


def _solo_elapsed(user: User, question: Question, time_to_answer_ms) -> float:
    if question.created_by != user.id:
        raise Forbidden('Solo play is limited to your own questions')
    if time_to_answer_ms is None:
        raise ValidationError('time_to_answer_ms is required for solo play')
    return max(0, time_to_answer_ms) / 1000.0


def record_answer(user: User, session_id: int, question_id: int, selected_answer,
                  time_to_answer_ms=None) -> PlayerAnswer:
    """Score and store one answer; at most one per (session, question).

    ``None``, a blank string or ``"timeout"`` records a timeout.
    """
    if selected_answer is not None and not isinstance(selected_answer, str):
        raise ValidationError('selected_answer must be a string')
    session = get_session(user, session_id)
    if not session.is_open:
        raise Conflict('This game session has ended')
    question = db.session.get(Question, question_id)
    if question is None:
        raise NotFound('Question not found')

    if session.room_id is not None:
        elapsed = _room_elapsed(session, question)
    else:
        elapsed = _solo_elapsed(user, question, time_to_answer_ms)

    if PlayerAnswer.query.filter_by(game_session_id=session.id, question_id=question.id).first():
        raise Conflict('This question has already been answered')

    cfg = current_app.config
    limit = int(cfg.get('QUESTION_TIME_LIMIT_SEC', 15))
    answer_text = (selected_answer or '').strip()
    timed_out = not answer_text or answer_text == TIMEOUT_ANSWER or elapsed >= limit
    if timed_out:
        answer_text = TIMEOUT_ANSWER
        is_correct = False
        points = 0
    else:
        is_correct = answer_text == question.correct_answer
        points = score(
            is_correct,
            time_remaining(elapsed, limit),
            limit,
            int(cfg.get('POINTS_PER_CORRECT', 500)),
            int(cfg.get('MAX_SPEED_BONUS', 500)),
        )

    answer = PlayerAnswer(
        game_session_id=session.id,
        question_id=question.id,
        selected_answer=answer_text[:255],
        is_correct=is_correct,
        points_earned=points,
        time_to_answer=int(min(max(elapsed, 0.0), limit) * 1000),
    )
    db.session.add(answer)
    session.final_score = GameSession.final_score + points
    db.session.add(session)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict('This question has already been answered')
    current_app.logger.info(
        f"[answer] session={session.id} question={question.id} correct={is_correct} "
        f"points={points} elapsed_ms={answer.time_to_answer} timeout={timed_out}"
    )
    return answer
