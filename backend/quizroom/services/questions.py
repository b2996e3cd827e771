from flask import current_app

from quizroom import db
from quizroom.errors import Conflict, ValidationError
from quizroom.models import Question, User, ROOM_WAITING
from .policy import require_participant
from .rooms import get_room


def _clean(value, field):
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{field} is required')
    return value.strip()


def add_question(user: User, question_text, correct_answer, wrong_answers, room_id=None) -> Question:
    """Add a question to a room's shared set, or to the solo bank when
    ``room_id`` is None."""
    question_text = _clean(question_text, 'question_text')
    correct_answer = _clean(correct_answer, 'correct_answer')
    if not isinstance(wrong_answers, (list, tuple)) or len(wrong_answers) != 3:
        raise ValidationError('Exactly three wrong answers are required')
    wrong_answers = [_clean(w, f'wrong_answer_{i}') for i, w in enumerate(wrong_answers, start=1)]

    if room_id is not None:
        room = get_room(room_id)
        require_participant(room, user)
        if room.status != ROOM_WAITING:
            raise Conflict('Questions can only be added while the room is waiting')

    question = Question(
        created_by=user.id,
        room_id=room_id,
        question_text=question_text,
        correct_answer=correct_answer,
        wrong_answer_1=wrong_answers[0],
        wrong_answer_2=wrong_answers[1],
        wrong_answer_3=wrong_answers[2],
    )
    db.session.add(question)
    db.session.commit()
    current_app.logger.info(f"[question-add] question={question.id} room={room_id} author={user.id}")
    return question


def room_question_query(room_id: int):
    # A room's question sequence is its questions in insertion order
    return Question.query.filter_by(room_id=room_id).order_by(Question.id)


def room_questions(room_id: int, user: User) -> list:
    room = get_room(room_id)
    require_participant(room, user)
    return room_question_query(room.id).all()


def user_questions(user: User, solo_only=False) -> list:
    query = Question.query.filter_by(created_by=user.id)
    if solo_only:
        query = query.filter(Question.room_id.is_(None))
    return query.order_by(Question.id).all()
