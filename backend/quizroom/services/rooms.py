"""Room lifecycle: creation, membership and the question pointer.

A room moves ``waiting -> playing -> finished``. Only the owner starts,
advances or finishes it. ``current_question_index`` is the single source
of truth every polling client converges on; each advance also records a
:class:`QuestionRound` so answers can be timed against the server clock.
"""

import time

from flask import current_app
from sqlalchemy.exc import IntegrityError

from quizroom import db
from quizroom.errors import Conflict, NotFound, RoomCodeUnavailable, ValidationError
from quizroom.models import (
    GameSession, Question, QuestionRound, Room, RoomMember, User,
    ROOM_FINISHED, ROOM_PLAYING, ROOM_WAITING, utcnow,
)
from .codes import generate_code
from .policy import require_owner


def create_room(owner: User) -> Room:
    cfg = current_app.config
    length = int(cfg.get('ROOM_CODE_LENGTH', 6))
    attempts = int(cfg.get('ROOM_CODE_ATTEMPTS', 5))
    for attempt in range(1, attempts + 1):
        code = generate_code(length)
        room = Room(code=code, owner_id=owner.id, status=ROOM_WAITING, current_question_index=0)
        db.session.add(room)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            current_app.logger.warning(f"[room-code-collision] code={code} attempt={attempt}/{attempts}")
            continue
        current_app.logger.info(f"[room-create] room={room.id} code={room.code} owner={owner.id}")
        return room
    current_app.logger.error(f"[room-code-exhausted] owner={owner.id} attempts={attempts}")
    raise RoomCodeUnavailable('Could not allocate a room code')


def get_room(room_id: int) -> Room:
    room = db.session.get(Room, room_id)
    if room is None:
        raise NotFound('Room not found')
    return room


def get_room_by_code(code: str) -> Room:
    if code is not None and not isinstance(code, str):
        raise ValidationError('Room code must be a string')
    code = (code or '').strip().upper()
    if not code:
        raise ValidationError('Room code is required')
    room = Room.query.filter_by(code=code).first()
    if room is None:
        raise NotFound('Room not found')
    return room


def join_room(code: str, user: User, display_name=None) -> Room:
    """Add ``user`` to the room behind ``code``.

    Rejoining is a no-op apart from the optional display name update.
    """
    room = get_room_by_code(code)
    if display_name is not None and not isinstance(display_name, str):
        raise ValidationError('Display name must be a string')
    if display_name and display_name.strip():
        user.display_name = display_name.strip()[:64]
        db.session.add(user)
    member = RoomMember.query.filter_by(room_id=room.id, user_id=user.id).first()
    if member is None:
        db.session.add(RoomMember(room_id=room.id, user_id=user.id))
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict('You have already joined this room')
    current_app.logger.info(
        f"[room-join] room={room.id} user={user.id} rejoin={member is not None}"
    )
    return room


def list_members(room_id: int) -> list:
    room = get_room(room_id)
    return RoomMember.query.filter_by(room_id=room.id).order_by(RoomMember.id).all()


def _close_open_sessions(room: Room) -> int:
    return GameSession.query.filter_by(room_id=room.id, ended_at=None).update(
        {GameSession.ended_at: utcnow()}, synchronize_session=False
    )


def start_game(room_id: int, user: User) -> GameSession:
    """Reset the room to its first question and open the owner's session.

    Restarting a playing room closes every open session of the previous
    run; players open new ones through ``start_session``.
    """
    room = get_room(room_id)
    require_owner(room, user, 'start the game')
    if room.status == ROOM_FINISHED:
        raise Conflict('This game has already finished')
    if Question.query.filter_by(room_id=room.id).count() == 0:
        raise Conflict('Add at least one question before starting')

    prev_status = room.status
    closed = _close_open_sessions(room)
    QuestionRound.query.filter_by(room_id=room.id).delete(synchronize_session=False)
    room.status = ROOM_PLAYING
    room.current_question_index = 0
    db.session.add(room)
    db.session.add(QuestionRound(room_id=room.id, question_index=0, started_at=time.time()))
    session = GameSession(room_id=room.id, user_id=user.id)
    db.session.add(session)
    db.session.commit()
    current_app.logger.info(
        f"[room-start] room={room.id} {prev_status} -> {room.status} session={session.id} closed_sessions={closed}"
    )
    return session


def advance_question(room_id: int, user: User, expected_index=None) -> Room:
    """Move the room to its next question.

    The increment happens in SQL. With ``expected_index`` it only applies
    while the pointer still holds that value, so a duplicate click cannot
    skip a question.
    """
    room = get_room(room_id)
    require_owner(room, user, 'advance the question')
    prev_index = room.current_question_index

    query = Room.query.filter(Room.id == room.id)
    if expected_index is not None:
        query = query.filter(Room.current_question_index == expected_index)
    updated = query.update(
        {
            Room.current_question_index: Room.current_question_index + 1,
            Room.updated_at: utcnow(),
        },
        synchronize_session=False,
    )
    if not updated:
        db.session.rollback()
        current_app.logger.info(
            f"[room-advance-stale] room={room.id} expected={expected_index} actual={prev_index}"
        )
        raise Conflict(f'Question index is no longer {expected_index}')

    db.session.refresh(room)
    new_index = room.current_question_index
    round_ = QuestionRound.query.filter_by(room_id=room.id, question_index=new_index).first()
    if round_ is None:
        db.session.add(QuestionRound(room_id=room.id, question_index=new_index, started_at=time.time()))
    else:
        round_.started_at = time.time()
        db.session.add(round_)
    db.session.commit()
    current_app.logger.info(f"[room-advance] room={room.id} index {new_index - 1} -> {new_index}")
    return room


def finish_game(room_id: int, user: User) -> Room:
    room = get_room(room_id)
    require_owner(room, user, 'finish the game')
    if room.status == ROOM_FINISHED:
        return room
    prev_status = room.status
    closed = _close_open_sessions(room)
    room.status = ROOM_FINISHED
    db.session.add(room)
    db.session.commit()
    current_app.logger.info(
        f"[room-finish] room={room.id} {prev_status} -> {room.status} closed_sessions={closed}"
    )
    return room


def leaderboard(room_id: int) -> list:
    """Per-session scores for a room, best first."""
    room = get_room(room_id)
    sessions = (
        GameSession.query.filter_by(room_id=room.id)
        .order_by(GameSession.final_score.desc(), GameSession.id)
        .all()
    )
    return [
        {
            'session_id': s.id,
            'user_id': s.user_id,
            'name': s.user.name if s.user else None,
            'final_score': s.final_score,
            'ended_at': s.ended_at.isoformat() if s.ended_at else None,
        }
        for s in sessions
    ]
