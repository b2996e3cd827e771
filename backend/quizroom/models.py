from quizroom import db, bcrypt
from flask_login import UserMixin
from datetime import datetime, timezone

ROOM_WAITING = 'waiting'
ROOM_PLAYING = 'playing'
ROOM_FINISHED = 'finished'
ROOM_STATUSES = (ROOM_WAITING, ROOM_PLAYING, ROOM_FINISHED)

# Recorded in place of an answer when the question timer ran out
TIMEOUT_ANSWER = 'timeout'


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _iso(value):
    return value.isoformat() if value else None


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    display_name = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    @property
    def name(self):
        return self.display_name or self.username

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'name': self.name,
        }


class Room(db.Model):
    __tablename__ = 'room'
    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(10), unique=True, nullable=False, index=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    status = db.Column(db.String(16), default=ROOM_WAITING, nullable=False)  # waiting, playing, finished
    current_question_index = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    owner = db.relationship('User')
    members = db.relationship('RoomMember', back_populates='room', order_by='RoomMember.id')

    def to_dict(self):
        return {
            'id': self.id,
            'code': self.code,
            'owner_id': self.owner_id,
            'status': self.status,
            'current_question_index': self.current_question_index,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class RoomMember(db.Model):
    __tablename__ = 'room_member'
    __table_args__ = (db.UniqueConstraint('room_id', 'user_id', name='uq_room_member_room_user'),)
    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.Integer, db.ForeignKey('room.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    joined_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    room = db.relationship('Room', back_populates='members')
    user = db.relationship('User')

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'name': self.user.name if self.user else None,
            'joined_at': _iso(self.joined_at),
        }


class Question(db.Model):
    __tablename__ = 'question'
    id = db.Column(db.Integer, primary_key=True)
    created_by = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    # Null room_id means the question sits in its author's solo bank
    room_id = db.Column(db.Integer, db.ForeignKey('room.id'), nullable=True, index=True)
    question_text = db.Column(db.Text, nullable=False)
    correct_answer = db.Column(db.String(255), nullable=False)
    wrong_answer_1 = db.Column(db.String(255), nullable=False)
    wrong_answer_2 = db.Column(db.String(255), nullable=False)
    wrong_answer_3 = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    @property
    def wrong_answers(self):
        return [self.wrong_answer_1, self.wrong_answer_2, self.wrong_answer_3]

    def to_dict(self):
        return {
            'id': self.id,
            'created_by': self.created_by,
            'room_id': self.room_id,
            'question_text': self.question_text,
            'correct_answer': self.correct_answer,
            'wrong_answers': self.wrong_answers,
            'created_at': _iso(self.created_at),
        }


class QuestionRound(db.Model):
    """Server-side start instant of one question window in a room."""
    __tablename__ = 'question_round'
    __table_args__ = (db.UniqueConstraint('room_id', 'question_index', name='uq_question_round_room_index'),)
    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.Integer, db.ForeignKey('room.id'), nullable=False, index=True)
    question_index = db.Column(db.Integer, nullable=False)
    started_at = db.Column(db.Float, nullable=False)  # epoch seconds


class GameSession(db.Model):
    __tablename__ = 'game_session'
    id = db.Column(db.Integer, primary_key=True)
    # Null room_id means a solo play-through
    room_id = db.Column(db.Integer, db.ForeignKey('room.id'), nullable=True, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    started_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    ended_at = db.Column(db.DateTime, nullable=True)
    final_score = db.Column(db.Integer, default=0, nullable=False)

    user = db.relationship('User')
    answers = db.relationship('PlayerAnswer', back_populates='session', lazy='dynamic')

    @property
    def is_open(self):
        return self.ended_at is None

    def to_dict(self, include_answers=False):
        data = {
            'id': self.id,
            'room_id': self.room_id,
            'user_id': self.user_id,
            'started_at': _iso(self.started_at),
            'ended_at': _iso(self.ended_at),
            'final_score': self.final_score,
        }
        if include_answers:
            data['answers'] = [a.to_dict() for a in self.answers.order_by(PlayerAnswer.id)]
        return data


class PlayerAnswer(db.Model):
    __tablename__ = 'player_answer'
    __table_args__ = (db.UniqueConstraint('game_session_id', 'question_id', name='uq_player_answer_session_question'),)
    id = db.Column(db.Integer, primary_key=True)
    game_session_id = db.Column(db.Integer, db.ForeignKey('game_session.id'), nullable=False, index=True)
    question_id = db.Column(db.Integer, db.ForeignKey('question.id'), nullable=False)
    selected_answer = db.Column(db.String(255), nullable=False)
    is_correct = db.Column(db.Boolean, default=False, nullable=False)
    points_earned = db.Column(db.Integer, default=0, nullable=False)
    time_to_answer = db.Column(db.Integer, default=0, nullable=False)  # milliseconds
    answered_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    session = db.relationship('GameSession', back_populates='answers')

    def to_dict(self):
        return {
            'id': self.id,
            'game_session_id': self.game_session_id,
            'question_id': self.question_id,
            'selected_answer': self.selected_answer,
            'is_correct': self.is_correct,
            'points_earned': self.points_earned,
            'time_to_answer': self.time_to_answer,
            'answered_at': _iso(self.answered_at),
        }
