import pytest

from quizroom import db
from quizroom.errors import Conflict, Forbidden, NotFound, RoomCodeUnavailable, ValidationError
from quizroom.models import GameSession, QuestionRound, Room, RoomMember
from quizroom.services import questions, rooms


def _add_question(user, room, text='2 + 2?'):
    return questions.add_question(user, text, '4', ['3', '5', '22'], room_id=room.id)


def test_create_room_starts_waiting(make_user):
    host = make_user('host')
    room = rooms.create_room(host)
    assert len(room.code) == 6
    assert room.owner_id == host.id
    assert room.status == 'waiting'
    assert room.current_question_index == 0


def test_create_room_retries_code_collisions(make_user, monkeypatch):
    host = make_user('host')
    codes = iter(['AAAAAA', 'AAAAAA', 'BBBBBB'])
    monkeypatch.setattr(rooms, 'generate_code', lambda length=6: next(codes))
    first = rooms.create_room(host)
    second = rooms.create_room(host)
    assert first.code == 'AAAAAA'
    assert second.code == 'BBBBBB'


def test_create_room_gives_up_after_bounded_attempts(make_user, monkeypatch):
    host = make_user('host')
    calls = []

    def same_code(length=6):
        calls.append(length)
        return 'ZZZZZZ'

    monkeypatch.setattr(rooms, 'generate_code', same_code)
    rooms.create_room(host)
    calls.clear()
    with pytest.raises(RoomCodeUnavailable):
        rooms.create_room(host)
    assert len(calls) == 5
    assert Room.query.count() == 1


def test_lookup_by_code_is_case_insensitive(make_user):
    room = rooms.create_room(make_user('host'))
    assert rooms.get_room_by_code(room.code.lower()).id == room.id
    with pytest.raises(NotFound):
        rooms.get_room_by_code('NOPE00')
    with pytest.raises(NotFound):
        rooms.get_room(9999)


def test_join_unknown_code_writes_nothing(make_user):
    player = make_user('player')
    with pytest.raises(NotFound):
        rooms.join_room('XXXXXX', player)
    assert RoomMember.query.count() == 0


def test_join_rejects_non_string_code_and_name(make_user):
    host = make_user('host')
    player = make_user('player')
    room = rooms.create_room(host)
    with pytest.raises(ValidationError):
        rooms.join_room(123456, player)
    with pytest.raises(ValidationError):
        rooms.join_room(room.code, player, display_name=7)
    assert RoomMember.query.count() == 0


def test_join_and_rejoin(make_user):
    host = make_user('host')
    player = make_user('player')
    room = rooms.create_room(host)

    rooms.join_room(room.code, player, display_name='Alice')
    rooms.join_room(room.code, player, display_name='Ally')

    members = rooms.list_members(room.id)
    assert [m.user_id for m in members] == [player.id]
    assert members[0].to_dict()['name'] == 'Ally'


def test_members_keep_join_order(make_user):
    host = make_user('host')
    room = rooms.create_room(host)
    names = ['a', 'b', 'c']
    for n in names:
        rooms.join_room(room.code, make_user(n))
    assert [m.user.username for m in rooms.list_members(room.id)] == names


def test_start_game_is_owner_only(make_user):
    host = make_user('host')
    player = make_user('player')
    room = rooms.create_room(host)
    rooms.join_room(room.code, player)
    _add_question(host, room)
    with pytest.raises(Forbidden):
        rooms.start_game(room.id, player)
    assert db.session.get(Room, room.id).status == 'waiting'


def test_start_game_requires_questions(make_user):
    host = make_user('host')
    room = rooms.create_room(host)
    with pytest.raises(Conflict):
        rooms.start_game(room.id, host)


def test_start_game_resets_pointer_and_opens_session(make_user):
    host = make_user('host')
    room = rooms.create_room(host)
    _add_question(host, room)
    _add_question(host, room, 'Capital of France?')
    rooms.advance_question(room.id, host)

    session = rooms.start_game(room.id, host)

    room = db.session.get(Room, room.id)
    assert room.status == 'playing'
    assert room.current_question_index == 0
    assert session.room_id == room.id and session.user_id == host.id
    assert [r.question_index for r in QuestionRound.query.filter_by(room_id=room.id)] == [0]


def test_restart_closes_previous_sessions(make_user):
    host = make_user('host')
    room = rooms.create_room(host)
    _add_question(host, room)
    first = rooms.start_game(room.id, host)
    second = rooms.start_game(room.id, host)
    assert db.session.get(GameSession, first.id).ended_at is not None
    assert db.session.get(GameSession, second.id).ended_at is None


def test_advance_by_non_owner_is_forbidden_and_leaves_index(make_user):
    host = make_user('host')
    player = make_user('player')
    room = rooms.create_room(host)
    with pytest.raises(Forbidden):
        rooms.advance_question(room.id, player)
    assert db.session.get(Room, room.id).current_question_index == 0


def test_advance_unknown_room(make_user):
    with pytest.raises(NotFound):
        rooms.advance_question(424242, make_user('host'))


def test_sequential_advances_increment_by_one(make_user):
    host = make_user('host')
    room = rooms.create_room(host)
    assert rooms.advance_question(room.id, host).current_question_index == 1
    assert rooms.advance_question(room.id, host).current_question_index == 2
    # No upper bound against the question count
    assert rooms.advance_question(room.id, host).current_question_index == 3


def test_advance_with_stale_expected_index_conflicts(make_user):
    host = make_user('host')
    room = rooms.create_room(host)
    rooms.advance_question(room.id, host, expected_index=0)
    with pytest.raises(Conflict):
        rooms.advance_question(room.id, host, expected_index=0)
    assert db.session.get(Room, room.id).current_question_index == 1


def test_advance_records_question_round(make_user):
    host = make_user('host')
    room = rooms.create_room(host)
    _add_question(host, room)
    rooms.start_game(room.id, host)
    rooms.advance_question(room.id, host)
    indexes = sorted(r.question_index for r in QuestionRound.query.filter_by(room_id=room.id))
    assert indexes == [0, 1]


def test_finish_game_closes_sessions(make_user):
    host = make_user('host')
    room = rooms.create_room(host)
    _add_question(host, room)
    session = rooms.start_game(room.id, host)

    with pytest.raises(Forbidden):
        rooms.finish_game(room.id, make_user('player'))

    finished = rooms.finish_game(room.id, host)
    assert finished.status == 'finished'
    assert db.session.get(GameSession, session.id).ended_at is not None
    # Finishing twice is harmless; restarting is not allowed
    assert rooms.finish_game(room.id, host).status == 'finished'
    with pytest.raises(Conflict):
        rooms.start_game(room.id, host)


def test_leaderboard_orders_by_score(make_user):
    host = make_user('host', display_name='Host')
    room = rooms.create_room(host)
    low = GameSession(room_id=room.id, user_id=host.id, final_score=500)
    high = GameSession(room_id=room.id, user_id=make_user('p').id, final_score=900)
    db.session.add_all([low, high])
    db.session.commit()

    board = rooms.leaderboard(room.id)
    assert [row['final_score'] for row in board] == [900, 500]
    assert board[1]['name'] == 'Host'
