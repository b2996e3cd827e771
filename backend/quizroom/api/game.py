from flask import Blueprint, jsonify, request
from flask_login import login_required

from quizroom.api import caller, int_field
from quizroom.services import sessions as session_service

game = Blueprint('game', __name__)


@game.route('/sessions', methods=['POST'])
@login_required
def start_session():
    data = request.get_json(silent=True) or {}
    room_id = int_field(data, 'room_id', required=False)
    session = session_service.start_session(caller(), room_id=room_id)
    return jsonify({'success': True, 'session': session.to_dict()}), 201


@game.route('/sessions/<int:session_id>', methods=['GET'])
@login_required
def get_session(session_id):
    session = session_service.get_session(caller(), session_id)
    return jsonify(session.to_dict(include_answers=True))


@game.route('/sessions/<int:session_id>/end', methods=['POST'])
@login_required
def end_session(session_id):
    session = session_service.end_session(caller(), session_id)
    return jsonify({'success': True, 'session': session.to_dict()})


@game.route('/answers', methods=['POST'])
@login_required
def record_answer():
    data = request.get_json(silent=True) or {}
    session_id = int_field(data, 'game_session_id')
    question_id = int_field(data, 'question_id')
    time_to_answer_ms = int_field(data, 'time_to_answer_ms', required=False)
    # is_correct / points_earned from the client are ignored; the server scores
    answer = session_service.record_answer(
        caller(),
        session_id,
        question_id,
        data.get('selected_answer'),
        time_to_answer_ms=time_to_answer_ms,
    )
    return jsonify({'success': True, 'answer': answer.to_dict()}), 201
