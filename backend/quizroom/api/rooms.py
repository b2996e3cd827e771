from flask import Blueprint, jsonify, request
from flask_login import login_required

from quizroom.api import caller, int_field, str_field
from quizroom.services import rooms as room_service

rooms = Blueprint('rooms', __name__)


@rooms.route('', methods=['POST'])
@login_required
def create_room():
    room = room_service.create_room(caller())
    return jsonify(room.to_dict()), 201


@rooms.route('/code/<string:code>', methods=['GET'])
def get_room_by_code(code):
    return jsonify(room_service.get_room_by_code(code).to_dict())


@rooms.route('/join', methods=['POST'])
@login_required
def join_room():
    data = request.get_json(silent=True) or {}
    room = room_service.join_room(str_field(data, 'code'), caller(), str_field(data, 'name', required=False))
    return jsonify(room.to_dict())


@rooms.route('/<int:room_id>', methods=['GET'])
def get_room_details(room_id):
    return jsonify(room_service.get_room(room_id).to_dict())


@rooms.route('/<int:room_id>/members', methods=['GET'])
@login_required
def get_members(room_id):
    return jsonify([m.to_dict() for m in room_service.list_members(room_id)])


@rooms.route('/<int:room_id>/advance', methods=['POST'])
@login_required
def advance_question(room_id):
    data = request.get_json(silent=True) or {}
    expected_index = int_field(data, 'expected_index', required=False)
    room = room_service.advance_question(room_id, caller(), expected_index=expected_index)
    return jsonify({'success': True, 'room': room.to_dict()})


@rooms.route('/<int:room_id>/finish', methods=['POST'])
@login_required
def finish_game(room_id):
    room = room_service.finish_game(room_id, caller())
    return jsonify({'success': True, 'room': room.to_dict()})


@rooms.route('/<int:room_id>/leaderboard', methods=['GET'])
@login_required
def get_leaderboard(room_id):
    return jsonify(room_service.leaderboard(room_id))
