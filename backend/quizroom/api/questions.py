from flask import Blueprint, jsonify, request
from flask_login import login_required

from quizroom.api import caller, int_field
from quizroom.services import questions as question_service

questions = Blueprint('questions', __name__)


@questions.route('', methods=['POST'])
@login_required
def add_question():
    data = request.get_json(silent=True) or {}
    room_id = int_field(data, 'room_id', required=False)
    # Accept either a list or the three numbered fields
    wrong_answers = data.get('wrong_answers')
    if wrong_answers is None:
        wrong_answers = [data.get('wrong_answer_1'), data.get('wrong_answer_2'), data.get('wrong_answer_3')]
    question = question_service.add_question(
        caller(),
        data.get('question_text'),
        data.get('correct_answer'),
        wrong_answers,
        room_id=room_id,
    )
    return jsonify({'success': True, 'question': question.to_dict()}), 201


@questions.route('/room/<int:room_id>', methods=['GET'])
@login_required
def get_room_questions(room_id):
    return jsonify([q.to_dict() for q in question_service.room_questions(room_id, caller())])


@questions.route('/mine', methods=['GET'])
@login_required
def get_user_questions():
    solo_only = request.args.get('solo', '').lower() in ('1', 'true', 'yes')
    return jsonify([q.to_dict() for q in question_service.user_questions(caller(), solo_only=solo_only)])
