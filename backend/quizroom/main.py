from flask import Blueprint, request, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user
from quizroom import db
from quizroom.api import str_field
from quizroom.errors import Unauthorized, ValidationError
from quizroom.models import User

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the quiz room server!'})

@main.route('/api/auth/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    username = str_field(data, 'username', required=False)
    password = data.get('password')
    if password is not None and not isinstance(password, str):
        raise ValidationError('password must be a string')
    if not username or not password:
        raise ValidationError('Missing username or password')

    if User.query.filter_by(username=username).first():
        raise ValidationError('Username already exists')

    user = User(username=username, display_name=str_field(data, 'name', required=False))
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    login_user(user, remember=True)
    current_app.logger.info(f"[register] user={user.id}")
    return jsonify({'user': user.to_dict()}), 201

@main.route('/api/auth/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    username = str_field(data, 'username', required=False)
    password = data.get('password')
    user = User.query.filter_by(username=username).first() if username else None
    if user and isinstance(password, str) and user.check_password(password):
        login_user(user, remember=True)
        return jsonify({'user': user.to_dict()})
    raise Unauthorized('Invalid username or password')

@main.route('/api/auth/me')
def me():
    if not current_user.is_authenticated:
        return jsonify({'user': None})
    return jsonify({'user': current_user.to_dict()})

@main.route('/api/auth/name', methods=['POST'])
@login_required
def update_name():
    data = request.get_json(silent=True) or {}
    name = str_field(data, 'name')
    user = current_user._get_current_object()
    user.display_name = name[:64]
    db.session.add(user)
    db.session.commit()
    return jsonify({'success': True, 'user': user.to_dict()})

@main.route('/api/auth/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'success': True})
