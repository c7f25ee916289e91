"""Authentication routes - username/password sessions"""
from flask import Blueprint, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from pettycash import db
from pettycash.exceptions import ValidationError
from pettycash.forms import LoginForm, RegisterForm, load_form
from pettycash.models.user import User, UserRole
from pettycash.services import audit
from pettycash.utils import utcnow

auth_bp = Blueprint('auth', __name__, url_prefix='/api')


@auth_bp.route('/register', methods=['POST'])
def register():
    """User registration; new accounts wait for an admin to assign a role"""
    form = load_form(RegisterForm)
    username = form.username.data.strip()
    if User.query.filter_by(username=username).first():
        raise ValidationError('Username already exists', field='username')

    user = User(
        username=username,
        first_name=form.first_name.data or None,
        last_name=form.last_name.data or None,
        role=UserRole.PENDING
    )
    user.set_password(form.password.data)
    db.session.add(user)
    db.session.commit()

    login_user(user)
    audit.record('user', user.id, 'created', new_value=user.to_dict(), user_id=user.id,
                 description=f'Registered user {user.username}')
    return jsonify(user.to_dict()), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """User login with username/password"""
    form = load_form(LoginForm)
    user = User.query.filter_by(username=form.username.data.strip()).first()

    if user is None or not user.check_password(form.password.data):
        return jsonify({'message': 'Invalid username or password', 'code': 'invalid_credentials'}), 401

    login_user(user)
    user.last_login = utcnow()
    db.session.commit()
    return jsonify(user.to_dict())


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """Logout user"""
    logout_user()
    return jsonify({'message': 'Logged out'})


@auth_bp.route('/user')
@login_required
def current():
    return jsonify(current_user.to_dict())
