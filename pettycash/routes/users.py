"""User administration routes"""
from flask import Blueprint, jsonify
from flask_login import current_user, login_required
from pettycash import db
from pettycash.exceptions import NotFoundError
from pettycash.forms import RoleForm, load_form
from pettycash.models.user import User, UserRole
from pettycash.services import audit
from pettycash.utils import role_required

users_bp = Blueprint('users', __name__, url_prefix='/api/users')


@users_bp.route('')
@login_required
def list_users():
    users = User.query.order_by(User.first_name, User.username).all()
    return jsonify([user.to_dict() for user in users])


@users_bp.route('/<int:user_id>/role', methods=['PATCH'])
@role_required(UserRole.ADMIN)
def update_role(user_id):
    form = load_form(RoleForm)
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError('User', user_id)

    old_role = user.role.value
    user.role = UserRole(form.role.data)
    db.session.commit()

    audit.record('user', user.id, 'role_changed', old_value={'role': old_role},
                 new_value={'role': user.role.value}, user_id=current_user.id,
                 description=f'Changed role of {user.username} from {old_role} to {user.role.value}')
    return jsonify(user.to_dict())
