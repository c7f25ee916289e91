"""Chart of accounts routes"""
from flask import Blueprint, jsonify
from flask_login import current_user, login_required
from pettycash.forms import ChartOfAccountForm, load_form
from pettycash.models.enums import UserRole
from pettycash.services import accounts
from pettycash.utils import role_required

account_bp = Blueprint('account', __name__, url_prefix='/api/chart-of-accounts')


@account_bp.route('')
@login_required
def list_accounts():
    return jsonify([a.to_dict() for a in accounts.get_accounts()])


@account_bp.route('', methods=['POST'])
@role_required(UserRole.PREPARER, UserRole.ADMIN)
def create_account():
    form = load_form(ChartOfAccountForm)
    account = accounts.create_account(
        code=form.code.data.strip(),
        name=form.name.data.strip(),
        description=form.description.data or None,
        user_id=current_user.id
    )
    return jsonify(account.to_dict()), 201


@account_bp.route('/<int:account_id>', methods=['PATCH'])
@role_required(UserRole.PREPARER, UserRole.ADMIN)
def update_account(account_id):
    form = load_form(ChartOfAccountForm)
    account = accounts.update_account(
        account_id,
        user_id=current_user.id,
        code=form.code.data.strip(),
        name=form.name.data.strip(),
        description=form.description.data
    )
    return jsonify(account.to_dict())


@account_bp.route('/<int:account_id>', methods=['DELETE'])
@role_required(UserRole.PREPARER, UserRole.ADMIN)
def delete_account(account_id):
    accounts.delete_account(account_id, user_id=current_user.id)
    return '', 204
