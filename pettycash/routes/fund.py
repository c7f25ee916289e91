"""Petty cash fund routes"""
from flask import Blueprint, jsonify
from flask_login import current_user, login_required
from pettycash.forms import FundForm, FundUpdateForm, load_form
from pettycash.models.enums import UserRole
from pettycash.services import fund as fund_service
from pettycash.utils import role_required

fund_bp = Blueprint('fund', __name__, url_prefix='/api/fund')


@fund_bp.route('')
@login_required
def view_fund():
    fund = fund_service.get_fund()
    if fund is None:
        return jsonify({'message': 'Fund not configured', 'code': 'fund_not_configured'}), 404
    return jsonify(fund.to_dict())


@fund_bp.route('', methods=['POST'])
@role_required(UserRole.PREPARER, UserRole.ADMIN)
def create_fund():
    form = load_form(FundForm)
    fund = fund_service.create_fund(
        imprest_amount=form.imprest_amount.data,
        manager_id=current_user.id,
        current_balance=form.current_balance.data
    )
    return jsonify(fund.to_dict()), 201


@fund_bp.route('/<int:fund_id>', methods=['PATCH'])
@role_required(UserRole.PREPARER, UserRole.ADMIN)
def update_fund(fund_id):
    form = load_form(FundUpdateForm)
    fund = fund_service.update_imprest_amount(fund_id, form.imprest_amount.data, user_id=current_user.id)
    return jsonify(fund.to_dict())
