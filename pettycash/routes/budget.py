"""Budget routes for Petty Cash Manager"""
from flask import Blueprint, jsonify
from flask_login import current_user, login_required
from pettycash.forms import BudgetForm, BudgetUpdateForm, load_form, provided_fields
from pettycash.models.enums import UserRole
from pettycash.services import budgets
from pettycash.utils import role_required

budget_bp = Blueprint('budget', __name__, url_prefix='/api/budgets')


@budget_bp.route('')
@login_required
def list_budgets():
    return jsonify(budgets.get_budgets())


@budget_bp.route('', methods=['POST'])
@role_required(UserRole.PREPARER, UserRole.ADMIN)
def create_budget():
    form = load_form(BudgetForm)
    budget = budgets.create_budget(form.data, user_id=current_user.id)
    return jsonify(budgets.budget_status(budget)), 201


@budget_bp.route('/<int:budget_id>', methods=['PATCH'])
@role_required(UserRole.PREPARER, UserRole.ADMIN)
def update_budget(budget_id):
    form = load_form(BudgetUpdateForm)
    budget = budgets.update_budget(budget_id, provided_fields(form), user_id=current_user.id)
    return jsonify(budgets.budget_status(budget))


@budget_bp.route('/<int:budget_id>', methods=['DELETE'])
@role_required(UserRole.PREPARER, UserRole.ADMIN)
def delete_budget(budget_id):
    budgets.delete_budget(budget_id, user_id=current_user.id)
    return '', 204
