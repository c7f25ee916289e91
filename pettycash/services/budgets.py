"""Budget monitor: spend per account against configured limits.

Spending is never stored; it is summed from voucher items on every read.
"""
import logging
from decimal import Decimal

from sqlalchemy import func

from pettycash import db
from pettycash.exceptions import NotFoundError, ValidationError
from pettycash.models.account import ChartOfAccount
from pettycash.models.budget import AccountBudget
from pettycash.models.enums import BudgetPeriod, VoucherStatus
from pettycash.models.voucher import Voucher, VoucherItem
from pettycash.services import audit, unit_of_work
from pettycash.utils import CENTS, money_str, to_decimal

logger = logging.getLogger(__name__)

DEFAULT_ALERT_THRESHOLD = Decimal('80')


def get_budget_spending(chart_of_account_id, start_date, end_date):
    """Sum of non-rejected item amounts for the account within [start_date, end_date]."""
    total = (db.session.query(func.coalesce(func.sum(VoucherItem.amount), 0))
             .join(Voucher, VoucherItem.voucher_id == Voucher.id)
             .filter(VoucherItem.chart_of_account_id == chart_of_account_id,
                     Voucher.date >= start_date,
                     Voucher.date <= end_date,
                     Voucher.status != VoucherStatus.REJECTED)
             .scalar())
    return Decimal(str(total or 0)).quantize(CENTS)


def percentage_used(spending, budget_amount):
    budget_amount = Decimal(budget_amount or 0)
    if budget_amount == 0:
        return Decimal('0.00')
    return (Decimal(spending) / budget_amount * 100).quantize(CENTS)


def budget_status(budget):
    """The budget with its spending recomputed."""
    spending = get_budget_spending(budget.chart_of_account_id, budget.start_date, budget.end_date)
    used = percentage_used(spending, budget.budget_amount)
    threshold = Decimal(budget.alert_threshold if budget.alert_threshold is not None
                        else DEFAULT_ALERT_THRESHOLD)
    data = budget.to_dict()
    data.update({
        'chart_of_account': budget.chart_of_account.to_dict() if budget.chart_of_account else None,
        'current_spending': money_str(spending),
        'percentage_used': str(used),
        'alert': used >= threshold,
    })
    return data


def get_budgets():
    budgets = AccountBudget.query.order_by(AccountBudget.chart_of_account_id, AccountBudget.id).all()
    return [budget_status(budget) for budget in budgets]


def get_budget(budget_id):
    budget = db.session.get(AccountBudget, budget_id)
    if budget is None:
        raise NotFoundError('Budget', budget_id)
    return budget


def _apply(budget, fields):
    if 'chart_of_account_id' in fields:
        account_id = fields['chart_of_account_id']
        if account_id is None or db.session.get(ChartOfAccount, account_id) is None:
            raise NotFoundError('Chart of account', account_id)
        budget.chart_of_account_id = account_id
    if 'budget_amount' in fields:
        amount = to_decimal(fields['budget_amount'], 'budget_amount')
        if amount is None or amount < 0:
            raise ValidationError('budget_amount must be zero or more', field='budget_amount')
        budget.budget_amount = amount
    if 'period' in fields:
        try:
            budget.period = BudgetPeriod(fields['period'])
        except ValueError:
            raise ValidationError(f'Unknown budget period: {fields["period"]}', field='period')
    if 'start_date' in fields:
        budget.start_date = fields['start_date']
    if 'end_date' in fields:
        budget.end_date = fields['end_date']
    if 'alert_threshold' in fields:
        threshold = fields['alert_threshold']
        budget.alert_threshold = (DEFAULT_ALERT_THRESHOLD if threshold in (None, '')
                                  else to_decimal(threshold, 'alert_threshold'))
    if budget.start_date and budget.end_date and budget.end_date < budget.start_date:
        raise ValidationError('end_date must not be before start_date', field='end_date')


def create_budget(fields, user_id=None):
    required = ('chart_of_account_id', 'budget_amount', 'period', 'start_date', 'end_date')
    missing = [name for name in required if fields.get(name) in (None, '')]
    if missing:
        raise ValidationError(f'Missing required fields: {", ".join(missing)}', fields=missing)

    with unit_of_work('create budget'):
        budget = AccountBudget()
        fields = dict(fields)
        fields.setdefault('alert_threshold', None)
        _apply(budget, fields)
        db.session.add(budget)

    logger.info('Budget %s set at %s for account %s', budget.id, budget.budget_amount, budget.chart_of_account_id)
    audit.record('budget', budget.id, 'created', new_value=budget.to_dict(), user_id=user_id,
                 description=f'Created budget of {budget.budget_amount} for account')
    return budget


def update_budget(budget_id, fields, user_id=None):
    with unit_of_work('update budget'):
        budget = get_budget(budget_id)
        old_value = budget.to_dict()
        _apply(budget, fields)

    audit.record('budget', budget.id, 'updated', old_value=old_value, new_value=budget.to_dict(),
                 user_id=user_id, description='Updated budget')
    return budget


def delete_budget(budget_id, user_id=None):
    with unit_of_work('delete budget'):
        budget = get_budget(budget_id)
        old_value = budget.to_dict()
        db.session.delete(budget)

    audit.record('budget', budget_id, 'deleted', old_value=old_value, user_id=user_id,
                 description='Deleted budget')
