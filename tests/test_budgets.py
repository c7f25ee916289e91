from datetime import datetime
from decimal import Decimal

import pytest

from pettycash.exceptions import NotFoundError, ValidationError
from pettycash.models import AccountBudget
from pettycash.services import budgets, vouchers
from tests.conftest import make_fund, make_voucher

MARCH = {'start_date': datetime(2024, 3, 1), 'end_date': datetime(2024, 3, 31, 23, 59, 59)}


def _budget(account, amount='1000', **extra):
    fields = dict(MARCH, chart_of_account_id=account, budget_amount=amount, period='monthly')
    fields.update(extra)
    return budgets.create_budget(fields)


def test_spending_counts_only_live_vouchers_in_window(ctx, users, account):
    make_fund('10000')
    make_voucher('300', users['preparer'], account_id=account, date=datetime(2024, 3, 5))
    approved = make_voucher('200', users['preparer'], account_id=account, date=datetime(2024, 3, 31))
    rejected = make_voucher('400', users['preparer'], account_id=account, date=datetime(2024, 3, 10))
    make_voucher('999', users['preparer'], account_id=account, date=datetime(2024, 4, 1))
    make_voucher('50', users['preparer'], date=datetime(2024, 3, 6))
    vouchers.approve_voucher(approved.id, users['approver'])
    vouchers.reject_voucher(rejected.id, users['approver'])

    status = budgets.budget_status(_budget(account))
    assert status['current_spending'] == '500.00'
    assert status['percentage_used'] == '50.00'
    assert status['alert'] is False

    # spending is recomputed, never accumulated
    assert budgets.get_budgets()[0]['current_spending'] == '500.00'
    assert budgets.get_budgets()[0]['current_spending'] == '500.00'


def test_alert_at_threshold(ctx, users, account):
    make_voucher('800', users['preparer'], account_id=account, date=datetime(2024, 3, 5))

    status = budgets.budget_status(_budget(account))
    assert status['percentage_used'] == '80.00'
    assert status['alert'] is True

    quiet = budgets.budget_status(_budget(account, alert_threshold=Decimal('90')))
    assert quiet['alert'] is False


def test_zero_budget_reports_zero_percent(ctx, users, account):
    make_voucher('10', users['preparer'], account_id=account, date=datetime(2024, 3, 5))
    status = budgets.budget_status(_budget(account, amount='0'))
    assert status['percentage_used'] == '0.00'


def test_percentage_is_rounded():
    assert budgets.percentage_used(Decimal('1'), Decimal('3')) == Decimal('33.33')


def test_default_threshold(ctx, account):
    assert _budget(account).alert_threshold == Decimal('80')


def test_create_requires_fields(ctx, account):
    with pytest.raises(ValidationError):
        budgets.create_budget({'chart_of_account_id': account})


def test_create_rejects_reversed_window(ctx, account):
    with pytest.raises(ValidationError):
        _budget(account, start_date=datetime(2024, 4, 1), end_date=datetime(2024, 3, 1))


def test_create_rejects_unknown_account(ctx):
    with pytest.raises(NotFoundError):
        _budget(404)


def test_update_and_delete(ctx, account):
    budget = _budget(account)
    updated = budgets.update_budget(budget.id, {'budget_amount': '2500', 'period': 'quarterly'})
    assert updated.budget_amount == Decimal('2500.00')
    assert updated.period.value == 'quarterly'

    budgets.delete_budget(budget.id)
    assert AccountBudget.query.count() == 0
    with pytest.raises(NotFoundError):
        budgets.delete_budget(budget.id)
