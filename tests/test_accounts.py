from datetime import datetime

import pytest

from pettycash.exceptions import AccountInUseError, NotFoundError, ValidationError
from pettycash.models import ChartOfAccount
from pettycash.services import accounts, budgets
from tests.conftest import make_voucher


def test_create_and_list_by_code(ctx):
    accounts.create_account('6200', 'Transport')
    accounts.create_account('6100', 'Office Supplies', description='Stationery')
    assert [a.code for a in accounts.get_accounts()] == ['6100', '6200']


def test_duplicate_code(ctx):
    accounts.create_account('6100', 'Office Supplies')
    with pytest.raises(ValidationError):
        accounts.create_account('6100', 'Something else')


def test_update(ctx, account):
    accounts.create_account('6200', 'Transport')
    updated = accounts.update_account(account, name='Stationery')
    assert updated.name == 'Stationery'
    with pytest.raises(ValidationError):
        accounts.update_account(account, code='6200')


def test_unused_account_can_be_deleted(ctx, account):
    accounts.delete_account(account)
    assert ChartOfAccount.query.count() == 0
    with pytest.raises(NotFoundError):
        accounts.get_account(account)


def test_account_used_by_voucher_item(ctx, users, account):
    make_voucher('10', users['preparer'], account_id=account)
    with pytest.raises(AccountInUseError) as excinfo:
        accounts.delete_account(account)
    assert 'voucher item' in excinfo.value.message
    assert accounts.get_account(account) is not None


def test_account_used_by_budget(ctx, account):
    budgets.create_budget({
        'chart_of_account_id': account, 'budget_amount': '100', 'period': 'yearly',
        'start_date': datetime(2024, 1, 1), 'end_date': datetime(2024, 12, 31),
    })
    with pytest.raises(AccountInUseError) as excinfo:
        accounts.delete_account(account)
    assert 'budget' in excinfo.value.message
