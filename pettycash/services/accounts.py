"""Chart of accounts maintenance"""
import logging

from pettycash import db
from pettycash.exceptions import AccountInUseError, NotFoundError, ValidationError
from pettycash.models.account import ChartOfAccount
from pettycash.models.budget import AccountBudget
from pettycash.models.voucher import VoucherItem
from pettycash.services import audit, unit_of_work

logger = logging.getLogger(__name__)


def get_accounts():
    return ChartOfAccount.query.order_by(ChartOfAccount.code).all()


def get_account(account_id):
    account = db.session.get(ChartOfAccount, account_id)
    if account is None:
        raise NotFoundError('Chart of account', account_id)
    return account


def _ensure_unique_code(code, account_id=None):
    query = ChartOfAccount.query.filter(ChartOfAccount.code == code)
    if account_id is not None:
        query = query.filter(ChartOfAccount.id != account_id)
    if query.first() is not None:
        raise ValidationError(f'Account code {code} is already in use', field='code')


def create_account(code, name, description=None, user_id=None):
    with unit_of_work('create chart of account'):
        _ensure_unique_code(code)
        account = ChartOfAccount(code=code, name=name, description=description)
        db.session.add(account)

    audit.record('chart_of_account', account.id, 'created', new_value=account.to_dict(),
                 user_id=user_id, description=f'Created account {code} - {name}')
    return account


def update_account(account_id, user_id=None, **fields):
    with unit_of_work('update chart of account'):
        account = get_account(account_id)
        old_value = account.to_dict()
        if fields.get('code') and fields['code'] != account.code:
            _ensure_unique_code(fields['code'], account.id)
        for name in ('code', 'name', 'description'):
            if name in fields and fields[name] is not None:
                setattr(account, name, fields[name])

    audit.record('chart_of_account', account.id, 'updated', old_value=old_value,
                 new_value=account.to_dict(), user_id=user_id,
                 description=f'Updated account {account.code}')
    return account


def delete_account(account_id, user_id=None):
    """Delete an account that no voucher item or budget refers to."""
    with unit_of_work('delete chart of account'):
        account = get_account(account_id)
        item_refs = VoucherItem.query.filter_by(chart_of_account_id=account_id).count()
        if item_refs:
            raise AccountInUseError(
                f'Cannot delete chart of account: it is referenced by {item_refs} voucher item(s)',
                voucher_items=item_refs)
        budget_refs = AccountBudget.query.filter_by(chart_of_account_id=account_id).count()
        if budget_refs:
            raise AccountInUseError(
                f'Cannot delete chart of account: it is referenced by {budget_refs} budget(s)',
                budgets=budget_refs)
        old_value = account.to_dict()
        db.session.delete(account)

    logger.info('Deleted chart of account %s', old_value['code'])
    audit.record('chart_of_account', account_id, 'deleted', old_value=old_value, user_id=user_id,
                 description=f'Deleted account {old_value["code"]}')
