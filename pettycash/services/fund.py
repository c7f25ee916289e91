"""Fund ledger: the imprest fund and the only two ways its balance moves.

``debit_fund`` and ``reset_fund`` run inside the caller's unit of work. Both
take a row lock on the fund (``SELECT ... FOR UPDATE`` where the database
supports it) and the fund's version column turns any interleaved write into
a ``StaleDataError`` rather than a lost update.
"""
import logging
from decimal import Decimal

from pettycash import db
from pettycash.exceptions import (
    FundAlreadyConfiguredError, InsufficientFundsError, NotFoundError, ValidationError
)
from pettycash.models.fund import PettyCashFund
from pettycash.services import audit, unit_of_work
from pettycash.utils import utcnow, to_decimal

logger = logging.getLogger(__name__)


def get_fund():
    """The configured fund, or None when none has been set up yet."""
    return PettyCashFund.query.order_by(PettyCashFund.id).first()


def _locked_fund():
    return (db.session.query(PettyCashFund)
            .order_by(PettyCashFund.id)
            .with_for_update()
            .populate_existing()
            .first())


def _positive(value, field):
    amount = to_decimal(value, field)
    if amount is None or amount <= 0:
        raise ValidationError(f'{field} must be a positive number', field=field)
    return amount


def create_fund(imprest_amount, manager_id=None, current_balance=None):
    """Configure the fund. Only allowed while no fund exists."""
    imprest = _positive(imprest_amount, 'imprest_amount')
    balance = imprest if current_balance in (None, '') else to_decimal(current_balance, 'current_balance')
    if balance < 0:
        raise ValidationError('current_balance cannot be negative', field='current_balance')

    with unit_of_work('create fund'):
        if get_fund() is not None:
            raise FundAlreadyConfiguredError('A petty cash fund is already configured')
        fund = PettyCashFund(imprest_amount=imprest, current_balance=balance, manager_id=manager_id)
        db.session.add(fund)

    logger.info('Fund %s configured with imprest %s', fund.id, imprest)
    audit.record('fund', fund.id, 'created', new_value=fund.to_dict(), user_id=manager_id,
                 description=f'Configured petty cash fund with imprest amount {imprest}')
    return fund


def update_imprest_amount(fund_id, new_amount, user_id=None):
    """Change the target balance. The current balance is left as it is."""
    amount = _positive(new_amount, 'imprest_amount')
    with unit_of_work('update imprest amount'):
        fund = db.session.get(PettyCashFund, fund_id)
        if fund is None:
            raise NotFoundError('Fund', fund_id)
        old_amount = fund.imprest_amount
        fund.imprest_amount = amount

    audit.record('fund', fund.id, 'updated',
                 old_value={'imprest_amount': str(old_amount)},
                 new_value={'imprest_amount': str(amount)},
                 user_id=user_id,
                 description=f'Changed imprest amount from {old_amount} to {amount}')
    return fund


def debit_fund(amount):
    """Take ``amount`` out of the fund inside the current transaction.

    Returns the fund, or None when no fund is configured (no check applies).
    """
    fund = _locked_fund()
    if fund is None:
        logger.warning('No petty cash fund configured; %s disbursed without a balance check', amount)
        return None
    available = Decimal(fund.current_balance)
    if available < amount:
        raise InsufficientFundsError(available, amount)
    fund.current_balance = available - amount
    db.session.flush()
    return fund


def reset_fund():
    """Restore the balance to the imprest amount inside the current transaction."""
    fund = _locked_fund()
    if fund is None:
        return None
    fund.current_balance = fund.imprest_amount
    fund.last_replenishment_date = utcnow()
    db.session.flush()
    return fund
