from decimal import Decimal

import pytest

from pettycash.exceptions import (
    FundAlreadyConfiguredError, InsufficientFundsError, NotFoundError, ValidationError
)
from pettycash.models import AuditLog, Voucher
from pettycash.services import fund as fund_service
from tests.conftest import make_fund, make_voucher


def test_create_fund_starts_at_imprest(ctx):
    fund = make_fund('10000')
    assert fund.current_balance == Decimal('10000.00')
    assert fund.imprest_amount == Decimal('10000.00')
    assert AuditLog.query.filter_by(entity_type='fund', action='created').count() == 1


def test_only_one_fund_can_be_configured(ctx):
    make_fund('10000')
    with pytest.raises(FundAlreadyConfiguredError):
        make_fund('5000')


def test_imprest_must_be_positive(ctx):
    with pytest.raises(ValidationError):
        make_fund('0')


def test_update_imprest_leaves_balance(ctx, users):
    fund = make_fund('10000')
    make_voucher('2500', users['preparer'])

    updated = fund_service.update_imprest_amount(fund.id, Decimal('12000'), user_id=users['admin'])
    assert updated.imprest_amount == Decimal('12000.00')
    assert updated.current_balance == Decimal('7500.00')


def test_update_missing_fund(ctx):
    with pytest.raises(NotFoundError):
        fund_service.update_imprest_amount(99, Decimal('100'))


def test_overdraw_is_refused_and_nothing_is_written(ctx, users):
    make_fund('10000', balance='500')

    with pytest.raises(InsufficientFundsError) as excinfo:
        make_voucher('600', users['preparer'])

    assert excinfo.value.available == Decimal('500.00')
    assert fund_service.get_fund().current_balance == Decimal('500.00')
    assert Voucher.query.count() == 0


def test_debit_without_fund_is_unchecked(ctx, users):
    voucher = make_voucher('600', users['preparer'])
    assert voucher.id is not None
    assert fund_service.get_fund() is None


def test_fund_version_moves_with_each_write(ctx, users):
    fund = make_fund('10000')
    start = fund.version
    make_voucher('100', users['preparer'])
    make_voucher('100', users['preparer'])
    assert fund_service.get_fund().version == start + 2


def test_percentage_depleted(ctx, users):
    make_fund('10000')
    make_voucher('2500', users['preparer'])
    assert fund_service.get_fund().percentage_depleted == Decimal('25.00')
