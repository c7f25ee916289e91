"""Voucher ledger: creating vouchers and moving them through approval."""
import logging
import random
from decimal import Decimal

from flask import current_app
from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from pettycash import db
from pettycash.exceptions import (
    InvalidTransitionError, NotFoundError, PersistenceError, PettyCashError,
    ValidationError, VoucherNumberError
)
from pettycash.models.account import ChartOfAccount
from pettycash.models.enums import VOUCHER_TRANSITIONS, VoucherStatus
from pettycash.models.voucher import Voucher, VoucherItem
from pettycash.services import audit, unit_of_work
from pettycash.services.fund import debit_fund
from pettycash.utils import to_decimal, utcnow

logger = logging.getLogger(__name__)


def generate_voucher_number(when=None, prefix=None):
    """``PCV-<YY><MM>-<NNNN>`` with a random four digit suffix."""
    when = when or utcnow()
    prefix = prefix or current_app.config.get('VOUCHER_NUMBER_PREFIX', 'PCV')
    return f'{prefix}-{when:%y%m}-{random.randint(0, 9999):04d}'


def _clean_items(items):
    if not items:
        raise ValidationError('At least one voucher item is required', field='items')

    cleaned = []
    for index, item in enumerate(items):
        description = (item.get('description') or '').strip()
        if not description:
            raise ValidationError(f'Item {index + 1} needs a description', field='items')
        amount = to_decimal(item.get('amount'), 'amount')
        if amount is None or amount <= 0:
            raise ValidationError('Item amount must be a positive number', field='items')

        account_id = item.get('chart_of_account_id') or None
        if account_id is not None and db.session.get(ChartOfAccount, int(account_id)) is None:
            raise NotFoundError('Chart of account', account_id)

        cleaned.append({
            'description': description,
            'amount': amount,
            'chart_of_account_id': int(account_id) if account_id is not None else None,
            'invoice_number': item.get('invoice_number') or None,
            'vat_amount': to_decimal(item.get('vat_amount'), 'vat_amount'),
            'amount_withheld': to_decimal(item.get('amount_withheld'), 'amount_withheld'),
        })
    return cleaned


def _voucher_number_taken(number):
    return db.session.query(Voucher.id).filter_by(voucher_number=number).first() is not None


def create_voucher(payee, date, items, requested_by_id, supporting_docs_submitted=None):
    """Record a pending voucher and debit the fund by its total.

    Header, items and the fund debit commit together. If the generated voucher
    number collides with an existing one the whole unit is rolled back and
    retried with a fresh number.
    """
    payee = (payee or '').strip()
    if not payee:
        raise ValidationError('Payee is required', field='payee')
    if date is None:
        raise ValidationError('Date is required', field='date')
    cleaned = _clean_items(items)
    total = sum((item['amount'] for item in cleaned), Decimal('0'))

    attempts = current_app.config.get('VOUCHER_NUMBER_ATTEMPTS', 5)
    for attempt in range(1, attempts + 1):
        number = generate_voucher_number()
        try:
            debit_fund(total)
            voucher = Voucher(
                voucher_number=number,
                date=date,
                payee=payee,
                total_amount=total,
                requested_by_id=requested_by_id,
                status=VoucherStatus.PENDING,
                supporting_docs_submitted=supporting_docs_submitted,
            )
            voucher.items = [VoucherItem(**item) for item in cleaned]
            db.session.add(voucher)
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            if not _voucher_number_taken(number):
                logger.exception('Voucher insert for %s failed', payee)
                raise PersistenceError('Could not save voucher: storage error') from exc
            logger.warning('Voucher number %s already used (attempt %d of %d)', number, attempt, attempts)
            continue
        except PettyCashError:
            db.session.rollback()
            raise
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.exception('Voucher insert for %s failed', payee)
            raise PersistenceError('Could not save voucher: storage error') from exc

        logger.info('Created voucher %s for %s totaling %s', voucher.voucher_number, payee, total)
        audit.record('voucher', voucher.id, 'created', new_value=voucher.to_dict(),
                     user_id=requested_by_id,
                     description=f'Created voucher {voucher.voucher_number} for {payee} - {total}')
        return voucher

    raise VoucherNumberError(f'Could not allocate a unique voucher number after {attempts} attempts')


def get_voucher(voucher_id):
    voucher = db.session.get(Voucher, voucher_id)
    if voucher is None:
        raise NotFoundError('Voucher', voucher_id)
    return voucher


def parse_status(value):
    """Map a status string onto VoucherStatus, rejecting anything else."""
    try:
        return VoucherStatus(value)
    except ValueError:
        raise ValidationError(f'Unknown voucher status: {value}', field='status')


def check_transition(voucher, target):
    if target not in VOUCHER_TRANSITIONS[voucher.status]:
        raise InvalidTransitionError(voucher.id, voucher.status.value, target.value)


def transition_voucher(voucher_id, target, acting_user_id):
    """Approve or reject a pending voucher."""
    target = parse_status(target)
    if target not in (VoucherStatus.APPROVED, VoucherStatus.REJECTED):
        raise ValidationError('Vouchers can only be approved or rejected directly', field='status')

    with unit_of_work('transition voucher'):
        voucher = get_voucher(voucher_id)
        old_status = voucher.status
        check_transition(voucher, target)
        voucher.status = target
        voucher.approved_by_id = acting_user_id

    logger.info('Voucher %s %s by user %s', voucher.voucher_number, target.value, acting_user_id)
    audit.record('voucher', voucher.id, target.value,
                 old_value={'status': old_status.value},
                 new_value={'status': target.value, 'approved_by_id': acting_user_id},
                 user_id=acting_user_id,
                 description=f'{target.value.capitalize()} voucher {voucher.voucher_number}')
    return voucher


def approve_voucher(voucher_id, acting_user_id):
    return transition_voucher(voucher_id, VoucherStatus.APPROVED, acting_user_id)


def reject_voucher(voucher_id, acting_user_id):
    return transition_voucher(voucher_id, VoucherStatus.REJECTED, acting_user_id)


def get_vouchers(status=None, limit=None, offset=None):
    query = Voucher.query
    if status:
        query = query.filter(Voucher.status == parse_status(status))
    query = query.order_by(Voucher.date.desc(), Voucher.id.desc())
    if limit is not None:
        query = query.limit(limit)
    if offset is not None:
        query = query.offset(offset)
    return query.all()


def get_voucher_stats():
    not_rejected = case((Voucher.status != VoucherStatus.REJECTED, Voucher.total_amount), else_=0)
    total, pending, approved = db.session.query(
        func.coalesce(func.sum(not_rejected), 0),
        func.count(case((Voucher.status == VoucherStatus.PENDING, 1))),
        func.count(case((Voucher.status == VoucherStatus.APPROVED, 1))),
    ).one()
    return {
        'total_disbursed': str(Decimal(str(total or 0)).quantize(Decimal('0.01'))),
        'pending_count': int(pending or 0),
        'approved_count': int(approved or 0),
    }
