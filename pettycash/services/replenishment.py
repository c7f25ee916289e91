"""Replenishment engine: close out approved vouchers and restore the fund.

Totals are always recomputed from the vouchers themselves; whatever totals the
caller sends are only compared against them and logged when they differ.
The fund is reset to its imprest amount (a full reset, not an additive
restore), so a batch is expected to cover every outstanding approved voucher.
"""
import logging
from decimal import Decimal

from pettycash import db
from pettycash.exceptions import NotFoundError, ValidationError
from pettycash.models.enums import ReplenishmentStatus, VoucherStatus
from pettycash.models.replenishment import ReplenishmentRequest
from pettycash.models.voucher import Voucher
from pettycash.services import audit, unit_of_work
from pettycash.services.fund import reset_fund
from pettycash.services.vouchers import check_transition
from pettycash.utils import CENTS, to_decimal, utcnow

logger = logging.getLogger(__name__)

TOTAL_FIELDS = ('total_amount', 'total_vat', 'total_withheld', 'total_net_amount')


def compute_totals(vouchers):
    """Aggregate amount, VAT and withholding over the vouchers' items."""
    amount = vat = withheld = Decimal('0')
    for voucher in vouchers:
        for item in voucher.items:
            amount += Decimal(item.amount)
            vat += Decimal(item.vat_amount or 0)
            withheld += Decimal(item.amount_withheld or 0)
    return {
        'total_amount': amount.quantize(CENTS),
        'total_vat': vat.quantize(CENTS),
        'total_withheld': withheld.quantize(CENTS),
        'total_net_amount': (amount - withheld).quantize(CENTS),
    }


def _normalize_ids(voucher_ids):
    if not voucher_ids:
        raise ValidationError('At least one voucher must be selected for replenishment',
                              field='voucher_ids')
    try:
        ids = [int(v) for v in voucher_ids]
    except (TypeError, ValueError):
        raise ValidationError('Voucher ids must be integers', field='voucher_ids')
    # keep order, drop repeats
    return list(dict.fromkeys(ids))


def _report_mismatch(claimed, computed):
    if not claimed:
        return
    for field in TOTAL_FIELDS:
        value = claimed.get(field)
        if value in (None, ''):
            continue
        if to_decimal(value, field) != computed[field]:
            logger.warning('Replenishment %s sent as %s, recomputed as %s',
                           field, value, computed[field])


def create_replenishment_request(voucher_ids, requested_by_id=None, claimed_totals=None):
    """Replenish the given approved vouchers in one transaction.

    Inserts the request, marks every voucher replenished and resets the fund.
    """
    ids = _normalize_ids(voucher_ids)

    with unit_of_work('create replenishment request'):
        vouchers = (Voucher.query.filter(Voucher.id.in_(ids))
                    .with_for_update()
                    .all())
        found = {v.id: v for v in vouchers}
        missing = [i for i in ids if i not in found]
        if missing:
            raise NotFoundError('Voucher', missing[0])
        for voucher in vouchers:
            check_transition(voucher, VoucherStatus.REPLENISHED)

        totals = compute_totals(vouchers)
        _report_mismatch(claimed_totals, totals)

        request = ReplenishmentRequest(
            request_date=utcnow(),
            requested_by_id=requested_by_id,
            voucher_ids=ids,
            status=ReplenishmentStatus.PENDING,
            **totals
        )
        db.session.add(request)
        for voucher in vouchers:
            voucher.status = VoucherStatus.REPLENISHED
        fund = reset_fund()

    logger.info('Replenishment %s covers %d vouchers totaling %s; fund balance %s',
                request.id, len(ids), totals['total_amount'],
                fund.current_balance if fund else 'n/a')
    audit.record('replenishment', request.id, 'created', new_value=request.to_dict(),
                 user_id=requested_by_id,
                 description=f'Created replenishment request for {len(ids)} vouchers '
                             f'totaling {totals["total_amount"]}')
    return request


def get_replenishment_requests():
    return ReplenishmentRequest.query.order_by(
        ReplenishmentRequest.request_date.desc(), ReplenishmentRequest.id.desc()
    ).all()


def get_replenishment_request(request_id):
    request = db.session.get(ReplenishmentRequest, request_id)
    if request is None:
        raise NotFoundError('Replenishment request', request_id)
    return request


def get_request_vouchers(request):
    ids = list(request.voucher_ids or [])
    if not ids:
        return []
    return Voucher.query.filter(Voucher.id.in_(ids)).order_by(Voucher.date, Voucher.id).all()
