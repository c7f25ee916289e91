from datetime import datetime
from decimal import Decimal

import pytest

from pettycash.exceptions import ValidationError
from pettycash.forms import json_formdata
from pettycash.utils import format_money, money_str, parse_datetime, to_decimal


def test_to_decimal_rounds_to_cents():
    assert to_decimal('10.005') == Decimal('10.01')
    assert to_decimal(0.1) == Decimal('0.10')
    assert to_decimal('') is None


@pytest.mark.parametrize('value', ['ten', 'NaN', 'Infinity'])
def test_to_decimal_rejects_garbage(value):
    with pytest.raises(ValidationError):
        to_decimal(value, 'amount')


def test_money_formatting(ctx):
    assert money_str(Decimal('3000')) == '3000.00'
    assert format_money(Decimal('10000')) == '10,000.00'
    assert format_money(None) == ''


def test_json_formdata_flattens_nested_lists():
    formdata = json_formdata({
        'payee': 'Acme',
        'items': [{'description': 'Pens', 'amount': 2.5, 'invoice_number': None}],
        'voucher_ids': [3, 4],
    })
    assert formdata['items-0-amount'] == '2.5'
    assert 'items-0-invoice_number' not in formdata
    assert formdata.getlist('voucher_ids-1') == ['4']


@pytest.mark.parametrize('value, expected', [
    ('2024-03-15', datetime(2024, 3, 15)),
    ('2024-03-15T10:00:00', datetime(2024, 3, 15, 10)),
    ('2024-03-15T10:00:00.000Z', datetime(2024, 3, 15, 10)),
    ('2024-03-15T05:00:00-05:00', datetime(2024, 3, 15, 10)),
])
def test_parse_datetime(value, expected):
    assert parse_datetime(value) == expected


def test_parse_datetime_end_of_day():
    assert parse_datetime('2024-03-31', end_of_day=True) == datetime(2024, 3, 31, 23, 59, 59)
    assert parse_datetime('2024-03-31T08:00', end_of_day=True) == datetime(2024, 3, 31, 8)


def test_parse_datetime_rejects_garbage():
    with pytest.raises(ValidationError) as excinfo:
        parse_datetime('March 3rd', 'start_date')
    assert excinfo.value.details == {'field': 'start_date'}
