from datetime import datetime
from decimal import Decimal

import pytest

from pettycash import create_app, db
from pettycash.models import ChartOfAccount, User, UserRole
from pettycash.services import fund as fund_service
from pettycash.services import vouchers

PASSWORD = 'secret123'


@pytest.fixture
def app(tmp_path):
    app = create_app('testing')
    app.config['UPLOAD_FOLDER'] = str(tmp_path / 'uploads')
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    """Run the test body inside an application context."""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def users(app):
    """One user per role; returns their ids keyed by role value."""
    ids = {}
    with app.app_context():
        for role in UserRole:
            user = User(username=role.value, first_name=role.value.title(), role=role)
            user.set_password(PASSWORD)
            db.session.add(user)
            db.session.flush()
            ids[role.value] = user.id
        db.session.commit()
    return ids


@pytest.fixture
def account(app):
    with app.app_context():
        coa = ChartOfAccount(code='6100', name='Office Supplies')
        db.session.add(coa)
        db.session.commit()
        return coa.id


def login(client, username, password=PASSWORD):
    response = client.post('/api/login', json={'username': username, 'password': password})
    assert response.status_code == 200, response.get_json()
    return response


def make_fund(imprest='10000.00', balance=None):
    return fund_service.create_fund(Decimal(imprest), current_balance=balance)


def make_voucher(amount, user_id, account_id=None, date=None, withheld=None, vat=None, payee='Acme Stationers'):
    return vouchers.create_voucher(
        payee=payee,
        date=date or datetime(2024, 3, 15),
        items=[{
            'description': 'Printer paper',
            'amount': amount,
            'chart_of_account_id': account_id,
            'vat_amount': vat,
            'amount_withheld': withheld,
        }],
        requested_by_id=user_id,
    )
