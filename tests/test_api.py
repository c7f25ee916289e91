from decimal import Decimal

from pettycash import db
from pettycash.models import User, UserRole, Voucher
from pettycash.services import fund as fund_service
from tests.conftest import login, make_fund

VOUCHER = {
    'payee': 'Acme Stationers',
    'date': '2024-03-15',
    'items': [
        {'description': 'Printer paper', 'amount': '2500.00', 'vat_amount': '300.00'},
        {'description': 'Toner', 'amount': '500', 'amount_withheld': '25'},
    ],
}


def test_requests_need_a_session(client):
    assert client.get('/api/vouchers').status_code == 401
    assert client.get('/api/vouchers').get_json()['code'] == 'unauthorized'


def test_register_login_logout(client):
    response = client.post('/api/register', json={'username': 'newhire', 'password': 'hunter22'})
    assert response.status_code == 201
    assert response.get_json()['role'] == 'pending_role'

    assert client.get('/api/user').get_json()['username'] == 'newhire'
    client.post('/api/logout')
    assert client.get('/api/user').status_code == 401

    login(client, 'newhire', 'hunter22')
    assert client.get('/api/user').get_json()['last_login'] is not None


def test_register_duplicate_username(client, users):
    response = client.post('/api/register', json={'username': 'admin', 'password': 'whatever1'})
    assert response.status_code == 400


def test_bad_credentials(client, users):
    response = client.post('/api/login', json={'username': 'admin', 'password': 'nope'})
    assert response.status_code == 401


def test_admin_assigns_roles(client, users):
    login(client, 'preparer')
    assert client.patch(f"/api/users/{users['pending_role']}/role", json={'role': 'approver'}).status_code == 403

    login(client, 'admin')
    response = client.patch(f"/api/users/{users['pending_role']}/role", json={'role': 'approver'})
    assert response.status_code == 200
    assert response.get_json()['role'] == 'approver'

    assert client.patch(f"/api/users/{users['pending_role']}/role", json={'role': 'owner'}).status_code == 400
    assert client.patch('/api/users/999/role', json={'role': 'admin'}).status_code == 404


def test_voucher_lifecycle(app, client, users):
    with app.app_context():
        make_fund('10000')

    login(client, 'preparer')
    response = client.post('/api/vouchers', json=VOUCHER)
    assert response.status_code == 201, response.get_json()
    voucher = response.get_json()
    assert voucher['total_amount'] == '3000.00'
    assert voucher['status'] == 'pending'
    assert len(voucher['items']) == 2
    assert client.get('/api/fund').get_json()['current_balance'] == '7000.00'

    # preparers cannot approve
    assert client.patch(f"/api/vouchers/{voucher['id']}/approve").status_code == 403

    login(client, 'approver')
    response = client.patch(f"/api/vouchers/{voucher['id']}/approve")
    assert response.status_code == 200
    assert response.get_json()['status'] == 'approved'

    again = client.patch(f"/api/vouchers/{voucher['id']}/approve")
    assert again.status_code == 409
    assert again.get_json()['code'] == 'invalid_transition'

    login(client, 'preparer')
    response = client.post('/api/replenishment-requests',
                           json={'voucher_ids': [voucher['id']], 'total_amount': '3000.00'})
    assert response.status_code == 201, response.get_json()
    request = response.get_json()
    assert request['total_net_amount'] == '2975.00'
    assert client.get('/api/fund').get_json()['current_balance'] == '10000.00'
    assert client.get(f"/api/vouchers/{voucher['id']}").get_json()['status'] == 'replenished'

    pdf = client.get(f"/api/replenishment-requests/{request['id']}/pdf")
    assert pdf.status_code == 200
    assert pdf.mimetype == 'application/pdf'
    assert pdf.data.startswith(b'%PDF')


def test_overdraw_returns_conflict(app, client, users):
    with app.app_context():
        make_fund('10000', balance='500')

    login(client, 'preparer')
    body = dict(VOUCHER, items=[{'description': 'Chair', 'amount': '600'}])
    response = client.post('/api/vouchers', json=body)
    assert response.status_code == 409
    assert response.get_json()['code'] == 'insufficient_funds'

    with app.app_context():
        assert fund_service.get_fund().current_balance == Decimal('500.00')
        assert Voucher.query.count() == 0


def test_voucher_validation(client, users):
    login(client, 'preparer')
    response = client.post('/api/vouchers', json=dict(VOUCHER, items=[]))
    assert response.status_code == 400
    assert 'items' in response.get_json()['details']['errors']

    response = client.post('/api/vouchers', json=dict(VOUCHER, items=[{'description': 'Pens', 'amount': '-1'}]))
    assert response.status_code == 400

    assert client.get('/api/vouchers/42').status_code == 404
    assert client.get('/api/vouchers?status=paid').status_code == 400


def test_voucher_list_and_stats(client, users):
    login(client, 'preparer')
    for payee in ('One', 'Two'):
        client.post('/api/vouchers', json=dict(VOUCHER, payee=payee))

    listing = client.get('/api/vouchers?status=pending&limit=1').get_json()
    assert len(listing) == 1
    assert listing[0]['requester']['username'] == 'preparer'

    stats = client.get('/api/vouchers/stats').get_json()
    assert stats['pending_count'] == 2
    assert stats['total_disbursed'] == '6000.00'


def test_fund_endpoints(client, users):
    login(client, 'preparer')
    assert client.get('/api/fund').status_code == 404

    response = client.post('/api/fund', json={'imprest_amount': '5000'})
    assert response.status_code == 201
    fund_id = response.get_json()['id']
    assert client.post('/api/fund', json={'imprest_amount': '5000'}).status_code == 409

    response = client.patch(f'/api/fund/{fund_id}', json={'imprest_amount': '7500'})
    assert response.get_json()['imprest_amount'] == '7500.00'
    assert response.get_json()['current_balance'] == '5000.00'

    login(client, 'approver')
    assert client.patch(f'/api/fund/{fund_id}', json={'imprest_amount': '1'}).status_code == 403


def test_chart_of_accounts_endpoints(client, users):
    login(client, 'preparer')
    response = client.post('/api/chart-of-accounts', json={'code': '6100', 'name': 'Office Supplies'})
    assert response.status_code == 201
    account_id = response.get_json()['id']

    assert client.post('/api/chart-of-accounts', json={'code': '6100', 'name': 'Dup'}).status_code == 400

    client.post('/api/vouchers', json=dict(VOUCHER, items=[
        {'description': 'Pens', 'amount': '10', 'chart_of_account_id': account_id}]))
    response = client.delete(f'/api/chart-of-accounts/{account_id}')
    assert response.status_code == 409
    assert response.get_json()['code'] == 'account_in_use'

    other = client.post('/api/chart-of-accounts', json={'code': '6200', 'name': 'Transport'}).get_json()
    assert client.delete(f"/api/chart-of-accounts/{other['id']}").status_code == 204


def test_budget_endpoints(client, users, account):
    login(client, 'preparer')
    client.post('/api/vouchers', json=dict(VOUCHER, items=[
        {'description': 'Pens', 'amount': '900', 'chart_of_account_id': account}]))

    response = client.post('/api/budgets', json={
        'chart_of_account_id': account, 'budget_amount': '1000', 'period': 'monthly',
        'start_date': '2024-03-01', 'end_date': '2024-03-31T23:59:59',
    })
    assert response.status_code == 201, response.get_json()
    budget = response.get_json()
    assert budget['current_spending'] == '900.00'
    assert budget['alert'] is True

    response = client.patch(f"/api/budgets/{budget['id']}", json={'budget_amount': '2000'})
    assert response.get_json()['percentage_used'] == '45.00'
    assert response.get_json()['period'] == 'monthly'

    assert client.post('/api/budgets', json={'chart_of_account_id': account, 'period': 'weekly'}).status_code == 400
    assert client.delete(f"/api/budgets/{budget['id']}").status_code == 204
    assert client.get('/api/budgets').get_json() == []


def test_audit_log_endpoint(client, users):
    login(client, 'preparer')
    client.post('/api/fund', json={'imprest_amount': '5000'})
    client.post('/api/vouchers', json=VOUCHER)

    logs = client.get('/api/audit-logs?entity_type=voucher').get_json()
    assert [log['action'] for log in logs] == ['created']

    page = client.get('/api/audit-logs?page=1&per_page=1').get_json()
    assert page['total'] == 2
    assert len(page['logs']) == 1

    login(client, 'approver')
    assert client.get('/api/audit-logs').status_code == 403


def test_user_listing(client, users, app):
    login(client, 'approver')
    usernames = {u['username'] for u in client.get('/api/users').get_json()}
    assert usernames == {'preparer', 'approver', 'admin', 'pending_role'}
    with app.app_context():
        assert User.query.count() == 4
        assert db.session.get(User, users['admin']).has_role(UserRole.ADMIN, UserRole.APPROVER)


def test_one_cent_amounts_are_accepted(client, users):
    login(client, 'preparer')
    response = client.post('/api/fund', json={'imprest_amount': '0.01'})
    assert response.status_code == 201, response.get_json()

    response = client.post('/api/vouchers', json=dict(VOUCHER, items=[{'description': 'Stamp', 'amount': '0.01'}]))
    assert response.status_code == 201, response.get_json()
    assert response.get_json()['total_amount'] == '0.01'


def test_voucher_dates_from_browser_clients(client, users):
    login(client, 'preparer')
    for value, expected in [
        ('2024-03-15T10:00:00.000Z', '2024-03-15T10:00:00'),
        ('2024-03-15T10:00:00Z', '2024-03-15T10:00:00'),
        ('2024-03-15T12:30:00+02:00', '2024-03-15T10:30:00'),
        ('2024-03-15', '2024-03-15T00:00:00'),
    ]:
        response = client.post('/api/vouchers', json=dict(VOUCHER, date=value))
        assert response.status_code == 201, (value, response.get_json())
        assert response.get_json()['date'] == expected

    response = client.post('/api/vouchers', json=dict(VOUCHER, date='15/03/2024'))
    assert response.status_code == 400
    assert 'date' in response.get_json()['details']['errors']


def test_date_filters_accept_the_same_formats(client, users):
    login(client, 'preparer')
    client.post('/api/vouchers', json=VOUCHER)

    summary = client.get('/api/reports/disbursement-summary'
                         '?start_date=2024-03-01T00:00:00.000Z&end_date=2024-03-15').get_json()
    assert summary['summary']['voucher_count'] == 1
    assert summary['period']['end_date'] == '2024-03-15T23:59:59'

    page = client.get('/api/audit-logs?page=1&start_date=2000-01-01T00:00:00Z').get_json()
    assert page['total'] == 1
    assert client.get('/api/audit-logs?page=1&start_date=yesterday').status_code == 400
