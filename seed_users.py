#!/usr/bin/env python3
"""Seed demo users, a chart of accounts and the petty cash fund"""

from decimal import Decimal

from application import app, db
from pettycash.models import ChartOfAccount, User, UserRole
from pettycash.services.fund import create_fund, get_fund


def seed_users():
    """Create one user per role plus starter accounts and a fund"""

    with app.app_context():
        # Check if users already exist
        if User.query.first():
            print("✓ Users already exist in database")
            return

        test_users = [
            {'username': 'admin', 'password': 'admin123', 'role': UserRole.ADMIN,
             'first_name': 'Ada', 'last_name': 'Admin'},
            {'username': 'approver', 'password': 'approver123', 'role': UserRole.APPROVER,
             'first_name': 'Arun', 'last_name': 'Approver'},
            {'username': 'preparer', 'password': 'preparer123', 'role': UserRole.PREPARER,
             'first_name': 'Priya', 'last_name': 'Preparer'},
        ]

        accounts = [
            ('6100', 'Office Supplies', 'Stationery and consumables'),
            ('6200', 'Transport', 'Taxi, fuel and courier'),
            ('6300', 'Meals & Refreshments', 'Staff meals and meeting refreshments'),
            ('6400', 'Repairs & Maintenance', None),
        ]

        for user_data in test_users:
            user = User(
                username=user_data['username'],
                first_name=user_data['first_name'],
                last_name=user_data['last_name'],
                role=user_data['role']
            )
            user.set_password(user_data['password'])
            db.session.add(user)
            print(f"✓ Created {user_data['role'].value} user: {user_data['username']}")

        for code, name, description in accounts:
            db.session.add(ChartOfAccount(code=code, name=name, description=description))
            print(f"  ✓ Created account: {code} {name}")

        db.session.commit()

        if get_fund() is None:
            admin = User.query.filter_by(username='admin').first()
            fund = create_fund(Decimal('10000.00'), manager_id=admin.id)
            print(f"✓ Configured petty cash fund with imprest {fund.imprest_amount}")

        print("\n✅ Database seeded successfully!")
        print("\nTest accounts created:")
        for user_data in test_users:
            print(f"  Username: {user_data['username']:<9} | Password: {user_data['password']}")


if __name__ == '__main__':
    seed_users()
