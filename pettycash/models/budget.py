"""AccountBudget model for Petty Cash Manager"""
from decimal import Decimal
from pettycash import db
from pettycash.models.enums import BudgetPeriod
from pettycash.utils import utcnow, iso, money_str


class AccountBudget(db.Model):
    __tablename__ = 'account_budgets'
    id = db.Column(db.Integer, primary_key=True)
    chart_of_account_id = db.Column(db.Integer, db.ForeignKey('chart_of_accounts.id'), nullable=False, index=True)
    budget_amount = db.Column(db.Numeric(15, 2), nullable=False)
    period = db.Column(db.Enum(BudgetPeriod, native_enum=False, length=20), nullable=False)
    start_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)
    alert_threshold = db.Column(db.Numeric(5, 2), default=Decimal('80'))  # percentage
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    chart_of_account = db.relationship('ChartOfAccount', backref='budgets')

    def __repr__(self):
        return f'<AccountBudget {self.chart_of_account_id} {self.budget_amount}>'

    def to_dict(self):
        return {
            'id': self.id,
            'chart_of_account_id': self.chart_of_account_id,
            'budget_amount': money_str(self.budget_amount),
            'period': self.period.value,
            'start_date': iso(self.start_date),
            'end_date': iso(self.end_date),
            'alert_threshold': money_str(self.alert_threshold),
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }
