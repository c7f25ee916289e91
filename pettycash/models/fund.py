"""PettyCashFund model for Petty Cash Manager"""
from decimal import Decimal
from pettycash import db
from pettycash.utils import utcnow, iso, money_str


class PettyCashFund(db.Model):
    """The imprest fund. Only the first row is ever read."""
    __tablename__ = 'petty_cash_fund'
    id = db.Column(db.Integer, primary_key=True)
    imprest_amount = db.Column(db.Numeric(15, 2), nullable=False)
    current_balance = db.Column(db.Numeric(15, 2), nullable=False)
    manager_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    last_replenishment_date = db.Column(db.DateTime, nullable=True)
    version = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    manager = db.relationship('User')

    # Concurrent writers on the balance fail with StaleDataError instead of losing updates
    __mapper_args__ = {'version_id_col': version}

    def __repr__(self):
        return f'<PettyCashFund {self.current_balance}/{self.imprest_amount}>'

    @property
    def percentage_depleted(self):
        """Share of the imprest already disbursed, 0-100."""
        imprest = Decimal(self.imprest_amount or 0)
        if imprest == 0:
            return Decimal('0')
        return ((1 - Decimal(self.current_balance) / imprest) * 100).quantize(Decimal('0.01'))

    def to_dict(self):
        return {
            'id': self.id,
            'imprest_amount': money_str(self.imprest_amount),
            'current_balance': money_str(self.current_balance),
            'percentage_depleted': str(self.percentage_depleted),
            'manager_id': self.manager_id,
            'last_replenishment_date': iso(self.last_replenishment_date),
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }
