"""ChartOfAccount model for Petty Cash Manager"""
from pettycash import db
from pettycash.utils import utcnow, iso


class ChartOfAccount(db.Model):
    __tablename__ = 'chart_of_accounts'
    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(20), unique=True, nullable=False)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=utcnow)

    def __repr__(self):
        return f'<ChartOfAccount {self.code}>'

    def to_dict(self):
        return {
            'id': self.id,
            'code': self.code,
            'name': self.name,
            'description': self.description,
            'created_at': iso(self.created_at),
        }
