"""ReplenishmentRequest model for Petty Cash Manager"""
from pettycash import db
from pettycash.models.enums import ReplenishmentStatus
from pettycash.utils import utcnow, iso, money_str


class ReplenishmentRequest(db.Model):
    __tablename__ = 'replenishment_requests'
    id = db.Column(db.Integer, primary_key=True)
    request_date = db.Column(db.DateTime, nullable=False, default=utcnow)
    total_amount = db.Column(db.Numeric(15, 2), nullable=False)
    total_vat = db.Column(db.Numeric(15, 2), nullable=False)
    total_withheld = db.Column(db.Numeric(15, 2), nullable=False)
    total_net_amount = db.Column(db.Numeric(15, 2), nullable=False)
    status = db.Column(db.Enum(ReplenishmentStatus, native_enum=False, length=20), nullable=False,
                       default=ReplenishmentStatus.PENDING)
    requested_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    approved_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    voucher_ids = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=utcnow)

    requester = db.relationship('User', foreign_keys=[requested_by_id])

    def __repr__(self):
        return f'<ReplenishmentRequest {self.id} {self.total_amount}>'

    def to_dict(self):
        return {
            'id': self.id,
            'request_date': iso(self.request_date),
            'total_amount': money_str(self.total_amount),
            'total_vat': money_str(self.total_vat),
            'total_withheld': money_str(self.total_withheld),
            'total_net_amount': money_str(self.total_net_amount),
            'status': self.status.value,
            'requested_by_id': self.requested_by_id,
            'approved_by_id': self.approved_by_id,
            'voucher_ids': list(self.voucher_ids or []),
            'created_at': iso(self.created_at),
        }
