"""Voucher and VoucherItem models for Petty Cash Manager"""
from decimal import Decimal
from pettycash import db
from pettycash.models.enums import VoucherStatus
from pettycash.utils import utcnow, iso, money_str


class Voucher(db.Model):
    __tablename__ = 'vouchers'
    id = db.Column(db.Integer, primary_key=True)
    voucher_number = db.Column(db.String(50), unique=True, nullable=False)
    date = db.Column(db.DateTime, nullable=False, index=True)
    payee = db.Column(db.String(255), nullable=False)
    total_amount = db.Column(db.Numeric(15, 2), nullable=False)
    requested_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)
    approved_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)
    status = db.Column(db.Enum(VoucherStatus, native_enum=False, length=20), nullable=False,
                       default=VoucherStatus.PENDING, index=True)
    supporting_docs_submitted = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    items = db.relationship('VoucherItem', backref='voucher', lazy=True, cascade='all, delete-orphan',
                            order_by='VoucherItem.id')
    attachments = db.relationship('VoucherAttachment', backref='voucher', lazy=True,
                                  cascade='all, delete-orphan')
    requester = db.relationship('User', foreign_keys=[requested_by_id])
    approver = db.relationship('User', foreign_keys=[approved_by_id])

    def __repr__(self):
        return f'<Voucher {self.voucher_number}>'

    @property
    def total_vat(self):
        return sum((Decimal(i.vat_amount or 0) for i in self.items), Decimal('0'))

    @property
    def total_withheld(self):
        return sum((Decimal(i.amount_withheld or 0) for i in self.items), Decimal('0'))

    def to_dict(self, with_relations=False):
        data = {
            'id': self.id,
            'voucher_number': self.voucher_number,
            'date': iso(self.date),
            'payee': self.payee,
            'total_amount': money_str(self.total_amount),
            'requested_by_id': self.requested_by_id,
            'approved_by_id': self.approved_by_id,
            'status': self.status.value,
            'supporting_docs_submitted': iso(self.supporting_docs_submitted),
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }
        if with_relations:
            data['requester'] = self.requester.to_dict() if self.requester else None
            data['approver'] = self.approver.to_dict() if self.approver else None
            data['items'] = [item.to_dict() for item in self.items]
            data['attachment_count'] = len(self.attachments)
        return data


class VoucherItem(db.Model):
    __tablename__ = 'voucher_items'
    id = db.Column(db.Integer, primary_key=True)
    voucher_id = db.Column(db.Integer, db.ForeignKey('vouchers.id'), nullable=False, index=True)
    description = db.Column(db.Text, nullable=False)
    amount = db.Column(db.Numeric(15, 2), nullable=False)
    chart_of_account_id = db.Column(db.Integer, db.ForeignKey('chart_of_accounts.id'), nullable=True, index=True)
    invoice_number = db.Column(db.String(100), nullable=True)
    vat_amount = db.Column(db.Numeric(15, 2), nullable=True)
    amount_withheld = db.Column(db.Numeric(15, 2), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    chart_of_account = db.relationship('ChartOfAccount', backref='voucher_items')

    def to_dict(self):
        return {
            'id': self.id,
            'voucher_id': self.voucher_id,
            'description': self.description,
            'amount': money_str(self.amount),
            'chart_of_account_id': self.chart_of_account_id,
            'chart_of_account': self.chart_of_account.to_dict() if self.chart_of_account else None,
            'invoice_number': self.invoice_number,
            'vat_amount': money_str(self.vat_amount),
            'amount_withheld': money_str(self.amount_withheld),
        }
