"""VoucherAttachment model for Petty Cash Manager"""
from pettycash import db
from pettycash.utils import utcnow, iso


class VoucherAttachment(db.Model):
    __tablename__ = 'voucher_attachments'
    id = db.Column(db.Integer, primary_key=True)
    voucher_id = db.Column(db.Integer, db.ForeignKey('vouchers.id'), nullable=False, index=True)
    file_name = db.Column(db.String(255), nullable=False)
    file_type = db.Column(db.String(100), nullable=False)
    file_size = db.Column(db.Integer, nullable=False)
    file_path = db.Column(db.String(500), nullable=False)
    uploaded_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    uploaded_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f'<VoucherAttachment {self.file_name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'voucher_id': self.voucher_id,
            'file_name': self.file_name,
            'file_type': self.file_type,
            'file_size': self.file_size,
            'uploaded_by_id': self.uploaded_by_id,
            'uploaded_at': iso(self.uploaded_at),
        }
