"""AuditLog model for Petty Cash Manager"""
from pettycash import db
from pettycash.utils import utcnow, iso


class AuditLog(db.Model):
    """Append-only; rows leave only through the retention sweep."""
    __tablename__ = 'audit_logs'
    id = db.Column(db.Integer, primary_key=True)
    entity_type = db.Column(db.String(50), nullable=False, index=True)
    entity_id = db.Column(db.String(100), nullable=False, index=True)
    action = db.Column(db.String(50), nullable=False)
    old_value = db.Column(db.JSON, nullable=True)
    new_value = db.Column(db.JSON, nullable=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)
    ip_address = db.Column(db.String(50), nullable=True)
    timestamp = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    description = db.Column(db.Text)

    user = db.relationship('User')

    def __repr__(self):
        return f'<AuditLog {self.entity_type}:{self.entity_id} {self.action}>'

    def to_dict(self):
        return {
            'id': self.id,
            'entity_type': self.entity_type,
            'entity_id': self.entity_id,
            'action': self.action,
            'old_value': self.old_value,
            'new_value': self.new_value,
            'user_id': self.user_id,
            'user': self.user.to_dict() if self.user else None,
            'ip_address': self.ip_address,
            'timestamp': iso(self.timestamp),
            'description': self.description,
        }
