"""Audit recorder: the single path every state change is logged through.

Entries are written after the business transaction has committed. A failed
audit insert is rolled back on its own and reported to the application log;
it never undoes or fails the operation it describes.
"""
import logging
from datetime import timedelta

from flask import current_app, has_request_context, request
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from pettycash import db
from pettycash.models.audit import AuditLog
from pettycash.services import unit_of_work
from pettycash.utils import utcnow

logger = logging.getLogger(__name__)


def _client_ip():
    if has_request_context():
        return request.headers.get('X-Forwarded-For', request.remote_addr)
    return None


def record(entity_type, entity_id, action, old_value=None, new_value=None,
           user_id=None, description=None):
    """Append one audit entry. Returns the entry, or None if it could not be stored."""
    entry = AuditLog(
        entity_type=entity_type,
        entity_id=str(entity_id),
        action=action,
        old_value=old_value,
        new_value=new_value,
        user_id=user_id,
        ip_address=_client_ip(),
        description=description,
    )
    try:
        db.session.add(entry)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Could not write audit entry %s:%s %s', entity_type, entity_id, action)
        return None
    return entry


def _filtered(entity_type=None, entity_id=None, user_id=None, action=None,
              start_date=None, end_date=None):
    query = AuditLog.query
    if entity_type:
        query = query.filter(AuditLog.entity_type == entity_type)
    if entity_id:
        query = query.filter(AuditLog.entity_id == str(entity_id))
    if user_id:
        query = query.filter(AuditLog.user_id == user_id)
    if action:
        query = query.filter(AuditLog.action == action)
    if start_date:
        query = query.filter(AuditLog.timestamp >= start_date)
    if end_date:
        query = query.filter(AuditLog.timestamp <= end_date)
    return query


def get_audit_logs(entity_type=None, entity_id=None):
    return _filtered(entity_type, entity_id).order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).all()


def get_recent_audit_logs(limit=50):
    return AuditLog.query.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).limit(limit).all()


def get_audit_logs_paginated(limit, offset, **filters):
    """Return ``(logs, total)`` for one page of filtered entries."""
    query = _filtered(**filters)
    total = query.with_entities(func.count(AuditLog.id)).scalar() or 0
    logs = (query.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
            .limit(limit).offset(offset).all())
    return logs, total


def cleanup_audit_logs(now=None):
    """Delete entries older than the retention window; return how many were removed."""
    days = current_app.config.get('AUDIT_RETENTION_DAYS', 365)
    cutoff = (now or utcnow()) - timedelta(days=days)
    with unit_of_work('audit cleanup'):
        removed = AuditLog.query.filter(AuditLog.timestamp <= cutoff).delete(synchronize_session=False)
    logger.info('Removed %d audit entries older than %s', removed, cutoff.date())
    return removed
