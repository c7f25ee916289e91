"""Audit log routes"""
from flask import Blueprint, jsonify, request
from pettycash.models.enums import UserRole
from pettycash.services import audit
from pettycash.utils import parse_datetime, role_required

audit_bp = Blueprint('audit', __name__, url_prefix='/api/audit-logs')


def _parse_date(name, end_of_day=False):
    value = request.args.get(name)
    return parse_datetime(value, name, end_of_day) if value else None


@audit_bp.route('')
@role_required(UserRole.PREPARER, UserRole.ADMIN)
def list_logs():
    entity_type = request.args.get('entity_type') or None
    entity_id = request.args.get('entity_id') or None
    limit = request.args.get('limit', type=int)

    if request.args.get('page') is not None or request.args.get('per_page') is not None:
        page = max(request.args.get('page', 1, type=int), 1)
        per_page = min(max(request.args.get('per_page', 50, type=int), 1), 500)
        logs, total = audit.get_audit_logs_paginated(
            per_page, (page - 1) * per_page,
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=request.args.get('user_id', type=int),
            action=request.args.get('action') or None,
            start_date=_parse_date('start_date'),
            end_date=_parse_date('end_date', end_of_day=True)
        )
        return jsonify({'logs': [log.to_dict() for log in logs], 'total': total,
                        'page': page, 'per_page': per_page})

    if limit:
        logs = audit.get_recent_audit_logs(limit)
    else:
        logs = audit.get_audit_logs(entity_type, entity_id)
    return jsonify([log.to_dict() for log in logs])


@audit_bp.route('/cleanup', methods=['POST'])
@role_required(UserRole.ADMIN)
def cleanup_logs():
    removed = audit.cleanup_audit_logs()
    return jsonify({'removed': removed})
