"""Replenishment routes for Petty Cash Manager"""
from io import BytesIO
from flask import Blueprint, jsonify, send_file
from flask_login import current_user, login_required
from pettycash.forms import ReplenishmentForm, load_form
from pettycash.models.enums import UserRole
from pettycash.services import replenishment
from pettycash.services.reports import replenishment_pdf
from pettycash.utils import role_required

replenishment_bp = Blueprint('replenishment', __name__, url_prefix='/api/replenishment-requests')


@replenishment_bp.route('')
@login_required
def list_requests():
    return jsonify([r.to_dict() for r in replenishment.get_replenishment_requests()])


@replenishment_bp.route('', methods=['POST'])
@role_required(UserRole.PREPARER, UserRole.ADMIN)
def create_request():
    form = load_form(ReplenishmentForm)
    claimed = {name: getattr(form, name).data for name in replenishment.TOTAL_FIELDS}
    request = replenishment.create_replenishment_request(
        form.voucher_ids.data,
        requested_by_id=current_user.id,
        claimed_totals=claimed
    )
    return jsonify(request.to_dict()), 201


@replenishment_bp.route('/<int:request_id>/pdf')
@login_required
def export_request_pdf(request_id):
    request = replenishment.get_replenishment_request(request_id)
    vouchers = replenishment.get_request_vouchers(request)

    pdf_stream = BytesIO(replenishment_pdf(request, vouchers))
    pdf_stream.seek(0)

    return send_file(
        pdf_stream,
        mimetype='application/pdf',
        as_attachment=True,
        download_name=f'replenishment_{request.id}.pdf'
    )
