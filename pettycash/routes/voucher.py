"""Voucher routes for Petty Cash Manager"""
from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required
from pettycash.forms import VoucherForm, load_form
from pettycash.models.enums import UserRole
from pettycash.services import vouchers
from pettycash.utils import role_required

voucher_bp = Blueprint('voucher', __name__, url_prefix='/api/vouchers')


@voucher_bp.route('')
@login_required
def list_vouchers():
    status = request.args.get('status') or None
    limit = request.args.get('limit', type=int)
    offset = request.args.get('offset', type=int)
    found = vouchers.get_vouchers(status, limit, offset)
    return jsonify([v.to_dict(with_relations=True) for v in found])


@voucher_bp.route('/stats')
@login_required
def voucher_stats():
    return jsonify(vouchers.get_voucher_stats())


@voucher_bp.route('/<int:voucher_id>')
@login_required
def view_voucher(voucher_id):
    return jsonify(vouchers.get_voucher(voucher_id).to_dict(with_relations=True))


@voucher_bp.route('', methods=['POST'])
@login_required
def create_voucher():
    form = load_form(VoucherForm)
    voucher = vouchers.create_voucher(
        payee=form.payee.data,
        date=form.date.data,
        items=form.items.data,
        requested_by_id=current_user.id,
        supporting_docs_submitted=form.supporting_docs_submitted.data
    )
    return jsonify(voucher.to_dict(with_relations=True)), 201


@voucher_bp.route('/<int:voucher_id>/approve', methods=['PATCH'])
@role_required(UserRole.APPROVER, UserRole.ADMIN)
def approve_voucher(voucher_id):
    voucher = vouchers.approve_voucher(voucher_id, current_user.id)
    return jsonify(voucher.to_dict())


@voucher_bp.route('/<int:voucher_id>/reject', methods=['PATCH'])
@role_required(UserRole.APPROVER, UserRole.ADMIN)
def reject_voucher(voucher_id):
    voucher = vouchers.reject_voucher(voucher_id, current_user.id)
    return jsonify(voucher.to_dict())
