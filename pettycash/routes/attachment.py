"""Voucher attachment routes"""
import os
from flask import Blueprint, jsonify, request, send_file
from flask_login import current_user, login_required
from pettycash.services import attachments

attachment_bp = Blueprint('attachment', __name__, url_prefix='/api')


@attachment_bp.route('/vouchers/<int:voucher_id>/attachments')
@login_required
def list_attachments(voucher_id):
    return jsonify([a.to_dict() for a in attachments.get_attachments(voucher_id)])


@attachment_bp.route('/vouchers/<int:voucher_id>/attachments', methods=['POST'])
@login_required
def upload_attachment(voucher_id):
    attachment = attachments.save_attachment(voucher_id, request.files.get('file'), user_id=current_user.id)
    return jsonify(attachment.to_dict()), 201


@attachment_bp.route('/attachments/<int:attachment_id>/download')
@login_required
def download_attachment(attachment_id):
    attachment = attachments.get_attachment(attachment_id)
    if not os.path.exists(attachment.file_path):
        return jsonify({'message': 'File not found on disk', 'code': 'file_missing'}), 404
    return send_file(
        attachment.file_path,
        mimetype=attachment.file_type,
        as_attachment=True,
        download_name=attachment.file_name
    )


@attachment_bp.route('/attachments/<int:attachment_id>', methods=['DELETE'])
@login_required
def delete_attachment(attachment_id):
    attachments.delete_attachment(attachment_id, user_id=current_user.id)
    return '', 204
