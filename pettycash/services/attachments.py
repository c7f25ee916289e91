"""Supporting documents stored on disk next to their voucher"""
import logging
import os
import uuid

from flask import current_app
from werkzeug.utils import secure_filename

from pettycash import db
from pettycash.exceptions import NotFoundError, ValidationError
from pettycash.models.attachment import VoucherAttachment
from pettycash.services import audit, unit_of_work
from pettycash.services.vouchers import get_voucher

logger = logging.getLogger(__name__)


def get_attachments(voucher_id):
    get_voucher(voucher_id)
    return (VoucherAttachment.query.filter_by(voucher_id=voucher_id)
            .order_by(VoucherAttachment.uploaded_at.desc(), VoucherAttachment.id.desc()).all())


def get_attachment(attachment_id):
    attachment = db.session.get(VoucherAttachment, attachment_id)
    if attachment is None:
        raise NotFoundError('Attachment', attachment_id)
    return attachment


def save_attachment(voucher_id, upload, user_id=None):
    """Store an uploaded ``FileStorage`` for the voucher and record it."""
    if upload is None or not upload.filename:
        raise ValidationError('No file uploaded', field='file')
    voucher = get_voucher(voucher_id)

    original_name = secure_filename(upload.filename) or 'attachment'
    stored_name = f'{uuid.uuid4().hex}-{original_name}'
    folder = current_app.config['UPLOAD_FOLDER']
    os.makedirs(folder, exist_ok=True)
    path = os.path.join(folder, stored_name)
    upload.save(path)
    size = os.path.getsize(path)

    try:
        with unit_of_work('save attachment'):
            attachment = VoucherAttachment(
                voucher_id=voucher.id,
                file_name=upload.filename,
                file_type=upload.mimetype or 'application/octet-stream',
                file_size=size,
                file_path=path,
                uploaded_by_id=user_id,
            )
            db.session.add(attachment)
    except Exception:
        # the row was not stored, so the file must not linger
        os.remove(path)
        raise

    logger.info('Stored attachment %s for voucher %s (%d bytes)', upload.filename, voucher.voucher_number, size)
    audit.record('voucher', voucher.id, 'attachment_added',
                 new_value={'file_name': upload.filename, 'file_type': attachment.file_type},
                 user_id=user_id, description=f'Added attachment: {upload.filename}')
    return attachment


def delete_attachment(attachment_id, user_id=None):
    with unit_of_work('delete attachment'):
        attachment = get_attachment(attachment_id)
        path = attachment.file_path
        old_value = attachment.to_dict()
        db.session.delete(attachment)

    try:
        os.remove(path)
    except FileNotFoundError:
        logger.warning('Attachment %s had no file on disk at %s', attachment_id, path)

    audit.record('attachment', attachment_id, 'deleted', old_value=old_value, user_id=user_id,
                 description='Deleted attachment')
