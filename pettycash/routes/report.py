"""Report routes: disbursement summary and its exports"""
from io import BytesIO
from flask import Blueprint, Response, jsonify, request, send_file
from flask_login import login_required
from pettycash.services import reports
from pettycash.utils import parse_datetime

report_bp = Blueprint('report', __name__, url_prefix='/api/reports')


def _period():
    """Start/end from the query string; end dates cover their whole day"""
    start = request.args.get('start_date')
    end = request.args.get('end_date')
    return (parse_datetime(start, 'start_date') if start else None,
            parse_datetime(end, 'end_date', end_of_day=True) if end else None)


@report_bp.route('/disbursement-summary')
@login_required
def disbursement_summary():
    return jsonify(reports.disbursement_summary(*_period()))


@report_bp.route('/disbursement-summary.csv')
@login_required
def disbursement_summary_csv():
    report = reports.disbursement_summary(*_period())
    return Response(
        reports.summary_to_csv(report),
        mimetype='text/csv',
        headers={'Content-Disposition': 'attachment; filename=disbursement_summary.csv'}
    )


@report_bp.route('/disbursement-summary.xlsx')
@login_required
def disbursement_summary_xlsx():
    report = reports.disbursement_summary(*_period())
    stream = BytesIO(reports.summary_to_xlsx(report))
    stream.seek(0)
    return send_file(
        stream,
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        as_attachment=True,
        download_name='disbursement_summary.xlsx'
    )
