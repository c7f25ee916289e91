"""Disbursement summary, its CSV / Excel exports and the replenishment PDF"""
import csv
import io
from datetime import datetime
from decimal import Decimal

from fpdf import FPDF
from fpdf.enums import XPos, YPos
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from pettycash.models.enums import VoucherStatus
from pettycash.models.voucher import Voucher
from pettycash.utils import CENTS, format_money, iso, utcnow

UNCATEGORIZED = 'Uncategorized'


def _bucket(**keys):
    bucket = dict(keys)
    bucket.update(amount=Decimal('0'), vat=Decimal('0'), withheld=Decimal('0'),
                  net_amount=Decimal('0'), count=0)
    return bucket


def _add(bucket, amount, vat, withheld):
    bucket['amount'] += amount
    bucket['vat'] += vat
    bucket['withheld'] += withheld
    bucket['net_amount'] += amount - withheld
    bucket['count'] += 1


def _money(bucket):
    return {key: (str(value.quantize(CENTS)) if isinstance(value, Decimal) else value)
            for key, value in bucket.items()}


def disbursement_summary(start_date=None, end_date=None):
    """Totals for non-rejected vouchers dated within [start_date, end_date]."""
    now = utcnow()
    start = start_date or datetime(now.year, 1, 1)
    end = end_date or now

    vouchers = (Voucher.query
                .filter(Voucher.date >= start, Voucher.date <= end,
                        Voucher.status != VoucherStatus.REJECTED)
                .order_by(Voucher.date, Voucher.id)
                .all())

    totals = _bucket()
    by_account = {}
    by_month = {}
    for voucher in vouchers:
        amount = vat = withheld = Decimal('0')
        for item in voucher.items:
            item_amount = Decimal(item.amount)
            item_vat = Decimal(item.vat_amount or 0)
            item_withheld = Decimal(item.amount_withheld or 0)
            amount += item_amount
            vat += item_vat
            withheld += item_withheld

            account = item.chart_of_account
            code = account.code if account else UNCATEGORIZED
            if code not in by_account:
                by_account[code] = _bucket(code=code, name=account.name if account else UNCATEGORIZED)
            _add(by_account[code], item_amount, item_vat, item_withheld)

        _add(totals, amount, vat, withheld)
        month = voucher.date.strftime('%Y-%m')
        if month not in by_month:
            by_month[month] = _bucket(month=month)
        _add(by_month[month], amount, vat, withheld)

    summary = _money(totals)
    summary['voucher_count'] = summary.pop('count')
    return {
        'period': {'start_date': iso(start), 'end_date': iso(end)},
        'summary': summary,
        'by_account': [_money(b) for b in sorted(by_account.values(), key=lambda b: b['code'])],
        'by_month': [_money(b) for b in sorted(by_month.values(), key=lambda b: b['month'])],
    }


BREAKDOWN_COLUMNS = ['amount', 'vat', 'withheld', 'net_amount', 'count']


def summary_to_csv(report):
    """Render the summary as CSV text: one section per breakdown."""
    out = io.StringIO()
    writer = csv.writer(out)
    writer.writerow(['period_start', 'period_end'])
    writer.writerow([report['period']['start_date'], report['period']['end_date']])
    writer.writerow([])

    writer.writerow(['code', 'name'] + BREAKDOWN_COLUMNS)
    for row in report['by_account']:
        writer.writerow([row['code'], row['name']] + [row[c] for c in BREAKDOWN_COLUMNS])
    writer.writerow([])

    writer.writerow(['month'] + BREAKDOWN_COLUMNS)
    for row in report['by_month']:
        writer.writerow([row['month']] + [row[c] for c in BREAKDOWN_COLUMNS])
    writer.writerow([])

    s = report['summary']
    writer.writerow(['total_amount', 'total_vat', 'total_withheld', 'total_net_amount', 'voucher_count'])
    writer.writerow([s['amount'], s['vat'], s['withheld'], s['net_amount'], s['voucher_count']])
    return out.getvalue()


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=10, max_width=45):
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        longest = max((len(str(c.value)) for c in ws[letter] if c.value is not None), default=0)
        ws.column_dimensions[letter].width = max(min_width, min(max_width, longest + 2))


def summary_to_xlsx(report):
    """Workbook bytes with Summary, By Account and By Month sheets."""
    wb = Workbook()
    ws = wb.active
    ws.title = 'Summary'
    s = report['summary']
    ws.append(['Period start', 'Period end', 'Total amount', 'Total VAT', 'Total withheld',
               'Total net amount', 'Vouchers'])
    _style_header(ws)
    ws.append([report['period']['start_date'], report['period']['end_date'],
               Decimal(s['amount']), Decimal(s['vat']), Decimal(s['withheld']),
               Decimal(s['net_amount']), s['voucher_count']])
    _autosize_columns(ws)

    ws = wb.create_sheet('By Account')
    ws.append(['Code', 'Name', 'Amount', 'VAT', 'Withheld', 'Net amount', 'Items'])
    _style_header(ws)
    for row in report['by_account']:
        ws.append([row['code'], row['name'], Decimal(row['amount']), Decimal(row['vat']),
                   Decimal(row['withheld']), Decimal(row['net_amount']), row['count']])
    ws.freeze_panes = 'A2'
    _autosize_columns(ws)

    ws = wb.create_sheet('By Month')
    ws.append(['Month', 'Amount', 'VAT', 'Withheld', 'Net amount', 'Vouchers'])
    _style_header(ws)
    for row in report['by_month']:
        ws.append([row['month'], Decimal(row['amount']), Decimal(row['vat']),
                   Decimal(row['withheld']), Decimal(row['net_amount']), row['count']])
    ws.freeze_panes = 'A2'
    _autosize_columns(ws)

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def _latin1(text):
    # core PDF fonts only cover latin-1
    return str(text).encode('latin-1', 'replace').decode('latin-1')


def replenishment_pdf(request, vouchers):
    """Printable replenishment request: header totals plus one line per voucher."""
    pdf = FPDF()
    pdf.add_page()
    pdf.set_font('Helvetica', 'B', 14)
    pdf.cell(0, 10, text=f'Petty Cash Replenishment Request #{request.id}',
             new_x=XPos.LMARGIN, new_y=YPos.NEXT, align='C')
    pdf.set_font('Helvetica', size=10)
    pdf.cell(0, 7, text=f'Request date: {request.request_date:%Y-%m-%d %H:%M}',
             new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.cell(0, 7, text=f'Status: {request.status.value}', new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(4)

    widths = (35, 25, 70, 30, 30)
    pdf.set_font('Helvetica', 'B', 10)
    for width, title in zip(widths, ('Voucher', 'Date', 'Payee', 'Amount', 'Withheld')):
        pdf.cell(width, 8, text=title, border=1)
    pdf.ln()
    pdf.set_font('Helvetica', size=10)
    for voucher in vouchers:
        row = (voucher.voucher_number, f'{voucher.date:%Y-%m-%d}', _latin1(voucher.payee)[:40],
               format_money(voucher.total_amount),
               format_money(voucher.total_withheld))
        for width, value in zip(widths, row):
            pdf.cell(width, 7, text=value, border=1, align='R' if width == 30 else 'L')
        pdf.ln()

    pdf.ln(4)
    pdf.set_font('Helvetica', 'B', 10)
    for label, value in (('Total amount', request.total_amount), ('Total VAT', request.total_vat),
                         ('Total withheld', request.total_withheld),
                         ('Total net amount', request.total_net_amount)):
        pdf.cell(60, 7, text=label)
        pdf.cell(40, 7, text=format_money(value), align='R',
                 new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    return bytes(pdf.output())
