"""Forms for Petty Cash Manager.

The API accepts JSON bodies as well as form posts; JSON is flattened into the
``items-0-amount`` style keys WTForms uses for nested fields, so the same form
classes validate both.
"""
from decimal import Decimal

from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import (
    Form, StringField, PasswordField, TextAreaField, DecimalField,
    IntegerField, DateTimeField, FieldList, FormField
)
from wtforms.validators import AnyOf, DataRequired, InputRequired, Length, NumberRange, Optional, ValidationError

from pettycash.exceptions import ValidationError as RequestValidationError
from pettycash.models.enums import BudgetPeriod, UserRole
from pettycash.utils import parse_datetime

MIN_AMOUNT = Decimal('0.01')
ASSIGNABLE_ROLES = [r.value for r in UserRole if r is not UserRole.PENDING]
BUDGET_PERIODS = [p.value for p in BudgetPeriod]


def json_formdata(payload):
    """Flatten a JSON object into a MultiDict of WTForms field names."""
    formdata = MultiDict()

    def add(key, value):
        if value is None:
            return
        if isinstance(value, dict):
            for sub_key, sub_value in value.items():
                add(f'{key}-{sub_key}', sub_value)
        elif isinstance(value, (list, tuple)):
            for index, entry in enumerate(value):
                add(f'{key}-{index}', entry)
        else:
            formdata.add(key, str(value))

    for key, value in (payload or {}).items():
        add(key, value)
    return formdata


def load_form(form_class):
    """Bind ``form_class`` to the current request and validate it.

    Raises the API ValidationError carrying the per-field messages.
    """
    payload = request.get_json(silent=True)
    formdata = json_formdata(payload) if payload is not None else request.form
    form = form_class(formdata=formdata)
    if not form.validate():
        raise RequestValidationError('Invalid data', errors=form.errors)
    return form


def provided_fields(form):
    """Data for the fields present in the request, for partial updates."""
    return {name: field.data for name, field in form._fields.items() if field.raw_data}


class IsoDateTimeField(DateTimeField):
    """ISO 8601 date or datetime, with or without a UTC offset or trailing Z."""

    def process_formdata(self, valuelist):
        if not valuelist or not valuelist[0].strip():
            self.data = None
            return
        try:
            self.data = parse_datetime(valuelist[0], self.name)
        except RequestValidationError:
            self.data = None
            raise ValueError(self.gettext('Not a valid ISO 8601 date'))


class LoginForm(FlaskForm):
    username = StringField('Username', validators=[DataRequired()])
    password = PasswordField('Password', validators=[DataRequired()])


class RegisterForm(FlaskForm):
    username = StringField('Username', validators=[DataRequired(), Length(min=3, max=120)])
    password = PasswordField('Password', validators=[DataRequired(), Length(min=6)])
    first_name = StringField('First Name', validators=[Optional(), Length(max=120)])
    last_name = StringField('Last Name', validators=[Optional(), Length(max=120)])


class RoleForm(FlaskForm):
    role = StringField('Role', validators=[DataRequired(), AnyOf(ASSIGNABLE_ROLES, message='Invalid role')])


class VoucherItemForm(Form):
    description = StringField('Description', validators=[DataRequired()])
    amount = DecimalField('Amount', validators=[InputRequired(), NumberRange(min=MIN_AMOUNT, message='Item amount must be a positive number')])
    chart_of_account_id = IntegerField('Account', validators=[Optional()])
    invoice_number = StringField('Invoice Number', validators=[Optional(), Length(max=100)])
    vat_amount = DecimalField('VAT', validators=[Optional(), NumberRange(min=0)])
    amount_withheld = DecimalField('Withheld', validators=[Optional(), NumberRange(min=0)])


class VoucherForm(FlaskForm):
    payee = StringField('Payee', validators=[DataRequired(), Length(max=255)])
    date = IsoDateTimeField('Date', validators=[DataRequired()])
    items = FieldList(FormField(VoucherItemForm), min_entries=0)
    supporting_docs_submitted = IsoDateTimeField('Supporting Docs Submitted', validators=[Optional()])

    def validate_items(self, field):
        if not field.entries:
            raise ValidationError('At least one voucher item is required')


class ChartOfAccountForm(FlaskForm):
    code = StringField('Code', validators=[DataRequired(), Length(max=20)])
    name = StringField('Name', validators=[DataRequired(), Length(max=255)])
    description = TextAreaField('Description', validators=[Optional()])


class FundForm(FlaskForm):
    imprest_amount = DecimalField('Imprest Amount', validators=[InputRequired(), NumberRange(min=MIN_AMOUNT, message='Imprest amount must be a positive number')])
    current_balance = DecimalField('Current Balance', validators=[Optional(), NumberRange(min=0)])


class FundUpdateForm(FlaskForm):
    imprest_amount = DecimalField('Imprest Amount', validators=[InputRequired(), NumberRange(min=MIN_AMOUNT, message='Imprest amount must be a positive number')])


class ReplenishmentForm(FlaskForm):
    voucher_ids = FieldList(IntegerField('Voucher', validators=[InputRequired()]), min_entries=0)
    total_amount = DecimalField('Total Amount', validators=[Optional()])
    total_vat = DecimalField('Total VAT', validators=[Optional()])
    total_withheld = DecimalField('Total Withheld', validators=[Optional()])
    total_net_amount = DecimalField('Total Net Amount', validators=[Optional()])

    def validate_voucher_ids(self, field):
        if not field.entries:
            raise ValidationError('At least one voucher must be selected for replenishment')


class BudgetForm(FlaskForm):
    chart_of_account_id = IntegerField('Account', validators=[InputRequired()])
    budget_amount = DecimalField('Budget Amount', validators=[InputRequired(), NumberRange(min=0)])
    period = StringField('Period', validators=[DataRequired(), AnyOf(BUDGET_PERIODS)])
    start_date = IsoDateTimeField('Start Date', validators=[DataRequired()])
    end_date = IsoDateTimeField('End Date', validators=[DataRequired()])
    alert_threshold = DecimalField('Alert Threshold', validators=[Optional(), NumberRange(min=0, max=100)])

    def validate_end_date(self, field):
        if self.start_date.data and field.data and field.data < self.start_date.data:
            raise ValidationError('End date must not be before start date')


class BudgetUpdateForm(FlaskForm):
    chart_of_account_id = IntegerField('Account', validators=[Optional()])
    budget_amount = DecimalField('Budget Amount', validators=[Optional(), NumberRange(min=0)])
    period = StringField('Period', validators=[Optional(), AnyOf(BUDGET_PERIODS)])
    start_date = IsoDateTimeField('Start Date', validators=[Optional()])
    end_date = IsoDateTimeField('End Date', validators=[Optional()])
    alert_threshold = DecimalField('Alert Threshold', validators=[Optional(), NumberRange(min=0, max=100)])
