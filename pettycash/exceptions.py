"""Typed exceptions for petty cash bookkeeping.

Every error carries a machine-readable ``code`` and the HTTP status the API
answers with, so routes never have to match on message text:

    PettyCashError
    +-- ValidationError           400
    +-- NotFoundError             404
    +-- InsufficientFundsError    409
    +-- AccountInUseError         409
    +-- InvalidTransitionError    409
    +-- FundAlreadyConfiguredError 409
    +-- VoucherNumberError        500
    +-- PersistenceError          500
"""


class PettyCashError(Exception):
    """Base class for all petty cash errors."""

    code = 'petty_cash_error'
    status_code = 400

    def __init__(self, message, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        payload = {'message': self.message, 'code': self.code}
        if self.details:
            payload['details'] = self.details
        return payload


class ValidationError(PettyCashError):
    code = 'validation_error'
    status_code = 400


class NotFoundError(PettyCashError):
    code = 'not_found'
    status_code = 404

    def __init__(self, entity, entity_id):
        super().__init__(f'{entity} {entity_id} not found', entity=entity, entity_id=entity_id)
        self.entity = entity
        self.entity_id = entity_id


class InsufficientFundsError(PettyCashError):
    code = 'insufficient_funds'
    status_code = 409

    def __init__(self, available, required):
        super().__init__(
            f'Insufficient fund balance. Available: {available}, Required: {required}',
            available=str(available), required=str(required),
        )
        self.available = available
        self.required = required


class AccountInUseError(PettyCashError):
    """A chart of account is still referenced by voucher items or budgets."""

    code = 'account_in_use'
    status_code = 409


class InvalidTransitionError(PettyCashError):
    code = 'invalid_transition'
    status_code = 409

    def __init__(self, voucher_id, current, target):
        super().__init__(
            f'Voucher {voucher_id} cannot move from {current} to {target}',
            voucher_id=voucher_id, current=current, target=target,
        )
        self.current = current
        self.target = target


class FundAlreadyConfiguredError(PettyCashError):
    code = 'fund_already_configured'
    status_code = 409


class VoucherNumberError(PettyCashError):
    code = 'voucher_number_exhausted'
    status_code = 500


class PersistenceError(PettyCashError):
    code = 'persistence_error'
    status_code = 500
