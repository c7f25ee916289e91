"""Models package for Petty Cash Manager"""
from pettycash.models.enums import UserRole, VoucherStatus, ReplenishmentStatus, BudgetPeriod
from pettycash.models.user import User
from pettycash.models.account import ChartOfAccount
from pettycash.models.fund import PettyCashFund
from pettycash.models.voucher import Voucher, VoucherItem
from pettycash.models.replenishment import ReplenishmentRequest
from pettycash.models.budget import AccountBudget
from pettycash.models.audit import AuditLog
from pettycash.models.attachment import VoucherAttachment

__all__ = [
    'UserRole',
    'VoucherStatus',
    'ReplenishmentStatus',
    'BudgetPeriod',
    'User',
    'ChartOfAccount',
    'PettyCashFund',
    'Voucher',
    'VoucherItem',
    'ReplenishmentRequest',
    'AccountBudget',
    'AuditLog',
    'VoucherAttachment'
]
