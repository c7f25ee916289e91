"""Enum definitions for Petty Cash Manager"""
from enum import Enum


class UserRole(Enum):
    PREPARER = "preparer"
    APPROVER = "approver"
    ADMIN = "admin"
    PENDING = "pending_role"


class VoucherStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    REPLENISHED = "replenished"


# Legal voucher moves; rejected and replenished are terminal
VOUCHER_TRANSITIONS = {
    VoucherStatus.PENDING: {VoucherStatus.APPROVED, VoucherStatus.REJECTED},
    VoucherStatus.APPROVED: {VoucherStatus.REPLENISHED},
    VoucherStatus.REJECTED: set(),
    VoucherStatus.REPLENISHED: set(),
}


class ReplenishmentStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"


class BudgetPeriod(Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
