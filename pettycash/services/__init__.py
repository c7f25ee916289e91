"""Bookkeeping operations for Petty Cash Manager.

Routes stay thin: every rule about fund balances, voucher state and
replenishment lives here, and every compound write goes through
:func:`unit_of_work` so it commits or rolls back as a whole.
"""
import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from pettycash import db
from pettycash.exceptions import PettyCashError, PersistenceError

logger = logging.getLogger(__name__)


@contextmanager
def unit_of_work(operation):
    """Commit the session on success; roll back on any failure.

    Domain errors propagate unchanged. Storage failures (including a stale
    fund version) are re-raised as :class:`PersistenceError`.
    """
    try:
        yield db.session
        db.session.commit()
    except PettyCashError:
        db.session.rollback()
        raise
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception('%s failed and was rolled back', operation)
        raise PersistenceError(f'{operation} failed: storage error') from exc
