"""Per-request transaction id carried through a context variable."""

import logging
import uuid
from contextvars import ContextVar

_transaction_id: ContextVar[str | None] = ContextVar("transaction_id", default=None)


def new_transaction_id() -> str:
    return uuid.uuid4().hex[:12]


def get_transaction_id() -> str:
    """Return the current transaction id, creating one outside a request."""
    txn_id = _transaction_id.get()
    if txn_id is None:
        txn_id = new_transaction_id()
        _transaction_id.set(txn_id)
    return txn_id


def set_transaction_id(txn_id: str) -> None:
    _transaction_id.set(txn_id)


class TransactionIdFilter(logging.Filter):
    """Stamp every record with the current transaction id."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "transaction_id", None):
            record.transaction_id = get_transaction_id()
        return True
