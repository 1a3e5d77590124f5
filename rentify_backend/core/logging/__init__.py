"""Logging infrastructure for the Rentify backend."""

from .context import TransactionIdFilter, get_transaction_id, set_transaction_id
from .formatter import StructuredFormatter
from .middleware import RequestContextMiddleware
from .configure import (
    get_logger,
    setup_logging,
    setup_logging_from_settings,
    shutdown_logging,
)

__all__ = [
    "StructuredFormatter",
    "RequestContextMiddleware",
    "TransactionIdFilter",
    "get_transaction_id",
    "set_transaction_id",
    "get_logger",
    "setup_logging",
    "setup_logging_from_settings",
    "shutdown_logging",
]
