"""
Central logging setup for Rentify.
"""

import logging
import sys

from .context import TransactionIdFilter
from .formatter import build_formatter
from .handlers import QueuedFileLogging

ROOT_LOGGER_NAME = "rentify_backend"

EXTERNAL_LOGGER_LEVELS = {
    "sqlalchemy": logging.WARNING,
    "botocore": logging.WARNING,
    "boto3": logging.WARNING,
    "urllib3": logging.WARNING,
    "asyncmy": logging.WARNING,
    "uvicorn": logging.INFO,
    "fastapi": logging.INFO,
}


class _LoggingState:
    def __init__(self):
        self.file_logging: QueuedFileLogging | None = None
        self.configured = False


_state = _LoggingState()


def setup_logging(
    log_level: str = "INFO",
    use_json_format: bool = True,
    log_to_file: bool = False,
    log_file_path: str = "logs/rentify.log",
    max_bytes: int = 20 * 1024 * 1024,
    backup_count: int = 5,
    service_version: str = "0.1.0",
) -> logging.Logger:
    """Attach console (and optionally queued file) handlers to the app logger.

    Calling it again after a successful setup is a no-op.
    """
    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _state.configured:
        return app_logger

    level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = build_formatter(use_json_format, service_version)
    txn_filter = TransactionIdFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    app_logger.handlers.clear()
    app_logger.setLevel(level)
    app_logger.propagate = False

    if log_to_file:
        _state.file_logging = QueuedFileLogging(
            log_file_path,
            formatter,
            level=level,
            max_bytes=max_bytes,
            backup_count=backup_count,
            extra_handlers=[console_handler],
        )
        handler: logging.Handler = _state.file_logging.start()
    else:
        handler = console_handler

    handler.addFilter(txn_filter)
    app_logger.addHandler(handler)

    for name, ext_level in EXTERNAL_LOGGER_LEVELS.items():
        logging.getLogger(name).setLevel(ext_level)

    _state.configured = True
    return app_logger


def setup_logging_from_settings(settings) -> logging.Logger:
    return setup_logging(
        log_level=settings.log_level,
        use_json_format=settings.log_format.lower() == "json",
        log_to_file=settings.log_to_file,
        log_file_path=settings.log_file_path,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
        service_version=settings.api_version,
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger under the application namespace.

    Module names already inside the package are used as-is.
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def shutdown_logging() -> None:
    if _state.file_logging:
        _state.file_logging.stop()
        _state.file_logging = None
    _state.configured = False
