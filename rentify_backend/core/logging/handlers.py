"""
Queue-backed file logging.
Records are handed to a QueueHandler and written by a listener thread to a
rotating file, so request handlers never block on disk I/O.
"""

import logging
import os
import queue
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler


class QueuedFileLogging:
    """Owns the log queue, its listener thread and the rotating file."""

    def __init__(
        self,
        log_file_path: str,
        formatter: logging.Formatter,
        level: int = logging.INFO,
        max_bytes: int = 20 * 1024 * 1024,
        backup_count: int = 5,
        extra_handlers: list[logging.Handler] | None = None,
    ):
        directory = os.path.dirname(log_file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file_path, maxBytes=max_bytes, backupCount=backup_count
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)

        self._queue: queue.Queue = queue.Queue(-1)
        self.queue_handler = QueueHandler(self._queue)
        self.queue_handler.setLevel(level)
        self._listener = QueueListener(
            self._queue,
            file_handler,
            *(extra_handlers or []),
            respect_handler_level=True,
        )

    def start(self) -> QueueHandler:
        self._listener.start()
        return self.queue_handler

    def stop(self) -> None:
        if self._listener is not None:
            self._listener.stop()
            self._listener = None
